"""HTML rendering of the three views. Pure functions of the client state."""
import re
from html import escape
from typing import Optional, Sequence
from urllib.parse import quote

from models.document import Bookmark, BookmarkCategory, Document, DocumentStatus
from models.view import View

APP_TITLE = "BookSmart AI"

CATEGORY_CLASSES = {
    BookmarkCategory.MEDICAL_RADIOLOGY: "bg-blue-100 text-blue-700",
    BookmarkCategory.PHOTOS: "bg-purple-100 text-purple-700",
    BookmarkCategory.ESTIMATE: "bg-green-100 text-green-700",
    BookmarkCategory.OTHER: "bg-gray-100 text-gray-700",
}

STYLE = """
body { font-family: system-ui, sans-serif; margin: 0; background: #f5f7fa; color: #1f2933; }
.header { background: #1f2933; color: #fff; padding: 1rem 2rem; }
.nav { display: flex; gap: 1rem; padding: 0 2rem; background: #fff; border-bottom: 1px solid #e4e7eb; }
.nav form { margin: 0; }
.nav-item { background: none; border: none; padding: 1rem 0; cursor: pointer; font-size: 1rem; }
.nav-item.active { border-bottom: 2px solid #3b82f6; font-weight: 600; }
.container { padding: 2rem; }
table { width: 100%; border-collapse: collapse; background: #fff; }
th, td { text-align: left; padding: 0.75rem; border-bottom: 1px solid #e4e7eb; }
.empty-state { text-align: center; color: #9aa5b1; padding: 2rem; }
.status.processing { color: #b45309; } .status.completed { color: #047857; } .status.failed { color: #b91c1c; }
.upload-box { display: block; border: 2px dashed #cbd2d9; padding: 3rem; text-align: center; cursor: pointer; background: #fff; }
.upload-subtext, .muted { color: #9aa5b1; }
.upload-busy { display: none; }
.upload-form.busy .upload-picker { display: none; } .upload-form.busy .upload-busy { display: block; }
.alert { border: 1px solid #b91c1c; background: #fee2e2; padding: 1rem; margin-bottom: 1rem; }
.category-badge { padding: 0.2rem 0.6rem; border-radius: 999px; font-size: 0.85rem; }
.bg-blue-100 { background: #dbeafe; } .text-blue-700 { color: #1d4ed8; }
.bg-purple-100 { background: #f3e8ff; } .text-purple-700 { color: #7e22ce; }
.bg-green-100 { background: #dcfce7; } .text-green-700 { color: #15803d; }
.bg-gray-100 { background: #f3f4f6; } .text-gray-700 { color: #374151; }
"""


def category_label(category: str) -> str:
    """Display label for a raw category, e.g. "medical_radiology" -> "Medical Radiology"."""
    resolved = BookmarkCategory.resolve(category)
    return re.sub(r"\b\w", lambda m: m.group().upper(), resolved.value.replace("_", " ", 1))


def category_classes(category: str) -> str:
    return CATEGORY_CLASSES[BookmarkCategory.resolve(category)]


def status_label(status: DocumentStatus) -> str:
    value = status.value
    return value[:1].upper() + value[1:]


def render_page(
    view: View,
    documents: Sequence[Document],
    current_document: Optional[Document] = None,
    uploading: bool = False,
    alert: Optional[str] = None
) -> str:
    """Render the full page for the active view."""
    if view == View.UPLOAD:
        body = render_upload_view(uploading)
    elif view == View.DETAIL:
        body = render_detail_view(current_document)
    else:
        body = render_documents_view(documents)

    return f"""<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{APP_TITLE}</title>
<style>{STYLE}</style>
</head>
<body>
<header class="header"><h1>{APP_TITLE}</h1></header>
{render_nav(view)}
<div class="container">
{render_alert(alert)}{body}
</div>
</body>
</html>
"""


def render_nav(view: View) -> str:
    items = []
    for target, label in ((View.DOCUMENTS, "Documents"), (View.UPLOAD, "Upload")):
        active = " active" if view == target else ""
        items.append(
            f'<form method="post" action="/nav/{target.value}">'
            f'<button type="submit" class="nav-item{active}">{label}</button></form>'
        )
    return f'<nav class="nav">{"".join(items)}</nav>'


def render_alert(alert: Optional[str]) -> str:
    if not alert:
        return ""
    return (
        f'<div class="alert" role="alertdialog" aria-modal="true">{escape(alert)}'
        '<form method="get" action="/"><button type="submit">OK</button></form></div>\n'
    )


def render_documents_view(documents: Sequence[Document]) -> str:
    if not documents:
        rows = (
            '<tr><td colspan="5"><div class="empty-state">'
            "<div>No documents uploaded yet</div></div></td></tr>"
        )
    else:
        rows = "\n".join(_document_row(doc) for doc in documents)

    return f"""<div class="view" id="documents-view">
<h2>Documents</h2>
<form method="post" action="/reload"><button type="submit" class="btn btn-secondary">Reload</button></form>
<div class="table-container">
<table>
<thead><tr><th>Filename</th><th>Date Uploaded</th><th>Status</th><th>Bookmarks</th><th>Actions</th></tr></thead>
<tbody>
{rows}
</tbody>
</table>
</div>
</div>"""


def _document_row(doc: Document) -> str:
    doc_id = _path_segment(doc.id)
    if doc.status == DocumentStatus.COMPLETED:
        count = str(len(doc.bookmarks))
        action = (
            f'<form method="post" action="/documents/{doc_id}/details">'
            '<button type="submit" class="btn btn-secondary">View Details</button></form>'
        )
    elif doc.status == DocumentStatus.FAILED:
        count = "—"
        title = f' title="{escape(doc.error, quote=True)}"' if doc.error else ""
        action = (
            f'<form method="post" action="/documents/{doc_id}/retry">'
            f'<button type="submit" class="btn btn-secondary"{title}>Retry</button></form>'
        )
    else:
        count = "—"
        action = '<span class="muted">Processing...</span>'

    return (
        f"<tr><td>{escape(doc.filename)}</td><td>{escape(doc.date)}</td>"
        f'<td><span class="status {doc.status.value}">{status_label(doc.status)}</span></td>'
        f"<td>{count}</td><td>{action}</td></tr>"
    )


def render_upload_view(uploading: bool) -> str:
    """
    Upload view. The picker submits as soon as a file is chosen and swaps itself
    for the busy indicator in the same tab while the request is held; a page
    rendered during an upload from elsewhere shows only the indicator.
    """
    if uploading:
        inner = '<div class="upload-box busy" aria-busy="true">Uploading...</div>'
    else:
        inner = """<form method="post" action="/upload" enctype="multipart/form-data" class="upload-form">
<label class="upload-box upload-picker">
<input type="file" name="file" accept=".pdf" onchange="this.form.classList.add('busy'); this.form.submit()" style="display: none">
<div class="upload-text">Drop PDF file here or click to browse</div>
<div class="upload-subtext">Supported format: PDF (max 50MB)</div>
</label>
<div class="upload-box upload-busy" aria-busy="true">Uploading...</div>
</form>"""
    return f"""<div class="view" id="upload-view">
<h2>Upload Document</h2>
{inner}
</div>"""


def render_detail_view(document: Optional[Document]) -> str:
    """Detail view of a completed document; empty when there is nothing to show."""
    if document is None:
        return ""

    doc_id = _path_segment(document.id)
    rows = "\n".join(_bookmark_row(b) for b in document.bookmarks)
    return f"""<div class="view" id="detail-view">
<form method="post" action="/back"><button type="submit" class="back-link">Back to Documents</button></form>
<div class="detail-header">
<h2>{escape(document.filename)}</h2>
<div class="detail-info">
<div class="detail-info-item"><label>Status</label>
<div><span class="status {document.status.value}">{status_label(document.status)}</span></div></div>
<div class="detail-info-item"><label>Date Uploaded</label><div>{escape(document.date)}</div></div>
<div class="detail-info-item"><label>Bookmarks Detected</label><div>{len(document.bookmarks)}</div></div>
</div>
<form method="post" action="/documents/{doc_id}/download" target="_blank">
<button type="submit" class="btn btn-primary">Download Processed PDF</button></form>
</div>
<div class="table-container">
<table>
<thead><tr><th>Page</th><th>Label</th><th>Category</th></tr></thead>
<tbody>
{rows}
</tbody>
</table>
</div>
</div>"""


def _bookmark_row(bookmark: Bookmark) -> str:
    category = bookmark.display_category
    return (
        f'<tr class="bookmark"><td>{bookmark.page}</td><td>{escape(bookmark.label)}</td>'
        f'<td><span class="category-badge {category_classes(category)}">'
        f"{category_label(category)}</span></td></tr>"
    )


def _path_segment(document_id: str) -> str:
    """Ids are opaque; encode "/", "?" and "#" so the id stays one URL path segment."""
    return escape(quote(document_id, safe=""), quote=True)
