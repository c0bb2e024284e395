"""Unit tests for the HTML render layer."""
import sys
sys.path.insert(0, 'backend')

import re
import pytest
from services.renderer import (
    category_label,
    category_classes,
    status_label,
    render_page,
    render_documents_view,
    render_detail_view,
    render_upload_view,
)
from models.document import Document, Bookmark, BookmarkCategory, DocumentStatus
from models.view import View


def completed_doc(bookmarks):
    return Document(
        id="7",
        filename="claim.pdf",
        date="2024-05-01",
        status=DocumentStatus.COMPLETED,
        bookmarks=bookmarks
    )


class TestCategoryDisplay:
    """Test suite for category labels and colours."""

    @pytest.mark.parametrize("category,label", [
        ("medical_radiology", "Medical Radiology"),
        ("photos", "Photos"),
        ("estimate", "Estimate"),
        ("other", "Other"),
    ])
    def test_known_category_labels(self, category, label):
        assert category_label(category) == label

    def test_unknown_category_uses_other_mapping(self):
        assert category_label("billing_statement") == "Other"
        assert category_classes("billing_statement") == "bg-gray-100 text-gray-700"

    def test_category_classes(self):
        assert category_classes("medical_radiology") == "bg-blue-100 text-blue-700"
        assert category_classes("photos") == "bg-purple-100 text-purple-700"
        assert category_classes("estimate") == "bg-green-100 text-green-700"

    def test_status_label(self):
        assert status_label(DocumentStatus.PROCESSING) == "Processing"
        assert status_label(DocumentStatus.COMPLETED) == "Completed"
        assert status_label(DocumentStatus.FAILED) == "Failed"

    def test_bookmark_display_category(self):
        assert Bookmark(page=1, label="A", category="photos").display_category == BookmarkCategory.PHOTOS
        assert Bookmark(page=1, label="B", category="billing").display_category == BookmarkCategory.OTHER
        assert category_label(BookmarkCategory.MEDICAL_RADIOLOGY) == "Medical Radiology"


class TestDocumentsView:
    """Test suite for the document list."""

    def test_empty_state(self):
        html = render_documents_view([])
        assert "No documents uploaded yet" in html
        assert "View Details" not in html

    def test_processing_row(self):
        html = render_documents_view([Document(id="1", filename="a.pdf", date="2024-01-01")])

        assert "a.pdf" in html
        assert "Processing..." in html
        assert "<td>—</td>" in html
        assert "View Details" not in html

    def test_completed_row_offers_details(self):
        html = render_documents_view([completed_doc([Bookmark(page=1, label="Cover", category="other")])])

        assert 'action="/documents/7/details"' in html
        assert "View Details" in html
        assert "<td>1</td>" in html
        assert "Completed" in html

    def test_failed_row_offers_retry(self):
        doc = Document(id="3", filename="c.pdf", date="2024-01-03", status=DocumentStatus.FAILED, error="timeout")
        html = render_documents_view([doc])

        assert 'action="/documents/3/retry"' in html
        assert 'title="timeout"' in html
        assert "Failed" in html

    def test_opaque_ids_are_url_quoted(self):
        completed = Document(id="2024/17?v=1", filename="a.pdf", date="", status=DocumentStatus.COMPLETED)
        failed = Document(id="r#2", filename="b.pdf", date="", status=DocumentStatus.FAILED)

        html = render_documents_view([completed, failed])

        assert 'action="/documents/2024%2F17%3Fv%3D1/details"' in html
        assert 'action="/documents/r%232/retry"' in html

    def test_filename_is_escaped(self):
        html = render_documents_view([Document(id="1", filename="<script>x</script>.pdf", date="")])
        assert "<script>x</script>" not in html
        assert "&lt;script&gt;" in html


class TestDetailView:
    """Test suite for the detail view."""

    def test_single_bookmark_row(self):
        html = render_detail_view(completed_doc([
            Bookmark(page=3, label="X-Ray", category="medical_radiology")
        ]))

        rows = re.findall(r'<tr class="bookmark">(.*?)</tr>', html)
        assert len(rows) == 1
        cells = re.findall(r"<td>(.*?)</td>", rows[0])
        assert cells[0] == "3"
        assert cells[1] == "X-Ray"
        assert "Medical Radiology" in rows[0]
        assert "bg-blue-100 text-blue-700" in rows[0]

    def test_unknown_category_renders_without_error(self):
        html = render_detail_view(completed_doc([
            Bookmark(page=5, label="Misc", category="something_new")
        ]))

        assert ">Other</span>" in html
        assert "bg-gray-100 text-gray-700" in html

    def test_detail_header(self):
        html = render_detail_view(completed_doc([]))

        assert "Back to Documents" in html
        assert "claim.pdf" in html
        assert "Bookmarks Detected" in html
        assert 'action="/documents/7/download" target="_blank"' in html
        assert "Download Processed PDF" in html

    def test_download_action_quotes_id(self):
        doc = Document(id="2024/17", filename="a.pdf", date="", status=DocumentStatus.COMPLETED)
        html = render_detail_view(doc)

        assert 'action="/documents/2024%2F17/download" target="_blank"' in html

    def test_no_document_renders_nothing(self):
        assert render_detail_view(None) == ""


class TestUploadView:
    """Test suite for the upload view."""

    def test_picker_when_idle(self):
        html = render_upload_view(uploading=False)

        assert 'type="file"' in html
        assert 'accept=".pdf"' in html
        assert 'name="file"' in html
        assert "Drop PDF file here or click to browse" in html
        assert "Supported format: PDF (max 50MB)" in html

    def test_busy_indicator_while_uploading(self):
        html = render_upload_view(uploading=True)

        assert 'type="file"' not in html
        assert "Uploading..." in html

    def test_picker_swaps_to_busy_indicator_on_submit(self):
        html = render_upload_view(uploading=False)

        form = re.search(r'<form [^>]*class="upload-form"[^>]*>(.*?)</form>', html, re.S).group(1)
        assert '<div class="upload-box upload-busy" aria-busy="true">Uploading...</div>' in form
        assert "onchange=\"this.form.classList.add('busy'); this.form.submit()\"" in form
        assert '<label class="upload-box upload-picker">' in form

    def test_busy_indicator_hidden_until_form_is_busy(self):
        html = render_page(View.UPLOAD, [])

        assert ".upload-busy { display: none; }" in html
        assert ".upload-form.busy .upload-picker { display: none; }" in html
        assert ".upload-form.busy .upload-busy { display: block; }" in html


class TestRenderPage:
    """Test suite for full page rendering."""

    def test_active_nav_item(self):
        html = render_page(View.UPLOAD, [])
        assert '<button type="submit" class="nav-item active">Upload</button>' in html
        assert '<button type="submit" class="nav-item">Documents</button>' in html

    def test_detail_without_document_is_blank(self):
        html = render_page(View.DETAIL, [completed_doc([])], current_document=None)
        assert 'id="detail-view"' not in html
        assert 'id="documents-view"' not in html

    def test_alert_rendered(self):
        html = render_page(View.DOCUMENTS, [], alert="Failed to upload file. Please try again.")
        assert 'role="alertdialog"' in html
        assert "Failed to upload file. Please try again." in html

    def test_no_alert_by_default(self):
        assert "alertdialog" not in render_page(View.DOCUMENTS, [])

    def test_empty_startup_page(self):
        html = render_page(View.DOCUMENTS, [])
        assert "BookSmart AI" in html
        assert "No documents uploaded yet" in html
