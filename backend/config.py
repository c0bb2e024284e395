"""Configuration management for BookSmart AI client."""
import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Remote BookSmart backend
API_BASE_URL = os.getenv("BOOKSMART_API_URL", "http://localhost:5001/api").rstrip("/")
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "30"))

# Server Configuration
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")  # "text" or "json"

# Processing Configuration
PROCESS_DELAY_SECONDS = float(os.getenv("PROCESS_DELAY_SECONDS", "3.0"))
# On by default: failed processing shows as "failed" with a Retry action.
# Set to false to leave such documents "processing" and only log the error.
SURFACE_PROCESSING_FAILURES = os.getenv("SURFACE_PROCESSING_FAILURES", "true").lower() in ("1", "true", "yes")

# Logging Configuration
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
