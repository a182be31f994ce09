"""Core logic for JSON Field Filter.

The Gradio UI lives in `app.py`. This package contains the streaming engine
that:
- tokenizes JSON lazily from a file or in-memory text
- collects every field name with its scalar/compound classification
- re-serializes the document without a chosen set of field names
"""
from .cancellation import CancellationToken
from .collector import FieldMeta
from .engine import extract_fields, extract_fields_from_content, filter_content, filter_document
from .errors import CancelledError, FieldFilterError, ParseError

__all__ = [
    "CancellationToken",
    "CancelledError",
    "FieldFilterError",
    "FieldMeta",
    "ParseError",
    "extract_fields",
    "extract_fields_from_content",
    "filter_content",
    "filter_document",
]
