from __future__ import annotations

import logging
import os
import tempfile
import threading
from typing import Any, Dict, List, Optional

import gradio as gr

from .cancellation import CancellationToken
from .config import Settings, load_settings
from .engine import extract_fields, extract_fields_from_content, filter_content, filter_document
from .errors import CancelledError, ParseError
from .fields import (
    FieldInfo,
    apply_preset,
    build_field_infos,
    field_label,
    fields_for_display,
    hidden_field_names,
    set_hidden_fields,
)
from .io_utils import percent, resolve_path

logger = logging.getLogger(__name__)

# In-flight cancellation tokens keyed by gradio session.
_active_tokens: Dict[str, CancellationToken] = {}
_tokens_lock = threading.Lock()
_settings: Optional[Settings] = None


def configure(settings: Settings) -> None:
    global _settings
    _settings = settings


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def _session_key(request: Optional[gr.Request]) -> str:
    session = getattr(request, "session_hash", None) if request is not None else None
    return session or "default"


def _start_operation(request: Optional[gr.Request]) -> CancellationToken:
    key = _session_key(request)
    token = CancellationToken()
    with _tokens_lock:
        previous = _active_tokens.get(key)
        _active_tokens[key] = token
    if previous is not None:
        # a newer pass supersedes one still draining for this session
        previous.cancel()
    return token


def _finish_operation(request: Optional[gr.Request], token: CancellationToken) -> None:
    key = _session_key(request)
    with _tokens_lock:
        if _active_tokens.get(key) is token:
            del _active_tokens[key]


def cancel_operation_handler(request: gr.Request = None):
    with _tokens_lock:
        token = _active_tokens.get(_session_key(request))
    if token is None:
        return "Nothing to cancel."
    token.cancel()
    return "Cancelling..."


def describe_source(file_obj, text: Optional[str]) -> Optional[Dict[str, Any]]:
    """Pick the upload if there is one, else the pasted text."""
    if file_obj is not None:
        path = resolve_path(file_obj)
        return {"path": path, "content": None, "label": os.path.basename(path)}
    if text and text.strip():
        return {"path": None, "content": text, "label": "Untitled"}
    return None


def _progress_callback(source: Dict[str, Any], settings: Settings, progress, desc: str):
    path = source.get("path")
    if progress is None or not path:
        return None
    try:
        size = os.path.getsize(path)
    except OSError:
        return None
    if size <= settings.large_file_bytes:
        return None

    def report(bytes_read: int, total_bytes: int) -> None:
        progress(bytes_read / total_bytes if total_bytes else 1.0, desc=f"{desc}: {percent(bytes_read, total_bytes)}%")

    return report


def run_extraction(source: Dict[str, Any], settings: Settings, token: CancellationToken, progress=None):
    if source.get("path"):
        report = _progress_callback(source, settings, progress, "Extracting JSON fields")
        return extract_fields(source["path"], token, report, settings.chunk_size)
    return extract_fields_from_content(source["content"], token)


def run_filter(source: Dict[str, Any], hidden: frozenset, settings: Settings, token: CancellationToken, progress=None) -> str:
    if source.get("path"):
        report = _progress_callback(source, settings, progress, "Filtering")
        return filter_document(source["path"], hidden, token, report, settings.chunk_size)
    return filter_content(source["content"], hidden, token)


def checkbox_update(fields: List[FieldInfo], settings: Settings):
    shown = fields_for_display(fields, settings.simple_field_threshold)
    choices = [(field_label(f), f.name) for f in shown]
    value = [f.name for f in shown if f.hidden]
    return gr.update(choices=choices, value=value)


def _error_message(exc: Exception) -> str:
    if isinstance(exc, CancelledError):
        return "Operation cancelled."
    if isinstance(exc, ParseError):
        return ParseError.user_message
    return f"Error reading file: {exc}"


def _filter_or_error(source, fields, settings: Settings, request, progress):
    """Run a fresh filtering pass; returns (text, None) or (None, message)."""
    token = _start_operation(request)
    try:
        return run_filter(source, hidden_field_names(fields), settings, token, progress), None
    except (ParseError, CancelledError, OSError) as exc:
        if isinstance(exc, OSError):
            logger.error("Could not read %s: %s", source.get("label"), exc)
        return None, _error_message(exc)
    finally:
        _finish_operation(request, token)


def _hidden_status(source, fields) -> str:
    return f"{source['label']}: {len(hidden_field_names(fields))} field(s) hidden."


def extract_fields_handler(
    file_obj,
    text,
    previous_source,
    previous_fields,
    request: gr.Request = None,
    progress=gr.Progress(),
    settings: Optional[Settings] = None,
):
    """Extract field names and render the first filtered view.

    Outputs: source_state, fields_state, checkbox group, status, filtered view.
    On failure the previous state is kept and only the status changes.
    """
    settings = settings or get_settings()
    try:
        source = describe_source(file_obj, text)
    except ValueError as exc:
        return previous_source, previous_fields, gr.update(), str(exc), gr.update()
    if source is None:
        return None, [], gr.update(choices=[], value=[]), "Upload a JSON file or paste JSON text.", ""

    token = _start_operation(request)
    try:
        field_meta = run_extraction(source, settings, token, progress)
    except (ParseError, CancelledError, OSError) as exc:
        if isinstance(exc, OSError):
            logger.error("Could not read %s: %s", source["label"], exc)
        return previous_source, previous_fields, gr.update(), _error_message(exc), gr.update()
    finally:
        _finish_operation(request, token)

    # re-extracting the same source keeps its checkboxes
    same_source = bool(previous_source) and previous_source.get("path") == source["path"]
    fields = build_field_infos(field_meta, previous_fields if same_source else None)
    logger.info("Extracted %d fields from %s", len(fields), source["label"])

    filtered, error = _filter_or_error(source, fields, settings, request, progress)
    if error:
        return source, fields, checkbox_update(fields, settings), error, gr.update()
    status = f"{source['label']}: found {len(fields)} unique fields."
    return source, fields, checkbox_update(fields, settings), status, filtered


def toggle_fields_handler(
    hidden_names,
    source,
    fields,
    request: gr.Request = None,
    progress=gr.Progress(),
    settings: Optional[Settings] = None,
):
    """Checkbox edits: update hidden flags and re-filter.

    Hidden fields are always listed, so the checked names are the full hidden set.
    """
    settings = settings or get_settings()
    fields = fields or []
    if not source:
        return fields, gr.update(), "Extract fields first."

    fields = set_hidden_fields(fields, hidden_names or [])

    filtered, error = _filter_or_error(source, fields, settings, request, progress)
    if error:
        return fields, gr.update(), error
    return fields, filtered, _hidden_status(source, fields)


def apply_preset_handler(
    preset_name,
    source,
    fields,
    request: gr.Request = None,
    progress=gr.Progress(),
    settings: Optional[Settings] = None,
):
    settings = settings or get_settings()
    fields = fields or []
    preset = settings.find_preset(preset_name) if preset_name else None
    if preset is None or not source or not fields:
        return fields, gr.update(), gr.update(), "Select a preset after extracting fields."

    fields = apply_preset(fields, preset)
    filtered, error = _filter_or_error(source, fields, settings, request, progress)
    if error:
        return fields, checkbox_update(fields, settings), gr.update(), error
    return fields, checkbox_update(fields, settings), filtered, _hidden_status(source, fields)


def export_filtered_handler(filtered_text, source):
    if not source or not filtered_text:
        return None, "Nothing to export."

    base = os.path.splitext(source.get("label") or "output")[0]
    path = os.path.join(tempfile.gettempdir(), f"{base}.filtered.json")
    try:
        with open(path, 'w', encoding='utf-8') as f:
            f.write(filtered_text)
    except OSError as e:
        return None, f"Error during export: {str(e)}"
    return path, f"Export successful! Saved to {path}"
