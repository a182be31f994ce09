"""Public entry points.

Each operation has a file variant and an in-memory variant. Both feed the
same single-pass pipeline (tokenizer -> collector or serializer), so equal
bytes give equal results; they only differ in how the source is acquired.
"""
from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import AbstractSet, Dict, Iterator, Optional, Union

from .cancellation import CancellationToken
from .collector import FieldMeta, collect_fields
from .errors import CancelledError, ParseError
from .io_utils import ProgressCallback, open_source
from .serializer import serialize_filtered
from .tokenizer import DEFAULT_BUF_SIZE, iter_tokens, tokenize_text

logger = logging.getLogger(__name__)


@contextmanager
def _logged(operation: str, source) -> Iterator[None]:
    label = getattr(source, "name", source)
    started = time.perf_counter()
    logger.debug("%s started for %s", operation, label)
    try:
        yield
    except CancelledError:
        logger.info("%s cancelled for %s after %.3fs", operation, label, time.perf_counter() - started)
        raise
    except ParseError as exc:
        logger.warning("%s failed for %s: %s", operation, label, exc)
        raise
    logger.debug("%s finished for %s in %.3fs", operation, label, time.perf_counter() - started)


def extract_fields(
    file_obj,
    cancel_token: Optional[CancellationToken] = None,
    progress: Optional[ProgressCallback] = None,
    chunk_size: int = DEFAULT_BUF_SIZE,
) -> Dict[str, FieldMeta]:
    """Stream a JSON file and return every field name with its FieldMeta."""
    with _logged("Field extraction", file_obj):
        with open_source(file_obj, progress) as stream:
            return collect_fields(iter_tokens(stream, cancel_token, chunk_size), cancel_token)


def extract_fields_from_content(
    content: Union[str, bytes],
    cancel_token: Optional[CancellationToken] = None,
) -> Dict[str, FieldMeta]:
    with _logged("Field extraction", "<content>"):
        return collect_fields(tokenize_text(content, cancel_token), cancel_token)


def filter_document(
    file_obj,
    hidden_fields: AbstractSet[str],
    cancel_token: Optional[CancellationToken] = None,
    progress: Optional[ProgressCallback] = None,
    chunk_size: int = DEFAULT_BUF_SIZE,
) -> str:
    """Stream a JSON file and return it pretty-printed without `hidden_fields`."""
    with _logged("Filtering", file_obj):
        with open_source(file_obj, progress) as stream:
            tokens = iter_tokens(stream, cancel_token, chunk_size)
            return serialize_filtered(tokens, frozenset(hidden_fields), cancel_token)


def filter_content(
    content: Union[str, bytes],
    hidden_fields: AbstractSet[str],
    cancel_token: Optional[CancellationToken] = None,
) -> str:
    with _logged("Filtering", "<content>"):
        tokens = tokenize_text(content, cancel_token)
        return serialize_filtered(tokens, frozenset(hidden_fields), cancel_token)
