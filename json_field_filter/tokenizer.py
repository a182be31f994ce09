"""Lazy JSON tokenizer.

Lexing is done by ijson's `basic_parse` event stream, which reads the source
in bounded chunks; this module turns those events into `Token`s, converts
lexer failures into `ParseError` and stops on cancellation.
"""
from __future__ import annotations

import io
import logging
import re
from decimal import Decimal
from typing import Any, BinaryIO, Iterator, Optional, Union

import ijson

from . import tokens as tk
from .cancellation import CancellationToken, check_cancelled
from .errors import ParseError
from .tokens import Token

logger = logging.getLogger(__name__)

DEFAULT_BUF_SIZE = 64 * 1024

_POSITION_RE = re.compile(r"\bat (?:char |position |pos )?(\d+)")

_STRUCTURAL = {
    'start_map': tk.START_OBJECT,
    'end_map': tk.END_OBJECT,
    'start_array': tk.START_ARRAY,
    'end_array': tk.END_ARRAY,
    'null': tk.NULL,
}


def number_literal(value: Any) -> str:
    """Render a number delivered by the lexer as JSON literal text."""
    if isinstance(value, bool):
        raise TypeError("booleans are not numbers")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, Decimal):
        # only positive exponents need scientific notation; the rest keep
        # their source digits, trailing zeros included
        if value.as_tuple().exponent <= 0:
            return format(value, "f")
        return str(value)
    return repr(float(value))


def _to_token(event: str, value: Any) -> Token:
    structural = _STRUCTURAL.get(event)
    if structural is not None:
        return structural
    if event == 'map_key':
        return tk.key(value)
    if event == 'string':
        return tk.string(value)
    if event == 'number':
        return tk.number(number_literal(value))
    if event == 'boolean':
        return tk.boolean(value)
    raise ParseError(f"Unknown lexer event {event!r}")


def _parse_error(exc: Exception) -> ParseError:
    detail = str(exc) or exc.__class__.__name__
    match = _POSITION_RE.search(detail)
    position = int(match.group(1)) if match else getattr(exc, "pos", None)
    return ParseError(detail, position)


def iter_tokens(
    stream: BinaryIO,
    cancel_token: Optional[CancellationToken] = None,
    buf_size: int = DEFAULT_BUF_SIZE,
) -> Iterator[Token]:
    """Yield the tokens of the single JSON value read from `stream`.

    The stream should be binary; it is read incrementally as tokens are
    pulled. Raises ParseError on malformed input and CancelledError once the
    token is cancelled. The caller owns (and closes) the stream.
    """
    check_cancelled(cancel_token)
    events = ijson.basic_parse(stream, buf_size=buf_size)
    try:
        for event, value in events:
            check_cancelled(cancel_token)
            yield _to_token(event, value)
    except ParseError:
        raise
    except UnicodeDecodeError as exc:
        raise ParseError(f"Invalid UTF-8 in input: {exc.reason}", exc.start) from exc
    except (ijson.JSONError, ValueError) as exc:
        # the pure-Python backend reports some lexing errors as json.JSONDecodeError
        logger.debug("Lexer rejected input: %s", exc)
        raise _parse_error(exc) from exc


def tokenize_text(
    content: Union[str, bytes],
    cancel_token: Optional[CancellationToken] = None,
) -> Iterator[Token]:
    """Tokenize in-memory JSON text (str or UTF-8 bytes)."""
    if isinstance(content, str):
        try:
            content = content.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise ParseError(f"Text is not encodable as UTF-8: {exc.reason}", exc.start) from exc
    return iter_tokens(io.BytesIO(content), cancel_token)
