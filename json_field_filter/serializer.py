"""Pretty-printing serializer that drops hidden fields.

The serializer folds over a token stream with two modes. In NORMAL mode every
token is rendered; when a key from the hidden set arrives it switches to
SKIPPING and discards tokens until the key's value has been consumed. The end
of the hidden value is detected with a counter relative to where skipping
started, so the absolute depth of the hidden field never matters:

- a container start/end moves `skip_depth` up/down, and getting back to
  `skip_until_depth` closes a hidden object or array;
- a scalar seen at `skip_until_depth` is the hidden value itself.
"""
from __future__ import annotations

import logging
from typing import AbstractSet, Iterable, List, Optional

from .cancellation import CancellationToken, check_cancelled
from .tokens import CONTAINER_ENDS, CONTAINER_STARTS, Token, TokenKind

logger = logging.getLogger(__name__)

INDENT = '  '

_ESCAPES = {
    ord('\\'): '\\\\',
    ord('"'): '\\"',
    ord('\n'): '\\n',
    ord('\r'): '\\r',
    ord('\t'): '\\t',
}
# Remaining C0 controls are not valid raw inside a JSON string.
for _code in range(0x20):
    _ESCAPES.setdefault(_code, f'\\u{_code:04x}')
del _code

_BRACKETS = {
    TokenKind.START_OBJECT: '{',
    TokenKind.START_ARRAY: '[',
    TokenKind.END_OBJECT: '}',
    TokenKind.END_ARRAY: ']',
}


def escape_string(text: str) -> str:
    return text.translate(_ESCAPES)


def render_scalar(token: Token) -> str:
    if token.kind is TokenKind.STRING:
        return f'"{escape_string(token.value)}"'
    if token.kind is TokenKind.NUMBER:
        return token.value
    if token.kind is TokenKind.BOOLEAN:
        return 'true' if token.value else 'false'
    return 'null'


class FilteringSerializer:
    """Single-use state machine; create one per filtering pass."""

    def __init__(self, hidden_fields: AbstractSet[str]):
        self.hidden_fields = frozenset(hidden_fields)
        self.current_depth = 0
        self.skip_depth = 0
        self.skip_until_depth: Optional[int] = None
        self.pending_key: Optional[str] = None
        self.needs_comma = False
        self._chunks: List[str] = []

    @property
    def skipping(self) -> bool:
        return self.skip_until_depth is not None

    def _emit_line(self, text: str) -> None:
        if self.needs_comma:
            self._chunks.append(',')
        self._chunks.append('\n' + INDENT * self.current_depth + text)

    def _with_pending_key(self, text: str) -> str:
        if self.pending_key is None:
            return text
        line = f'"{escape_string(self.pending_key)}": {text}'
        self.pending_key = None
        return line

    def _skip(self, token: Token) -> None:
        if token.kind in CONTAINER_STARTS:
            self.skip_depth += 1
        elif token.kind in CONTAINER_ENDS:
            self.skip_depth -= 1
            if self.skip_depth == self.skip_until_depth:
                self.skip_until_depth = None
        elif token.is_scalar and self.skip_depth == self.skip_until_depth:
            self.skip_until_depth = None

    def feed(self, token: Token) -> None:
        if self.skipping:
            self._skip(token)
            return

        kind = token.kind
        if kind is TokenKind.KEY:
            if token.value in self.hidden_fields:
                self.skip_until_depth = self.skip_depth
            else:
                self.pending_key = token.value
        elif kind in CONTAINER_STARTS:
            self._emit_line(self._with_pending_key(_BRACKETS[kind]))
            self.current_depth += 1
            self.needs_comma = False
        elif kind in CONTAINER_ENDS:
            self.current_depth -= 1
            if self.needs_comma:
                self._chunks.append('\n' + INDENT * self.current_depth + _BRACKETS[kind])
            else:
                # nothing was written inside: close on the opening line
                self._chunks.append(_BRACKETS[kind])
            self.needs_comma = True
        else:
            self._emit_line(self._with_pending_key(render_scalar(token)))
            self.needs_comma = True

    def result(self) -> str:
        text = ''.join(self._chunks)
        if text.startswith('\n'):
            text = text[1:]
        return text


def serialize_filtered(
    tokens: Iterable[Token],
    hidden_fields: AbstractSet[str],
    cancel_token: Optional[CancellationToken] = None,
) -> str:
    """Render `tokens` as indented JSON without the fields in `hidden_fields`."""
    serializer = FilteringSerializer(hidden_fields)
    for token in tokens:
        check_cancelled(cancel_token)
        serializer.feed(token)
    return serializer.result()
