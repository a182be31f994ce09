from __future__ import annotations

from enum import Enum
from typing import Any, NamedTuple


class TokenKind(Enum):
    START_OBJECT = "start_object"
    END_OBJECT = "end_object"
    START_ARRAY = "start_array"
    END_ARRAY = "end_array"
    KEY = "key"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"


CONTAINER_STARTS = frozenset({TokenKind.START_OBJECT, TokenKind.START_ARRAY})
CONTAINER_ENDS = frozenset({TokenKind.END_OBJECT, TokenKind.END_ARRAY})
SCALARS = frozenset({TokenKind.STRING, TokenKind.NUMBER, TokenKind.BOOLEAN, TokenKind.NULL})


class Token(NamedTuple):
    """One lexical event of a JSON document.

    `value` is the key name for KEY, the decoded text for STRING, the literal
    text for NUMBER, a bool for BOOLEAN and None otherwise.
    """

    kind: TokenKind
    value: Any = None

    @property
    def is_scalar(self) -> bool:
        return self.kind in SCALARS


START_OBJECT = Token(TokenKind.START_OBJECT)
END_OBJECT = Token(TokenKind.END_OBJECT)
START_ARRAY = Token(TokenKind.START_ARRAY)
END_ARRAY = Token(TokenKind.END_ARRAY)
NULL = Token(TokenKind.NULL)


def key(name: str) -> Token:
    return Token(TokenKind.KEY, name)


def string(text: str) -> Token:
    return Token(TokenKind.STRING, text)


def number(literal: str) -> Token:
    return Token(TokenKind.NUMBER, literal)


def boolean(value: bool) -> Token:
    return Token(TokenKind.BOOLEAN, bool(value))
