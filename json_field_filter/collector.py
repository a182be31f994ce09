from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from .cancellation import CancellationToken, check_cancelled
from .tokens import CONTAINER_STARTS, Token, TokenKind

logger = logging.getLogger(__name__)


@dataclass
class FieldMeta:
    is_complex: bool
    count: int


def collect_fields(
    tokens: Iterable[Token],
    cancel_token: Optional[CancellationToken] = None,
) -> Dict[str, FieldMeta]:
    """Map every field name in the token stream to its FieldMeta.

    Names are merged globally: the same key under different parents is one
    entry. A field is complex if any of its occurrences holds an object or
    array. Cancellation discards the partial mapping.
    """
    fields: Dict[str, FieldMeta] = {}
    pending_key: Optional[str] = None

    for token in tokens:
        check_cancelled(cancel_token)

        if token.kind is TokenKind.KEY:
            pending_key = token.value
            continue
        if pending_key is None:
            continue

        is_complex = token.kind in CONTAINER_STARTS
        meta = fields.get(pending_key)
        if meta is None:
            fields[pending_key] = FieldMeta(is_complex=is_complex, count=1)
        else:
            meta.is_complex = meta.is_complex or is_complex
            meta.count += 1
        pending_key = None

    logger.debug("Collected %d distinct fields", len(fields))
    return fields
