from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, FrozenSet, Iterable, List, Optional

from .collector import FieldMeta
from .config import Preset


@dataclass(frozen=True)
class FieldInfo:
    name: str
    hidden: bool = False
    is_complex: bool = False
    count: int = 1


def build_field_infos(
    field_meta: Dict[str, FieldMeta],
    previous: Optional[Iterable[FieldInfo]] = None,
) -> List[FieldInfo]:
    """Turn an extraction result into panel rows, sorted case-insensitively.

    Hidden flags from `previous` (an earlier extraction of the same source)
    carry over for names that still exist.
    """
    was_hidden = {f.name: f.hidden for f in previous or []}
    names = sorted(field_meta, key=lambda n: (n.lower(), n))
    return [
        FieldInfo(
            name=name,
            hidden=was_hidden.get(name, False),
            is_complex=field_meta[name].is_complex,
            count=field_meta[name].count,
        )
        for name in names
    ]


def hidden_field_names(fields: Iterable[FieldInfo]) -> FrozenSet[str]:
    return frozenset(f.name for f in fields if f.hidden)


def set_hidden_fields(fields: Iterable[FieldInfo], hidden_names: Iterable[str]) -> List[FieldInfo]:
    hidden_names = set(hidden_names)
    return [replace(f, hidden=f.name in hidden_names) for f in fields]


def set_field_hidden(fields: Iterable[FieldInfo], name: str, hidden: bool) -> List[FieldInfo]:
    return [replace(f, hidden=hidden) if f.name == name else f for f in fields]


def apply_preset(fields: Iterable[FieldInfo], preset: Preset) -> List[FieldInfo]:
    """Hide every field named by the preset. Never un-hides anything."""
    preset_fields = set(preset.fields)
    return [replace(f, hidden=True) if f.name in preset_fields else f for f in fields]


def fields_for_display(fields: List[FieldInfo], threshold: int) -> List[FieldInfo]:
    """Drop scalar fields from the panel when there are only a few of them.

    With fewer than `threshold` scalar fields only complex fields are listed,
    plus any field that is already hidden so it can still be un-hidden.
    A threshold of 0 lists everything.
    """
    if threshold == 0:
        return list(fields)
    simple_count = sum(1 for f in fields if not f.is_complex)
    if simple_count >= threshold:
        return list(fields)
    return [f for f in fields if f.is_complex or f.hidden]


def field_label(info: FieldInfo) -> str:
    suffix = " {}" if info.is_complex else ""
    return f"{info.name}{suffix} ({info.count})"
