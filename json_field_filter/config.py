from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "JSON_FIELD_FILTER_CONFIG"

DEFAULT_SIMPLE_FIELD_THRESHOLD = 5
DEFAULT_LARGE_FILE_BYTES = 5 * 1024 * 1024
DEFAULT_CHUNK_SIZE = 64 * 1024


@dataclass
class Preset:
    name: str
    fields: List[str] = field(default_factory=list)


@dataclass
class Settings:
    presets: List[Preset] = field(default_factory=list)
    simple_field_threshold: int = DEFAULT_SIMPLE_FIELD_THRESHOLD
    large_file_bytes: int = DEFAULT_LARGE_FILE_BYTES
    chunk_size: int = DEFAULT_CHUNK_SIZE

    def find_preset(self, name: str) -> Optional[Preset]:
        for preset in self.presets:
            if preset.name == name:
                return preset
        return None

    @property
    def preset_names(self) -> List[str]:
        return [p.name for p in self.presets]


def _lookup(raw: Dict[str, Any], camel: str, snake: str, default):
    if camel in raw:
        return raw[camel]
    return raw.get(snake, default)


def parse_presets(raw_presets: Any) -> List[Preset]:
    presets: List[Preset] = []
    if raw_presets is None:
        return presets
    if not isinstance(raw_presets, list):
        logger.warning("Ignoring presets: expected a list, got %s", type(raw_presets).__name__)
        return presets

    for entry in raw_presets:
        if not isinstance(entry, dict):
            logger.warning("Ignoring preset entry %r", entry)
            continue
        name = entry.get("name")
        fields = entry.get("fields", [])
        if not isinstance(name, str) or not name.strip():
            logger.warning("Ignoring preset without a name: %r", entry)
            continue
        if not isinstance(fields, list) or not all(isinstance(f, str) for f in fields):
            logger.warning("Ignoring preset %r: fields must be a list of strings", name)
            continue
        presets.append(Preset(name=name.strip(), fields=list(fields)))
    return presets


def _non_negative_int(value: Any, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{label} must be an integer, got {value!r}")
    if value < 0:
        raise ValueError(f"{label} must not be negative, got {value}")
    return value


def settings_from_dict(raw: Dict[str, Any]) -> Settings:
    threshold = _lookup(raw, "simpleFieldThreshold", "simple_field_threshold", DEFAULT_SIMPLE_FIELD_THRESHOLD)
    large = _lookup(raw, "largeFileBytes", "large_file_bytes", DEFAULT_LARGE_FILE_BYTES)
    chunk = _lookup(raw, "chunkSize", "chunk_size", DEFAULT_CHUNK_SIZE)

    chunk = _non_negative_int(chunk, "chunkSize")
    if chunk == 0:
        raise ValueError("chunkSize must be positive")

    return Settings(
        presets=parse_presets(raw.get("presets")),
        simple_field_threshold=_non_negative_int(threshold, "simpleFieldThreshold"),
        large_file_bytes=_non_negative_int(large, "largeFileBytes"),
        chunk_size=chunk,
    )


def load_settings(path: Optional[str] = None) -> Settings:
    """Load settings from `path`, $JSON_FIELD_FILTER_CONFIG, or defaults."""
    path = path or os.environ.get(CONFIG_ENV_VAR)
    if not path:
        return Settings()

    with open(path, 'r', encoding='utf-8') as f:
        raw = json.load(f)
    if not isinstance(raw, dict):
        raise ValueError(f"Config file {path} must contain a JSON object")

    settings = settings_from_dict(raw)
    logger.info("Loaded %d presets from %s", len(settings.presets), path)
    return settings
