"""Turn evaluated configuration values into serialization-safe records."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional, Set

from .host import NIL
from .models import FUNCTION_PLACEHOLDER, ExtractedRecord

_DATA_FIELDS = ("cmd", "filetypes", "root_markers", "settings", "init_options", "capabilities")

_PRESENCE_FLAGS = (
    ("handlers", "has_custom_handlers"),
    ("on_attach", "has_on_attach"),
    ("before_init", "has_before_init"),
    ("on_init", "has_on_init"),
    ("root_dir", "has_custom_root_dir"),
)


@dataclass
class ConfigSource:
    """Canonical view of a configuration regardless of how the module shaped it."""

    fields: Mapping[str, Any]
    description: Optional[str] = None


def normalize_config(raw: Any) -> Optional[ConfigSource]:
    """Pick the field source and documentation out of a raw configuration value.

    Modules either return the fields directly or wrap them as
    ``{"default_config": {...}, "docs": {"description": ...}}``. When
    ``default_config`` is present it is authoritative for every field.
    """
    if not isinstance(raw, Mapping):
        return None

    fields: Any = raw
    nested = raw.get("default_config")
    if nested is not None and nested is not NIL:
        if not isinstance(nested, Mapping):
            return None
        fields = nested

    description = None
    docs = raw.get("docs")
    if isinstance(docs, Mapping):
        text = docs.get("description")
        if isinstance(text, str):
            description = text

    return ConfigSource(fields=fields, description=description)


def sanitize(value: Any) -> Any:
    """Rebuild ``value`` as plain JSON data, replacing callables with the placeholder.

    Raises ``ValueError`` when a container holds itself, directly or nested.
    """
    return _sanitize(value, set())


def _sanitize(value: Any, active: Set[int]) -> Any:
    if value is None or value is NIL:
        return None
    if isinstance(value, (bool, int, float, str)):
        return value
    if callable(value):
        return FUNCTION_PLACEHOLDER
    if isinstance(value, os.PathLike):
        return os.fspath(value)
    if not isinstance(value, (Mapping, list, tuple, set, frozenset)):
        return str(value)

    marker = id(value)
    if marker in active:
        raise ValueError(f"circular reference in {type(value).__name__} value")
    active.add(marker)
    try:
        if isinstance(value, Mapping):
            return {str(key): _sanitize(item, active) for key, item in value.items()}
        if isinstance(value, (list, tuple)):
            return [_sanitize(item, active) for item in value]
        return sorted((_sanitize(item, active) for item in value), key=repr)
    finally:
        active.discard(marker)


def _present(fields: Mapping[str, Any], key: str) -> bool:
    value = fields.get(key)
    return value is not None and value is not NIL


def extract_config(name: str, raw: Any) -> Optional[ExtractedRecord]:
    """Return the record for configuration ``name`` or None if nothing usable was produced."""
    source = normalize_config(raw)
    if source is None:
        return None

    fields = source.fields
    record = ExtractedRecord(name=name)
    for key in _DATA_FIELDS:
        setattr(record, key, sanitize(fields.get(key)))

    single_file = fields.get("single_file_support")
    if single_file is not None and single_file is not NIL:
        record.single_file_support = sanitize(single_file)

    for key, flag in _PRESENCE_FLAGS:
        setattr(record, flag, _present(fields, key))

    record.documentation = source.description
    return record


__all__ = ["ConfigSource", "extract_config", "normalize_config", "sanitize"]
