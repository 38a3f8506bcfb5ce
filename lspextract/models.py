"""Core data models shared across lspextract components."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

FUNCTION_PLACEHOLDER = "[FUNCTION]"

_DATA_FIELDS = ("cmd", "filetypes", "root_markers", "settings", "init_options", "capabilities")

_FLAG_FIELDS = (
    "has_custom_handlers",
    "has_on_attach",
    "has_before_init",
    "has_on_init",
    "has_custom_root_dir",
)


@dataclass(frozen=True)
class ConfigModule:
    """A configuration module on disk, named after its file."""

    name: str
    path: Path


@dataclass
class ExtractedRecord:
    """Serialization-safe snapshot of one language server configuration."""

    name: str
    cmd: Any = None
    filetypes: Any = None
    root_markers: Any = None
    settings: Any = None
    init_options: Any = None
    capabilities: Any = None
    single_file_support: Optional[bool] = None
    has_custom_handlers: bool = False
    has_on_attach: bool = False
    has_before_init: bool = False
    has_on_init: bool = False
    has_custom_root_dir: bool = False
    documentation: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return the report entry; optional fields appear only when set."""
        data: Dict[str, Any] = {"name": self.name}
        for key in _DATA_FIELDS:
            data[key] = getattr(self, key)
        if self.single_file_support is not None:
            data["single_file_support"] = self.single_file_support
        for key in _FLAG_FIELDS:
            if getattr(self, key):
                data[key] = True
        if self.documentation is not None:
            data["documentation"] = self.documentation
        return data

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ExtractedRecord":
        record = cls(name=str(payload["name"]))
        for key in _DATA_FIELDS:
            setattr(record, key, payload.get(key))
        single_file = payload.get("single_file_support")
        if single_file is not None:
            record.single_file_support = single_file
        for key in _FLAG_FIELDS:
            setattr(record, key, bool(payload.get(key, False)))
        documentation = payload.get("documentation")
        if isinstance(documentation, str):
            record.documentation = documentation
        return record


@dataclass
class Diagnostic:
    """A per-module problem recorded during a run."""

    module: str
    stage: str
    message: str


@dataclass
class Report:
    """Extracted records keyed by configuration name."""

    records: Dict[str, ExtractedRecord] = field(default_factory=dict)

    def add(self, record: ExtractedRecord) -> None:
        if record.name in self.records:
            raise ValueError(f"Duplicate configuration name: {record.name}")
        self.records[record.name] = record

    def names(self) -> List[str]:
        return sorted(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[ExtractedRecord]:
        for name in self.names():
            yield self.records[name]

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {name: self.records[name].to_dict() for name in self.names()}

    def render(self, *, indent: int = 2) -> str:
        """Serialize the report as pretty-printed JSON ordered by name."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False) + "\n"

    @classmethod
    def from_json(cls, text: str) -> "Report":
        payload = json.loads(text)
        if not isinstance(payload, dict):
            raise ValueError("Report document must be a JSON object")
        report = cls()
        for name, entry in payload.items():
            if not isinstance(entry, dict):
                raise ValueError(f"Report entry for {name!r} must be an object")
            report.add(ExtractedRecord.from_dict({**entry, "name": entry.get("name", name)}))
        return report


__all__ = [
    "FUNCTION_PLACEHOLDER",
    "ConfigModule",
    "Diagnostic",
    "ExtractedRecord",
    "Report",
]
