"""Configuration loading for lspextract (.lspextract.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .docs import DEFAULT_DOC_MARKER
from .host import HostSettings

CONFIG_FILENAME = ".lspextract.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ExtractSettings:
    """Represents the settings defined in .lspextract.yml."""

    root: Path
    configs_dir: Path
    output: Path
    suffix: str = ".py"
    export_name: str = "config"
    doc_marker: str = DEFAULT_DOC_MARKER
    indent: int = 2
    exclude: List[str] = field(default_factory=list)
    host: HostSettings = field(default_factory=HostSettings)

    @classmethod
    def defaults(cls, root: Path) -> "ExtractSettings":
        root = root.resolve()
        return cls(
            root=root,
            configs_dir=root / "lspconfig" / "configs",
            output=root / "lsp_configs.json",
        )


def load_config(config_path: Path) -> ExtractSettings:
    """Load configuration from disk; a missing file yields defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()
    settings = ExtractSettings.defaults(root)

    if not config_file.exists():
        return settings

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    configs_dir = _as_str(data.get("configs_dir"))
    if configs_dir:
        settings.configs_dir = root / configs_dir
    output = _as_str(data.get("output"))
    if output:
        settings.output = root / output

    suffix = _as_str(data.get("suffix"))
    if suffix:
        settings.suffix = suffix if suffix.startswith(".") else f".{suffix}"
    export_name = _as_str(data.get("export_name"))
    if export_name and export_name.isidentifier():
        settings.export_name = export_name
    doc_marker = _as_str(data.get("doc_marker"))
    if doc_marker and doc_marker.strip():
        settings.doc_marker = doc_marker
    indent = _as_int(data.get("indent"))
    if indent is not None and indent >= 0:
        settings.indent = indent
    settings.exclude = _as_str_list(data.get("exclude"))

    host_data = _as_dict(data.get("host"))
    if host_data:
        settings.host = _parse_host(host_data)

    return settings


def _parse_host(data: Dict[str, Any]) -> HostSettings:
    host = HostSettings()
    for name in (
        "root",
        "git_root",
        "package_root",
        "node_modules_root",
        "home",
        "cwd",
        "tmpdir",
        "executable_dir",
        "runtime",
        "buffer_name",
        "manifest_content",
    ):
        value = _as_str(data.get(name))
        if value is not None:
            setattr(host, name, value)

    pid = _as_int(data.get("pid"))
    if pid is not None:
        host.pid = pid

    version = data.get("version")
    if isinstance(version, Sequence) and not isinstance(version, str):
        parts = [_as_int(part) for part in version]
        if len(parts) == 3 and all(part is not None for part in parts):
            host.version = (parts[0], parts[1], parts[2])  # type: ignore[assignment]

    manifests = _as_str_list(data.get("manifest_files"))
    if manifests:
        host.manifest_files = manifests
    return host


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = ["CONFIG_FILENAME", "ConfigError", "ExtractSettings", "load_config"]
