"""Canned values returned by the emulated host runtime."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

DEFAULT_MANIFEST_CONTENT = '{"dependencies": {"@angular/core": "^15.0.0"}}'


@dataclass
class HostSettings:
    """Deterministic answers for path, process, and filesystem lookups."""

    root: str = "/mock/root"
    git_root: str = "/mock/git/root"
    package_root: str = "/mock/package/root"
    node_modules_root: str = "/mock/node_modules/root"
    home: str = "/home/user"
    cwd: str = "/mock/cwd"
    tmpdir: str = "/tmp"
    executable_dir: str = "/usr/bin"
    runtime: str = "/usr/share/nvim/runtime"
    buffer_name: str = "/mock/file"
    pid: int = 12345
    version: Tuple[int, int, int] = (0, 10, 0)
    manifest_files: List[str] = field(default_factory=lambda: ["package.json"])
    manifest_content: str = DEFAULT_MANIFEST_CONTENT

    def is_manifest(self, path: object) -> bool:
        """Return True when the base name of ``path`` is a manifest file name."""
        text = str(path).replace("\\", "/")
        base = text.rsplit("/", 1)[-1]
        return base in self.manifest_files


__all__ = ["DEFAULT_MANIFEST_CONTENT", "HostSettings"]
