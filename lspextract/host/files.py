"""Filesystem lookups answered from canned data instead of the real disk."""

from __future__ import annotations

import builtins
import io
import os
from typing import Any, Callable, Dict, Optional

from .settings import HostSettings


def join(*parts: Any) -> str:
    return "/".join(str(part) for part in parts)


def dirname(path: Any) -> str:
    head, sep, _ = str(path).rpartition("/")
    if not sep:
        return "."
    return head


def normalize(path: Any, opts: Any = None) -> str:
    return str(path)


def always(value: Any) -> Callable[..., Any]:
    """Return a function that ignores its arguments and answers ``value``."""

    def answer(*args: Any, **kwargs: Any) -> Any:
        return value

    return answer


def make_fs_stat(settings: HostSettings) -> Callable[..., Optional[Dict[str, Any]]]:
    """Build ``vim.uv.fs_stat``: every path is a regular file."""
    manifest_size = len(settings.manifest_content.encode("utf-8"))

    def fs_stat(path: Any, callback: Any = None) -> Dict[str, Any]:
        stat: Dict[str, Any] = {"type": "file"}
        if settings.is_manifest(path):
            stat["size"] = manifest_size
        if callable(callback):
            callback(None, stat)
        return stat

    return fs_stat


def make_open(
    settings: HostSettings, real_open: Callable[..., Any] = builtins.open
) -> Callable[..., Any]:
    """Build an ``open`` that serves manifest files from canned content."""

    def host_open(file: Any, mode: str = "r", *args: Any, **kwargs: Any) -> Any:
        if not isinstance(file, int) and settings.is_manifest(os.fspath(file)):
            if any(flag in mode for flag in "wax+"):
                raise PermissionError(f"Manifest files are read-only during extraction: {file}")
            if "b" in mode:
                return io.BytesIO(settings.manifest_content.encode("utf-8"))
            return io.StringIO(settings.manifest_content)
        return real_open(file, mode, *args, **kwargs)

    return host_open


__all__ = ["always", "dirname", "join", "make_fs_stat", "make_open", "normalize"]
