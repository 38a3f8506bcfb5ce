"""Emulation of the ``lspconfig`` package (``lspconfig.util`` and ``lspconfig.async_``)."""

from __future__ import annotations

from typing import Any, Callable, List

from . import files, process
from .namespace import HostNamespace
from .settings import HostSettings


def build_util(settings: HostSettings) -> HostNamespace:
    """Return the ``lspconfig.util`` namespace with root searches pinned to canned paths."""

    def root_pattern(*patterns: Any) -> Callable[..., str]:
        def resolve(fname: Any = None, bufnr: Any = None) -> str:
            return settings.root

        return resolve

    def insert_package_json(config_files: Any, field: Any = None, fname: Any = None) -> List[str]:
        return []

    path = HostNamespace(
        "lspconfig.util.path",
        join=files.join,
        dirname=files.dirname,
        exists=files.always(True),
        is_dir=files.always(True),
        is_file=files.always(True),
    )

    return HostNamespace(
        "lspconfig.util",
        root_pattern=root_pattern,
        find_git_ancestor=files.always(settings.git_root),
        find_package_json_ancestor=files.always(settings.package_root),
        find_node_modules_ancestor=files.always(settings.node_modules_root),
        search_ancestors=files.always(settings.root),
        insert_package_json=insert_package_json,
        path=path,
    )


def build_async() -> HostNamespace:
    return HostNamespace(
        "lspconfig.async_",
        run_command=process.run_command,
        schedule=process.schedule,
    )


def build_lspconfig(settings: HostSettings) -> HostNamespace:
    """Return the top-level ``lspconfig`` package."""
    return HostNamespace(
        "lspconfig",
        util=build_util(settings),
        async_=build_async(),
    )


__all__ = ["build_async", "build_lspconfig", "build_util"]
