"""Emulated host runtime for evaluating configuration modules offline."""

from __future__ import annotations

from .environment import HostEnvironment, HostImporter, build_host_environment, build_host_packages
from .namespace import NIL, HostModuleNotFoundError, HostNamespace, HostReferenceError, Variables
from .process import CommandResult
from .settings import HostSettings

__all__ = [
    "CommandResult",
    "HostEnvironment",
    "HostImporter",
    "HostModuleNotFoundError",
    "HostNamespace",
    "HostReferenceError",
    "HostSettings",
    "NIL",
    "Variables",
    "build_host_environment",
    "build_host_packages",
]
