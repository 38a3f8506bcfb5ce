"""The host capability bundle handed to the configuration loader."""

from __future__ import annotations

import builtins
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

from .files import make_open
from .namespace import HostModuleNotFoundError, HostNamespace
from .settings import HostSettings
from .util import build_lspconfig
from .vim import build_vim


class HostImporter:
    """``__import__`` replacement that resolves host packages from an explicit table.

    Names outside the table go to the interpreter's own import machinery, so
    configuration modules can still use the standard library.
    """

    def __init__(
        self,
        packages: Mapping[str, Any],
        fallback: Callable[..., Any] = builtins.__import__,
    ) -> None:
        self._packages = dict(packages)
        self._fallback = fallback

    def handles(self, name: str) -> bool:
        return name.split(".", 1)[0] in self._packages

    def resolve(self, name: str) -> Any:
        head, *rest = name.split(".")
        target = self._packages[head]
        walked = head
        for part in rest:
            walked = f"{walked}.{part}"
            if isinstance(target, HostNamespace) and part in target:
                target = getattr(target, part)
            else:
                raise HostModuleNotFoundError(f"undefined host module '{walked}'", name=walked)
        return target

    def __call__(
        self,
        name: str,
        globals: Optional[Mapping[str, Any]] = None,
        locals: Optional[Mapping[str, Any]] = None,
        fromlist: Sequence[str] | None = (),
        level: int = 0,
    ) -> Any:
        if level != 0 or not self.handles(name):
            return self._fallback(name, globals, locals, fromlist, level)
        module = self.resolve(name)
        if fromlist:
            return module
        return self._packages[name.split(".", 1)[0]]


def build_host_packages(settings: HostSettings) -> Dict[str, Any]:
    """Assemble fresh ``lspconfig`` and ``vim`` emulations."""
    return {
        "lspconfig": build_lspconfig(settings),
        "vim": build_vim(settings),
    }


@dataclass
class HostEnvironment:
    """Builds the emulated host modules and builtins overrides for each evaluation.

    Every call to :meth:`builtins` gets its own package tree, so nothing a
    configuration module assigns on ``vim`` or ``lspconfig`` reaches the next one.
    """

    settings: HostSettings
    factory: Callable[[HostSettings], Dict[str, Any]] = build_host_packages

    def module(self, name: str) -> Any:
        """Return a freshly built host module registered under a dotted ``name``."""
        return HostImporter(self.factory(self.settings)).resolve(name)

    def builtins(self) -> Dict[str, Any]:
        """Return a fresh builtins mapping for evaluating one configuration module."""
        namespace = dict(vars(builtins))
        namespace["__import__"] = HostImporter(self.factory(self.settings))
        namespace["open"] = make_open(self.settings)
        return namespace


def build_host_environment(settings: HostSettings | None = None) -> HostEnvironment:
    """Return the host environment for one run."""
    return HostEnvironment(settings=settings or HostSettings())


__all__ = ["HostEnvironment", "HostImporter", "build_host_environment", "build_host_packages"]
