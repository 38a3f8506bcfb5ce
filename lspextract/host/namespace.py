"""Attribute containers standing in for host runtime modules."""

from __future__ import annotations

from typing import Any, Dict, Iterator


class HostReferenceError(AttributeError):
    """Raised when a configuration module touches a host API that is not emulated."""


class HostModuleNotFoundError(ModuleNotFoundError):
    """Raised when a configuration module imports a host module that is not emulated."""


class HostNamespace:
    """A named bag of host functions; missing attributes fail with the full dotted path."""

    def __init__(self, path: str, /, **members: Any) -> None:
        object.__setattr__(self, "_path", path)
        object.__setattr__(self, "_members", dict(members))

    def __getattr__(self, attr: str) -> Any:
        members: Dict[str, Any] = object.__getattribute__(self, "_members")
        try:
            return members[attr]
        except KeyError:
            path = object.__getattribute__(self, "_path")
            raise HostReferenceError(f"undefined host reference '{path}.{attr}'") from None

    def __setattr__(self, attr: str, value: Any) -> None:
        self._members[attr] = value

    def __contains__(self, attr: object) -> bool:
        return attr in self._members

    def __iter__(self) -> Iterator[str]:
        return iter(self._members)

    def __repr__(self) -> str:
        return f"<host namespace {self._path}>"

    @property
    def host_path(self) -> str:
        return self._path


class Variables(HostNamespace):
    """Variable scope (``vim.g``, ``vim.env``) where unset names read as None."""

    def __getattr__(self, attr: str) -> Any:
        if attr.startswith("__"):
            raise AttributeError(attr)
        return self._members.get(attr)

    def __getitem__(self, key: str) -> Any:
        return self._members.get(key)

    def __setitem__(self, key: str, value: Any) -> None:
        self._members[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        return self._members.get(key, default)


class _Nil:
    """Host null sentinel; serializes as JSON null."""

    _instance: "_Nil | None" = None

    def __new__(cls) -> "_Nil":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "vim.NIL"


NIL = _Nil()


__all__ = [
    "HostModuleNotFoundError",
    "HostNamespace",
    "HostReferenceError",
    "NIL",
    "Variables",
]
