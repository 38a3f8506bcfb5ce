"""Emulation of the editor's ``vim`` runtime namespace.

Configuration modules call into ``vim`` while they are being evaluated, mostly
to merge tables, look up executables or compute a root directory. Lookups
answer from :class:`~lspextract.host.settings.HostSettings`; the table helpers
are real implementations because modules depend on what they return.
"""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterable, List, MutableSequence, NamedTuple, Optional

from ..logging import get_logger
from . import files, process
from .namespace import NIL, HostNamespace, Variables
from .settings import HostSettings

_LOGGER = get_logger("host")

_MERGE_BEHAVIOURS = ("force", "keep", "error")

LOG_LEVELS = {"TRACE": 0, "DEBUG": 1, "INFO": 2, "WARN": 3, "ERROR": 4, "OFF": 5}

_PY_LEVELS = {
    0: logging.DEBUG,
    1: logging.DEBUG,
    2: logging.INFO,
    3: logging.WARNING,
    4: logging.ERROR,
}

_METHODS = {
    "initialize": "initialize",
    "workspace_executeCommand": "workspace/executeCommand",
    "workspace_configuration": "workspace/configuration",
    "textDocument_hover": "textDocument/hover",
    "textDocument_definition": "textDocument/definition",
    "textDocument_references": "textDocument/references",
    "textDocument_publishDiagnostics": "textDocument/publishDiagnostics",
    "textDocument_codeAction": "textDocument/codeAction",
    "textDocument_rename": "textDocument/rename",
    "window_showMessage": "window/showMessage",
}

_MESSAGE_TYPES = {"Error": 1, "Warning": 2, "Info": 3, "Log": 4}


class _VersionTuple(NamedTuple):
    major: int
    minor: int
    patch: int


class HostVersion(_VersionTuple):
    """Version triple readable as ``v.major``, ``v["major"]`` or ``v[0]``."""

    def __getitem__(self, key: Any) -> Any:
        if isinstance(key, str):
            if key not in self._fields:
                raise KeyError(key)
            return getattr(self, key)
        return super().__getitem__(key)


def tbl_deep_extend(behavior: str, *tables: Any) -> Dict[Any, Any]:
    """Merge mappings recursively into a new dict.

    ``force`` lets later tables win, ``keep`` lets earlier tables win and
    ``error`` raises when a non-mapping key appears in more than one table.
    Sequences are replaced, never concatenated.
    """
    if behavior not in _MERGE_BEHAVIOURS:
        raise ValueError(f"invalid 'behavior': {behavior!r}")
    if len(tables) < 2:
        raise TypeError(f"wrong number of arguments (given {len(tables) + 1}, expected at least 3)")

    result: Dict[Any, Any] = {}
    for table in tables:
        if table is None or table is NIL:
            continue
        if not isinstance(table, Mapping):
            raise TypeError(f"expected a mapping, got {type(table).__name__}")
        for key, value in table.items():
            if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
                result[key] = tbl_deep_extend(behavior, result[key], value)
            elif key in result:
                if behavior == "error":
                    raise ValueError(f"key found in more than one map: {key}")
                if behavior == "force":
                    result[key] = _copy_value(value)
            else:
                result[key] = _copy_value(value)
    return result


def tbl_extend(behavior: str, *tables: Any) -> Dict[Any, Any]:
    """Shallow counterpart of :func:`tbl_deep_extend`."""
    if behavior not in _MERGE_BEHAVIOURS:
        raise ValueError(f"invalid 'behavior': {behavior!r}")
    if len(tables) < 2:
        raise TypeError(f"wrong number of arguments (given {len(tables) + 1}, expected at least 3)")
    result: Dict[Any, Any] = {}
    for table in tables:
        if table is None or table is NIL:
            continue
        for key, value in table.items():
            if key in result:
                if behavior == "error":
                    raise ValueError(f"key found in more than one map: {key}")
                if behavior == "keep":
                    continue
            result[key] = value
    return result


def _copy_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _copy_value(item) for key, item in value.items()}
    if isinstance(value, list):
        return copy.copy(value)
    return value


def tbl_filter(func: Callable[[Any], Any], items: Iterable[Any]) -> List[Any]:
    return [item for item in _values(items) if func(item)]


def tbl_keys(table: Mapping[Any, Any]) -> List[Any]:
    return list(table.keys())


def tbl_contains(items: Iterable[Any], value: Any) -> bool:
    return value in _values(items)


def tbl_isempty(items: Any) -> bool:
    return len(items) == 0


def list_extend(
    dst: MutableSequence[Any],
    src: List[Any],
    start: Optional[int] = None,
    finish: Optional[int] = None,
) -> MutableSequence[Any]:
    """Append ``src[start..finish]`` (1-based, inclusive) to ``dst`` in place."""
    first = (start or 1) - 1
    last = finish if finish is not None else len(src)
    dst.extend(src[first:last])
    return dst


def _values(items: Any) -> List[Any]:
    if isinstance(items, Mapping):
        return list(items.values())
    return list(items)


def startswith(text: str, prefix: str) -> bool:
    return text[: len(prefix)] == prefix


def endswith(text: str, suffix: str) -> bool:
    return not suffix or text[-len(suffix):] == suffix


def notify(msg: Any, level: Optional[int] = None, opts: Any = None) -> None:
    _LOGGER.log(_PY_LEVELS.get(level if level is not None else 2, logging.INFO), "NOTIFY: %s", msg)


def deprecate(
    name: str,
    alternative: Optional[str] = None,
    version: Optional[str] = None,
    plugin: Optional[str] = None,
    backtrace: Any = None,
) -> None:
    if alternative:
        _LOGGER.warning("DEPRECATE: %s (use %s)", name, alternative)
    else:
        _LOGGER.warning("DEPRECATE: %s", name)


def _noop(*args: Any, **kwargs: Any) -> None:
    return None


def _rpc_connect(host: str, port: Any = None) -> Callable[..., Any]:
    def connect(dispatchers: Any = None) -> Dict[str, Any]:
        return {}

    return connect


def _json_decode(text: str, opts: Any = None) -> Any:
    return json.loads(text)


def _json_encode(value: Any, opts: Any = None) -> str:
    return json.dumps(value)


def _build_fn(settings: HostSettings) -> HostNamespace:
    return HostNamespace(
        "vim.fn",
        has=files.always(1),
        stdpath=lambda what: f"/mock/stdpath/{what}",
        expand=lambda expr, *args: f"/mock/expand/{expr}",
        executable=files.always(1),
        exepath=lambda cmd: f"{settings.executable_dir}/{cmd}",
        glob=lambda pattern, *args: ["/mock/glob/result"],
        isdirectory=files.always(1),
        getcwd=files.always(settings.cwd),
        getpid=files.always(settings.pid),
    )


def _build_uv(settings: HostSettings) -> HostNamespace:
    return HostNamespace(
        "vim.uv",
        fs_stat=files.make_fs_stat(settings),
        os_homedir=files.always(settings.home),
        os_tmpdir=files.always(settings.tmpdir),
        cwd=files.always(settings.cwd),
        getpid=files.always(settings.pid),
        joinpath=files.join,
    )


def _build_fs(settings: HostSettings) -> HostNamespace:
    return HostNamespace(
        "vim.fs",
        normalize=files.normalize,
        root=files.always(settings.root),
        dirname=files.dirname,
        basename=lambda path: str(path).rpartition("/")[2],
        joinpath=files.join,
        find=lambda names, opts=None: [f"{settings.root}/.git"],
        relpath=files.always(None),
    )


def _build_lsp() -> HostNamespace:
    handlers = {method: _noop for method in _METHODS.values() if "/" in method}
    rpc = HostNamespace("vim.lsp.rpc", connect=_rpc_connect, request=lambda *args: {})
    log = HostNamespace(
        "vim.lsp.log",
        trace=_noop,
        debug=_noop,
        info=_noop,
        warn=_noop,
        error=_noop,
    )
    protocol = HostNamespace(
        "vim.lsp.protocol",
        make_client_capabilities=lambda: {},
        Methods=HostNamespace("vim.lsp.protocol.Methods", **_METHODS),
        MessageType=HostNamespace("vim.lsp.protocol.MessageType", **_MESSAGE_TYPES),
    )
    return HostNamespace(
        "vim.lsp",
        get_clients=lambda *args, **kwargs: [],
        util=HostNamespace("vim.lsp.util", show_document=_noop),
        buf=HostNamespace("vim.lsp.buf", rename=_noop, code_action=_noop),
        handlers=handlers,
        protocol=protocol,
        rpc=rpc,
        log=log,
    )


def build_vim(settings: HostSettings) -> HostNamespace:
    """Return the ``vim`` namespace for one run."""
    uv = _build_uv(settings)
    version = HostVersion(*settings.version)
    lsp = _build_lsp()
    return HostNamespace(
        "vim",
        tbl_deep_extend=tbl_deep_extend,
        tbl_extend=tbl_extend,
        tbl_filter=tbl_filter,
        tbl_keys=tbl_keys,
        tbl_contains=tbl_contains,
        tbl_isempty=tbl_isempty,
        list_extend=list_extend,
        startswith=startswith,
        endswith=endswith,
        deprecate=deprecate,
        notify=notify,
        version=lambda: version,
        schedule=process.schedule,
        schedule_wrap=process.schedule_wrap,
        system=process.system,
        empty_dict=lambda: {},
        uri_from_bufnr=files.always("file:///mock"),
        NIL=NIL,
        g=Variables("vim.g"),
        env=Variables("vim.env", HOME=settings.home, VIMRUNTIME=settings.runtime),
        log=HostNamespace("vim.log", levels=HostNamespace("vim.log.levels", **LOG_LEVELS)),
        config=HostNamespace("vim.config", get=lambda *args: {}),
        rpc=lsp.rpc,
        fn=_build_fn(settings),
        uv=uv,
        loop=uv,
        fs=_build_fs(settings),
        json=HostNamespace("vim.json", decode=_json_decode, encode=_json_encode),
        api=HostNamespace(
            "vim.api",
            nvim_get_current_buf=files.always(1),
            nvim_buf_get_name=files.always(settings.buffer_name),
            nvim_buf_create_user_command=_noop,
        ),
        lsp=lsp,
    )


__all__ = [
    "HostVersion",
    "LOG_LEVELS",
    "build_vim",
    "endswith",
    "list_extend",
    "startswith",
    "tbl_contains",
    "tbl_deep_extend",
    "tbl_extend",
    "tbl_filter",
    "tbl_isempty",
    "tbl_keys",
]
