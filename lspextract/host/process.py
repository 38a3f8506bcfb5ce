"""Synchronous stand-ins for host process execution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from ..logging import get_logger

_LOGGER = get_logger("host")


@dataclass(frozen=True)
class CommandResult:
    """Outcome reported for every emulated command: success with empty output."""

    code: int = 0
    signal: int = 0
    stdout: str = ""
    stderr: str = ""

    def __getitem__(self, key: str) -> Any:
        return getattr(self, key)


class SystemHandle:
    """Handle returned by ``vim.system``; the command has already completed."""

    def __init__(self, cmd: Sequence[str], result: CommandResult) -> None:
        self.cmd = list(cmd)
        self.pid = 0
        self._result = result

    def wait(self, timeout: Optional[int] = None) -> CommandResult:
        return self._result

    def kill(self, signal: Any = None) -> None:
        return None

    def is_closing(self) -> bool:
        return True


def run_command(
    cmd: Sequence[str] | str,
    opts: Any = None,
    callback: Optional[Callable[[CommandResult], Any]] = None,
) -> CommandResult:
    """Pretend to run ``cmd``; the callback fires before this returns."""
    if callback is None and callable(opts):
        opts, callback = None, opts
    _LOGGER.debug("Emulated command: %s", cmd)
    result = CommandResult()
    if callback is not None:
        callback(result)
    return result


def system(
    cmd: Sequence[str],
    opts: Any = None,
    on_exit: Optional[Callable[[CommandResult], Any]] = None,
) -> SystemHandle:
    """Emulate ``vim.system``; ``on_exit`` fires before this returns."""
    if on_exit is None and callable(opts):
        opts, on_exit = None, opts
    result = run_command(cmd, opts, on_exit)
    return SystemHandle(cmd if not isinstance(cmd, str) else [cmd], result)


def schedule(fn: Callable[[], Any]) -> None:
    fn()


def schedule_wrap(fn: Callable[..., Any]) -> Callable[..., Any]:
    def wrapped(*args: Any, **kwargs: Any) -> Any:
        return fn(*args, **kwargs)

    return wrapped


__all__ = ["CommandResult", "SystemHandle", "run_command", "schedule", "schedule_wrap", "system"]
