"""Evaluate configuration modules against the emulated host."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Union

from .host import HostEnvironment
from .logging import evaluating, get_logger
from .models import ConfigModule

_MODULE_PREFIX = "lspconfig.configs"


@dataclass
class Loaded:
    """A module that evaluated; ``value`` is whatever it bound, possibly None."""

    module: ConfigModule
    value: Any


@dataclass
class LoadFailure:
    """A module that raised while being read, compiled, or executed."""

    module: ConfigModule
    error: str


LoadResult = Union[Loaded, LoadFailure]


class ConfigLoader:
    """Runs each configuration module in its own namespace with host builtins injected."""

    def __init__(self, host: HostEnvironment, *, export_name: str = "config") -> None:
        self.host = host
        self.export_name = export_name
        self.logger = get_logger("loader")

    def load(self, module: ConfigModule) -> LoadResult:
        """Evaluate ``module`` and return its exported value or the failure."""
        try:
            with evaluating(module.name):
                value = self._evaluate(module)
        except (Exception, SystemExit) as exc:
            message = _describe(exc)
            self.logger.debug("Evaluation of %s failed: %s", module.name, message)
            return LoadFailure(module=module, error=message)
        return Loaded(module=module, value=value)

    def _evaluate(self, module: ConfigModule) -> Any:
        source = module.path.read_text(encoding="utf-8")
        code = compile(source, str(module.path), "exec", dont_inherit=True)
        namespace: Dict[str, Any] = {
            "__name__": f"{_MODULE_PREFIX}.{module.name}",
            "__file__": str(module.path),
            "__builtins__": self.host.builtins(),
        }
        exec(code, namespace)
        return namespace.get(self.export_name)


def _describe(exc: BaseException) -> str:
    detail = str(exc)
    name = type(exc).__name__
    return f"{name}: {detail}" if detail else name


__all__ = ["ConfigLoader", "LoadFailure", "LoadResult", "Loaded"]
