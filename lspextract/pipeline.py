"""Pipeline orchestration: enumerate, load, extract, document, and write the report."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from .config import ExtractSettings
from .docs import resolve_docs
from .extractor import extract_config
from .host import build_host_environment
from .loader import ConfigLoader, LoadFailure
from .logging import get_logger
from .models import ConfigModule, Diagnostic, ExtractedRecord, Report


class ReportWriteError(RuntimeError):
    """Raised when the report cannot be persisted."""


@dataclass
class ExtractionRun:
    """Outcome of one full extraction."""

    report: Report
    module_count: int
    diagnostics: List[Diagnostic] = field(default_factory=list)


def discover_modules(
    configs_dir: Path, suffix: str = ".py", exclude: Iterable[str] = ()
) -> List[ConfigModule]:
    """Return configuration modules in ``configs_dir`` sorted by file name."""
    if not configs_dir.exists():
        raise FileNotFoundError(f"Configuration directory not found: {configs_dir}")
    if not configs_dir.is_dir():
        raise NotADirectoryError(f"Configuration path is not a directory: {configs_dir}")

    skipped = set(exclude)
    filenames = sorted(
        entry.name
        for entry in configs_dir.iterdir()
        if entry.name.endswith(suffix) and len(entry.name) > len(suffix) and entry.is_file()
    )
    modules: List[ConfigModule] = []
    for filename in filenames:
        name = filename[: -len(suffix)]
        if name in skipped:
            continue
        modules.append(ConfigModule(name=name, path=configs_dir / filename))
    return modules


class ConfigExtractor:
    """Coordinates a run over every configuration module."""

    def __init__(
        self,
        settings: ExtractSettings,
        loader: ConfigLoader | None = None,
    ) -> None:
        self.settings = settings
        self.loader = loader or ConfigLoader(
            build_host_environment(settings.host), export_name=settings.export_name
        )
        self.logger = get_logger("pipeline")

    def discover(self) -> List[ConfigModule]:
        return discover_modules(
            self.settings.configs_dir, self.settings.suffix, self.settings.exclude
        )

    def run(self) -> ExtractionRun:
        """Process every module in name order; failing modules are reported and skipped."""
        modules = self.discover()
        self.logger.info("Found %d configuration modules", len(modules))

        report = Report()
        diagnostics: List[Diagnostic] = []
        for module in modules:
            self.logger.info("Processing: %s", module.name)
            record = self._process(module, diagnostics)
            if record is not None:
                report.add(record)

        return ExtractionRun(report=report, module_count=len(modules), diagnostics=diagnostics)

    def inspect(self, name: str) -> Optional[ExtractedRecord]:
        """Extract a single module by name; returns None when it fails."""
        path = self.settings.configs_dir / f"{name}{self.settings.suffix}"
        if not path.is_file():
            raise FileNotFoundError(f"Configuration module not found: {path}")
        return self._process(ConfigModule(name=name, path=path), [])

    def write_report(self, report: Report, path: Path | None = None) -> int:
        """Write ``report`` as JSON and return the number of bytes written."""
        target = path or self.settings.output
        payload = report.render(indent=self.settings.indent).encode("utf-8")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(payload)
        except OSError as exc:
            raise ReportWriteError(f"Could not write to {target}: {exc}") from exc
        self.logger.debug("Wrote %d bytes to %s", len(payload), target)
        return len(payload)

    def _process(
        self, module: ConfigModule, diagnostics: List[Diagnostic]
    ) -> Optional[ExtractedRecord]:
        result = self.loader.load(module)
        if isinstance(result, LoadFailure):
            self.logger.warning("Error loading %s: %s", module.name, result.error)
            diagnostics.append(Diagnostic(module=module.name, stage="load", message=result.error))
            return None

        try:
            record = extract_config(module.name, result.value)
            if record is not None and record.documentation is None:
                record.documentation = resolve_docs(record, module.path, self.settings.doc_marker)
        except Exception as exc:
            message = f"{type(exc).__name__}: {exc}"
            self.logger.warning("Failed to extract config for %s: %s", module.name, message)
            diagnostics.append(Diagnostic(module=module.name, stage="extract", message=message))
            return None

        if record is None:
            self.logger.warning("Failed to extract config for %s", module.name)
            diagnostics.append(
                Diagnostic(
                    module=module.name,
                    stage="extract",
                    message=f"'{self.settings.export_name}' is missing or not a mapping",
                )
            )
            return None
        return record


__all__ = ["ConfigExtractor", "ExtractionRun", "ReportWriteError", "discover_modules"]
