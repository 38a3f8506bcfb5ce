"""CLI entrypoints for lspextract commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import CONFIG_FILENAME, ConfigError, ExtractSettings, load_config
from .logging import configure_logging
from .pipeline import ConfigExtractor, ReportWriteError


def _add_common_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    def _default(value: object) -> object:
        return argparse.SUPPRESS if suppress_default else value

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=_default(False),
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=_default(None),
        help=f"Path to the settings file (defaults to ./{CONFIG_FILENAME}).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=_default(None),
        help="Also write log output to this file.",
    )


def _add_configs_dir_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--configs-dir",
        type=Path,
        default=None,
        help="Directory holding the configuration modules.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lspextract",
        description="Extract language server configurations into a JSON report.",
    )
    _add_common_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    extract_parser = subparsers.add_parser(
        "extract",
        help="Evaluate every configuration module and write the JSON report.",
    )
    _add_common_options(extract_parser, suppress_default=True)
    _add_configs_dir_option(extract_parser)
    extract_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Report path (defaults to lsp_configs.json next to the settings file).",
    )

    inspect_parser = subparsers.add_parser(
        "inspect",
        help="Evaluate a single configuration module and summarise it.",
    )
    _add_common_options(inspect_parser, suppress_default=True)
    _add_configs_dir_option(inspect_parser)
    inspect_parser.add_argument("name", help="Configuration name (file name without suffix).")

    return parser


def _load_settings(args: argparse.Namespace) -> ExtractSettings:
    config_path = args.config if args.config is not None else Path.cwd()
    settings = load_config(config_path)
    if getattr(args, "configs_dir", None) is not None:
        settings.configs_dir = args.configs_dir.expanduser().resolve()
    if getattr(args, "output", None) is not None:
        settings.output = args.output.expanduser().resolve()
    return settings


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for lspextract commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        configure_logging(verbose=bool(args.verbose), log_file=args.log_file)
    except OSError as exc:
        parser.exit(1, f"Could not open log file {args.log_file}: {exc}\n")

    try:
        settings = _load_settings(args)
        extractor = ConfigExtractor(settings)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")
    except Exception as exc:  # pragma: no cover - defensive guard
        parser.exit(1, f"lspextract failed to start: {exc}\nRun with --verbose for more details.\n")

    if args.command == "extract":
        try:
            run = extractor.run()
            size = extractor.write_report(run.report)
        except (FileNotFoundError, NotADirectoryError) as exc:
            parser.exit(1, f"{exc}\n")
        except ReportWriteError as exc:
            parser.exit(1, f"Error: {exc}\n")
        except Exception as exc:  # pragma: no cover - defensive guard
            parser.exit(1, f"lspextract extract failed: {exc}\nRun with --verbose for more details.\n")
        print(f"Extracted {len(run.report)} configurations to {_relativize(settings.output)}")
        print(f"File size: {size} bytes")
        if run.diagnostics:
            skipped = ", ".join(diagnostic.module for diagnostic in run.diagnostics)
            print(f"Skipped {len(run.diagnostics)} of {run.module_count} modules: {skipped}")
    elif args.command == "inspect":
        try:
            record = extractor.inspect(args.name)
        except FileNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        except Exception as exc:  # pragma: no cover - defensive guard
            parser.exit(1, f"lspextract inspect failed: {exc}\nRun with --verbose for more details.\n")
        if record is None:
            parser.exit(1, f"Failed to load {args.name} config\n")
        print(f"Successfully loaded {record.name} config:")
        print(f"  Command: {_join(record.cmd, ' ')}")
        print(f"  Filetypes: {_join(record.filetypes, ', ')}")
        print(f"  Root markers: {_join(record.root_markers, ', ')}")
        print(f"  Extracted data keys: {', '.join(sorted(record.to_dict()))}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _join(value: object, separator: str) -> str:
    if value is None:
        return "nil"
    if isinstance(value, list):
        return separator.join(str(item) for item in value)
    return str(value)


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
