"""CLI parser and entrypoint behaviour tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from lspextract.cli import _build_parser, main
from tests._fixtures.config_builder import ConfigDirBuilder


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "extract"])
    assert args.verbose is True
    assert args.command == "extract"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["extract", "--verbose"])
    assert args.verbose is True
    assert args.command == "extract"


def test_cli_extract_accepts_paths() -> None:
    parser = _build_parser()
    args = parser.parse_args(["extract", "--configs-dir", "cfgs", "-o", "out.json"])
    assert args.configs_dir == Path("cfgs")
    assert args.output == Path("out.json")
    assert args.config is None


def test_cli_inspect_requires_name() -> None:
    parser = _build_parser()
    args = parser.parse_args(["inspect", "lua_ls"])
    assert args.command == "inspect"
    assert args.name == "lua_ls"
    with pytest.raises(SystemExit):
        parser.parse_args(["inspect"])


def test_main_extract_writes_report(
    config_builder: ConfigDirBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    config_builder.write(
        {
            "alpha": 'config = {"cmd": ["a"], "filetypes": ["txt"]}\n',
            "beta": 'raise RuntimeError("broken")\n',
        }
    )
    output = config_builder.root / "out" / "report.json"

    main(
        [
            "extract",
            "--configs-dir",
            str(config_builder.configs_dir),
            "--output",
            str(output),
            "--config",
            str(config_builder.root),
        ]
    )

    captured = capsys.readouterr()
    assert "Extracted 1 configurations" in captured.out
    assert f"File size: {output.stat().st_size} bytes" in captured.out
    assert "beta" in captured.out
    payload = json.loads(output.read_text(encoding="utf-8"))
    assert list(payload) == ["alpha"]


def test_main_extract_fails_when_output_unwritable(config_builder: ConfigDirBuilder) -> None:
    config_builder.write({"alpha": 'config = {"cmd": ["a"]}\n'})
    blocker = config_builder.root / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main(
            [
                "extract",
                "--configs-dir",
                str(config_builder.configs_dir),
                "--output",
                str(blocker / "report.json"),
                "--config",
                str(config_builder.root),
            ]
        )

    assert excinfo.value.code == 1


def test_main_extract_fails_for_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["extract", "--configs-dir", str(tmp_path / "missing"), "--config", str(tmp_path)])
    assert excinfo.value.code == 1


def test_main_inspect_prints_summary(
    config_builder: ConfigDirBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    config_builder.write(
        {
            "lua_ls": """
            config = {
                "cmd": ["lua-language-server"],
                "filetypes": ["lua"],
                "root_markers": [".luarc.json", ".git"],
            }
            """
        }
    )

    main(
        [
            "inspect",
            "lua_ls",
            "--configs-dir",
            str(config_builder.configs_dir),
            "--config",
            str(config_builder.root),
        ]
    )

    out = capsys.readouterr().out
    assert "Successfully loaded lua_ls config:" in out
    assert "Command: lua-language-server" in out
    assert "Filetypes: lua" in out
    assert "Root markers: .luarc.json, .git" in out
    assert "Extracted data keys: capabilities, cmd, filetypes" in out


def test_main_inspect_fails_for_broken_module(config_builder: ConfigDirBuilder) -> None:
    config_builder.write({"broken": "import vim\nvim.does_not_exist()\n"})

    with pytest.raises(SystemExit) as excinfo:
        main(
            [
                "inspect",
                "broken",
                "--configs-dir",
                str(config_builder.configs_dir),
                "--config",
                str(config_builder.root),
            ]
        )

    assert excinfo.value.code == 1


def test_main_extract_logs_skipped_module_and_succeeds(
    config_builder: ConfigDirBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    config_builder.write(
        {
            "alpha": 'config = {"cmd": ["a"]}\n',
            "beta": 'raise RuntimeError("cannot evaluate")\n',
        }
    )
    output = config_builder.root / "report.json"

    result = main(
        [
            "extract",
            "--configs-dir",
            str(config_builder.configs_dir),
            "--output",
            str(output),
            "--config",
            str(config_builder.root),
        ]
    )

    assert result is None
    captured = capsys.readouterr()
    assert "[lspextract] WARNING Error loading beta" in captured.err
    assert "cannot evaluate" in captured.err
    assert "Skipped 1 of 2 modules: beta" in captured.out
    assert list(json.loads(output.read_text(encoding="utf-8"))) == ["alpha"]


def test_main_fails_cleanly_when_log_file_unwritable(
    config_builder: ConfigDirBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    config_builder.write({"alpha": 'config = {"cmd": ["a"]}\n'})
    blocker = config_builder.root / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main(
            [
                "extract",
                "--configs-dir",
                str(config_builder.configs_dir),
                "--config",
                str(config_builder.root),
                "--log-file",
                str(blocker / "logs" / "run.log"),
            ]
        )

    assert excinfo.value.code == 1
    assert "Could not open log file" in capsys.readouterr().err


def test_main_fails_cleanly_for_undecodable_settings(
    config_builder: ConfigDirBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    config_builder.write({"alpha": 'config = {"cmd": ["a"]}\n'})
    (config_builder.root / ".lspextract.yml").write_bytes(b"output: \xff\xfe\n")

    with pytest.raises(SystemExit) as excinfo:
        main(["extract", "--config", str(config_builder.root)])

    assert excinfo.value.code == 1
    assert "Failed to read .lspextract.yml" in capsys.readouterr().err
