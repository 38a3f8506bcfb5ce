"""Tests for lspextract.pipeline."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from lspextract.models import FUNCTION_PLACEHOLDER
from lspextract.pipeline import ConfigExtractor, ReportWriteError, discover_modules
from tests._fixtures.config_builder import ConfigDirBuilder


def test_discover_sorts_and_strips_suffix(config_builder: ConfigDirBuilder) -> None:
    config_builder.write({"zls": "config = {}", "bashls": "config = {}", "clangd": "config = {}"})
    (config_builder.configs_dir / "README.md").write_text("ignored", encoding="utf-8")
    (config_builder.configs_dir / "nested.py").mkdir()

    modules = discover_modules(config_builder.configs_dir)

    assert [module.name for module in modules] == ["bashls", "clangd", "zls"]
    assert modules[0].path == config_builder.configs_dir / "bashls.py"
    assert discover_modules(config_builder.configs_dir) == modules


def test_discover_honours_exclusions(config_builder: ConfigDirBuilder) -> None:
    config_builder.write({"a": "config = {}", "b": "config = {}"})

    modules = discover_modules(config_builder.configs_dir, exclude=["a"])

    assert [module.name for module in modules] == ["b"]


def test_discover_rejects_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        discover_modules(tmp_path / "missing")
    (tmp_path / "file").write_text("", encoding="utf-8")
    with pytest.raises(NotADirectoryError):
        discover_modules(tmp_path / "file")


def test_run_skips_failing_module_and_keeps_the_rest(config_builder: ConfigDirBuilder) -> None:
    config_builder.write(
        {
            "alpha": 'config = {"cmd": ["a"], "filetypes": ["txt"]}\n',
            "beta": 'raise RuntimeError("cannot evaluate")\n',
        },
        suffix=".cfg",
    )
    settings = config_builder.settings()
    settings.suffix = ".cfg"
    extractor = ConfigExtractor(settings)

    run = extractor.run()
    extractor.write_report(run.report)

    payload = json.loads(settings.output.read_text(encoding="utf-8"))
    assert list(payload) == ["alpha"]
    assert payload["alpha"]["cmd"] == ["a"]
    assert payload["alpha"]["filetypes"] == ["txt"]
    assert run.module_count == 2
    assert [(d.module, d.stage) for d in run.diagnostics] == [("beta", "load")]
    assert "cannot evaluate" in run.diagnostics[0].message


def test_run_reports_modules_without_export(config_builder: ConfigDirBuilder) -> None:
    config_builder.write({"silent": "value = 1\n"})

    run = config_builder.extractor().run()

    assert len(run.report) == 0
    assert [(d.module, d.stage) for d in run.diagnostics] == [("silent", "extract")]


def test_run_resolves_documentation_sources(config_builder: ConfigDirBuilder) -> None:
    config_builder.write(
        {
            "described": """
            ## Comment docs that lose to docs.description
            config = {"default_config": {"cmd": ["d"]}, "docs": {"description": "X"}}
            """,
            "commented": """
            ## Line one
            ## Line two
            config = {"cmd": ["c"]}
            """,
            "bare": """
            config = {"cmd": ["b"]}
            """,
        }
    )

    report = config_builder.extractor().run().report

    assert report.records["described"].documentation == "X"
    assert report.records["commented"].documentation == "Line one\nLine two"
    assert report.records["bare"].documentation is None
    assert "documentation" not in report.records["bare"].to_dict()


def test_run_evaluates_realistic_module(config_builder: ConfigDirBuilder) -> None:
    config_builder.write(
        {
            "angularls": """
            ## https://angular.dev/tools/language-service
            import json

            import vim
            from lspconfig import util

            def get_node_modules_dir(root_dir):
                project_root = vim.fs.dirname(vim.fs.find("node_modules", {"path": root_dir, "upward": True})[0])
                return util.path.join(project_root, "node_modules") if project_root else ""

            def get_angular_core_version(root_dir):
                manifest = util.path.join(util.find_package_json_ancestor(root_dir), "package.json")
                if not vim.uv.fs_stat(manifest):
                    return ""
                with open(manifest) as handle:
                    data = json.load(handle)
                return data["dependencies"]["@angular/core"].lstrip("^")

            default_modules_dir = get_node_modules_dir(vim.fn.getcwd())
            default_version = get_angular_core_version(vim.fn.getcwd())

            config = {
                "default_config": {
                    "cmd": [
                        "ngserver",
                        "--stdio",
                        "--tsProbeLocations",
                        default_modules_dir,
                        "--angularCoreVersion",
                        default_version,
                    ],
                    "filetypes": ["typescript", "html", "typescriptreact"],
                    "root_dir": util.root_pattern("angular.json"),
                    "on_new_config": lambda new_config, root: None,
                    "settings": {"hooks": {"format": lambda: None}},
                },
            }
            """
        }
    )

    run = config_builder.extractor().run()

    assert run.diagnostics == []
    record = run.report.records["angularls"]
    assert record.cmd == [
        "ngserver",
        "--stdio",
        "--tsProbeLocations",
        "/mock/root/node_modules",
        "--angularCoreVersion",
        "15.0.0",
    ]
    assert record.has_custom_root_dir is True
    assert record.settings == {"hooks": {"format": FUNCTION_PLACEHOLDER}}
    assert record.documentation == "https://angular.dev/tools/language-service"


def test_inspect_single_module(config_builder: ConfigDirBuilder) -> None:
    config_builder.write({"lua_ls": 'config = {"cmd": ["lua-language-server"]}\n'})
    extractor = config_builder.extractor()

    record = extractor.inspect("lua_ls")

    assert record is not None
    assert record.cmd == ["lua-language-server"]
    with pytest.raises(FileNotFoundError):
        extractor.inspect("missing")


def test_write_report_returns_byte_count(config_builder: ConfigDirBuilder) -> None:
    config_builder.write({"alpha": 'config = {"cmd": ["a"]}\n'})
    extractor = config_builder.extractor()
    report = extractor.run().report
    target = config_builder.root / "nested" / "out.json"

    size = extractor.write_report(report, target)

    assert size == target.stat().st_size
    assert target.read_text(encoding="utf-8") == report.render()


def test_write_report_wraps_os_errors(config_builder: ConfigDirBuilder) -> None:
    extractor = config_builder.extractor()
    blocker = config_builder.root / "blocker"
    blocker.write_text("file", encoding="utf-8")

    with pytest.raises(ReportWriteError):
        extractor.write_report(extractor.run().report, blocker / "out.json")


def test_repeated_runs_produce_identical_documents(config_builder: ConfigDirBuilder) -> None:
    config_builder.write({"b": 'config = {"cmd": ["b"]}\n', "a": 'config = {"cmd": ["a"]}\n'})
    extractor = config_builder.extractor()

    first = extractor.run().report.render()
    second = extractor.run().report.render()

    assert first == second
    assert list(json.loads(first)) == ["a", "b"]


def test_run_records_cyclic_value_as_extract_failure(config_builder: ConfigDirBuilder) -> None:
    config_builder.write(
        {
            "alpha": 'config = {"cmd": ["a"]}\n',
            "loop": """
            settings = {"name": "loop"}
            settings["self"] = settings
            config = {"cmd": ["l"], "settings": settings}
            """,
        }
    )
    extractor = config_builder.extractor()

    run = extractor.run()
    size = extractor.write_report(run.report)

    assert run.report.names() == ["alpha"]
    assert [(d.module, d.stage) for d in run.diagnostics] == [("loop", "extract")]
    assert "circular reference" in run.diagnostics[0].message
    assert size == config_builder.settings().output.stat().st_size


def test_host_mutations_do_not_leak_between_modules(config_builder: ConfigDirBuilder) -> None:
    config_builder.write(
        {
            "a_first": """
            import vim
            vim.g.leaked = "yes"
            vim.fn = None
            config = {"cmd": ["first"]}
            """,
            "b_second": """
            import vim
            config = {
                "cmd": [vim.fn.exepath("second")],
                "settings": {"leaked": vim.g.leaked},
            }
            """,
        }
    )

    run = config_builder.extractor().run()

    assert run.diagnostics == []
    assert run.report.names() == ["a_first", "b_second"]
    record = run.report.records["b_second"]
    assert record.cmd == ["/usr/bin/second"]
    assert record.settings == {"leaked": None}


def test_non_string_description_falls_back_to_comments(config_builder: ConfigDirBuilder) -> None:
    config_builder.write(
        {
            "callable_docs": """
            ## Taken from the comment block
            config = {
                "default_config": {"cmd": ["c"]},
                "docs": {"description": lambda: "dynamic"},
            }
            """
        }
    )

    record = config_builder.extractor().run().report.records["callable_docs"]

    assert record.documentation == "Taken from the comment block"
