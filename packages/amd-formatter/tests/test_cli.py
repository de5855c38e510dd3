# SPDX-License-Identifier: MIT
"""Tests for the amd-formatter convert command."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from amd_formatter import nodes as n
from amd_formatter import writer
from amd_formatter.cli import cli
from amd_formatter.printer import PrinterError


class TestConvertCommand:
    """Tests for amd-formatter convert."""

    def test_convert_writes_modules(self, cli_runner: CliRunner, source_tree: Path, tmp_path: Path) -> None:
        """Every reachable module is written under the output directory."""
        out = tmp_path / "out"

        result = cli_runner.invoke(
            cli, ["-C", str(tmp_path), "convert", "main.js", "-s", str(source_tree), "-o", str(out)]
        )

        assert result.exit_code == 0, result.output
        assert "Converted 3 module(s)" in result.output
        assert (out / "main.js").is_file()
        assert (out / "lib" / "math.js").is_file()
        assert (out / "lib" / "answer.js").is_file()

        main = (out / "main.js").read_text()
        assert main.startswith(
            'define("main", ["./lib/math", "./lib/answer", "exports"], '
            "function(lib$math$$, lib$answer$$, __exports__) {\n"
        )
        assert '  add = lib$math$$["add"];\n' in main
        assert '  answer = lib$answer$$["default"];\n' in main
        assert '  __es6_export__("total", total);\n' in main

    def test_unnamed_modules(self, cli_runner: CliRunner, source_tree: Path, tmp_path: Path) -> None:
        out = tmp_path / "out"

        result = cli_runner.invoke(
            cli, ["-C", str(tmp_path), "convert", "lib/answer.js", "-s", str(source_tree), "-o", str(out), "--unnamed"]
        )

        assert result.exit_code == 0, result.output
        assert (out / "lib" / "answer.js").read_text().startswith("define([], function() {\n")

    def test_direct_exports(self, cli_runner: CliRunner, source_tree: Path, tmp_path: Path) -> None:
        out = tmp_path / "out"

        result = cli_runner.invoke(
            cli,
            ["-C", str(tmp_path), "convert", "lib/answer.js", "-s", str(source_tree), "-o", str(out), "--direct-exports"],
        )

        assert result.exit_code == 0, result.output
        assert "  return 42;\n" in (out / "lib" / "answer.js").read_text()

    def test_options_from_pyproject(self, cli_runner: CliRunner, source_tree: Path, tmp_path: Path) -> None:
        """The project's [tool.amd-formatter] table supplies defaults."""
        (tmp_path / "pyproject.toml").write_text('[tool.amd-formatter]\nnamed-modules = false\nsource-dir = "src"\n')
        out = tmp_path / "out"

        result = cli_runner.invoke(cli, ["-C", str(tmp_path), "convert", "main.js", "-o", str(out)])

        assert result.exit_code == 0, result.output
        assert (out / "main.js").read_text().startswith('define(["./lib/math", ')

    def test_flag_overrides_pyproject(self, cli_runner: CliRunner, source_tree: Path, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text('[tool.amd-formatter]\nnamed-modules = false\nsource-dir = "src"\n')
        out = tmp_path / "out"

        result = cli_runner.invoke(cli, ["-C", str(tmp_path), "convert", "main.js", "-o", str(out), "--named"])

        assert result.exit_code == 0, result.output
        assert (out / "main.js").read_text().startswith('define("main", ')

    def test_verbose_lists_modules(self, cli_runner: CliRunner, source_tree: Path, tmp_path: Path) -> None:
        out = tmp_path / "out"

        result = cli_runner.invoke(
            cli, ["-v", "-C", str(tmp_path), "convert", "main.js", "-s", str(source_tree), "-o", str(out)]
        )

        assert result.exit_code == 0, result.output
        assert "lib/math.js ->" in result.output
        assert "main.js ->" in result.output
        assert "(2 dependencies)" in result.output

    def test_missing_module(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        """An unresolvable entry fails with an error message."""
        result = cli_runner.invoke(cli, ["-C", str(tmp_path), "convert", "nope.js", "-s", str(tmp_path)])

        assert result.exit_code == 1
        assert "Module not found" in result.output

    def test_unsupported_module(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        """Formatter errors are reported and nothing is written."""
        (tmp_path / "bad.js").write_text("var a = 1;\nexport default a;\nexport var b = 2;\n")
        out = tmp_path / "out"

        result = cli_runner.invoke(
            cli, ["-C", str(tmp_path), "convert", "bad.js", "-s", str(tmp_path), "-o", str(out), "--direct-exports"]
        )

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert not out.exists()

    def test_invalid_pyproject(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text("[tool.amd-formatter\n")

        result = cli_runner.invoke(cli, ["-C", str(tmp_path), "convert", "main.js"])

        assert result.exit_code == 1
        assert "Invalid TOML" in result.output

    def test_printer_error_writes_nothing(
        self, cli_runner: CliRunner, source_tree: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A module that cannot be printed is reported before any file is written."""
        calls: list[n.Program] = []

        def failing_print(program: n.Program) -> str:
            calls.append(program)
            if len(calls) == 2:
                raise PrinterError("unsupported node")
            return "define([], function() {});\n"

        monkeypatch.setattr(writer, "print_program", failing_print)
        out = tmp_path / "out"

        result = cli_runner.invoke(
            cli, ["-C", str(tmp_path), "convert", "main.js", "-s", str(source_tree), "-o", str(out)]
        )

        assert result.exit_code == 1
        assert "Error: unsupported node" in result.output
        assert "Unexpected error" not in result.output
        assert not out.exists()
