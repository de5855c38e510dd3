# SPDX-License-Identifier: MIT
"""Pytest configuration and fixtures for formatter tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

import pytest
from click.testing import CliRunner

from amd_formatter import (
    AMDFormatter,
    FormatterOptions,
    MemoryResolver,
    Module,
    ModuleContainer,
    print_program,
)
from amd_formatter.config import DIRECT_EXPORTS_ENV, NAMED_MODULES_ENV


LoadModules = Callable[..., list[Module]]
BuildModules = Callable[..., dict[str, str]]


@pytest.fixture
def load_modules() -> LoadModules:
    """Load in-memory sources into resolved modules, in execution order."""

    def load(sources: dict[str, str], entries: Optional[list[str]] = None) -> list[Module]:
        container = ModuleContainer(MemoryResolver(sources))
        return container.load(entries or list(sources))

    return load


@pytest.fixture
def build_amd(load_modules: LoadModules) -> BuildModules:
    """Convert in-memory sources and return the printed output by module path."""

    def build(
        sources: dict[str, str],
        entries: Optional[list[str]] = None,
        *,
        named_modules: bool = True,
        direct_exports: bool = False,
    ) -> dict[str, str]:
        modules = load_modules(sources, entries)
        formatter = AMDFormatter(FormatterOptions(named_modules=named_modules, direct_exports=direct_exports))
        programs = formatter.build(modules)
        return {mod.path: print_program(program) for mod, program in zip(modules, programs)}

    return build


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep formatter environment variables from leaking into tests."""
    monkeypatch.delenv(NAMED_MODULES_ENV, raising=False)
    monkeypatch.delenv(DIRECT_EXPORTS_ENV, raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """Create a small ES module tree on disk."""
    src = tmp_path / "src"
    (src / "lib").mkdir(parents=True)
    (src / "lib" / "math.js").write_text(
        "export function add(a, b) {\n  return a + b;\n}\nexport var zero = 0;\n"
    )
    (src / "lib" / "answer.js").write_text("export default 42;\n")
    (src / "main.js").write_text(
        "import { add } from './lib/math';\n"
        "import answer from './lib/answer';\n"
        "export var total = add(answer, 1);\n"
    )
    return src
