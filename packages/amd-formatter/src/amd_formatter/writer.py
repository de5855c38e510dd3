# SPDX-License-Identifier: MIT
"""Convert a tree of ES modules into AMD modules on disk."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from .config import FormatterOptions
from .container import ModuleContainer
from .formatter import AMDFormatter
from .printer import print_program
from .resolver import FileResolver


class WriteError(Exception):
    """Raised when converted output cannot be written."""

    pass


@dataclass
class ConvertResult:
    """Result of converting one module.

    Attributes:
        module_path: Module path relative to the source root
        output_path: File the AMD module was written to
        dependencies: Number of entries in the ``define()`` dependency list,
            not counting ``"exports"``
    """

    module_path: str
    output_path: Path
    dependencies: int = 0


def convert(
    entries: Iterable[str],
    source_dir: str | Path,
    output_dir: str | Path,
    options: Optional[FormatterOptions] = None,
) -> list[ConvertResult]:
    """Convert the entry modules and everything they import.

    Each module is written to ``output_dir`` under its path relative to
    ``source_dir``. Nothing is written unless every module formats and
    prints; an I/O failure while writing can still leave earlier files.

    Args:
        entries: Entry module paths, relative to ``source_dir``
        source_dir: Root directory of the ES module sources
        output_dir: Directory to write AMD modules to
        options: Formatter options (defaults come from the environment)

    Returns:
        List of ConvertResult in execution order

    Raises:
        ModuleResolutionError: If an import cannot be resolved
        ModuleParseError: If a module cannot be parsed
        FormatterError: If a module cannot be expressed as AMD
        PrinterError: If a formatted module cannot be printed
        WriteError: If an output file cannot be written
    """
    container = ModuleContainer(FileResolver(source_dir))
    modules = container.load(entries)
    formatter = AMDFormatter(options)

    dependency_counts = [len(formatter.build_dependencies_meta(mod).dependencies) for mod in modules]
    programs = formatter.build(modules)
    texts = [print_program(program) for program in programs]

    output_path = Path(output_dir)
    results: list[ConvertResult] = []
    for mod, text, count in zip(modules, texts, dependency_counts):
        out_file = output_path / mod.path
        try:
            out_file.parent.mkdir(parents=True, exist_ok=True)
            out_file.write_text(text, encoding="utf-8")
        except OSError as e:
            raise WriteError(f"Failed to write {out_file}: {e}") from e
        results.append(ConvertResult(module_path=mod.path, output_path=out_file, dependencies=count))

    return results
