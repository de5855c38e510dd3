# SPDX-License-Identifier: MIT
"""Resolve import sources to module paths and load their source text.

Module paths are POSIX-style and relative to a source root, always ending in
``.js``. Sources starting with ``./`` or ``../`` resolve against the
importing module's directory; any other source resolves against the root.

Example:
    >>> resolver = MemoryResolver({"lib/a.js": "", "lib/b.js": ""})
    >>> resolver.resolve_path("./b", "lib/a.js")
    'lib/b.js'
"""

from __future__ import annotations

import posixpath
from pathlib import Path
from typing import Mapping, Optional, Protocol


class ModuleResolutionError(Exception):
    """Raised when an import source cannot be resolved to a module."""

    pass


class Resolver(Protocol):
    """Maps import sources to module paths and reads module source."""

    def resolve_path(self, source_path: str, importer_path: Optional[str] = None) -> str:
        ...

    def read(self, module_path: str) -> str:
        ...


def normalize_module_path(source_path: str, importer_path: Optional[str] = None) -> str:
    """Turn an import source into a root-relative module path.

    Raises:
        ModuleResolutionError: If the path escapes the source root
    """
    source = source_path.replace("\\", "/")
    if importer_path is not None and (source.startswith("./") or source.startswith("../")):
        joined = posixpath.join(posixpath.dirname(importer_path.replace("\\", "/")), source)
    else:
        joined = source.lstrip("/")

    normalized = posixpath.normpath(joined)
    if normalized == ".." or normalized.startswith("../"):
        raise ModuleResolutionError(f"Module path escapes the source root: {source_path}")
    if not normalized.endswith(".js"):
        normalized += ".js"
    return normalized


class FileResolver:
    """Resolves modules from files under a root directory."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def resolve_path(self, source_path: str, importer_path: Optional[str] = None) -> str:
        module_path = normalize_module_path(source_path, importer_path)
        if not (self.root / module_path).is_file():
            where = f" (imported from {importer_path})" if importer_path else ""
            raise ModuleResolutionError(f"Module not found: {source_path}{where}")
        return module_path

    def read(self, module_path: str) -> str:
        try:
            return (self.root / module_path).read_text(encoding="utf-8")
        except OSError as e:
            raise ModuleResolutionError(f"Failed to read {module_path}: {e}") from e


class MemoryResolver:
    """Resolves modules from an in-memory mapping of path to source."""

    def __init__(self, sources: Mapping[str, str]) -> None:
        self.sources = {normalize_module_path(path): text for path, text in sources.items()}

    def resolve_path(self, source_path: str, importer_path: Optional[str] = None) -> str:
        module_path = normalize_module_path(source_path, importer_path)
        if module_path not in self.sources:
            where = f" (imported from {importer_path})" if importer_path else ""
            raise ModuleResolutionError(f"Module not found: {source_path}{where}")
        return module_path

    def read(self, module_path: str) -> str:
        try:
            return self.sources[module_path]
        except KeyError:
            raise ModuleResolutionError(f"Module not found: {module_path}") from None
