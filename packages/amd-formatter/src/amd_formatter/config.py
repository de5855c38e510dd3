# SPDX-License-Identifier: MIT
"""Formatter options loaded from the environment and pyproject.toml.

Options are resolved in this order, later sources winning:

1. Defaults (named modules on, direct exports off)
2. ``AMDFORMATTER_NAMED_MODULES`` / ``AMDFORMATTER_DIRECT_EXPORTS``
   environment variables
3. The ``[tool.amd-formatter]`` table of ``pyproject.toml``
4. Explicit overrides, e.g. command-line flags

Example pyproject.toml:
    [tool.amd-formatter]
    named-modules = false
    direct-exports = true
    source-dir = "lib"
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

NAMED_MODULES_ENV = "AMDFORMATTER_NAMED_MODULES"
DIRECT_EXPORTS_ENV = "AMDFORMATTER_DIRECT_EXPORTS"


class ConfigError(Exception):
    """Raised when formatter configuration is invalid."""

    pass


@dataclass(frozen=True)
class FormatterOptions:
    """Options controlling the AMD output.

    Attributes:
        named_modules: Pass the module name as the first ``define()`` argument
        direct_exports: Return a lone terminal default export as the bare
            value and bind single-specifier imports without a namespace alias
        source_dir: Root that module paths are relative to, if configured
    """

    named_modules: bool = True
    direct_exports: bool = False
    source_dir: Optional[Path] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "FormatterOptions":
        """Create options from environment variables.

        ``AMDFORMATTER_NAMED_MODULES=false`` disables named modules and
        ``AMDFORMATTER_DIRECT_EXPORTS=true`` enables direct exports; any
        other value leaves the default in place.
        """
        env = os.environ if environ is None else environ
        return cls(
            named_modules=env.get(NAMED_MODULES_ENV) != "false",
            direct_exports=env.get(DIRECT_EXPORTS_ENV) == "true",
        )

    @classmethod
    def from_pyproject(
        cls,
        project_dir: str | Path,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "FormatterOptions":
        """Load options from ``pyproject.toml`` on top of the environment.

        A missing ``pyproject.toml`` is not an error; the environment and
        defaults apply.

        Raises:
            ConfigError: If the file is not valid TOML or holds invalid values
        """
        project_path = Path(project_dir)
        pyproject_path = project_path / "pyproject.toml"
        base = cls.from_env(environ)

        if not pyproject_path.exists():
            return base

        try:
            with open(pyproject_path, "rb") as f:
                pyproject = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML syntax in {pyproject_path}: {e}") from e

        return base.merged(pyproject.get("tool", {}).get("amd-formatter", {}), project_path)

    def merged(self, table: Mapping[str, Any], project_dir: Optional[Path] = None) -> "FormatterOptions":
        """Apply a ``[tool.amd-formatter]`` table to these options."""
        if not isinstance(table, Mapping):
            raise ConfigError("[tool.amd-formatter] must be a table")

        updates: dict[str, Any] = {}
        for key, attr in (("named-modules", "named_modules"), ("direct-exports", "direct_exports")):
            if key in table:
                value = table[key]
                if not isinstance(value, bool):
                    raise ConfigError(f"tool.amd-formatter.{key} must be a boolean, got {value!r}")
                updates[attr] = value

        if "source-dir" in table:
            source_dir = table["source-dir"]
            if not isinstance(source_dir, str):
                raise ConfigError(f"tool.amd-formatter.source-dir must be a string, got {source_dir!r}")
            path = Path(source_dir)
            if project_dir is not None and not path.is_absolute():
                path = project_dir / path
            updates["source_dir"] = path

        return replace(self, **updates)

    def with_overrides(
        self,
        named_modules: Optional[bool] = None,
        direct_exports: Optional[bool] = None,
        source_dir: Optional[Path] = None,
    ) -> "FormatterOptions":
        """Return a copy with the given non-None values applied."""
        updates: dict[str, Any] = {}
        if named_modules is not None:
            updates["named_modules"] = named_modules
        if direct_exports is not None:
            updates["direct_exports"] = direct_exports
        if source_dir is not None:
            updates["source_dir"] = source_dir
        return replace(self, **updates)
