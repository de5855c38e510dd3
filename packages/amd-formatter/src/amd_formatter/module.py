# SPDX-License-Identifier: MIT
"""Resolved module records consumed by the formatter.

A ``Module`` holds its parsed program plus two declaration collections,
``imports`` and ``exports``, built by the container once every source path
has been resolved to another ``Module``. The formatter only reads these
records; it replaces the module's program body as its output.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional, Protocol

from . import nodes as n


class ModuleLookup(Protocol):
    """Resolves import sources of a module to stable alias identifiers."""

    def module_id(self, mod: "Module", source_path: str) -> str:
        """Return the alias identifier for ``source_path`` imported by ``mod``."""
        ...


def module_name_for_path(relative_path: str) -> str:
    """Derive a module name from its relative path (``lib/a.js`` -> ``lib/a``)."""
    name = relative_path.replace("\\", "/")
    if name.endswith(".js"):
        name = name[: -len(".js")]
    return name


def module_id_for_name(name: str) -> str:
    """Derive a stable identifier from a module name.

    Every character that cannot appear in a JavaScript identifier becomes
    ``$`` and the result ends with ``$$``, so it can never equal one of the
    reserved ``__es6_export__`` / ``__exports__`` names.

    Example:
        >>> module_id_for_name("rsvp/defer")
        'rsvp$defer$$'
    """
    ident = re.sub(r"[^\w$]", "$", name, flags=re.ASCII) + "$$"
    if ident[0].isdigit():
        ident = "$" + ident
    return ident


@dataclass(eq=False)
class Specifier:
    """A single name bound by an import or export declaration.

    Attributes:
        name: Local name for imports, exported name for exports
        from_: Imported or source-side name; None for namespace imports
        declaration: Owning declaration record
    """

    name: str
    from_: Optional[str]
    declaration: "DeclarationRecord" = field(repr=False)


@dataclass(eq=False)
class DeclarationRecord:
    """One import/export statement, or all statements sourced from one module.

    Attributes:
        node: The original statement node
        specifiers: Names bound by the declaration
        source_path: Source string as written (``"./a"``), if any
        source: The resolved source module, if any
    """

    node: n.Node
    specifiers: list[Specifier] = field(default_factory=list)
    source_path: Optional[str] = None
    source: Optional["Module"] = None

    def add_specifier(self, name: str, from_: Optional[str]) -> Specifier:
        specifier = Specifier(name=name, from_=from_, declaration=self)
        self.specifiers.append(specifier)
        return specifier


class DuplicateBindingError(Exception):
    """Raised when a module imports or exports the same name twice."""

    pass


@dataclass(eq=False)
class DeclarationList:
    """The imports or exports of one module."""

    modules: list["Module"] = field(default_factory=list)
    declarations: list[DeclarationRecord] = field(default_factory=list)
    names: list[str] = field(default_factory=list)
    _specifiers: dict[str, Specifier] = field(default_factory=dict, repr=False)

    def record_for(self, node: n.Node, source_path: Optional[str], source: Optional["Module"]) -> DeclarationRecord:
        """Get or create the declaration record for a statement.

        Sourced statements share one record per source module.
        """
        if source is not None:
            for declaration in self.declarations:
                if declaration.source is source:
                    return declaration
            if not any(mod is source for mod in self.modules):
                self.modules.append(source)

        declaration = DeclarationRecord(node=node, source_path=source_path, source=source)
        self.declarations.append(declaration)
        return declaration

    def add(self, declaration: DeclarationRecord, name: str, from_: Optional[str]) -> Specifier:
        """Bind ``name`` in this collection."""
        if name in self._specifiers:
            raise DuplicateBindingError(f"duplicate binding for name `{name}`")
        specifier = declaration.add_specifier(name, from_)
        self._specifiers[name] = specifier
        self.names.append(name)
        return specifier

    def find_specifier_by_name(self, name: str) -> Optional[Specifier]:
        return self._specifiers.get(name)

    def find_declaration_for(self, source: "Module") -> Optional[DeclarationRecord]:
        """Find the first declaration record sourced from ``source``."""
        for declaration in self.declarations:
            if declaration.source is source:
                return declaration
        return None


@dataclass(eq=False)
class Module:
    """A module ready to be formatted.

    Attributes:
        path: Path relative to the source root (``lib/a.js``)
        name: Module name used for named ``define()`` calls (``lib/a``)
        id: Stable identifier used to alias this module in dependents
        program: The program whose body is rewritten
        original: A snapshot of the program as parsed
        imports: Import declarations
        exports: Export declarations
        lookup: Resolves this module's source paths to alias identifiers
    """

    path: str
    program: n.Program
    lookup: Optional[ModuleLookup] = field(default=None, repr=False)
    name: str = ""
    id: str = ""
    original: n.Program = field(default=None, repr=False)  # type: ignore[assignment]
    imports: DeclarationList = field(default_factory=DeclarationList, repr=False)
    exports: DeclarationList = field(default_factory=DeclarationList, repr=False)

    def __post_init__(self) -> None:
        if not self.name:
            self.name = module_name_for_path(self.path)
        if not self.id:
            self.id = module_id_for_name(self.name)
        if self.original is None:
            self.original = n.Program(body=list(self.program.body))

    def get_module_id(self, source_path: str) -> str:
        """Return the alias identifier of the module imported as ``source_path``."""
        if self.lookup is None:
            raise LookupError(f"no module lookup configured for {self.path}")
        return self.lookup.module_id(self, source_path)

