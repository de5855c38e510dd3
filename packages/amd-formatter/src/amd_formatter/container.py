# SPDX-License-Identifier: MIT
"""Load, resolve and order the modules of a program.

The container parses each module once, caches it by path so that a module
imported from several places is always the same ``Module`` object, and
builds the import/export declaration collections the formatter reads.

Example:
    >>> from amd_formatter import MemoryResolver, ModuleContainer
    >>> container = ModuleContainer(MemoryResolver({
    ...     "a.js": "export var value = 1;",
    ...     "b.js": "import { value } from './a'; export default value + 1;",
    ... }))
    >>> [mod.path for mod in container.load(["b.js"])]
    ['a.js', 'b.js']
"""

from __future__ import annotations

from typing import Iterable, Optional

from . import nodes as n
from .formatter import DefaultExportError
from .module import DeclarationList, Module
from .parser import parse_module
from .resolver import ModuleResolutionError, Resolver


class ModuleContainer:
    """Holds every module reachable from a set of entry points.

    Implements the ``ModuleLookup`` protocol used by the formatter to name
    dependency aliases.
    """

    def __init__(self, resolver: Resolver) -> None:
        self.resolver = resolver
        self._modules: dict[str, Module] = {}
        self._resolved: set[str] = set()
        self._in_progress: set[str] = set()

    # -------------------------------------------------------------------------
    # ModuleLookup
    # -------------------------------------------------------------------------

    def module_id(self, mod: Module, source_path: str) -> str:
        return self.get_module(source_path, mod).id

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def get_module(self, source_path: str, importer: Optional[Module] = None) -> Module:
        """Return the module for ``source_path``, loading it if needed.

        Raises:
            ModuleResolutionError: If the source cannot be resolved or read
        """
        module_path = self.resolver.resolve_path(source_path, importer.path if importer else None)
        mod = self._modules.get(module_path)
        if mod is None:
            source = self.resolver.read(module_path)
            mod = Module(path=module_path, program=parse_module(source, module_path), lookup=self)
            self._modules[module_path] = mod
        return mod

    def load(self, entries: Iterable[str]) -> list[Module]:
        """Load the entry modules and everything they import.

        Returns:
            All reachable modules in execution order: every module comes
            after the modules it imports, except inside an import cycle
        """
        ordered: list[Module] = []
        visited: set[str] = set()
        for entry in entries:
            self._visit(self.get_module(entry), ordered, visited)
        return ordered

    def _visit(self, mod: Module, ordered: list[Module], visited: set[str]) -> None:
        if mod.path in visited:
            return
        visited.add(mod.path)
        self.resolve_declarations(mod)
        for dependency in self._dependencies(mod):
            self._visit(dependency, ordered, visited)
        ordered.append(mod)

    def _dependencies(self, mod: Module) -> list[Module]:
        dependencies: list[Module] = []
        for collection in (mod.imports, mod.exports):
            for source in collection.modules:
                if not any(source is existing for existing in dependencies):
                    dependencies.append(source)
        return dependencies

    # -------------------------------------------------------------------------
    # Declarations
    # -------------------------------------------------------------------------

    def resolve_declarations(self, mod: Module) -> None:
        """Build ``mod.imports`` and ``mod.exports`` from its statements.

        ``export * from`` is expanded to the named exports of its source,
        which is resolved first for that purpose. Names the module exports
        explicitly shadow star exports, as do names bound by an earlier
        ``export *``.

        Raises:
            DefaultExportError: If the module has several ``export default``
                statements
            DuplicateBindingError: If a name is imported or exported twice
        """
        if mod.path in self._resolved:
            return
        if mod.path in self._in_progress:
            raise ModuleResolutionError(f"Circular `export *` through {mod.path}")
        self._in_progress.add(mod.path)

        imports = DeclarationList()
        exports = DeclarationList()
        explicit = _explicit_export_names(mod.original.body)

        try:
            for statement in mod.original.body:
                if isinstance(statement, n.ImportDeclaration):
                    self._add_import(mod, imports, statement)
                elif isinstance(statement, n.ExportNamedDeclaration):
                    self._add_named_export(mod, exports, statement)
                elif isinstance(statement, n.ExportDefaultDeclaration):
                    if exports.find_specifier_by_name("default") is not None:
                        raise DefaultExportError(f"more than one default export detected in {mod.path}")
                    record = exports.record_for(statement, None, None)
                    exports.add(record, "default", _default_local_name(statement.declaration))
                elif isinstance(statement, n.ExportAllDeclaration):
                    self._add_export_all(mod, exports, statement, explicit)
        finally:
            self._in_progress.discard(mod.path)

        mod.imports = imports
        mod.exports = exports
        self._resolved.add(mod.path)

    def _add_import(self, mod: Module, imports: DeclarationList, node: n.ImportDeclaration) -> None:
        source_path = node.source.value
        source = self.get_module(source_path, mod)
        record = imports.record_for(node, source_path, source)
        for specifier in node.specifiers:
            if isinstance(specifier, n.ImportDefaultSpecifier):
                imports.add(record, specifier.local.name, "default")
            elif isinstance(specifier, n.ImportNamespaceSpecifier):
                imports.add(record, specifier.local.name, None)
            elif isinstance(specifier, n.ImportSpecifier):
                imports.add(record, specifier.local.name, specifier.imported.name)

    def _add_named_export(self, mod: Module, exports: DeclarationList, node: n.ExportNamedDeclaration) -> None:
        if node.source is not None:
            source_path = node.source.value
            source = self.get_module(source_path, mod)
            record = exports.record_for(node, source_path, source)
            for specifier in node.specifiers:
                exports.add(record, specifier.exported.name, specifier.local.name)
            return

        record = exports.record_for(node, None, None)
        declaration = node.declaration
        if isinstance(declaration, (n.FunctionDeclaration, n.ClassDeclaration)) and declaration.id is not None:
            exports.add(record, declaration.id.name, declaration.id.name)
        elif isinstance(declaration, n.VariableDeclaration):
            for declarator in declaration.declarations:
                exports.add(record, declarator.id.name, declarator.id.name)
        for specifier in node.specifiers:
            exports.add(record, specifier.exported.name, specifier.local.name)

    def _add_export_all(
        self,
        mod: Module,
        exports: DeclarationList,
        node: n.ExportAllDeclaration,
        explicit: set[str],
    ) -> None:
        source_path = node.source.value
        source = self.get_module(source_path, mod)
        self.resolve_declarations(source)
        record = exports.record_for(node, source_path, source)
        for name in source.exports.names:
            if name == "default" or name in explicit or exports.find_specifier_by_name(name) is not None:
                continue
            exports.add(record, name, name)


def _default_local_name(declaration: n.Node) -> Optional[str]:
    if isinstance(declaration, (n.FunctionDeclaration, n.ClassDeclaration)) and declaration.id is not None:
        return declaration.id.name
    return None


def _explicit_export_names(body: list[n.Node]) -> set[str]:
    """Names bound by every export statement other than ``export *``."""
    names: set[str] = set()
    for statement in body:
        if isinstance(statement, n.ExportDefaultDeclaration):
            names.add("default")
        elif isinstance(statement, n.ExportNamedDeclaration):
            declaration = statement.declaration
            if isinstance(declaration, (n.FunctionDeclaration, n.ClassDeclaration)) and declaration.id is not None:
                names.add(declaration.id.name)
            elif isinstance(declaration, n.VariableDeclaration):
                names.update(declarator.id.name for declarator in declaration.declarations)
            names.update(specifier.exported.name for specifier in statement.specifiers)
    return names
