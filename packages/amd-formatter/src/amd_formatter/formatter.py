# SPDX-License-Identifier: MIT
"""Rewrite resolved ES modules into AMD ``define()`` calls.

Example:
    Original (``b.js``):
        import { value } from './a';
        export default value + 1;

    Rewritten with named modules:
        define("b", ["./a"], function(a$$) {
          "use strict";
          var value;
          value = a$$["value"];
          return {"default": value + 1};
        });

Every import declaration is removed; the names it introduced are bound in a
prelude at the top of the factory body from the dependency parameters.
Exports are registered on the ``__exports__`` object through the
``__es6_export__`` helper, except for a lone default export which is
assigned directly or, when it ends the module, returned.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from . import nodes as n
from .config import FormatterOptions
from .module import DeclarationList, Module
from .replacement import Replacement, apply_replacements

EXPORT_HELPER = "__es6_export__"
EXPORTS_OBJECT = "__exports__"
RESERVED_NAMES = frozenset({EXPORT_HELPER, EXPORTS_OBJECT})


class FormatterError(Exception):
    """Base class for errors raised while formatting a module."""

    pass


class DefaultExportError(FormatterError):
    """Raised when a module's default export cannot be expressed in the active mode."""

    pass


class UnsupportedExportError(FormatterError):
    """Raised for export declarations of an unexpected shape."""

    pass


class MissingDeclarationError(FormatterError):
    """Raised when a source module has no matching declaration record."""

    pass


class ReservedNameError(FormatterError):
    """Raised when a module binds a name reserved for the generated code."""

    pass


class DefaultExportStrategy(enum.Enum):
    """How a module's default export reaches its dependents."""

    # return value / return {"default": value}, no __exports__ parameter
    TERMINAL_RETURN = "terminal-return"
    # __exports__["default"] = value
    MID_BODY_ASSIGN = "mid-body-assign"
    # __es6_export__("default", value)
    REGISTERED_CALL = "registered-call"


def classify_default_export(mod: Module, direct_exports: bool = False) -> DefaultExportStrategy:
    """Decide how the default export of ``mod`` is emitted.

    Modules without a default export, or whose default export coexists with
    other export declarations, register every export through the helper.

    Raises:
        DefaultExportError: If the module has several ``export default``
            statements, or direct-export mode cannot return the default value
            as the module's whole export set
    """
    original_body = mod.original.body
    default_statements = [stmt for stmt in original_body if isinstance(stmt, n.ExportDefaultDeclaration)]
    if len(default_statements) > 1:
        raise DefaultExportError(f"more than one default export detected in {mod.path}")

    if "default" not in mod.exports.names:
        return DefaultExportStrategy.REGISTERED_CALL

    if len(mod.exports.declarations) > 1 or mod.exports.names != ["default"]:
        if direct_exports:
            raise DefaultExportError(
                f"a default export alongside other exports detected in {mod.path}"
            )
        return DefaultExportStrategy.REGISTERED_CALL

    statements = [stmt for stmt in original_body if not isinstance(stmt, n.Comment)]
    last_statement = statements[-1] if statements else None
    if isinstance(last_statement, n.ExportDefaultDeclaration):
        return DefaultExportStrategy.TERMINAL_RETURN

    if direct_exports:
        raise DefaultExportError(f"a default export before the end of module detected in {mod.path}")
    return DefaultExportStrategy.MID_BODY_ASSIGN


@dataclass
class DependenciesMeta:
    """Parallel dependency paths and factory parameters of one module.

    Attributes:
        dependencies: Source path literals, e.g. ``["./foo", "./bar"]``
        parameters: Matching parameter identifiers, e.g. ``[foo$$, bar$$]``
        direct: Parameter names bound straight to a single specifier
    """

    dependencies: list[n.Literal] = field(default_factory=list)
    parameters: list[n.Identifier] = field(default_factory=list)
    direct: set[str] = field(default_factory=set)
    _aliases: dict[int, n.Identifier] = field(default_factory=dict, repr=False)

    def alias_for(self, source: Module) -> n.Identifier:
        return self._aliases[id(source)]

    def is_direct(self, alias: n.Identifier) -> bool:
        return alias.name in self.direct


class AMDFormatter:
    """Formats resolved modules as AMD modules.

    Named modules are produced unless ``options.named_modules`` is false.
    With ``options.direct_exports`` a module whose only export is a terminal
    default export returns the bare value, and single-specifier imports bind
    the dependency value directly.
    """

    def __init__(self, options: Optional[FormatterOptions] = None) -> None:
        self.options = options if options is not None else FormatterOptions.from_env()

    @property
    def named_modules(self) -> bool:
        return self.options.named_modules

    @property
    def direct_exports(self) -> bool:
        return self.options.direct_exports

    # -------------------------------------------------------------------------
    # Export registration
    # -------------------------------------------------------------------------

    def export_action(self, strategy: DefaultExportStrategy) -> Callable[[str, n.Node], n.Node]:
        """Return a builder for the statement that exports ``name`` as ``value``.

        Named exports always go through the helper. The default export takes
        the form chosen for the module.
        """

        def register(name: str, value: n.Node) -> n.Node:
            if name == "default":
                if strategy is DefaultExportStrategy.TERMINAL_RETURN:
                    if self.direct_exports:
                        return n.ReturnStatement(value)
                    return n.ReturnStatement(
                        n.ObjectExpression([n.Property(n.literal("default"), value)])
                    )
                if strategy is DefaultExportStrategy.MID_BODY_ASSIGN:
                    return n.assign(n.member(EXPORTS_OBJECT, "default", computed=True), value)
            return n.call(EXPORT_HELPER, n.literal(name), value)

        return register

    # -------------------------------------------------------------------------
    # Statement rewriting
    # -------------------------------------------------------------------------

    def default_export(
        self,
        mod: Module,
        declaration: n.Node,
        strategy: DefaultExportStrategy,
    ) -> list[n.Node]:
        """Statements replacing ``export default <declaration>``.

        A named function or class declaration is kept so later statements can
        still use its binding:

            export default function foo() {}
            -> function foo() {}
               __es6_export__("default", foo);
        """
        register = self.export_action(strategy)
        if isinstance(declaration, (n.FunctionDeclaration, n.ClassDeclaration)) and declaration.id is not None:
            return [declaration, register("default", declaration.id)]
        if isinstance(declaration, (n.FunctionDeclaration, n.ClassDeclaration)):
            # Anonymous declarations are plain expressions once unwrapped
            declaration = n.RawExpression(declaration.raw or "")
        return [register("default", declaration)]

    def process_export_declaration(
        self,
        mod: Module,
        index: int,
        node: n.Node,
        strategy: DefaultExportStrategy,
    ) -> Replacement:
        """Replace an export declaration.

        Declarations lose their ``export`` keyword and gain a registration
        call; bare specifier lists such as ``export { a, b as c }`` become
        registration calls only. Lists with a source and ``export *`` are
        dropped, since the prelude registers them.

        Raises:
            UnsupportedExportError: If the exported declaration is not a
                function, class or variable declaration
        """
        register = self.export_action(strategy)

        if isinstance(node, n.ExportDefaultDeclaration):
            return Replacement.swaps(index, self.default_export(mod, node.declaration, strategy))

        if isinstance(node, n.ExportAllDeclaration):
            return Replacement.removes(index)

        if not isinstance(node, n.ExportNamedDeclaration):
            raise UnsupportedExportError(f"unexpected export statement of type {node.type} in {mod.path}")

        declaration = node.declaration
        if isinstance(declaration, (n.FunctionDeclaration, n.ClassDeclaration)) and declaration.id is not None:
            # export function foo() {}
            # export class Foo {}
            return Replacement.swaps(index, [declaration, register(declaration.id.name, declaration.id)])

        if isinstance(declaration, n.VariableDeclaration):
            # export var a = 1, b = 2;
            statements: list[n.Node] = [declaration]
            for declarator in declaration.declarations:
                statements.append(register(declarator.id.name, declarator.id))
            return Replacement.swaps(index, statements)

        if declaration is not None:
            raise UnsupportedExportError(
                f"unexpected export style in {mod.path}, found a declaration of type: {declaration.type}"
            )

        if node.source is not None:
            return Replacement.removes(index)

        return Replacement.swaps(
            index,
            [register(specifier.exported.name, specifier.local) for specifier in node.specifiers],
        )

    def process_import_declaration(self, mod: Module, index: int, node: n.ImportDeclaration) -> Replacement:
        """Imports only feed the prelude and dependency list, so they are removed."""
        return Replacement.removes(index)

    def rewrite_body(self, mod: Module, strategy: DefaultExportStrategy) -> list[n.Node]:
        """Apply the import/export rewrites to the module's original body.

        Other statements, including reassignments of exported variables,
        are carried over untouched.
        """
        replacements: list[Replacement] = []
        for index, statement in enumerate(mod.original.body):
            if isinstance(statement, n.ImportDeclaration):
                replacements.append(self.process_import_declaration(mod, index, statement))
            elif n.is_export_declaration(statement):
                replacements.append(self.process_export_declaration(mod, index, statement, strategy))
        return apply_replacements(mod.original.body, replacements)

    # -------------------------------------------------------------------------
    # Dependencies and prelude
    # -------------------------------------------------------------------------

    def build_dependencies_meta(self, mod: Module) -> DependenciesMeta:
        """Build the dependency list and parameter list of ``mod``.

        Each distinct source module referenced by an import, then by an
        export, contributes one path literal and one parameter.

        Raises:
            MissingDeclarationError: If a source module has no declaration
                record referencing it
            ReservedNameError: If a parameter would shadow a generated name
        """
        meta = DependenciesMeta()
        seen: list[Module] = []

        collections: Sequence[DeclarationList] = (mod.imports, mod.exports)
        for declarations in collections:
            for source_module in declarations.modules:
                if any(required is source_module for required in seen):
                    continue
                seen.append(source_module)

                matching = declarations.find_declaration_for(source_module)
                if matching is None or matching.source_path is None:
                    raise MissingDeclarationError(
                        f"no matching declaration for source module: {source_module.path} in {mod.path}"
                    )

                specifiers = matching.specifiers
                if (
                    self.direct_exports
                    and len(specifiers) == 1
                    and self._can_bind_directly(mod, declarations, meta, specifiers[0].name)
                ):
                    alias = n.identifier(specifiers[0].name)
                    meta.direct.add(alias.name)
                else:
                    alias = n.identifier(mod.get_module_id(matching.source_path))

                if alias.name in RESERVED_NAMES:
                    raise ReservedNameError(f"`{alias.name}` is reserved, found in {mod.path}")

                meta._aliases[id(source_module)] = alias
                meta.parameters.append(alias)
                meta.dependencies.append(n.literal(matching.source_path))

        return meta

    @staticmethod
    def _can_bind_directly(mod: Module, declarations: DeclarationList, meta: DependenciesMeta, name: str) -> bool:
        """Whether ``name`` is free to be a factory parameter.

        A re-exported name also bound by an import keeps the module alias.
        """
        if any(param.name == name for param in meta.parameters):
            return False
        return declarations is mod.imports or name not in mod.imports.names

    def build_prelude(
        self,
        mod: Module,
        strategy: DefaultExportStrategy,
        meta: DependenciesMeta,
    ) -> list[n.Node]:
        """Bind every imported name and register every re-export of ``mod``.

            import { value } from './a';    var value;
                                      ->    value = a$$["value"];

            export { x } from './a';  ->    __es6_export__("x", a$$["x"]);
        """
        prelude: list[n.Node] = []

        for name in mod.imports.names:
            specifier = mod.imports.find_specifier_by_name(name)
            if specifier is None:
                continue
            if name in RESERVED_NAMES:
                raise ReservedNameError(f"`{name}` is reserved, found in {mod.path}")

            declaration = specifier.declaration
            if declaration.source is None:
                raise MissingDeclarationError(f"import of `{name}` has no source module in {mod.path}")

            alias = meta.alias_for(declaration.source)
            if meta.is_direct(alias):
                # Bound as the factory parameter itself
                continue
            prelude.append(n.var(specifier.name))
            if specifier.from_ is None:
                # import * as a from './a';
                prelude.append(n.assign(specifier.name, alias))
            elif self.direct_exports and specifier.from_ == "default":
                prelude.append(n.assign(specifier.name, alias))
            else:
                # import { value } from './a';
                # import a from './a';
                prelude.append(n.assign(specifier.name, n.member(alias, specifier.from_, computed=True)))

        register = self.export_action(strategy)
        for name in mod.exports.names:
            specifier = mod.exports.find_specifier_by_name(name)
            if specifier is None:
                raise MissingDeclarationError(f"no export specifier found for export name `{name}` from {mod.path}")

            declaration = specifier.declaration
            if declaration.source is None:
                continue

            alias = meta.alias_for(declaration.source)
            if meta.is_direct(alias) and specifier.from_ == "default":
                value: n.Node = alias
            else:
                value = n.member(alias, specifier.from_ or name, computed=True)
            prelude.append(register(name, value))

        return prelude

    # -------------------------------------------------------------------------
    # Module wrapping
    # -------------------------------------------------------------------------

    def export_helper(self) -> n.FunctionDeclaration:
        """``function __es6_export__(name, value) { __exports__[name] = value; }``"""
        return n.FunctionDeclaration(
            n.identifier(EXPORT_HELPER),
            [n.identifier("name"), n.identifier("value")],
            n.BlockStatement(
                [n.assign(n.member(EXPORTS_OBJECT, n.identifier("name"), computed=True), n.identifier("value"))]
            ),
        )

    def format_module(self, mod: Module) -> n.Program:
        """Rewrite one module into a program holding a single ``define()`` call."""
        strategy = classify_default_export(mod, self.direct_exports)
        meta = self.build_dependencies_meta(mod)
        prelude = self.build_prelude(mod, strategy, meta)
        body = prelude + self.rewrite_body(mod, strategy)

        if strategy is not DefaultExportStrategy.TERMINAL_RETURN:
            body.insert(0, self.export_helper())
        body.insert(0, n.ExpressionStatement(n.literal("use strict")))

        dependencies: list[n.Node] = list(meta.dependencies)
        parameters = list(meta.parameters)
        if strategy is not DefaultExportStrategy.TERMINAL_RETURN:
            dependencies.append(n.literal("exports"))
            parameters.append(n.identifier(EXPORTS_OBJECT))

        define_args: list[n.Node] = []
        if self.named_modules:
            define_args.append(n.literal(mod.name))
        define_args.append(n.ArrayExpression(dependencies))
        define_args.append(n.FunctionExpression(None, parameters, n.BlockStatement(body)))

        return n.Program([n.call("define", *define_args)])

    def build(self, modules: Sequence[Module]) -> list[n.Program]:
        """Convert modules, given in execution order, into AMD programs.

        Any error aborts the whole batch; no partial output is returned.
        """
        programs = [self.format_module(mod) for mod in modules]
        for mod, program in zip(modules, programs):
            mod.program.body = program.body
        return [mod.program for mod in modules]
