# SPDX-License-Identifier: MIT
"""Parse ES module source into the formatter's node model.

Parsing is delegated to ``esprima``. Only the top level of the module is
adapted: import and export declarations become structured nodes, and every
other statement is kept as verbatim source text together with the comments
that precede it.
"""

from __future__ import annotations

from typing import Any

import esprima

from . import nodes as n


class ModuleParseError(Exception):
    """Raised when module source cannot be parsed."""

    pass


def parse_module(source: str, filename: str = "<string>") -> n.Program:
    """Parse module source text.

    Args:
        source: JavaScript module source
        filename: Filename for error messages

    Returns:
        Program whose body holds the adapted top-level statements

    Raises:
        ModuleParseError: If the source is not a valid ES module
    """
    try:
        tree = esprima.parseModule(source, {"range": True})
    except Exception as e:
        raise ModuleParseError(f"Syntax error in {filename}: {e}") from e

    adapter = _ModuleAdapter(source)
    body: list[n.Node] = []
    position = 0
    for statement in tree.body:
        start, end = statement.range
        leading = source[position:start].strip()
        if leading:
            body.append(n.Comment(leading))
        body.append(adapter.statement(statement))
        position = end
    trailing = source[position:].strip()
    if trailing:
        body.append(n.Comment(trailing))
    return n.Program(body)


class _ModuleAdapter:
    """Converts esprima nodes into ``amd_formatter.nodes`` nodes."""

    def __init__(self, source: str) -> None:
        self.source = source

    def text(self, node: Any) -> str:
        start, end = node.range
        return self.source[start:end]

    def statement(self, node: Any) -> n.Node:
        node_type = node.type
        if node_type == "ImportDeclaration":
            return self.import_declaration(node)
        if node_type == "ExportNamedDeclaration":
            return self.export_named_declaration(node)
        if node_type == "ExportDefaultDeclaration":
            return n.ExportDefaultDeclaration(self.default_declaration(node.declaration))
        if node_type == "ExportAllDeclaration":
            return n.ExportAllDeclaration(n.literal(node.source.value))
        return n.RawStatement(self.text(node))

    def import_declaration(self, node: Any) -> n.ImportDeclaration:
        specifiers: list[n.Node] = []
        for specifier in node.specifiers or []:
            local = n.identifier(specifier.local.name)
            if specifier.type == "ImportDefaultSpecifier":
                specifiers.append(n.ImportDefaultSpecifier(local))
            elif specifier.type == "ImportNamespaceSpecifier":
                specifiers.append(n.ImportNamespaceSpecifier(local))
            else:
                specifiers.append(n.ImportSpecifier(local, n.identifier(specifier.imported.name)))
        return n.ImportDeclaration(specifiers, n.literal(node.source.value))

    def export_named_declaration(self, node: Any) -> n.ExportNamedDeclaration:
        declaration = getattr(node, "declaration", None)
        source = getattr(node, "source", None)
        return n.ExportNamedDeclaration(
            declaration=self.declaration(declaration) if declaration is not None else None,
            specifiers=[
                n.ExportSpecifier(n.identifier(spec.local.name), n.identifier(spec.exported.name))
                for spec in node.specifiers or []
            ],
            source=n.literal(source.value) if source is not None else None,
        )

    def declaration(self, node: Any) -> n.Node:
        """Adapt the declaration of ``export <declaration>``."""
        node_type = node.type
        if node_type == "FunctionDeclaration":
            return n.FunctionDeclaration(self._id(node), raw=self.text(node))
        if node_type == "ClassDeclaration":
            return n.ClassDeclaration(self._id(node), raw=self.text(node))
        if node_type == "VariableDeclaration":
            raw = self.text(node)
            if not raw.rstrip().endswith(";"):
                raw = raw.rstrip() + ";"
            declarators = [
                n.VariableDeclarator(n.identifier(name))
                for declarator in node.declarations
                for name in _pattern_names(declarator.id)
            ]
            return n.VariableDeclaration(node.kind, declarators, raw=raw)
        return n.RawStatement(self.text(node))

    def default_declaration(self, node: Any) -> n.Node:
        """Adapt the value of ``export default <value>``."""
        if node.type in ("FunctionDeclaration", "ClassDeclaration"):
            return self.declaration(node)
        return n.RawExpression(self.text(node))

    @staticmethod
    def _id(node: Any) -> n.Identifier | None:
        ident = getattr(node, "id", None)
        return n.identifier(ident.name) if ident is not None else None


def _pattern_names(pattern: Any) -> list[str]:
    """Collect the names bound by a declarator target, including destructuring."""
    if pattern is None:
        return []
    pattern_type = pattern.type
    if pattern_type == "Identifier":
        return [pattern.name]
    if pattern_type == "ObjectPattern":
        names: list[str] = []
        for prop in pattern.properties:
            target = prop.argument if prop.type == "RestElement" else prop.value
            names.extend(_pattern_names(target))
        return names
    if pattern_type == "ArrayPattern":
        return [name for element in pattern.elements for name in _pattern_names(element)]
    if pattern_type == "AssignmentPattern":
        return _pattern_names(pattern.left)
    if pattern_type == "RestElement":
        return _pattern_names(pattern.argument)
    return []
