# SPDX-License-Identifier: MIT
"""ESTree-shaped syntax nodes used by the formatter.

Only the node types the AMD rewrite reads or synthesizes are modelled. Code
the rewrite never touches is carried as ``RawStatement`` / ``RawExpression``
nodes holding the original source text, and parsed declarations keep their
text in ``raw`` so they print back unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union


@dataclass
class Node:
    """Base class for all syntax nodes."""

    @property
    def type(self) -> str:
        return type(self).__name__


# =============================================================================
# Expressions
# =============================================================================


@dataclass
class Identifier(Node):
    name: str


@dataclass
class Literal(Node):
    value: Any


@dataclass
class RawExpression(Node):
    """An expression kept verbatim from the source."""

    raw: str


@dataclass
class MemberExpression(Node):
    object: Node
    property: Node
    computed: bool = False


@dataclass
class AssignmentExpression(Node):
    operator: str
    left: Node
    right: Node


@dataclass
class CallExpression(Node):
    callee: Node
    arguments: list[Node] = field(default_factory=list)


@dataclass
class Property(Node):
    key: Node
    value: Node
    kind: str = "init"


@dataclass
class ObjectExpression(Node):
    properties: list[Property] = field(default_factory=list)


@dataclass
class ArrayExpression(Node):
    elements: list[Node] = field(default_factory=list)


@dataclass
class FunctionExpression(Node):
    id: Optional[Identifier]
    params: list[Identifier]
    body: "BlockStatement"


# =============================================================================
# Statements and declarations
# =============================================================================


@dataclass
class RawStatement(Node):
    """A top-level statement kept verbatim from the source."""

    raw: str


@dataclass
class Comment(RawStatement):
    """Comment text between or after top-level statements."""


@dataclass
class ExpressionStatement(Node):
    expression: Node


@dataclass
class ReturnStatement(Node):
    argument: Optional[Node] = None


@dataclass
class BlockStatement(Node):
    body: list[Node] = field(default_factory=list)


@dataclass
class FunctionDeclaration(Node):
    id: Optional[Identifier]
    params: list[Identifier] = field(default_factory=list)
    body: Optional[BlockStatement] = None
    raw: Optional[str] = None


@dataclass
class ClassDeclaration(Node):
    id: Optional[Identifier]
    raw: Optional[str] = None


@dataclass
class VariableDeclarator(Node):
    id: Identifier
    init: Optional[Node] = None


@dataclass
class VariableDeclaration(Node):
    kind: str
    declarations: list[VariableDeclarator] = field(default_factory=list)
    raw: Optional[str] = None


# =============================================================================
# Module declarations
# =============================================================================


@dataclass
class ImportSpecifier(Node):
    """``import { imported as local }``."""

    local: Identifier
    imported: Identifier


@dataclass
class ImportDefaultSpecifier(Node):
    """``import local from ...``."""

    local: Identifier


@dataclass
class ImportNamespaceSpecifier(Node):
    """``import * as local from ...``."""

    local: Identifier


@dataclass
class ImportDeclaration(Node):
    specifiers: list[Node]
    source: Literal


@dataclass
class ExportSpecifier(Node):
    """``export { local as exported }``."""

    local: Identifier
    exported: Identifier


@dataclass
class ExportNamedDeclaration(Node):
    declaration: Optional[Node] = None
    specifiers: list[ExportSpecifier] = field(default_factory=list)
    source: Optional[Literal] = None


@dataclass
class ExportDefaultDeclaration(Node):
    declaration: Node


@dataclass
class ExportAllDeclaration(Node):
    source: Literal


@dataclass
class Program(Node):
    body: list[Node] = field(default_factory=list)


ExportDeclaration = Union[ExportNamedDeclaration, ExportDefaultDeclaration, ExportAllDeclaration]

EXPORT_DECLARATION_TYPES = (ExportNamedDeclaration, ExportDefaultDeclaration, ExportAllDeclaration)


def is_export_declaration(node: Node) -> bool:
    """Check if a statement is any kind of export declaration."""
    return isinstance(node, EXPORT_DECLARATION_TYPES)


# =============================================================================
# Builders
# =============================================================================


def identifier(name: str | Identifier) -> Identifier:
    """Build an identifier, passing existing identifiers through."""
    if isinstance(name, Identifier):
        return name
    return Identifier(name)


def literal(value: Any) -> Literal:
    return Literal(value)


def member(obj: Node | str, prop: Node | str, computed: bool = False) -> MemberExpression:
    """Build ``obj.prop`` or, when computed, ``obj[prop]``."""
    obj_node = identifier(obj) if isinstance(obj, str) else obj
    if isinstance(prop, str):
        prop_node: Node = literal(prop) if computed else identifier(prop)
    else:
        prop_node = prop
    return MemberExpression(obj_node, prop_node, computed)


def assign(left: Node | str, right: Node) -> ExpressionStatement:
    """Build the statement ``left = right;``."""
    target = identifier(left) if isinstance(left, str) else left
    return ExpressionStatement(AssignmentExpression("=", target, right))


def call(callee: Node | str, *args: Node) -> ExpressionStatement:
    """Build the statement ``callee(args...);``."""
    target = identifier(callee) if isinstance(callee, str) else callee
    return ExpressionStatement(CallExpression(target, list(args)))


def var(name: str) -> VariableDeclaration:
    """Build ``var name;``."""
    return VariableDeclaration("var", [VariableDeclarator(identifier(name))])
