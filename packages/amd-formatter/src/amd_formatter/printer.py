# SPDX-License-Identifier: MIT
"""Serialize syntax nodes back to JavaScript source text.

Synthesized nodes are printed with two-space indentation and double-quoted
string literals. Nodes carrying ``raw`` source text print that text as-is.

Example:
    >>> from amd_formatter import nodes as n
    >>> print_node(n.call("__es6_export__", n.literal("a"), n.identifier("a")))
    '__es6_export__("a", a);'
"""

from __future__ import annotations

import json
import re

from . import nodes as n

INDENT = "  "

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


class PrinterError(Exception):
    """Raised when a node cannot be printed."""

    pass


def print_program(program: n.Program) -> str:
    """Print a whole program, one top-level statement per line."""
    return "\n".join(_statement(stmt, 0) for stmt in program.body) + "\n"


def print_node(node: n.Node) -> str:
    """Print a single statement or expression."""
    if isinstance(node, n.RawExpression) or _is_expression(node):
        return _expression(node, 0)
    return _statement(node, 0)


def _is_expression(node: n.Node) -> bool:
    return isinstance(
        node,
        (
            n.Identifier,
            n.Literal,
            n.MemberExpression,
            n.AssignmentExpression,
            n.CallExpression,
            n.ObjectExpression,
            n.ArrayExpression,
            n.FunctionExpression,
        ),
    )


def _indent_raw(raw: str, level: int) -> str:
    """Indent verbatim source text to the given nesting level.

    Continuation lines are left alone when the text contains a template
    literal, whose contents are whitespace-sensitive.
    """
    prefix = INDENT * level
    text = raw.strip()
    if level == 0 or "`" in text:
        return prefix + text
    return "\n".join(prefix + line if line.strip() else line for line in text.splitlines())


def _block(body: list[n.Node], level: int) -> str:
    if not body:
        return "{}"
    inner = "\n".join(_statement(stmt, level + 1) for stmt in body)
    return "{\n" + inner + "\n" + INDENT * level + "}"


def _statement(node: n.Node, level: int) -> str:
    prefix = INDENT * level

    if getattr(node, "raw", None) is not None and not isinstance(node, n.RawExpression):
        return _indent_raw(node.raw, level)

    if isinstance(node, n.ExpressionStatement):
        expr = node.expression
        text = _expression(expr, level)
        # A leading "{" or "function" would otherwise start a block or declaration
        if isinstance(expr, (n.ObjectExpression, n.FunctionExpression)):
            text = f"({text})"
        return f"{prefix}{text};"

    if isinstance(node, n.ReturnStatement):
        if node.argument is None:
            return f"{prefix}return;"
        return f"{prefix}return {_expression(node.argument, level)};"

    if isinstance(node, n.VariableDeclaration):
        parts = []
        for declarator in node.declarations:
            if declarator.init is None:
                parts.append(declarator.id.name)
            else:
                parts.append(f"{declarator.id.name} = {_expression(declarator.init, level)}")
        return f"{prefix}{node.kind} {', '.join(parts)};"

    if isinstance(node, n.FunctionDeclaration):
        if node.id is None:
            raise PrinterError("function declaration without a name")
        params = ", ".join(param.name for param in node.params)
        body = node.body.body if node.body is not None else []
        return f"{prefix}function {node.id.name}({params}) {_block(body, level)}"

    if isinstance(node, n.BlockStatement):
        return prefix + _block(node.body, level)

    if isinstance(node, n.ClassDeclaration):
        raise PrinterError("class declarations can only be printed from source text")

    raise PrinterError(f"cannot print statement of type {node.type}")


def _expression(node: n.Node, level: int) -> str:
    if isinstance(node, n.RawExpression):
        return node.raw.strip()

    if isinstance(node, n.Identifier):
        return node.name

    if isinstance(node, n.Literal):
        return _literal(node.value)

    if isinstance(node, n.MemberExpression):
        obj = _expression(node.object, level)
        if isinstance(node.object, (n.RawExpression, n.FunctionExpression, n.AssignmentExpression)):
            obj = f"({obj})"
        if node.computed:
            return f"{obj}[{_expression(node.property, level)}]"
        return f"{obj}.{_expression(node.property, level)}"

    if isinstance(node, n.AssignmentExpression):
        return f"{_expression(node.left, level)} {node.operator} {_operand(node.right, level)}"

    if isinstance(node, n.CallExpression):
        callee = _expression(node.callee, level)
        if isinstance(node.callee, (n.RawExpression, n.FunctionExpression)):
            callee = f"({callee})"
        args = ", ".join(_operand(arg, level) for arg in node.arguments)
        return f"{callee}({args})"

    if isinstance(node, n.ArrayExpression):
        return "[" + ", ".join(_operand(el, level) for el in node.elements) + "]"

    if isinstance(node, n.ObjectExpression):
        if not node.properties:
            return "{}"
        props = ", ".join(
            f"{_property_key(prop.key)}: {_operand(prop.value, level)}" for prop in node.properties
        )
        return "{" + props + "}"

    if isinstance(node, n.FunctionExpression):
        name = f" {node.id.name}" if node.id is not None else ""
        params = ", ".join(param.name for param in node.params)
        return f"function{name}({params}) {_block(node.body.body, level)}"

    raise PrinterError(f"cannot print expression of type {node.type}")


def _operand(node: n.Node, level: int) -> str:
    """Print an expression used as an argument, element or property value.

    Verbatim expressions are parenthesized when they contain a top-level
    comma, so a sequence expression is not split into several arguments.
    """
    text = _expression(node, level)
    if isinstance(node, n.RawExpression) and _has_top_level_comma(text):
        return f"({text})"
    return text


def _has_top_level_comma(text: str) -> bool:
    depth = 0
    quote = ""
    escaped = False
    for char in text:
        if quote:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == quote:
                quote = ""
            continue
        if char in "'\"`":
            quote = char
        elif char in "([{":
            depth += 1
        elif char in ")]}":
            depth -= 1
        elif char == "," and depth == 0:
            return True
    return False


def _property_key(key: n.Node) -> str:
    if isinstance(key, n.Identifier):
        return key.name if is_identifier_name(key.name) else _literal(key.name)
    if isinstance(key, n.Literal):
        return _literal(key.value)
    raise PrinterError(f"unsupported property key of type {key.type}")


def _literal(value: object) -> str:
    if value is None:
        return "null"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        return json.dumps(value)
    raise PrinterError(f"unsupported literal value: {value!r}")


def is_identifier_name(name: str) -> bool:
    """Check if a string is a plain JavaScript identifier name."""
    return bool(_IDENTIFIER_RE.match(name))
