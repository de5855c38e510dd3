# SPDX-License-Identifier: MIT
"""Tests for the JavaScript printer."""

from __future__ import annotations

import pytest

from amd_formatter import nodes as n
from amd_formatter.printer import PrinterError, print_node, print_program


class TestPrintNode:
    """Tests for printing single nodes."""

    def test_registration_call(self):
        """Helper calls print with double-quoted keys."""
        stmt = n.call("__es6_export__", n.literal("a"), n.identifier("a"))

        assert print_node(stmt) == '__es6_export__("a", a);'

    def test_computed_member_assignment(self):
        """Computed members print with brackets."""
        stmt = n.assign("value", n.member("a$$", "value", computed=True))

        assert print_node(stmt) == 'value = a$$["value"];'

    def test_return_object(self):
        """Object literals print their keys and values inline."""
        stmt = n.ReturnStatement(n.ObjectExpression([n.Property(n.literal("default"), n.identifier("foo"))]))

        assert print_node(stmt) == 'return {"default": foo};'

    def test_identifier_keys(self):
        """Identifier keys print bare unless they are not valid names."""
        obj = n.ObjectExpression(
            [
                n.Property(n.identifier("ok"), n.literal(1)),
                n.Property(n.identifier("not-ok"), n.literal(2)),
            ]
        )

        assert print_node(n.ReturnStatement(obj)) == 'return {ok: 1, "not-ok": 2};'

    def test_variable_declaration(self):
        assert print_node(n.var("value")) == "var value;"

    def test_literals(self):
        """Literal values print as JavaScript literals."""
        assert print_node(n.literal(None)) == "null"
        assert print_node(n.literal(True)) == "true"
        assert print_node(n.literal(10)) == "10"
        assert print_node(n.literal('say "hi"')) == '"say \\"hi\\""'

    def test_sequence_argument_is_parenthesized(self):
        """A verbatim sequence expression stays a single argument."""
        stmt = n.call("__es6_export__", n.literal("default"), n.RawExpression("a, b"))

        assert print_node(stmt) == '__es6_export__("default", (a, b));'

    def test_comma_inside_call_is_not_parenthesized(self):
        """Commas nested in brackets or strings are not top level."""
        stmt = n.ReturnStatement(n.RawExpression("f(a, b) + ', '"))

        assert print_node(stmt) == "return f(a, b) + ', ';"

    def test_unknown_node(self):
        """Nodes without a printer raise PrinterError."""
        with pytest.raises(PrinterError):
            print_node(n.ImportDeclaration([], n.literal("./a")))


class TestPrintProgram:
    """Tests for printing whole programs."""

    def test_nested_function_is_indented(self):
        """Statements inside function bodies are indented two spaces per level."""
        factory = n.FunctionExpression(
            None,
            [n.identifier("__exports__")],
            n.BlockStatement(
                [
                    n.ExpressionStatement(n.literal("use strict")),
                    n.RawStatement("if (x) {\n  y();\n}"),
                ]
            ),
        )
        program = n.Program([n.call("define", n.ArrayExpression([n.literal("exports")]), factory)])

        assert print_program(program) == (
            'define(["exports"], function(__exports__) {\n'
            '  "use strict";\n'
            "  if (x) {\n"
            "    y();\n"
            "  }\n"
            "});\n"
        )

    def test_template_literal_is_not_reindented(self):
        """Multi-line template literals keep their exact contents."""
        factory = n.FunctionExpression(None, [], n.BlockStatement([n.RawStatement("var s = `a\nb`;")]))
        program = n.Program([n.call("define", n.ArrayExpression([]), factory)])

        assert "  var s = `a\nb`;\n" in print_program(program)

    def test_empty_function_body(self):
        factory = n.FunctionExpression(None, [], n.BlockStatement([]))

        assert print_program(n.Program([n.call("define", n.ArrayExpression([]), factory)])) == (
            "define([], function() {});\n"
        )
