# SPDX-License-Identifier: MIT
"""Property-based tests for the AMD formatter.

These tests verify that, for generated module graphs:
- The dependency list and parameter list always have equal length
- Every distinct source module appears exactly once in the dependency list
- Import declarations never survive the rewrite
- Re-exported names never get a local variable
- The exports parameter is present unless a lone default export ends the module
"""

from __future__ import annotations

from hypothesis import given, settings, strategies as st

from amd_formatter import (
    AMDFormatter,
    DefaultExportStrategy,
    FormatterOptions,
    MemoryResolver,
    ModuleContainer,
    classify_default_export,
    print_program,
)


# =============================================================================
# Strategies for generating test data
# =============================================================================

DEPENDENCY_SOURCE = "export var alpha = 1, beta = 2, gamma = 3;\nexport default 4;\n"

IMPORT_STYLES = ("named", "default", "namespace", "reexport", "named+reexport")


@st.composite
def module_graphs(draw):
    """Generate a main module importing from a handful of dependencies.

    Returns:
        Tuple of (sources, used dependency paths, re-exported names, has default)
    """
    count = draw(st.integers(min_value=0, max_value=5))
    styles = draw(st.lists(st.sampled_from(IMPORT_STYLES), min_size=count, max_size=count))
    shuffled = draw(st.permutations(list(range(count))))

    sources = {f"dep{i}.js": DEPENDENCY_SOURCE for i in range(count)}
    lines: list[str] = []
    reexported: list[str] = []
    for i in shuffled:
        style = styles[i]
        if style in ("named", "named+reexport"):
            lines.append(f"import {{ alpha as alpha{i} }} from './dep{i}';")
        if style == "default":
            lines.append(f"import def{i} from './dep{i}';")
        if style == "namespace":
            lines.append(f"import * as ns{i} from './dep{i}';")
        if style in ("reexport", "named+reexport"):
            lines.append(f"export {{ beta as beta{i} }} from './dep{i}';")
            reexported.append(f"beta{i}")

    lines.append("var local = 0;")
    has_default = draw(st.booleans())
    if has_default:
        lines.append("export default local;")

    sources["main.js"] = "\n".join(lines) + "\n"
    used = [f"./dep{i}" for i in shuffled]
    return sources, used, reexported, has_default


# =============================================================================
# Property-Based Tests
# =============================================================================


class TestDependencyProperties:
    """Properties of the dependency and parameter lists."""

    @given(graph=module_graphs())
    @settings(max_examples=50, deadline=None)
    def test_lists_are_parallel_and_unique(self, graph):
        """Each distinct source appears once, paired with one parameter."""
        sources, used, _, _ = graph
        container = ModuleContainer(MemoryResolver(sources))
        modules = container.load(["main.js"])
        main = modules[-1]

        meta = AMDFormatter(FormatterOptions()).build_dependencies_meta(main)
        paths = [dep.value for dep in meta.dependencies]

        assert len(meta.dependencies) == len(meta.parameters)
        assert len(paths) == len(set(paths))
        assert sorted(paths) == sorted(used)
        for path, param in zip(paths, meta.parameters):
            assert param.name == container.get_module(path, main).id


class TestOutputProperties:
    """Properties of the printed AMD output."""

    @given(graph=module_graphs(), named=st.booleans())
    @settings(max_examples=50, deadline=None)
    def test_rewritten_main_module(self, graph, named):
        """Imports vanish, re-exports get no local and exports follow the strategy."""
        sources, used, reexported, has_default = graph
        container = ModuleContainer(MemoryResolver(sources))
        modules = container.load(["main.js"])
        main = modules[-1]
        strategy = classify_default_export(main)

        programs = AMDFormatter(FormatterOptions(named_modules=named)).build(modules)
        output = print_program(programs[-1])

        assert "import " not in output
        for name in reexported:
            assert f"var {name};" not in output
            assert f'__es6_export__("{name}", ' in output

        first_line = output.splitlines()[0]
        assert first_line.startswith('define("main", [' if named else "define([")
        for path in used:
            assert first_line.count(f'"{path}"') == 1

        if has_default and not reexported:
            assert strategy is DefaultExportStrategy.TERMINAL_RETURN
            assert '"exports"' not in first_line
            assert 'return {"default": local};' in output
        else:
            assert '"exports"' in first_line
            assert first_line.rstrip().endswith("__exports__) {")
