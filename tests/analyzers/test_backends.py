"""Tests for parser backend selection."""

from __future__ import annotations

import pytest

from testgen.analyzers import DEFAULT_BACKEND, SourceAnalyzer, load_backend
from testgen.analyzers.tree_sitter import TreeSitterBackend


def test_load_backend_returns_tree_sitter_by_default() -> None:
    backend = load_backend()

    assert isinstance(backend, TreeSitterBackend)
    assert DEFAULT_BACKEND == "tree-sitter"


def test_load_backend_rejects_unknown_names() -> None:
    with pytest.raises(ValueError, match="flow"):
        load_backend("flow")


def test_tree_sitter_backend_visits_nodes_in_source_order() -> None:
    backend = TreeSitterBackend()
    tree = backend.parse("const A = 1;\nconst B = 2;\n", "values.ts")
    names: list[str] = []

    def _collect(node) -> None:
        if node.type == "variable_declarator":
            names.append(node.child_by_field_name("name").text.decode())

    backend.visit(tree, _collect)

    assert names == ["A", "B"]


def test_tree_sitter_backend_picks_grammar_from_extension() -> None:
    assert TreeSitterBackend._language_for_file("src/api.ts") == "typescript"
    assert TreeSitterBackend._language_for_file("src/Button.tsx") == "tsx"
    assert TreeSitterBackend._language_for_file("src/Legacy.jsx") == "tsx"


def test_source_analyzer_builds_its_backend_through_the_registry() -> None:
    assert isinstance(SourceAnalyzer().backend, TreeSitterBackend)
    assert isinstance(SourceAnalyzer(backend="Tree-Sitter").backend, TreeSitterBackend)

    with pytest.raises(ValueError, match="flow"):
        SourceAnalyzer(backend="flow")
