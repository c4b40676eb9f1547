"""Base classes for parsing backends used by the source analyzer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Protocol, Sequence


class SyntaxNode(Protocol):
    """Subset of the tree-sitter node API the analyzer relies on."""

    type: str
    text: Optional[bytes]
    parent: Optional["SyntaxNode"]
    children: Sequence["SyntaxNode"]
    named_children: Sequence["SyntaxNode"]
    prev_named_sibling: Optional["SyntaxNode"]

    def child_by_field_name(self, name: str) -> Optional["SyntaxNode"]:
        ...


class ParserBackend(ABC):
    """Contract for backends that turn component source into a syntax tree."""

    @abstractmethod
    def parse(self, text: str, path: str = "") -> Any:
        """Parse source text once and return a backend-specific tree."""

    @abstractmethod
    def visit(self, tree: Any, callback: Callable[[SyntaxNode], None]) -> None:
        """Invoke ``callback`` for every node exactly once, pre-order depth-first."""
