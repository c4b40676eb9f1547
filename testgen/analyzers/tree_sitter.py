"""Tree-sitter parsing backend for TypeScript and TSX sources."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Any, Callable, Dict, List

import tree_sitter_typescript
from tree_sitter import Language, Parser

from .base import ParserBackend, SyntaxNode

_GRAMMARS: Dict[str, Callable[[], Any]] = {
    "typescript": tree_sitter_typescript.language_typescript,
    "tsx": tree_sitter_typescript.language_tsx,
}


class TreeSitterBackend(ParserBackend):
    """Parses component sources with the tree-sitter TypeScript grammars."""

    def __init__(self) -> None:
        self._parsers: Dict[str, Parser] = {}

    def parse(self, text: str, path: str = "") -> Any:
        parser = self._get_parser(self._language_for_file(path))
        return parser.parse(text.encode("utf-8"))

    def visit(self, tree: Any, callback: Callable[[SyntaxNode], None]) -> None:
        stack: List[SyntaxNode] = [tree.root_node]
        while stack:
            node = stack.pop()
            callback(node)
            stack.extend(reversed(node.children))

    def _get_parser(self, language_key: str) -> Parser:
        parser = self._parsers.get(language_key)
        if parser is not None:
            return parser
        parser = Parser(Language(_GRAMMARS[language_key]()))
        self._parsers[language_key] = parser
        return parser

    @staticmethod
    def _language_for_file(path: str) -> str:
        # Plain .ts files may contain `<T>value` casts that the TSX grammar rejects.
        suffix = PurePosixPath(path.replace("\\", "/")).suffix.lower()
        if suffix in {".ts", ".mts", ".cts"}:
            return "typescript"
        return "tsx"


__all__ = ["TreeSitterBackend"]
