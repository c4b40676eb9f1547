"""Source analysis and pluggable parser backends."""

from __future__ import annotations

from .backends import DEFAULT_BACKEND, load_backend
from .base import ParserBackend, SyntaxNode
from .component import PROPS_SUFFIX, SourceAnalyzer

__all__ = [
    "DEFAULT_BACKEND",
    "PROPS_SUFFIX",
    "ParserBackend",
    "SourceAnalyzer",
    "SyntaxNode",
    "load_backend",
]
