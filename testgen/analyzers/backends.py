"""Parser backend registry: builtin factories plus installed entry points."""

from __future__ import annotations

from importlib import metadata
from typing import Callable, Dict, Iterable

from .base import ParserBackend

_ENTRY_POINT_GROUP = "testgen.backends"
DEFAULT_BACKEND = "tree-sitter"


def _tree_sitter_backend() -> ParserBackend:
    from .tree_sitter import TreeSitterBackend

    return TreeSitterBackend()


_BUILTIN_FACTORIES: Dict[str, Callable[[], ParserBackend]] = {
    DEFAULT_BACKEND: _tree_sitter_backend,
}


def load_backend(name: str = DEFAULT_BACKEND) -> ParserBackend:
    """Instantiate a parser backend by name, consulting installed entry points."""
    key = name.lower()
    factory = _BUILTIN_FACTORIES.get(key)
    if factory is not None:
        return factory()

    for entry in _iter_entry_points():
        if entry.name.lower() != key:
            continue
        try:
            loaded = entry.load()
        except Exception as exc:
            raise RuntimeError(f"Failed to load parser backend entry point '{entry.name}': {exc}") from exc
        return _coerce_backend(loaded)

    raise ValueError(f"Unknown parser backend requested: {name}")


def _coerce_backend(obj: object) -> ParserBackend:
    if isinstance(obj, ParserBackend):
        return obj
    if callable(obj):
        instance = obj()
        if isinstance(instance, ParserBackend):
            return instance
    raise TypeError("Parser backend entry point must be a ParserBackend subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


__all__ = ["DEFAULT_BACKEND", "load_backend"]
