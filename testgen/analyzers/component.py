"""Structural analysis of React component sources."""

from __future__ import annotations

import re
from typing import Callable, Dict, Optional, Union

from ..logging import get_logger
from ..models import ComponentModel, ImportInfo, PropSpec, TypeDescriptor
from .backends import DEFAULT_BACKEND, load_backend
from .base import ParserBackend, SyntaxNode

PROPS_SUFFIX = "Props"

_FUNCTION_VALUES = {"arrow_function", "function_expression", "function"}
_WRAPPER_CALLEES = ("memo", "forwardRef")
_TOP_LEVEL_PARENTS = {"program", "export_statement"}
_COMPONENT_BASE = re.compile(r"\bextends\s+(?:React\.)?(?:Pure)?Component\b")
_JSDOC_LINE = re.compile(r"^\s*\*?\s?")


class SourceAnalyzer:
    """Builds a :class:`ComponentModel` from component source text.

    The analyzer never raises on malformed input. Tree-sitter recovers from
    syntax errors on its own; anything unexpected while walking the tree is
    logged and the partially populated model is returned.
    """

    def __init__(self, backend: Union[ParserBackend, str, None] = None) -> None:
        if backend is None or isinstance(backend, str):
            backend = load_backend(backend or DEFAULT_BACKEND)
        self.backend = backend
        self.logger = get_logger("analyzer")
        self._handlers: Dict[str, Callable[[SyntaxNode, ComponentModel], None]] = {
            "import_statement": self._analyze_import,
            "interface_declaration": self._analyze_interface,
            "type_alias_declaration": self._analyze_type_alias,
            "function_declaration": self._analyze_function,
            "class_declaration": self._analyze_class,
            "variable_declarator": self._analyze_variable,
            "export_statement": self._analyze_export,
        }

    def analyze(self, source_text: str, source_path: str) -> ComponentModel:
        model = ComponentModel(source_path=source_path)
        try:
            tree = self.backend.parse(source_text, source_path)
            self.backend.visit(tree, lambda node: self._visit(node, model))
        except Exception as exc:
            self.logger.warning("Analysis of %s degraded: %s", source_path, exc)
        if not model.name:
            self.logger.debug("No component declaration found in %s", source_path)
        return model

    def _visit(self, node: SyntaxNode, model: ComponentModel) -> None:
        handler = self._handlers.get(node.type)
        if handler is not None:
            handler(node, model)

    # ------------------------------------------------------------------
    # Declarations

    def _analyze_import(self, node: SyntaxNode, model: ComponentModel) -> None:
        source_node = node.child_by_field_name("source")
        if source_node is None:
            return
        info = ImportInfo(source=_strip_quotes(_text(source_node)))
        clause = next((child for child in node.named_children if child.type == "import_clause"), None)
        if clause is not None:
            for child in clause.named_children:
                if child.type == "identifier":
                    info.imports.append(_text(child))
                    info.is_default = True
                elif child.type == "named_imports":
                    for specifier in child.named_children:
                        if specifier.type != "import_specifier":
                            continue
                        local = specifier.child_by_field_name("alias") or specifier.child_by_field_name("name")
                        if local is not None:
                            info.imports.append(_text(local))
                elif child.type == "namespace_import":
                    binding = next((n for n in child.named_children if n.type == "identifier"), None)
                    if binding is not None:
                        info.imports.append(_text(binding))
        model.imports.append(info)

    def _analyze_interface(self, node: SyntaxNode, model: ComponentModel) -> None:
        name_node = node.child_by_field_name("name")
        if name_node is None or not _text(name_node).endswith(PROPS_SUFFIX):
            return
        body = node.child_by_field_name("body")
        if body is not None:
            self._collect_members(body, model)

    def _analyze_type_alias(self, node: SyntaxNode, model: ComponentModel) -> None:
        name_node = node.child_by_field_name("name")
        value = node.child_by_field_name("value")
        if name_node is None or value is None:
            return
        if _text(name_node).endswith(PROPS_SUFFIX) and value.type == "object_type":
            self._collect_members(value, model)

    def _collect_members(self, body: SyntaxNode, model: ComponentModel) -> None:
        for member in body.named_children:
            if member.type != "property_signature":
                continue
            name_node = member.child_by_field_name("name")
            if name_node is None:
                continue
            annotation = member.child_by_field_name("type")
            type_text = "any"
            if annotation is not None and annotation.named_children:
                type_text = _text(annotation.named_children[0])
            model.props.append(
                PropSpec(
                    name=_strip_quotes(_text(name_node)),
                    type=TypeDescriptor(type_text),
                    optional=any(child.type == "?" for child in member.children),
                    description=_jsdoc_description(member),
                )
            )

    # ------------------------------------------------------------------
    # Component identification

    def _analyze_function(self, node: SyntaxNode, model: ComponentModel) -> None:
        if not _is_top_level(node):
            return
        name_node = node.child_by_field_name("name")
        if name_node is not None:
            self._record_component(_text(name_node), "functional", model)

    def _analyze_class(self, node: SyntaxNode, model: ComponentModel) -> None:
        if not _is_top_level(node):
            return
        name_node = node.child_by_field_name("name")
        heritage = next((child for child in node.children if child.type == "class_heritage"), None)
        if name_node is None or heritage is None:
            return
        if _COMPONENT_BASE.search(_text(heritage)):
            self._record_component(_text(name_node), "class", model)

    def _analyze_variable(self, node: SyntaxNode, model: ComponentModel) -> None:
        name_node = node.child_by_field_name("name")
        value = node.child_by_field_name("value")
        if name_node is None or value is None or name_node.type != "identifier":
            return
        if value.type in _FUNCTION_VALUES or _is_wrapped_function(value):
            self._record_component(_text(name_node), "functional", model)

    @staticmethod
    def _record_component(name: str, kind: str, model: ComponentModel) -> None:
        if not name[:1].isupper():
            return
        model.name = name
        model.kind = kind
        model.add_export(name)

    def _analyze_export(self, node: SyntaxNode, model: ComponentModel) -> None:
        if not any(child.type == "default" for child in node.children):
            return
        value = node.child_by_field_name("value")
        if value is not None and value.type == "identifier":
            exported = _text(value)
        else:
            declaration = node.child_by_field_name("declaration")
            name_node = declaration.child_by_field_name("name") if declaration is not None else None
            if name_node is None:
                return
            exported = _text(name_node)
        model.has_default_export = True
        model.add_export(exported)


def _text(node: SyntaxNode) -> str:
    return (node.text or b"").decode("utf-8", errors="replace")


def _strip_quotes(value: str) -> str:
    return value.strip().strip("'\"`")


def _is_top_level(node: SyntaxNode) -> bool:
    parent = node.parent
    if parent is None or parent.type not in _TOP_LEVEL_PARENTS:
        return False
    if parent.type == "export_statement":
        return parent.parent is not None and parent.parent.type == "program"
    return True


def _is_wrapped_function(value: SyntaxNode) -> bool:
    """Detect ``memo(() => ...)`` and ``React.forwardRef(function ...)`` bindings."""
    if value.type != "call_expression":
        return False
    callee = value.child_by_field_name("function")
    arguments = value.child_by_field_name("arguments")
    if callee is None or arguments is None or not arguments.named_children:
        return False
    if not _text(callee).endswith(_WRAPPER_CALLEES):
        return False
    first = arguments.named_children[0]
    return first.type in _FUNCTION_VALUES or _is_wrapped_function(first)


def _jsdoc_description(member: SyntaxNode) -> Optional[str]:
    comment = member.prev_named_sibling
    if comment is None or comment.type != "comment":
        return None
    raw = _text(comment)
    if not raw.startswith("/**"):
        return None
    lines = []
    for line in raw[3:-2].splitlines():
        cleaned = _JSDOC_LINE.sub("", line, count=1).strip()
        if cleaned.startswith("@"):
            break
        if cleaned:
            lines.append(cleaned)
    return " ".join(lines) or None


__all__ = ["PROPS_SUFFIX", "SourceAnalyzer"]
