"""Default prop values, role inference and naming helpers for generated tests."""

from __future__ import annotations

import json
import re
from pathlib import PurePosixPath

from ..models import ComponentModel, PropSpec
from .constants import (
    CHILDREN_LITERAL,
    CHILDREN_PROP,
    DEFAULT_ROLE,
    LABEL_LITERALS,
    NAME_ONLY_FLAGS,
    NAME_ONLY_LITERALS,
    NOOP_CLOSURE,
    ROLE_KEYWORDS,
)

_SOURCE_EXTENSION = re.compile(r"\.(tsx?|jsx?)$")
_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_UPPER = re.compile(r"([A-Z])")
_WORD_BREAK = re.compile(r"[^A-Za-z0-9]+")


def expected_role(component_name: str) -> str:
    lowered = component_name.lower()
    for keyword, role in ROLE_KEYWORDS:
        if keyword in lowered:
            return role
    return DEFAULT_ROLE


def class_name_for(name: str) -> str:
    """``isOpen`` -> ``is-open``; ``size--small`` is returned unchanged."""
    return _UPPER.sub(r"-\1", name).lower()


def capitalize(value: str) -> str:
    return value[:1].upper() + value[1:]


def canonical_import_path(source_path: str) -> str:
    """Import path of the component as seen from its ``__tests__`` directory."""
    file_name = PurePosixPath(source_path.replace("\\", "/")).name
    return f"../{_SOURCE_EXTENSION.sub('', file_name)}"


def display_name(model: ComponentModel) -> str:
    """Component name used in the suite, falling back to one derived from the path."""
    if model.name:
        return model.name
    path = PurePosixPath(model.source_path.replace("\\", "/"))
    stem = _SOURCE_EXTENSION.sub("", path.name)
    if stem == "index" and path.parent.name:
        stem = path.parent.name
    words = [word for word in _WORD_BREAK.split(stem) if word]
    return "".join(capitalize(word) for word in words) or "Component"


def string_literal(value: str) -> str:
    return json.dumps(value)


def jsx_string_attribute(name: str, value: str) -> str:
    # JSX attribute strings have no escapes; fall back to an expression container.
    if '"' in value or "\\" in value:
        return f"{name}={{{string_literal(value)}}}"
    return f'{name}="{value}"'


def _scalar_default(prop: PropSpec) -> str:
    if prop.type.is_union:
        return prop.type.alternatives[0]
    if prop.name in LABEL_LITERALS:
        return LABEL_LITERALS[prop.name]
    return f"test-{prop.name}"


def inline_default(prop: PropSpec) -> str:
    """Render ``prop`` as a JSX attribute carrying its synthesized default."""
    if prop.type.is_function or prop.type.is_callback:
        return f"{prop.name}={{{NOOP_CLOSURE}}}"
    if prop.type.is_boolean:
        return prop.name
    if prop.type.is_numeric:
        return f"{prop.name}={{0}}"
    return jsx_string_attribute(prop.name, _scalar_default(prop))


def object_default(prop: PropSpec) -> str:
    """Render ``prop`` as an object-literal entry carrying its synthesized default."""
    key = prop.name if _IDENTIFIER.match(prop.name) else string_literal(prop.name)
    if prop.type.is_function or prop.type.is_callback:
        value = NOOP_CLOSURE
    elif prop.type.is_boolean:
        value = "true"
    elif prop.type.is_numeric:
        value = "0"
    else:
        value = string_literal(_scalar_default(prop))
    return f"{key}: {value}"


def inline_default_for_name(name: str) -> str:
    """Default attribute for a prop known only by name."""
    if name.startswith("on"):
        return f"{name}={{{NOOP_CLOSURE}}}"
    if name == CHILDREN_PROP:
        return f"{name}={{{string_literal(CHILDREN_LITERAL)}}}"
    if name in NAME_ONLY_FLAGS:
        return name
    if name in NAME_ONLY_LITERALS:
        return jsx_string_attribute(name, NAME_ONLY_LITERALS[name])
    return jsx_string_attribute(name, f"test-{name}")


def required_props_object(model: ComponentModel, overrides: dict[str, str] | None = None) -> str:
    required = model.required_props
    if not required:
        return "{}"
    overrides = overrides or {}
    entries = []
    for prop in required:
        if prop.name in overrides:
            entries.append(f"{prop.name}: {overrides[prop.name]}")
        else:
            entries.append(object_default(prop))
    return "{ " + ", ".join(entries) + " }"


__all__ = [
    "canonical_import_path",
    "capitalize",
    "class_name_for",
    "display_name",
    "expected_role",
    "inline_default",
    "inline_default_for_name",
    "jsx_string_attribute",
    "object_default",
    "required_props_object",
    "string_literal",
]
