"""Core data models shared across testgen components."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

_CALLBACK_PATTERN = re.compile(r"^\(\s*\)\s*=>")
_FUNCTION_PATTERN = re.compile(r"^\(.*\)\s*=>", re.DOTALL)
_HANDLER_PATTERN = re.compile(r"(?:Handler|Function)(?:<.*>)?$", re.DOTALL)
_QUOTES = "'\"`"


@dataclass(frozen=True)
class TypeDescriptor:
    """Literal source text of a prop type annotation."""

    text: str

    @property
    def is_union(self) -> bool:
        return "|" in self.text and not self.is_function

    @property
    def alternatives(self) -> Tuple[str, ...]:
        """Return the quote-stripped literal alternatives of a union type."""
        if not self.is_union:
            return (self.text.strip(),)
        pieces = [piece.strip() for piece in self.text.split("|")]
        literals = tuple(piece.strip(_QUOTES) for piece in pieces if piece)
        return literals or (self.text.strip(),)

    @property
    def is_boolean(self) -> bool:
        return self.text.strip() == "boolean"

    @property
    def is_string(self) -> bool:
        return self.text.strip() == "string"

    @property
    def is_numeric(self) -> bool:
        return self.text.strip() == "number"

    @property
    def is_callback(self) -> bool:
        """True for zero-argument callbacks such as ``() => void``."""
        return bool(_CALLBACK_PATTERN.match(self.text.strip()))

    @property
    def is_function(self) -> bool:
        """True for any function type, including typed event handlers."""
        text = self.text.strip()
        return bool(_FUNCTION_PATTERN.match(text)) or bool(_HANDLER_PATTERN.search(text))


@dataclass(frozen=True)
class PropSpec:
    """A single member of a component's props contract."""

    name: str
    type: TypeDescriptor
    optional: bool
    description: Optional[str] = None

    @property
    def is_event(self) -> bool:
        return self.name.startswith("on") or self.type.is_callback


@dataclass
class ImportInfo:
    """An import declaration found in component source."""

    source: str
    imports: List[str] = field(default_factory=list)
    is_default: bool = False


@dataclass
class ComponentModel:
    """Structural summary of a component source file."""

    name: str = ""
    kind: str = "functional"
    props: List[PropSpec] = field(default_factory=list)
    imports: List[ImportInfo] = field(default_factory=list)
    exports: List[str] = field(default_factory=list)
    has_default_export: bool = False
    source_path: str = ""

    def add_export(self, name: str) -> None:
        if name not in self.exports:
            self.exports.append(name)

    def prop(self, name: str) -> Optional[PropSpec]:
        for prop in self.props:
            if prop.name == name:
                return prop
        return None

    def has_prop(self, name: str) -> bool:
        return self.prop(name) is not None

    @property
    def required_props(self) -> List[PropSpec]:
        return [prop for prop in self.props if not prop.optional]

    def to_dict(self) -> Dict[str, Any]:
        """Return the camelCase JSON shape reported by the analyze tool."""
        return {
            "componentName": self.name,
            "componentType": self.kind,
            "props": [_prop_to_dict(prop) for prop in self.props],
            "exports": list(self.exports),
            "imports": [
                {"source": info.source, "imports": list(info.imports), "isDefault": info.is_default}
                for info in self.imports
            ],
            "hasDefaultExport": self.has_default_export,
            "filePath": self.source_path,
        }


def _prop_to_dict(prop: PropSpec) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "name": prop.name,
        "type": prop.type.text,
        "optional": prop.optional,
    }
    if prop.type.is_union:
        payload["values"] = list(prop.type.alternatives)
    if prop.description:
        payload["description"] = prop.description
    return payload


@dataclass(frozen=True)
class TestCase:
    """A synthesized test case; only its fragment reaches the output."""

    __test__ = False

    name: str
    description: str
    source_fragment: str


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of running the generated suite through a test runner."""

    success: bool
    diagnostic_text: str
    command: Optional[Tuple[str, ...]] = None


class TerminalState(str, Enum):
    """States that end the verify-and-repair loop."""

    PASSED = "PASSED"
    EXHAUSTED = "EXHAUSTED"
    STALLED = "STALLED"


@dataclass(frozen=True)
class LoopState:
    """Per-request state threaded through the repair loop steps."""

    iteration: int
    test_source: str
    terminal: Optional[TerminalState] = None
    diagnostics: str = ""
    history: Tuple[str, ...] = ()
