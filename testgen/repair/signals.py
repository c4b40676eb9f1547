"""Classification of runner diagnostics into tagged failure signals."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Sequence, Union


@dataclass(frozen=True)
class QuotedLiteral:
    """A literal attribute value was emitted with an extra pair of quotes."""


@dataclass(frozen=True)
class MalformedClosure:
    """A no-op closure attribute failed to parse."""


@dataclass(frozen=True)
class UnresolvedImport:
    module: str


@dataclass(frozen=True)
class NamedImportMissing:
    symbol: str


@dataclass(frozen=True)
class RoleNotFound:
    role: str


@dataclass(frozen=True)
class MissingProp:
    prop: str
    line: Optional[int] = None


@dataclass(frozen=True)
class ClassMismatch:
    """A ``toHaveClass`` expectation did not match the rendered element."""


@dataclass(frozen=True)
class TextNotFound:
    """A ``getByText`` query found nothing."""


@dataclass(frozen=True)
class StatusOrImageRole:
    role: str


FailureSignal = Union[
    QuotedLiteral,
    MalformedClosure,
    UnresolvedImport,
    NamedImportMissing,
    RoleNotFound,
    MissingProp,
    ClassMismatch,
    TextNotFound,
    StatusOrImageRole,
]

_MODULE_NOT_FOUND = re.compile(r"Cannot find module ['\"]([^'\"]+)['\"]")
_EXPORT_NOT_FOUND = re.compile(r"export '([^']+)' \(imported as '([^']+)'\) was not found")
_NO_EXPORTED_MEMBER = re.compile(r"Module '.*?' has no exported member '([^']+)'")
_ROLE_NOT_FOUND = re.compile(r"Unable to find an (?:accessible )?element with the role \"([^\"]+)\"")
_MISSING_PROP = re.compile(r"Property '([^']+)' is missing in type")
_LOCATION = re.compile(r"\.[cm]?[jt]sx?:(\d+):\d+")
_FALLBACK_ROLES = ("status", "img")


def _quoted_literal(text: str) -> Iterator[FailureSignal]:
    if "is not assignable to type" in text and "Did you mean" in text:
        yield QuotedLiteral()


def _malformed_closure(text: str) -> Iterator[FailureSignal]:
    if "Identifier expected" in text and "=>" in text:
        yield MalformedClosure()


def _unresolved_import(text: str) -> Iterator[FailureSignal]:
    for match in _MODULE_NOT_FOUND.finditer(text):
        if match.group(1).startswith("."):
            yield UnresolvedImport(match.group(1))


def _named_import_missing(text: str) -> Iterator[FailureSignal]:
    for match in _EXPORT_NOT_FOUND.finditer(text):
        yield NamedImportMissing(match.group(2))
    for match in _NO_EXPORTED_MEMBER.finditer(text):
        yield NamedImportMissing(match.group(1))


def _role_not_found(text: str) -> Iterator[FailureSignal]:
    for match in _ROLE_NOT_FOUND.finditer(text):
        yield RoleNotFound(match.group(1))


def _missing_prop(text: str) -> Iterator[FailureSignal]:
    for line in text.splitlines():
        for match in _MISSING_PROP.finditer(line):
            location = _LOCATION.search(line)
            yield MissingProp(match.group(1), int(location.group(1)) if location else None)


def _class_mismatch(text: str) -> Iterator[FailureSignal]:
    if "toHaveClass" in text and "Expected" in text:
        yield ClassMismatch()


def _text_not_found(text: str) -> Iterator[FailureSignal]:
    if "Unable to find an element with the text" in text:
        yield TextNotFound()


def _status_or_image_role(text: str) -> Iterator[FailureSignal]:
    for match in _ROLE_NOT_FOUND.finditer(text):
        if match.group(1) in _FALLBACK_ROLES:
            yield StatusOrImageRole(match.group(1))


# Table order is the order rewrites are applied in.
DETECTORS: Sequence[Callable[[str], Iterator[FailureSignal]]] = (
    _quoted_literal,
    _malformed_closure,
    _unresolved_import,
    _named_import_missing,
    _role_not_found,
    _missing_prop,
    _class_mismatch,
    _text_not_found,
    _status_or_image_role,
)


def classify(diagnostic_text: str) -> List[FailureSignal]:
    """Return the distinct signals found in ``diagnostic_text`` in table order."""
    signals: dict[FailureSignal, None] = {}
    for detector in DETECTORS:
        for signal in detector(diagnostic_text):
            signals.setdefault(signal, None)
    return list(signals)


__all__ = [
    "ClassMismatch",
    "DETECTORS",
    "FailureSignal",
    "MalformedClosure",
    "MissingProp",
    "NamedImportMissing",
    "QuotedLiteral",
    "RoleNotFound",
    "StatusOrImageRole",
    "TextNotFound",
    "UnresolvedImport",
    "classify",
]
