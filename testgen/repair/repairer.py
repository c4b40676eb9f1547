"""Textual rewrites of generated suites driven by classified failure signals."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Type

from ..logging import get_logger
from ..models import ComponentModel
from ..synthesis.builder import text_variable
from ..synthesis.constants import NOOP_CLOSURE
from ..synthesis.values import (
    canonical_import_path,
    class_name_for,
    display_name,
    inline_default,
    inline_default_for_name,
    string_literal,
)
from .signals import (
    ClassMismatch,
    FailureSignal,
    MalformedClosure,
    MissingProp,
    NamedImportMissing,
    QuotedLiteral,
    RoleNotFound,
    StatusOrImageRole,
    TextNotFound,
    UnresolvedImport,
    classify,
)

FALLBACK_TEST_ID = "button"
STATUS_TEST_ID = "loading-spinner"
ICON_TEST_ID = "icon"

_QUOTED_LITERAL = re.compile(r"=\"'([^']+)'\"")
_LEADING_COMMA_CLOSURE = re.compile(r"([\w-]+)=\{\s*,\s*\(\)\s*=>\s*\{\}\s*\}")
_DANGLING_CLOSURE = re.compile(r"([\w-]+)=\{\(\)\s*=>\s*,?\s*\}")
_TEXT_QUERY = re.compile(r"screen\.getByText\((test[A-Z][A-Za-z0-9]*)\)")
_STATUS_QUERY = re.compile(r"screen\.getByRole\(\"status\", \{ hidden: true \}\)")
_IMAGE_QUERY = re.compile(
    r"screen\.getByRole\(\"img\", \{ hidden: true \}\)(?: \|\| screen\.getByTestId\(\"icon\"\))?"
)
_CLASS_FAMILIES = (
    (re.compile(r'expect\(element\)\.toHaveClass\("disabled"\);'), "expect(element).toBeDisabled();"),
    (
        re.compile(r'expect\(element\)\.toHaveClass\("loading"\);'),
        'expect(element).toHaveAttribute("aria-disabled", "true");',
    ),
    (re.compile(r'expect\(element\)\.toHaveClass\("size--([^"]+)"\);'), r'expect(element).toHaveClass("btn--\1");'),
    (re.compile(r'expect\(element\)\.toHaveClass\("variant--([^"]+)"\);'), r'expect(element).toHaveClass("btn--\1");'),
)


@dataclass(frozen=True)
class _Instantiation:
    """A ``render(<Component ...>)`` site; ``end`` points just past the attributes."""

    start: int
    end: int
    attributes: str
    line: int


class Repairer:
    """Applies the rewrite rule for each failure signal found in runner output.

    Rules only touch the test source and are independent of each other; any
    number of them may fire for one diagnostic. Every rewrite is idempotent for
    a fixed signal, so an unchanged result means no further progress is
    possible.
    """

    def __init__(self) -> None:
        self.logger = get_logger("repairer")
        self._rules: Dict[Type[object], Callable[..., str]] = {
            QuotedLiteral: self._strip_quoted_literal,
            MalformedClosure: self._normalize_closure,
            UnresolvedImport: self._rewrite_import_path,
            NamedImportMissing: self._convert_to_default_import,
            RoleNotFound: self._replace_role_query,
            MissingProp: self._inject_missing_prop,
            ClassMismatch: self._replace_class_assertions,
            TextNotFound: self._replace_text_query,
            StatusOrImageRole: self._replace_status_or_image_query,
        }

    def repair(
        self,
        test_source: str,
        diagnostic_text: str,
        model: ComponentModel,
        source_path: Optional[str] = None,
    ) -> str:
        revised = test_source
        for signal in classify(diagnostic_text):
            self.logger.debug("Applying repair for %s", signal)
            revised = self.apply(signal, revised, model, source_path or model.source_path)
        return revised

    def apply(
        self,
        signal: FailureSignal,
        test_source: str,
        model: ComponentModel,
        source_path: str,
    ) -> str:
        rule = self._rules[type(signal)]
        return rule(signal, test_source, model, source_path)

    # ------------------------------------------------------------------
    # Rules

    @staticmethod
    def _strip_quoted_literal(signal: QuotedLiteral, source: str, *_: object) -> str:
        return _QUOTED_LITERAL.sub(r'="\1"', source)

    @staticmethod
    def _normalize_closure(signal: MalformedClosure, source: str, *_: object) -> str:
        canonical = rf"\1={{{NOOP_CLOSURE}}}"
        source = _LEADING_COMMA_CLOSURE.sub(canonical, source)
        return _DANGLING_CLOSURE.sub(canonical, source)

    @staticmethod
    def _rewrite_import_path(
        signal: UnresolvedImport, source: str, model: ComponentModel, source_path: str
    ) -> str:
        canonical = canonical_import_path(source_path)
        pattern = re.compile(
            r"^(import\b[^\n]*?\bfrom\s*)([\"'])" + re.escape(signal.module) + r"\2",
            re.MULTILINE,
        )
        return pattern.sub(lambda match: f"{match.group(1)}{string_literal(canonical)}", source)

    @staticmethod
    def _convert_to_default_import(signal: NamedImportMissing, source: str, *_: object) -> str:
        symbol = re.escape(signal.symbol)
        pattern = re.compile(r"import\s*\{[^}]*\b" + symbol + r"\b[^}]*\}\s*from")
        return pattern.sub(f"import {signal.symbol} from", source)

    @staticmethod
    def _replace_role_query(signal: RoleNotFound, source: str, *_: object) -> str:
        query = f"screen.getByRole({string_literal(signal.role)})"
        return source.replace(query, f"screen.getByTestId({string_literal(FALLBACK_TEST_ID)})")

    def _inject_missing_prop(
        self, signal: MissingProp, source: str, model: ComponentModel, source_path: str
    ) -> str:
        sites = _find_instantiations(source, display_name(model))
        if not sites:
            return source
        if signal.line is None:
            site = sites[0]
        else:
            site = min(sites, key=lambda candidate: abs(candidate.line - signal.line))
        if _has_attribute(site.attributes, signal.prop):
            return source
        prop = model.prop(signal.prop)
        attribute = inline_default(prop) if prop is not None else inline_default_for_name(signal.prop)
        self.logger.debug("Injecting %s at line %d", attribute, site.line)
        return f"{source[:site.end]} {attribute}{source[site.end:]}"

    @staticmethod
    def _replace_class_assertions(signal: ClassMismatch, source: str, *_: object) -> str:
        for pattern, replacement in _CLASS_FAMILIES:
            source = pattern.sub(replacement, source)
        return source

    @staticmethod
    def _replace_text_query(
        signal: TextNotFound, source: str, model: ComponentModel, source_path: str
    ) -> str:
        variables = {text_variable(prop.name): prop.name for prop in model.props}

        def _test_id(match: re.Match[str]) -> str:
            variable = match.group(1)
            prop_name = variables.get(variable)
            if prop_name is None:
                stem = variable[len("test"):]
                prop_name = stem[:1].lower() + stem[1:]
            return f"screen.getByTestId({string_literal(class_name_for(prop_name))})"

        return _TEXT_QUERY.sub(_test_id, source)

    @staticmethod
    def _replace_status_or_image_query(signal: StatusOrImageRole, source: str, *_: object) -> str:
        if signal.role == "status":
            return _STATUS_QUERY.sub(f"screen.getByTestId({string_literal(STATUS_TEST_ID)})", source)
        return _IMAGE_QUERY.sub(f"screen.getByTestId({string_literal(ICON_TEST_ID)})", source)


def _find_instantiations(source: str, component: str) -> List[_Instantiation]:
    """Locate ``render(<Component ...>)`` sites, skipping over ``{...}`` expressions."""
    sites: List[_Instantiation] = []
    opener = re.compile(r"render\(\s*<" + re.escape(component) + r"\b")
    for match in opener.finditer(source):
        index = match.end()
        depth = 0
        quote: Optional[str] = None
        while index < len(source):
            char = source[index]
            if quote:
                if char == quote:
                    quote = None
            elif char in "\"'`":
                quote = char
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
            elif depth == 0 and (char == ">" or source.startswith("/>", index)):
                break
            index += 1
        else:
            continue
        end = index
        while end > match.end() and source[end - 1].isspace():
            end -= 1
        sites.append(
            _Instantiation(
                start=match.start(),
                end=end,
                attributes=source[match.end():end],
                line=source.count("\n", 0, match.start()) + 1,
            )
        )
    return sites


def _has_attribute(attributes: str, prop: str) -> bool:
    return re.search(r"(?<![\w-])" + re.escape(prop) + r"(?![\w-])", attributes) is not None


__all__ = ["FALLBACK_TEST_ID", "ICON_TEST_ID", "Repairer", "STATUS_TEST_ID"]
