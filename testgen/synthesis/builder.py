"""Deterministic synthesis of Jest + React Testing Library suites."""

from __future__ import annotations

import re
from typing import Callable, List, Sequence

from ..models import ComponentModel, PropSpec, TestCase
from .constants import (
    DEFAULT_TRIGGER,
    DISABLED_PROP,
    EVENT_TRIGGERS,
    ICON_PROP,
    ICON_QUERY,
    IMPORT_HEADER,
    INDENT,
    LOADING_PROP,
    STATUS_QUERY,
)
from .values import (
    canonical_import_path,
    capitalize,
    class_name_for,
    display_name,
    expected_role,
    inline_default,
    jsx_string_attribute,
    required_props_object,
    string_literal,
)

_NON_WORD = re.compile(r"[^A-Za-z0-9]+")


class TestSynthesizer:
    """Builds a test suite from a :class:`ComponentModel`.

    ``generate`` is a pure function of the model: it reads nothing but its
    argument and emits cases in a fixed order, so the same model always yields
    byte-identical source. The repair loop relies on this when diffing
    successive revisions.
    """

    __test__ = False

    def __init__(self) -> None:
        self._generators: Sequence[Callable[[ComponentModel], List[TestCase]]] = (
            self._basic_render_cases,
            self._prop_cases,
            self._event_cases,
            self._conditional_rendering_cases,
            self._accessibility_cases,
        )

    def generate(self, model: ComponentModel) -> str:
        return self.render_suite(model, self.build_cases(model))

    def build_cases(self, model: ComponentModel) -> List[TestCase]:
        cases: List[TestCase] = []
        for generator in self._generators:
            cases.extend(generator(model))
        return cases

    def render_suite(self, model: ComponentModel, cases: Sequence[TestCase]) -> str:
        name = display_name(model)
        import_line = f"import {{ {name} }} from {string_literal(canonical_import_path(model.source_path))};"
        lines = [
            IMPORT_HEADER,
            import_line,
            "",
            "/**",
            f" * Test suite for the {name} component.",
            " */",
            f"describe({string_literal(f'{name} Component')}, () => {{",
            "\n\n".join(case.source_fragment for case in cases),
            "});",
        ]
        return "\n".join(lines) + "\n"

    # ------------------------------------------------------------------
    # Case generators

    def _basic_render_cases(self, model: ComponentModel) -> List[TestCase]:
        name = display_name(model)
        attributes = " ".join(inline_default(prop) for prop in model.required_props)
        element = f"<{name} {attributes} />" if attributes else f"<{name} />"
        title = f"should render {name} component"
        return [
            _case(
                title,
                f"Test that the {name} component renders without crashing",
                [
                    f"render({element});",
                    "",
                    f"expect(screen.getByRole({string_literal(expected_role(name))})).toBeInTheDocument();",
                ],
            )
        ]

    def _prop_cases(self, model: ComponentModel) -> List[TestCase]:
        cases: List[TestCase] = []
        for prop in model.props:
            if prop.type.is_boolean:
                cases.append(self._boolean_case(model, prop))
            if prop.type.is_string:
                cases.append(self._string_case(model, prop))
            if prop.type.is_union:
                cases.extend(self._union_cases(model, prop))
        return cases

    def _boolean_case(self, model: ComponentModel, prop: PropSpec) -> TestCase:
        return _case(
            f"should handle {prop.name} prop",
            f"Test that the {prop.name} boolean prop works correctly",
            _role_assertion_body(
                model,
                prop.name,
                f"expect(element).toHaveClass({string_literal(class_name_for(prop.name))});",
            ),
        )

    def _string_case(self, model: ComponentModel, prop: PropSpec) -> TestCase:
        variable = text_variable(prop.name)
        return _case(
            f"should display correct {prop.name}",
            f"Test that the {prop.name} string prop displays correctly",
            [
                f"const {variable} = {string_literal(f'Test {prop.name}')};",
                f"const requiredProps = {required_props_object(model)};",
                "",
                f"render({_element(model, f'{prop.name}={{{variable}}}')});",
                "",
                f"expect(screen.getByText({variable})).toBeInTheDocument();",
            ],
        )

    def _union_cases(self, model: ComponentModel, prop: PropSpec) -> List[TestCase]:
        cases = []
        for value in prop.type.alternatives:
            expected = class_name_for(f"{prop.name}--{value}")
            cases.append(
                _case(
                    f"should handle {prop.name} as {value}",
                    f"Test that the {prop.name} prop works with {value} value",
                    _role_assertion_body(
                        model,
                        jsx_string_attribute(prop.name, value),
                        f"expect(element).toHaveClass({string_literal(expected)});",
                    ),
                )
            )
        return cases

    def _event_cases(self, model: ComponentModel) -> List[TestCase]:
        cases: List[TestCase] = []
        disabled = model.prop(DISABLED_PROP)
        for prop in model.props:
            if not prop.is_event:
                continue
            handler = handler_variable(prop.name)
            method, phrase, argument = _trigger_for(prop.name)
            fire = f"fireEvent.{method}(element, {argument});" if argument else f"fireEvent.{method}(element);"
            props_object = required_props_object(model, {prop.name: handler})
            enabled_flag = " disabled={false}" if disabled is not None and not disabled.optional else ""
            cases.append(
                _case(
                    f"should call {prop.name} handler when {phrase}",
                    f"Test that the {prop.name} handler fires once on {method}",
                    _handler_body(model, prop.name, handler, props_object, enabled_flag, fire)
                    + [f"expect({handler}).toHaveBeenCalledTimes(1);"],
                )
            )
            if disabled is None:
                continue
            cases.append(
                _case(
                    f"should not call {prop.name} when disabled",
                    f"Test that the {prop.name} handler is not called when the component is disabled",
                    _handler_body(model, prop.name, handler, props_object, f" {DISABLED_PROP}", fire)
                    + [f"expect({handler}).not.toHaveBeenCalled();"],
                )
            )
        return cases

    def _conditional_rendering_cases(self, model: ComponentModel) -> List[TestCase]:
        cases: List[TestCase] = []
        if model.has_prop(LOADING_PROP):
            cases.append(
                _case(
                    "should show loading state",
                    "Test that the loading state is displayed correctly",
                    [
                        f"const requiredProps = {required_props_object(model)};",
                        "",
                        f"render({_element(model, LOADING_PROP)});",
                        "",
                        f"expect({STATUS_QUERY}).toBeInTheDocument();",
                    ],
                )
            )
        if model.has_prop(ICON_PROP):
            cases.append(
                _case(
                    "should render with icon",
                    "Test that the icon is rendered when provided",
                    [
                        f"const requiredProps = {required_props_object(model)};",
                        "",
                        f"render({_element(model, jsx_string_attribute(ICON_PROP, 'test-icon'))});",
                        "",
                        f"const iconElement = {ICON_QUERY};",
                        "expect(iconElement).toBeInTheDocument();",
                    ],
                )
            )
        return cases

    def _accessibility_cases(self, model: ComponentModel) -> List[TestCase]:
        cases = [
            _case(
                "should be accessible via keyboard",
                "Test that the component supports keyboard navigation",
                _role_assertion_body(
                    model, "", 'expect(element).not.toHaveAttribute("tabIndex", "-1");'
                ),
            )
        ]
        if model.has_prop(DISABLED_PROP):
            cases.append(
                _case(
                    "should have correct aria-disabled when disabled",
                    "Test that aria-disabled is set correctly when disabled",
                    _role_assertion_body(
                        model,
                        DISABLED_PROP,
                        'expect(element).toHaveAttribute("aria-disabled", "true");',
                    ),
                )
            )
        return cases


def text_variable(prop_name: str) -> str:
    """Variable holding the display text for a string prop, e.g. ``testLabel``."""
    return "test" + "".join(capitalize(word) for word in _NON_WORD.split(prop_name) if word)


def handler_variable(prop_name: str) -> str:
    """Mock handler name for an event prop, e.g. ``onClick`` -> ``handleClick``."""
    base = prop_name[2:] if prop_name.startswith("on") and len(prop_name) > 2 else prop_name
    return "handle" + "".join(capitalize(word) for word in _NON_WORD.split(base) if word)


def _trigger_for(prop_name: str) -> tuple[str, str, str]:
    if not prop_name.startswith("on"):
        return DEFAULT_TRIGGER
    return EVENT_TRIGGERS.get(prop_name[2:].lower(), DEFAULT_TRIGGER)


def _element(model: ComponentModel, extra: str = "") -> str:
    name = display_name(model)
    suffix = f" {extra}" if extra else ""
    return f"<{name} {{...requiredProps}}{suffix} />"


def _role_assertion_body(model: ComponentModel, extra: str, assertion: str) -> List[str]:
    return [
        f"const requiredProps = {required_props_object(model)};",
        "",
        f"render({_element(model, extra)});",
        "",
        f"const element = screen.getByRole({string_literal(expected_role(display_name(model)))});",
        assertion,
    ]


def _handler_body(
    model: ComponentModel,
    prop_name: str,
    handler: str,
    props_object: str,
    flags: str,
    fire: str,
) -> List[str]:
    return [
        f"const {handler} = jest.fn();",
        f"const requiredProps = {props_object};",
        "",
        f"render({_element(model, f'{prop_name}={{{handler}}}{flags}')});",
        "",
        f"const element = screen.getByRole({string_literal(expected_role(display_name(model)))});",
        fire,
        "",
    ]


def _case(title: str, description: str, body: List[str]) -> TestCase:
    lines = [f"{INDENT}it({string_literal(title)}, () => {{"]
    lines.extend(f"{INDENT * 2}{line}" if line else "" for line in body)
    lines.append(f"{INDENT}}});")
    return TestCase(name=title, description=description, source_fragment="\n".join(lines))


__all__ = ["TestSynthesizer", "handler_variable", "text_variable"]
