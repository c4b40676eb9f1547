"""Tests for shared data models."""

from __future__ import annotations

import pytest

from testgen.models import ComponentModel, PropSpec, TypeDescriptor


@pytest.mark.parametrize(
    ("text", "alternatives"),
    [
        ("'primary' | 'secondary'", ("primary", "secondary")),
        ('"sm" | "md" | "lg"', ("sm", "md", "lg")),
        ("| 'a' | 'b'", ("a", "b")),
        ("'' | 'small'", ("", "small")),
        ("string", ("string",)),
    ],
)
def test_type_descriptor_alternatives(text: str, alternatives: tuple) -> None:
    assert TypeDescriptor(text).alternatives == alternatives


def test_type_descriptor_function_detection() -> None:
    assert TypeDescriptor("() => void").is_callback
    assert TypeDescriptor("(event: MouseEvent) => void").is_function
    assert not TypeDescriptor("(event: MouseEvent) => void").is_callback
    assert TypeDescriptor("ChangeEventHandler<HTMLInputElement>").is_function
    assert not TypeDescriptor("string").is_function


def test_prop_is_event_by_name_or_callback_type() -> None:
    assert PropSpec("onSelect", TypeDescriptor("(id: string) => void"), True).is_event
    assert PropSpec("render", TypeDescriptor("() => void"), True).is_event
    assert not PropSpec("label", TypeDescriptor("string"), False).is_event


def test_component_model_keeps_exports_unique() -> None:
    model = ComponentModel(name="Button")
    model.add_export("Button")
    model.add_export("Button")
    assert model.exports == ["Button"]


def test_function_type_with_union_parameter_is_not_a_union() -> None:
    handler = TypeDescriptor("(v: string | number) => void")

    assert handler.is_function
    assert not handler.is_union
    assert handler.alternatives == ("(v: string | number) => void",)
