"""Constants shared by the test synthesizer and the repairer."""

from __future__ import annotations

from typing import Dict, Tuple

# Ordered: the first keyword contained in the lowercased component name wins.
ROLE_KEYWORDS: Tuple[Tuple[str, str], ...] = (
    ("button", "button"),
    ("input", "textbox"),
    ("select", "combobox"),
    ("checkbox", "checkbox"),
    ("radio", "radio"),
    ("link", "link"),
)
DEFAULT_ROLE = "button"

LABEL_LITERALS: Dict[str, str] = {
    "label": "Test Label",
    "text": "Test Text",
}

# Used when a missing prop is known only by name from a runner message.
NAME_ONLY_LITERALS: Dict[str, str] = {**LABEL_LITERALS, "title": "Test Title"}
NAME_ONLY_FLAGS: Tuple[str, ...] = ("disabled", "loading", "visible")
CHILDREN_PROP = "children"
CHILDREN_LITERAL = "Test Content"

NOOP_CLOSURE = "() => {}"
INDENT = "    "

IMPORT_HEADER = (
    'import React from "react";\n'
    'import { render, screen, fireEvent } from "@testing-library/react";\n'
    'import "@testing-library/jest-dom";'
)

# event suffix -> (fireEvent method, phrase used in the case name, extra argument)
EVENT_TRIGGERS: Dict[str, Tuple[str, str, str]] = {
    "click": ("click", "clicked", ""),
    "doubleclick": ("dblClick", "double clicked", ""),
    "change": ("change", "changed", '{ target: { value: "test" } }'),
    "input": ("input", "receiving input", '{ target: { value: "test" } }'),
    "submit": ("submit", "submitted", ""),
    "focus": ("focus", "focused", ""),
    "blur": ("blur", "blurred", ""),
    "keydown": ("keyDown", "a key is pressed", '{ key: "Enter" }'),
    "keyup": ("keyUp", "a key is released", '{ key: "Enter" }'),
    "mouseenter": ("mouseEnter", "hovered", ""),
    "mouseleave": ("mouseLeave", "unhovered", ""),
}
DEFAULT_TRIGGER = EVENT_TRIGGERS["click"]

LOADING_PROP = "loading"
ICON_PROP = "icon"
DISABLED_PROP = "disabled"

STATUS_QUERY = 'screen.getByRole("status", { hidden: true })'
ICON_QUERY = 'screen.getByRole("img", { hidden: true }) || screen.getByTestId("icon")'
