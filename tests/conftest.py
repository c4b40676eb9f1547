from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from testgen.models import ComponentModel, PropSpec, TypeDescriptor
from tests._fixtures.components import ProjectBuilder


@pytest.fixture(autouse=True)
def _reset_testgen_logger() -> Iterator[None]:
    """Undo configure_logging() calls made by CLI tests."""
    yield
    logger = logging.getLogger("testgen")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def project(tmp_path: Path) -> ProjectBuilder:
    """Provide a reusable project builder rooted at the pytest tmp_path."""
    return ProjectBuilder(tmp_path)


@pytest.fixture
def button_model() -> ComponentModel:
    """Model of a Button with a required label and click handler."""
    return ComponentModel(
        name="Button",
        props=[
            PropSpec("label", TypeDescriptor("string"), optional=False),
            PropSpec("onClick", TypeDescriptor("() => void"), optional=False),
            PropSpec("disabled", TypeDescriptor("boolean"), optional=True),
        ],
        exports=["Button"],
        source_path="src/components/Button.tsx",
    )


@pytest.fixture
def select_model() -> ComponentModel:
    return ComponentModel(
        name="Select",
        props=[
            PropSpec("size", TypeDescriptor("'small' | 'medium' | 'large'"), optional=True),
        ],
        exports=["Select"],
        source_path="src/components/Select.tsx",
    )
