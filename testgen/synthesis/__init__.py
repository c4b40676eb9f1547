"""Test suite synthesis from component models."""

from .builder import TestSynthesizer
from .values import canonical_import_path, expected_role

__all__ = ["TestSynthesizer", "canonical_import_path", "expected_role"]
