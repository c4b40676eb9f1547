"""Failure classification and rewrite rules for generated suites."""

from .repairer import Repairer
from .signals import FailureSignal, classify

__all__ = ["FailureSignal", "Repairer", "classify"]
