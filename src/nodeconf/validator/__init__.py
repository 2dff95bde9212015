"""Configuration validator module.

Exports the ``Validator`` class, the ``validate`` convenience function,
``Diagnostic`` types, and all built-in validation rules.
"""
from __future__ import annotations

from nodeconf.validator.diagnostics import (
    ConfigValidationError,
    Diagnostic,
    DiagnosticSeverity,
)
from nodeconf.validator.rules import (
    DEFAULT_RULES,
    Rule,
    ValidationContext,
    ValidationOptions,
)
from nodeconf.validator.validator import Validator, validate

__all__ = [
    "Validator",
    "validate",
    "ValidationOptions",
    "ValidationContext",
    "ConfigValidationError",
    "Diagnostic",
    "DiagnosticSeverity",
    "Rule",
    "DEFAULT_RULES",
]
