"""Diagnostic types for the configuration validator.

A ``Diagnostic`` is one finding produced by a validation rule.  Errors
make a document unusable; warnings are advisory unless strict mode is on.
``ConfigValidationError`` aggregates every error message from a single
validation pass into one exception whose text is shown to operators as-is.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostics."""

    ERROR = auto()
    WARNING = auto()


@dataclass(frozen=True)
class Diagnostic:
    """A single validation finding.

    Parameters
    ----------
    severity:
        How serious this finding is.
    code:
        A short machine-readable identifier, e.g. ``"CFG003"``.
    message:
        Human-readable description of the problem.
    rule:
        The rule name that produced this diagnostic.
    fatal:
        When ``True`` the validator stops running further rules.
    """

    severity: DiagnosticSeverity
    code: str
    message: str
    rule: str = field(default="")
    fatal: bool = field(default=False)

    def __str__(self) -> str:
        return f"[{self.code}] {self.severity.name}: {self.message}"

    @property
    def is_error(self) -> bool:
        """Return True if this diagnostic should block the configuration."""
        return self.severity == DiagnosticSeverity.ERROR


@dataclass(eq=False)
class ConfigValidationError(Exception):
    """All error messages collected during one validation pass.

    Renders as::

        2 errors occurred:
        \\t* first message
        \\t* second message

    with a trailing blank line.
    """

    errors: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.args = (str(self),)

    def __str__(self) -> str:
        if len(self.errors) == 1:
            return f"1 error occurred:\n\t* {self.errors[0]}\n\n"
        points = "\n\t".join(f"* {e}" for e in self.errors)
        return f"{len(self.errors)} errors occurred:\n\t{points}\n\n"
