"""Validator: decides whether a configuration document is usable.

The ``Validator`` runs a configurable set of rules against a ``Config``
for a given runtime mode.  Findings come back in rule-evaluation order.
In strict mode every warning is turned into an error prefixed with
``warning:`` so that nothing advisory slips through.

Usage
-----
::

    from nodeconf.runtime import Mode
    from nodeconf.validator import Validator

    warnings, error = Validator(strict=True).validate(config, Mode.METAL)
    if error is not None:
        print(error)
"""
from __future__ import annotations

import logging

from nodeconf.config.nodes import Config
from nodeconf.runtime import RuntimeMode
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

logger = logging.getLogger(__name__)


class Validator:
    """Rule engine for configuration documents.

    Parameters
    ----------
    rules:
        The list of validation rules to run.  Defaults to all built-in
        rules (``DEFAULT_RULES``).  Pass a custom list to extend or
        restrict which rules apply.
    local:
        When ``True``, rules that inspect the current host are skipped.
    strict:
        When ``True``, warnings are promoted to errors.
    """

    def __init__(
        self,
        rules: list[Rule] | None = None,
        local: bool = False,
        strict: bool = False,
    ) -> None:
        self._rules: list[Rule] = rules if rules is not None else list(DEFAULT_RULES)
        self._options = ValidationOptions(local=local, strict=strict)

    @property
    def options(self) -> ValidationOptions:
        return self._options

    def check(self, config: Config, mode: RuntimeMode) -> list[Diagnostic]:
        """Run the rules and return raw findings in evaluation order.

        A rule that reports a fatal diagnostic stops the run.  Severities
        are returned as the rules produced them; strict promotion happens
        in ``validate``.
        """
        ctx = ValidationContext(config=config, mode=mode, options=self._options)
        diagnostics: list[Diagnostic] = []
        for rule in self._rules:
            try:
                found = rule(ctx)
            except Exception as exc:  # noqa: BLE001
                # A broken rule is reported, not raised.
                logger.exception("rule %s raised", rule.__name__)
                found = [
                    Diagnostic(
                        severity=DiagnosticSeverity.ERROR,
                        code="CFG999",
                        message=f'internal validator error in rule "{rule.__name__}": {exc}',
                        rule=rule.__name__,
                    )
                ]
            logger.debug("rule %s: %d finding(s)", rule.__name__, len(found))
            diagnostics.extend(found)
            if any(d.fatal for d in found):
                logger.debug("rule %s is fatal, stopping", rule.__name__)
                break
        return diagnostics

    def validate(
        self, config: Config, mode: RuntimeMode
    ) -> tuple[list[str], ConfigValidationError | None]:
        """Validate ``config`` for ``mode``.

        Returns
        -------
        tuple[list[str], ConfigValidationError | None]
            Warning messages (always empty in strict mode) and the
            aggregated error, or ``None`` when there are no errors.
        """
        diagnostics = self.check(config, mode)

        errors = [d.message for d in diagnostics if d.is_error]
        warnings = [d.message for d in diagnostics if not d.is_error]

        if self._options.strict:
            errors.extend(f"warning: {w}" for w in warnings)
            warnings = []

        logger.debug(
            "validated %s document in %s mode: %d error(s), %d warning(s)",
            config.version,
            mode,
            len(errors),
            len(warnings),
        )

        if not errors:
            return warnings, None
        return warnings, ConfigValidationError(errors)

    def add_rule(self, rule: Rule) -> None:
        """Add a custom rule to this validator instance.

        Parameters
        ----------
        rule:
            A callable ``(ValidationContext) -> list[Diagnostic]``.
        """
        self._rules.append(rule)

    @property
    def rule_count(self) -> int:
        """Return the number of rules currently registered."""
        return len(self._rules)


def validate(
    config: Config,
    mode: RuntimeMode,
    *,
    local: bool = False,
    strict: bool = False,
) -> tuple[list[str], ConfigValidationError | None]:
    """Convenience function: validate ``config`` with the default rules.

    Parameters
    ----------
    config:
        The document to validate.
    mode:
        The runtime mode the document will be applied in.
    local:
        Skip rules that inspect the current host.
    strict:
        If ``True``, warnings become errors.
    """
    return Validator(local=local, strict=strict).validate(config, mode)
