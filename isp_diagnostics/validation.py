"""Lint recommendation rules for configuration mistakes.

Evaluation tolerates every mistake reported here (unknown fields resolve
to ``0``, unknown operators and empty condition lists never match), so a
misconfigured rule silently stops matching.  Running the linter when rules
are authored or loaded surfaces those rules instead.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from isp_diagnostics.catalog import is_known_field
from isp_diagnostics.conditions import KNOWN_LOGIC, KNOWN_OPERATORS
from isp_diagnostics.models import RecommendationRule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuleIssue:
    """A single problem found on a rule.

    Parameters
    ----------
    rule_id : str
        Identifier of the offending rule.
    message : str
        Description of the problem.
    condition_index : int | None
        Position of the offending condition, ``None`` for rule-level issues.
    """

    rule_id: str
    message: str
    condition_index: int | None = None

    def __str__(self) -> str:
        where = f" (condition {self.condition_index})" if self.condition_index is not None else ""
        return f"rule {self.rule_id!r}{where}: {self.message}"


class RuleValidationError(ValueError):
    """Raised by strict linting when at least one rule has issues."""

    def __init__(self, issues: list[RuleIssue]) -> None:
        self.issues = issues
        super().__init__("Invalid recommendation rules:\n" + "\n".join(f"  - {issue}" for issue in issues))


def lint_rule(rule: RecommendationRule) -> list[RuleIssue]:
    """Return every issue found on *rule*."""
    issues: list[RuleIssue] = []

    if not rule.conditions:
        issues.append(RuleIssue(rule.id, "rule has no conditions and can never match"))

    if rule.conditions_logic not in KNOWN_LOGIC:
        issues.append(RuleIssue(rule.id, f"unknown conditions_logic {rule.conditions_logic!r}, evaluated as 'and'"))

    for index, condition in enumerate(rule.conditions):
        if not is_known_field(condition.field):
            issues.append(RuleIssue(rule.id, f"unknown field {condition.field!r} always resolves to 0", index))
        if condition.operator not in KNOWN_OPERATORS:
            issues.append(RuleIssue(rule.id, f"unknown operator {condition.operator!r} never matches", index))

    return issues


def lint_rules(rules: Iterable[RecommendationRule], *, strict: bool = False) -> list[RuleIssue]:
    """Lint a collection of rules.

    Parameters
    ----------
    rules : Iterable[RecommendationRule]
        Rules to check.
    strict : bool
        Raise instead of only logging when issues are found.

    Returns
    -------
    list[RuleIssue]
        All issues, in rule order.

    Raises
    ------
    RuleValidationError
        If *strict* is set and any issue was found.
    """
    issues: list[RuleIssue] = []
    for rule in rules:
        issues.extend(lint_rule(rule))

    for issue in issues:
        logger.warning("Recommendation rule issue: %s", issue)

    if strict and issues:
        raise RuleValidationError(issues)
    return issues
