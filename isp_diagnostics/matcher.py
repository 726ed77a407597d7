"""Rule matching for a single diagnostic record."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from isp_diagnostics.conditions import evaluate_conditions
from isp_diagnostics.models import DiagnosticRecord, RecommendationRule

logger = logging.getLogger(__name__)


def match_rules(rules: Iterable[RecommendationRule], record: DiagnosticRecord) -> list[RecommendationRule]:
    """Return the rules whose conditions hold for *record*.

    Input order is preserved, so rules sorted by ascending priority come
    back in priority order.  Neither argument is modified.

    Parameters
    ----------
    rules : Iterable[RecommendationRule]
        Normalized rules, already sorted by priority.
    record : DiagnosticRecord
        Scores, raw answers and derived metrics of one diagnostic.

    Returns
    -------
    list[RecommendationRule]
    """
    matched: list[RecommendationRule] = []
    evaluated = 0
    for rule in rules:
        evaluated += 1
        if evaluate_conditions(rule.conditions, rule.conditions_logic, record.scores, record.raw_data, record.computed):
            matched.append(rule)

    logger.debug("Matched %d of %d rules", len(matched), evaluated)
    return matched
