"""Package-level entry point: recommend()."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from isp_diagnostics.config import EngineConfig, load_config
from isp_diagnostics.fields import weighted_index
from isp_diagnostics.matcher import match_rules
from isp_diagnostics.models import DiagnosticRecord, RecommendationResult, RecommendationRule
from isp_diagnostics.rule_loader import normalize_rule
from isp_diagnostics.validation import lint_rules

logger = logging.getLogger(__name__)


def recommend(
    rules: Iterable[RecommendationRule | Mapping[str, Any]],
    scores: Mapping[str, float] | None,
    raw_data: Mapping[str, float] | None,
    *,
    config: EngineConfig | str | Path | dict | None = None,
) -> RecommendationResult:
    """Evaluate one diagnostic against the recommendation rules.

    Derives the business metrics from *raw_data*, matches every rule and
    keeps the first ``max_recommendations`` matches for display.

    Parameters
    ----------
    rules : Iterable[RecommendationRule | Mapping]
        Rules in ascending priority order.  Stored rule records (dicts)
        are normalized first; their order is kept as given.
    scores : Mapping[str, float] | None
        Pillar scores of the diagnostic.
    raw_data : Mapping[str, float] | None
        Raw answers keyed by question ``field_key``.
    config : EngineConfig | str | Path | dict | None
        Engine settings, or anything :func:`load_config` accepts.

    Returns
    -------
    RecommendationResult

    Raises
    ------
    RuleValidationError
        If ``strict_validation`` is enabled and a rule has issues.

    Examples
    --------
    >>> rule = {"id": "r1", "conditions": [{"field": "computed:churn", "operator": ">", "value": 3}]}
    >>> result = recommend([rule], {}, {"active_clients": 100, "monthly_cancellations": 5})
    >>> [r.id for r in result.recommendations]
    ['r1']
    """
    if not isinstance(config, EngineConfig):
        config = load_config(config)

    normalized = [r if isinstance(r, RecommendationRule) else normalize_rule(r) for r in rules]

    if config.validate_rules or config.strict_validation:
        lint_rules(normalized, strict=config.strict_validation)

    record = DiagnosticRecord.from_answers(scores, raw_data)
    matched = match_rules(normalized, record)

    result = RecommendationResult(
        weighted_index=weighted_index(record.scores),
        computed=dict(record.computed),
        matched=matched,
        recommendations=matched[: config.max_recommendations],
    )

    logger.info(
        "Recommended %d of %d matched rules (%d evaluated) weighted_index=%.2f",
        len(result.recommendations),
        len(matched),
        len(normalized),
        result.weighted_index,
    )
    return result
