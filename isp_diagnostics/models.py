"""Shared data models for rule evaluation."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from isp_diagnostics.metrics import derive_metrics


@dataclass(frozen=True)
class RuleCondition:
    """A single comparison of a field value against a threshold.

    Parameters
    ----------
    field : str
        Pillar key, ``answer:<key>``, ``computed:<key>`` or ``weighted_index``.
    operator : str
        One of ``<``, ``<=``, ``>``, ``>=``, ``=``.
    value : float
        Threshold compared against the resolved field value.
    """

    field: str
    operator: str
    value: float


@dataclass(frozen=True)
class RecommendationRule:
    """An administrator-authored condition set mapped to suggested offerings.

    Parameters
    ----------
    id : str
        Rule identifier.
    conditions : tuple[RuleCondition, ...]
        Ordered conditions.  A rule without conditions never matches.
    conditions_logic : str
        ``"and"`` or ``"or"``.
    title : str
        Recommendation headline.
    description : str
        Recommendation body text.
    cta_text : str
        Call-to-action button label.
    cta_url : str
        Call-to-action link target.
    recommended_product_ids : tuple[str, ...]
        Products suggested when the rule matches.
    recommended_package_ids : tuple[str, ...]
        Packages suggested when the rule matches.
    priority : int | None
        Display order, ascending.  ``None`` sorts after every numbered rule.
    """

    id: str
    conditions: tuple[RuleCondition, ...] = ()
    conditions_logic: str = "and"
    title: str = ""
    description: str = ""
    cta_text: str = ""
    cta_url: str = ""
    recommended_product_ids: tuple[str, ...] = ()
    recommended_package_ids: tuple[str, ...] = ()
    priority: int | None = None


@dataclass(frozen=True)
class DiagnosticRecord:
    """Data for one diagnostic submission, supplied fresh for each evaluation.

    Parameters
    ----------
    scores : Mapping[str, float]
        Pillar scores in ``[0, 10]``.
    raw_data : Mapping[str, float]
        Raw answers keyed by question ``field_key``.
    computed : Mapping[str, float]
        Derived metrics for ``raw_data``.
    """

    scores: Mapping[str, float] = field(default_factory=dict)
    raw_data: Mapping[str, float] = field(default_factory=dict)
    computed: Mapping[str, float] = field(default_factory=dict)

    @classmethod
    def from_answers(
        cls,
        scores: Mapping[str, float] | None,
        raw_data: Mapping[str, float] | None,
    ) -> DiagnosticRecord:
        """Build a record, deriving ``computed`` from *raw_data*."""
        scores = dict(scores or {})
        raw_data = dict(raw_data or {})
        return cls(scores=scores, raw_data=raw_data, computed=derive_metrics(raw_data))


@dataclass
class RecommendationResult:
    """Output of :func:`~isp_diagnostics.api.recommend`.

    Parameters
    ----------
    weighted_index : float
        Overall index of the record's pillar scores.
    computed : dict[str, float]
        Derived metrics used during evaluation.
    matched : list[RecommendationRule]
        Every matching rule, in priority order.
    recommendations : list[RecommendationRule]
        ``matched`` truncated for display.
    """

    weighted_index: float
    computed: dict[str, float] = field(default_factory=dict)
    matched: list[RecommendationRule] = field(default_factory=list)
    recommendations: list[RecommendationRule] = field(default_factory=list)
