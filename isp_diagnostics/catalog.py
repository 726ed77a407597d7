"""Catalog of fields a recommendation rule condition may reference."""

from __future__ import annotations

from dataclasses import dataclass

SCORES_GROUP = "Scores"
ANSWER_GROUP = "Answer Data"
COMPUTED_GROUP = "Computed Metrics"
POTENTIAL_GROUP = "Potential Metrics"


@dataclass(frozen=True)
class FieldDescriptor:
    """Presentation metadata for one condition field.

    Parameters
    ----------
    key : str
        Value stored on ``RuleCondition.field``.
    label : str
        Human-readable label for the rule-authoring form.
    group : str
        Menu group the field is listed under.
    display_format : str | None
        Unit hint (``"%"`` or ``"US$"``), ``None`` for plain counts.
    """

    key: str
    label: str
    group: str
    display_format: str | None = None


@dataclass(frozen=True)
class FieldKeyOption:
    """A field key a questionnaire question can be tagged with."""

    value: str
    label: str


FIELD_KEY_OPTIONS: tuple[FieldKeyOption, ...] = (
    FieldKeyOption("active_clients", "Active Clients"),
    FieldKeyOption("monthly_cancellations", "Monthly Cancellations"),
    FieldKeyOption("network_capacity", "Network Capacity"),
    FieldKeyOption("homes_in_region", "Homes in Region"),
    FieldKeyOption("best_plan_price", "Best-Selling Plan Price (US$)"),
    FieldKeyOption("monthly_new_installs", "New Installs/Month"),
)

_PILLAR_FIELDS = (
    FieldDescriptor("technical", "Technical Architecture", SCORES_GROUP),
    FieldDescriptor("financial", "Financial Management", SCORES_GROUP),
    FieldDescriptor("scale", "Commercial Scale", SCORES_GROUP),
    FieldDescriptor("expansion", "Expansion Potential", SCORES_GROUP),
    FieldDescriptor("commitment", "Strategic Commitment", SCORES_GROUP),
    FieldDescriptor("weighted_index", "Overall Index", SCORES_GROUP),
)

_ANSWER_FIELDS = tuple(FieldDescriptor(f"answer:{opt.value}", opt.label, ANSWER_GROUP) for opt in FIELD_KEY_OPTIONS)

_COMPUTED_FIELDS = (
    FieldDescriptor("computed:churn", "Churn (%)", COMPUTED_GROUP, "%"),
    FieldDescriptor("computed:network_occupation", "Network Occupation (%)", COMPUTED_GROUP, "%"),
    FieldDescriptor("computed:market_penetration", "Market Penetration (%)", COMPUTED_GROUP, "%"),
    FieldDescriptor("computed:estimated_revenue", "Estimated Revenue (US$)", COMPUTED_GROUP, "US$"),
    FieldDescriptor("computed:avg_ticket", "Average Ticket (US$)", COMPUTED_GROUP, "US$"),
    FieldDescriptor("computed:monthly_client_balance", "Client Balance/Month", COMPUTED_GROUP),
    FieldDescriptor("computed:annual_projection", "Current Annual Projection (US$)", COMPUTED_GROUP, "US$"),
    FieldDescriptor("computed:quinquennial_projection", "Current 5-Year Projection (US$)", COMPUTED_GROUP, "US$"),
)

_POTENTIAL_FIELDS = (
    FieldDescriptor("computed:monthly_balance_20", "Client Balance/Month +20%", POTENTIAL_GROUP),
    FieldDescriptor("computed:avg_ticket_20", "Average Ticket +20% (US$)", POTENTIAL_GROUP, "US$"),
    FieldDescriptor("computed:annual_projection_20", "Potential Annual Projection +20% (US$)", POTENTIAL_GROUP, "US$"),
    FieldDescriptor(
        "computed:quinquennial_projection_20", "Potential 5-Year Projection +20% (US$)", POTENTIAL_GROUP, "US$"
    ),
)

CONDITION_FIELDS: tuple[FieldDescriptor, ...] = _PILLAR_FIELDS + _ANSWER_FIELDS + _COMPUTED_FIELDS + _POTENTIAL_FIELDS

_KNOWN_KEYS = frozenset(f.key for f in CONDITION_FIELDS)


def list_fields() -> list[FieldDescriptor]:
    """Return every condition field in catalog order.

    Returns
    -------
    list[FieldDescriptor]
    """
    return list(CONDITION_FIELDS)


def group_fields() -> dict[str, list[FieldDescriptor]]:
    """Return condition fields grouped by ``group``.

    Groups appear in the order they are first seen, and fields keep their
    catalog order inside each group.

    Returns
    -------
    dict[str, list[FieldDescriptor]]
    """
    groups: dict[str, list[FieldDescriptor]] = {}
    for descriptor in CONDITION_FIELDS:
        groups.setdefault(descriptor.group, []).append(descriptor)
    return groups


def list_field_keys() -> list[FieldKeyOption]:
    """Return the field keys questionnaire questions may be tagged with."""
    return list(FIELD_KEY_OPTIONS)


def is_known_field(key: str) -> bool:
    """Return whether *key* is listed in the catalog."""
    return key in _KNOWN_KEYS
