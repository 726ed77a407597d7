"""Derived business metrics computed from raw questionnaire answers."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from typing import Any

GROWTH_FACTOR = 1.2
CANCELLATION_FACTOR = 0.8

METRIC_KEYS: tuple[str, ...] = (
    "churn",
    "network_occupation",
    "market_penetration",
    "estimated_revenue",
    "avg_ticket",
    "monthly_client_balance",
    "annual_projection",
    "quinquennial_projection",
    "monthly_balance_20",
    "avg_ticket_20",
    "annual_projection_20",
    "quinquennial_projection_20",
)


def _round2(value: float) -> float:
    """Round half toward positive infinity to two decimals."""
    return math.floor(value * 100 + 0.5) / 100


def _percentage(numerator: float, denominator: float) -> float:
    return numerator / denominator * 100 if denominator > 0 else 0


def _to_number(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(number) else number


def derive_metrics(raw: Mapping[str, float]) -> dict[str, float]:
    """Compute the fixed set of derived metrics from raw answers.

    Total and deterministic: every missing, non-numeric or NaN answer
    counts as ``0`` and a ratio with a zero denominator is ``0``.  The
    ``_20`` metrics describe a potential scenario with 20% more new
    installs, 20% fewer cancellations and a 20% higher ticket.

    Parameters
    ----------
    raw : Mapping[str, float]
        Raw answers keyed by question ``field_key``.

    Returns
    -------
    dict[str, float]
        One entry per key in :data:`METRIC_KEYS`.

    Examples
    --------
    >>> derive_metrics({"active_clients": 100, "monthly_cancellations": 5})["churn"]
    5.0
    """
    active_clients = _to_number(raw.get("active_clients"))
    cancellations = _to_number(raw.get("monthly_cancellations"))
    capacity = _to_number(raw.get("network_capacity"))
    homes = _to_number(raw.get("homes_in_region"))
    plan_price = _to_number(raw.get("best_plan_price"))
    new_installs = _to_number(raw.get("monthly_new_installs"))

    avg_ticket = plan_price
    monthly_balance = new_installs - cancellations
    annual_projection = monthly_balance * 12 * avg_ticket

    monthly_balance_20 = new_installs * GROWTH_FACTOR - cancellations * CANCELLATION_FACTOR
    avg_ticket_20 = avg_ticket * GROWTH_FACTOR
    annual_projection_20 = monthly_balance_20 * 12 * avg_ticket_20

    return {
        "churn": _round2(_percentage(cancellations, active_clients)),
        "network_occupation": _round2(_percentage(active_clients, capacity)),
        "market_penetration": _round2(_percentage(active_clients, homes)),
        "estimated_revenue": _round2(plan_price * active_clients),
        "avg_ticket": avg_ticket,
        "monthly_client_balance": monthly_balance,
        "annual_projection": _round2(annual_projection),
        "quinquennial_projection": _round2(annual_projection * 5),
        "monthly_balance_20": _round2(monthly_balance_20),
        "avg_ticket_20": _round2(avg_ticket_20),
        "annual_projection_20": _round2(annual_projection_20),
        "quinquennial_projection_20": _round2(annual_projection_20 * 5),
    }


def extract_raw_data(questions: Iterable[Mapping[str, Any]], answers: Mapping[str, Any]) -> dict[str, float]:
    """Build a raw answer map from questionnaire answers.

    Only questions tagged with a ``field_key`` contribute.  An answer that
    is not numeric becomes ``0``.

    Parameters
    ----------
    questions : Iterable[Mapping[str, Any]]
        Question records with ``id`` and an optional ``field_key``.
    answers : Mapping[str, Any]
        Answer values keyed by question id.

    Returns
    -------
    dict[str, float]
    """
    raw: dict[str, float] = {}
    for question in questions:
        field_key = question.get("field_key")
        question_id = question.get("id")
        if field_key and question_id in answers:
            raw[field_key] = _to_number(answers[question_id])
    return raw
