"""Condition evaluation: single comparisons and their AND/OR combination."""

from __future__ import annotations

import operator
from collections.abc import Callable, Mapping, Sequence
from enum import Enum

from isp_diagnostics.fields import resolve_field
from isp_diagnostics.models import RuleCondition


class Operator(Enum):
    """Comparison operators a rule condition may use."""

    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    EQ = "="


class ConditionsLogic(Enum):
    """How the conditions of a rule are combined."""

    AND = "and"
    OR = "or"


_COMPARATORS: dict[Operator, Callable[[float, float], bool]] = {
    Operator.LT: operator.lt,
    Operator.LE: operator.le,
    Operator.GT: operator.gt,
    Operator.GE: operator.ge,
    Operator.EQ: operator.eq,
}

KNOWN_OPERATORS: frozenset[str] = frozenset(op.value for op in Operator)
KNOWN_LOGIC: frozenset[str] = frozenset(logic.value for logic in ConditionsLogic)


def evaluate_one(
    condition: RuleCondition,
    scores: Mapping[str, float],
    raw: Mapping[str, float],
    computed: Mapping[str, float],
) -> bool:
    """Apply the condition's operator to the resolved field value.

    ``=`` is exact equality with no tolerance.  An unknown operator never
    matches.
    """
    try:
        comparator = _COMPARATORS[Operator(condition.operator)]
    except ValueError:
        return False
    value = resolve_field(condition.field, scores, raw, computed)
    return comparator(value, condition.value)


def evaluate_conditions(
    conditions: Sequence[RuleCondition],
    logic: str | ConditionsLogic,
    scores: Mapping[str, float],
    raw: Mapping[str, float],
    computed: Mapping[str, float],
) -> bool:
    """Combine a rule's conditions into a single match decision.

    Parameters
    ----------
    conditions : Sequence[RuleCondition]
        Conditions to evaluate, in order.
    logic : str | ConditionsLogic
        ``"or"`` requires any condition to hold.  Every other value,
        ``"and"`` included, requires all of them.
    scores, raw, computed : Mapping[str, float]
        Data sources for field resolution.

    Returns
    -------
    bool
        ``False`` for an empty condition list.
    """
    if not conditions:
        return False

    if isinstance(logic, ConditionsLogic):
        logic = logic.value

    results = (evaluate_one(c, scores, raw, computed) for c in conditions)
    if logic == ConditionsLogic.OR.value:
        return any(results)
    return all(results)
