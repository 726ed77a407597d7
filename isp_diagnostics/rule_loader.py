"""Rule store boundary: normalize stored rule records and load rule files."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import replace
from pathlib import Path
from typing import Any

import yaml

from isp_diagnostics.models import RecommendationRule, RuleCondition

logger = logging.getLogger(__name__)

LEGACY_DEFAULT_OPERATOR = "<"
LEGACY_DEFAULT_VALUE = 0.0


def _as_ids(value: Any) -> tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, (str, int)):
        return (str(value),)
    return tuple(str(v) for v in value)


def _parse_condition(entry: Any) -> RuleCondition:
    if not isinstance(entry, Mapping):
        msg = f"Rule condition must be a mapping, got {type(entry).__name__}"
        raise ValueError(msg)
    value = entry.get("value")
    return RuleCondition(
        field=str(entry.get("field", "")),
        operator=str(entry.get("operator", "")),
        value=float(value) if value is not None else LEGACY_DEFAULT_VALUE,
    )


def _conditions_of(data: Mapping[str, Any]) -> tuple[RuleCondition, ...]:
    conditions = data.get("conditions")
    if conditions:
        return tuple(_parse_condition(c) for c in conditions)

    legacy_field = data.get("condition_field")
    if legacy_field:
        legacy_value = data.get("condition_value")
        return (
            RuleCondition(
                field=str(legacy_field),
                operator=str(data.get("condition_operator") or LEGACY_DEFAULT_OPERATOR),
                value=float(legacy_value) if legacy_value is not None else LEGACY_DEFAULT_VALUE,
            ),
        )
    return ()


def normalize_rule(data: Mapping[str, Any]) -> RecommendationRule:
    """Convert a stored rule record into a :class:`RecommendationRule`.

    Records written before multi-condition rules existed carry a single
    ``condition_field`` / ``condition_operator`` / ``condition_value``
    triple and a scalar ``recommended_product_id``; both are folded into
    the list form.  A record with neither shape gets no conditions and
    therefore never matches.

    Parameters
    ----------
    data : Mapping[str, Any]
        Rule record as read from the rule store.

    Returns
    -------
    RecommendationRule

    Raises
    ------
    ValueError
        If *data* is not a mapping or a condition entry is malformed.
    """
    if not isinstance(data, Mapping):
        msg = f"Rule record must be a mapping, got {type(data).__name__}"
        raise ValueError(msg)

    product_ids = data.get("recommended_product_ids")
    if not product_ids:
        product_ids = data.get("recommended_product_id")

    priority = data.get("priority")

    return RecommendationRule(
        id=str(data.get("id", "")),
        conditions=_conditions_of(data),
        conditions_logic=str(data.get("conditions_logic") or "and").lower(),
        title=data.get("title") or "",
        description=data.get("description") or "",
        cta_text=data.get("cta_text") or "",
        cta_url=data.get("cta_url") or "",
        recommended_product_ids=_as_ids(product_ids),
        recommended_package_ids=_as_ids(data.get("recommended_package_ids")),
        priority=int(priority) if priority is not None else None,
    )


def sort_rules(rules: Iterable[RecommendationRule]) -> list[RecommendationRule]:
    """Sort rules by ascending priority, keeping input order for ties.

    Rules without a priority come last.
    """
    return sorted(rules, key=lambda r: (r.priority is None, r.priority or 0))


def load_rules(source: str | Path | Iterable[Mapping[str, Any]] | Mapping[str, Any]) -> list[RecommendationRule]:
    """Load, normalize and sort recommendation rules.

    Parameters
    ----------
    source : str | Path | Iterable[Mapping] | Mapping
        Path to a YAML or JSON file, a list of rule records, or a mapping
        with a top-level ``rules`` list.

    Returns
    -------
    list[RecommendationRule]
        Normalized rules in ascending priority order.

    Raises
    ------
    FileNotFoundError
        If *source* is a path that does not exist.
    ValueError
        If the payload does not hold a list of rule records.
    """
    if isinstance(source, (str, Path)):
        records = _read_rule_file(Path(source))
    else:
        records = source

    if isinstance(records, Mapping):
        records = records.get("rules", [])

    if records is None:
        records = []
    if isinstance(records, (str, bytes)) or not isinstance(records, Iterable):
        msg = f"Expected a list of rule records, got {type(records).__name__}"
        raise ValueError(msg)

    rules = sort_rules(normalize_rule(record) for record in records)
    logger.debug("Loaded %d recommendation rules", len(rules))
    return rules


def _read_rule_file(path: Path) -> Any:
    if not path.exists():
        msg = f"Rule file not found: {path}"
        raise FileNotFoundError(msg)

    with open(path, encoding="utf-8") as fh:
        if path.suffix == ".json":
            return json.load(fh)
        return yaml.safe_load(fh)


def rule_to_record(rule: RecommendationRule) -> dict[str, Any]:
    """Convert a rule to its storage shape.

    The legacy single-condition columns and ``recommended_product_id``
    mirror the first condition and the first product so older readers
    keep working.  A rule without conditions leaves the legacy columns
    empty, so reading the record back cannot give it a condition.
    """
    first = rule.conditions[0] if rule.conditions else None
    return {
        "id": rule.id,
        "conditions": [{"field": c.field, "operator": c.operator, "value": c.value} for c in rule.conditions],
        "conditions_logic": rule.conditions_logic,
        "title": rule.title,
        "description": rule.description,
        "cta_text": rule.cta_text,
        "cta_url": rule.cta_url,
        "recommended_product_ids": list(rule.recommended_product_ids),
        "recommended_package_ids": list(rule.recommended_package_ids),
        "condition_field": first.field if first else None,
        "condition_operator": first.operator if first else None,
        "condition_value": first.value if first else None,
        "recommended_product_id": rule.recommended_product_ids[0] if rule.recommended_product_ids else None,
        "priority": rule.priority,
    }


def save_rules(rules: Iterable[RecommendationRule], path: str | Path) -> None:
    """Write rules to a YAML file under a top-level ``rules`` key."""
    path = Path(path)
    records = [rule_to_record(rule) for rule in rules]
    with open(path, "w", encoding="utf-8") as fh:
        yaml.safe_dump({"rules": records}, fh, sort_keys=False, allow_unicode=True)
    logger.debug("Wrote %d rules to %s", len(records), path)


def reprioritize(rules: Iterable[RecommendationRule]) -> list[RecommendationRule]:
    """Return copies of *rules* whose priority equals their list position."""
    return [replace(rule, priority=index) for index, rule in enumerate(rules)]
