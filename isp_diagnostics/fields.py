"""Field references: parse a condition field key once, resolve it against diagnostic data."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache

ANSWER_PREFIX = "answer:"
COMPUTED_PREFIX = "computed:"
WEIGHTED_INDEX_KEY = "weighted_index"

PILLAR_WEIGHTS: dict[str, float] = {
    "technical": 0.25,
    "financial": 0.20,
    "scale": 0.25,
    "expansion": 0.15,
    "commitment": 0.15,
}


@dataclass(frozen=True)
class ScoreField:
    """A pillar score, looked up in the scores mapping."""

    key: str


@dataclass(frozen=True)
class AnswerField:
    """A raw questionnaire answer (``answer:<key>``)."""

    key: str


@dataclass(frozen=True)
class ComputedField:
    """A derived business metric (``computed:<key>``)."""

    key: str


@dataclass(frozen=True)
class WeightedIndexField:
    """The fixed-weight composite of the five pillar scores."""


FieldRef = ScoreField | AnswerField | ComputedField | WeightedIndexField


@lru_cache(maxsize=256)
def parse_field(key: str) -> FieldRef:
    """Parse a condition field key into a typed reference.

    Parameters
    ----------
    key : str
        ``"weighted_index"``, ``"answer:<key>"``, ``"computed:<key>"`` or a
        bare pillar key.  Anything without a known prefix is treated as a
        pillar key.

    Returns
    -------
    FieldRef
    """
    if key == WEIGHTED_INDEX_KEY:
        return WeightedIndexField()
    if key.startswith(ANSWER_PREFIX):
        return AnswerField(key[len(ANSWER_PREFIX) :])
    if key.startswith(COMPUTED_PREFIX):
        return ComputedField(key[len(COMPUTED_PREFIX) :])
    return ScoreField(key)


def _lookup(source: Mapping[str, float], key: str) -> float:
    value = source.get(key)
    return 0 if value is None else value


def weighted_index(scores: Mapping[str, float]) -> float:
    """Return the weighted overall index of *scores* (missing pillars count as 0)."""
    return sum(_lookup(scores, pillar) * weight for pillar, weight in PILLAR_WEIGHTS.items())


def resolve_field(
    field: str | FieldRef,
    scores: Mapping[str, float],
    raw: Mapping[str, float],
    computed: Mapping[str, float],
) -> float:
    """Return the numeric value of *field* from the three data sources.

    Never raises: a key missing from its source resolves to ``0``, and so
    does a field key nobody defines.

    Parameters
    ----------
    field : str | FieldRef
        Field key as stored on a rule condition, or an already parsed reference.
    scores : Mapping[str, float]
        Pillar scores.
    raw : Mapping[str, float]
        Raw answers keyed by question ``field_key``.
    computed : Mapping[str, float]
        Output of :func:`~isp_diagnostics.metrics.derive_metrics`.

    Returns
    -------
    float
    """
    ref = parse_field(field) if isinstance(field, str) else field

    if isinstance(ref, WeightedIndexField):
        return weighted_index(scores)
    if isinstance(ref, AnswerField):
        return _lookup(raw, ref.key)
    if isinstance(ref, ComputedField):
        return _lookup(computed, ref.key)
    return _lookup(scores, ref.key)
