"""Engine configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


@dataclass
class EngineConfig:
    """Settings for :func:`~isp_diagnostics.api.recommend`.

    Parameters
    ----------
    max_recommendations : int
        Number of matched rules kept for display.
    validate_rules : bool
        Lint rules before matching and log every issue.
    strict_validation : bool
        Raise :class:`~isp_diagnostics.validation.RuleValidationError` when
        linting finds issues.  Implies ``validate_rules``.
    """

    max_recommendations: int = 3
    validate_rules: bool = False
    strict_validation: bool = False

    def __post_init__(self) -> None:
        if self.max_recommendations < 1:
            msg = f"max_recommendations must be >= 1, got {self.max_recommendations}"
            raise ValueError(msg)


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_VALUES
    return bool(value)


def load_config(source: str | Path | dict[str, Any] | None = None) -> EngineConfig:
    """Load an EngineConfig from a YAML file, dict, or environment variables.

    Settings may sit at the top level or under an ``engine`` key.
    ``ISP_DIAG_MAX_RECOMMENDATIONS``, ``ISP_DIAG_VALIDATE_RULES`` and
    ``ISP_DIAG_STRICT_VALIDATION`` override whatever *source* provides.

    Parameters
    ----------
    source : str | Path | dict | None
        A path to a YAML file, a raw dict, or ``None`` to use only
        environment variable overrides on defaults.

    Returns
    -------
    EngineConfig
    """
    raw: dict[str, Any] = {}

    if isinstance(source, dict):
        raw = source
    elif source is not None:
        path = Path(source)
        if path.is_file():
            raw = _load_yaml(path)

    engine_raw = raw.get("engine", raw) or {}

    return EngineConfig(
        max_recommendations=int(
            os.environ.get("ISP_DIAG_MAX_RECOMMENDATIONS", engine_raw.get("max_recommendations", 3))
        ),
        validate_rules=_as_bool(os.environ.get("ISP_DIAG_VALIDATE_RULES", engine_raw.get("validate_rules", False))),
        strict_validation=_as_bool(
            os.environ.get("ISP_DIAG_STRICT_VALIDATION", engine_raw.get("strict_validation", False))
        ),
    )


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML file using PyYAML."""
    with open(path, encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}
