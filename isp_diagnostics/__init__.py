"""Diagnostic metrics and recommendation rule matching for ISP business owners."""

from isp_diagnostics.api import recommend
from isp_diagnostics.catalog import FieldDescriptor, group_fields, list_field_keys, list_fields
from isp_diagnostics.conditions import evaluate_conditions, evaluate_one
from isp_diagnostics.config import EngineConfig, load_config
from isp_diagnostics.fields import parse_field, resolve_field, weighted_index
from isp_diagnostics.matcher import match_rules
from isp_diagnostics.metrics import derive_metrics, extract_raw_data
from isp_diagnostics.models import DiagnosticRecord, RecommendationResult, RecommendationRule, RuleCondition
from isp_diagnostics.rule_loader import load_rules, normalize_rule
from isp_diagnostics.validation import RuleValidationError, lint_rules

__all__ = [
    "DiagnosticRecord",
    "EngineConfig",
    "FieldDescriptor",
    "RecommendationResult",
    "RecommendationRule",
    "RuleCondition",
    "RuleValidationError",
    "derive_metrics",
    "evaluate_conditions",
    "evaluate_one",
    "extract_raw_data",
    "group_fields",
    "lint_rules",
    "list_field_keys",
    "list_fields",
    "load_config",
    "load_rules",
    "match_rules",
    "normalize_rule",
    "parse_field",
    "recommend",
    "resolve_field",
    "weighted_index",
]
