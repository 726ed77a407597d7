"""Tests for rule normalization, loading and serialization."""

import json

import pytest
import yaml

from isp_diagnostics.conditions import evaluate_conditions
from isp_diagnostics.matcher import match_rules
from isp_diagnostics.models import DiagnosticRecord, RecommendationRule, RuleCondition
from isp_diagnostics.rule_loader import (
    load_rules,
    normalize_rule,
    reprioritize,
    rule_to_record,
    save_rules,
    sort_rules,
)


class TestNormalizeRule:
    def test_current_shape(self):
        rule = normalize_rule(
            {
                "id": "r1",
                "conditions": [{"field": "computed:churn", "operator": ">", "value": 3}],
                "conditions_logic": "or",
                "title": "Reduce churn",
                "recommended_product_ids": ["p1", "p2"],
                "recommended_package_ids": ["pkg1"],
                "priority": 4,
            }
        )
        assert rule.conditions == (RuleCondition("computed:churn", ">", 3.0),)
        assert rule.conditions_logic == "or"
        assert rule.recommended_product_ids == ("p1", "p2")
        assert rule.recommended_package_ids == ("pkg1",)
        assert rule.priority == 4

    def test_legacy_single_condition(self):
        rule = normalize_rule(
            {"id": "legacy", "condition_field": "technical", "condition_operator": "<", "condition_value": 5}
        )
        assert rule.conditions == (RuleCondition("technical", "<", 5.0),)
        assert rule.conditions_logic == "and"

    def test_legacy_behaves_like_current(self, sample_scores):
        legacy = normalize_rule(
            {"id": "a", "condition_field": "technical", "condition_operator": "<", "condition_value": 5}
        )
        current = normalize_rule({"id": "b", "conditions": [{"field": "technical", "operator": "<", "value": 5}]})
        for scores in (sample_scores, {"technical": 7}):
            assert evaluate_conditions(legacy.conditions, legacy.conditions_logic, scores, {}, {}) == (
                evaluate_conditions(current.conditions, current.conditions_logic, scores, {}, {})
            )

    def test_legacy_defaults(self):
        rule = normalize_rule({"id": "x", "condition_field": "scale"})
        assert rule.conditions == (RuleCondition("scale", "<", 0.0),)

    def test_conditions_list_wins_over_legacy(self):
        rule = normalize_rule(
            {
                "id": "both",
                "conditions": [{"field": "scale", "operator": ">", "value": 8}],
                "condition_field": "technical",
                "condition_operator": "<",
                "condition_value": 5,
            }
        )
        assert rule.conditions == (RuleCondition("scale", ">", 8.0),)

    def test_empty_conditions_fall_back_to_legacy(self):
        rule = normalize_rule({"id": "e", "conditions": [], "condition_field": "technical", "condition_value": 3})
        assert rule.conditions == (RuleCondition("technical", "<", 3.0),)

    def test_no_conditions_at_all(self):
        rule = normalize_rule({"id": "bare", "title": "Never shown"})
        assert rule.conditions == ()

    def test_legacy_product_id(self):
        rule = normalize_rule({"id": "p", "recommended_product_id": "prod-1"})
        assert rule.recommended_product_ids == ("prod-1",)

    def test_missing_text_fields_default_empty(self):
        rule = normalize_rule({"id": "t", "title": None})
        assert rule.title == ""
        assert rule.description == ""
        assert rule.cta_text == ""
        assert rule.cta_url == ""
        assert rule.priority is None

    def test_logic_lower_cased(self):
        assert normalize_rule({"id": "l", "conditions_logic": "OR"}).conditions_logic == "or"

    def test_non_mapping_raises(self):
        with pytest.raises(ValueError, match="must be a mapping"):
            normalize_rule(["not", "a", "rule"])

    def test_malformed_condition_raises(self):
        with pytest.raises(ValueError, match="condition must be a mapping"):
            normalize_rule({"id": "bad", "conditions": ["technical < 5"]})


def test_sort_rules_stable_with_none_last():
    rules = [
        RecommendationRule(id="none"),
        RecommendationRule(id="b", priority=2),
        RecommendationRule(id="a1", priority=1),
        RecommendationRule(id="a2", priority=1),
        RecommendationRule(id="zero", priority=0),
    ]
    assert [r.id for r in sort_rules(rules)] == ["zero", "a1", "a2", "b", "none"]


def test_load_rules_from_yaml(rules_yaml):
    rules = load_rules(rules_yaml)
    assert [r.id for r in rules] == ["legacy-tech", "upsell-fiber", "no-priority"]
    assert rules[0].conditions == (RuleCondition("technical", "<", 5.0),)
    assert rules[0].recommended_product_ids == ("prod-noc",)
    assert len(rules[1].conditions) == 2


def test_load_rules_from_json(tmp_path):
    path = tmp_path / "rules.json"
    path.write_text(json.dumps([{"id": "j", "priority": 0, "condition_field": "financial"}]))
    rules = load_rules(path)
    assert [r.id for r in rules] == ["j"]


def test_load_rules_from_list():
    rules = load_rules([{"id": "b", "priority": 1}, {"id": "a", "priority": 0}])
    assert [r.id for r in rules] == ["a", "b"]


def test_load_rules_from_mapping():
    assert [r.id for r in load_rules({"rules": [{"id": "only"}]})] == ["only"]


def test_load_rules_empty_file(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_rules(path) == []


def test_load_rules_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError, match="Rule file not found"):
        load_rules(tmp_path / "missing.yaml")


def test_load_rules_rejects_scalar(tmp_path):
    path = tmp_path / "scalar.yaml"
    path.write_text("just a string\n")
    with pytest.raises(ValueError, match="Expected a list of rule records"):
        load_rules(path)


class TestRuleToRecord:
    def test_legacy_columns_follow_first_condition(self):
        rule = RecommendationRule(
            id="r",
            conditions=(RuleCondition("scale", ">", 8.0), RuleCondition("technical", "<", 5.0)),
            recommended_product_ids=("p1", "p2"),
            priority=3,
        )
        record = rule_to_record(rule)
        assert record["condition_field"] == "scale"
        assert record["condition_operator"] == ">"
        assert record["condition_value"] == 8.0
        assert record["recommended_product_id"] == "p1"
        assert record["conditions"][1] == {"field": "technical", "operator": "<", "value": 5.0}

    def test_legacy_columns_empty_for_rule_without_conditions(self):
        record = rule_to_record(RecommendationRule(id="empty"))
        assert record["conditions"] == []
        assert record["condition_field"] is None
        assert record["condition_operator"] is None
        assert record["condition_value"] is None
        assert record["recommended_product_id"] is None

    def test_record_normalizes_back(self):
        rule = RecommendationRule(
            id="rt",
            conditions=(RuleCondition("computed:churn", ">=", 2.5),),
            conditions_logic="or",
            title="Churn",
            recommended_package_ids=("pkg",),
            priority=1,
        )
        assert normalize_rule(rule_to_record(rule)) == rule


def test_save_rules_writes_yaml(tmp_path, rules_yaml):
    rules = load_rules(rules_yaml)
    out = tmp_path / "out.yaml"
    save_rules(rules, out)
    data = yaml.safe_load(out.read_text(encoding="utf-8"))
    assert [r["id"] for r in data["rules"]] == ["legacy-tech", "upsell-fiber", "no-priority"]
    assert load_rules(out) == rules


def test_saved_rule_without_conditions_never_matches(tmp_path):
    out = tmp_path / "empty.yaml"
    save_rules([RecommendationRule(id="empty", priority=0)], out)
    reloaded = load_rules(out)
    assert reloaded == [RecommendationRule(id="empty", priority=0)]
    assert reloaded[0].conditions == ()
    assert match_rules(reloaded, DiagnosticRecord.from_answers({"technical": 2}, {})) == []


def test_reprioritize_assigns_positions():
    rules = [RecommendationRule(id="c", priority=9), RecommendationRule(id="a"), RecommendationRule(id="b", priority=1)]
    reordered = reprioritize(rules)
    assert [(r.id, r.priority) for r in reordered] == [("c", 0), ("a", 1), ("b", 2)]
    assert rules[0].priority == 9
