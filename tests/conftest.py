"""Shared fixtures for diagnostic engine tests."""

import pytest

from isp_diagnostics.models import DiagnosticRecord, RecommendationRule, RuleCondition


@pytest.fixture()
def sample_raw_data():
    """Raw answers of a mid-sized ISP."""
    return {
        "active_clients": 100,
        "monthly_cancellations": 5,
        "network_capacity": 200,
        "homes_in_region": 1000,
        "best_plan_price": 20,
        "monthly_new_installs": 10,
    }


@pytest.fixture()
def sample_scores():
    """Pillar scores with a weak technical pillar and strong scale."""
    return {
        "technical": 4.0,
        "financial": 6.0,
        "scale": 9.0,
        "expansion": 5.0,
        "commitment": 7.0,
    }


@pytest.fixture()
def sample_record(sample_scores, sample_raw_data):
    """Diagnostic record built from the sample scores and answers."""
    return DiagnosticRecord.from_answers(sample_scores, sample_raw_data)


@pytest.fixture()
def make_rule():
    """Factory for single- or multi-condition rules."""

    def _make(rule_id, *conditions, logic="and", priority=None):
        return RecommendationRule(
            id=rule_id,
            conditions=tuple(RuleCondition(*c) for c in conditions),
            conditions_logic=logic,
            title=f"Rule {rule_id}",
            priority=priority,
        )

    return _make


@pytest.fixture()
def rules_yaml(tmp_path):
    """YAML rule file mixing current and legacy records, out of priority order."""
    content = """\
rules:
  - id: upsell-fiber
    priority: 2
    conditions:
      - {field: "answer:active_clients", operator: ">=", value: 50}
      - {field: "computed:network_occupation", operator: ">", value: 40}
    conditions_logic: and
    title: Expand your network
    recommended_product_ids: [prod-fiber]
  - id: legacy-tech
    priority: 1
    condition_field: technical
    condition_operator: "<"
    condition_value: 5
    title: Strengthen your technical base
    recommended_product_id: prod-noc
  - id: no-priority
    conditions:
      - {field: weighted_index, operator: ">", value: 0}
"""
    path = tmp_path / "rules.yaml"
    path.write_text(content, encoding="utf-8")
    return path
