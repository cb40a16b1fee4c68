"""Tests for the rule registry and the rule contract."""
import pytest

from ai_ready.errors import RegistryError
from ai_ready.models import RuleStatus
from ai_ready.registry import CATEGORIES, CategoryDef, RuleRegistry, default_registry
from ai_ready.rules import define_rule


def make_rule(rule_id, category="technical", max_score=5):
    @define_rule(rule_id, f"Rule {rule_id}", "test", category=category, max_score=max_score)
    def check(rule, page):
        return rule.passed("ok")
    return check


class TestDefaultRegistry:

    def test_has_25_rules_with_unique_ids(self):
        registry = default_registry()
        ids = [r.id for r in registry]
        assert len(registry) == 25
        assert len(set(ids)) == 25

    def test_total_budget_is_163(self):
        assert default_registry().max_points == 163

    def test_category_budgets(self):
        budgets = {c.slug: c.max_points for c in CATEGORIES}
        assert budgets == {
            "discoverability": 53,
            "structured-data": 43,
            "content-quality": 46,
            "technical": 21,
        }

    def test_category_membership(self):
        registry = default_registry()
        members = {c.slug: sorted(r.id for r in registry if r.category == c.slug) for c in CATEGORIES}
        assert members["discoverability"] == ["R01", "R02", "R03", "R18", "R19", "R21", "R22", "R23"]
        assert members["structured-data"] == ["R04", "R05", "R06", "R07", "R17", "R25"]
        assert members["content-quality"] == ["R08", "R09", "R10", "R13", "R15", "R16", "R24"]
        assert members["technical"] == ["R11", "R12", "R14", "R20"]

    def test_get_and_contains(self):
        registry = default_registry()
        assert registry.get("R14").name == "HTTPS Enforcement"
        assert registry.get("R99") is None
        assert "R01" in registry
        assert "R99" not in registry


class TestValidation:

    def test_duplicate_ids_rejected(self):
        categories = (CategoryDef("technical", "Technical", 10),)
        with pytest.raises(RegistryError, match="Duplicate"):
            RuleRegistry([make_rule("R01"), make_rule("R01")], categories)

    def test_unknown_category_rejected(self):
        categories = (CategoryDef("technical", "Technical", 5),)
        with pytest.raises(RegistryError, match="unknown category"):
            RuleRegistry([make_rule("R01", category="nope")], categories)

    def test_budget_mismatch_rejected(self):
        categories = (CategoryDef("technical", "Technical", 7),)
        with pytest.raises(RegistryError, match="declares 7 points"):
            RuleRegistry([make_rule("R01")], categories)


class TestSubset:

    def test_subset_rederives_budgets(self):
        subset = default_registry().subset(["R01", "R14", "R20"])

        assert [r.id for r in subset] == ["R01", "R14", "R20"]
        assert [(c.slug, c.max_points) for c in subset.categories] == [
            ("discoverability", 10),
            ("technical", 6),
        ]

    def test_subset_unknown_id(self):
        with pytest.raises(RegistryError, match="R99"):
            default_registry().subset(["R01", "R99"])


class TestRuleContract:

    def test_out_of_range_score_rejected(self):
        rule = make_rule("R01", max_score=5)
        with pytest.raises(ValueError):
            rule.warn(6, "too much", "fix it")
        with pytest.raises(ValueError):
            rule.fail("negative", "fix it", score=-1)

    def test_pass_never_carries_recommendation(self):
        rule = make_rule("R01")
        result = rule.result(RuleStatus.PASS, 5, "fine", recommendation="ignored")
        assert result.recommendation is None

    def test_result_carries_rule_identity(self):
        rule = make_rule("R07", max_score=5)
        result = rule.warn(2, "partly", "do more")
        assert (result.id, result.category, result.max_score) == ("R07", "technical", 5)
        assert result.status == RuleStatus.WARN
        assert result.impact == 3
