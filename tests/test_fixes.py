"""Tests for fix suggestion lookup."""
from ai_ready.fixes import FIX_MAP, get_fix_suggestion
from ai_ready.registry import default_registry


def test_file_rules_have_automatic_fixes():
    for rule_id, target in [("R01", "llms-txt"), ("R02", "robots-txt"), ("R03", "sitemap")]:
        fix = get_fix_suggestion(rule_id)
        assert fix is not None
        assert fix.automatic is True
        assert fix.command.endswith(f"--only {target}")


def test_schema_rules_are_advisory():
    for rule_id in ("R04", "R17"):
        fix = get_fix_suggestion(rule_id)
        assert fix is not None
        assert fix.automatic is False


def test_unknown_rule_has_no_fix():
    assert get_fix_suggestion("R14") is None
    assert get_fix_suggestion("R999") is None


def test_every_fix_targets_a_registered_rule():
    registry = default_registry()
    for rule_id in FIX_MAP:
        assert rule_id in registry
