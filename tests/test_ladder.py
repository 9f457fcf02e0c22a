"""
tests/test_ladder.py
─────────────────────
Tests for the generic rule ladder.
"""
import pytest

from config.verdicts import ActionCategory, BadgeColor, HeaterBadge
from src.engine.errors import ConfigurationError
from src.engine.ladder import Outcome, Rule, RuleLadder, always, to_verdict
from src.engine.hybrid import HYBRID_LADDER
from src.engine.softener import SOFTENER_LADDER
from src.engine.tank import TANK_LADDER
from src.engine.tankless import TANKLESS_LADDER


def _outcome(title: str, badge: HeaterBadge = HeaterBadge.SERVICE, **kw) -> Outcome:
    return Outcome(
        action=ActionCategory.REPAIR.value,
        category=ActionCategory.REPAIR,
        badge=badge.value,
        title=title,
        reason=title,
        **kw,
    )


def _ladder() -> RuleLadder[int]:
    return RuleLadder("numbers", [
        Rule("big", lambda n: n > 100, lambda n: _outcome("big", HeaterBadge.CRITICAL)),
        Rule("medium", lambda n: n > 10, lambda n: _outcome("medium")),
        Rule("small", always, lambda n: _outcome("small", HeaterBadge.OPTIMAL)),
    ])


class TestRuleLadder:
    def test_first_match_wins(self):
        # 500 satisfies both "big" and "medium"
        assert _ladder().evaluate(500).rule == "big"

    def test_falls_through(self):
        assert _ladder().evaluate(50).rule == "medium"
        assert _ladder().evaluate(1).rule == "small"

    def test_requires_unconditional_last_rule(self):
        with pytest.raises(ConfigurationError):
            RuleLadder("bad", [Rule("only", lambda n: n > 1, lambda n: _outcome("x"))])

    def test_rejects_duplicate_names(self):
        with pytest.raises(ConfigurationError):
            RuleLadder("bad", [
                Rule("x", lambda n: True, lambda n: _outcome("x")),
                Rule("x", always, lambda n: _outcome("x")),
            ])

    def test_rejects_empty(self):
        with pytest.raises(ConfigurationError):
            RuleLadder("empty", [])

    def test_rule_names_in_order(self):
        ladder = _ladder()
        assert ladder.rule_names == ["big", "medium", "small"]
        assert len(ladder) == 3


class TestToVerdict:
    def test_badge_colour_from_table(self):
        v = to_verdict("r", _outcome("t", HeaterBadge.CRITICAL))
        assert v.badge_color == "red"
        assert v.rule == "r"

    def test_colour_override(self):
        v = to_verdict("r", _outcome("t", HeaterBadge.SERVICE, color=BadgeColor.YELLOW))
        assert v.badge_color == "yellow"


class TestFamilyLadders:
    def test_every_ladder_ends_unconditionally(self):
        for ladder in (SOFTENER_LADDER, TANK_LADDER, HYBRID_LADDER, TANKLESS_LADDER):
            assert ladder.rules[-1].predicate is always

    def test_breach_is_checked_first(self):
        assert SOFTENER_LADDER.rule_names[0] == "containment_breach"
        assert TANK_LADDER.rule_names[0] == "containment_breach"
        assert HYBRID_LADDER.rule_names[0] == "containment_breach"

    def test_softener_resin_before_mechanics(self):
        names = SOFTENER_LADDER.rule_names
        assert names.index("resin_failure") < names.index("mechanical_failure") < names.index("seal_wear")

    def test_hybrid_heat_pump_rules_between_tank_tiers(self):
        names = HYBRID_LADDER.rule_names
        assert names.index("liability_hazard") < names.index("filter_clog") < names.index("failed_prv")
