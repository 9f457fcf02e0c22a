"""
src/engine/ladder.py
────────────────────
Ordered, highest-priority-wins rule ladder.

A ladder is a list of Rule(name, predicate, build). Evaluation walks the
list top to bottom and returns the verdict built by the first rule whose
predicate holds; nothing below it is evaluated. The last rule must be
unconditional so every call yields exactly one verdict.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from config.verdicts import BADGE_COLORS, ActionCategory, BadgeColor
from src.data.models import DegradationMetrics, EquipmentProfile, Verdict
from src.engine.errors import ConfigurationError

logger = logging.getLogger(__name__)

C = TypeVar("C")


@dataclass(frozen=True)
class LadderContext:
    """Inputs to a rung; `cal` holds the thresholds it judges against."""
    profile: EquipmentProfile
    metrics: DegradationMetrics
    cal: Any


@dataclass(frozen=True)
class Outcome:
    """What a rung concludes; the ladder stamps on the rung name and colour."""
    action: str
    category: ActionCategory
    badge: str
    title: str
    reason: str
    urgent: bool = False
    color: BadgeColor | None = None
    note: str | None = None


def always(_ctx) -> bool:
    return True


@dataclass(frozen=True)
class Rule(Generic[C]):
    name: str
    predicate: Callable[[C], bool]
    build: Callable[[C], Outcome]


class RuleLadder(Generic[C]):
    def __init__(self, name: str, rules: list[Rule[C]]):
        if not rules or rules[-1].predicate is not always:
            raise ConfigurationError(f"Ladder {name!r} must end with an unconditional rule")
        names = [r.name for r in rules]
        if len(set(names)) != len(names):
            raise ConfigurationError(f"Ladder {name!r} has duplicate rule names")
        self.name = name
        self.rules = tuple(rules)

    def __len__(self) -> int:
        return len(self.rules)

    @property
    def rule_names(self) -> list[str]:
        return [r.name for r in self.rules]

    def first_match(self, ctx: C) -> Rule[C]:
        for rule in self.rules:
            if rule.predicate(ctx):
                return rule
        return self.rules[-1]

    def evaluate(self, ctx: C) -> Verdict:
        rule = self.first_match(ctx)
        outcome = rule.build(ctx)
        logger.debug("Ladder %s fired rule %s", self.name, rule.name)
        return to_verdict(rule.name, outcome)


def to_verdict(rule_name: str, outcome: Outcome) -> Verdict:
    badge = str(getattr(outcome.badge, "value", outcome.badge))
    color = outcome.color or BADGE_COLORS.get(badge, BadgeColor.YELLOW)
    return Verdict(
        action=str(getattr(outcome.action, "value", outcome.action)),
        category=outcome.category,
        badge=badge,
        badge_color=color.value,
        title=outcome.title,
        reason=outcome.reason,
        urgent=outcome.urgent,
        rule=rule_name,
        note=outcome.note,
    )
