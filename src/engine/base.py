"""
src/engine/base.py
──────────────────
Shared assessment pipeline.

Every equipment family runs the same forward-only sequence:

  clocks → aggregate → age/risk → forecast → verdict ladder → plan/menu

Subclasses supply the family-specific pieces: how metrics are measured,
which ladder judges them, what replacement costs, how far away it is, and
which service items apply. Engines hold no per-call state.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import Any

from src.data.models import (
    AssessmentResult,
    DegradationMetrics,
    EquipmentProfile,
    SaltSchedule,
    ServiceMenuItem,
    Verdict,
)
from src.engine.financial import build_financial_plan
from src.engine.ladder import LadderContext, RuleLadder
from src.engine.service_menu import rank_menu

logger = logging.getLogger(__name__)


class EquipmentEngine(ABC):
    ladder: RuleLadder[LadderContext]
    cal: Any

    @abstractmethod
    def measure(self, profile: EquipmentProfile) -> DegradationMetrics:
        """Run every clock and the risk model."""

    @abstractmethod
    def replacement_cost(self, profile: EquipmentProfile) -> float:
        """Like-for-like replacement cost in today's dollars."""

    @abstractmethod
    def horizon_years(self, profile: EquipmentProfile, metrics: DegradationMetrics) -> float:
        """Years until replacement is expected."""

    @abstractmethod
    def service_items(
        self,
        profile: EquipmentProfile,
        metrics: DegradationMetrics,
        verdict: Verdict,
    ) -> list[ServiceMenuItem]:
        """Unranked service line items."""

    def salt_schedule(self, metrics: DegradationMetrics, as_of: date) -> SaltSchedule | None:
        return None

    def context(self, profile: EquipmentProfile, metrics: DegradationMetrics) -> LadderContext:
        return LadderContext(profile, metrics, self.cal)

    def judge(self, profile: EquipmentProfile, metrics: DegradationMetrics) -> Verdict:
        return self.ladder.evaluate(self.context(profile, metrics))

    def assess(self, profile: EquipmentProfile, as_of: date) -> AssessmentResult:
        metrics = self.measure(profile)
        verdict = self.judge(profile, metrics)
        if metrics.breach:
            logger.warning(
                "Breach override on %s/%s: failure probability forced to %.1f%%",
                profile.family, profile.variant, metrics.failure_probability,
            )

        financial = build_financial_plan(
            verdict,
            self.replacement_cost(profile),
            self.horizon_years(profile, metrics),
            as_of,
        )
        return AssessmentResult(
            family=profile.family,
            variant=profile.variant,
            metrics=metrics,
            verdict=verdict,
            financial=financial,
            service_menu=rank_menu(self.service_items(profile, metrics, verdict)),
            salt_schedule=self.salt_schedule(metrics, as_of),
        )
