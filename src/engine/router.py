"""
src/engine/router.py
────────────────────
Single entry point: validate the family/variant pair, pick the engine,
run the assessment.

The same profile and as-of date always produce the same result.
"""
from __future__ import annotations

import logging
from datetime import date

from config.equipment import FAMILY_VARIANTS, TANK_VARIANTS, TANKLESS_VARIANTS, HeaterVariant
from src.data.models import AssessmentResult, EquipmentProfile
from src.engine.base import EquipmentEngine
from src.engine.errors import UnsupportedEquipmentError
from src.engine.hybrid import HybridEngine
from src.engine.softener import SoftenerEngine
from src.engine.tank import TankEngine
from src.engine.tankless import TanklessEngine

logger = logging.getLogger(__name__)

_TANK = TankEngine()
_HYBRID = HybridEngine()
_TANKLESS = TanklessEngine()
_SOFTENER = SoftenerEngine()


def validate_identity(family: str, variant: str) -> None:
    """Raise UnsupportedEquipmentError unless `variant` belongs to `family`."""
    variants = FAMILY_VARIANTS.get(family)
    if variants is None:
        raise UnsupportedEquipmentError(family, variant, "unknown family")
    if variant not in variants:
        raise UnsupportedEquipmentError(
            family, variant, f"expected one of {', '.join(sorted(variants))}"
        )


def engine_for(profile: EquipmentProfile) -> EquipmentEngine:
    try:
        validate_identity(profile.family, profile.variant)
    except UnsupportedEquipmentError as exc:
        logger.warning("Rejected profile: %s", exc)
        raise

    if profile.variant in TANK_VARIANTS:
        return _TANK
    if profile.variant == HeaterVariant.HYBRID.value:
        return _HYBRID
    if profile.variant in TANKLESS_VARIANTS:
        return _TANKLESS
    return _SOFTENER


def assess(profile: EquipmentProfile, *, as_of: date | None = None) -> AssessmentResult:
    """
    Assess one unit.

    Args:
        profile: Inspection profile
        as_of: Date the financial plan and salt schedule start from (default today)

    Returns:
        AssessmentResult with metrics, verdict, plan and ranked service menu

    Raises:
        UnsupportedEquipmentError: family or variant is not supported
    """
    engine = engine_for(profile)
    as_of = as_of or date.today()
    result = engine.assess(profile, as_of)
    logger.debug(
        "Assessed %s/%s age=%.1f → %s (rule %s, p=%.1f%%)",
        profile.family, profile.variant, profile.age_years,
        result.verdict.action, result.verdict.rule, result.metrics.failure_probability,
    )
    return result
