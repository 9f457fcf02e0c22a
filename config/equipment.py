"""
config/equipment.py
───────────────────
Equipment families, variants and quality-tier profiles.

Tier profiles map a unit's warranty length to its expected service life and
like-for-like replacement cost. Warranty length is the best proxy for
sacrificial anode mass and build quality that a data plate gives us:

  ≥ 15 yr → Premium       ≥ 12 yr → Professional
  ≥  7 yr → Standard      else    → Builder
"""
from dataclasses import dataclass
from enum import Enum


class EquipmentFamily(str, Enum):
    WATER_HEATER = "WATER_HEATER"
    SOFTENER = "SOFTENER"


class HeaterVariant(str, Enum):
    GAS = "GAS"
    ELECTRIC = "ELECTRIC"
    HYBRID = "HYBRID"
    TANKLESS_GAS = "TANKLESS_GAS"
    TANKLESS_ELECTRIC = "TANKLESS_ELECTRIC"


class SoftenerVariant(str, Enum):
    ION_EXCHANGE = "ION_EXCHANGE"


class QualityTier(str, Enum):
    BUILDER = "BUILDER"
    STANDARD = "STANDARD"
    PROFESSIONAL = "PROFESSIONAL"
    PREMIUM = "PREMIUM"


# ── Variant registry ──────────────────────────────────────────────────────────
FAMILY_VARIANTS: dict[str, frozenset[str]] = {
    EquipmentFamily.WATER_HEATER.value: frozenset(v.value for v in HeaterVariant),
    EquipmentFamily.SOFTENER.value: frozenset(v.value for v in SoftenerVariant),
}

TANK_VARIANTS = frozenset({HeaterVariant.GAS.value, HeaterVariant.ELECTRIC.value})
TANKLESS_VARIANTS = frozenset(
    {HeaterVariant.TANKLESS_GAS.value, HeaterVariant.TANKLESS_ELECTRIC.value}
)


@dataclass(frozen=True)
class TierProfile:
    tier: QualityTier
    label: str
    warranty_years: int
    expected_life: float
    cost_gas: float
    cost_electric: float
    cost_hybrid: float = 0.0

    def replacement_cost(self, variant: str) -> float:
        if variant == HeaterVariant.HYBRID.value:
            return self.cost_hybrid
        if variant in (HeaterVariant.ELECTRIC.value, HeaterVariant.TANKLESS_ELECTRIC.value):
            return self.cost_electric
        return self.cost_gas


# ── Tank / hybrid tiers ───────────────────────────────────────────────────────
TANK_TIERS: dict[QualityTier, TierProfile] = {
    QualityTier.BUILDER: TierProfile(
        QualityTier.BUILDER, "Builder Grade", 6, 10.0, 1_400.0, 1_200.0, 2_800.0
    ),
    QualityTier.STANDARD: TierProfile(
        QualityTier.STANDARD, "Standard", 9, 12.0, 1_900.0, 1_600.0, 3_400.0
    ),
    QualityTier.PROFESSIONAL: TierProfile(
        QualityTier.PROFESSIONAL, "Professional", 12, 14.0, 2_600.0, 2_200.0, 4_200.0
    ),
    QualityTier.PREMIUM: TierProfile(
        QualityTier.PREMIUM, "Premium / Lifetime", 15, 18.0, 3_500.0, 3_000.0, 5_200.0
    ),
}

# ── Tankless tiers ────────────────────────────────────────────────────────────
TANKLESS_TIERS: dict[QualityTier, TierProfile] = {
    QualityTier.BUILDER: TierProfile(
        QualityTier.BUILDER, "Economy Tankless", 5, 12.0, 2_400.0, 1_800.0
    ),
    QualityTier.STANDARD: TierProfile(
        QualityTier.STANDARD, "Standard Tankless", 10, 15.0, 3_200.0, 2_400.0
    ),
    QualityTier.PROFESSIONAL: TierProfile(
        QualityTier.PROFESSIONAL, "Professional Tankless", 12, 18.0, 4_200.0, 3_200.0
    ),
    QualityTier.PREMIUM: TierProfile(
        QualityTier.PREMIUM, "Premium Tankless", 15, 20.0, 5_500.0, 4_200.0
    ),
}


def tier_for_warranty(warranty_years: float, tankless: bool = False) -> TierProfile:
    """Pick the quality tier implied by a warranty length."""
    tiers = TANKLESS_TIERS if tankless else TANK_TIERS
    if warranty_years >= 15:
        return tiers[QualityTier.PREMIUM]
    if warranty_years >= 12:
        return tiers[QualityTier.PROFESSIONAL]
    if warranty_years >= 7:
        return tiers[QualityTier.STANDARD]
    return tiers[QualityTier.BUILDER]
