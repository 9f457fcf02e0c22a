"""
src/analytics/aging.py
──────────────────────
Stress aggregation, biological age and failure risk.

Biological age = calendar age × aggregate aging-rate.

Failure probability is the one-year conditional Weibull probability

    P(t) = 1 − R(t + 1) / R(t),   R(t) = exp(−(t / η) ** β)

evaluated at t = bio_age × reference_lifespan / typical_lifespan, so a
premium unit with a longer rated life reaches the same risk later. The
statistical value is capped; a visible breach forces the terminal value.

Health score = 100 − failure probability, clamped to [0, 100].
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from config.calibration import TANK, WeibullCurve, TankCalibration
from src.data.models import EquipmentProfile, LocationType

NORMAL_WEAR = "Normal Wear"

STRESSOR_LABELS: dict[str, str] = {
    "pressure": "High Pressure",
    "temp": "High Temperature",
    "sediment": "Sediment Buildup",
    "loop": "Thermal Expansion",
    "circ": "Circulation Pump",
    "usage": "Heavy Usage",
    "scale": "Scale Buildup",
    "recirc": "Recirculation Loop",
    "mechanical": "Regeneration Cycling",
    "chemical": "Resin Chemistry",
}

# Reliability grid in reference-lifespan years; wide enough that P(t) has
# passed every threshold the ladders use.
_GRID_YEARS = np.linspace(0.0, 60.0, 1201)


# ── Stress aggregation ────────────────────────────────────────────────────────

def combine_stressors(stressors: dict[str, float], cap: float) -> tuple[float, str]:
    """
    Multiply per-axis multipliers into one aging-rate.

    Returns:
        (total capped at `cap`, label of the largest multiplier). Ties go to
        the first axis listed; "Normal Wear" when nothing exceeds baseline.
    """
    total = 1.0
    primary = NORMAL_WEAR
    worst = 1.0
    for name, value in stressors.items():
        value = float(np.nan_to_num(value, nan=1.0, posinf=cap, neginf=0.0))
        total *= value
        if value > worst:
            worst = value
            primary = STRESSOR_LABELS.get(name, name)
    return float(np.clip(total, 0.0, cap)), primary


def dominant_stressor(stressors: dict[str, float], cap: float) -> tuple[float, str]:
    """Aging-rate set by the single worst axis, for equipment whose clocks race independently."""
    rate = 1.0
    primary = NORMAL_WEAR
    for name, value in stressors.items():
        value = float(np.nan_to_num(value, nan=1.0, posinf=cap, neginf=0.0))
        if value > rate:
            rate = value
            primary = STRESSOR_LABELS.get(name, name)
    return float(np.clip(rate, 1.0, cap)), primary


@dataclass(frozen=True)
class TankAging:
    bio_age: float
    aging_rate: float
    current_rate: float       # rate that applies from today on
    protected_years: float
    naked_years: float


def tank_biological_age(
    age_years: float,
    anode_age_years: float,
    shield_duration: float,
    mechanical: float,
    corrosion: float,
    cal: TankCalibration = TANK,
) -> TankAging:
    """
    Two-phase biological age for a glass-lined steel tank.

    While the anode is active, mechanical fatigue applies in full and
    corrosion is suppressed to a small share. Once the anode is gone both
    act multiplicatively. Naked years are counted from the rod's own age
    so a replaced anode restores protection.
    """
    naked = float(np.clip(anode_age_years - shield_duration, 0.0, age_years))
    protected = age_years - naked

    protected_rate = mechanical + corrosion * cal.protected_corrosion_share
    naked_rate = min(mechanical * corrosion, cal.max_stress)

    raw = protected * protected_rate + naked * naked_rate
    bio_age = float(np.clip(np.nan_to_num(raw, posinf=cal.max_bio_age), 0.0, cal.max_bio_age))
    current = naked_rate if anode_age_years >= shield_duration else protected_rate
    aging_rate = bio_age / age_years if age_years > 0 else current
    return TankAging(bio_age, aging_rate, current, protected, naked)


# ── Failure probability ───────────────────────────────────────────────────────

def _conditional_failure(t: np.ndarray | float, curve: WeibullCurve) -> np.ndarray:
    t = np.maximum(np.asarray(t, dtype=float), 0.0)
    # R(t+1)/R(t) in log space avoids 0/0 deep in the tail
    log_ratio = (t / curve.eta) ** curve.beta - ((t + 1.0) / curve.eta) ** curve.beta
    return (1.0 - np.exp(log_ratio)) * 100.0


def failure_probability(bio_age: float, typical_lifespan: float, curve: WeibullCurve = TANK.curve) -> float:
    """Statistical one-year failure probability in %, capped."""
    lifespan = max(typical_lifespan, 1e-6)
    t = np.nan_to_num(bio_age) * curve.reference_lifespan / lifespan
    p = float(_conditional_failure(t, curve))
    return float(np.clip(np.nan_to_num(p), 0.0, curve.statistical_cap))


def bio_age_at_probability(
    probability: float,
    typical_lifespan: float,
    curve: WeibullCurve = TANK.curve,
) -> float:
    """Biological age at which the failure probability reaches `probability`."""
    p_grid = _conditional_failure(_GRID_YEARS, curve)
    t = float(np.interp(probability, p_grid, _GRID_YEARS))
    return t * typical_lifespan / curve.reference_lifespan


def health_score(failure_probability_pct: float) -> float:
    return float(np.clip(100.0 - np.nan_to_num(failure_probability_pct), 0.0, 100.0))


# ── Breach and location ───────────────────────────────────────────────────────

def is_breach(profile: EquipmentProfile) -> bool:
    """
    Visible corrosion or any active leak.

    The leak source only changes how the breach is worded.
    """
    return profile.visual_rust or profile.is_leaking


def apply_breach(probability: float, breach: bool, curve: WeibullCurve = TANK.curve) -> float:
    return curve.breach_value if breach else probability


_LOCATION_RISK: dict[LocationType, tuple[int, int]] = {
    # (finished, unfinished)
    LocationType.ATTIC: (4, 4),
    LocationType.UPPER_FLOOR: (4, 4),
    LocationType.MAIN_LIVING: (3, 3),
    LocationType.BASEMENT: (3, 2),
    LocationType.GARAGE: (2, 1),
    LocationType.CRAWLSPACE: (2, 1),
    LocationType.EXTERIOR: (1, 1),
}


def location_risk(location: LocationType, is_finished: bool) -> int:
    """Water-damage severity of the install location, 1 (low) to 4 (extreme)."""
    finished, unfinished = _LOCATION_RISK.get(location, (2, 2))
    return finished if is_finished else unfinished
