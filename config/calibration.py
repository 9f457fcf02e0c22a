"""
config/calibration.py
─────────────────────
Calibratable coefficients for every degradation clock, the reliability
curve, the stress combination and the verdict thresholds.

Values come from field experience and manufacturer literature, not from a
fitted model. Every engine function takes one of these objects as an
optional override so a calibration run can swap them without touching code.

Reliability curve (one-year conditional Weibull):
  R(t)  = exp(-(t / η) ** β)
  P(t)  = 1 - R(t + 1) / R(t)
  t is biological age rescaled to the reference lifespan.
"""
from dataclasses import dataclass, field


@dataclass(frozen=True)
class WeibullCurve:
    eta: float = 13.0              # characteristic life (63.2 % failed)
    beta: float = 3.2              # > 2 → wear-out regime
    reference_lifespan: float = 12.0
    statistical_cap: float = 85.0  # max probability from the curve alone
    breach_value: float = 99.9     # forced probability on visible breach


@dataclass(frozen=True)
class SoftenerCalibration:
    curve: WeibullCurve = field(default_factory=WeibullCurve)

    # Clock A: odometer (cycles)
    seal_limit: float = 600.0
    motor_limit: float = 1_500.0
    gallons_per_person_per_day: float = 75.0
    capacity_safety_factor: float = 0.9
    min_regen_interval_days: float = 3.0

    # Clock B: resin decay (% per year)
    city_decay: float = 10.0
    city_carbon_decay: float = 5.0
    well_decay: float = 12.0
    resin_failure_pct: float = 40.0
    resin_degraded_pct: float = 75.0
    resin_rebed_pct: float = 50.0
    resin_replace_pct: float = 30.0
    carbon_critical_pct: float = 60.0

    # Clock C: salt
    salt_per_regen_lbs: float = 9.0
    salt_bag_lbs: float = 40.0
    brine_tank_lbs: float = 120.0
    max_refill_days: int = 3_650

    # Aggregate: reference household the multipliers are relative to
    reference_people: int = 3
    reference_hardness_gpg: float = 5.0
    reference_capacity_grains: float = 32_000.0

    max_stress: float = 12.0
    max_bio_age: float = 50.0
    typical_lifespan: float = 15.0
    replacement_cost: float = 2_500.0


@dataclass(frozen=True)
class TankCalibration:
    curve: WeibullCurve = field(default_factory=WeibullCurve)

    # Pressure (Basquin power law)
    design_psi: float = 60.0
    fatigue_exp: float = 4.0
    psi_safe: float = 80.0
    psi_critical: float = 100.0
    psi_prv_fail: float = 75.0
    psi_optimize: float = 65.0
    psi_recommend: float = 70.0
    optimize_max_age: float = 8.0
    fatigue_min_age: float = 10.0

    # Corrosion multipliers
    temp_low: float = 0.8
    temp_normal: float = 1.0
    temp_hot: float = 2.0
    circ_stress: float = 1.4
    loop_penalty: float = 1.5
    sediment_stress_per_lb: float = 0.05
    protected_corrosion_share: float = 0.1
    max_stress: float = 12.0
    max_bio_age: float = 50.0

    # Usage / thermal cycling
    hot_gallons_per_person: float = 20.0
    usage_light: float = 0.75
    usage_normal: float = 1.0
    usage_heavy: float = 1.5
    reference_daily_demand: float = 60.0
    reference_cycles_per_day: float = 1.2

    # Sediment (lbs per year per GPG)
    sediment_gas: float = 0.044
    sediment_electric: float = 0.08
    sediment_hybrid: float = 0.06
    flush_efficiency: float = 0.5
    sediment_advisory: float = 2.0
    sediment_flush: float = 5.0
    sediment_critical: float = 10.0
    sediment_lockout: float = 15.0
    flush_interval_months: int = 12

    # Anode
    default_anode_years: float = 6.0
    burn_softener: float = 3.0
    burn_galvanic: float = 2.5
    burn_recirc: float = 1.25
    burn_chloramine: float = 1.2
    anode_inspect_pct: float = 50.0
    anode_replace_pct: float = 75.0
    anode_refresh_max_age: float = 6.0
    anode_service_max_age: float = 10.0

    # Hardness resolver (GPG)
    softened_hardness: float = 0.5
    unverified_softened_hardness: float = 3.0
    hard_water_gpg: float = 10.0
    very_hard_water_gpg: float = 15.0

    # Verdict thresholds
    end_of_life_probability: float = 60.0
    liability_probability: float = 30.0
    liability_risk_level: int = 3
    fragile_probability: float = 45.0
    fragile_age: float = 12.0
    accelerated_aging_rate: float = 3.0
    monitor_probability: float = 15.0


@dataclass(frozen=True)
class TanklessCalibration:
    curve: WeibullCurve = field(default_factory=WeibullCurve)
    max_service_age: float = 15.0
    max_stress: float = 12.0
    max_bio_age: float = 50.0
    chronic_error_count: int = 10
    end_of_life_probability: float = 60.0
    monitor_probability: float = 15.0

    # Scale clock
    hard_water_gpg: float = 10.0
    scale_per_gpg_year: float = 0.8
    scale_due: float = 10.0
    scale_critical: float = 25.0
    scale_lockout: float = 60.0
    run_to_failure_age: float = 6.0
    descale_due_age: float = 2.0
    isolation_valve_min_age: float = 1.0

    # Stress
    recirc_stress: float = 1.25
    scale_stress_per_point: float = 0.01

    # Components
    gas_starvation_btu: float = 150_000.0
    igniter_limit: float = 50.0
    element_limit: float = 50.0
    flow_restriction_pct: float = 25.0


@dataclass(frozen=True)
class HybridCalibration:
    dirty_filter_penalty: float = 15.0
    clogged_filter_penalty: float = 40.0
    louvered_closet_penalty: float = 10.0
    sealed_closet_penalty: float = 30.0
    condensate_penalty: float = 5.0
    compressor_wear_limit: float = 40.0


@dataclass(frozen=True)
class FinancialCalibration:
    inflation_rate: float = 0.03
    immediate_months: float = 1.0
    high_months: float = 6.0
    medium_months: float = 18.0


@dataclass(frozen=True)
class ServicePrices:
    # Softener
    valve_rebuild: float = 350.0
    resin_detox: float = 199.0
    resin_rebed: float = 600.0
    carbon_filter: float = 299.0
    softener_replacement: float = 2_500.0

    # Water heater maintenance
    flush: float = 150.0
    anode: float = 350.0
    descale: float = 200.0
    inlet_filter: float = 100.0
    air_filter: float = 75.0
    condensate: float = 125.0
    isolation_valves: float = 100.0
    igniter: float = 250.0
    drain_pan: float = 150.0
    compressor_diagnostic: float = 250.0


SOFTENER = SoftenerCalibration()
TANK = TankCalibration()
TANKLESS = TanklessCalibration()
HYBRID = HybridCalibration()
FINANCIAL = FinancialCalibration()
PRICES = ServicePrices()
