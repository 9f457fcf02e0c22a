"""
src/data/models.py
──────────────────
Pydantic v2 data models for inspection profiles and assessment results.
"""

from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from config.verdicts import (
    ActionCategory,
    AnodeStatus,
    BudgetUrgency,
    ServicePriority,
    ServiceStatus,
)


class WaterSource(str, Enum):
    CITY = "CITY"
    WELL = "WELL"


class TempSetting(str, Enum):
    LOW = "LOW"
    NORMAL = "NORMAL"
    HOT = "HOT"


class LocationType(str, Enum):
    ATTIC = "ATTIC"
    UPPER_FLOOR = "UPPER_FLOOR"
    MAIN_LIVING = "MAIN_LIVING"
    BASEMENT = "BASEMENT"
    GARAGE = "GARAGE"
    EXTERIOR = "EXTERIOR"
    CRAWLSPACE = "CRAWLSPACE"


class UsageType(str, Enum):
    LIGHT = "light"
    NORMAL = "normal"
    HEAVY = "heavy"


class ExpansionTankStatus(str, Enum):
    FUNCTIONAL = "FUNCTIONAL"
    WATERLOGGED = "WATERLOGGED"
    MISSING = "MISSING"


class LeakSource(str, Enum):
    NONE = "NONE"
    TANK_BODY = "TANK_BODY"
    FITTING_VALVE = "FITTING_VALVE"
    DRAIN_PAN = "DRAIN_PAN"


class ConnectionType(str, Enum):
    DIELECTRIC = "DIELECTRIC"
    BRASS = "BRASS"
    DIRECT_COPPER = "DIRECT_COPPER"


class SanitizerType(str, Enum):
    CHLORINE = "CHLORINE"
    CHLORAMINE = "CHLORAMINE"
    UNKNOWN = "UNKNOWN"


class SaltStatus(str, Enum):
    OK = "OK"
    EMPTY = "EMPTY"
    UNKNOWN = "UNKNOWN"


class FilterStatus(str, Enum):
    CLEAN = "CLEAN"
    DIRTY = "DIRTY"
    CLOGGED = "CLOGGED"


class FlameRodStatus(str, Enum):
    GOOD = "GOOD"
    WORN = "WORN"
    FAILING = "FAILING"


class VentStatus(str, Enum):
    CLEAR = "CLEAR"
    RESTRICTED = "RESTRICTED"
    BLOCKED = "BLOCKED"


class RoomVolumeType(str, Enum):
    OPEN = "OPEN"
    CLOSET_LOUVERED = "CLOSET_LOUVERED"
    CLOSET_SEALED = "CLOSET_SEALED"


class GasLineSize(str, Enum):
    HALF = "1/2"
    THREE_QUARTER = "3/4"
    ONE = "1"


class EquipmentProfile(BaseModel):
    """
    One inspection of one unit. Only the identifying fields and the age are
    required; everything else defaults to the value that hides the least risk.
    """
    model_config = ConfigDict(frozen=True)

    # Identity
    family: str
    variant: str
    age_years: float = Field(ge=0.0, le=100.0)
    warranty_years: float = Field(default=6.0, ge=0.0, le=50.0)

    # Environment
    house_psi: float = Field(default=60.0, ge=0.0, le=300.0)
    hardness_gpg: float = Field(default=10.0, ge=0.0, le=200.0)
    measured_hardness_gpg: float | None = Field(default=None, ge=0.0, le=200.0)
    people_count: int = Field(default=3, ge=0, le=50)
    usage_type: UsageType = UsageType.NORMAL
    tank_capacity_gal: float = Field(default=50.0, gt=0.0, le=1_000.0)
    water_source: WaterSource = WaterSource.CITY
    sanitizer_type: SanitizerType = SanitizerType.UNKNOWN
    temp_setting: TempSetting = TempSetting.NORMAL
    location: LocationType = LocationType.MAIN_LIVING
    is_finished_area: bool = False

    # Softener hardware
    softener_capacity_grains: float = Field(default=32_000.0, gt=0.0, le=1_000_000.0)
    has_carbon_filter: bool = False

    # Installed accessories
    has_prv: bool = False
    has_exp_tank: bool = False
    exp_tank_status: ExpansionTankStatus | None = None
    is_closed_loop: bool = False
    has_circ_pump: bool = False
    has_softener: bool = False
    softener_salt_status: SaltStatus = SaltStatus.UNKNOWN
    connection_type: ConnectionType | None = None
    has_drain_pan: bool | None = None
    has_isolation_valves: bool = False
    has_recirculation_loop: bool = False

    # Maintenance history (None = never serviced)
    last_anode_replace_years_ago: float | None = Field(default=None, ge=0.0)
    last_flush_years_ago: float | None = Field(default=None, ge=0.0)
    last_descale_years_ago: float | None = Field(default=None, ge=0.0)

    # Direct observations
    visual_rust: bool = False
    is_leaking: bool = False
    leak_source: LeakSource | None = None
    error_code_count: int = Field(default=0, ge=0)

    # Tankless components
    flow_rate_gpm: float | None = Field(default=None, ge=0.0)
    rated_flow_gpm: float | None = Field(default=None, gt=0.0)
    igniter_health: float | None = Field(default=None, ge=0.0, le=100.0)
    element_health: float | None = Field(default=None, ge=0.0, le=100.0)
    flame_rod_status: FlameRodStatus | None = None
    inlet_filter_status: FilterStatus | None = None
    vent_status: VentStatus | None = None
    gas_line_size: GasLineSize | None = None
    btu_rating: float | None = Field(default=None, ge=0.0)

    # Hybrid components
    air_filter_status: FilterStatus | None = None
    is_condensate_clear: bool = True
    compressor_health: float = Field(default=100.0, ge=0.0, le=100.0)
    room_volume_type: RoomVolumeType | None = None

    @field_validator("family", "variant")
    @classmethod
    def _normalize_identity(cls, value: str) -> str:
        return value.strip().upper()


class StressFactors(BaseModel):
    """Per-axis multipliers; 1.0 = baseline wear."""
    total: float = Field(default=1.0, ge=0.0)
    mechanical: float = Field(default=1.0, ge=0.0)
    chemical: float = Field(default=1.0, ge=0.0)
    pressure: float = Field(default=1.0, ge=0.0)
    loop: float = Field(default=1.0, ge=0.0)
    circ: float = Field(default=1.0, ge=0.0)
    temp: float = Field(default=1.0, ge=0.0)
    sediment: float = Field(default=1.0, ge=0.0)
    scale: float = Field(default=1.0, ge=0.0)
    usage: float = Field(default=1.0, ge=0.0)


class DegradationMetrics(BaseModel):
    # Age & risk
    bio_age: float = Field(ge=0.0)
    aging_rate: float = Field(ge=0.0)
    failure_probability: float = Field(ge=0.0, le=100.0)
    health_score: float = Field(ge=0.0, le=100.0)
    health_next_year: float | None = Field(default=None, ge=0.0, le=100.0)
    typical_lifespan: float = Field(gt=0.0)
    breach: bool = False
    risk_level: int = Field(default=2, ge=1, le=4)
    primary_stressor: str = "Normal Wear"
    stress_factors: StressFactors = Field(default_factory=StressFactors)

    # Forecast
    service_status: ServiceStatus = ServiceStatus.OPTIMAL
    months_to_service: int | None = None
    months_to_lockout: int | None = None
    years_left_current: float = Field(default=0.0, ge=0.0)
    years_left_optimized: float = Field(default=0.0, ge=0.0)
    life_extension: float = Field(default=0.0, ge=0.0)

    # Softener axes
    odometer: float | None = Field(default=None, ge=0.0)
    regens_per_year: float | None = Field(default=None, ge=0.0)
    regen_interval_days: float | None = Field(default=None, ge=0.0)
    daily_load_grains: float | None = Field(default=None, ge=0.0)
    resin_health: float | None = Field(default=None, ge=0.0, le=100.0)
    salt_lbs_per_month: float | None = Field(default=None, ge=0.0)

    # Tank / hybrid axes
    sediment_lbs: float | None = Field(default=None, ge=0.0)
    sediment_rate: float | None = Field(default=None, ge=0.0)
    shield_life: float | None = Field(default=None, ge=0.0)
    anode_depletion_percent: float | None = Field(default=None, ge=0.0, le=100.0)
    anode_status: AnodeStatus | None = None
    anode_burn_rate: float | None = Field(default=None, ge=0.0)
    effective_psi: float | None = Field(default=None, ge=0.0)
    is_transient_pressure: bool = False
    prv_failed: bool = False
    thermal_cycles: float | None = Field(default=None, ge=0.0)

    # Tankless axes
    scale_buildup: float | None = Field(default=None, ge=0.0, le=100.0)
    flow_degradation: float | None = Field(default=None, ge=0.0, le=100.0)

    # Hybrid
    hybrid_efficiency: float | None = Field(default=None, ge=0.0, le=100.0)


class Verdict(BaseModel):
    action: str
    category: ActionCategory
    badge: str
    badge_color: str
    title: str
    reason: str
    urgent: bool = False
    rule: str
    note: str | None = None


class FinancialPlan(BaseModel):
    months_until_target: int = Field(ge=0)
    target_date: date
    estimated_cost: float = Field(ge=0.0)
    monthly_budget: float = Field(ge=0.0)
    urgency: BudgetUrgency
    recommendation: str


class ServiceMenuItem(BaseModel):
    id: str
    name: str
    trigger: str
    price: float = Field(ge=0.0)
    price_max: float | None = Field(default=None, ge=0.0)
    pitch: str
    priority: ServicePriority


class SaltSchedule(BaseModel):
    burn_rate_lbs_per_month: float = Field(ge=0.0)
    days_until_refill: int = Field(ge=0)
    next_refill_date: date
    monthly_bags: int = Field(ge=0)


class AssessmentResult(BaseModel):
    family: str
    variant: str
    metrics: DegradationMetrics
    verdict: Verdict
    financial: FinancialPlan | None = None
    service_menu: list[ServiceMenuItem] = Field(default_factory=list)
    salt_schedule: SaltSchedule | None = None
