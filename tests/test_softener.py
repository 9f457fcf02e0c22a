"""
tests/test_softener.py
───────────────────────
Tests for the softener engine: clocks, verdicts and reference scenarios.
"""
import pytest

from config.calibration import SoftenerCalibration
from config.verdicts import ActionCategory, ServicePriority, ServiceStatus
from src.engine.softener import SoftenerEngine, measure_softener


@pytest.fixture
def engine() -> SoftenerEngine:
    return SoftenerEngine()


class TestMeasureSoftener:
    def test_scenario_a_axes(self, softener):
        m = measure_softener(softener)
        assert m.daily_load_grains == 3_375
        assert m.regen_interval_days == pytest.approx(8.5)
        assert m.regens_per_year == pytest.approx(42.77, abs=0.01)
        assert m.odometer == 214
        assert m.resin_health == pytest.approx(75.0)
        assert m.salt_lbs_per_month == pytest.approx(31.6)

    def test_heavy_cycling_is_primary(self, softener):
        m = measure_softener(softener)
        assert m.primary_stressor == "Regeneration Cycling"
        assert m.aging_rate == pytest.approx(3.0, abs=0.01)

    def test_carbon_filter_extends_life(self, softener):
        unfiltered = measure_softener(softener.model_copy(update={"has_carbon_filter": False, "age_years": 2.0}))
        assert unfiltered.years_left_optimized > unfiltered.years_left_current
        assert unfiltered.life_extension > 0

    def test_percentages_in_range(self, softener):
        m = measure_softener(softener.model_copy(update={"age_years": 60.0, "hardness_gpg": 200.0}))
        assert 0.0 <= m.resin_health <= 100.0
        assert 0.0 <= m.failure_probability <= 100.0
        assert 0.0 <= m.health_score <= 100.0


class TestSoftenerScenarios:
    def test_scenario_a_healthy(self, engine, softener, as_of):
        result = engine.assess(softener, as_of)
        assert result.verdict.action == "MONITOR"
        assert result.verdict.badge == "HEALTHY"
        assert result.verdict.category == ActionCategory.PASS

    def test_scenario_a_without_carbon_needs_detox(self, engine, softener, as_of):
        result = engine.assess(softener.model_copy(update={"has_carbon_filter": False}), as_of)
        assert result.metrics.resin_health == pytest.approx(50.0)
        assert result.verdict.action == "RESIN_DETOX"

    def test_scenario_b_odometer_past_seal_limit(self, engine, softener, as_of):
        result = engine.assess(softener.model_copy(update={"age_years": 15.0}), as_of)
        assert result.metrics.odometer == 642
        # resin is also spent at 15 years, and resin outranks mechanics
        assert result.verdict.action == "REBED_OR_REPLACE"

    def test_seal_wear(self, engine, softener, as_of):
        p = softener.model_copy(update={"hardness_gpg": 45.0})
        result = engine.assess(p, as_of)
        assert result.metrics.odometer == 642
        assert result.verdict.action == "VALVE_REBUILD"
        assert result.verdict.badge == "SEAL_WEAR"
        assert "642" in result.verdict.reason

    def test_scenario_c_resin_before_odometer(self, engine, softener, as_of):
        p = softener.model_copy(update={"age_years": 8.0, "has_carbon_filter": False})
        result = engine.assess(p, as_of)
        assert result.metrics.resin_health == pytest.approx(20.0)
        assert result.verdict.action == "REBED_OR_REPLACE"
        assert result.verdict.badge == "RESIN_FAILURE"
        assert "Chlorine" in result.verdict.reason

    def test_mechanical_failure(self, engine, softener, as_of):
        p = softener.model_copy(update={"people_count": 6, "hardness_gpg": 30.0, "age_years": 10.0})
        result = engine.assess(p, as_of)
        assert result.metrics.odometer > 1_500
        assert result.verdict.action == "REPLACE_UNIT"
        assert result.verdict.badge == "MECHANICAL_FAILURE"

    def test_high_waste(self, engine, softener, as_of):
        p = softener.model_copy(update={"people_count": 6, "hardness_gpg": 30.0, "age_years": 1.0})
        result = engine.assess(p, as_of)
        assert result.verdict.action == "UPGRADE_EFFICIENCY"
        assert result.verdict.badge == "HIGH_WASTE"

    def test_breach_overrides_healthy(self, engine, softener, as_of):
        result = engine.assess(softener.model_copy(update={"visual_rust": True}), as_of)
        assert result.verdict.badge == "CRITICAL"
        assert result.verdict.urgent
        assert result.metrics.failure_probability == 99.9
        assert result.metrics.years_left_current == 0.0
        assert result.financial is None


class TestCalibratedEngine:
    def test_lower_seal_limit_calls_for_rebuild(self, softener, as_of):
        assert SoftenerEngine().assess(softener, as_of).verdict.action == "MONITOR"
        result = SoftenerEngine(SoftenerCalibration(seal_limit=100.0)).assess(softener, as_of)
        assert result.metrics.odometer == 214
        assert result.verdict.rule == "seal_wear"
        assert result.verdict.action == "VALVE_REBUILD"
        assert result.metrics.service_status == ServiceStatus.DUE

    def test_menu_follows_engine_seal_limit(self, softener, as_of):
        result = SoftenerEngine(SoftenerCalibration(seal_limit=100.0)).assess(softener, as_of)
        rebuild = next(i for i in result.service_menu if i.id == "valve-rebuild")
        assert rebuild.priority == ServicePriority.CRITICAL
        assert "100" in rebuild.trigger

    def test_higher_degraded_line_flags_resin(self, softener, as_of):
        result = SoftenerEngine(SoftenerCalibration(resin_degraded_pct=80.0)).assess(softener, as_of)
        assert result.verdict.rule == "resin_degraded"


class TestSoftenerOutputs:
    def test_salt_schedule_present(self, engine, softener, as_of):
        salt = engine.assess(softener, as_of).salt_schedule
        assert salt is not None
        assert salt.days_until_refill == 114
        assert salt.monthly_bags == 1
        assert salt.next_refill_date > as_of

    def test_healthy_gets_savings_plan(self, engine, softener, as_of):
        plan = engine.assess(softener, as_of).financial
        assert plan is not None
        assert plan.months_until_target == 84
        assert plan.estimated_cost > 2_500

    def test_service_status(self, engine, softener, as_of):
        p = softener.model_copy(update={"hardness_gpg": 45.0})
        assert engine.assess(p, as_of).metrics.service_status == ServiceStatus.DUE
