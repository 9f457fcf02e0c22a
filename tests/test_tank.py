"""
tests/test_tank.py
───────────────────
Tests for the storage-tank engine.
"""
import pytest

from config.calibration import TankCalibration
from config.verdicts import ActionCategory, AnodeStatus, ServicePriority, ServiceStatus
from src.data.models import ExpansionTankStatus, LeakSource, LocationType, TempSetting
from src.engine.tank import TankEngine, measure_tank


@pytest.fixture
def engine() -> TankEngine:
    return TankEngine()


class TestMeasureTank:
    def test_healthy_metrics(self, gas_tank):
        m = measure_tank(gas_tank)
        assert m.sediment_lbs == pytest.approx(0.44)
        assert m.sediment_rate == pytest.approx(0.22)
        assert m.anode_status == AnodeStatus.PROTECTED
        assert m.shield_life == pytest.approx(4.0)
        assert m.typical_lifespan == 10.0
        assert m.thermal_cycles == 876
        assert m.failure_probability < 5.0
        assert m.service_status == ServiceStatus.OPTIMAL

    def test_pressure_is_primary_stressor(self, gas_tank):
        m = measure_tank(gas_tank.model_copy(update={"house_psi": 90.0}))
        assert m.primary_stressor == "High Pressure"
        assert m.stress_factors.pressure == pytest.approx(5.0625)

    def test_regulating_pressure_buys_life(self, gas_tank):
        m = measure_tank(gas_tank.model_copy(update={"house_psi": 78.0, "age_years": 4.0}))
        assert m.years_left_optimized > m.years_left_current
        assert m.life_extension > 0

    def test_premium_tier_lasts_longer(self, gas_tank):
        builder = measure_tank(gas_tank.model_copy(update={"age_years": 9.0}))
        premium = measure_tank(gas_tank.model_copy(update={"age_years": 9.0, "warranty_years": 15.0}))
        assert premium.failure_probability < builder.failure_probability

    def test_more_hardness_more_sediment(self, gas_tank):
        lbs = [measure_tank(gas_tank.model_copy(update={"hardness_gpg": h})).sediment_lbs for h in (0, 5, 10, 20)]
        assert lbs == sorted(lbs)


class TestTankVerdicts:
    def test_healthy_is_optimal(self, engine, gas_tank, as_of):
        result = engine.assess(gas_tank, as_of)
        assert result.verdict.rule == "optimal"
        assert result.verdict.badge == "OPTIMAL"
        assert result.financial is None

    def test_scenario_d_leak_is_breach(self, engine, gas_tank, as_of):
        result = engine.assess(gas_tank.model_copy(update={"is_leaking": True}), as_of)
        assert result.verdict.action == "REPLACE"
        assert result.verdict.badge == "CRITICAL"
        assert result.verdict.urgent
        assert result.metrics.failure_probability == 99.9
        assert result.metrics.health_score == pytest.approx(0.1)
        assert result.financial is None

    @pytest.mark.parametrize("source", list(LeakSource))
    def test_any_leak_is_breach(self, engine, gas_tank, as_of, source):
        p = gas_tank.model_copy(update={"is_leaking": True, "leak_source": source})
        result = engine.assess(p, as_of)
        assert result.verdict.rule == "containment_breach"
        assert result.verdict.action == "REPLACE"
        assert result.verdict.badge == "CRITICAL"
        assert result.verdict.urgent
        assert result.metrics.breach
        assert result.metrics.failure_probability == 99.9

    def test_fitting_leak_named_in_reason(self, engine, gas_tank, as_of):
        p = gas_tank.model_copy(update={"is_leaking": True, "leak_source": LeakSource.FITTING_VALVE})
        assert "fitting" in engine.assess(p, as_of).verdict.reason.lower()

    def test_sediment_lockout(self, engine, gas_tank, as_of):
        p = gas_tank.model_copy(update={"hardness_gpg": 25.0, "people_count": 6, "age_years": 10.0})
        result = engine.assess(p, as_of)
        assert result.metrics.sediment_lbs > 15.0
        assert result.verdict.rule == "sediment_lockout"

    def test_critical_pressure(self, engine, gas_tank, as_of):
        result = engine.assess(gas_tank.model_copy(update={"house_psi": 90.0}), as_of)
        assert result.verdict.rule == "critical_pressure"
        assert result.verdict.category == ActionCategory.UPGRADE
        assert result.verdict.urgent
        assert "90 PSI" in result.verdict.reason

    def test_failed_prv(self, engine, gas_tank, as_of):
        p = gas_tank.model_copy(update={"house_psi": 90.0, "has_prv": True, "has_exp_tank": True})
        assert engine.assess(p, as_of).verdict.rule == "failed_prv"

    def test_missing_thermal_expansion(self, engine, gas_tank, as_of):
        result = engine.assess(gas_tank.model_copy(update={"is_closed_loop": True}), as_of)
        assert result.verdict.rule == "missing_thermal_expansion"
        assert result.metrics.is_transient_pressure

    def test_waterlogged_expansion_tank(self, engine, gas_tank, as_of):
        p = gas_tank.model_copy(update={
            "is_closed_loop": True, "has_exp_tank": True, "exp_tank_status": ExpansionTankStatus.WATERLOGGED,
        })
        assert engine.assess(p, as_of).verdict.rule == "failed_expansion_tank"

    def test_monitor_after_warranty(self, engine, gas_tank, as_of):
        result = engine.assess(gas_tank.model_copy(update={"age_years": 8.0}), as_of)
        assert result.verdict.rule == "monitor"
        assert result.verdict.category == ActionCategory.PASS
        assert result.financial is not None
        assert result.financial.target_date > as_of

    def test_drain_pan_in_attic(self, engine, gas_tank, as_of):
        result = engine.assess(gas_tank.model_copy(update={"location": LocationType.ATTIC}), as_of)
        assert result.verdict.rule == "drain_pan"

    def test_statistical_end_of_life(self, engine, gas_tank, as_of):
        p = gas_tank.model_copy(update={"age_years": 18.0, "temp_setting": TempSetting.HOT, "location": LocationType.GARAGE})
        result = engine.assess(p, as_of)
        assert result.metrics.failure_probability > 60.0
        assert result.verdict.rule == "statistical_end_of_life"

    def test_breach_beats_everything(self, engine, gas_tank, as_of):
        p = gas_tank.model_copy(update={
            "visual_rust": True, "house_psi": 120.0, "age_years": 15.0, "hardness_gpg": 30.0,
        })
        assert engine.assess(p, as_of).verdict.rule == "containment_breach"


class TestCalibratedEngine:
    def test_lower_safe_pressure_flags_house(self, gas_tank, as_of):
        assert TankEngine().assess(gas_tank, as_of).verdict.rule == "optimal"
        result = TankEngine(TankCalibration(psi_safe=55.0)).assess(gas_tank, as_of)
        assert result.verdict.rule == "critical_pressure"

    def test_lower_flush_threshold_marks_flush_due(self, gas_tank, as_of):
        p = gas_tank.model_copy(update={"age_years": 4.0})
        assert measure_tank(p).service_status == ServiceStatus.OPTIMAL
        assert measure_tank(p, TankCalibration(sediment_flush=0.5)).service_status == ServiceStatus.DUE

    def test_menu_uses_engine_pressure_limits(self, gas_tank, as_of):
        result = TankEngine(TankCalibration(psi_safe=55.0)).assess(gas_tank, as_of)
        assert "prv_critical" in [i.id for i in result.service_menu]


class TestTankMenu:
    def test_menu_sorted_critical_first(self, engine, gas_tank, as_of):
        menu = engine.assess(gas_tank.model_copy(update={"house_psi": 90.0}), as_of).service_menu
        assert menu[0].id == "prv_critical"
        order = [ServicePriority.CRITICAL, ServicePriority.RECOMMENDED, ServicePriority.OPTIONAL]
        ranks = [order.index(i.priority) for i in menu]
        assert ranks == sorted(ranks)

    def test_healthy_menu(self, engine, gas_tank, as_of):
        ids = [i.id for i in engine.assess(gas_tank, as_of).service_menu]
        assert ids == ["prv_longevity", "drain_pan"]

    def test_flush_offered_when_due(self, engine, gas_tank, as_of):
        p = gas_tank.model_copy(update={"hardness_gpg": 15.0, "age_years": 8.0})
        menu = {i.id: i for i in engine.assess(p, as_of).service_menu}
        assert menu["flush"].priority == ServicePriority.RECOMMENDED

    def test_replacement_cost_by_tier(self, engine, gas_tank):
        assert engine.replacement_cost(gas_tank) == 1_400.0
        assert engine.replacement_cost(gas_tank.model_copy(update={"variant": "ELECTRIC"})) == 1_200.0
