"""
tests/test_router.py
─────────────────────
Tests for the assessment entry point: dispatch, validation and the
properties every result must satisfy.
"""
from datetime import date

import pytest

from src.engine.errors import ConfigurationError, UnsupportedEquipmentError
from src.engine.hybrid import HybridEngine
from src.engine.router import assess, engine_for, validate_identity
from src.engine.softener import SoftenerEngine
from src.engine.tank import TankEngine
from src.engine.tankless import TanklessEngine

VARIANTS = [
    ("WATER_HEATER", "GAS"),
    ("WATER_HEATER", "ELECTRIC"),
    ("WATER_HEATER", "HYBRID"),
    ("WATER_HEATER", "TANKLESS_GAS"),
    ("WATER_HEATER", "TANKLESS_ELECTRIC"),
    ("SOFTENER", "ION_EXCHANGE"),
]


class TestDispatch:
    @pytest.mark.parametrize("variant,engine_type", [
        ("GAS", TankEngine),
        ("ELECTRIC", TankEngine),
        ("HYBRID", HybridEngine),
        ("TANKLESS_GAS", TanklessEngine),
        ("TANKLESS_ELECTRIC", TanklessEngine),
    ])
    def test_water_heaters(self, make_profile, variant, engine_type):
        engine = engine_for(make_profile(family="WATER_HEATER", variant=variant, age_years=3))
        assert type(engine) is engine_type

    def test_softener(self, softener):
        assert isinstance(engine_for(softener), SoftenerEngine)


class TestValidation:
    def test_unknown_variant(self, make_profile):
        with pytest.raises(UnsupportedEquipmentError) as exc:
            assess(make_profile(family="WATER_HEATER", variant="SOLAR", age_years=3))
        assert exc.value.variant == "SOLAR"
        assert exc.value.family == "WATER_HEATER"

    def test_unknown_family(self, make_profile):
        with pytest.raises(UnsupportedEquipmentError):
            assess(make_profile(family="BOILER", variant="GAS", age_years=3))

    def test_variant_outside_family(self):
        with pytest.raises(UnsupportedEquipmentError):
            validate_identity("SOFTENER", "GAS")

    def test_is_a_configuration_error(self):
        assert issubclass(UnsupportedEquipmentError, ConfigurationError)
        assert issubclass(UnsupportedEquipmentError, ValueError)

    def test_lowercase_identity_accepted(self, make_profile, as_of):
        result = assess(make_profile(family="water_heater", variant="gas", age_years=3), as_of=as_of)
        assert result.variant == "GAS"


class TestProperties:
    @pytest.mark.parametrize("family,variant", VARIANTS)
    def test_deterministic(self, make_profile, as_of, family, variant):
        p = make_profile(family=family, variant=variant, age_years=7, hardness_gpg=14, house_psi=72)
        assert assess(p, as_of=as_of) == assess(p, as_of=as_of)

    @pytest.mark.parametrize("family,variant", VARIANTS)
    def test_verdict_independent_of_date(self, make_profile, family, variant):
        p = make_profile(family=family, variant=variant, age_years=7, hardness_gpg=14)
        a = assess(p, as_of=date(2024, 1, 1))
        b = assess(p, as_of=date(2030, 1, 1))
        assert a.metrics == b.metrics
        assert a.verdict == b.verdict

    @pytest.mark.parametrize("family,variant", VARIANTS)
    def test_clamped_under_extreme_inputs(self, make_profile, as_of, family, variant):
        p = make_profile(
            family=family, variant=variant, age_years=100, hardness_gpg=200, house_psi=300,
            people_count=50, usage_type="heavy", temp_setting="HOT", is_closed_loop=True,
            has_circ_pump=True, connection_type="DIRECT_COPPER", sanitizer_type="CHLORAMINE",
            has_softener=True, softener_salt_status="OK", tank_capacity_gal=1, softener_capacity_grains=1,
            flow_rate_gpm=0, rated_flow_gpm=10, has_recirculation_loop=True,
        )
        m = assess(p, as_of=as_of).metrics
        assert 0.0 <= m.failure_probability <= 100.0
        assert 0.0 <= m.health_score <= 100.0
        for value in (m.resin_health, m.anode_depletion_percent, m.scale_buildup,
                      m.flow_degradation, m.hybrid_efficiency):
            assert value is None or 0.0 <= value <= 100.0

    @pytest.mark.parametrize("family,variant", VARIANTS)
    def test_new_unit_is_valid(self, make_profile, as_of, family, variant):
        result = assess(make_profile(family=family, variant=variant, age_years=0, people_count=0), as_of=as_of)
        assert result.metrics.bio_age == 0.0

    @pytest.mark.parametrize("family,variant", VARIANTS)
    @pytest.mark.parametrize("leak_source", ["NONE", "TANK_BODY", "FITTING_VALVE", "DRAIN_PAN"])
    def test_breach_always_wins(self, make_profile, as_of, family, variant, leak_source):
        p = make_profile(family=family, variant=variant, age_years=1, is_leaking=True, leak_source=leak_source)
        result = assess(p, as_of=as_of)
        assert result.metrics.breach
        assert result.verdict.urgent
        assert result.metrics.failure_probability == 99.9
        assert result.verdict.category.value == "REPLACE"
        assert result.financial is None

    def test_mechanical_wear_monotonic_in_hardness(self, softener):
        rates = [
            assess(softener.model_copy(update={"hardness_gpg": h})).metrics.stress_factors.mechanical
            for h in (0, 5, 10, 20, 40)
        ]
        assert rates == sorted(rates)

    def test_mechanical_wear_monotonic_in_people(self, softener):
        rates = [
            assess(softener.model_copy(update={"people_count": n})).metrics.regens_per_year
            for n in (1, 2, 3, 6, 10)
        ]
        assert rates == sorted(rates)

    def test_chemical_decay_independent_of_load(self, softener):
        chem = {
            assess(softener.model_copy(update={"hardness_gpg": h})).metrics.stress_factors.chemical
            for h in (0, 10, 40)
        }
        assert len(chem) == 1

    @pytest.mark.parametrize("family,variant", VARIANTS)
    def test_salt_only_for_softeners(self, make_profile, as_of, family, variant):
        result = assess(make_profile(family=family, variant=variant, age_years=3), as_of=as_of)
        assert (result.salt_schedule is not None) == (family == "SOFTENER")

    @pytest.mark.parametrize("family,variant", VARIANTS)
    def test_no_plan_on_urgent_or_replace(self, make_profile, as_of, family, variant):
        for age in (1, 6, 12, 20):
            result = assess(make_profile(family=family, variant=variant, age_years=age, house_psi=95), as_of=as_of)
            if result.verdict.urgent or result.verdict.category.value == "REPLACE":
                assert result.financial is None
