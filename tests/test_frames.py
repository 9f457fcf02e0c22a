"""
tests/test_frames.py
─────────────────────
Tests for the tabular export of assessment batches.
"""
import pandas as pd

from src.data.frames import COLUMNS, rank_by_risk, to_dataframe
from src.engine.router import assess


class TestToDataframe:
    def test_one_row_per_result(self, gas_tank, softener, tankless_gas, as_of):
        results = [assess(p, as_of=as_of) for p in (gas_tank, softener, tankless_gas)]
        df = to_dataframe(results)
        assert isinstance(df, pd.DataFrame)
        assert len(df) == 3
        assert list(df.columns) == COLUMNS

    def test_values_flattened(self, softener, as_of):
        df = to_dataframe([assess(softener, as_of=as_of)])
        row = df.iloc[0]
        assert row["family"] == "SOFTENER"
        assert row["badge"] == "HEALTHY"
        assert row["budget_urgency"] == "LOW"

    def test_no_plan_leaves_budget_empty(self, gas_tank, as_of):
        df = to_dataframe([assess(gas_tank, as_of=as_of)])
        assert pd.isna(df.iloc[0]["monthly_budget"])

    def test_empty_batch(self):
        df = to_dataframe([])
        assert df.empty
        assert list(df.columns) == COLUMNS


class TestRankByRisk:
    def test_urgent_first(self, gas_tank, as_of):
        healthy = assess(gas_tank, as_of=as_of)
        leaking = assess(gas_tank.model_copy(update={"is_leaking": True}), as_of=as_of)
        ranked = rank_by_risk(to_dataframe([healthy, leaking]))
        assert bool(ranked.iloc[0]["urgent"]) is True
        assert ranked.iloc[0]["rule"] == "containment_breach"
