"""
src/data/frames.py
──────────────────
Flatten a batch of assessments into a pandas DataFrame, one row per unit,
for ranking and reporting.
"""
from __future__ import annotations

import pandas as pd

from src.data.models import AssessmentResult

COLUMNS = [
    "family", "variant",
    "action", "category", "badge", "urgent", "rule",
    "bio_age", "aging_rate", "failure_probability", "health_score", "health_next_year", "primary_stressor",
    "service_status", "months_to_service", "months_to_lockout",
    "years_left_current", "years_left_optimized", "life_extension",
    "monthly_budget", "budget_urgency", "menu_items",
]


def _row(result: AssessmentResult) -> dict:
    m, v, plan = result.metrics, result.verdict, result.financial
    return {
        "family": result.family,
        "variant": result.variant,
        "action": v.action,
        "category": v.category.value,
        "badge": v.badge,
        "urgent": v.urgent,
        "rule": v.rule,
        "bio_age": m.bio_age,
        "aging_rate": m.aging_rate,
        "failure_probability": m.failure_probability,
        "health_score": m.health_score,
        "health_next_year": m.health_next_year,
        "primary_stressor": m.primary_stressor,
        "service_status": m.service_status.value,
        "months_to_service": m.months_to_service,
        "months_to_lockout": m.months_to_lockout,
        "years_left_current": m.years_left_current,
        "years_left_optimized": m.years_left_optimized,
        "life_extension": m.life_extension,
        "monthly_budget": plan.monthly_budget if plan else None,
        "budget_urgency": plan.urgency.value if plan else None,
        "menu_items": len(result.service_menu),
    }


def to_dataframe(results: list[AssessmentResult]) -> pd.DataFrame:
    """Convert a list of AssessmentResults to a pandas DataFrame."""
    return pd.DataFrame([_row(r) for r in results], columns=COLUMNS)


def rank_by_risk(df: pd.DataFrame) -> pd.DataFrame:
    """Urgent units first, then by failure probability, highest first."""
    return df.sort_values(
        ["urgent", "failure_probability"], ascending=[False, False], kind="stable"
    ).reset_index(drop=True)
