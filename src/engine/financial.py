"""
src/engine/financial.py
───────────────────────
Replacement savings plan for non-urgent verdicts.

  estimated_cost = cost today × (1 + inflation) ** years
  monthly_budget = estimated_cost / months to the replacement horizon
"""
from __future__ import annotations

from datetime import date

import pandas as pd

from config.calibration import FINANCIAL, FinancialCalibration
from config.verdicts import QUIET_BADGES, ActionCategory, BudgetUrgency
from src.data.models import FinancialPlan, Verdict

_RECOMMENDATIONS = {
    BudgetUrgency.IMMEDIATE: "Replacement is due now. Get quotes this month.",
    BudgetUrgency.HIGH: "Set aside ${monthly:,.0f}/month; replacement expected within {months} months.",
    BudgetUrgency.MEDIUM: "Start a replacement fund of ${monthly:,.0f}/month over the next {months} months.",
    BudgetUrgency.LOW: "Unit is sound. Budgeting ${monthly:,.0f}/month covers replacement in {months} months.",
}


def plan_eligible(verdict: Verdict) -> bool:
    """Urgent work and outright replacement are not a budgeting question."""
    if verdict.urgent or verdict.category == ActionCategory.REPLACE:
        return False
    return verdict.badge not in QUIET_BADGES


def budget_urgency(months: float, cal: FinancialCalibration = FINANCIAL) -> BudgetUrgency:
    if months < cal.immediate_months:
        return BudgetUrgency.IMMEDIATE
    if months < cal.high_months:
        return BudgetUrgency.HIGH
    if months < cal.medium_months:
        return BudgetUrgency.MEDIUM
    return BudgetUrgency.LOW


def add_months(start: date, months: int) -> date:
    return (pd.Timestamp(start) + pd.DateOffset(months=months)).date()


def build_financial_plan(
    verdict: Verdict,
    replacement_cost: float,
    horizon_years: float,
    as_of: date,
    cal: FinancialCalibration = FINANCIAL,
) -> FinancialPlan | None:
    """
    Savings plan toward replacement, or None when no plan applies.

    Args:
        verdict: The verdict the plan accompanies
        replacement_cost: Like-for-like replacement cost in today's dollars
        horizon_years: Years until replacement is expected
        as_of: Date the plan starts from

    Returns:
        FinancialPlan or None
    """
    if not plan_eligible(verdict):
        return None

    # horizon capped at 100 years
    months = int(round(min(max(horizon_years, 0.0), 100.0) * 12.0))
    estimated_cost = replacement_cost * (1.0 + cal.inflation_rate) ** (months / 12.0)
    monthly = float(round(estimated_cost / max(months, 1)))
    urgency = budget_urgency(months, cal)

    return FinancialPlan(
        months_until_target=months,
        target_date=add_months(as_of, months),
        estimated_cost=round(estimated_cost, 2),
        monthly_budget=monthly,
        urgency=urgency,
        recommendation=_RECOMMENDATIONS[urgency].format(monthly=monthly, months=months),
    )
