"""Affordability analysis - monthly surplus, debt-to-income and a mortgage verdict"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple
from aml_gateway.domain.models import Transaction, MonthlyAffordability, AffordabilityReport, Verdict
from aml_gateway.utils.date_utils import parse_transaction_date, month_key

# Spending in these top-level categories is essential, everything else discretionary
ESSENTIAL_CATEGORIES = frozenset({"Essential Living Costs", "Family & Dependents", "Financial Commitments"})

DEFAULT_MORTGAGE_ESTIMATE = 1_200  # monthly, GBP
GREEN_MAX_DTI = 0.35
AMBER_MAX_DTI = 0.5
AMBER_SURPLUS_SHARE = 0.8  # of the mortgage estimate


@dataclass
class _MonthTotals:
    income: float = 0.0
    expenses: float = 0.0
    essential: float = 0.0
    discretionary: float = 0.0
    count: int = 0


def _ratio(part: float, income: float) -> float:
    return part / income if income > 0 else 0.0


def _trend(latest: float, previous: float) -> float:
    """Percentage change, 0.0 when there is nothing to compare against"""
    if previous == 0:
        return 0.0
    return (latest - previous) / previous * 100


def determine_verdict(surplus: float, dti: float, mortgage_estimate: float) -> Tuple[Verdict, str]:
    """
    Rate a monthly surplus and debt-to-income ratio against a mortgage payment.

    Rules (first match wins):
    - Green: surplus covers the payment and DTI < 35%
    - Amber: surplus covers 80% of the payment and DTI < 50%
    - Red: negative surplus, or DTI over 50%
    - Amber otherwise (marginal)
    """
    if surplus >= mortgage_estimate and dti < GREEN_MAX_DTI:
        return Verdict.GREEN, "Strong average surplus and low debt-to-income ratio"
    if surplus >= AMBER_SURPLUS_SHARE * mortgage_estimate and dti < AMBER_MAX_DTI:
        return Verdict.AMBER, "Good position but consider reducing discretionary spending"
    if surplus < 0:
        return Verdict.RED, "Negative average surplus - not recommended for additional commitments"
    if dti > AMBER_MAX_DTI:
        return Verdict.RED, "High debt-to-income ratio - focus on debt reduction first"
    return Verdict.AMBER, "Marginal affordability - consider budget optimization"


def _month_affordability(key: str, totals: _MonthTotals, mortgage_estimate: float) -> MonthlyAffordability:
    surplus = totals.income - totals.expenses
    dti = _ratio(totals.expenses, totals.income)
    verdict, _ = determine_verdict(surplus, dti, mortgage_estimate)
    return MonthlyAffordability(
        month_key=key,
        income=totals.income,
        expenses=totals.expenses,
        essential_expenses=totals.essential,
        discretionary_expenses=totals.discretionary,
        surplus=surplus,
        dti=dti,
        essential_ratio=_ratio(totals.essential, totals.income),
        discretionary_ratio=_ratio(totals.discretionary, totals.income),
        verdict=verdict,
        transaction_count=totals.count,
    )


def assess_affordability(
    transactions: Sequence[Transaction],
    mortgage_estimate: float = DEFAULT_MORTGAGE_ESTIMATE,
) -> Optional[AffordabilityReport]:
    """
    Average monthly income and spending over a statement and rate it
    against a proposed monthly mortgage payment.

    Transactions with an unparseable date are skipped. Returns None when
    no transaction has a usable date.
    """
    months: Dict[str, _MonthTotals] = {}

    for idx, txn in enumerate(transactions):
        day = parse_transaction_date(txn.date)
        if day is None:
            logging.warning(
                f"Skipping transaction {idx} in affordability: invalid date {txn.date!r}",
                extra={"transaction_index": idx, "raw_date": txn.date},
            )
            continue

        totals = months.setdefault(month_key(day), _MonthTotals())
        totals.income += txn.amount_in
        totals.expenses += txn.amount_out
        totals.count += 1

        if txn.amount_out > 0:
            if txn.category.strip() in ESSENTIAL_CATEGORIES:
                totals.essential += txn.amount_out
            else:
                totals.discretionary += txn.amount_out

    if not months:
        return None

    keys = sorted(months)
    count = len(keys)
    monthly: List[MonthlyAffordability] = [_month_affordability(k, months[k], mortgage_estimate) for k in keys]

    total_income = sum(m.income for m in monthly)
    total_expenses = sum(m.expenses for m in monthly)
    total_essential = sum(m.essential_expenses for m in monthly)
    total_discretionary = sum(m.discretionary_expenses for m in monthly)

    avg_income = total_income / count
    avg_expenses = total_expenses / count
    avg_surplus = avg_income - avg_expenses
    dti = _ratio(avg_expenses, avg_income)
    verdict, reason = determine_verdict(avg_surplus, dti, mortgage_estimate)

    latest = monthly[-1]
    previous = monthly[-2] if count > 1 else None

    return AffordabilityReport(
        month_key=latest.month_key,
        income=avg_income,
        expenses=avg_expenses,
        essential_expenses=total_essential / count,
        discretionary_expenses=total_discretionary / count,
        surplus=avg_surplus,
        dti=dti,
        essential_ratio=_ratio(total_essential / count, avg_income),
        discretionary_ratio=_ratio(total_discretionary / count, avg_income),
        verdict=verdict,
        verdict_reason=reason,
        income_trend=_trend(latest.income, previous.income) if previous else 0.0,
        expense_trend=_trend(latest.expenses, previous.expenses) if previous else 0.0,
        transaction_count=sum(m.transaction_count for m in monthly),
        months_analyzed=count,
        total_income=total_income,
        total_expenses=total_expenses,
        start_month=keys[0],
        end_month=keys[-1],
        mortgage_estimate=mortgage_estimate,
        monthly=monthly,
    )
