"""Unit tests for the period risk summary"""

from aml_gateway.domain.models import RiskAnalysis, MonthlyRiskScore, TransactionRisk
from aml_gateway.domain.scoring import analyze_risks
from aml_gateway.domain.severity import Severity, severity_for_score
from aml_gateway.domain.summary import summarize, count_indicators


def month(key: str, score: int, evidence=None) -> MonthlyRiskScore:
    return MonthlyRiskScore(month_key=key, score=score, severity=severity_for_score(score), evidence=evidence or [])


def test_summarize_march_statement(march_statement):
    """Two High transactions in a single High month"""
    summary = summarize(analyze_risks(march_statement))

    assert summary.total_flagged == 2
    assert (summary.high_count, summary.medium_count, summary.low_count) == (2, 0, 0)
    assert summary.latest_month.month_key == "2024-03"
    assert summary.high_risk_months == 1
    assert summary.overall_level is Severity.HIGH
    assert summary.average_score == 100.0
    assert summary.indicator_counts["gambling"] == 2
    assert summary.indicator_counts["cash"] >= 2


def test_summarize_empty_analysis():
    summary = summarize(RiskAnalysis(tx_risks={}, monthly={}))

    assert summary.total_flagged == 0
    assert summary.latest_month is None
    assert summary.overall_level is Severity.NONE
    assert summary.average_score == 0.0
    assert all(count == 0 for count in summary.indicator_counts.values())


def test_overall_level_from_month_distribution():
    """Medium when more than 30% of months sit in the 25-49 band"""
    analysis = RiskAnalysis(
        tx_risks={},
        monthly={
            "2024-01": month("2024-01", 0),
            "2024-02": month("2024-02", 30),
            "2024-03": month("2024-03", 60),
        },
    )

    summary = summarize(analysis)

    assert (summary.high_risk_months, summary.medium_risk_months, summary.low_risk_months) == (1, 1, 1)
    assert summary.overall_level is Severity.MEDIUM
    assert summary.average_score == 30.0
    assert summary.latest_month.month_key == "2024-03"


def test_latest_month_uses_month_order_not_insertion_order():
    analysis = RiskAnalysis(
        tx_risks={},
        monthly={"2024-05": month("2024-05", 10), "2024-01": month("2024-01", 80)},
    )
    assert summarize(analysis).latest_month.month_key == "2024-05"


def test_count_indicators():
    """Crypto transfers do not count as plain transfers; overdraft comes from evidence"""
    reasons = [
        "🚨 Large crypto exchange transfer £6,000.00",
        "⚠️ Transfer of £1,500.00 to new payee",
        "🚨 Rapid in-out pass-through: £1,000.00 in, £1,010.00 out on 2024-07-10",
        "🚨 Lifestyle mismatch: luxury spend £2,500.00 is 83.3% of month-to-date income",
        "🚨 High-cost credit payment £120.00 to payday lender",
    ]
    evidence = ["Overdraft dependency: negative balance on 16 of 30 days (+35)"]

    counts = count_indicators(reasons, evidence)

    assert counts == {
        "gambling": 0,
        "cash": 0,
        "transfer": 1,
        "pass_through": 1,
        "crypto": 1,
        "lifestyle": 1,
        "high_cost": 1,
        "overdraft": 1,
    }


def test_flagged_count_ignores_unflagged_risks():
    analysis = RiskAnalysis(
        tx_risks={
            0: TransactionRisk(flagged=False, severity=Severity.NONE),
            1: TransactionRisk(flagged=True, severity=Severity.LOW, reasons=["ℹ️ Unexplained cash deposit £600.00"]),
        },
        monthly={"2024-07": month("2024-07", 8)},
    )

    summary = summarize(analysis)

    assert summary.total_flagged == 1
    assert summary.low_count == 1
    assert summary.overall_level is Severity.LOW
    assert summary.indicator_counts["cash"] == 1
