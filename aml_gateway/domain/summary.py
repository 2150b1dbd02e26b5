"""Period-level roll-up of a risk analysis for report views"""

from typing import Dict, List, Tuple
from aml_gateway.domain.models import RiskAnalysis, RiskSummary
from aml_gateway.domain.severity import Severity

# Month bands used by the period assessment
HIGH_RISK_MONTH_SCORE = 50
MEDIUM_RISK_MONTH_SCORE = 25

# Indicator family -> keywords found in reason text
INDICATOR_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "gambling": ("gambling",),
    "cash": ("cash deposit",),
    "transfer": ("transfer", "remittance", "new payee"),
    "pass_through": ("pass-through",),
    "crypto": ("crypto",),
    "lifestyle": ("lifestyle",),
    "high_cost": ("high-cost",),
}


def count_indicators(reasons: List[str], evidence: List[str]) -> Dict[str, int]:
    """
    Count reasons per indicator family.

    A reason counts once per family even if several keywords match.
    Overdraft is a month-level pattern, so it is counted over evidence.
    Crypto payments are excluded from the transfer family.
    """
    counts = {family: 0 for family in INDICATOR_KEYWORDS}
    for reason in reasons:
        text = reason.lower()
        for family, keywords in INDICATOR_KEYWORDS.items():
            if family == "transfer" and "crypto" in text:
                continue
            if any(keyword in text for keyword in keywords):
                counts[family] += 1
    counts["overdraft"] = sum(1 for line in evidence if "overdraft" in line.lower())
    return counts


def summarize(analysis: RiskAnalysis) -> RiskSummary:
    """
    Summarize flagged transactions and monthly scores for a whole statement period.

    Overall level:
    - High:   more than half of the months scored 50+
    - Medium: more than 30% of the months scored 25-49
    - Low:    otherwise
    - None:   no months at all
    """
    risks = list(analysis.tx_risks.values())
    months = sorted(analysis.monthly.values(), key=lambda m: m.month_key)

    high_months = sum(1 for m in months if m.score >= HIGH_RISK_MONTH_SCORE)
    medium_months = sum(1 for m in months if MEDIUM_RISK_MONTH_SCORE <= m.score < HIGH_RISK_MONTH_SCORE)
    low_months = sum(1 for m in months if m.score < MEDIUM_RISK_MONTH_SCORE)

    if not months:
        overall = Severity.NONE
    elif high_months > len(months) * 0.5:
        overall = Severity.HIGH
    elif medium_months > len(months) * 0.3:
        overall = Severity.MEDIUM
    else:
        overall = Severity.LOW

    average = round(sum(m.score for m in months) / len(months), 1) if months else 0.0

    reasons = [reason for r in risks for reason in r.reasons]
    evidence = [line for m in months for line in m.evidence]

    return RiskSummary(
        total_flagged=sum(1 for r in risks if r.flagged),
        high_count=sum(1 for r in risks if r.severity is Severity.HIGH),
        medium_count=sum(1 for r in risks if r.severity is Severity.MEDIUM),
        low_count=sum(1 for r in risks if r.severity is Severity.LOW),
        latest_month=months[-1] if months else None,
        high_risk_months=high_months,
        medium_risk_months=medium_months,
        low_risk_months=low_months,
        overall_level=overall,
        average_score=average,
        indicator_counts=count_indicators(reasons, evidence),
    )
