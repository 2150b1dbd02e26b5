"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Literal, Optional
from aml_gateway.domain.models import (
    Transaction,
    TransactionRisk,
    MonthlyRiskScore,
    RiskSummary,
    MonthlyAffordability,
    AffordabilityReport,
)

SeverityLabel = Literal["High", "Medium", "Low", "None"]


class TransactionSchema(BaseModel):
    """Single transaction as returned by the statement-extraction service"""

    model_config = ConfigDict(extra="ignore")

    # Kept as a raw string: missing or unparseable dates are skipped by the analyzer, not rejected here
    date: Optional[str] = None
    description: Optional[str] = ""
    raw_description: Optional[str] = ""
    money_in: Optional[float] = Field(None, ge=0)
    money_out: Optional[float] = Field(None, ge=0)
    balance: Optional[float] = None
    category: Optional[str] = ""
    subcategory: Optional[str] = ""
    subsubcategory: Optional[str] = None
    note: Optional[str] = None

    def to_domain(self) -> Transaction:
        return Transaction(
            date=self.date,
            description=self.description or "",
            raw_description=self.raw_description or "",
            money_in=self.money_in,
            money_out=self.money_out,
            balance=self.balance,
            category=self.category or "",
            subcategory=self.subcategory or "",
            subsubcategory=self.subsubcategory,
            note=self.note,
        )


class StatementRequest(BaseModel):
    """Request body for POST /v1/risk/analyze and /v1/risk/summary"""

    model_config = ConfigDict(extra="ignore")

    bank: Optional[str] = None
    transactions: List[TransactionSchema] = Field(default_factory=list)


class TransactionRiskSchema(BaseModel):
    """Risk classification for one transaction"""

    flagged: bool
    severity: SeverityLabel
    reasons: List[str]

    @classmethod
    def from_domain(cls, risk: TransactionRisk) -> "TransactionRiskSchema":
        return cls(flagged=risk.flagged, severity=risk.severity.value, reasons=risk.reasons)


class MonthlyRiskScoreSchema(BaseModel):
    """Aggregate risk score for one month"""

    model_config = ConfigDict(populate_by_name=True)

    month_key: str = Field(..., alias="monthKey", description="YYYY-MM")
    score: int = Field(..., ge=0, le=100)
    severity: SeverityLabel
    evidence: List[str]

    @classmethod
    def from_domain(cls, month: MonthlyRiskScore) -> "MonthlyRiskScoreSchema":
        return cls(
            month_key=month.month_key,
            score=month.score,
            severity=month.severity.value,
            evidence=month.evidence,
        )


class AnalysisResponse(BaseModel):
    """Response for POST /v1/risk/analyze"""

    model_config = ConfigDict(populate_by_name=True)

    bank: Optional[str] = None
    tx_risks: Dict[int, TransactionRiskSchema] = Field(..., alias="txRisks")
    monthly: Dict[str, MonthlyRiskScoreSchema]
    skipped: List[int] = Field(default_factory=list, description="Indices skipped for invalid dates")


class SummaryResponse(BaseModel):
    """Response for POST /v1/risk/summary"""

    bank: Optional[str] = None
    total_flagged: int
    high_count: int
    medium_count: int
    low_count: int
    latest_month: Optional[MonthlyRiskScoreSchema] = None
    high_risk_months: int
    medium_risk_months: int
    low_risk_months: int
    overall_level: SeverityLabel
    average_score: float
    indicator_counts: Dict[str, int]

    @classmethod
    def from_domain(cls, summary: RiskSummary, bank: Optional[str] = None) -> "SummaryResponse":
        latest = summary.latest_month
        return cls(
            bank=bank,
            total_flagged=summary.total_flagged,
            high_count=summary.high_count,
            medium_count=summary.medium_count,
            low_count=summary.low_count,
            latest_month=MonthlyRiskScoreSchema.from_domain(latest) if latest else None,
            high_risk_months=summary.high_risk_months,
            medium_risk_months=summary.medium_risk_months,
            low_risk_months=summary.low_risk_months,
            overall_level=summary.overall_level.value,
            average_score=summary.average_score,
            indicator_counts=summary.indicator_counts,
        )


VerdictLabel = Literal["Green", "Amber", "Red"]


class AffordabilityRequest(StatementRequest):
    """Request body for POST /v1/affordability"""

    mortgage_estimate: Optional[float] = Field(None, ge=0, description="Proposed monthly payment, GBP")


class MonthlyAffordabilitySchema(BaseModel):
    """Income, spending and verdict for one month"""

    model_config = ConfigDict(populate_by_name=True)

    month_key: str = Field(..., alias="monthKey", description="YYYY-MM")
    income: float
    expenses: float
    essential_expenses: float
    discretionary_expenses: float
    surplus: float
    dti: float
    essential_ratio: float
    discretionary_ratio: float
    verdict: VerdictLabel
    transaction_count: int

    @classmethod
    def from_domain(cls, month: MonthlyAffordability) -> "MonthlyAffordabilitySchema":
        return cls(
            month_key=month.month_key,
            income=month.income,
            expenses=month.expenses,
            essential_expenses=month.essential_expenses,
            discretionary_expenses=month.discretionary_expenses,
            surplus=month.surplus,
            dti=month.dti,
            essential_ratio=month.essential_ratio,
            discretionary_ratio=month.discretionary_ratio,
            verdict=month.verdict.value,
            transaction_count=month.transaction_count,
        )


class AffordabilityReportSchema(BaseModel):
    """Monthly averages, trends and the overall verdict"""

    model_config = ConfigDict(populate_by_name=True)

    month_key: str = Field(..., alias="monthKey", description="Latest month, YYYY-MM")
    income: float
    expenses: float
    essential_expenses: float
    discretionary_expenses: float
    surplus: float
    dti: float
    essential_ratio: float
    discretionary_ratio: float
    verdict: VerdictLabel
    verdict_reason: str
    income_trend: float
    expense_trend: float
    transaction_count: int
    months_analyzed: int
    total_income: float
    total_expenses: float
    start_month: str
    end_month: str
    mortgage_estimate: float
    monthly: List[MonthlyAffordabilitySchema]

    @classmethod
    def from_domain(cls, report: AffordabilityReport) -> "AffordabilityReportSchema":
        return cls(
            month_key=report.month_key,
            income=report.income,
            expenses=report.expenses,
            essential_expenses=report.essential_expenses,
            discretionary_expenses=report.discretionary_expenses,
            surplus=report.surplus,
            dti=report.dti,
            essential_ratio=report.essential_ratio,
            discretionary_ratio=report.discretionary_ratio,
            verdict=report.verdict.value,
            verdict_reason=report.verdict_reason,
            income_trend=report.income_trend,
            expense_trend=report.expense_trend,
            transaction_count=report.transaction_count,
            months_analyzed=report.months_analyzed,
            total_income=report.total_income,
            total_expenses=report.total_expenses,
            start_month=report.start_month,
            end_month=report.end_month,
            mortgage_estimate=report.mortgage_estimate,
            monthly=[MonthlyAffordabilitySchema.from_domain(m) for m in report.monthly],
        )


class AffordabilityResponse(BaseModel):
    """Response for POST /v1/affordability; report is null when no transaction has a usable date"""

    bank: Optional[str] = None
    report: Optional[AffordabilityReportSchema] = None
