"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from aml_gateway.domain.severity import Severity


@dataclass(frozen=True)
class Transaction:
    """Categorized bank transaction from the statement-extraction service"""

    date: Optional[str]  # raw date string, parsed by the analyzer
    description: str = ""
    raw_description: str = ""
    money_in: Optional[float] = None
    money_out: Optional[float] = None
    balance: Optional[float] = None
    category: str = ""
    subcategory: str = ""
    subsubcategory: Optional[str] = None
    note: Optional[str] = None

    @property
    def amount_in(self) -> float:
        return self.money_in or 0.0

    @property
    def amount_out(self) -> float:
        return self.money_out or 0.0


@dataclass
class TransactionRisk:
    """AML classification of a single transaction"""

    flagged: bool
    severity: Severity
    reasons: List[str] = field(default_factory=list)


@dataclass
class MonthlyRiskScore:
    """Aggregate risk for one calendar month"""

    month_key: str  # YYYY-MM
    score: int  # 0-100
    severity: Severity
    evidence: List[str] = field(default_factory=list)


@dataclass
class RiskAnalysis:
    """Output of the risk analyzer, keyed by input index and month"""

    tx_risks: Dict[int, TransactionRisk]
    monthly: Dict[str, MonthlyRiskScore]


@dataclass
class RiskSummary:
    """Period-level roll-up of a RiskAnalysis"""

    total_flagged: int
    high_count: int
    medium_count: int
    low_count: int
    latest_month: Optional[MonthlyRiskScore]
    high_risk_months: int
    medium_risk_months: int
    low_risk_months: int
    overall_level: Severity
    average_score: float
    indicator_counts: Dict[str, int]


class Verdict(Enum):
    """Traffic-light affordability verdict"""

    GREEN = "Green"
    AMBER = "Amber"
    RED = "Red"


@dataclass
class MonthlyAffordability:
    """Income and spending for one calendar month"""

    month_key: str  # YYYY-MM
    income: float
    expenses: float
    essential_expenses: float
    discretionary_expenses: float
    surplus: float
    dti: float  # expenses / income, 0.0 without income
    essential_ratio: float
    discretionary_ratio: float
    verdict: Verdict
    transaction_count: int


@dataclass
class AffordabilityReport:
    """Monthly averages and verdict against a proposed mortgage payment"""

    month_key: str  # latest month
    income: float  # monthly averages from here to discretionary_ratio
    expenses: float
    essential_expenses: float
    discretionary_expenses: float
    surplus: float
    dti: float
    essential_ratio: float
    discretionary_ratio: float
    verdict: Verdict
    verdict_reason: str
    income_trend: float  # % change, latest month vs previous
    expense_trend: float
    transaction_count: int
    months_analyzed: int
    total_income: float
    total_expenses: float
    start_month: str
    end_month: str
    mortgage_estimate: float
    monthly: List[MonthlyAffordability] = field(default_factory=list)
