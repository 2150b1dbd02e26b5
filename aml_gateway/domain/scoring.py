"""AML risk engine - per-transaction flags and monthly risk scores"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Dict, List, Sequence, Set, Tuple
from aml_gateway.domain.models import Transaction, TransactionRisk, MonthlyRiskScore, RiskAnalysis
from aml_gateway.domain.rules import TransactionFacts, classify
from aml_gateway.domain.severity import Severity, URGENCY_EMOJI, severity_for_score
from aml_gateway.utils.date_utils import parse_transaction_date, month_key, days_in_month
from aml_gateway.utils.money import format_gbp, format_pct, is_round_thousand

# Amounts are GBP
LARGE_CASH_DEPOSIT = 1_000
UNEXPLAINED_CASH_DEPOSIT = 500
STRUCTURING_BAND = (9_000, 9_500)  # inclusive
NEAR_THRESHOLD_BAND = (8_500, 9_000)  # upper bound exclusive
INTERNATIONAL_TRANSFER_MIN = 500
NEW_PAYEE_MIN = 1_000
NEW_PAYEE_HIGH = 5_000
REPEAT_PAYEE_MIN = 1_000
UNEXPLAINED_TRANSFER_MIN = 2_000
PASS_THROUGH_RATIO = 0.7
PASS_THROUGH_MAX_NET = 50
PASS_THROUGH_DAY_MIN = 1_000
CRYPTO_MEDIUM = 1_000
CRYPTO_HIGH = 5_000
CRYPTO_VERY_LARGE = 10_000
LUXURY_MIN = 1_000
LUXURY_INCOME_SHARE = 0.20
SALARY_BURST_DAYS = 3

# Monthly score components
SEVERITY_POINTS = {Severity.HIGH: 40, Severity.MEDIUM: 20, Severity.LOW: 8}
MONTHLY_TRANSFERS_MIN = 5_000
MAX_SCORE = 100


@dataclass
class DailyFlow:
    """Money moved in and out on one calendar day"""

    money_in: float = 0.0
    money_out: float = 0.0

    @property
    def total(self) -> float:
        return self.money_in + self.money_out

    @property
    def balance_ratio(self) -> float:
        """min/max of in and out, 0.0 unless both sides moved"""
        if self.money_in <= 0 or self.money_out <= 0:
            return 0.0
        return min(self.money_in, self.money_out) / max(self.money_in, self.money_out)

    def is_pass_through(self) -> bool:
        return self.balance_ratio >= PASS_THROUGH_RATIO and self.total >= PASS_THROUGH_DAY_MIN


@dataclass
class MonthAccumulator:
    """Running aggregates for one month, built in input order"""

    year: int
    month: int
    total_income: float = 0.0
    gambling_out: float = 0.0
    gambling_count: int = 0
    cash_in: List[float] = field(default_factory=list)
    transfers_out: float = 0.0
    payee_counts: Dict[str, int] = field(default_factory=lambda: defaultdict(int))
    salary_dates: List[date] = field(default_factory=list)
    daily: Dict[date, DailyFlow] = field(default_factory=lambda: defaultdict(DailyFlow))
    negative_days: Set[date] = field(default_factory=set)
    severities: List[Severity] = field(default_factory=list)


@dataclass
class TransactionContext:
    """Everything a heuristic may read while one transaction is evaluated"""

    txn: Transaction
    day: date
    facts: TransactionFacts
    month: MonthAccumulator
    known_payees: Set[str]

    @property
    def payee(self) -> str:
        return (self.txn.raw_description or self.txn.description or "").strip().lower()

    @property
    def is_outbound_transfer(self) -> bool:
        # Crypto exchange payments are scored by the crypto heuristic only
        return self.facts.transfer and not self.facts.crypto and self.txn.amount_out > 0


class RiskAssessment:
    """
    Severity ratchet for a single transaction.

    Every change goes through max(), so severity never moves backwards
    while the heuristics run.
    """

    def __init__(self) -> None:
        self.severity = Severity.NONE
        self.reasons: List[str] = []

    def flag(self, level: Severity, reason: str) -> None:
        """Raise to at least `level` and record the reason"""
        self.severity = max(self.severity, level)
        self.reasons.append(f"{URGENCY_EMOJI[level]} {reason}".strip())

    def escalate(self, reason: str) -> None:
        """Move one tier up from the current severity"""
        self.flag(self.severity.step_up(), reason)

    def nudge(self, reason: str) -> None:
        """None -> Low, Low -> Medium, higher tiers unchanged"""
        if self.severity < Severity.MEDIUM:
            self.flag(self.severity.step_up(), reason)
        else:
            self.flag(self.severity, reason)

    def to_risk(self) -> TransactionRisk:
        flagged = bool(self.reasons) and self.severity is not Severity.NONE
        return TransactionRisk(
            flagged=flagged,
            severity=self.severity if flagged else Severity.NONE,
            reasons=list(self.reasons),
        )


def _accumulate(ctx: TransactionContext) -> None:
    """Fold the current transaction into its month before it is scored"""
    txn, m, facts = ctx.txn, ctx.month, ctx.facts

    m.total_income += txn.amount_in

    if facts.gambling and txn.amount_out > 0:
        m.gambling_out += txn.amount_out
        m.gambling_count += 1

    if facts.cash_deposit and txn.amount_in > 0:
        m.cash_in.append(txn.amount_in)

    if ctx.is_outbound_transfer:
        m.transfers_out += txn.amount_out
        m.payee_counts[ctx.payee] += 1

    if facts.salary and txn.amount_in > 0:
        m.salary_dates.append(ctx.day)

    flow = m.daily[ctx.day]
    flow.money_in += txn.amount_in
    flow.money_out += txn.amount_out

    if txn.balance is not None and txn.balance < 0:
        m.negative_days.add(ctx.day)


def check_gambling(ctx: TransactionContext, assessment: RiskAssessment) -> None:
    """Gambling share of month-to-date income, spree frequency, salary bursts"""
    txn, m = ctx.txn, ctx.month
    if not (ctx.facts.gambling and txn.amount_out > 0):
        return

    amount = txn.amount_out
    share = amount / m.total_income if m.total_income > 0 else 0.0
    detail = f"Gambling outflow {format_gbp(amount)} is {format_pct(share)} of month-to-date income"
    if share >= 0.15:
        assessment.flag(Severity.HIGH, f"{detail} (over 15%)")
    elif share >= 0.10:
        assessment.flag(Severity.MEDIUM, f"{detail} (over 10%)")
    elif share >= 0.05:
        assessment.flag(Severity.LOW, f"{detail} (over 5%)")
    else:
        assessment.flag(Severity.LOW, f"Gambling transaction {format_gbp(amount)} ({format_pct(share)} of income)")

    if m.gambling_count > 4:
        assessment.flag(Severity.HIGH, f"Frequent gambling: {m.gambling_count} gambling transactions this month")
    elif m.gambling_count > 3:
        assessment.escalate(f"Repeated gambling: {m.gambling_count} gambling transactions this month")

    if any(0 <= (ctx.day - paid).days <= SALARY_BURST_DAYS for paid in m.salary_dates):
        assessment.escalate(f"Gambling burst within {SALARY_BURST_DAYS} days after salary credit")


def check_cash_deposit(ctx: TransactionContext, assessment: RiskAssessment) -> None:
    """Large, frequent, unexplained, and near-threshold cash deposits"""
    txn, m = ctx.txn, ctx.month
    if not (ctx.facts.cash_deposit and txn.amount_in > 0):
        return

    amount = txn.amount_in
    if amount >= LARGE_CASH_DEPOSIT:
        assessment.flag(Severity.HIGH, f"Large cash deposit {format_gbp(amount)}")

    if m.total_income > 0 and amount / m.total_income >= 0.10:
        share = format_pct(amount / m.total_income)
        assessment.flag(Severity.MEDIUM, f"Cash deposit {format_gbp(amount)} is {share} of month-to-date income")

    low, high = STRUCTURING_BAND
    near_low, near_high = NEAR_THRESHOLD_BAND
    if low <= amount <= high:
        assessment.flag(
            Severity.HIGH,
            f"Structuring risk: cash deposit {format_gbp(amount)} just below the £10,000 reporting threshold",
        )
    elif near_low <= amount < near_high:
        reason = f"Near-threshold cash deposit {format_gbp(amount)} (£8,500-£9,000)"
        if assessment.severity >= Severity.MEDIUM:
            assessment.escalate(reason)
        else:
            assessment.flag(Severity.MEDIUM, reason)

    deposits = len(m.cash_in)
    if deposits > 3:
        assessment.flag(Severity.HIGH, f"Frequent cash deposits: {deposits} this month")
    elif deposits > 2:
        assessment.flag(Severity.MEDIUM, f"Repeated cash deposits: {deposits} this month")

    if amount >= UNEXPLAINED_CASH_DEPOSIT and not ctx.facts.cash_explained:
        assessment.flag(Severity.LOW, f"Unexplained cash deposit {format_gbp(amount)}")


def check_transfer(ctx: TransactionContext, assessment: RiskAssessment) -> None:
    """International remittances, new payees, round and repeated transfers"""
    if not ctx.is_outbound_transfer:
        return

    txn, m, facts = ctx.txn, ctx.month, ctx.facts
    amount = txn.amount_out
    payee = ctx.payee

    if facts.international and amount >= INTERNATIONAL_TRANSFER_MIN:
        assessment.flag(Severity.HIGH, f"International remittance {format_gbp(amount)}")
        if facts.high_risk_jurisdiction:
            assessment.flag(Severity.HIGH, "International transfer references a high-risk jurisdiction")

    if payee not in ctx.known_payees and amount >= NEW_PAYEE_MIN:
        level = Severity.HIGH if amount >= NEW_PAYEE_HIGH else Severity.MEDIUM
        assessment.flag(level, f"Transfer of {format_gbp(amount)} to new payee")

    if is_round_thousand(amount):
        assessment.nudge(f"Round-number transfer {format_gbp(amount)}")

    repeats = m.payee_counts[payee]
    if repeats > 3 and amount >= REPEAT_PAYEE_MIN:
        assessment.flag(Severity.HIGH, f"Repeated transfers: {repeats} to the same payee this month")

    if amount >= UNEXPLAINED_TRANSFER_MIN and not facts.transfer_purpose:
        assessment.nudge(f"Large transfer {format_gbp(amount)} with no stated purpose")


def check_pass_through(ctx: TransactionContext, assessment: RiskAssessment) -> None:
    """Funds arriving and leaving on the same day in similar amounts"""
    txn = ctx.txn
    flow = ctx.month.daily[ctx.day]
    if (
        flow.balance_ratio >= PASS_THROUGH_RATIO
        and abs(txn.amount_in - txn.amount_out) < PASS_THROUGH_MAX_NET
        and flow.total >= PASS_THROUGH_DAY_MIN
    ):
        assessment.flag(
            Severity.HIGH,
            f"Rapid in-out pass-through: {format_gbp(flow.money_in)} in, "
            f"{format_gbp(flow.money_out)} out on {ctx.day.isoformat()}",
        )


def check_high_cost_credit(ctx: TransactionContext, assessment: RiskAssessment) -> None:
    if ctx.facts.payday_loan and ctx.txn.amount_out > 0:
        assessment.flag(Severity.HIGH, f"High-cost credit payment {format_gbp(ctx.txn.amount_out)} to payday lender")


def check_crypto(ctx: TransactionContext, assessment: RiskAssessment) -> None:
    """Payments to crypto exchanges and trading platforms, tiered by amount"""
    txn = ctx.txn
    if not (ctx.facts.crypto and txn.amount_out > 0):
        return

    amount = txn.amount_out
    if amount >= CRYPTO_HIGH:
        assessment.flag(Severity.HIGH, f"Large crypto exchange transfer {format_gbp(amount)}")
    elif amount >= CRYPTO_MEDIUM:
        assessment.flag(Severity.MEDIUM, f"Crypto exchange transfer {format_gbp(amount)}")
    else:
        assessment.flag(Severity.LOW, f"Crypto exchange transfer {format_gbp(amount)}")

    if ctx.facts.trading_platform:
        assessment.flag(Severity.LOW, "Crypto payment to a trading platform")

    if amount >= CRYPTO_VERY_LARGE:
        assessment.flag(Severity.HIGH, f"Very large crypto transfer {format_gbp(amount)} (£10,000 or more)")


def check_lifestyle(ctx: TransactionContext, assessment: RiskAssessment) -> None:
    """Luxury spending out of proportion to income; spend within income is not flagged"""
    txn, m = ctx.txn, ctx.month
    if not (ctx.facts.luxury and txn.amount_out > LUXURY_MIN):
        return

    amount = txn.amount_out
    if m.total_income <= 0:
        assessment.flag(
            Severity.HIGH,
            f"Lifestyle mismatch: luxury spend {format_gbp(amount)} with no income this month",
        )
    elif amount / m.total_income > LUXURY_INCOME_SHARE:
        share = format_pct(amount / m.total_income)
        assessment.flag(
            Severity.HIGH,
            f"Lifestyle mismatch: luxury spend {format_gbp(amount)} is {share} of month-to-date income",
        )


Heuristic = Callable[[TransactionContext, RiskAssessment], None]

# Evaluation order matters for step-up escalations
HEURISTICS: Tuple[Heuristic, ...] = (
    check_gambling,
    check_cash_deposit,
    check_transfer,
    check_pass_through,
    check_high_cost_credit,
    check_crypto,
    check_lifestyle,
)


def assess_transaction(ctx: TransactionContext) -> RiskAssessment:
    """Run every heuristic against one transaction"""
    assessment = RiskAssessment()
    for heuristic in HEURISTICS:
        heuristic(ctx, assessment)
    return assessment


def score_month(key: str, m: MonthAccumulator) -> MonthlyRiskScore:
    """
    Additive monthly score, capped at 100.

    Components:
    - +40 / +20 / +8 per High / Medium / Low transaction
    - Gambling >= 20% of income: +50, >= 10%: +25
    - Any cash deposit >= £9,000: +45; 3+ deposits in £8,500-£9,000: +30
    - Outbound transfers >= £5,000: +20
    - Negative balance on > 50% of days: +35, > 25%: +15
    - 3+ pass-through days: +25
    """
    score = 0
    evidence: List[str] = []

    for level, points in SEVERITY_POINTS.items():
        count = sum(1 for s in m.severities if s is level)
        if count:
            score += points * count
            evidence.append(f"{count} {level.value.lower()}-risk transaction(s) (+{points * count})")

    if m.total_income > 0:
        gambling_share = m.gambling_out / m.total_income
        if gambling_share >= 0.20:
            score += 50
            evidence.append(f"Gambling equals {format_pct(gambling_share)} of income (+50)")
        elif gambling_share >= 0.10:
            score += 25
            evidence.append(f"Gambling equals {format_pct(gambling_share)} of income (+25)")

    large_cash = [v for v in m.cash_in if v >= STRUCTURING_BAND[0]]
    if large_cash:
        score += 45
        evidence.append(f"{len(large_cash)} cash deposit(s) of £9,000 or more (+45)")

    near_threshold = [v for v in m.cash_in if NEAR_THRESHOLD_BAND[0] <= v < NEAR_THRESHOLD_BAND[1]]
    if len(near_threshold) >= 3:
        score += 30
        evidence.append(f"{len(near_threshold)} near-threshold cash deposits £8,500-£9,000 (+30)")

    if m.transfers_out >= MONTHLY_TRANSFERS_MIN:
        score += 20
        evidence.append(f"High outbound transfers {format_gbp(m.transfers_out)} (+20)")

    month_days = days_in_month(m.year, m.month)
    overdraft_share = len(m.negative_days) / month_days
    if overdraft_share > 0.5:
        score += 35
        evidence.append(f"Overdraft dependency: negative balance on {len(m.negative_days)} of {month_days} days (+35)")
    elif overdraft_share > 0.25:
        score += 15
        evidence.append(f"Overdraft dependency: negative balance on {len(m.negative_days)} of {month_days} days (+15)")

    pass_days = sum(1 for flow in m.daily.values() if flow.is_pass_through())
    if pass_days >= 3:
        score += 25
        evidence.append(f"{pass_days} pass-through days (+25)")

    score = min(score, MAX_SCORE)
    return MonthlyRiskScore(month_key=key, score=score, severity=severity_for_score(score), evidence=evidence)


def analyze_risks(transactions: Sequence[Transaction]) -> RiskAnalysis:
    """
    Main entry point: flag individual transactions and score each month.

    Transactions are evaluated in the order given; frequency counts and the
    new-payee check only see transactions up to and including the current
    one. Transactions with an unparseable date are skipped and logged.
    """
    tx_risks: Dict[int, TransactionRisk] = {}
    months: Dict[str, MonthAccumulator] = {}
    known_payees: Set[str] = set()

    for idx, txn in enumerate(transactions):
        day = parse_transaction_date(txn.date)
        if day is None:
            logging.warning(
                f"Skipping transaction {idx}: invalid date {txn.date!r}",
                extra={"transaction_index": idx, "raw_date": txn.date},
            )
            continue

        key = month_key(day)
        if key not in months:
            months[key] = MonthAccumulator(year=day.year, month=day.month)
        month = months[key]

        ctx = TransactionContext(
            txn=txn,
            day=day,
            facts=classify(txn),
            month=month,
            known_payees=known_payees,
        )
        _accumulate(ctx)

        risk = assess_transaction(ctx).to_risk()
        if ctx.is_outbound_transfer:
            known_payees.add(ctx.payee)

        month.severities.append(risk.severity)
        tx_risks[idx] = risk

    monthly = {key: score_month(key, m) for key, m in months.items()}
    return RiskAnalysis(tx_risks=tx_risks, monthly=monthly)
