"""Keyword rule table that turns a transaction into boolean risk facts"""

import re
from dataclasses import dataclass
from typing import Optional, Pattern, Tuple
from aml_gateway.domain.models import Transaction

TEXT_FIELDS = ("description", "raw_description")
TAXONOMY_FIELDS = ("subcategory", "subsubcategory")


def _compile(pattern: str) -> Pattern[str]:
    return re.compile(pattern, re.IGNORECASE)


GAMBLING = _compile(
    r"\b(?:gambling|betting|casino|lottery|poker|bingo|sports betting|wager|stake\b"
    r"|bet(?:\d|fair|fred|way|s?\b))"
)
CASH = _compile(r"\b(?:cash|deposit(?:s|ed)?|atm)\b")
CASH_EXPLAINED = _compile(r"\b(?:salary|wage|pay|tip|cashback|refund|withdrawal|atm)")
TRANSFER = _compile(r"\b(?:transfer|remittance|international|swift|iban|sepa|wire)")
INTERNATIONAL = _compile(r"\b(?:international|swift|iban|sepa|foreign|fx)\b")
HIGH_RISK_JURISDICTION = _compile(r"\b(?:russia|iran|north korea|syria|myanmar|afghanistan|belarus)")
TRANSFER_PURPOSE = _compile(r"\b(?:family|support|business|investment|loan|repayment|gift|donation)")
SALARY = _compile(r"\b(?:salary|payroll|wages)\b")
CRYPTO_EXCHANGE = _compile(
    r"\b(?:coinbase(?: pro)?|binance|kraken|bitfinex|gemini|crypto\.com|etoro|robinhood|kucoin)\b"
)
TRADING_PLATFORM = _compile(r"\b(?:etoro|robinhood)\b")
PAYDAY_LENDER = _compile(r"\b(?:payday|wonga|quickquid|provident|brighthouse|sunny|satsuma)\b")
LUXURY_BRAND = _compile(
    r"\b(?:louis vuitton|gucci|prada|rolex|cartier|tiffany|bentley|ferrari|lamborghini"
    r"|porsche|louboutin|herm[eè]s|chanel|dior)\b"
)


@dataclass(frozen=True)
class KeywordRule:
    """
    Tag a transaction when its taxonomy and text match.

    category/subcategory are matched against the transaction's own
    category fields; pattern is searched in any of the listed fields.
    A rule without a pattern matches on taxonomy alone.
    """

    tag: str
    pattern: Optional[Pattern[str]] = None
    fields: Tuple[str, ...] = TEXT_FIELDS
    category: Optional[Pattern[str]] = None
    subcategory: Optional[Pattern[str]] = None

    def matches(self, txn: Transaction) -> bool:
        if self.category is not None and not self.category.search(txn.category or ""):
            return False
        if self.subcategory is not None and not self.subcategory.search(txn.subcategory or ""):
            return False
        if self.pattern is None:
            return True
        return any(self.pattern.search(getattr(txn, name) or "") for name in self.fields)


# Several rules may share a tag; the tag is set when any of them matches.
RULES: Tuple[KeywordRule, ...] = (
    KeywordRule(
        "gambling",
        GAMBLING,
        fields=("subsubcategory",) + TEXT_FIELDS,
        category=_compile(r"lifestyle"),
        subcategory=_compile(r"^\s*entertainment\s*$"),
    ),
    KeywordRule("gambling", GAMBLING),
    KeywordRule(
        "cash_deposit",
        CASH,
        fields=TAXONOMY_FIELDS + TEXT_FIELDS,
        category=_compile(r"^\s*income categories\s*$"),
    ),
    KeywordRule("cash_deposit", CASH),
    KeywordRule("cash_explained", CASH_EXPLAINED),
    KeywordRule(
        "transfer",
        category=_compile(r"^\s*financial commitments\s*$"),
        subcategory=_compile(r"^\s*transfer out\s*$"),
    ),
    KeywordRule("transfer", TRANSFER),
    KeywordRule("international", INTERNATIONAL),
    KeywordRule("high_risk_jurisdiction", HIGH_RISK_JURISDICTION),
    KeywordRule("transfer_purpose", TRANSFER_PURPOSE),
    KeywordRule("salary", _compile(r"salary|wage"), fields=("subcategory",)),
    KeywordRule("salary", SALARY),
    KeywordRule("crypto", CRYPTO_EXCHANGE),
    KeywordRule("trading_platform", TRADING_PLATFORM),
    KeywordRule("payday_loan", PAYDAY_LENDER),
    KeywordRule("luxury", LUXURY_BRAND),
)


@dataclass(frozen=True)
class TransactionFacts:
    """Keyword facts for one transaction, consumed by the scoring heuristics"""

    gambling: bool = False
    cash_deposit: bool = False
    cash_explained: bool = False
    transfer: bool = False
    international: bool = False
    high_risk_jurisdiction: bool = False
    transfer_purpose: bool = False
    salary: bool = False
    crypto: bool = False
    trading_platform: bool = False
    payday_loan: bool = False
    luxury: bool = False


def classify(txn: Transaction, rules: Tuple[KeywordRule, ...] = RULES) -> TransactionFacts:
    """Evaluate every rule once and collect the tags that matched"""
    tags = {rule.tag for rule in rules if rule.matches(txn)}
    return TransactionFacts(**{tag: True for tag in tags})
