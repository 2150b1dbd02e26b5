"""Currency and percentage formatting for human-readable risk reasons"""


def format_gbp(amount: float) -> str:
    return f"£{amount:,.2f}"


def format_pct(share: float) -> str:
    """0.175 -> '17.5%'"""
    return f"{share * 100:.1f}%"


def is_round_thousand(amount: float) -> bool:
    """True for whole multiples of 1,000 (amounts ending in '000')"""
    return amount >= 1000 and float(amount).is_integer() and int(amount) % 1000 == 0
