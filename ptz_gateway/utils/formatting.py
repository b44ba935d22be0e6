"""French display formatting for amounts, percentages and flags"""

from typing import Optional


def format_euros(amount: Optional[int]) -> str:
    """225000 -> '225 000 €'"""
    if amount is None:
        return ""
    return f"{amount:,}".replace(",", " ") + " €"


def format_percent(value: Optional[int]) -> str:
    if value is None:
        return ""
    return f"{value} %"


def format_yes_no(flag: Optional[bool]) -> str:
    if flag is None:
        return ""
    return "Oui" if flag else "Non"
