"""
Currency display helpers.
"""

from app.calculations.rounding import round_money

CURRENCY_SYMBOLS = {
    "USD": "$",
    "GBP": "£",
    "INR": "₹",
    "EUR": "€",
}


def format_currency(amount: float, currency: str = "USD", decimals: int = 2) -> str:
    """
    Format an amount with a currency symbol and thousands separators.

    Unknown currency codes are written as a prefix, e.g. "CHF 1,000.00".

    Args:
        amount: Amount to format
        currency: ISO currency code
        decimals: Fraction digits to show

    Returns:
        Display string such as "$1,234.50" or "-£20.00"
    """
    code = currency.upper()
    rounded = round_money(amount, decimals)
    digits = f"{abs(rounded):,.{decimals}f}"
    sign = "-" if rounded < 0 else ""

    symbol = CURRENCY_SYMBOLS.get(code)
    if symbol is None:
        return f"{sign}{code} {digits}"
    return f"{sign}{symbol}{digits}"


def format_percent(value: float, decimals: int = 2) -> str:
    """Format a percentage value, e.g. 11.49 -> "11.49%"."""
    return f"{round_money(value, decimals):.{decimals}f}%"
