"""Currency rounding and formatting for breakdown display."""

from decimal import Decimal, ROUND_HALF_UP

import schemas

# Currency symbols for formatting
CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CAD": "CA$",
    "CNY": "¥",
    "HKD": "HK$"
}

# Currencies without minor units
ZERO_DECIMAL_CURRENCIES = {"JPY"}

CENT = Decimal("0.01")


def round_money(amount: Decimal, currency: str = "USD") -> Decimal:
    """Round a full-precision amount to the currency's display precision."""
    exponent = Decimal("1") if currency in ZERO_DECIMAL_CURRENCIES else CENT
    return Decimal(amount).quantize(exponent, rounding=ROUND_HALF_UP)


def format_currency(amount: Decimal, currency: str) -> str:
    """
    Format an amount as a currency string with symbol.

    Args:
        amount: Amount in major units (e.g., Decimal("12.34") for $12.34)
        currency: Currency code (e.g., "USD", "EUR")

    Returns:
        Formatted string with symbol (e.g., "$12.34", "€12.34")
    """
    symbol = CURRENCY_SYMBOLS.get(currency, currency)
    rounded = round_money(amount, currency)

    if rounded < 0:
        return f"-{symbol}{abs(rounded)}"
    return f"{symbol}{rounded}"


def round_breakdown(breakdown: schemas.Breakdown, currency: str = "USD") -> schemas.Breakdown:
    """
    Copy of a breakdown with every money field rounded for display.

    Each line is rounded on its own and a contributor's total is the rounded
    full-precision total, so lines may not add up to the total to the cent.
    """
    contributors = []
    for record in breakdown.contributors:
        lines = [
            line.model_copy(update={
                "base_cost": round_money(line.base_cost, currency),
                "tax_share": round_money(line.tax_share, currency),
                "tip_share": round_money(line.tip_share, currency),
            })
            for line in record.lines
        ]
        contributors.append(schemas.ContributorBreakdown(
            contributor_name=record.contributor_name,
            lines=lines,
            total_owed=round_money(record.total_owed, currency),
        ))
    return schemas.Breakdown(contributors=contributors)
