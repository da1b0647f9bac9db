from decimal import Decimal

from schemas import Breakdown, BreakdownLine, ContributorBreakdown
from utils.currency import format_currency, round_breakdown, round_money


def test_round_money_half_up():
    assert round_money(Decimal("8.8125")) == Decimal("8.81")
    assert round_money(Decimal("2.9375")) == Decimal("2.94")
    assert round_money(Decimal("0.005")) == Decimal("0.01")
    assert round_money(Decimal("1234.5"), "JPY") == Decimal("1235")


def test_format_currency():
    assert format_currency(Decimal("12.345"), "USD") == "$12.35"
    assert format_currency(Decimal("12.3"), "EUR") == "€12.30"
    assert format_currency(Decimal("-5"), "GBP") == "-£5.00"
    assert format_currency(Decimal("1500"), "JPY") == "¥1500"
    assert format_currency(Decimal("3"), "CHF") == "CHF3.00"


def test_round_breakdown_leaves_original_untouched():
    line = BreakdownLine(
        item_label="Coffee",
        claimed_quantity=1,
        base_cost=Decimal("2.50"),
        tax_share=Decimal("0.1875"),
        tip_share=Decimal("0.25"),
    )
    breakdown = Breakdown(contributors=[
        ContributorBreakdown(contributor_name="Bob", lines=[line], total_owed=Decimal("2.9375")),
    ])

    rounded = round_breakdown(breakdown)

    bob = rounded.contributors[0]
    assert bob.total_owed == Decimal("2.94")
    assert bob.lines[0].tax_share == Decimal("0.19")
    assert breakdown.contributors[0].total_owed == Decimal("2.9375")
    assert breakdown.contributors[0].lines[0].tax_share == Decimal("0.1875")
