"""Split calculation for itemized receipts."""

import logging
from decimal import Decimal
from typing import Mapping, Sequence, Union

import schemas
from exceptions import InputError
from utils.assignments import AssignmentTable

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

Assignments = Union[AssignmentTable, Mapping[int, Sequence[schemas.Contribution]]]


def _as_mapping(assignments: Assignments) -> Mapping[int, Sequence[schemas.Contribution]]:
    if isinstance(assignments, AssignmentTable):
        return assignments.snapshot()
    return assignments or {}


def _is_number(value) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def _to_decimal(value) -> Decimal:
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def _validate_items(items: Sequence[schemas.LineItem]) -> None:
    for idx, item in enumerate(items):
        quantity = getattr(item, "quantity", None)
        unit_price = getattr(item, "unit_price", None)
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 0:
            raise InputError(f"Item {idx} has an invalid quantity: {quantity!r}")
        if not _is_number(unit_price) or not _to_decimal(unit_price).is_finite() or unit_price < 0:
            raise InputError(f"Item {idx} has an invalid unit price: {unit_price!r}")


def summary_amount(summary: Sequence[schemas.SummaryCharge], kind: schemas.SummaryKind) -> Decimal:
    """Amount of the first summary charge of the given kind, 0 if there is none."""
    for charge in summary:
        if charge.kind == kind:
            amount = charge.amount
            if not _is_number(amount) or not _to_decimal(amount).is_finite() or amount < 0:
                raise InputError(f"{kind.value} amount is invalid: {amount!r}")
            return _to_decimal(amount)
    return ZERO


def _claimed_units(contribution) -> int:
    """Units a well-formed claim takes; malformed claims take none."""
    name = getattr(contribution, "contributor_name", None)
    claimed = getattr(contribution, "claimed_quantity", None)
    if not name or not isinstance(claimed, int) or isinstance(claimed, bool) or claimed <= 0:
        return 0
    return claimed


def items_subtotal(items: Sequence[schemas.LineItem]) -> Decimal:
    """Sum of quantity x unit price over every line item."""
    return sum((item.quantity * _to_decimal(item.unit_price) for item in items), ZERO)


def compute_breakdown(
    items: Sequence[schemas.LineItem],
    summary: Sequence[schemas.SummaryCharge],
    assignments: Assignments,
) -> schemas.Breakdown:
    """
    Calculate each contributor's share based on the units they claimed.

    Algorithm:
    1. Sum quantity x unit price over ALL items (claimed or not); this is the
       base tax and tip are allocated against
    2. Take the first Tax and first Tip summary charge (0 when absent)
    3. For every claim, base cost = claimed units x unit price, and the claim
       carries base cost / base of the tax and of the tip
    4. Group the lines per contributor in order of first appearance

    Shares are kept at full precision; round with utils.currency.round_breakdown
    for display. Malformed claims (no name, quantity <= 0) are skipped.

    Raises:
        InputError: an item has a negative or non-numeric quantity or price,
            the tax/tip amount is invalid, or an item is claimed more times
            than its quantity (possible when claims are passed as a plain mapping)
    """
    _validate_items(items)
    table = _as_mapping(assignments)

    total_tax = summary_amount(summary, schemas.SummaryKind.TAX)
    total_tip = summary_amount(summary, schemas.SummaryKind.TIP)
    subtotal = items_subtotal(items)

    records: dict[str, schemas.ContributorBreakdown] = {}

    for idx, item in enumerate(items):
        unit_price = _to_decimal(item.unit_price)
        claimed_total = sum(_claimed_units(c) for c in table.get(idx, ()))
        if claimed_total > item.quantity:
            raise InputError(
                f"Item {idx} ('{item.label}') is claimed {claimed_total} times but has quantity {item.quantity}"
            )
        for contribution in table.get(idx, ()):
            claimed = _claimed_units(contribution)
            if not claimed:
                logger.debug(f"Skipping malformed claim on item {idx}: {contribution!r}")
                continue

            base_cost = claimed * unit_price
            if subtotal > 0:
                tax_share = (base_cost / subtotal) * total_tax
                tip_share = (base_cost / subtotal) * total_tip
            else:
                tax_share = ZERO
                tip_share = ZERO

            name = contribution.contributor_name
            record = records.get(name)
            if record is None:
                record = schemas.ContributorBreakdown(contributor_name=name)
                records[name] = record
            record.lines.append(schemas.BreakdownLine(
                item_label=item.label,
                claimed_quantity=claimed,
                base_cost=base_cost,
                tax_share=tax_share,
                tip_share=tip_share,
            ))
            record.total_owed += base_cost + tax_share + tip_share

    logger.debug(
        f"Computed breakdown for {len(records)} contributors "
        f"(subtotal={subtotal}, tax={total_tax}, tip={total_tip})"
    )
    return schemas.Breakdown(contributors=list(records.values()))


def unclaimed_cost(items: Sequence[schemas.LineItem], assignments: Assignments) -> Decimal:
    """Base cost of the units nobody has claimed yet."""
    table = _as_mapping(assignments)
    remaining = ZERO
    for idx, item in enumerate(items):
        claimed = sum(_claimed_units(c) for c in table.get(idx, ()))
        remaining += max(item.quantity - claimed, 0) * _to_decimal(item.unit_price)
    return remaining
