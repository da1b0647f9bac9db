"""Breakdown router: per-contributor totals with proportional tax and tip."""

from fastapi import APIRouter, Depends

import config
import schemas
from exceptions import SplitError
from store import ReceiptRound
from utils.assignments import AssignmentTable
from utils.currency import round_breakdown, round_money
from utils.splits import compute_breakdown, unclaimed_cost
from utils.validation import get_round_or_404, to_http_exception


router = APIRouter(tags=["breakdown"])


def build_breakdown_response(items, summary, assignments, currency: str) -> schemas.BreakdownOut:
    breakdown = compute_breakdown(items, summary, assignments)
    rounded = round_breakdown(breakdown, currency)
    return schemas.BreakdownOut(
        currency=currency,
        contributors=rounded.contributors,
        total_owed=round_money(breakdown.total_owed, currency),
        unclaimed_cost=round_money(unclaimed_cost(items, assignments), currency),
    )


@router.get("/receipts/{round_id}/breakdown", response_model=schemas.BreakdownOut)
def read_breakdown(receipt_round: ReceiptRound = Depends(get_round_or_404)):
    """Compute the final breakdown for an open round, rounded for display."""
    # One snapshot so the breakdown and the unclaimed cost agree
    snapshot = receipt_round.table.snapshot()
    try:
        return build_breakdown_response(
            receipt_round.items, receipt_round.summary, snapshot, receipt_round.currency
        )
    except SplitError as e:
        raise to_http_exception(e)


@router.post("/breakdown", response_model=schemas.BreakdownOut)
def calculate_breakdown(request: schemas.BreakdownRequest):
    """
    Stateless breakdown from items, summary and assignments in the body.

    Claims are replayed through an assignment table, so over-claimed items
    are rejected the same way interactive claims are.
    """
    currency = request.currency or config.DEFAULT_CURRENCY
    table = AssignmentTable(request.items)
    try:
        for item_index, contributions in sorted(request.assignments.items()):
            for contribution in contributions:
                table.add_contribution(item_index, contribution.contributor_name, contribution.claimed_quantity)
        return build_breakdown_response(request.items, request.summary, table.snapshot(), currency)
    except SplitError as e:
        raise to_http_exception(e)
