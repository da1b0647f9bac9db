"""Assignments router: contributor claims on receipt items."""

from typing import Optional
import logging
from fastapi import APIRouter, Depends, HTTPException

import schemas
from exceptions import SplitError
from store import ReceiptRound
from utils.assignments import CompletionPolicy, default_policy
from utils.completeness import assignments_complete
from utils.validation import get_round_or_404, to_http_exception


logger = logging.getLogger(__name__)

router = APIRouter(tags=["assignments"])


@router.post(
    "/receipts/{round_id}/items/{item_index}/contributions",
    response_model=schemas.Contribution,
    status_code=201,
)
def add_contribution(
    item_index: int,
    contribution: schemas.ContributionCreate,
    receipt_round: ReceiptRound = Depends(get_round_or_404),
):
    try:
        return receipt_round.table.add_contribution(
            item_index, contribution.contributor_name, contribution.claimed_quantity
        )
    except SplitError as e:
        raise to_http_exception(e)


@router.patch(
    "/receipts/{round_id}/items/{item_index}/contributions/{contribution_index}",
    response_model=schemas.Contribution,
)
def update_contribution(
    item_index: int,
    contribution_index: int,
    update: schemas.ContributionUpdate,
    receipt_round: ReceiptRound = Depends(get_round_or_404),
):
    try:
        return receipt_round.table.update_contribution(
            item_index, contribution_index, update.field, update.value
        )
    except SplitError as e:
        raise to_http_exception(e)


@router.delete(
    "/receipts/{round_id}/items/{item_index}/contributions/{contribution_index}",
    response_model=schemas.Contribution,
)
def remove_contribution(
    item_index: int,
    contribution_index: int,
    receipt_round: ReceiptRound = Depends(get_round_or_404),
):
    try:
        return receipt_round.table.remove_contribution(item_index, contribution_index)
    except SplitError as e:
        raise to_http_exception(e)


@router.get("/receipts/{round_id}/assignment-status", response_model=schemas.AssignmentStatus)
def assignment_status(
    policy: Optional[CompletionPolicy] = None,
    receipt_round: ReceiptRound = Depends(get_round_or_404),
):
    """
    Report whether every item is assigned under a completion policy, and
    whether the "fully assigned" notification may be shown.
    """
    policy = policy or default_policy()
    unassigned = receipt_round.table.unassigned_items(policy=policy)
    return schemas.AssignmentStatus(
        policy=policy.value,
        fully_assigned=bool(receipt_round.items) and not unassigned,
        assignments_complete=assignments_complete(
            receipt_round.items, receipt_round.table, receipt_round.assignments_complete
        ),
        unassigned_items=unassigned,
    )


@router.post("/receipts/{round_id}/complete", response_model=schemas.AssignmentStatus)
def mark_complete(receipt_round: ReceiptRound = Depends(get_round_or_404)):
    """Set the round's "assignments complete" flag once every item is assigned."""
    policy = default_policy()
    unassigned = receipt_round.table.unassigned_items(policy=policy)
    if not receipt_round.items or unassigned:
        raise HTTPException(
            status_code=400,
            detail=f"Items {unassigned} are not assigned yet",
        )

    receipt_round.assignments_complete = True
    logger.info(f"Assignments marked complete for round {receipt_round.id}")
    return schemas.AssignmentStatus(
        policy=policy.value,
        fully_assigned=True,
        assignments_complete=assignments_complete(
            receipt_round.items, receipt_round.table, True
        ),
        unassigned_items=[],
    )
