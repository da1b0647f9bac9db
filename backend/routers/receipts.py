"""Receipts router: open, inspect and reset assignment rounds."""

from fastapi import APIRouter, Depends, HTTPException

import config
import schemas
from store import ReceiptRound, ReceiptStore, get_store
from utils.assignments import parse_contributor_names
from utils.receipt_entry import build_receipt
from utils.validation import get_round_or_404


router = APIRouter(tags=["receipts"])


@router.post("/receipts", response_model=schemas.ReceiptRound, status_code=201)
def create_receipt(receipt: schemas.ReceiptCreate, store: ReceiptStore = Depends(get_store)):
    """
    Open an assignment round from manually entered rows and/or pasted text.

    Rows whose name reads like a summary line (tax, tip, subtotal, total) are
    filed as summary charges instead of items.
    """
    items, summary = build_receipt(receipt)
    if not items:
        raise HTTPException(status_code=400, detail="Please add at least one item before submitting.")

    receipt_round = store.create(
        items,
        summary,
        currency=receipt.currency or config.DEFAULT_CURRENCY,
        contributors=parse_contributor_names(receipt.contributors),
    )
    return receipt_round.to_schema()


@router.get("/receipts/{round_id}", response_model=schemas.ReceiptRound)
def read_receipt(receipt_round: ReceiptRound = Depends(get_round_or_404)):
    return receipt_round.to_schema()


@router.post("/receipts/{round_id}/reset", response_model=schemas.ReceiptRound)
def reset_receipt(
    round_id: str,
    receipt_round: ReceiptRound = Depends(get_round_or_404),
    store: ReceiptStore = Depends(get_store),
):
    """Discard every claim and the complete flag, keeping the items."""
    store.reset(round_id)
    return receipt_round.to_schema()
