"""Lookup helpers and error translation for the receipt routers."""

from fastapi import Depends, HTTPException

from exceptions import SplitError
from store import ReceiptRound, ReceiptStore, get_store


def get_round_or_404(round_id: str, store: ReceiptStore = Depends(get_store)) -> ReceiptRound:
    """Get an open assignment round by ID or raise 404 if not found."""
    receipt_round = store.get(round_id)
    if not receipt_round:
        raise HTTPException(status_code=404, detail="Receipt not found")
    return receipt_round


def to_http_exception(error: SplitError) -> HTTPException:
    """Map a splitting-core error onto the HTTP status the routers return."""
    return HTTPException(status_code=error.status_code, detail=error.to_detail())
