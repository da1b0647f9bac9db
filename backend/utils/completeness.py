"""Consistency check behind the "everything is assigned" notification."""

import logging
from typing import Sequence

import schemas
from utils.assignments import AssignmentTable

logger = logging.getLogger(__name__)


def assignments_complete(
    items: Sequence[schemas.LineItem],
    assignments,
    marked_complete: bool,
) -> bool:
    """
    True iff the round was marked complete AND every item is claimed in full.

    Runs independently of the mutation path, so the item list may have been
    edited since the claims were captured (items added, removed or repriced).
    Any inconsistency yields False; this never raises.
    """
    if not marked_complete or not items:
        return False

    try:
        table = assignments.snapshot() if isinstance(assignments, AssignmentTable) else dict(assignments or {})
        for idx, item in enumerate(items):
            quantity = item.quantity
            if not isinstance(quantity, int) or isinstance(quantity, bool):
                return False
            claimed = sum(c.claimed_quantity for c in table.get(idx, ()))
            if claimed < quantity:
                return False
    except (AttributeError, TypeError, ValueError, ArithmeticError) as e:
        logger.warning(f"Completeness check on inconsistent assignments: {e}")
        return False

    return True
