"""In-memory registry of open assignment rounds.

A round is the workflow state of one receipt being split: its items and
summary charges, the assignment table and the externally-set "assignments
complete" flag. Storing breakdowns or receipt history is not this module's job.
"""

import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Optional

import schemas
from utils.assignments import AssignmentTable

logger = logging.getLogger(__name__)


@dataclass
class ReceiptRound:
    id: str
    items: list[schemas.LineItem]
    summary: list[schemas.SummaryCharge]
    table: AssignmentTable
    currency: str = "USD"
    contributors: list[str] = field(default_factory=list)
    assignments_complete: bool = False

    def to_schema(self) -> schemas.ReceiptRound:
        table = self.table.snapshot()
        assignments = [
            schemas.ItemAssignment(
                item_index=idx,
                label=item.label,
                quantity=item.quantity,
                claimed_quantity=sum(c.claimed_quantity for c in table[idx]),
                contributions=list(table[idx]),
            )
            for idx, item in enumerate(self.items)
        ]
        return schemas.ReceiptRound(
            id=self.id,
            currency=self.currency,
            items=self.items,
            summary=self.summary,
            contributors=self.contributors,
            assignments=assignments,
            assignments_complete=self.assignments_complete,
        )


class ReceiptStore:
    def __init__(self):
        self._rounds: dict[str, ReceiptRound] = {}
        self._lock = threading.Lock()

    def create(
        self,
        items: list[schemas.LineItem],
        summary: list[schemas.SummaryCharge],
        currency: str = "USD",
        contributors: Optional[list[str]] = None,
    ) -> ReceiptRound:
        receipt_round = ReceiptRound(
            id=uuid.uuid4().hex,
            items=list(items),
            summary=list(summary),
            table=AssignmentTable(items),
            currency=currency,
            contributors=contributors or [],
        )
        with self._lock:
            self._rounds[receipt_round.id] = receipt_round
        logger.info(f"Opened assignment round {receipt_round.id} with {len(items)} items")
        return receipt_round

    def get(self, round_id: str) -> Optional[ReceiptRound]:
        with self._lock:
            return self._rounds.get(round_id)

    def reset(self, round_id: str) -> Optional[ReceiptRound]:
        """Start a new assignment round for the same receipt."""
        receipt_round = self.get(round_id)
        if receipt_round is None:
            return None
        receipt_round.table.reset()
        receipt_round.assignments_complete = False
        logger.info(f"Reset assignment round {round_id}")
        return receipt_round

    def clear(self) -> None:
        with self._lock:
            self._rounds.clear()


receipt_store = ReceiptStore()


def get_store() -> ReceiptStore:
    return receipt_store
