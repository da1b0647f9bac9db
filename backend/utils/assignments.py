"""Per-item contributor claims under the quantity-conservation invariant."""

import logging
import threading
from decimal import Decimal
from enum import Enum
from typing import Optional, Sequence

import config
import schemas
from exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

CONTRIBUTION_FIELDS = ("contributor_name", "claimed_quantity")


class CompletionPolicy(str, Enum):
    """When a receipt counts as fully assigned.

    ANY_CLAIM: every item has at least one unit claimed.
    EXACT_COVERAGE: every item's claimed units equal its quantity.
    """

    ANY_CLAIM = "any_claim"
    EXACT_COVERAGE = "exact_coverage"


def default_policy() -> CompletionPolicy:
    """Policy from ASSIGNMENT_COMPLETION_POLICY, falling back to ANY_CLAIM."""
    try:
        return CompletionPolicy(config.ASSIGNMENT_COMPLETION_POLICY.lower())
    except ValueError:
        logger.warning(
            f"Unknown completion policy '{config.ASSIGNMENT_COMPLETION_POLICY}', using any_claim"
        )
        return CompletionPolicy.ANY_CLAIM


def parse_claimed_quantity(value) -> int:
    """
    Coerce a claimed quantity coming from a form or JSON body to an int.

    Accepts ints, integral floats/Decimals and digit strings. Raises
    ValidationError for anything non-numeric, fractional or below 1.
    """
    if isinstance(value, bool):
        raise ValidationError(f"Claimed quantity must be a number, got {value!r}")

    if isinstance(value, str):
        text = value.strip()
        try:
            value = int(text)
        except ValueError:
            raise ValidationError(f"Claimed quantity must be a number, got {text!r}")
    elif isinstance(value, (float, Decimal)):
        if value != value or value in (float("inf"), float("-inf")) or value != int(value):
            raise ValidationError(f"Claimed quantity must be a whole number, got {value}")
        value = int(value)
    elif not isinstance(value, int):
        raise ValidationError(f"Claimed quantity must be a number, got {type(value).__name__}")

    if value < 1:
        raise ValidationError(f"Claimed quantity must be at least 1, got {value}")
    return value


def parse_contributor_name(value) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"Contributor name must be text, got {type(value).__name__}")
    if not value.strip():
        raise ValidationError("Contributor name cannot be empty")
    return value.strip()


def parse_contributor_names(text: Optional[str]) -> list[str]:
    """Split "Alice, Bob, Charlie" into a de-duplicated roster, dropping blanks."""
    if not text:
        return []
    names = []
    for name in text.split(","):
        name = name.strip()
        if name and name not in names:
            names.append(name)
    return names


class AssignmentTable:
    """
    Item index -> ordered contributions, guarding each item's quantity.

    All mutations and reads go through one lock so concurrent claims on the
    same item are serialized and readers never observe a half-applied change.
    The item list is captured at construction and not edited afterwards.
    """

    def __init__(self, items: Sequence[schemas.LineItem]):
        self.items = tuple(items)
        self._lock = threading.Lock()
        self._contributions: dict[int, list[schemas.Contribution]] = {
            idx: [] for idx in range(len(self.items))
        }

    def _item(self, item_index: int) -> schemas.LineItem:
        if not isinstance(item_index, int) or not 0 <= item_index < len(self.items):
            raise NotFoundError(f"Item {item_index} not found")
        return self.items[item_index]

    def _contribution_list(self, item_index: int, contribution_index: int) -> list[schemas.Contribution]:
        self._item(item_index)
        contributions = self._contributions[item_index]
        if not isinstance(contribution_index, int) or not 0 <= contribution_index < len(contributions):
            raise NotFoundError(f"Contribution {contribution_index} not found on item {item_index}")
        return contributions

    @staticmethod
    def _check_capacity(item: schemas.LineItem, claimed: int, requested: int) -> None:
        attempted = claimed + requested
        if attempted > item.quantity:
            raise ValidationError(
                f"Cannot exceed total quantity of {item.quantity} for '{item.label}' "
                f"(attempted {attempted})",
                capacity=item.quantity,
                attempted=attempted,
            )

    def add_contribution(self, item_index: int, contributor_name, claimed_quantity) -> schemas.Contribution:
        """
        Append a contribution to an item.

        Raises:
            NotFoundError: item_index is out of range
            ValidationError: bad name/quantity, or the item would be over-claimed.
                The table is left unchanged.
        """
        name = parse_contributor_name(contributor_name)
        quantity = parse_claimed_quantity(claimed_quantity)

        with self._lock:
            item = self._item(item_index)
            contributions = self._contributions[item_index]
            try:
                self._check_capacity(item, sum(c.claimed_quantity for c in contributions), quantity)
            except ValidationError as e:
                logger.warning(f"Rejected claim by {name} on item {item_index}: {e.message}")
                raise
            contribution = schemas.Contribution(contributor_name=name, claimed_quantity=quantity)
            contributions.append(contribution)

        logger.info(f"{name} claimed {quantity} x '{item.label}' (item {item_index})")
        return contribution

    def update_contribution(self, item_index: int, contribution_index: int, field: str, value) -> schemas.Contribution:
        """Replace one field of a contribution; on rejection the prior value is kept."""
        if field not in CONTRIBUTION_FIELDS:
            raise ValidationError(f"Unknown contribution field '{field}'")

        if field == "contributor_name":
            parsed = parse_contributor_name(value)
        else:
            parsed = parse_claimed_quantity(value)

        with self._lock:
            contributions = self._contribution_list(item_index, contribution_index)
            current = contributions[contribution_index]
            if field == "claimed_quantity":
                others = sum(c.claimed_quantity for i, c in enumerate(contributions) if i != contribution_index)
                try:
                    self._check_capacity(self.items[item_index], others, parsed)
                except ValidationError as e:
                    logger.warning(
                        f"Rejected update of contribution {contribution_index} on item {item_index}: {e.message}"
                    )
                    raise
            updated = current.model_copy(update={field: parsed})
            contributions[contribution_index] = updated

        return updated

    def remove_contribution(self, item_index: int, contribution_index: int) -> schemas.Contribution:
        with self._lock:
            contributions = self._contribution_list(item_index, contribution_index)
            removed = contributions.pop(contribution_index)

        logger.info(f"Removed {removed.contributor_name}'s claim on item {item_index}")
        return removed

    def reset(self) -> None:
        """Start a new assignment round: drop every contribution."""
        with self._lock:
            for contributions in self._contributions.values():
                contributions.clear()

    def contributions(self, item_index: int) -> list[schemas.Contribution]:
        with self._lock:
            self._item(item_index)
            return list(self._contributions[item_index])

    def claimed_quantity(self, item_index: int) -> int:
        with self._lock:
            self._item(item_index)
            return sum(c.claimed_quantity for c in self._contributions[item_index])

    def remaining_quantity(self, item_index: int) -> int:
        with self._lock:
            item = self._item(item_index)
            return item.quantity - sum(c.claimed_quantity for c in self._contributions[item_index])

    def snapshot(self) -> dict[int, tuple[schemas.Contribution, ...]]:
        """Consistent copy of the whole table, taken under the lock."""
        with self._lock:
            return {idx: tuple(contributions) for idx, contributions in self._contributions.items()}

    def unassigned_items(self, items=None, policy: Optional[CompletionPolicy] = None) -> list[int]:
        """Indices of items that do not meet the completion policy."""
        items = self.items if items is None else items
        policy = default_policy() if policy is None else CompletionPolicy(policy)
        table = self.snapshot()

        missing = []
        for idx, item in enumerate(items):
            claimed = sum(c.claimed_quantity for c in table.get(idx, ()))
            if policy is CompletionPolicy.EXACT_COVERAGE:
                ok = claimed == item.quantity
            else:
                ok = claimed > 0
            if not ok:
                missing.append(idx)
        return missing

    def is_fully_assigned(self, items=None, policy: Optional[CompletionPolicy] = None) -> bool:
        """
        Whether every item is assigned under the given completion policy.

        A receipt with no items is never fully assigned.
        """
        items = self.items if items is None else items
        if not items:
            return False
        return not self.unassigned_items(items, policy)
