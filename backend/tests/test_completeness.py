"""Tests for the "fully assigned" notification check."""

from decimal import Decimal

from schemas import Contribution, LineItem
from utils.completeness import assignments_complete


def test_requires_external_flag(items, table):
    table.add_contribution(0, "Alice", 2)
    table.add_contribution(1, "Bob", 1)

    assert not assignments_complete(items, table, marked_complete=False)
    assert assignments_complete(items, table, marked_complete=True)


def test_partial_claims_are_not_complete(items, table):
    table.add_contribution(0, "Alice", 1)
    table.add_contribution(1, "Bob", 1)
    assert not assignments_complete(items, table, marked_complete=True)


def test_no_items_is_not_complete(table):
    assert not assignments_complete([], table, marked_complete=True)


def test_item_list_drifted_after_claims(items, table):
    table.add_contribution(0, "Alice", 2)
    table.add_contribution(1, "Bob", 1)

    # Quantity edited upward after assignments were captured
    edited = [items[0].model_copy(update={"quantity": 3}), items[1]]
    assert not assignments_complete(edited, table, marked_complete=True)

    # A new item appended with no claims
    added = items + [LineItem(quantity=1, label="Cookie", unit_price=Decimal("1.00"))]
    assert not assignments_complete(added, table, marked_complete=True)

    # An item removed: remaining items are still covered
    assert assignments_complete(items[:1], table, marked_complete=True)


def test_malformed_inputs_return_false_instead_of_raising(items):
    assert not assignments_complete(items, {0: [object()]}, marked_complete=True)
    assert not assignments_complete(items, "not a table", marked_complete=True)
    assert not assignments_complete([object()], {0: []}, marked_complete=True)
    broken = {
        0: [Contribution.model_construct(contributor_name="Alice", claimed_quantity=None)],
        1: [],
    }
    assert not assignments_complete(items, broken, marked_complete=True)

    # Quantities edited to NaN after every unit was claimed
    claims = {
        0: [Contribution(contributor_name="Alice", claimed_quantity=2)],
        1: [Contribution(contributor_name="Bob", claimed_quantity=1)],
    }
    for nan in (Decimal("NaN"), float("nan")):
        drifted = [items[0].model_copy(update={"quantity": nan}), items[1]]
        assert not assignments_complete(drifted, claims, marked_complete=True)

    # Non-integer quantities are never complete
    for quantity in (Decimal("2"), 2.0, True):
        drifted = [items[0].model_copy(update={"quantity": quantity}), items[1]]
        assert not assignments_complete(drifted, claims, marked_complete=True)


def test_plain_mapping_of_claims(items):
    claims = {
        0: [Contribution(contributor_name="Alice", claimed_quantity=2)],
        1: [Contribution(contributor_name="Bob", claimed_quantity=1)],
    }
    assert assignments_complete(items, claims, marked_complete=True)
