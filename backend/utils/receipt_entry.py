"""Turn manually entered or pasted receipt lines into typed items and charges.

This is the boundary between loosely-typed user input and the splitting core:
everything past here is a LineItem or a classified SummaryCharge.
"""

import logging
import re
from decimal import Decimal
from typing import Optional

from pydantic import ValidationError as SchemaValidationError

import schemas

logger = logging.getLogger(__name__)

# Checked in order, "subtotal" must come before "total"
SUMMARY_KEYWORDS = [
    ("subtotal", schemas.SummaryKind.SUBTOTAL),
    ("total", schemas.SummaryKind.TOTAL),
    ("tax", schemas.SummaryKind.TAX),
    ("tip", schemas.SummaryKind.TIP),
    ("summary item", schemas.SummaryKind.OTHER),
]

# Trailing price on a pasted line: "$12.99", "12.99", "1,299.00"
PRICE_PATTERN = re.compile(r'\$?\s?(\d{1,3}(?:,\d{3})*\.\d{2}|\d+\.\d{2})\s*$')

# Leading quantity: "2 Coffee", "2x Coffee", "2 x Coffee"
QTY_PATTERN = re.compile(r'^(\d{1,3})\s*[xX]?\s+(?=\D)')


def classify_summary(name: str) -> Optional[schemas.SummaryKind]:
    """
    Return the summary kind a line name indicates, or None for a regular item.

    Plain substring matching: an item literally called "Total Wine" is
    classified as a Total.
    """
    lowered = name.lower()
    for keyword, kind in SUMMARY_KEYWORDS:
        if keyword in lowered:
            return kind
    return None


def parse_receipt_line(line: str) -> Optional[schemas.EntryRow]:
    """
    Parse one pasted receipt line into an entry row.

    Lines without a trailing price, or with nothing left for a name, are
    skipped (returns None).
    """
    line = line.strip()
    if not line:
        return None

    price_match = PRICE_PATTERN.search(line)
    if not price_match:
        return None

    head = line[:price_match.start()].strip(" \t-*:")
    qty = 1
    qty_match = QTY_PATTERN.match(head)
    if qty_match:
        qty = int(qty_match.group(1)) or 1
        head = head[qty_match.end():]

    name = ' '.join(head.split())
    if not name:
        return None

    try:
        return schemas.EntryRow(qty=qty, name=name, price=price_match.group(1))
    except SchemaValidationError:
        logger.debug(f"Skipping receipt line with an unusable price: {line!r}")
        return None


def parse_receipt_text(text: str) -> list[schemas.EntryRow]:
    """Parse pasted receipt text, one entry per line."""
    rows = []
    for line in text.splitlines():
        row = parse_receipt_line(line)
        if row is not None:
            rows.append(row)
        elif line.strip():
            logger.debug(f"Skipping receipt line without a price: {line.strip()!r}")
    return rows


def split_entry_rows(
    rows: list[schemas.EntryRow],
) -> tuple[list[schemas.LineItem], list[schemas.SummaryCharge]]:
    """
    Separate summary lines (tax, tip, totals) from regular line items.

    For summary lines the row's price is the charge amount; quantity is ignored.
    Regular rows become LineItems with the row price as the unit price.
    """
    items = []
    summary = []
    for row in rows:
        kind = classify_summary(row.name)
        if kind is not None:
            summary.append(schemas.SummaryCharge(kind=kind, amount=row.price))
        else:
            items.append(schemas.LineItem(quantity=row.qty, label=row.name, unit_price=row.price))
    return items, summary


def build_receipt(
    receipt: schemas.ReceiptCreate,
) -> tuple[list[schemas.LineItem], list[schemas.SummaryCharge]]:
    """
    Assemble items and summary charges from a receipt entry request.

    Rows come first, then lines parsed from pasted text. Separately entered
    tax and tip are placed ahead of any classified summary lines so they win
    the first-charge-of-kind rule.
    """
    rows = list(receipt.rows)
    if receipt.text:
        rows.extend(parse_receipt_text(receipt.text))

    items, summary = split_entry_rows(rows)

    explicit = []
    if receipt.tax is not None:
        explicit.append(schemas.SummaryCharge(kind=schemas.SummaryKind.TAX, amount=Decimal(receipt.tax)))
    if receipt.tip is not None:
        explicit.append(schemas.SummaryCharge(kind=schemas.SummaryKind.TIP, amount=Decimal(receipt.tip)))

    logger.info(f"Parsed receipt entry: {len(items)} items, {len(summary) + len(explicit)} summary charges")
    return items, explicit + summary
