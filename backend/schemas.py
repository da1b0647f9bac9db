from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

CENT = Decimal("0.01")


def quantize_money(v: Decimal) -> Decimal:
    """Round an amount to cents, rejecting values too large to represent."""
    try:
        return v.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError(f"Amount {v} is too large")


class SummaryKind(str, Enum):
    TAX = "Tax"
    TIP = "Tip"
    SUBTOTAL = "Subtotal"
    TOTAL = "Total"
    OTHER = "Other"


class LineItem(BaseModel):
    quantity: int = Field(gt=0)
    label: str
    unit_price: Decimal = Field(ge=0)  # Per unit, 2 decimal places

    class Config:
        frozen = True

    @field_validator('unit_price')
    @classmethod
    def quantize_price(cls, v):
        return quantize_money(v)

    @property
    def line_total(self) -> Decimal:
        return self.quantity * self.unit_price


class SummaryCharge(BaseModel):
    kind: SummaryKind
    amount: Decimal = Field(ge=0)

    class Config:
        frozen = True

    @field_validator('amount')
    @classmethod
    def quantize_amount(cls, v):
        return quantize_money(v)


class Contribution(BaseModel):
    contributor_name: str = Field(min_length=1)
    claimed_quantity: int = Field(ge=1)

    class Config:
        frozen = True


# Breakdown (calculator output)
class BreakdownLine(BaseModel):
    item_label: str
    claimed_quantity: int
    base_cost: Decimal
    tax_share: Decimal
    tip_share: Decimal

    @property
    def total(self) -> Decimal:
        return self.base_cost + self.tax_share + self.tip_share


class ContributorBreakdown(BaseModel):
    contributor_name: str
    lines: list[BreakdownLine] = []
    total_owed: Decimal = Decimal("0")

    @property
    def tax_share(self) -> Decimal:
        return sum((line.tax_share for line in self.lines), Decimal("0"))

    @property
    def tip_share(self) -> Decimal:
        return sum((line.tip_share for line in self.lines), Decimal("0"))


class Breakdown(BaseModel):
    contributors: list[ContributorBreakdown] = []

    def for_contributor(self, name: str) -> Optional[ContributorBreakdown]:
        for record in self.contributors:
            if record.contributor_name == name:
                return record
        return None

    @property
    def total_owed(self) -> Decimal:
        return sum((c.total_owed for c in self.contributors), Decimal("0"))


# Receipt entry (loosely-typed rows as typed into the entry form)
class EntryRow(BaseModel):
    qty: int = Field(default=1, gt=0)
    name: str
    price: Decimal = Decimal("0.00")

    @field_validator('qty', mode='before')
    @classmethod
    def parse_qty(cls, v):
        if isinstance(v, str):
            v = v.strip() or "1"
        return v

    @field_validator('name')
    @classmethod
    def clean_name(cls, v):
        v = ' '.join(v.split())
        if not v:
            raise ValueError('Item name cannot be empty')
        return v

    @field_validator('price', mode='before')
    @classmethod
    def parse_price(cls, v):
        if isinstance(v, str):
            v = v.strip().replace('$', '').replace(',', '') or "0"
        return v

    @field_validator('price')
    @classmethod
    def quantize_price(cls, v):
        if v < 0:
            raise ValueError('Price cannot be negative')
        return quantize_money(v)


class ReceiptCreate(BaseModel):
    rows: list[EntryRow] = []
    text: Optional[str] = None  # Pasted receipt text, one entry per line
    tax: Optional[Decimal] = Field(default=None, ge=0)
    tip: Optional[Decimal] = Field(default=None, ge=0)
    contributors: Optional[str] = None  # Comma-separated names
    currency: Optional[str] = None

    @field_validator('tax', 'tip')
    @classmethod
    def quantize_charge(cls, v):
        if v is None:
            return v
        return quantize_money(v)


class ItemAssignment(BaseModel):
    item_index: int
    label: str
    quantity: int
    claimed_quantity: int
    contributions: list[Contribution]


class ReceiptRound(BaseModel):
    id: str
    currency: str
    items: list[LineItem]
    summary: list[SummaryCharge]
    contributors: list[str] = []
    assignments: list[ItemAssignment] = []
    assignments_complete: bool = False


# Assignment mutations; quantities stay loosely typed so the table can reject them
class ContributionCreate(BaseModel):
    contributor_name: str
    claimed_quantity: Union[int, float, str]


class ContributionUpdate(BaseModel):
    field: Literal["contributor_name", "claimed_quantity"]
    value: Union[int, float, str]


class AssignmentStatus(BaseModel):
    policy: str
    fully_assigned: bool
    assignments_complete: bool
    unassigned_items: list[int] = []


class BreakdownRequest(BaseModel):
    items: list[LineItem]
    summary: list[SummaryCharge] = []
    assignments: dict[int, list[Contribution]] = {}
    currency: Optional[str] = None


class BreakdownOut(BaseModel):
    currency: str
    contributors: list[ContributorBreakdown]
    total_owed: Decimal
    unclaimed_cost: Decimal
