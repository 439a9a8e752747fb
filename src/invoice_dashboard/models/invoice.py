"""
Invoice-related Pydantic models
"""

from typing import Dict, List, Optional
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from dataclasses import dataclass, field
from pydantic import BaseModel, ConfigDict, Field, field_validator
from invoice_dashboard.models.enums import InvoiceStatus

CENTS = Decimal(100)


def to_cents(amount: Decimal) -> int:
    """Convert a dollar amount to integer cents, rounding half up"""
    return int((amount * CENTS).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> Decimal:
    """Convert integer cents back to a dollar amount"""
    return (Decimal(cents) / CENTS).quantize(Decimal("0.01"))


@dataclass(frozen=True)
class InvoiceForm:
    """Raw invoice form fields as submitted by the create/edit forms"""
    customer_id: str = ""
    amount: str = ""
    status: str = ""


class InvoiceInput(BaseModel):
    """Validated invoice fields accepted for create and update"""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    customer_id: str = Field(..., alias="customerId", min_length=1)
    amount: Decimal = Field(..., gt=0, allow_inf_nan=False)
    status: InvoiceStatus

    @field_validator("amount")
    @classmethod
    def amount_must_be_at_least_one_cent(cls, value: Decimal) -> Decimal:
        try:
            cents = to_cents(value)
        except InvalidOperation:
            raise ValueError("amount is out of range")
        if cents < 1:
            raise ValueError("amount rounds to zero cents")
        return value

    @property
    def amount_in_cents(self) -> int:
        return to_cents(self.amount)


@dataclass
class InvoiceFormResult:
    """Result of validating an InvoiceForm; exactly one of data/errors is set"""
    data: Optional[InvoiceInput] = None
    errors: Dict[str, List[str]] = field(default_factory=dict)
    message: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.data is not None


class InvoiceTableRow(BaseModel):
    """Row of the paginated invoices table (amount in raw cents)"""
    id: str
    name: str = "Unknown"
    email: str = ""
    image_url: str = ""
    amount: int
    date: date
    status: str


class LatestInvoice(BaseModel):
    """Latest invoice card entry (amount pre-formatted)"""
    id: str
    name: str
    image_url: str
    email: str
    amount: str


class InvoiceEditData(BaseModel):
    """Invoice as loaded into the edit form (amount back in dollars)"""
    id: str
    customer_id: str
    amount: Decimal
    status: str
