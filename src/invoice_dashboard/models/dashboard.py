"""
Dashboard summary models
"""

from typing import List
from pydantic import BaseModel, Field
from invoice_dashboard.models.customer import CustomerField
from invoice_dashboard.models.invoice import InvoiceEditData, InvoiceTableRow

class CardData(BaseModel):
    """Dashboard summary cards"""
    number_of_invoices: int
    number_of_customers: int
    total_paid_invoices: str
    total_pending_invoices: str


class InvoiceTableEntry(InvoiceTableRow):
    """Invoices table row with display strings for the UI"""
    amount_display: str
    date_display: str


class InvoiceTablePage(BaseModel):
    """One page of the invoices table"""
    query: str
    page: int = Field(..., ge=1)
    total_pages: int
    invoices: List[InvoiceTableEntry]


class InvoiceEditPage(BaseModel):
    """Data behind the invoice edit form"""
    invoice: InvoiceEditData
    customers: List[CustomerField]
