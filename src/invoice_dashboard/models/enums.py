"""
Enum definitions for the Invoice Dashboard Backend
"""

from enum import Enum

class InvoiceStatus(str, Enum):
    """
    Invoice status enum matching the values stored in invoices.status.
    Only two values are allowed: pending and paid.
    """
    PENDING = "pending"
    PAID = "paid"
