"""
Display formatting for dashboard values
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Union

def format_currency(amount_in_cents: Optional[Union[int, str, Decimal]]) -> str:
    """Format integer cents as a USD string, e.g. 123456 -> "$1,234.56"

    Store aggregates may come back as NULL or as numeric strings; both are
    accepted and NULL counts as zero.
    """
    cents = Decimal(amount_in_cents or 0)
    dollars = cents / 100
    sign = "-" if dollars < 0 else ""
    return f"{sign}${abs(dollars):,.2f}"


def format_date_to_local(value: Union[date, datetime, str]) -> str:
    """Format a date the way the invoices table shows it, e.g. "Dec 6, 2022" """
    if isinstance(value, str):
        value = date.fromisoformat(value[:10])
    return f"{value:%b} {value.day}, {value.year}"
