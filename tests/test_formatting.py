"""
Display formatting helpers
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from invoice_dashboard.utils.formatting import format_currency, format_date_to_local


@pytest.mark.parametrize("cents,expected", [
    (123456, "$1,234.56"),
    (5, "$0.05"),
    (0, "$0.00"),
    (None, "$0.00"),
    ("500", "$5.00"),
    (Decimal("100000000"), "$1,000,000.00"),
    (-150, "-$1.50"),
])
def test_format_currency(cents, expected):
    assert format_currency(cents) == expected


def test_format_date_to_local():
    assert format_date_to_local(date(2022, 12, 6)) == "Dec 6, 2022"
    assert format_date_to_local(datetime(2023, 1, 5, 13, 45)) == "Jan 5, 2023"
    assert format_date_to_local("2023-08-19") == "Aug 19, 2023"
