"""
Invoice queries service - read-only data access for the dashboard
"""

import asyncio
import logging
import math
from typing import Any, Dict, List, Optional, Tuple

from invoice_dashboard.config.settings import ITEMS_PER_PAGE, LATEST_INVOICES_LIMIT
from invoice_dashboard.database.connection import get_db_pool
from invoice_dashboard.models.customer import CustomerField
from invoice_dashboard.models.dashboard import CardData
from invoice_dashboard.models.invoice import (
    InvoiceEditData,
    InvoiceTableRow,
    LatestInvoice,
    from_cents,
)
from invoice_dashboard.utils.error_handling import DataFetchError
from invoice_dashboard.utils.formatting import format_currency

logger = logging.getLogger(__name__)

REVENUE_SQL = "SELECT * FROM revenue"

LATEST_INVOICES_SQL = """
    SELECT invoices.amount, customers.name, customers.image_url, customers.email, invoices.id
    FROM invoices
    JOIN customers ON invoices.customer_id = customers.id
    ORDER BY invoices.date DESC
    LIMIT $1
"""

INVOICE_COUNT_SQL = "SELECT COUNT(*) FROM invoices"

CUSTOMER_COUNT_SQL = "SELECT COUNT(*) FROM customers"

INVOICE_STATUS_SQL = """
    SELECT
        SUM(CASE WHEN status = 'paid' THEN amount ELSE 0 END) AS "paid",
        SUM(CASE WHEN status = 'pending' THEN amount ELSE 0 END) AS "pending"
    FROM invoices
"""

CUSTOMERS_SQL = """
    SELECT id, name
    FROM customers
    ORDER BY name ASC
"""

INVOICE_BY_ID_SQL = """
    SELECT invoices.id, invoices.customer_id, invoices.amount, invoices.status
    FROM invoices
    WHERE invoices.id = $1
"""

FILTERED_INVOICES_FROM = """
    FROM invoices
    LEFT JOIN customers ON invoices.customer_id = customers.id
"""


def escape_like(term: str) -> str:
    """Escape LIKE metacharacters so the term matches literally"""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _search_clause(query: Optional[str], params: List[Any]) -> str:
    """WHERE clause for the invoice search box, appending its parameter"""
    term = (query or "").strip()
    if not term:
        return ""

    params.append(f"%{escape_like(term)}%")
    placeholder = f"${len(params)}"
    return (
        f"WHERE invoices.id::text ILIKE {placeholder}"
        f" OR invoices.status::text ILIKE {placeholder}"
        f" OR customers.name ILIKE {placeholder}"
        f" OR customers.email ILIKE {placeholder}"
    )


def page_offset(current_page: int, page_size: int = ITEMS_PER_PAGE) -> int:
    """Row offset of a 1-based page; pages below 1 read as page 1"""
    return (max(1, current_page) - 1) * page_size


def build_filtered_invoices_query(
    query: Optional[str],
    current_page: int = 1,
    page_size: int = ITEMS_PER_PAGE
) -> Tuple[str, List[Any]]:
    """
    Build the paginated invoice search query

    Args:
        query: Search box text; blank means no filter
        current_page: 1-based page number
        page_size: Rows per page

    Returns:
        (sql, params) using $n placeholders
    """
    params: List[Any] = []
    where = _search_clause(query, params)
    params.extend([page_size, page_offset(current_page, page_size)])

    sql = f"""
    SELECT
        invoices.id,
        invoices.amount,
        invoices.date,
        invoices.status,
        customers.name,
        customers.email,
        customers.image_url
    {FILTERED_INVOICES_FROM}
    {where}
    ORDER BY invoices.date DESC, invoices.id ASC
    LIMIT ${len(params) - 1} OFFSET ${len(params)}
    """
    return sql, params


def build_invoices_count_query(query: Optional[str]) -> Tuple[str, List[Any]]:
    """Build the count query matching build_filtered_invoices_query's filter"""
    params: List[Any] = []
    where = _search_clause(query, params)
    sql = f"""
    SELECT COUNT(*)
    {FILTERED_INVOICES_FROM}
    {where}
    """
    return sql, params


class InvoiceQueryService:
    """Service for dashboard read queries"""

    def __init__(self, pool=None, page_size: int = ITEMS_PER_PAGE):
        self._pool = pool
        self.page_size = page_size

    def _get_pool(self):
        pool = self._pool if self._pool is not None else get_db_pool()
        if not pool:
            raise RuntimeError("Database pool not initialized")
        return pool

    async def fetch_revenue(self) -> List[Dict[str, Any]]:
        """Get every row of the revenue table, unfiltered"""
        try:
            async with self._get_pool().acquire() as conn:
                rows = await conn.fetch(REVENUE_SQL)
            return [dict(row) for row in rows]
        except Exception as e:
            logger.error(f"Database Error (fetch_revenue): {e}", exc_info=True)
            raise DataFetchError("Failed to fetch revenue data.") from e

    async def fetch_latest_invoices(self) -> List[LatestInvoice]:
        """Get the most recent invoices with their customer, amount formatted for display"""
        try:
            async with self._get_pool().acquire() as conn:
                rows = await conn.fetch(LATEST_INVOICES_SQL, LATEST_INVOICES_LIMIT)
            return [
                LatestInvoice(
                    id=str(row["id"]),
                    name=row["name"],
                    image_url=row["image_url"],
                    email=row["email"],
                    amount=format_currency(row["amount"]),
                )
                for row in rows
            ]
        except Exception as e:
            logger.error(f"Database Error (fetch_latest_invoices): {e}", exc_info=True)
            raise DataFetchError("Failed to fetch latest invoices.") from e

    async def fetch_card_data(self) -> CardData:
        """
        Get the dashboard summary cards

        The three aggregates run concurrently, each on its own pooled
        connection, and are combined once all have finished.
        """
        try:
            pool = self._get_pool()
            invoice_count, customer_count, status_totals = await asyncio.gather(
                pool.fetchval(INVOICE_COUNT_SQL),
                pool.fetchval(CUSTOMER_COUNT_SQL),
                pool.fetchrow(INVOICE_STATUS_SQL),
            )
            totals = dict(status_totals) if status_totals is not None else {}

            return CardData(
                number_of_invoices=int(invoice_count or 0),
                number_of_customers=int(customer_count or 0),
                total_paid_invoices=format_currency(totals.get("paid") or 0),
                total_pending_invoices=format_currency(totals.get("pending") or 0),
            )
        except Exception as e:
            logger.error(f"Database Error (fetch_card_data): {e}", exc_info=True)
            raise DataFetchError("Failed to fetch card data.") from e

    async def fetch_filtered_invoices(self, query: str, current_page: int = 1) -> List[InvoiceTableRow]:
        """
        Get one page of invoices matching the search box

        Invoices whose customer no longer exists are still listed, with
        placeholder customer fields.

        Args:
            query: Case-insensitive substring matched against invoice id,
                status, customer name and email; blank lists everything
            current_page: 1-based page number

        Returns:
            Up to page_size rows, newest first, amounts in cents
        """
        sql, params = build_filtered_invoices_query(query, current_page, self.page_size)

        try:
            async with self._get_pool().acquire() as conn:
                rows = await conn.fetch(sql, *params)
            return [
                InvoiceTableRow(
                    id=str(row["id"]),
                    name=row["name"] if row["name"] is not None else "Unknown",
                    email=row["email"] or "",
                    image_url=row["image_url"] or "",
                    amount=row["amount"],
                    date=row["date"],
                    status=row["status"],
                )
                for row in rows
            ]
        except Exception as e:
            logger.error(f"Database Error (fetch_filtered_invoices): {e}", exc_info=True)
            raise DataFetchError("Failed to fetch filtered invoices.") from e

    async def fetch_invoices_pages(self, query: str) -> int:
        """Number of pages the search box query spans"""
        sql, params = build_invoices_count_query(query)

        try:
            async with self._get_pool().acquire() as conn:
                count = await conn.fetchval(sql, *params)
            return math.ceil(int(count or 0) / self.page_size)
        except Exception as e:
            logger.error(f"Database Error (fetch_invoices_pages): {e}", exc_info=True)
            raise DataFetchError("Failed to fetch total number of invoices.") from e

    async def fetch_customers(self) -> List[CustomerField]:
        """All customers as form select options, ordered by name"""
        try:
            async with self._get_pool().acquire() as conn:
                rows = await conn.fetch(CUSTOMERS_SQL)
            return [CustomerField(id=str(row["id"]), name=row["name"]) for row in rows]
        except Exception as e:
            logger.error(f"Database Error (fetch_customers): {e}", exc_info=True)
            raise DataFetchError("Failed to fetch all customers.") from e

    async def fetch_invoice_by_id(self, invoice_id: str) -> Optional[InvoiceEditData]:
        """Load an invoice for the edit form, amount converted back to dollars"""
        try:
            async with self._get_pool().acquire() as conn:
                row = await conn.fetchrow(INVOICE_BY_ID_SQL, invoice_id)
        except Exception as e:
            logger.error(f"Database Error (fetch_invoice_by_id): {e}", exc_info=True)
            raise DataFetchError("Failed to fetch invoice.") from e

        if row is None:
            return None

        return InvoiceEditData(
            id=str(row["id"]),
            customer_id=str(row["customer_id"]),
            amount=from_cents(row["amount"]),
            status=row["status"],
        )


# Global service instance
_invoice_query_service: Optional[InvoiceQueryService] = None

def get_invoice_query_service() -> InvoiceQueryService:
    """Get the global invoice query service instance"""
    global _invoice_query_service
    if _invoice_query_service is None:
        _invoice_query_service = InvoiceQueryService()
    return _invoice_query_service
