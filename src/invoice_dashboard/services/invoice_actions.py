"""
Invoice actions service - create, update and delete from the invoice forms
"""

import logging
from datetime import date, datetime, timezone
from typing import Callable, Optional

from invoice_dashboard.config.settings import INVOICES_PATH
from invoice_dashboard.database.connection import get_db_pool
from invoice_dashboard.models.invoice import InvoiceForm
from invoice_dashboard.models.outcome import (
    ActionState,
    ActionSuccess,
    MissingIdentifier,
    Outcome,
    StoreFailure,
    ValidationFailure,
)
from invoice_dashboard.services.validation import parse_invoice_form
from invoice_dashboard.utils.revalidation import revalidate_path

logger = logging.getLogger(__name__)

INSERT_INVOICE_SQL = """
    INSERT INTO invoices (customer_id, amount, status, date)
    VALUES ($1, $2, $3, $4)
"""

UPDATE_INVOICE_SQL = """
    UPDATE invoices
    SET customer_id = $1, amount = $2, status = $3
    WHERE id = $4
"""

DELETE_INVOICE_SQL = "DELETE FROM invoices WHERE id = $1"


def utc_today() -> date:
    """Current calendar date in UTC"""
    return datetime.now(timezone.utc).date()


def _is_missing(invoice_id: Optional[str]) -> bool:
    return not invoice_id or not invoice_id.strip()


class InvoiceActionService:
    """
    Service for the invoice form actions

    Every action returns an Outcome instead of redirecting itself. Only
    ActionSuccess means a row was written; the listing has already been
    revalidated by then and the caller should navigate to redirect_to.
    """

    def __init__(
        self,
        pool=None,
        today: Callable[[], date] = utc_today,
        revalidate: Callable[[str], object] = revalidate_path
    ):
        self._pool = pool
        self._today = today
        self._revalidate = revalidate

    def _get_pool(self):
        pool = self._pool if self._pool is not None else get_db_pool()
        if not pool:
            raise RuntimeError("Database pool not initialized")
        return pool

    def _success(self) -> ActionSuccess:
        self._revalidate(INVOICES_PATH)
        return ActionSuccess(revalidated_path=INVOICES_PATH, redirect_to=INVOICES_PATH)

    async def create_invoice(self, form: InvoiceForm, prev_state: Optional[ActionState] = None) -> Outcome:
        """
        Create an invoice dated today (UTC)

        Args:
            form: Raw form fields
            prev_state: Previous form state (ignored)

        Returns:
            ValidationFailure, StoreFailure or ActionSuccess
        """
        parsed = parse_invoice_form(form)
        if not parsed.success:
            return ValidationFailure(errors=parsed.errors, message=parsed.message)

        invoice = parsed.data
        invoice_date = self._today()

        try:
            async with self._get_pool().acquire() as conn:
                await conn.execute(
                    INSERT_INVOICE_SQL,
                    invoice.customer_id,
                    invoice.amount_in_cents,
                    invoice.status.value,
                    invoice_date,
                )
        except Exception as e:
            logger.error(f"Database Error (create_invoice): {e}", exc_info=True)
            return StoreFailure("Database Error: Failed to create invoice.")

        logger.info(f"Created {invoice.status.value} invoice for customer {invoice.customer_id}")
        return self._success()

    async def update_invoice(
        self,
        invoice_id: str,
        form: InvoiceForm,
        prev_state: Optional[ActionState] = None
    ) -> Outcome:
        """
        Update customer, amount and status of an invoice; its date is kept

        Args:
            invoice_id: Invoice to update, taken from the route
            form: Raw form fields
            prev_state: Previous form state (ignored)

        Returns:
            MissingIdentifier, ValidationFailure, StoreFailure or ActionSuccess
        """
        if _is_missing(invoice_id):
            return MissingIdentifier()

        parsed = parse_invoice_form(form)
        if not parsed.success:
            return ValidationFailure(errors=parsed.errors, message=parsed.message)

        invoice = parsed.data

        try:
            async with self._get_pool().acquire() as conn:
                await conn.execute(
                    UPDATE_INVOICE_SQL,
                    invoice.customer_id,
                    invoice.amount_in_cents,
                    invoice.status.value,
                    invoice_id,
                )
        except Exception as e:
            logger.error(f"Database Error (update_invoice): {e}", exc_info=True)
            return StoreFailure("Database Error: Failed to update invoice.")

        logger.info(f"Updated invoice {invoice_id}")
        return self._success()

    async def delete_invoice(self, invoice_id: str, prev_state: Optional[ActionState] = None) -> Outcome:
        """
        Delete an invoice; an id matching no row still succeeds

        Args:
            invoice_id: Invoice to delete, taken from the route
            prev_state: Previous form state (ignored)

        Returns:
            MissingIdentifier, StoreFailure or ActionSuccess
        """
        if _is_missing(invoice_id):
            return MissingIdentifier()

        try:
            async with self._get_pool().acquire() as conn:
                await conn.execute(DELETE_INVOICE_SQL, invoice_id)
        except Exception as e:
            logger.error(f"Database Error (delete_invoice): {e}", exc_info=True)
            return StoreFailure("Database Error: Failed to delete invoice.")

        logger.info(f"Deleted invoice {invoice_id}")
        return self._success()


# Global service instance
_invoice_action_service: Optional[InvoiceActionService] = None

def get_invoice_action_service() -> InvoiceActionService:
    """Get the global invoice action service instance"""
    global _invoice_action_service
    if _invoice_action_service is None:
        _invoice_action_service = InvoiceActionService()
    return _invoice_action_service
