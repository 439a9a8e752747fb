"""
Invoice API routes - paginated table, edit form data and form actions
"""

import asyncio
from fastapi import APIRouter, Depends, Form, HTTPException, Query, Request, Response
from fastapi.responses import JSONResponse, RedirectResponse

from invoice_dashboard.config.settings import INVOICES_PATH
from invoice_dashboard.models.dashboard import InvoiceEditPage, InvoiceTableEntry, InvoiceTablePage
from invoice_dashboard.models.invoice import InvoiceForm
from invoice_dashboard.models.outcome import (
    ActionSuccess,
    MissingIdentifier,
    Outcome,
    ValidationFailure,
)
from invoice_dashboard.services.invoice_actions import InvoiceActionService, get_invoice_action_service
from invoice_dashboard.services.invoice_queries import InvoiceQueryService, get_invoice_query_service
from invoice_dashboard.utils.error_handling import set_endpoint_context
from invoice_dashboard.utils.formatting import format_currency, format_date_to_local
from invoice_dashboard.utils.revalidation import revalidator

router = APIRouter()


def invoice_form(
    customerId: str = Form(""),
    amount: str = Form(""),
    status: str = Form(""),
) -> InvoiceForm:
    """Read the invoice form body once into a typed struct"""
    return InvoiceForm(customer_id=customerId, amount=amount, status=status)


def outcome_response(outcome: Outcome) -> Response:
    """Turn an action outcome into a redirect or a form state response"""
    if isinstance(outcome, ActionSuccess):
        return RedirectResponse(outcome.redirect_to, status_code=303)

    if isinstance(outcome, ValidationFailure):
        status_code = 422
    elif isinstance(outcome, MissingIdentifier):
        status_code = 400
    else:
        status_code = 500

    return JSONResponse(status_code=status_code, content=outcome.to_state())


@router.get("", response_model=InvoiceTablePage)
async def list_invoices(
    request: Request,
    response: Response,
    query: str = Query("", description="Case-insensitive match on invoice id, status, customer name or email"),
    page: int = Query(1, description="1-based page number; values below 1 read as 1"),
    service: InvoiceQueryService = Depends(get_invoice_query_service)
):
    """One page of the invoices table"""
    set_endpoint_context("invoices_table")
    current_page = max(1, page)

    etag = revalidator.etag(INVOICES_PATH, f"{query.strip()}|{current_page}")
    if request.headers.get("if-none-match") == etag:
        return Response(status_code=304, headers={"ETag": etag})

    invoices, total_pages = await asyncio.gather(
        service.fetch_filtered_invoices(query, current_page),
        service.fetch_invoices_pages(query),
    )

    response.headers["ETag"] = etag
    response.headers["Cache-Control"] = "no-cache"

    return InvoiceTablePage(
        query=query,
        page=current_page,
        total_pages=total_pages,
        invoices=[
            InvoiceTableEntry(
                **invoice.model_dump(),
                amount_display=format_currency(invoice.amount),
                date_display=format_date_to_local(invoice.date),
            )
            for invoice in invoices
        ],
    )


@router.get("/{invoice_id}", response_model=InvoiceEditPage)
async def get_invoice(
    invoice_id: str,
    service: InvoiceQueryService = Depends(get_invoice_query_service)
):
    """Invoice and customer options for the edit form"""
    set_endpoint_context("invoice_edit_form")

    invoice, customers = await asyncio.gather(
        service.fetch_invoice_by_id(invoice_id),
        service.fetch_customers(),
    )
    if invoice is None:
        raise HTTPException(status_code=404, detail="Invoice not found")

    return InvoiceEditPage(invoice=invoice, customers=customers)


@router.post("")
async def create_invoice(
    form: InvoiceForm = Depends(invoice_form),
    service: InvoiceActionService = Depends(get_invoice_action_service)
):
    """Create form action"""
    set_endpoint_context("invoice_create")
    return outcome_response(await service.create_invoice(form))


@router.post("/{invoice_id}/edit")
async def update_invoice(
    invoice_id: str,
    form: InvoiceForm = Depends(invoice_form),
    service: InvoiceActionService = Depends(get_invoice_action_service)
):
    """Edit form action"""
    set_endpoint_context("invoice_update")
    return outcome_response(await service.update_invoice(invoice_id, form))


@router.post("/{invoice_id}/delete")
async def delete_invoice(
    invoice_id: str,
    service: InvoiceActionService = Depends(get_invoice_action_service)
):
    """Delete button action"""
    set_endpoint_context("invoice_delete")
    return outcome_response(await service.delete_invoice(invoice_id))
