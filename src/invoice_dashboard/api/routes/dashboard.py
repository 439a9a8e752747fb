"""
Dashboard overview API routes - revenue chart, latest invoices and summary cards
"""

from typing import Any, Dict, List
from fastapi import APIRouter, Depends

from invoice_dashboard.models.dashboard import CardData
from invoice_dashboard.models.invoice import LatestInvoice
from invoice_dashboard.services.invoice_queries import InvoiceQueryService, get_invoice_query_service
from invoice_dashboard.utils.error_handling import set_endpoint_context

router = APIRouter()

@router.get("/revenue", response_model=List[Dict[str, Any]])
async def get_revenue(service: InvoiceQueryService = Depends(get_invoice_query_service)):
    """Revenue rows for the revenue chart"""
    set_endpoint_context("dashboard_revenue")
    return await service.fetch_revenue()

@router.get("/latest-invoices", response_model=List[LatestInvoice])
async def get_latest_invoices(service: InvoiceQueryService = Depends(get_invoice_query_service)):
    """Five most recent invoices"""
    set_endpoint_context("dashboard_latest_invoices")
    return await service.fetch_latest_invoices()

@router.get("/cards", response_model=CardData)
async def get_card_data(service: InvoiceQueryService = Depends(get_invoice_query_service)):
    """Invoice/customer counts and paid/pending totals"""
    set_endpoint_context("dashboard_cards")
    return await service.fetch_card_data()
