"""
Customer API routes
"""

from typing import List
from fastapi import APIRouter, Depends

from invoice_dashboard.models.customer import CustomerField
from invoice_dashboard.services.invoice_queries import InvoiceQueryService, get_invoice_query_service
from invoice_dashboard.utils.error_handling import set_endpoint_context

router = APIRouter()

@router.get("", response_model=List[CustomerField])
async def list_customers(service: InvoiceQueryService = Depends(get_invoice_query_service)):
    """Customers for the invoice form select"""
    set_endpoint_context("customers_list")
    return await service.fetch_customers()
