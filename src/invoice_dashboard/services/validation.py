"""
Invoice form validation
"""

from typing import Dict, List
from pydantic import ValidationError

from invoice_dashboard.models.invoice import InvoiceForm, InvoiceFormResult, InvoiceInput

VALIDATION_MESSAGE = "Validation Error: Invalid invoice data."

# One user-facing message per form field, whatever rule failed
FIELD_MESSAGES = {
    "customerId": "Please select a customer.",
    "amount": "Please enter an amount greater than $0.",
    "status": "Please select an invoice status.",
}

_FIELD_ALIASES = {
    "customer_id": "customerId",
}


def _field_errors(exc: ValidationError) -> Dict[str, List[str]]:
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        loc = error.get("loc") or ("",)
        field_name = _FIELD_ALIASES.get(str(loc[0]), str(loc[0]))
        message = FIELD_MESSAGES.get(field_name, error.get("msg", "Invalid value."))
        messages = errors.setdefault(field_name, [])
        if message not in messages:
            messages.append(message)
    return errors


def parse_invoice_form(form: InvoiceForm) -> InvoiceFormResult:
    """
    Validate raw invoice form fields

    Never raises: failures come back as field errors keyed by form field
    name (customerId, amount, status) with a generic validation message.

    Args:
        form: Raw form fields

    Returns:
        InvoiceFormResult with either validated data or errors
    """
    try:
        data = InvoiceInput.model_validate({
            "customerId": form.customer_id,
            "amount": form.amount,
            "status": form.status,
        })
    except ValidationError as e:
        return InvoiceFormResult(errors=_field_errors(e), message=VALIDATION_MESSAGE)

    return InvoiceFormResult(data=data)
