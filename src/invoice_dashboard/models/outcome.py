"""
Outcomes returned by the invoice form actions
"""

from typing import Any, Dict, List, Union
from dataclasses import dataclass, field

ActionState = Dict[str, Any]

@dataclass(frozen=True)
class ValidationFailure:
    """User-correctable field errors; nothing was written"""
    errors: Dict[str, List[str]] = field(default_factory=dict)
    message: str = "Validation Error: Invalid invoice data."

    def to_state(self) -> ActionState:
        return {"errors": self.errors, "message": self.message}


@dataclass(frozen=True)
class MissingIdentifier:
    """Update or delete called without an invoice id; the store was not touched"""
    message: str = "Missing invoice id"

    def to_state(self) -> ActionState:
        return {"message": self.message}


@dataclass(frozen=True)
class StoreFailure:
    """The statement failed in the store; message is safe to show to users"""
    message: str

    def to_state(self) -> ActionState:
        return {"message": self.message}


@dataclass(frozen=True)
class ActionSuccess:
    """The write committed, the listing was revalidated and the caller should navigate away"""
    revalidated_path: str
    redirect_to: str

    def to_state(self) -> ActionState:
        return {}


Outcome = Union[ValidationFailure, MissingIdentifier, StoreFailure, ActionSuccess]
