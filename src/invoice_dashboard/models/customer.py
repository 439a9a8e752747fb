"""
Customer-related Pydantic models
"""

from pydantic import BaseModel

class CustomerField(BaseModel):
    """Customer option for the invoice form select"""
    id: str
    name: str
