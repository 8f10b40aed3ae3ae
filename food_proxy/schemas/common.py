"""
Common schemas shared across endpoints.
"""

from typing import Any, Optional
from pydantic import BaseModel

__all__ = ["ErrorResponse"]


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    message: str
    details: Optional[Any] = None
