"""
Proxy API schemas.
Type-safe contracts for the health and token endpoints.
"""

from typing import Optional
from pydantic import BaseModel, Field

__all__ = ["HealthResponse", "TokenStatusResponse"]


# ============================================================================
# Health Check
# ============================================================================

class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "ok"
    timestamp: str  # ISO-8601, UTC
    service: str


# ============================================================================
# Token Status
# ============================================================================

class TokenStatusResponse(BaseModel):
    """Snapshot of the cached OAuth token."""
    hasToken: bool
    expiresIn: int = Field(default=0, ge=0, description="Whole seconds until the cached token expires")
    expiryTime: Optional[str] = None  # ISO-8601, UTC
