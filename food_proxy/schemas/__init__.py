"""
API schemas for the FatSecret proxy.
Provides type-safe contracts for the HTTP endpoints.
"""

from food_proxy.schemas.common import *  # noqa: F403, F401
from food_proxy.schemas.proxy import *  # noqa: F403, F401
