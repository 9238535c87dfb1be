"""Version 1 API routes."""

from .router import router
from .webhook import webhook_alias_router

__all__ = ["router", "webhook_alias_router"]
