"""Route modules."""

from .auth import router as auth_router
from .cards import router as cards_router
from .groups import router as groups_router
from .messages import router as messages_router

__all__ = ["auth_router", "cards_router", "groups_router", "messages_router"]
