"""API route modules."""
from medisocial.routes.library import router as library_router
from medisocial.routes.post import router as post_router
from medisocial.routes.rts import router as rts_router
from medisocial.routes.session import router as session_router
from medisocial.routes.tools import router as tools_router

__all__ = [
    "library_router",
    "post_router",
    "rts_router",
    "session_router",
    "tools_router",
]
