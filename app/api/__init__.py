# API endpoints and routers

from .link_endpoints import router as link_router
from .health_endpoints import router as health_router

__all__ = [
    "link_router",
    "health_router",
]
