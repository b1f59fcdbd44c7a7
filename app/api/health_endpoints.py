"""
Health check API endpoint.

Reports whether the key-value store is bound and answering.
"""

from fastapi import APIRouter, Request
from typing import Dict, Any
import logging
from datetime import datetime, timezone

from app.config.settings import settings
from app.core.error_handlers import error_handler

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(request: Request) -> Dict[str, Any]:
    """Health check with key-value store status."""
    store = getattr(request.app.state, "kv_store", None)

    if store is None:
        kv_details = {"status": "unconfigured", "backend": None}
    elif await store.ping():
        kv_details = {"status": "healthy", "backend": store.backend_name}
    else:
        logger.warning("Key-value store did not answer health check ping")
        kv_details = {"status": "unhealthy", "backend": store.backend_name}

    return {
        "status": "healthy" if kv_details["status"] == "healthy" else "unhealthy",
        "version": settings.app_version,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "details": {"kv_store": kv_details},
        "error_statistics": error_handler.get_error_statistics(),
    }
