"""Health domain router.

Base route and health check for monitoring and load balancers. Both report
the pid of the worker that answered.
"""

import logging
import os

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from fitback.core.constants import Routes
from fitback.core.deps import SessionDep

logger = logging.getLogger(__name__)

router = APIRouter(prefix=Routes.HEALTH.prefix, tags=[Routes.HEALTH.tag])


@router.get("/")
async def root():
    """Confirm the server is up."""
    pid = os.getpid()
    return {"message": f"Server is running on worker {pid}", "pid": pid}


@router.get("/health")
def health(session: SessionDep):
    """Health check endpoint with database connectivity verification."""
    try:
        session.exec(text("SELECT 1"))  # type: ignore[call-overload]
        return {"status": "ok", "database": "ok", "pid": os.getpid()}
    except Exception:
        logger.warning("Health check failed: database unreachable", exc_info=True)
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "database": "error", "pid": os.getpid()},
        )
