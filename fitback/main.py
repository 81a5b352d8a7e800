from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI

from fitback.auth.router import router as auth_router
from fitback.compute.pool import ComputePool
from fitback.compute.router import router as compute_router
from fitback.core.email import init_resend
from fitback.core.exception_handlers import register_exception_handlers
from fitback.core.http import close_github_client
from fitback.core.logging import configure_logging
from fitback.core.middleware import add_compression_middleware, add_cors_middleware
from fitback.core.request_logging import add_request_logging_middleware
from fitback.core.settings import get_settings
from fitback.db.engine import init_db
from fitback.github.router import router as github_router
from fitback.health.router import router as health_router
from fitback.user.router import router as user_router

configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    # Under the supervisor the tables already exist and this issues no DDL.
    init_db()
    init_resend(settings)

    compute_pool = ComputePool(
        max_workers=settings.compute_max_workers,
        max_pending=settings.compute_max_pending,
    )
    compute_pool.start()
    app.state.compute_pool = compute_pool
    try:
        yield
    finally:
        compute_pool.shutdown()
        await close_github_client()


app = FastAPI(title="FitBack", version="0.1.0", lifespan=lifespan)

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(auth_router)
api_router.include_router(github_router)
api_router.include_router(user_router)
api_router.include_router(compute_router)

app.include_router(api_router)

add_compression_middleware(app)
add_request_logging_middleware(app)
add_cors_middleware(app, get_settings())
register_exception_handlers(app)
