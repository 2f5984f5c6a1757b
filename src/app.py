"""Campus storefront FastAPI application.

Commands are processed synchronously per request inside the storefront
domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.api.errors import register_error_handlers
from storefront.api.routes import ROUTERS
from storefront.config import get_settings
from storefront.domain import logger, storefront
from storefront.storage import configure_storage, shutdown_storage
from storefront.utils.logging import clear_context

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV selects the domain.toml overlay (memory by default, postgresql
# in production). Timeouts are applied to the storage config before init.
settings = get_settings()
configure_storage(storefront, settings)
storefront.init()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("storefront_started", domain=storefront.name)
    yield
    shutdown_storage(storefront)
    logger.info("storefront_stopped", domain=storefront.name)


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Campus Storefront API",
    description="University storefront: catalogue, cart, checkout and admin console",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the storefront domain context for each request."""
    clear_context()
    with storefront.domain_context():
        response = await call_next(request)
    return response


register_error_handlers(app)

for router in ROUTERS:
    app.include_router(router)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": storefront.name})
