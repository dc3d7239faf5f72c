"""EasyKeep Inventory FastAPI application.

Web server that processes inventory commands synchronously via HTTP. Every
request runs inside the inventory domain context and carries a request id
that is bound into the structured log context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV controls which config overlay is applied:
#   - unset/"test"  → in-memory provider
#   - "production"  → PostgreSQL via DATABASE_URL
from inventory.domain import inventory, logger  # noqa: E402
from inventory.utils.logging import add_context, clear_context  # noqa: E402
from inventory.utils.settings import setting  # noqa: E402

inventory.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="EasyKeep Inventory API",
    description="Inventory items, stock adjustments and low-stock alerts",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=setting("CORS_ORIGINS", inventory),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the inventory domain context and bind a request id for logging."""
    request_id = request.headers.get("X-Request-Id") or uuid4().hex
    add_context(request_id=request_id, method=request.method, path=request.url.path)
    try:
        with inventory.domain_context():
            response = await call_next(request)
    finally:
        clear_context()
    response.headers["X-Request-Id"] = request_id
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from inventory.api import inventory_router, register_exception_handlers, user_router  # noqa: E402

app.include_router(inventory_router, prefix="/api")
app.include_router(user_router, prefix="/api")
register_exception_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/api/health")
async def health():
    return JSONResponse(
        content={
            "status": "success",
            "message": "EasyKeep Inventory API is running",
            "domain": {"name": inventory.name},
        }
    )


logger.info("application_started", domain=inventory.name)
