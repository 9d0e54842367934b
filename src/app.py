"""Order lifecycle FastAPI application.

Serves the ordering domain over HTTP. Each request runs inside the
ordering domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ordering.domain import ordering

# Initialized at module level so uvicorn workers share the domain.
# PROTEAN_ENV selects the configuration overlay.
ordering.init()

app = FastAPI(
    title="Order Lifecycle API",
    description="Orders, fulfillment tracking and returns",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the ordering domain context for each request."""
    with ordering.domain_context():
        return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from ordering.api.routes import customer_router, order_router, returns_router  # noqa: E402

app.include_router(order_router)
app.include_router(customer_router)
app.include_router(returns_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": ordering.name})
