"""Back-office ordering FastAPI application.

Places orders, reconciles payments with the hosted-checkout gateway and
serves invoices. Every request runs inside the ordering domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ordering.api import cart_router, customer_router, invoice_router, order_router, payment_router
from ordering.api.errors import register_error_handlers
from ordering.domain import ordering
from ordering.utils.db import setup_db
from ordering.utils.logging import bind_request_context, clear_request_context

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV selects the config overlay in domain.toml: in-memory by default,
# "sqlite" for a local file, "production" for PostgreSQL (DATABASE_URL).
ordering.init()
setup_db(ordering)

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Ordering Back Office API",
    description="Order placement, payment reconciliation and invoicing",
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
    """Push the ordering domain context and tag log lines with a request id."""
    bind_request_context(request_id=request.headers.get("X-Request-ID", uuid4().hex))
    try:
        with ordering.domain_context():
            return await call_next(request)
    finally:
        clear_request_context()


register_error_handlers(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(customer_router)
app.include_router(cart_router)
app.include_router(order_router)
app.include_router(payment_router)
app.include_router(invoice_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": ordering.name})
