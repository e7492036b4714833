"""FastAPI application entry point."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from app.core.config import settings
from app.core.structured_logging import configure_logging
from app.db.session import engine

configure_logging(settings.LOG_LEVEL)

# ============================================================================
# Sentry Integration (optional, for production error tracking)
# ============================================================================

if settings.SENTRY_DSN and settings.ENV != "dev":
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENV,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
        traces_sample_rate=0.1,  # 10% of requests for performance monitoring
        send_default_pii=False,  # Don't send PII to Sentry
    )
    logging.info("Sentry initialized for error tracking")

# ============================================================================
# Rate Limiting
# ============================================================================

from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from app.core.rate_limit import limiter

# ============================================================================
# FastAPI App
# ============================================================================

app = FastAPI(
    title="Memorial Ledger API",
    description="Collaborative ledgers of actions, typed attachment slots and audit trails",
    version=settings.VERSION,
    docs_url="/docs" if settings.ENV == "dev" else None,
    redoc_url="/redoc" if settings.ENV == "dev" else None,
)

# Add rate limiter (SlowAPIMiddleware applies the default per-minute limit)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# CORS middleware - must be added before routers
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=False,  # Bearer tokens, no cookies
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    expose_headers=["X-Request-ID"],
)

# Service errors -> 4xx JSON, anything else -> logged 500
from app.core.error_handlers import register_exception_handlers

register_exception_handlers(app)

# ============================================================================
# Routers
# ============================================================================

from app.routers import (
    ledger_actions,
    ledger_attachments,
    ledger_collaborators,
    ledger_status_updates,
    ledger_templates,
    ledgers,
)

app.include_router(ledgers.router, prefix="/ledgers", tags=["ledgers"])
app.include_router(
    ledger_actions.router, prefix="/ledgers/{ledger_id}/actions", tags=["ledger-actions"]
)
app.include_router(
    ledger_collaborators.router,
    prefix="/ledgers/{ledger_id}/collaborators",
    tags=["ledger-collaborators"],
)
app.include_router(
    ledger_attachments.router,
    prefix="/actions/{action_id}/attachments",
    tags=["ledger-attachments"],
)
# Mixed paths: /ledgers/{id}/status-updates, /actions/{id}/status-updates, /status-updates/...
app.include_router(ledger_status_updates.router, tags=["ledger-status-updates"])
# Mixed paths: /templates, /action-definitions, /ledgers/{id}/apply-*
app.include_router(ledger_templates.router, tags=["ledger-templates"])


# ============================================================================
# Health Check
# ============================================================================

@app.get("/health")
def health():
    """
    Health check endpoint.

    Verifies database connectivity and returns environment info.
    """
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return {"status": "ok", "env": settings.ENV, "version": settings.VERSION}
