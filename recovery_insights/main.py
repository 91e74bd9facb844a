from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy import text

from recovery_insights.db.base import get_db
from recovery_insights.core.config import settings
from recovery_insights.core.logging import configure_logging
from recovery_insights.routers import users as users_router
from recovery_insights.routers import urges as urges_router
from recovery_insights.routers import journal as journal_router
from recovery_insights.routers import insights as insights_router
from recovery_insights.routers import achievements as achievements_router
from recovery_insights.core.errors import (
    RecoveryException,
    recovery_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)

configure_logging()

app = FastAPI(
    title="Recovery Insights API",
    description=(
        "**Recovery tracking analytics**\n\n"
        "Stores urges, journal entries and streaks, and turns them into chart "
        "buckets, summary metrics, pattern insights, achievements and daily "
        "motivation.\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(RecoveryException, recovery_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(users_router.router)
app.include_router(urges_router.router)
app.include_router(journal_router.router)
app.include_router(insights_router.router)
app.include_router(achievements_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health(db: Session = Depends(get_db)):
    """
    Returns `{"status": "ok", "db": "ok"}` when both the API and the database
    are reachable. Returns HTTP 503 if the DB is down.
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "ok"
    except SQLAlchemyError:
        db_status = "unreachable"

    if db_status != "ok":
        return JSONResponse(
            status_code=503,
            content={"status": "error", "db": db_status},
        )
    return {"status": "ok", "db": "ok", "env": settings.APP_ENV}
