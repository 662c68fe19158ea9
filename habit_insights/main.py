import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from habit_insights import __version__
from habit_insights.core.config import settings
from habit_insights.routers import analytics as analytics_router
from habit_insights.core.errors import (
    HabitInsightsException,
    habit_insights_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Habit Insights API",
    description=(
        "**Deterministic habit analytics**\n\n"
        "Turns a habit's completion history into trends, day-of-week and "
        "time-of-day breakdowns, month comparisons and confidence-scored insights. "
        "Every request carries its own records; nothing is stored.\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version=__version__,
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
app.add_exception_handler(HabitInsightsException, habit_insights_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(analytics_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health():
    """
    Returns `{"status": "ok"}` when the API is up.
    The engine has no database or upstream dependency to probe.
    """
    return {"status": "ok", "env": settings.APP_ENV, "version": __version__}
