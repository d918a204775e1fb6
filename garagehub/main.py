"""
Main FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from garagehub.cache import query_cache
from garagehub.config import get_settings
from garagehub.database import engine, init_db
from garagehub.errors import GarageError
from garagehub.realtime import feed
from garagehub.routers import (
    auth, dashboard, garage_services, garages, gst_slabs, inventory, invoices, job_cards, leads, ledger,
    promotions, realtime, settings as settings_router, staff,
)
from garagehub.services.promotions import loyalty_subscriber

settings = get_settings()
logger = logging.getLogger("garagehub")


def configure_logging():
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan events for the application.
    Handles startup and shutdown events.
    """
    # Startup
    configure_logging()
    logger.info("🚀 Starting %s...", settings.app_name)
    logger.info("📊 Initializing database...")
    await init_db()
    logger.info("✅ Database initialized successfully")

    query_cache.clear()
    subscriptions = [
        query_cache.connect(feed),
        feed.subscribe(loyalty_subscriber(), table="job_cards"),
    ]
    logger.info("🔄 Change feed wired to the query cache and loyalty points")
    logger.info("🌐 API available at: %s", settings.api_v1_prefix)

    yield

    # Shutdown
    for subscription in subscriptions:
        subscription.unsubscribe()
    query_cache.clear()
    await engine.dispose()
    logger.info("👋 Shutting down %s...", settings.app_name)


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    ## 🔧 Garage Hub API

    Multi-tenant backend for running a garage.

    ### Entities:
    * **Job cards**: Work orders from intake to completion, with a status pipeline
    * **Inventory**: Parts stock, restocking and purchase tracking
    * **Ledger**: Expenses and income entries, with revenue sync from completed jobs
    * **Invoices**: GST invoices generated from job cards
    * **Staff**: Roster and attendance
    * **Promotions**: Offers, loyalty points and service reminders
    * **Leads**: Sales enquiries and their conversion into job cards
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(GarageError)
async def garage_error_handler(request: Request, exc: GarageError):
    """Render domain errors as ``{"detail", "errors"}`` with the status of their class."""
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail, "errors": exc.errors})


# Include routers
for module in (
    auth, garages, job_cards, inventory, invoices, gst_slabs, garage_services, staff, promotions, leads,
    settings_router, dashboard, realtime,
):
    app.include_router(module.router, prefix=settings.api_v1_prefix)
app.include_router(ledger.expenses_router, prefix=settings.api_v1_prefix)
app.include_router(ledger.accounts_router, prefix=settings.api_v1_prefix)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Welcome to Garage Hub API",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.app_version,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "garagehub.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
