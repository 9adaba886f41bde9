from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from stock_dashboard.config import get_settings
from stock_dashboard.state import DashboardState
from stock_dashboard.utils.store import build_store
from stock_dashboard.api import dashboard, health

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    # Startup
    logger.info("Starting up application...")

    # A store placed on app.state beforehand (e.g. by tests) takes precedence
    store = getattr(app.state, "store", None) or build_store(settings)
    state = DashboardState(store, settings)
    logger.info(f"Loading inventory snapshot from {type(store).__name__}...")
    state.start()
    app.state.dashboard = state

    yield

    # Shutdown
    logger.info("Shutting down application...")
    state.close()


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="""
    Read-only inventory dashboard backed by an external record store.

    - **Summary**: Total stock value across all products
    - **Inventory**: Stock level, sold-stock estimate and sold flag per product
    - **Transactions**: Stock adjustment history
    - **Chart**: Product quantity series with pointer-driven focus card

    ## Refresh
    Products are re-read whenever the record store publishes a change.
    Transactions are read at startup and on an explicit reload.
    """,
    version=settings.APP_VERSION,
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(health.router, prefix="/api/v1")
app.include_router(dashboard.router, prefix="/api/v1")


@app.get("/", tags=["Root"])
def root():
    """Root endpoint with API information."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "redoc": "/redoc",
        "health": "/api/v1/health"
    }
