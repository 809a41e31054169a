from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from product_service.config import get_settings
from product_service.database import create_catalog
from product_service.api import categories, health, products
from product_service.api.errors import register_exception_handlers

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
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

    # The catalog lives for the whole process; a restart resets it
    app.state.catalog = create_catalog(seed=settings.SEED_CATALOG)
    logger.info(f"Catalog ready with {len(app.state.catalog)} products")

    yield

    # Shutdown
    logger.info("Shutting down application...")


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="""
    In-memory product catalog API.

    - **Listing**: filter by category, price range and availability, search
      name and description, sort by any field and paginate
    - **Product Management**: create, replace, partially update and delete
    - **Inventory**: add or subtract stock without ever going negative

    ## Stock & Name Consistency
    Every catalog operation runs under a single lock, so a name uniqueness
    check or stock check and the write that follows it happen as one unit.
    Product names are unique ignoring case.
    """,
    version=settings.APP_VERSION,
    license_info={
        "name": "MIT",
        "url": "https://opensource.org/licenses/MIT"
    },
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include API routers
app.include_router(health.router)
app.include_router(products.router, prefix=settings.API_PREFIX)
app.include_router(categories.router, prefix=settings.API_PREFIX)


@app.get("/", tags=["Root"])
def root():
    """Root endpoint with API information."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "redoc": "/redoc",
        "health": "/health"
    }
