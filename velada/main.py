"""
velada/main.py
FastAPI application entrypoint

Run locally with:  uvicorn velada.main:app --reload
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from velada import __version__
from velada.config import settings, feature_flags
from velada.core.editions import get_registry
from velada.database import init_db, close_db
from velada.middleware.error_handler import setup_error_handlers
from velada.middleware.rate_limit import limiter
from velada.routes import router

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting application...")
    try:
        await init_db()
        logger.info("Database connected successfully")
    except Exception as e:
        logger.error(f"Failed to connect to database: {str(e)}")
        raise

    logger.info(f"Feature flags: {feature_flags.get_all_flags()}")
    registry = get_registry()
    if feature_flags.FEATURE_VALIDATE_REGISTRY_ON_STARTUP:
        validation = registry.validate()
        if validation.is_valid:
            logger.info(f"✓ Registry valid: {registry.total_combats} combats")
        else:
            for error in validation.errors:
                logger.error(f"Registry inconsistency: {error}")

    yield

    logger.info("Shutting down application...")
    try:
        await close_db()
    except Exception as e:
        logger.error(f"Error closing database connection: {str(e)}")


app = FastAPI(
    title="La Velada Voting API",
    description="Combat voting and winner tracking for La Velada del Año",
    version=__version__,
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan
)

# Attach rate limiter to the app
app.state.limiter = limiter

origins = [
    "http://localhost:3000",
    "http://localhost:4321",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:4321",
]
origins.extend(settings.allowed_origins)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

setup_error_handlers(app, debug=settings.is_development)

app.include_router(router, prefix="/api")


@app.get("/health", tags=["Health"])
async def health_check():
    return {
        "status": "healthy",
        "environment": settings.environment,
        "edition": settings.edition,
        "version": __version__,
    }


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": "La Velada Voting API",
        "version": __version__,
        "docs": "/docs" if settings.is_development else None,
    }
