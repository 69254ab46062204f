import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from marketplace.api.routes import jobs, tasks
from marketplace.core.config import get_settings
from marketplace.core.database import (
    create_client,
    ensure_indexes,
    get_db,
    ping,
    wait_for_store,
)
from marketplace.core.exceptions import register_exception_handlers
from marketplace.core.logging import setup_logging
from marketplace.core.rate_limit import limiter

# Initialize logging before anything else
setup_logging()

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting %s...", settings.app_name)

    client = create_client(settings)
    db = client[settings.db_name]
    await wait_for_store(db, settings.startup_connect_attempts)
    logger.info("MongoDB connected, using database %s", settings.db_name)

    await ensure_indexes(db)
    app.state.db = db

    yield

    # Shutdown
    logger.info("Shutting down %s...", settings.app_name)
    await client.close()


app = FastAPI(
    title=settings.app_name,
    description="Post freelance jobs and accept them as tasks",
    version="0.1.0",
    lifespan=lifespan,
)

# Add rate limiter to app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(jobs.router, tags=["Jobs"])
app.include_router(tasks.router, tags=["Tasks"])


@app.get("/", response_class=PlainTextResponse)
async def root():
    return "Freelance Marketplace Server is Running Smoothly!"


@app.get("/health")
async def health_check(db: AsyncDatabase = Depends(get_db)):
    try:
        await ping(db)
    except PyMongoError as e:
        logger.warning("Health check failed: %s", e)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unavailable", "app": settings.app_name},
        )
    return {"status": "healthy", "app": settings.app_name}
