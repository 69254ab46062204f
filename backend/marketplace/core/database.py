import logging

from bson import ObjectId
from fastapi import Request
from pymongo import ASCENDING, DESCENDING, AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from marketplace.core.config import Settings
from marketplace.core.exceptions import InvalidId
from marketplace.core.retry import with_retry

logger = logging.getLogger(__name__)

JOBS_COLLECTION = "jobs"
ACCEPTED_TASKS_COLLECTION = "acceptedTasks"

ACCEPTED_TASK_UNIQUE_INDEX = "jobId_acceptedBy_unique"


def create_client(settings: Settings) -> AsyncMongoClient:
    """Create the process-wide client. Connection happens lazily on first use."""
    return AsyncMongoClient(
        settings.mongo_uri,
        tz_aware=True,
        serverSelectionTimeoutMS=settings.mongo_server_selection_timeout_ms,
        appname=settings.app_name,
    )


async def ping(db: AsyncDatabase) -> None:
    await db.command("ping")


async def wait_for_store(db: AsyncDatabase, attempts: int) -> None:
    """Ping the server, retrying connection failures with backoff."""
    await with_retry(max_attempts=max(attempts, 1))(ping)(db)


async def ensure_indexes(db: AsyncDatabase) -> None:
    """Create the indexes the repositories rely on.

    The compound unique index on acceptedTasks is what actually prevents a
    worker from holding two claims on the same job.
    """
    await db[ACCEPTED_TASKS_COLLECTION].create_index(
        [("jobId", ASCENDING), ("acceptedBy", ASCENDING)],
        unique=True,
        name=ACCEPTED_TASK_UNIQUE_INDEX,
    )
    await db[ACCEPTED_TASKS_COLLECTION].create_index([("acceptedBy", ASCENDING)])
    await db[JOBS_COLLECTION].create_index([("postedAt", DESCENDING)])
    await db[JOBS_COLLECTION].create_index([("userEmail", ASCENDING)])
    logger.info("Indexes ensured on %s and %s", JOBS_COLLECTION, ACCEPTED_TASKS_COLLECTION)


def parse_object_id(value: str | None, message: str = "Invalid ID") -> ObjectId:
    """Convert a wire identifier into an ObjectId or raise InvalidId."""
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        raise InvalidId(message)
    return ObjectId(value)


async def get_db(request: Request) -> AsyncDatabase:
    """FastAPI dependency returning the database opened in the lifespan."""
    return request.app.state.db
