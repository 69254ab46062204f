import logging
from datetime import UTC, datetime
from typing import Any

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING
from pymongo.asynchronous.database import AsyncDatabase

from marketplace.core.database import ACCEPTED_TASKS_COLLECTION, JOBS_COLLECTION, parse_object_id
from marketplace.core.exceptions import NotFound, ValidationError, store_errors

logger = logging.getLogger(__name__)

SORT_ORDERS = {
    "newest": DESCENDING,
    "oldest": ASCENDING,
}

REQUIRED_FIELDS = ("title", "userEmail")
INVALID_JOB_ID = "Invalid Job ID"


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class JobRepository:
    """CRUD access to the jobs collection."""

    def __init__(self, db: AsyncDatabase):
        self.jobs = db[JOBS_COLLECTION]
        self.accepted_tasks = db[ACCEPTED_TASKS_COLLECTION]

    async def list_all(self, sort: str | None = None) -> list[dict[str, Any]]:
        """List every job ordered by postedAt, newest first unless sort == "oldest"."""
        direction = SORT_ORDERS.get(sort or "", DESCENDING)
        with store_errors("Failed to fetch jobs"):
            cursor = self.jobs.find({}, sort=[("postedAt", direction)])
            return await cursor.to_list()

    async def get(self, job_id: str) -> dict[str, Any]:
        oid = parse_object_id(job_id, INVALID_JOB_ID)
        return await self.get_by_object_id(oid)

    async def get_by_object_id(self, oid: ObjectId) -> dict[str, Any]:
        with store_errors("Error fetching job details"):
            job = await self.jobs.find_one({"_id": oid})
        if job is None:
            raise NotFound("Job not found")
        return job

    async def create(self, data: dict[str, Any]) -> ObjectId:
        """Insert a job, stamping postedAt with the server clock."""
        if any(is_blank(data.get(field)) for field in REQUIRED_FIELDS):
            raise ValidationError("Missing required fields")

        document = {key: value for key, value in data.items() if key != "_id"}
        document["postedAt"] = datetime.now(UTC)

        with store_errors("Failed to add job"):
            result = await self.jobs.insert_one(document)
        logger.info("Job %s posted by %s", result.inserted_id, document["userEmail"])
        return result.inserted_id

    async def update(self, job_id: str, changes: dict[str, Any]) -> bool:
        """Overwrite the given fields. Returns whether a job matched."""
        oid = parse_object_id(job_id, INVALID_JOB_ID)

        changes = {key: value for key, value in changes.items() if key != "_id"}
        for field in REQUIRED_FIELDS:
            if field in changes and is_blank(changes[field]):
                raise ValidationError(f"{field} cannot be empty")
        if not changes:
            return True

        with store_errors("Failed to update job"):
            result = await self.jobs.update_one({"_id": oid}, {"$set": changes})
        if result.matched_count == 0:
            logger.debug("Update of job %s matched nothing", oid)
        return result.matched_count > 0

    async def delete(self, job_id: str) -> None:
        """Delete a job and every accepted task that references it."""
        oid = parse_object_id(job_id, INVALID_JOB_ID)

        with store_errors("Failed to delete job"):
            await self.jobs.delete_one({"_id": oid})
            removed = await self.accepted_tasks.delete_many({"jobId": oid})
        if removed.deleted_count:
            logger.info("Removed %d accepted tasks of deleted job %s", removed.deleted_count, oid)

    async def list_by_owner(self, email: str | None) -> list[dict[str, Any]]:
        if is_blank(email):
            raise ValidationError("Missing email")
        with store_errors("Failed to fetch user jobs"):
            cursor = self.jobs.find({"userEmail": email})
            return await cursor.to_list()
