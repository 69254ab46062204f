"""Accepting jobs as tasks.

A worker may hold at most one claim per job and may never claim a job they
posted. The existence check below only short-circuits the common case; the
unique (jobId, acceptedBy) index decides concurrent inserts.
"""

import logging
from datetime import UTC, datetime
from typing import Any

from bson import ObjectId
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from marketplace.core.database import ACCEPTED_TASKS_COLLECTION, parse_object_id
from marketplace.core.exceptions import (
    Conflict,
    Forbidden,
    StoreError,
    ValidationError,
    store_errors,
)
from marketplace.repositories.jobs import JobRepository, is_blank

logger = logging.getLogger(__name__)

INITIAL_STATUS = "pending"
DUPLICATE_ACCEPT = "You already accepted this job"


class TaskAcceptanceService:
    def __init__(self, db: AsyncDatabase, jobs: JobRepository | None = None):
        self.accepted_tasks = db[ACCEPTED_TASKS_COLLECTION]
        self.jobs = jobs or JobRepository(db)

    async def accept(
        self, job_id: str | None, title: str | None, accepted_by: str | None
    ) -> ObjectId:
        """Record that accepted_by has taken the job.

        Raises:
            ValidationError: jobId or acceptedBy missing
            InvalidId: jobId is not an ObjectId
            NotFound: no such job
            Forbidden: the job belongs to accepted_by
            Conflict: accepted_by already holds this job
        """
        if is_blank(job_id) or is_blank(accepted_by):
            raise ValidationError("Missing fields")
        oid = parse_object_id(job_id, "Invalid jobId")

        try:
            job = await self.jobs.get_by_object_id(oid)
        except StoreError as e:
            raise StoreError("Failed to accept task") from e
        if job.get("userEmail") == accepted_by:
            raise Forbidden("You cannot accept your own job")

        with store_errors("Failed to accept task"):
            existing = await self.accepted_tasks.find_one({"jobId": oid, "acceptedBy": accepted_by})
        if existing is not None:
            raise Conflict(DUPLICATE_ACCEPT)

        task = {
            "jobId": oid,
            "title": job.get("title") or title,
            "acceptedBy": accepted_by,
            "acceptedAt": datetime.now(UTC),
            "status": INITIAL_STATUS,
        }
        with store_errors("Failed to accept task"):
            try:
                result = await self.accepted_tasks.insert_one(task)
            except DuplicateKeyError as e:
                logger.info("Concurrent duplicate accept of job %s by %s", oid, accepted_by)
                raise Conflict(DUPLICATE_ACCEPT) from e

        logger.info("Job %s accepted by %s as task %s", oid, accepted_by, result.inserted_id)
        return result.inserted_id

    async def list_by_user(self, email: str | None) -> list[dict[str, Any]]:
        if is_blank(email):
            raise ValidationError("Missing email")
        with store_errors("Failed to fetch accepted tasks"):
            cursor = self.accepted_tasks.find({"acceptedBy": email})
            return await cursor.to_list()

    async def remove(self, task_id: str) -> None:
        """Delete a task record. Missing records are not an error."""
        oid = parse_object_id(task_id, "Invalid Task ID")
        with store_errors("Failed to remove task"):
            await self.accepted_tasks.delete_one({"_id": oid})
