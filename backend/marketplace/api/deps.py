from fastapi import Depends
from pymongo.asynchronous.database import AsyncDatabase

from marketplace.core.database import get_db
from marketplace.repositories.jobs import JobRepository
from marketplace.services.task_acceptance import TaskAcceptanceService


def get_job_repository(db: AsyncDatabase = Depends(get_db)) -> JobRepository:
    return JobRepository(db)


def get_task_service(
    db: AsyncDatabase = Depends(get_db),
    jobs: JobRepository = Depends(get_job_repository),
) -> TaskAcceptanceService:
    return TaskAcceptanceService(db, jobs)
