from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Request

from marketplace.api.deps import get_job_repository
from marketplace.core.rate_limit import api_rate_limit, limiter
from marketplace.repositories.jobs import JobRepository
from marketplace.schemas.common import InsertResponse, MessageResponse
from marketplace.schemas.job import JobCreate, JobResponse

router = APIRouter()


@router.get("/jobs", response_model=list[JobResponse])
async def list_jobs(
    sort: str | None = Query(None),
    jobs: JobRepository = Depends(get_job_repository),
):
    """List all jobs. sort=oldest for ascending postedAt, anything else is newest first."""
    return [JobResponse.from_document(job) for job in await jobs.list_all(sort)]


@router.get("/jobs/{job_id}", response_model=JobResponse)
async def get_job(
    job_id: str,
    jobs: JobRepository = Depends(get_job_repository),
):
    return JobResponse.from_document(await jobs.get(job_id))


@router.post("/jobs", response_model=InsertResponse)
@limiter.limit(api_rate_limit)
async def create_job(
    request: Request,
    job_data: JobCreate,
    jobs: JobRepository = Depends(get_job_repository),
):
    """Post a new job. postedAt is always set by the server."""
    inserted_id = await jobs.create(job_data.model_dump())
    return InsertResponse(insertedId=str(inserted_id))


@router.put("/jobs/{job_id}", response_model=MessageResponse)
@limiter.limit(api_rate_limit)
async def update_job(
    request: Request,
    job_id: str,
    changes: dict[str, Any] = Body(...),
    jobs: JobRepository = Depends(get_job_repository),
):
    """Overwrite the supplied fields of a job."""
    await jobs.update(job_id, changes)
    return MessageResponse(message="Job updated successfully")


@router.delete("/jobs/{job_id}", response_model=MessageResponse)
@limiter.limit(api_rate_limit)
async def delete_job(
    request: Request,
    job_id: str,
    jobs: JobRepository = Depends(get_job_repository),
):
    """Delete a job along with the tasks accepted for it."""
    await jobs.delete(job_id)
    return MessageResponse(message="Job deleted successfully")


@router.get("/myAddedJobs", response_model=list[JobResponse])
async def list_my_jobs(
    email: str | None = Query(None),
    jobs: JobRepository = Depends(get_job_repository),
):
    """List the jobs posted by email."""
    return [JobResponse.from_document(job) for job in await jobs.list_by_owner(email)]
