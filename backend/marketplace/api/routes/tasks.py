from fastapi import APIRouter, Depends, Query, Request

from marketplace.api.deps import get_task_service
from marketplace.core.rate_limit import api_rate_limit, limiter
from marketplace.schemas.common import InsertResponse, MessageResponse
from marketplace.schemas.task import AcceptedTaskResponse, AcceptTaskRequest
from marketplace.services.task_acceptance import TaskAcceptanceService

router = APIRouter()


@router.post("/accept-task", response_model=InsertResponse)
@limiter.limit(api_rate_limit)
async def accept_task(
    request: Request,
    task_data: AcceptTaskRequest,
    tasks: TaskAcceptanceService = Depends(get_task_service),
):
    """Accept a job as a task for acceptedBy."""
    inserted_id = await tasks.accept(task_data.jobId, task_data.title, task_data.acceptedBy)
    return InsertResponse(insertedId=str(inserted_id))


@router.get("/my-accepted-tasks", response_model=list[AcceptedTaskResponse])
async def list_my_tasks(
    email: str | None = Query(None),
    tasks: TaskAcceptanceService = Depends(get_task_service),
):
    return [AcceptedTaskResponse.from_document(task) for task in await tasks.list_by_user(email)]


@router.delete("/my-accepted-tasks/{task_id}", response_model=MessageResponse)
@limiter.limit(api_rate_limit)
async def remove_task(
    request: Request,
    task_id: str,
    tasks: TaskAcceptanceService = Depends(get_task_service),
):
    """Remove an accepted task, whether it was finished or cancelled."""
    await tasks.remove(task_id)
    return MessageResponse(message="Task removed successfully")
