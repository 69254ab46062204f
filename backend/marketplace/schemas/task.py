from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from marketplace.schemas.common import serialize_document


class AcceptTaskRequest(BaseModel):
    jobId: str | None = None
    title: str | None = None
    acceptedBy: str | None = None


class AcceptedTaskResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id", serialization_alias="_id")
    jobId: str
    title: Any = None
    acceptedBy: str
    acceptedAt: datetime
    status: str

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "AcceptedTaskResponse":
        return cls.model_validate(serialize_document(document))
