from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from marketplace.schemas.common import serialize_document


class JobCreate(BaseModel):
    """A new job posting. Fields beyond title and userEmail are stored as given."""

    model_config = ConfigDict(extra="allow")

    title: str | None = None
    userEmail: str | None = None


class JobResponse(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(alias="_id", serialization_alias="_id")
    title: Any = None
    userEmail: Any = None
    postedAt: Any = None

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "JobResponse":
        return cls.model_validate(serialize_document(document))
