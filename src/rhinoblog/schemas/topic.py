"""Topic-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field


class TopicResponse(BaseModel):
    id: int
    name: str
    icon: str
    description: str | None
    slug: str
    sort_order: int

    model_config = ConfigDict(from_attributes=True)


class TopicCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    icon: str = Field("", max_length=50)
    description: str | None = None
    slug: str | None = Field(
        None,
        pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$",
        description="Derived from name when omitted",
    )
    sort_order: int = 0


class TopicUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    icon: str | None = Field(None, max_length=50)
    description: str | None = None
    slug: str | None = Field(None, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    sort_order: int | None = None
