from pydantic import BaseModel, Field


class TagCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)


class TagListResponse(BaseModel):
    tags: list[str]
    selected: str | None
