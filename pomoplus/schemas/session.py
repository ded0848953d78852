from datetime import datetime

from pydantic import BaseModel, Field, model_validator

from pomoplus.schemas.timer import Phase


class SessionRecord(BaseModel):
    start_time: datetime
    end_time: datetime
    duration_seconds: int = Field(ge=0)
    tag: str = Field(min_length=1, max_length=255)
    phase: Phase

    model_config = {"frozen": True, "from_attributes": True}

    @model_validator(mode="after")
    def _check_interval(self) -> "SessionRecord":
        if self.end_time < self.start_time:
            raise ValueError("end_time must not be earlier than start_time")
        return self
