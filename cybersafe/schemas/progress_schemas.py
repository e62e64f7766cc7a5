"""
Progress schemas. Field names are camelCase on the wire.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from cybersafe.services.progress_merge import ModuleProgressRecord, ProgressDelta, UserProgressRecord


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ModuleProgressResponse(CamelModel):
    progress: int
    score: int
    completed_challenges: list[int]
    time_spent: int
    is_completed: bool

    @classmethod
    def from_record(cls, record: ModuleProgressRecord) -> "ModuleProgressResponse":
        return cls(
            progress=record.progress,
            score=record.score,
            completed_challenges=list(record.completed_challenges),
            time_spent=record.time_spent,
            is_completed=record.is_completed,
        )


class UserProgressResponse(CamelModel):
    user_id: int
    overall_progress: float
    modules: dict[str, ModuleProgressResponse]

    @classmethod
    def from_record(cls, record: UserProgressRecord) -> "UserProgressResponse":
        return cls(
            user_id=record.user_id,
            overall_progress=record.overall_progress,
            modules={mid: ModuleProgressResponse.from_record(m) for mid, m in record.modules.items()},
        )


class ProgressUpdateRequest(CamelModel):
    """
    Partial update. Only the keys present in the request body are applied; range checks
    happen in ProgressDelta so an explicit null is rejected rather than ignored.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    progress: Optional[int] = None
    score: Optional[int] = None
    completed_challenges: Optional[list[int]] = None
    time_spent: Optional[int] = None
    is_completed: Optional[bool] = None

    def to_delta(self) -> ProgressDelta:
        return ProgressDelta.from_fields({name: getattr(self, name) for name in self.model_fields_set})
