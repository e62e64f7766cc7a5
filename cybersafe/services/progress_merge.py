"""
Progress records and the pure merge that applies a partial update to them.

Nothing here touches storage. `merge_progress` always returns new records and never mutates
its inputs, which keeps it safe to re-run inside a retry loop.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Iterable, Iterator, Optional, Sequence

from cybersafe.utils.errors import ValidationError

ChallengeId = int


class _Unset:
    """Marks a delta field that is absent from the update, as opposed to set to zero."""

    _instance: Optional["_Unset"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def _dedupe(ids: Iterable[ChallengeId]) -> tuple[ChallengeId, ...]:
    return tuple(dict.fromkeys(ids))


@dataclass(frozen=True)
class ProgressDelta:
    progress: int = UNSET
    score: int = UNSET
    completed_challenges: tuple[ChallengeId, ...] = UNSET
    time_spent: int = UNSET
    is_completed: bool = UNSET

    def __post_init__(self):
        if self.progress is not UNSET:
            if not _is_int(self.progress) or not 0 <= self.progress <= 100:
                raise ValidationError(f"progress must be an integer between 0 and 100, got {self.progress!r}")
        if self.score is not UNSET:
            if not _is_int(self.score) or self.score < 0:
                raise ValidationError(f"score must be a non-negative integer, got {self.score!r}")
        if self.time_spent is not UNSET:
            if not _is_int(self.time_spent) or self.time_spent < 0:
                raise ValidationError(f"time_spent must be a non-negative integer, got {self.time_spent!r}")
        if self.is_completed is not UNSET and not isinstance(self.is_completed, bool):
            raise ValidationError(f"is_completed must be a boolean, got {self.is_completed!r}")
        if self.completed_challenges is not UNSET:
            if isinstance(self.completed_challenges, (str, bytes)) or not isinstance(self.completed_challenges, Iterable):
                raise ValidationError("completed_challenges must be a collection of challenge ids")
            ids = tuple(self.completed_challenges)
            if not all(_is_int(i) for i in ids):
                raise ValidationError("challenge ids must be integers")
            object.__setattr__(self, "completed_challenges", _dedupe(ids))

    def is_set(self, name: str) -> bool:
        return getattr(self, name) is not UNSET

    def items(self) -> Iterator[tuple[str, Any]]:
        """Yield (field, value) for the fields present in this update."""
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not UNSET:
                yield f.name, value

    def is_empty(self) -> bool:
        return next(self.items(), None) is None

    @classmethod
    def from_fields(cls, values: dict[str, Any]) -> "ProgressDelta":
        """Build a delta from only the keys actually supplied by the caller."""
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise ValidationError(f"unknown progress fields: {', '.join(sorted(unknown))}")
        return cls(**values)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class ModuleProgressRecord:
    progress: int = 0
    score: int = 0
    completed_challenges: tuple[ChallengeId, ...] = ()
    time_spent: int = 0
    is_completed: bool = False
    # Storage row version; 0 means the row has never been written.
    version: int = field(default=0, compare=False)

    def apply(self, delta: ProgressDelta) -> "ModuleProgressRecord":
        return replace(self, **dict(delta.items()))


@dataclass(frozen=True)
class UserProgressRecord:
    user_id: int
    modules: dict[str, ModuleProgressRecord] = field(default_factory=dict)

    @property
    def overall_progress(self) -> float:
        return overall_progress(self.modules.values())

    def module(self, module_id: str) -> Optional[ModuleProgressRecord]:
        return self.modules.get(module_id)


def overall_progress(modules: Iterable[ModuleProgressRecord]) -> float:
    values = [m.progress for m in modules]
    if not values:
        return 0.0
    return sum(values) / len(values)


def empty_progress(user_id: int, module_ids: Sequence[str]) -> UserProgressRecord:
    return UserProgressRecord(user_id=user_id, modules={mid: ModuleProgressRecord() for mid in module_ids})


def merge_progress(
    existing: Optional[UserProgressRecord],
    module_id: str,
    delta: ProgressDelta,
    *,
    user_id: Optional[int] = None,
    known_modules: Sequence[str] = (),
) -> UserProgressRecord:
    """
    Apply `delta` to `module_id` and return the new aggregate.

    - No existing record: start from one empty module per entry in `known_modules`.
    - Module missing from the record: created with zero values.
    - Present delta fields overwrite, absent ones are left alone. `completed_challenges`
      is replaced, not unioned, and `score` is overwritten, not added to.
    """
    if existing is None:
        if user_id is None:
            raise ValidationError("user_id is required when there is no existing progress")
        existing = empty_progress(user_id, known_modules)

    modules = dict(existing.modules)
    current = modules.get(module_id, ModuleProgressRecord())
    modules[module_id] = current.apply(delta)
    return UserProgressRecord(user_id=existing.user_id, modules=modules)


def challenge_completion_delta(
    current: Optional[ModuleProgressRecord],
    challenge_id: ChallengeId,
    *,
    points: int,
    total_challenges: int,
) -> ProgressDelta:
    """
    Delta for solving `challenge_id`: union it into the completed set, award `points` on top of
    the current score and derive progress from the completed share. Solving an already completed
    challenge yields an empty delta so points are never counted twice.
    """
    current = current or ModuleProgressRecord()
    if challenge_id in current.completed_challenges:
        return ProgressDelta()

    completed = current.completed_challenges + (challenge_id,)
    total = max(total_challenges, 1)
    progress = min(100, round(100 * len(completed) / total))
    return ProgressDelta(
        progress=progress,
        score=current.score + points,
        completed_challenges=completed,
        is_completed=len(completed) >= total,
    )
