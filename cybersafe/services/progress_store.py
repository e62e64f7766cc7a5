"""
Storage collaborators for user progress.

Both stores honour the same contract: `save` writes the whole aggregate atomically and only
if every row still carries the version it was read with. Otherwise nothing is written and
`ConcurrencyConflict` is raised so the caller can re-read and retry.
"""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional, Protocol, Sequence
from uuid import uuid4

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from cybersafe.models.models import ModuleProgress
from cybersafe.services.progress_merge import ModuleProgressRecord, UserProgressRecord
from cybersafe.utils.errors import ConcurrencyConflict, PersistenceUnavailable
from cybersafe.utils.logger import configure_logging

logger = configure_logging()


class ProgressStore(Protocol):
    def load(self, user_id: int) -> Optional[UserProgressRecord]:
        ...

    def save(self, progress: UserProgressRecord) -> UserProgressRecord:
        ...

    def seed(self, user_id: int, module_ids: Sequence[str]) -> UserProgressRecord:
        ...


def _record_from_row(row: ModuleProgress) -> ModuleProgressRecord:
    return ModuleProgressRecord(
        progress=int(row.progress or 0),
        score=int(row.score or 0),
        completed_challenges=tuple(row.completed_challenges or ()),
        time_spent=int(row.time_spent or 0),
        is_completed=bool(row.is_completed),
        version=int(row.version),
    )


class SqlProgressStore:
    """One `module_progress` row per (user, module)."""

    def __init__(self, db: Session):
        self.db = db

    def load(self, user_id: int) -> Optional[UserProgressRecord]:
        try:
            rows = self.db.query(ModuleProgress).filter(ModuleProgress.user_id == user_id).all()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("progress load failed user_id=%s error=%s", user_id, e)
            raise PersistenceUnavailable("progress storage is unavailable") from e
        if not rows:
            return None
        return UserProgressRecord(
            user_id=user_id,
            modules={row.module_id: _record_from_row(row) for row in rows},
        )

    def save(self, progress: UserProgressRecord) -> UserProgressRecord:
        now = datetime.now(timezone.utc)
        saved: dict[str, ModuleProgressRecord] = {}
        try:
            for module_id, record in progress.modules.items():
                values = {
                    "progress": record.progress,
                    "score": record.score,
                    "completed_challenges": list(record.completed_challenges),
                    "time_spent": record.time_spent,
                    "is_completed": record.is_completed,
                    "updated_at": now,
                }
                if record.version == 0:
                    self.db.add(
                        ModuleProgress(
                            id=str(uuid4()),
                            user_id=progress.user_id,
                            module_id=module_id,
                            version=1,
                            **values,
                        )
                    )
                    self.db.flush()
                else:
                    result = self.db.execute(
                        update(ModuleProgress)
                        .where(
                            ModuleProgress.user_id == progress.user_id,
                            ModuleProgress.module_id == module_id,
                            ModuleProgress.version == record.version,
                        )
                        .values(version=record.version + 1, **values)
                        .execution_options(synchronize_session=False)
                    )
                    if result.rowcount != 1:
                        raise ConcurrencyConflict(
                            f"progress for module '{module_id}' changed since it was read"
                        )
                saved[module_id] = replace(record, version=record.version + 1)
            self.db.commit()
        except ConcurrencyConflict:
            self.db.rollback()
            raise
        except IntegrityError as e:
            # Another writer inserted the same (user, module) row first.
            self.db.rollback()
            raise ConcurrencyConflict("progress row was created concurrently") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("progress save failed user_id=%s error=%s", progress.user_id, e)
            raise PersistenceUnavailable("progress storage is unavailable") from e
        return UserProgressRecord(user_id=progress.user_id, modules=saved)

    def seed(self, user_id: int, module_ids: Sequence[str]) -> UserProgressRecord:
        """Create zero rows for any of `module_ids` the user does not have yet."""
        existing = self.load(user_id)
        modules = dict(existing.modules) if existing else {}
        for module_id in module_ids:
            modules.setdefault(module_id, ModuleProgressRecord())
        return self.save(UserProgressRecord(user_id=user_id, modules=modules))


class InMemoryProgressStore:
    """Process-local store. Holds immutable record copies keyed by user id."""

    def __init__(self):
        self._lock = threading.Lock()
        self._data: dict[int, dict[str, ModuleProgressRecord]] = {}

    def load(self, user_id: int) -> Optional[UserProgressRecord]:
        with self._lock:
            modules = self._data.get(user_id)
            if not modules:
                return None
            return UserProgressRecord(user_id=user_id, modules=dict(modules))

    def save(self, progress: UserProgressRecord) -> UserProgressRecord:
        with self._lock:
            stored = self._data.get(progress.user_id, {})
            for module_id, record in progress.modules.items():
                current = stored.get(module_id)
                current_version = current.version if current is not None else 0
                if current_version != record.version:
                    raise ConcurrencyConflict(
                        f"progress for module '{module_id}' changed since it was read"
                    )
            saved = {
                module_id: replace(record, version=record.version + 1)
                for module_id, record in progress.modules.items()
            }
            merged = {**stored, **saved}
            self._data[progress.user_id] = merged
            return UserProgressRecord(user_id=progress.user_id, modules=dict(merged))

    def seed(self, user_id: int, module_ids: Sequence[str]) -> UserProgressRecord:
        existing = self.load(user_id)
        modules = dict(existing.modules) if existing else {}
        for module_id in module_ids:
            modules.setdefault(module_id, ModuleProgressRecord())
        return self.save(UserProgressRecord(user_id=user_id, modules=modules))
