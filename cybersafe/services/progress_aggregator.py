"""
Progress aggregator: serialized read-modify-write of a user's progress over a ProgressStore.
"""

from __future__ import annotations

import threading
import weakref
from contextlib import contextmanager
from typing import Callable, Iterator, Optional, Sequence

from fastapi import Depends
from sqlalchemy.orm import Session

from cybersafe.config import get_db, settings
from cybersafe.services.module_catalog import known_module_ids
from cybersafe.services.progress_merge import (
    ModuleProgressRecord,
    ProgressDelta,
    UserProgressRecord,
    empty_progress,
    merge_progress,
)
from cybersafe.services.progress_store import ProgressStore, SqlProgressStore
from cybersafe.utils.errors import ConcurrencyConflict, ValidationError
from cybersafe.utils.logger import configure_logging, timed

logger = configure_logging()

DeltaBuilder = Callable[[Optional[ModuleProgressRecord]], ProgressDelta]


class UserLockRegistry:
    """
    One re-entrant lock per user id. Entries are weak: a lock lives only while some thread
    holds or waits on it, so the registry stays bounded by concurrent users.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: weakref.WeakValueDictionary = weakref.WeakValueDictionary()

    def __len__(self) -> int:
        return len(self._locks)

    @contextmanager
    def hold(self, user_id: int) -> Iterator[None]:
        with self._guard:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[user_id] = lock
        with lock:
            yield


class ProgressAggregator:
    def __init__(
        self,
        store: ProgressStore,
        *,
        known_modules: Sequence[str] = (),
        locks: Optional[UserLockRegistry] = None,
        strict: bool = False,
        max_attempts: int = 3,
    ):
        self.store = store
        self.known_modules = tuple(known_modules)
        self.locks = locks or UserLockRegistry()
        self.strict = strict
        self.max_attempts = max(1, max_attempts)

    def get_progress(self, user_id: int) -> UserProgressRecord:
        """Stored progress, or the zero record a new user would start from."""
        return self.store.load(user_id) or empty_progress(user_id, self.known_modules)

    def update_progress(self, user_id: int, module_id: str, delta: ProgressDelta) -> UserProgressRecord:
        return self.update_progress_with(user_id, module_id, lambda _current: delta)

    def update_progress_with(self, user_id: int, module_id: str, build_delta: DeltaBuilder) -> UserProgressRecord:
        """
        Build the delta from the module's current record and apply it, all while holding the
        user's lock. A stale write detected by the store is retried from a fresh read.
        """
        self._check_module(module_id)
        with self.locks.hold(user_id), timed(logger, "progress.update", user_id=user_id, module=module_id):
            for attempt in range(1, self.max_attempts + 1):
                existing = self.store.load(user_id)
                current = existing.module(module_id) if existing else None
                delta = build_delta(current)
                updated = merge_progress(
                    existing,
                    module_id,
                    delta,
                    user_id=user_id,
                    known_modules=self.known_modules,
                )
                try:
                    return self.store.save(updated)
                except ConcurrencyConflict as e:
                    logger.warning(
                        "progress write conflict user_id=%s module=%s attempt=%s/%s detail=%s",
                        user_id, module_id, attempt, self.max_attempts, e.detail,
                    )
            raise ConcurrencyConflict(
                f"progress for user {user_id} kept changing; gave up after {self.max_attempts} attempts"
            )

    def _check_module(self, module_id: str) -> None:
        if not isinstance(module_id, str) or not module_id:
            raise ValidationError("module id must be a non-empty string")
        if self.strict and module_id not in self.known_modules:
            raise ValidationError(f"unknown module '{module_id}'")


# Shared across requests so concurrent requests for one user serialize in this process.
_user_locks = UserLockRegistry()


def get_progress_aggregator(db: Session = Depends(get_db)) -> ProgressAggregator:
    return ProgressAggregator(
        SqlProgressStore(db),
        known_modules=known_module_ids(),
        locks=_user_locks,
        strict=settings.strict_modules,
        max_attempts=settings.progress_max_attempts,
    )
