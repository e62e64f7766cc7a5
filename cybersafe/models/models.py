from cybersafe.config import Base
from sqlalchemy import Column, Integer, String, JSON, DateTime, ForeignKey, Boolean, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    fullname = Column(String, nullable=False)
    gender = Column(String, nullable=False)
    email = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)


class ModuleProgress(Base):
    __tablename__ = "module_progress"
    __table_args__ = (UniqueConstraint("user_id", "module_id", name="uq_module_progress_user_module"),)

    id = Column(String, primary_key=True, index=True)  # uuid
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    module_id = Column(String, index=True, nullable=False)  # catalog slug, e.g. "phishing"
    progress = Column(Integer, default=0, nullable=False)  # 0..100
    score = Column(Integer, default=0, nullable=False)
    completed_challenges = Column(JSON, default=list, nullable=False)  # list of challenge ids
    time_spent = Column(Integer, default=0, nullable=False)  # minutes
    is_completed = Column(Boolean, default=False, nullable=False)
    # Bumped on every write; updates are conditional on the version that was read.
    version = Column(Integer, default=1, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    user = relationship("User", backref="module_progress", foreign_keys=[user_id])
