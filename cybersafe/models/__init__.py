"""
Database entities. Single import surface for the SQLAlchemy models.

- User: registered trainee
- ModuleProgress: one row per (user, module) with progress, score and completed challenges
"""

from cybersafe.models.models import User, ModuleProgress

__all__ = [
    "User",
    "ModuleProgress",
]
