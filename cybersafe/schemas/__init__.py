"""
API schemas package. Import from submodules or from this package.

Example:
    from cybersafe.schemas import UserProgressResponse
    from cybersafe.schemas.module_schemas import PasswordAssessmentResponse
"""

from cybersafe.schemas.auth_schemas import (
    AuthTokenPayload,
    LoginRequest,
    LogoutResponse,
    RegisterRequest,
)
from cybersafe.schemas.user_schemas import User
from cybersafe.schemas.progress_schemas import (
    ModuleProgressResponse,
    ProgressUpdateRequest,
    UserProgressResponse,
)
from cybersafe.schemas.module_schemas import (
    GameModuleDetailResponse,
    GameModuleResponse,
    PasswordAssessmentResponse,
    PasswordChallengeResponse,
    PasswordCheckRequest,
    PasswordRequirementsResponse,
    PasswordSubmitRequest,
    PasswordSubmitResponse,
    PhishingChallengeResponse,
    PhishingSubmitRequest,
    PhishingSubmitResponse,
)

__all__ = [
    # auth
    "AuthTokenPayload",
    "LoginRequest",
    "LogoutResponse",
    "RegisterRequest",
    # user
    "User",
    # progress
    "ModuleProgressResponse",
    "ProgressUpdateRequest",
    "UserProgressResponse",
    # modules
    "GameModuleDetailResponse",
    "GameModuleResponse",
    "PasswordAssessmentResponse",
    "PasswordChallengeResponse",
    "PasswordCheckRequest",
    "PasswordRequirementsResponse",
    "PasswordSubmitRequest",
    "PasswordSubmitResponse",
    "PhishingChallengeResponse",
    "PhishingSubmitRequest",
    "PhishingSubmitResponse",
]
