"""
Module catalog and challenge submission endpoints.

Grading happens here on the server; submissions update progress through the aggregator so the
score for a challenge is awarded at most once even when two tabs submit at the same time.
"""

from fastapi import APIRouter, Depends, HTTPException

from cybersafe.models.models import User
from cybersafe.schemas.module_schemas import (
    GameModuleDetailResponse,
    GameModuleResponse,
    PasswordAssessmentResponse,
    PasswordCheckRequest,
    PasswordSubmitRequest,
    PasswordSubmitResponse,
    PhishingSubmitRequest,
    PhishingSubmitResponse,
)
from cybersafe.schemas.progress_schemas import ModuleProgressResponse
from cybersafe.services.module_catalog import (
    MODULES,
    POINTS_PER_CHALLENGE,
    get_challenge,
    get_module,
    grade_password_attempt,
    grade_phishing_answer,
)
from cybersafe.services.password_strength import check_password_strength
from cybersafe.services.progress_aggregator import ProgressAggregator, get_progress_aggregator
from cybersafe.services.progress_merge import ModuleProgressRecord, ProgressDelta, challenge_completion_delta
from cybersafe.utils.auth import get_current_user
from cybersafe.utils.logger import configure_logging

logger = configure_logging()

module_routes = APIRouter()


def _complete_challenge(aggregator: ProgressAggregator, user_id: int, module_id: str, challenge_id: int) -> ModuleProgressRecord:
    module = get_module(module_id)

    def build(current: ModuleProgressRecord | None) -> ProgressDelta:
        return challenge_completion_delta(
            current,
            challenge_id,
            points=POINTS_PER_CHALLENGE,
            total_challenges=module.total_challenges,
        )

    updated = aggregator.update_progress_with(user_id, module_id, build)
    return updated.module(module_id)


@module_routes.get("/modules", response_model=list[GameModuleResponse])
def list_modules(current_user: User = Depends(get_current_user)) -> list[GameModuleResponse]:
    return [GameModuleResponse.from_module(m) for m in MODULES]


@module_routes.get("/modules/{module_id}", response_model=GameModuleDetailResponse)
def get_module_detail(module_id: str, current_user: User = Depends(get_current_user)) -> GameModuleDetailResponse:
    module = get_module(module_id)
    if module is None:
        raise HTTPException(status_code=404, detail="Module not found")
    return GameModuleDetailResponse.from_module(module)


@module_routes.get("/modules/{module_id}/progress", response_model=ModuleProgressResponse)
def get_module_progress(
    module_id: str,
    current_user: User = Depends(get_current_user),
    aggregator: ProgressAggregator = Depends(get_progress_aggregator),
) -> ModuleProgressResponse:
    if get_module(module_id) is None:
        raise HTTPException(status_code=404, detail="Module not found")
    record = aggregator.get_progress(current_user.id).module(module_id) or ModuleProgressRecord()
    return ModuleProgressResponse.from_record(record)


@module_routes.post("/modules/password/check", response_model=PasswordAssessmentResponse)
def check_password(
    body: PasswordCheckRequest,
    current_user: User = Depends(get_current_user),
) -> PasswordAssessmentResponse:
    """Authoritative strength check, called on debounced keystrokes and before submission."""
    return PasswordAssessmentResponse.from_assessment(check_password_strength(body.password))


@module_routes.post("/modules/password/submit", response_model=PasswordSubmitResponse)
def submit_password(
    body: PasswordSubmitRequest,
    current_user: User = Depends(get_current_user),
    aggregator: ProgressAggregator = Depends(get_progress_aggregator),
) -> PasswordSubmitResponse:
    challenge = get_challenge("password", body.challenge_id)
    assessment = check_password_strength(body.password)
    success = grade_password_attempt(challenge, body.password, assessment)
    logger.info(
        "password challenge user_id=%s challenge=%s strength=%s success=%s",
        current_user.id, challenge.id, assessment.strength, success,
    )

    if success:
        record = _complete_challenge(aggregator, current_user.id, "password", challenge.id)
        message = "Excellent! Your password is very strong and follows best practices."
    else:
        record = aggregator.get_progress(current_user.id).module("password") or ModuleProgressRecord()
        message = f"Your password doesn't meet all the security requirements. {challenge.hint}".strip()

    return PasswordSubmitResponse(
        success=success,
        message=message,
        strength=assessment.strength,
        score=record.score,
        progress=record.progress,
    )


@module_routes.post("/modules/phishing/submit", response_model=PhishingSubmitResponse)
def submit_phishing(
    body: PhishingSubmitRequest,
    current_user: User = Depends(get_current_user),
    aggregator: ProgressAggregator = Depends(get_progress_aggregator),
) -> PhishingSubmitResponse:
    challenge = get_challenge("phishing", body.challenge_id)
    is_correct = grade_phishing_answer(challenge, body.answer)
    logger.info(
        "phishing challenge user_id=%s challenge=%s correct=%s",
        current_user.id, challenge.id, is_correct,
    )

    if is_correct:
        record = _complete_challenge(aggregator, current_user.id, "phishing", challenge.id)
    else:
        record = aggregator.get_progress(current_user.id).module("phishing") or ModuleProgressRecord()

    remaining = [c.id for c in get_module("phishing").challenges if c.id not in record.completed_challenges]
    return PhishingSubmitResponse(
        is_correct=is_correct,
        explanation=challenge.explanation,
        score=record.score,
        progress=record.progress,
        next_challenge_id=remaining[0] if remaining else None,
    )
