"""
User progress endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException

from cybersafe.models.models import User
from cybersafe.schemas.progress_schemas import ModuleProgressResponse, ProgressUpdateRequest, UserProgressResponse
from cybersafe.services.progress_aggregator import ProgressAggregator, get_progress_aggregator
from cybersafe.utils.auth import get_current_user

progress_routes = APIRouter()


@progress_routes.get("/progress", response_model=UserProgressResponse)
def get_progress(
    current_user: User = Depends(get_current_user),
    aggregator: ProgressAggregator = Depends(get_progress_aggregator),
) -> UserProgressResponse:
    """Per-module progress plus the overall mean."""
    return UserProgressResponse.from_record(aggregator.get_progress(current_user.id))


@progress_routes.get("/progress/{module_id}", response_model=ModuleProgressResponse)
def get_progress_by_module(
    module_id: str,
    current_user: User = Depends(get_current_user),
    aggregator: ProgressAggregator = Depends(get_progress_aggregator),
) -> ModuleProgressResponse:
    record = aggregator.get_progress(current_user.id).module(module_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Progress not found")
    return ModuleProgressResponse.from_record(record)


@progress_routes.put("/progress/{module_id}", response_model=UserProgressResponse)
def submit_module_progress(
    module_id: str,
    body: ProgressUpdateRequest,
    current_user: User = Depends(get_current_user),
    aggregator: ProgressAggregator = Depends(get_progress_aggregator),
) -> UserProgressResponse:
    """
    Apply a partial update to one module. Values are absolute: send the new score total,
    not the points just earned, and the full completed-challenge list.
    """
    updated = aggregator.update_progress(current_user.id, module_id, body.to_delta())
    return UserProgressResponse.from_record(updated)
