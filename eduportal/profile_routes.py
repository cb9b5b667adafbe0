"""Profile REST endpoints consumed by the portal client."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Response, status
from pydantic import BaseModel

from .achievements import AchievementStatus, RewardProgress, evaluate_achievements, reward_progress
from .dependencies import get_profile_service
from .user_profile import ProfileService, UserProfile

router = APIRouter(prefix="/api/user", tags=["user"])


class FetchOrCreateRequest(BaseModel):
    firebaseUid: Optional[str] = None
    email: Optional[str] = None


@router.post(
    "",
    response_model=UserProfile,
    status_code=status.HTTP_200_OK,
    responses={status.HTTP_201_CREATED: {"model": UserProfile}},
)
def fetch_or_create_profile(
    payload: FetchOrCreateRequest,
    response: Response,
    service: ProfileService = Depends(get_profile_service),
) -> UserProfile:
    profile, created = service.fetch_or_create(payload.firebaseUid, payload.email)
    if created:
        response.status_code = status.HTTP_201_CREATED
    return profile


@router.put("/{uid}", response_model=UserProfile, status_code=status.HTTP_200_OK)
def update_profile(
    uid: str,
    fields: Dict[str, Any] = Body(...),
    service: ProfileService = Depends(get_profile_service),
) -> UserProfile:
    return service.partial_update(uid, fields)


@router.get("/{uid}/achievements", response_model=List[AchievementStatus], status_code=status.HTTP_200_OK)
def get_achievements(uid: str, service: ProfileService = Depends(get_profile_service)) -> List[AchievementStatus]:
    return evaluate_achievements(service.get(uid))


@router.get("/{uid}/rewards", response_model=RewardProgress, status_code=status.HTTP_200_OK)
def get_reward_progress(uid: str, service: ProfileService = Depends(get_profile_service)) -> RewardProgress:
    return reward_progress(service.get(uid))
