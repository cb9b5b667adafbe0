"""Points-based achievements, reward progress and award amounts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .user_profile import UserProfile

REWARD_TARGET_POINTS = 10_000


@dataclass(frozen=True)
class Achievement:
    title: str
    description: str
    points_required: int
    icon: str


ACHIEVEMENTS: Tuple[Achievement, ...] = (
    Achievement("First Steps", "Log in for the first time.", 0, "🚶"),
    Achievement("Note Taker", "Create 5 notes.", 5, "📝"),
    Achievement("Chatterbox", "Ask the AI tutor 10 questions.", 0, "💬"),
    Achievement("Community Helper", "Answer 5 community questions.", 150, "🤝"),
    Achievement("Perfect Week", "Maintain a 7-day study streak.", 100, "🗓️"),
    Achievement("The Expert", "Earn 1000 points.", 1000, "🧠"),
)


@dataclass(frozen=True)
class PointAward:
    reason: str
    amount: int


ATTEND_CLASS = PointAward("Attending Class", 20)
SOLVE_DOUBT = PointAward("Solving a doubt", 30)
VIDEO_STUDY_HOUR = PointAward("Studying in video conference", 30)
TUTOR_QUESTION = PointAward("Asking a question to the tutor", 1)


class AchievementStatus(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    description: str
    points_required: int = Field(..., alias="pointsRequired")
    icon: str
    unlocked: bool


class RewardProgress(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    points: int
    target: int
    progress_percent: float = Field(..., alias="progressPercent")
    redeemable: bool


def evaluate_achievements(profile: UserProfile) -> List[AchievementStatus]:
    return [
        AchievementStatus(
            title=entry.title,
            description=entry.description,
            points_required=entry.points_required,
            icon=entry.icon,
            unlocked=profile.points >= entry.points_required,
        )
        for entry in ACHIEVEMENTS
    ]


def reward_progress(profile: UserProfile, target: int = REWARD_TARGET_POINTS) -> RewardProgress:
    percent = min(100.0, profile.points / target * 100)
    return RewardProgress(
        points=profile.points,
        target=target,
        progress_percent=round(percent, 2),
        redeemable=profile.points >= target,
    )


__all__ = [
    "ACHIEVEMENTS",
    "ATTEND_CLASS",
    "Achievement",
    "AchievementStatus",
    "PointAward",
    "REWARD_TARGET_POINTS",
    "RewardProgress",
    "SOLVE_DOUBT",
    "TUTOR_QUESTION",
    "VIDEO_STUDY_HOUR",
    "evaluate_achievements",
    "reward_progress",
]
