"""User profile models and the profile service."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    ValidationError as PydanticValidationError,
    model_validator,
)

from .document_store import DocumentStore
from .errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"
DEFAULT_BIO = "Eager to learn and conquer new challenges!"


class UpcomingClass(BaseModel):
    id: Union[int, str]
    title: str
    time: str


class HomeworkItem(BaseModel):
    id: Union[int, str]
    title: str
    due: str


class SubjectScore(BaseModel):
    subject: str
    score: Union[int, float]


class UserProfile(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    firebase_uid: str = Field(..., alias="firebaseUid", min_length=1)
    email: str
    name: str = ""
    points: int = Field(default=0, ge=0)
    streak: int = Field(default=0, ge=0)
    bio: str = ""
    upcoming_classes: List[UpcomingClass] = Field(default_factory=list, alias="upcomingClasses")
    homework: List[HomeworkItem] = Field(default_factory=list)
    test_scores: List[SubjectScore] = Field(default_factory=list, alias="testScores")

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class ProfileField(str, Enum):
    """Attributes a partial update may overwrite; the identity is not among them."""

    EMAIL = "email"
    NAME = "name"
    POINTS = "points"
    STREAK = "streak"
    BIO = "bio"
    UPCOMING_CLASSES = "upcomingClasses"
    HOMEWORK = "homework"
    TEST_SCORES = "testScores"


class ProfileUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    email: Optional[str] = None
    name: Optional[str] = None
    points: Optional[StrictInt] = Field(default=None, ge=0)
    streak: Optional[StrictInt] = Field(default=None, ge=0)
    bio: Optional[str] = None
    upcoming_classes: Optional[List[UpcomingClass]] = Field(default=None, alias="upcomingClasses")
    homework: Optional[List[HomeworkItem]] = None
    test_scores: Optional[List[SubjectScore]] = Field(default=None, alias="testScores")

    @model_validator(mode="before")
    @classmethod
    def _reject_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            nulls = sorted(str(key) for key, value in data.items() if value is None)
            if nulls:
                raise ValueError(f"Fields cannot be null: {', '.join(nulls)}")
        return data

    def changed_fields(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


def _require(value: Optional[str], label: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{label} is required.")
    return value


def default_profile(firebase_uid: str, email: str) -> UserProfile:
    return UserProfile(
        firebase_uid=firebase_uid,
        email=email,
        name=email.split("@")[0],
        points=0,
        streak=0,
        bio=DEFAULT_BIO,
        upcoming_classes=[UpcomingClass(id=1, title="Welcome Class!", time="Now")],
        homework=[],
        test_scores=[],
    )


def validate_update(fields: Mapping[Union[str, ProfileField], Any]) -> Dict[str, Any]:
    """Check keys against :class:`ProfileField` and values against the schema."""
    allowed = {member.value for member in ProfileField}
    normalized: Dict[str, Any] = {}
    for key, value in fields.items():
        name = key.value if isinstance(key, ProfileField) else str(key)
        if name not in allowed:
            raise ValidationError(f"Unknown profile field: {name}")
        normalized[name] = value
    if not normalized:
        raise ValidationError("No profile fields to update.")
    try:
        update = ProfileUpdate.model_validate(normalized)
    except PydanticValidationError as exc:
        raise ValidationError(_summarize(exc)) from exc
    return update.changed_fields()


def _summarize(exc: PydanticValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts) or "Invalid profile update."


class ProfileService:
    """Owns the ``users`` collection: fetch-or-create, partial update, point accrual."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    def fetch_or_create(self, firebase_uid: Optional[str], email: Optional[str]) -> Tuple[UserProfile, bool]:
        uid = _require(firebase_uid, "Firebase UID")
        address = _require(email, "Email")
        existing = self._store.get(USERS_COLLECTION, uid)
        if existing is not None:
            return UserProfile.model_validate(existing), False
        profile = default_profile(uid, address)
        stored = self._store.set(USERS_COLLECTION, uid, profile.to_document())
        logger.info("Created profile for %s (%s)", uid, profile.name)
        return UserProfile.model_validate(stored), True

    def get(self, firebase_uid: str) -> UserProfile:
        uid = _require(firebase_uid, "Firebase UID")
        stored = self._store.get(USERS_COLLECTION, uid)
        if stored is None:
            raise NotFoundError(f"Profile for '{uid}' was not found.")
        return UserProfile.model_validate(stored)

    def partial_update(
        self, firebase_uid: str, fields: Mapping[Union[str, ProfileField], Any]
    ) -> UserProfile:
        uid = _require(firebase_uid, "Firebase UID")
        changes = validate_update(fields)
        try:
            stored = self._store.update(USERS_COLLECTION, uid, changes)
        except NotFoundError as exc:
            raise NotFoundError(f"Profile for '{uid}' was not found.") from exc
        logger.debug("Updated profile %s fields=%s", uid, sorted(changes))
        return UserProfile.model_validate(stored)

    def accrue_points(self, firebase_uid: str, amount: int, reason: str = "") -> UserProfile:
        """Read-then-write accrual; concurrent callers race under last-write-wins."""
        current = self.get(firebase_uid)
        updated = self.partial_update(firebase_uid, {ProfileField.POINTS: current.points + amount})
        logger.info("%+d points for %s: %s", amount, current.firebase_uid, reason or "unspecified")
        return updated


__all__ = [
    "DEFAULT_BIO",
    "HomeworkItem",
    "ProfileField",
    "ProfileService",
    "ProfileUpdate",
    "SubjectScore",
    "UpcomingClass",
    "USERS_COLLECTION",
    "UserProfile",
    "default_profile",
    "validate_update",
]
