"""HTTP client for the portal API, mirroring what the single-page client does.

The client keeps the last profile it received, like the browser does, and
computes point accrual from that snapshot before sending a partial update.
Two clients holding the same snapshot therefore overwrite each other's
accruals; the API does not guard against it.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

import httpx

from .achievements import AchievementStatus, PointAward, RewardProgress
from .notes import Note
from .user_profile import ProfileField, UserProfile

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3001"


class PortalClientError(RuntimeError):
    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class PortalClient:
    def __init__(self, base_url: str = DEFAULT_BASE_URL, client: Optional[httpx.Client] = None) -> None:
        self._http = client or httpx.Client(base_url=base_url, timeout=30)
        self.profile: Optional[UserProfile] = None

    def _request(self, method: str, path: str, json: Any = None) -> Any:
        response = self._http.request(method, path, json=json)
        if response.is_error:
            try:
                message = response.json().get("message", response.text)
            except ValueError:
                message = response.text
            raise PortalClientError(response.status_code, message)
        return response.json()

    def _require_profile(self) -> UserProfile:
        if self.profile is None:
            raise RuntimeError("Sign in before calling profile operations.")
        return self.profile

    def sign_in(self, firebase_uid: str, email: str) -> UserProfile:
        data = self._request("POST", "/api/user", {"firebaseUid": firebase_uid, "email": email})
        self.profile = UserProfile.model_validate(data)
        return self.profile

    def update_profile(self, fields: Mapping[str, Any]) -> UserProfile:
        profile = self._require_profile()
        payload: Dict[str, Any] = {
            (key.value if isinstance(key, ProfileField) else key): value for key, value in fields.items()
        }
        data = self._request("PUT", f"/api/user/{profile.firebase_uid}", payload)
        self.profile = UserProfile.model_validate(data)
        return self.profile

    def accrue_points(self, amount: int, reason: str) -> UserProfile:
        profile = self._require_profile()
        updated = self.update_profile({ProfileField.POINTS: profile.points + amount})
        logger.info("%+d points for: %s", amount, reason)
        return updated

    def award(self, award: PointAward) -> UserProfile:
        return self.accrue_points(award.amount, award.reason)

    def save_note(self, subject: str, chapter: str, content: str) -> Note:
        profile = self._require_profile()
        data = self._request(
            "POST",
            "/api/notes",
            {"subject": subject, "chapter": chapter, "content": content, "firebaseUid": profile.firebase_uid},
        )
        return Note.model_validate(data)

    def list_notes(self) -> List[Note]:
        profile = self._require_profile()
        return [Note.model_validate(item) for item in self._request("GET", f"/api/notes/{profile.firebase_uid}")]

    def achievements(self) -> List[AchievementStatus]:
        profile = self._require_profile()
        data = self._request("GET", f"/api/user/{profile.firebase_uid}/achievements")
        return [AchievementStatus.model_validate(item) for item in data]

    def rewards(self) -> RewardProgress:
        profile = self._require_profile()
        return RewardProgress.model_validate(self._request("GET", f"/api/user/{profile.firebase_uid}/rewards"))

    def send_verification_email(self, recipient_email: str) -> str:
        data = self._request("POST", "/api/send-verification-email", {"recipientEmail": recipient_email})
        return str(data.get("message", ""))

    def close(self) -> None:
        self._http.close()


__all__ = ["DEFAULT_BASE_URL", "PortalClient", "PortalClientError"]
