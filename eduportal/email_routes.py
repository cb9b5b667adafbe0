"""Transactional email endpoint."""

from __future__ import annotations

from typing import Dict, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from .dependencies import get_welcome_mailer
from .mailer import WelcomeMailer

router = APIRouter(prefix="/api", tags=["email"])


class VerificationEmailRequest(BaseModel):
    recipientEmail: Optional[str] = None


@router.post("/send-verification-email", status_code=status.HTTP_200_OK)
def send_verification_email(
    payload: VerificationEmailRequest,
    mailer: WelcomeMailer = Depends(get_welcome_mailer),
) -> Dict[str, str]:
    mailer.send_welcome(payload.recipientEmail)
    return {"message": "Email sent successfully!"}
