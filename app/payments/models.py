"""
Payment Models
"""
from typing import Optional

from pydantic import Field

from app.club.models import DocumentModel


class CheckoutRequest(DocumentModel):
    """회비 결제 세션 생성 요청"""
    club_id: str = Field(..., alias="clubId")
    name: Optional[str] = None
    description: Optional[str] = None
    banner_image: Optional[str] = Field(None, alias="bannerImage")
    membership_fee: Optional[float] = Field(None, ge=0, alias="membershipFee")
    quantity: int = Field(1, ge=1)


class PaymentSuccess(DocumentModel):
    """결제 완료 확인 요청"""
    session_id: str = Field(..., min_length=1, alias="sessionId")
