"""
Club Management Models

Pydantic 모델 정의 (저장 문서의 필드명은 camelCase alias 로 유지)
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================
# Enums
# =============================================

class ClubStatus(str, Enum):
    """클럽 승인 상태"""
    pending = "pending"       # 승인 대기
    approved = "approved"     # 승인
    rejected = "rejected"     # 거절


class MembershipStatus(str, Enum):
    """회원 상태"""
    active = "active"         # 활성
    pending = "pending"       # 대기
    expired = "expired"       # 만료


class DocumentModel(BaseModel):
    """저장 문서 공통 설정 (snake_case 필드 <-> camelCase 문서 키)"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_document(self, partial: bool = False) -> dict:
        """저장용 dict. partial=True 면 요청에 포함된 필드만 (머지패치)"""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=partial)


# =============================================
# Club
# =============================================

class ClubCreate(DocumentModel):
    """클럽 생성 요청"""
    name: str = Field(..., min_length=1, max_length=120)
    description: Optional[str] = None
    category: Optional[str] = None
    location: Optional[str] = None
    banner_image: Optional[str] = Field(None, alias="bannerImage")
    membership_fee: float = Field(0, ge=0, alias="membershipFee")


class ClubUpdate(DocumentModel):
    """클럽 수정 요청 (머지패치, status/managerEmail 은 수정 불가)"""
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    description: Optional[str] = None
    category: Optional[str] = None
    location: Optional[str] = None
    banner_image: Optional[str] = Field(None, alias="bannerImage")
    membership_fee: Optional[float] = Field(None, ge=0, alias="membershipFee")

    @field_validator("name", "membership_fee")
    @classmethod
    def reject_null(cls, v):
        # 생략은 허용, 명시적 null 은 not null 컬럼을 비우므로 거부
        if v is None:
            raise ValueError("must not be null")
        return v


class ClubStatusUpdate(BaseModel):
    """클럽 승인/거절 (관리자)"""
    status: ClubStatus

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        if v == ClubStatus.pending:
            raise ValueError("status must be approved or rejected")
        return v


# =============================================
# Membership
# =============================================

class MembershipExpire(BaseModel):
    """회원 만료 요청 (결과는 항상 삭제)"""
    status: Optional[str] = MembershipStatus.expired.value
