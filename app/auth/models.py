"""
Auth Models - Pydantic 모델 정의
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class Role(str, Enum):
    """사용자 역할"""
    MEMBER = "member"               # 일반 회원
    CLUB_MANAGER = "clubManager"    # 클럽 매니저
    ADMIN = "admin"                 # 관리자


@dataclass(frozen=True)
class Principal:
    """검증된 요청 주체"""
    email: str
    uid: Optional[str] = None


# =============================================
# Request Models
# =============================================

class UserLogin(BaseModel):
    """로그인 시 사용자 저장 요청 (POST /user)"""
    model_config = ConfigDict(extra="ignore")

    email: EmailStr
    name: Optional[str] = Field(None, max_length=100)
    image: Optional[str] = None


class RoleUpdate(BaseModel):
    """역할 변경 요청"""
    email: EmailStr
    role: Role
