"""
Club Management Module

클럽 생성/승인, 클럽 페이지, 멤버십 관리
"""

from .router import router as club_router
from .models import (
    ClubStatus,
    MembershipStatus,
    ClubCreate,
    ClubUpdate,
    ClubStatusUpdate,
    MembershipExpire,
)

__all__ = [
    "club_router",
    "ClubStatus",
    "MembershipStatus",
    "ClubCreate",
    "ClubUpdate",
    "ClubStatusUpdate",
    "MembershipExpire",
]
