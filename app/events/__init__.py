"""
Event Module - 클럽 이벤트 및 참가 신청
"""
from .router import router as events_router
from .models import RegistrationStatus, EventCreate, EventUpdate, EventJoin

__all__ = [
    "events_router",
    "RegistrationStatus",
    "EventCreate",
    "EventUpdate",
    "EventJoin",
]
