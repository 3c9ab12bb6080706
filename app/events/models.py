"""
Event Models
"""
import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from app.club.models import DocumentModel


class RegistrationStatus(str, Enum):
    """이벤트 참가 상태"""
    registered = "registered"


class EventCreate(DocumentModel):
    """이벤트 생성 요청"""
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    location: Optional[str] = None
    date: dt.date
    event_fee: float = Field(0, ge=0, alias="eventFee")
    max_attendees: Optional[int] = Field(None, ge=1, alias="maxAttendees")


class EventUpdate(DocumentModel):
    """이벤트 수정 요청 (머지패치, clubId/clubName 은 수정 불가)"""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    location: Optional[str] = None
    date: Optional[dt.date] = None
    event_fee: Optional[float] = Field(None, ge=0, alias="eventFee")
    max_attendees: Optional[int] = Field(None, ge=1, alias="maxAttendees")

    @field_validator("title", "date", "event_fee")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("must not be null")
        return v


class EventJoin(DocumentModel):
    """이벤트 참가 요청"""
    event_id: str = Field(..., alias="eventId")
