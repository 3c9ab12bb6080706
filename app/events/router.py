"""
Event Router

- 이벤트 생성/조회/수정/삭제 (클럽 매니저)
- 다가오는 이벤트
- 이벤트 참가 신청/참가 여부
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from loguru import logger

from app.auth.dependencies import get_principal, require_club_manager
from app.auth.models import Principal
from app.club.router import get_club_or_404, get_owned_club, require_club_owner
from app.dependencies import get_repositories
from app.errors import NotFound
from database.repository import Repositories, utc_now_iso, utc_today
from database.store import DuplicateKeyError
from .models import EventCreate, EventJoin, EventUpdate, RegistrationStatus

router = APIRouter(tags=["Events"])


async def get_event_or_404(repos: Repositories, event_id: str) -> dict:
    event = await repos.events.get(event_id)
    if not event:
        raise NotFound("Event not found")
    return event


# =============================================
# 조회
# =============================================

@router.get("/events")
async def list_events(repos: Repositories = Depends(get_repositories)):
    """전체 이벤트"""
    return await repos.events.list(sort="date")


@router.get("/events/upcoming")
async def list_upcoming_events(repos: Repositories = Depends(get_repositories)):
    """오늘 이후 이벤트 (가까운 날짜 순)"""
    today = utc_today().isoformat()
    return await repos.events.list({"date": {"gte": today}}, sort="date")


@router.get("/events/isJoined")
async def is_joined(
    event_id: str = Query(..., alias="eventId"),
    user_email: Optional[str] = Query(None, alias="userEmail"),
    principal: Principal = Depends(get_principal),
    repos: Repositories = Depends(get_repositories),
):
    """이벤트 참가 상태 (없으면 "none")"""
    registration = await repos.registrations.find_one(
        eventId=event_id, userEmail=user_email or principal.email
    )
    if not registration:
        return "none"
    return registration.get("status", "none")


@router.get("/eventDetails/{event_id}")
async def get_event_details(event_id: str, repos: Repositories = Depends(get_repositories)):
    return await get_event_or_404(repos, event_id)


@router.get("/eventRegister/{event_id}")
async def list_event_registrations(
    event_id: str,
    principal: Principal = Depends(require_club_manager),
    repos: Repositories = Depends(get_repositories),
):
    """이벤트 참가자 목록"""
    event = await get_event_or_404(repos, event_id)
    await get_owned_club(repos, event.get("clubId"), principal)
    return await repos.registrations.list({"eventId": event_id}, sort="registerAt")


# =============================================
# 참가 신청
# =============================================

@router.post("/events/join")
async def join_event(
    join: EventJoin,
    principal: Principal = Depends(get_principal),
    repos: Repositories = Depends(get_repositories),
):
    """
    이벤트 참가 신청

    같은 이벤트에 다시 신청하면 기존 참가 기록을 그대로 반환합니다.
    """
    await get_event_or_404(repos, join.event_id)

    document = {
        "eventId": join.event_id,
        "userEmail": principal.email,
        "status": RegistrationStatus.registered.value,
        "registerAt": utc_now_iso(),
    }
    try:
        return await repos.registrations.insert(document)
    except DuplicateKeyError:
        logger.info(f"중복 참가 신청: event={join.event_id} user={principal.email}")
        return await repos.registrations.find_one(
            eventId=join.event_id, userEmail=principal.email
        )


# =============================================
# 클럽 이벤트 관리
# =============================================

@router.post("/events/{club_id}")
async def create_event(
    club_id: str,
    event_data: EventCreate,
    principal: Principal = Depends(require_club_manager),
    repos: Repositories = Depends(get_repositories),
):
    """
    이벤트 생성

    클럽을 관리하는 매니저만 생성할 수 있습니다.
    clubName 은 생성 시점의 클럽 이름으로 저장되며 이후 클럽 이름 변경과 동기화되지 않습니다.
    """
    club = await get_club_or_404(repos, club_id)
    require_club_owner(club, principal)

    now = utc_now_iso()
    document = event_data.to_document()
    document.update({
        "clubId": club_id,
        "clubName": club.get("name"),
        "createdAt": now,
        "updateAt": now,
    })
    event = await repos.events.insert(document)
    logger.info(f"이벤트 생성: {event['id']} club={club_id}")
    return event


@router.get("/events/{club_id}")
async def list_club_events(club_id: str, repos: Repositories = Depends(get_repositories)):
    """클럽 이벤트 목록"""
    return await repos.events.list({"clubId": club_id}, sort="date")


@router.patch("/events/{event_id}")
async def update_event(
    event_id: str,
    update: EventUpdate,
    principal: Principal = Depends(require_club_manager),
    repos: Repositories = Depends(get_repositories),
):
    """이벤트 수정 (머지패치, id 변경 불가)"""
    event = await get_event_or_404(repos, event_id)
    await get_owned_club(repos, event.get("clubId"), principal)
    modified = await repos.events.patch(event_id, update.to_document(partial=True), stamp_field="updateAt")
    return {"matchedCount": 1, "modifiedCount": modified}


@router.delete("/events/{event_id}")
async def delete_event(
    event_id: str,
    principal: Principal = Depends(require_club_manager),
    repos: Repositories = Depends(get_repositories),
):
    event = await get_event_or_404(repos, event_id)
    await get_owned_club(repos, event.get("clubId"), principal)
    deleted = await repos.events.delete(event_id)
    logger.info(f"이벤트 삭제: {event_id} by {principal.email}")
    return {"deletedCount": deleted}
