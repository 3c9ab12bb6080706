"""
Dashboard Router

관리자 / 클럽 매니저 / 회원 대시보드 API
회원 API 는 요청 파라미터가 아닌 검증된 이메일 기준으로 조회한다.
"""
from typing import List

from fastapi import APIRouter, Depends

from app.auth.dependencies import get_principal, require_admin, require_club_manager
from app.auth.models import Principal
from app.club.models import MembershipStatus
from app.config import Settings
from app.dependencies import get_app_settings, get_repositories
from database.repository import Repositories, utc_today
from . import analytics

router = APIRouter(tags=["Dashboard"])


def get_analytics_months(settings: Settings = Depends(get_app_settings)) -> List[str]:
    return analytics.trailing_months(settings.ANALYTICS_MONTHS)


# =============================================
# 관리자
# =============================================

@router.get("/admin/stats")
async def get_admin_stats(
    principal: Principal = Depends(require_admin),
    repos: Repositories = Depends(get_repositories),
):
    return await analytics.admin_stats(repos, principal.email)


@router.get("/admin/analytics")
async def get_admin_analytics(
    principal: Principal = Depends(require_admin),
    repos: Repositories = Depends(get_repositories),
    months: List[str] = Depends(get_analytics_months),
):
    """월별 가입자 / 결제 그래프 데이터"""
    return await analytics.admin_analytics(repos, principal.email, months)


# =============================================
# 클럽 매니저
# =============================================

@router.get("/manager/overview")
async def get_manager_overview(
    principal: Principal = Depends(require_club_manager),
    repos: Repositories = Depends(get_repositories),
    months: List[str] = Depends(get_analytics_months),
):
    return await analytics.manager_overview(repos, principal.email, months)


@router.get("/manager/analytics")
async def get_manager_analytics(
    principal: Principal = Depends(require_club_manager),
    repos: Repositories = Depends(get_repositories),
    months: List[str] = Depends(get_analytics_months),
):
    return await analytics.manager_analytics(repos, principal.email, months)


# =============================================
# 회원
# =============================================

@router.get("/member/stats")
async def get_member_stats(
    principal: Principal = Depends(get_principal),
    repos: Repositories = Depends(get_repositories),
):
    return await analytics.member_stats(repos, principal.email)


@router.get("/member/analytics")
async def get_member_analytics(
    principal: Principal = Depends(get_principal),
    repos: Repositories = Depends(get_repositories),
    months: List[str] = Depends(get_analytics_months),
):
    return await analytics.member_analytics(repos, principal.email, months)


@router.get("/member/my-clubs")
async def get_my_clubs(
    principal: Principal = Depends(get_principal),
    repos: Repositories = Depends(get_repositories),
):
    """가입한(활성) 클럽 목록"""
    memberships = await repos.memberships.list(
        {"memberEmail": principal.email, "status": MembershipStatus.active.value},
        sort="joinedAt",
    )
    club_ids = [m["clubId"] for m in memberships]
    clubs = await repos.clubs.list({"id": {"in": club_ids}}, fields=["id", "name", "location"])
    clubs_by_id = {club["id"]: club for club in clubs}

    result = []
    for membership in memberships:
        club = clubs_by_id.get(membership["clubId"], {})
        result.append({
            "clubId": membership["clubId"],
            "clubName": club.get("name"),
            "location": club.get("location"),
            "status": membership.get("status"),
            "expiryDate": membership.get("expiryDate"),
        })
    return result


@router.get("/member/my-events")
async def get_my_events(
    principal: Principal = Depends(get_principal),
    repos: Repositories = Depends(get_repositories),
):
    """참가 신청한 이벤트 목록"""
    registrations = await repos.registrations.list(
        {"userEmail": principal.email}, sort="registerAt", descending=True
    )
    event_ids = [r["eventId"] for r in registrations]
    events = await repos.events.list(
        {"id": {"in": event_ids}}, fields=["id", "title", "clubName", "date"]
    )
    events_by_id = {event["id"]: event for event in events}

    result = []
    for registration in registrations:
        event = events_by_id.get(registration["eventId"], {})
        result.append({
            "id": registration["id"],
            "eventId": registration["eventId"],
            "title": event.get("title"),
            "clubName": event.get("clubName"),
            "date": event.get("date"),
            "status": registration.get("status"),
        })
    return result


@router.get("/member/upcoming-events")
async def get_my_upcoming_events(
    principal: Principal = Depends(get_principal),
    repos: Repositories = Depends(get_repositories),
):
    """가입한 클럽의 다가오는 이벤트 (가까운 날짜 순)"""
    memberships = await repos.memberships.list(
        {"memberEmail": principal.email, "status": MembershipStatus.active.value},
        fields=["clubId"],
    )
    club_ids = sorted({m["clubId"] for m in memberships})
    if not club_ids:
        return []

    return await repos.events.list(
        {"clubId": {"in": club_ids}, "date": {"gte": utc_today().isoformat()}},
        sort="date",
    )
