"""
Club Management Router

- 클럽 생성/조회/수정/승인
- 클럽 페이지, 클럽 통계
- 회원(멤버십) 관리
"""
from collections import Counter
from typing import Optional

from fastapi import APIRouter, Depends, Query
from loguru import logger

from app.auth.dependencies import (
    get_principal,
    get_role_store,
    require_admin,
    require_club_manager,
    require_manager_or_admin,
)
from app.auth.models import Principal, Role
from app.auth.roles import RoleStore
from app.dependencies import get_repositories
from app.errors import Forbidden, NotFound
from database.repository import Repositories, utc_now_iso
from .models import (
    ClubCreate,
    ClubStatus,
    ClubStatusUpdate,
    ClubUpdate,
    MembershipExpire,
    MembershipStatus,
)

router = APIRouter(tags=["Club Management"])


async def get_club_or_404(repos: Repositories, club_id: str) -> dict:
    club = await repos.clubs.get(club_id)
    if not club:
        raise NotFound("Club not found")
    return club


def require_club_owner(club: dict, principal: Principal) -> None:
    """클럽 매니저 본인 확인 (다른 클럽의 리소스 변경 불가)"""
    if club.get("managerEmail") != principal.email:
        raise Forbidden("Only the club's manager can manage this club")


async def get_owned_club(repos: Repositories, club_id: str, principal: Principal) -> dict:
    club = await get_club_or_404(repos, club_id)
    require_club_owner(club, principal)
    return club


# =============================================
# 클럽
# =============================================

@router.post("/clubs")
async def create_club(
    club_data: ClubCreate,
    principal: Principal = Depends(require_club_manager),
    repos: Repositories = Depends(get_repositories),
):
    """
    클럽 생성

    승인 대기(pending) 상태로 생성되며, 생성한 매니저가 managerEmail 이 됩니다.
    """
    now = utc_now_iso()
    document = club_data.to_document()
    document.update({
        "managerEmail": principal.email,
        "status": ClubStatus.pending.value,
        "createdAt": now,
        "updateAt": now,
    })
    club = await repos.clubs.insert(document)
    logger.info(f"클럽 생성: {club['id']} ({principal.email})")
    return club


@router.get("/clubs")
async def list_clubs(
    principal: Principal = Depends(get_principal),
    repos: Repositories = Depends(get_repositories),
):
    """전체 클럽 목록"""
    return await repos.clubs.list(sort="createdAt", descending=True)


@router.get("/clubs/approved")
async def list_approved_clubs(repos: Repositories = Depends(get_repositories)):
    """승인된 클럽 목록 (활성 회원 수 포함)"""
    clubs = await repos.clubs.list({"status": ClubStatus.approved.value}, sort="createdAt")
    club_ids = [club["id"] for club in clubs]

    memberships = await repos.memberships.list(
        {"clubId": {"in": club_ids}, "status": MembershipStatus.active.value},
        fields=["clubId"],
    )
    counts = Counter(m["clubId"] for m in memberships)

    return [{**club, "membersCount": counts.get(club["id"], 0)} for club in clubs]


@router.get("/clubs/{club_id}")
async def get_club(club_id: str, repos: Repositories = Depends(get_repositories)):
    return await get_club_or_404(repos, club_id)


@router.get("/clubs/{club_id}/stats")
async def get_club_stats(club_id: str, repos: Repositories = Depends(get_repositories)):
    """클럽 활성 회원 수 / 이벤트 수"""
    members_count = await repos.memberships.count(
        {"clubId": club_id, "status": MembershipStatus.active.value}
    )
    events_count = await repos.events.count({"clubId": club_id})
    return {"membersCount": members_count, "eventsCount": events_count}


@router.patch("/clubs/{club_id}")
async def update_club(
    club_id: str,
    update: ClubUpdate,
    principal: Principal = Depends(require_manager_or_admin),
    repos: Repositories = Depends(get_repositories),
    roles: RoleStore = Depends(get_role_store),
):
    """
    클럽 수정 (머지패치)

    요청에 포함된 필드만 변경합니다. id 는 전달되더라도 무시됩니다.
    매니저는 자신이 관리하는 클럽만, 관리자는 모든 클럽을 수정할 수 있습니다.
    """
    club = await get_club_or_404(repos, club_id)
    if await roles.get_role(principal.email) != Role.ADMIN:
        require_club_owner(club, principal)
    modified = await repos.clubs.patch(club_id, update.to_document(partial=True), stamp_field="updateAt")
    return {"matchedCount": 1, "modifiedCount": modified}


@router.patch("/clubs/{club_id}/status")
async def update_club_status(
    club_id: str,
    update: ClubStatusUpdate,
    principal: Principal = Depends(require_admin),
    repos: Repositories = Depends(get_repositories),
):
    """클럽 승인/거절 (관리자)"""
    await get_club_or_404(repos, club_id)
    await repos.clubs.patch(club_id, {"status": update.status.value}, stamp_field="updateAt")
    logger.info(f"클럽 상태 변경: {club_id} -> {update.status.value} ({principal.email})")
    return {"id": club_id, "status": update.status.value}


@router.get("/club-page/{club_id}")
async def get_club_page(
    club_id: str,
    email: Optional[str] = Query(None, description="회원 여부 확인용 이메일"),
    repos: Repositories = Depends(get_repositories),
):
    """
    클럽 페이지

    클럽 정보, 회원 수, 요청자의 회원 상태를 반환합니다.
    이벤트 목록은 활성 회원에게만 포함됩니다.
    """
    club = await get_club_or_404(repos, club_id)
    member_count = await repos.memberships.count({"clubId": club_id})

    membership = None
    if email:
        membership = await repos.memberships.find_one(clubId=club_id, memberEmail=email)
    is_member = membership.get("status", "none") if membership else "none"

    events = []
    if is_member == MembershipStatus.active.value:
        events = await repos.events.list({"clubId": club_id}, sort="date")

    return {
        "club": club,
        "memberCount": member_count,
        "isMember": is_member,
        "events": events,
    }


# =============================================
# 멤버십
# =============================================

@router.get("/memberships/count/{club_id}")
async def count_memberships(club_id: str, repos: Repositories = Depends(get_repositories)):
    return {"count": await repos.memberships.count({"clubId": club_id})}


@router.get("/memberships/{club_id}")
async def list_memberships(
    club_id: str,
    principal: Principal = Depends(require_club_manager),
    repos: Repositories = Depends(get_repositories),
):
    """클럽 회원 목록"""
    await get_owned_club(repos, club_id, principal)
    return await repos.memberships.list({"clubId": club_id}, sort="joinedAt", descending=True)


@router.patch("/memberships/{membership_id}/expire")
async def expire_membership(
    membership_id: str,
    body: Optional[MembershipExpire] = None,
    principal: Principal = Depends(require_club_manager),
    repos: Repositories = Depends(get_repositories),
):
    """
    회원 만료

    요청의 status 값과 관계없이 멤버십은 삭제됩니다.
    """
    status = body.status if body else MembershipStatus.expired.value
    membership = await repos.memberships.get(membership_id)
    if not membership:
        raise NotFound("Membership not found")
    await get_owned_club(repos, membership.get("clubId"), principal)

    deleted = await repos.memberships.delete(membership_id)
    logger.info(
        f"멤버십 만료(삭제): {membership_id} club={membership.get('clubId')} "
        f"status={status} by {principal.email}"
    )
    return {"id": membership_id, "status": status, "deleted": deleted > 0}


@router.get("/is-member")
async def is_member(
    club_id: str = Query(..., alias="clubId"),
    member_email: str = Query(..., alias="memberEmail"),
    principal: Principal = Depends(get_principal),
    repos: Repositories = Depends(get_repositories),
):
    """회원 상태 (없으면 "none")"""
    membership = await repos.memberships.find_one(clubId=club_id, memberEmail=member_email)
    if not membership:
        return "none"
    return membership.get("status", "none")
