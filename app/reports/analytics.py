"""
대시보드 통계/분석

관리자, 클럽 매니저, 회원 범위별 집계.
월별 시계열은 레코드 생성 시각 문자열의 앞 7자리(YYYY-MM)로 버킷팅하며,
기록이 없는 달도 0으로 채워 최근 N개월을 오래된 순으로 반환한다.
"""
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Union

from app.club.models import ClubStatus, MembershipStatus
from app.events.models import RegistrationStatus
from database.repository import Repositories, Repository, utc_today

Number = Union[int, float]


# =============================================
# 월별 버킷팅
# =============================================

def trailing_months(count: int, today: Optional[date] = None) -> List[str]:
    """
    최근 count 개월의 YYYY-MM 키 (오래된 순, 이번 달 포함, 기본 기준일은 UTC 오늘)

    >>> trailing_months(3, date(2025, 2, 10))
    ['2024-12', '2025-01', '2025-02']
    """
    today = today or utc_today()
    months = []
    year, month = today.year, today.month
    for _ in range(count):
        months.append(f"{year:04d}-{month:02d}")
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(months))


def month_start(month_key: str) -> str:
    """'2025-02' -> '2025-02-01'"""
    return f"{month_key}-01"


def _round(value: Number) -> Number:
    return round(value, 2) if isinstance(value, float) else value


def bucket_by_month(
    documents: Iterable[Dict[str, Any]],
    date_field: str,
    months: List[str],
    value_field: Optional[str] = None,
) -> List[Number]:
    """
    문서를 월별로 집계 (value_field 가 있으면 합계, 없으면 개수)

    months 에 없는 달의 문서와 날짜가 없는 문서는 무시한다.
    """
    buckets: Dict[str, Number] = {month: 0 for month in months}
    for doc in documents:
        stamp = doc.get(date_field)
        if not stamp:
            continue
        key = str(stamp)[:7]
        if key not in buckets:
            continue
        if value_field:
            buckets[key] += doc.get(value_field) or 0
        else:
            buckets[key] += 1
    return [_round(buckets[month]) for month in months]


async def monthly_series(
    repository: Repository,
    date_field: str,
    months: List[str],
    filters: Optional[Dict[str, Any]] = None,
    value_field: Optional[str] = None,
) -> List[Number]:
    """컬렉션 하나의 최근 N개월 월별 개수/합계"""
    query = dict(filters or {})
    query[date_field] = {"gte": month_start(months[0])}

    fields = [date_field] + ([value_field] if value_field else [])
    documents = await repository.list(query, fields=fields)
    return bucket_by_month(documents, date_field, months, value_field)


async def sum_field(
    repository: Repository,
    field: str,
    filters: Optional[Dict[str, Any]] = None,
) -> Number:
    documents = await repository.list(filters, fields=[field])
    return _round(sum(doc.get(field) or 0 for doc in documents))


async def managed_club_ids(repos: Repositories, manager_email: str) -> List[str]:
    clubs = await repos.clubs.list({"managerEmail": manager_email}, fields=["id"])
    return [club["id"] for club in clubs]


# =============================================
# 관리자
# =============================================

async def admin_stats(repos: Repositories, admin_email: str) -> Dict[str, Any]:
    """전체 현황 (요청한 관리자 본인은 사용자 수에서 제외)"""
    total_clubs = {
        status.value: await repos.clubs.count({"status": status.value})
        for status in ClubStatus
    }
    return {
        "totalUsers": await repos.users.count({"email": {"neq": admin_email}}),
        "totalClubs": total_clubs,
        "totalMemberships": await repos.memberships.count(),
        "totalEvents": await repos.events.count(),
        "totalPayments": await sum_field(repos.payments, "amount"),
    }


async def admin_analytics(repos: Repositories, admin_email: str, months: List[str]) -> Dict[str, Any]:
    """월별 가입자 수 / 결제 합계"""
    return {
        "months": months,
        "usersData": await monthly_series(
            repos.users, "created_at", months, {"email": {"neq": admin_email}}
        ),
        "paymentsData": await monthly_series(
            repos.payments, "createdAt", months, value_field="amount"
        ),
    }


# =============================================
# 클럽 매니저
# =============================================

async def manager_overview(repos: Repositories, manager_email: str, months: List[str]) -> Dict[str, Any]:
    """매니저가 관리하는 클럽 전체 현황"""
    club_ids = await managed_club_ids(repos, manager_email)
    in_clubs = {"clubId": {"in": club_ids}}

    events = await monthly_series(repos.events, "createdAt", months, in_clubs)
    return {
        "clubsManaged": len(club_ids),
        "totalMembers": await repos.memberships.count(
            {**in_clubs, "status": MembershipStatus.active.value}
        ),
        "eventsCreated": await repos.events.count(in_clubs),
        "totalPayments": await sum_field(repos.payments, "amount", in_clubs),
        "monthlyStats": [
            {"month": month, "events": count} for month, count in zip(months, events)
        ],
    }


async def manager_analytics(repos: Repositories, manager_email: str, months: List[str]) -> Dict[str, Any]:
    """매니저 클럽 월별 이벤트 수 / 결제 합계"""
    club_ids = await managed_club_ids(repos, manager_email)
    in_clubs = {"clubId": {"in": club_ids}}

    events = await monthly_series(repos.events, "createdAt", months, in_clubs)
    payments = await monthly_series(
        repos.payments, "createdAt", months, in_clubs, value_field="amount"
    )
    return {
        "months": months,
        "eventsPerMonth": [
            {"month": month, "events": count} for month, count in zip(months, events)
        ],
        "paymentsPerMonth": [
            {"month": month, "amount": amount} for month, amount in zip(months, payments)
        ],
    }


# =============================================
# 회원
# =============================================

async def member_stats(repos: Repositories, email: str) -> Dict[str, int]:
    return {
        "totalClubsJoined": await repos.memberships.count(
            {"memberEmail": email, "status": MembershipStatus.active.value}
        ),
        "totalEventsJoined": await repos.registrations.count(
            {"userEmail": email, "status": RegistrationStatus.registered.value}
        ),
    }


async def member_analytics(repos: Repositories, email: str, months: List[str]) -> Dict[str, Any]:
    """회원 월별 결제 합계 / 이벤트 참가 수"""
    return {
        "months": months,
        "paymentsData": await monthly_series(
            repos.payments, "createdAt", months, {"memberEmail": email}, value_field="amount"
        ),
        "eventsJoinedData": await monthly_series(
            repos.registrations, "registerAt", months, {"userEmail": email}
        ),
    }
