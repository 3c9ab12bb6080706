"""
Domain Repositories

컬렉션별 공통 CRUD (조회/목록/카운트/저장/머지패치/삭제)
"""
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from .store import (
    CLUBS,
    EVENT_REGISTRATIONS,
    EVENTS,
    MEMBERSHIPS,
    PAYMENTS,
    USERS,
    DocumentStore,
)

# 머지패치에서 제거되는 식별자 필드
IDENTITY_FIELDS = ("id", "_id")


def utc_now_iso() -> str:
    """현재 시각 ISO 문자열 (UTC)"""
    return datetime.now(timezone.utc).isoformat()


def utc_today() -> date:
    """오늘 날짜 (UTC, 저장된 시각 문자열과 같은 기준)"""
    return datetime.now(timezone.utc).date()


def strip_identity(values: Dict[str, Any]) -> Dict[str, Any]:
    """식별자 필드를 제거한 복사본"""
    return {k: v for k, v in values.items() if k not in IDENTITY_FIELDS}


class Repository:
    """단일 컬렉션 저장소"""

    def __init__(self, store: DocumentStore, collection: str):
        self.store = store
        self.collection = collection

    async def get(self, doc_id: str) -> Optional[Dict[str, Any]]:
        if not doc_id:
            return None
        return await self.store.find_one(self.collection, {"id": doc_id})

    async def find_one(self, **filters) -> Optional[Dict[str, Any]]:
        return await self.store.find_one(self.collection, filters)

    async def list(
        self,
        filters: Optional[Dict[str, Any]] = None,
        sort: Optional[str] = None,
        descending: bool = False,
        fields: Optional[List[str]] = None,
    ) -> List[Dict[str, Any]]:
        return await self.store.find(
            self.collection, filters, sort=sort, descending=descending, fields=fields
        )

    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        return await self.store.count(self.collection, filters)

    async def insert(self, document: Dict[str, Any]) -> Dict[str, Any]:
        return await self.store.insert(self.collection, strip_identity(document))

    async def patch(
        self,
        doc_id: str,
        values: Dict[str, Any],
        stamp_field: Optional[str] = None,
    ) -> int:
        """
        머지패치: 전달된 필드만 설정

        id/_id 는 조용히 제거되므로 식별자는 절대 바뀌지 않는다.
        """
        update = strip_identity(values)
        if stamp_field:
            update[stamp_field] = utc_now_iso()
        if not update:
            return 0
        return await self.store.update(self.collection, {"id": doc_id}, update)

    async def update_where(self, filters: Dict[str, Any], values: Dict[str, Any]) -> int:
        """id 이외의 키(email 등)로 필드 설정"""
        update = strip_identity(values)
        if not update:
            return 0
        return await self.store.update(self.collection, filters, update)

    async def delete(self, doc_id: str) -> int:
        return await self.store.delete(self.collection, {"id": doc_id})


class Repositories:
    """앱 시작 시 한 번 생성되어 핸들러에 주입되는 저장소 묶음"""

    def __init__(self, store: DocumentStore):
        self.store = store
        self.users = Repository(store, USERS)
        self.clubs = Repository(store, CLUBS)
        self.memberships = Repository(store, MEMBERSHIPS)
        self.events = Repository(store, EVENTS)
        self.registrations = Repository(store, EVENT_REGISTRATIONS)
        self.payments = Repository(store, PAYMENTS)
