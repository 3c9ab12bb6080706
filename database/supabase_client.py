"""
Supabase 데이터베이스 클라이언트

DocumentStore 인터페이스의 Supabase(PostgREST) 구현
"""
from typing import Any, Dict, List, Optional, Sequence

from loguru import logger
from postgrest.exceptions import APIError
from supabase import Client, create_client

from app.config import get_settings
from .store import DocumentStore, DuplicateKeyError, StoreError, split_filter


# 싱글톤 클라이언트
_supabase_client: Optional[Client] = None

# PostgreSQL 에러 코드
UNIQUE_VIOLATION = "23505"
INVALID_TEXT_REPRESENTATION = "22P02"

_OPERATOR_METHODS = {
    "eq": "eq",
    "neq": "neq",
    "gt": "gt",
    "gte": "gte",
    "lt": "lt",
    "lte": "lte",
    "in": "in_",
}


def get_supabase_client() -> Client:
    """
    Supabase 클라이언트 인스턴스 반환 (싱글톤)
    """
    global _supabase_client
    if _supabase_client is None:
        settings = get_settings()
        if not settings.SUPABASE_URL or not settings.SUPABASE_KEY:
            raise ValueError("SUPABASE_URL과 SUPABASE_KEY 환경변수를 설정해주세요")
        _supabase_client = create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
    return _supabase_client


def _has_empty_in(filters: Optional[Dict[str, Any]]) -> bool:
    """빈 in 필터는 어떤 문서와도 일치하지 않음"""
    for field, condition in (filters or {}).items():
        for _, op, value in split_filter(field, condition):
            if op == "in" and not value:
                return True
    return False


class SupabaseStore(DocumentStore):
    """Supabase 문서 저장소"""

    def __init__(self, client: Optional[Client] = None):
        self.client: Client = client or get_supabase_client()

    def _apply_filters(self, query, filters: Optional[Dict[str, Any]]):
        for field, condition in (filters or {}).items():
            for column, op, value in split_filter(field, condition):
                query = getattr(query, _OPERATOR_METHODS[op])(column, value)
        return query

    def _raise(self, collection: str, action: str, error: APIError):
        if error.code == UNIQUE_VIOLATION:
            raise DuplicateKeyError(collection, error.message or "") from error
        logger.error(f"{collection} {action} 오류: {error.message}")
        raise StoreError(f"{collection} {action} failed") from error

    # ==================== 조회 ====================

    async def find_one(self, collection: str, filters=None):
        rows = await self.find(collection, filters, limit=1)
        return rows[0] if rows else None

    async def find(
        self,
        collection: str,
        filters=None,
        sort: Optional[str] = None,
        descending: bool = False,
        fields: Optional[Sequence[str]] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        if _has_empty_in(filters):
            return []

        columns = ", ".join(fields) if fields else "*"
        query = self._apply_filters(self.client.table(collection).select(columns), filters)
        if sort:
            query = query.order(sort, desc=descending)
        if limit:
            query = query.limit(limit)

        try:
            result = query.execute()
        except APIError as e:
            # uuid 컬럼에 형식이 틀린 id -> 일치 없음
            if e.code == INVALID_TEXT_REPRESENTATION:
                return []
            self._raise(collection, "조회", e)
        return result.data or []

    async def count(self, collection: str, filters=None) -> int:
        if _has_empty_in(filters):
            return 0

        query = self._apply_filters(
            self.client.table(collection).select("id", count="exact"), filters
        )
        try:
            result = query.execute()
        except APIError as e:
            if e.code == INVALID_TEXT_REPRESENTATION:
                return 0
            self._raise(collection, "카운트", e)
        return result.count or 0

    # ==================== 쓰기 ====================

    async def insert(self, collection: str, document: Dict[str, Any]) -> Dict[str, Any]:
        try:
            result = self.client.table(collection).insert(document).execute()
        except APIError as e:
            self._raise(collection, "저장", e)

        if not result.data:
            raise StoreError(f"{collection} insert returned no rows")
        return result.data[0]

    async def update(self, collection: str, filters, values: Dict[str, Any]) -> int:
        if _has_empty_in(filters):
            return 0

        query = self._apply_filters(self.client.table(collection).update(values), filters)
        try:
            result = query.execute()
        except APIError as e:
            if e.code == INVALID_TEXT_REPRESENTATION:
                return 0
            self._raise(collection, "업데이트", e)
        return len(result.data or [])

    async def delete(self, collection: str, filters) -> int:
        if _has_empty_in(filters):
            return 0

        query = self._apply_filters(self.client.table(collection).delete(), filters)
        try:
            result = query.execute()
        except APIError as e:
            if e.code == INVALID_TEXT_REPRESENTATION:
                return 0
            self._raise(collection, "삭제", e)
        return len(result.data or [])
