"""
Document Store 인터페이스

컬렉션 단위 CRUD 추상화 (Supabase 구현은 supabase_client.py)
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Tuple


# 컬렉션 이름
USERS = "users"
CLUBS = "clubs"
MEMBERSHIPS = "memberships"
EVENTS = "events"
EVENT_REGISTRATIONS = "event_registrations"
PAYMENTS = "payments"

COLLECTIONS = [USERS, CLUBS, MEMBERSHIPS, EVENTS, EVENT_REGISTRATIONS, PAYMENTS]

# 스토어 레벨 유니크 키 (migrations/001_clubsphere_schema.sql 과 동일해야 함)
UNIQUE_KEYS: Dict[str, List[Tuple[str, ...]]] = {
    USERS: [("email",)],
    MEMBERSHIPS: [("paymentId",)],
    PAYMENTS: [("paymentId",)],
    EVENT_REGISTRATIONS: [("eventId", "userEmail")],
}

# 필터 연산자: {"date": {"gte": "2025-01-01"}}
FILTER_OPERATORS = ("eq", "neq", "gt", "gte", "lt", "lte", "in")

Filters = Dict[str, Any]
Document = Dict[str, Any]


class StoreError(Exception):
    """스토어 접근 실패"""


class DuplicateKeyError(StoreError):
    """유니크 키 위반"""

    def __init__(self, collection: str, message: str = ""):
        self.collection = collection
        super().__init__(message or f"duplicate key in {collection}")


def split_filter(field: str, condition: Any) -> List[Tuple[str, str, Any]]:
    """
    필터 한 항목을 (field, op, value) 목록으로 분해

    {"date": {"gte": a, "lt": b}} -> [("date", "gte", a), ("date", "lt", b)]
    """
    if isinstance(condition, dict):
        clauses = []
        for op, value in condition.items():
            if op not in FILTER_OPERATORS:
                raise ValueError(f"지원하지 않는 필터 연산자: {op}")
            clauses.append((field, op, value))
        return clauses
    return [(field, "eq", condition)]


class DocumentStore(ABC):
    """컬렉션 기반 문서 저장소

    모든 쓰기는 단일 문서 단위로만 원자적이다. 컬렉션 간 트랜잭션은 없다.
    """

    @abstractmethod
    async def find_one(self, collection: str, filters: Optional[Filters] = None) -> Optional[Document]:
        ...

    @abstractmethod
    async def find(
        self,
        collection: str,
        filters: Optional[Filters] = None,
        sort: Optional[str] = None,
        descending: bool = False,
        fields: Optional[Sequence[str]] = None,
        limit: Optional[int] = None,
    ) -> List[Document]:
        ...

    @abstractmethod
    async def count(self, collection: str, filters: Optional[Filters] = None) -> int:
        ...

    @abstractmethod
    async def insert(self, collection: str, document: Document) -> Document:
        """문서 저장 후 id가 채워진 문서 반환. 유니크 키 위반 시 DuplicateKeyError"""

    @abstractmethod
    async def update(self, collection: str, filters: Filters, values: Document) -> int:
        """일치 문서에 values 설정, 수정된 문서 수 반환"""

    @abstractmethod
    async def delete(self, collection: str, filters: Filters) -> int:
        """일치 문서 삭제, 삭제된 문서 수 반환"""
