"""
Pytest configuration and fixtures for ClubSphere tests
"""

import asyncio
import sys
import uuid
from pathlib import Path
from typing import Dict, Optional

import pytest
from fastapi.testclient import TestClient

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.auth.identity import IdentityVerifier
from app.auth.models import Principal
from app.config import Settings
from app.errors import Unauthorized, UpstreamError
from app.payments.checkout import CheckoutGateway, CheckoutSession
from app.server import create_app
from database.repository import Repositories
from database.store import UNIQUE_KEYS, DocumentStore, DuplicateKeyError, split_filter


ADMIN_EMAIL = "admin@clubsphere.io"
MANAGER_EMAIL = "manager@clubsphere.io"
OTHER_MANAGER_EMAIL = "other.manager@clubsphere.io"
MEMBER_EMAIL = "member@clubsphere.io"
GHOST_EMAIL = "ghost@clubsphere.io"  # 토큰은 유효하지만 users 레코드 없음

TOKENS = {
    "admin-token": ADMIN_EMAIL,
    "manager-token": MANAGER_EMAIL,
    "other-manager-token": OTHER_MANAGER_EMAIL,
    "member-token": MEMBER_EMAIL,
    "ghost-token": GHOST_EMAIL,
}


def auth(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# Test doubles
# =============================================================================

def _matches(doc, filters) -> bool:
    for field, condition in (filters or {}).items():
        for column, op, value in split_filter(field, condition):
            actual = doc.get(column)
            if op == "eq" and actual != value:
                return False
            if op == "neq" and actual == value:
                return False
            if op == "in" and actual not in value:
                return False
            if op in ("gt", "gte", "lt", "lte"):
                if actual is None:
                    return False
                if op == "gt" and not actual > value:
                    return False
                if op == "gte" and not actual >= value:
                    return False
                if op == "lt" and not actual < value:
                    return False
                if op == "lte" and not actual <= value:
                    return False
    return True


class InMemoryStore(DocumentStore):
    """UNIQUE_KEYS 를 지키는 메모리 문서 저장소"""

    def __init__(self):
        self.collections: Dict[str, Dict[str, dict]] = {}

    def _collection(self, name):
        return self.collections.setdefault(name, {})

    def seed(self, collection: str, document: dict) -> dict:
        """테스트 데이터 동기 저장"""
        doc = dict(document)
        doc.setdefault("id", str(uuid.uuid4()))
        self._check_unique(collection, doc)
        self._collection(collection)[doc["id"]] = doc
        return dict(doc)

    def all(self, collection: str):
        return [dict(doc) for doc in self._collection(collection).values()]

    def _check_unique(self, collection, doc):
        for key in UNIQUE_KEYS.get(collection, []):
            values = tuple(doc.get(f) for f in key)
            if any(v is None for v in values):
                continue
            for existing in self._collection(collection).values():
                if tuple(existing.get(f) for f in key) == values:
                    raise DuplicateKeyError(collection)

    async def find_one(self, collection, filters=None):
        rows = await self.find(collection, filters, limit=1)
        return rows[0] if rows else None

    async def find(self, collection, filters=None, sort=None, descending=False, fields=None, limit=None):
        await asyncio.sleep(0)
        rows = [dict(d) for d in self._collection(collection).values() if _matches(d, filters)]
        if sort:
            rows.sort(key=lambda d: (d.get(sort) is None, d.get(sort) or ""), reverse=descending)
        if fields:
            rows = [{f: d.get(f) for f in fields} for d in rows]
        if limit:
            rows = rows[:limit]
        return rows

    async def count(self, collection, filters=None):
        await asyncio.sleep(0)
        return sum(1 for d in self._collection(collection).values() if _matches(d, filters))

    async def insert(self, collection, document):
        # 왕복 지연 후 유니크 검사 + 저장은 원자적으로
        await asyncio.sleep(0)
        return self.seed(collection, {k: v for k, v in document.items() if k != "id"})

    async def update(self, collection, filters, values):
        await asyncio.sleep(0)
        matched = [d for d in self._collection(collection).values() if _matches(d, filters)]
        for doc in matched:
            doc.update(values)
        return len(matched)

    async def delete(self, collection, filters):
        await asyncio.sleep(0)
        docs = self._collection(collection)
        ids = [doc_id for doc_id, d in docs.items() if _matches(d, filters)]
        for doc_id in ids:
            del docs[doc_id]
        return len(ids)


class FakeIdentityVerifier(IdentityVerifier):
    def __init__(self, tokens: Dict[str, str]):
        self.tokens = tokens

    async def verify(self, token: str) -> Principal:
        email = self.tokens.get(token)
        if not email:
            raise Unauthorized()
        return Principal(email=email)


class FakeCheckout(CheckoutGateway):
    """결제 세션을 메모리에 보관하는 가짜 결제 제공자"""

    def __init__(self):
        self.sessions: Dict[str, CheckoutSession] = {}
        self.created = []

    def add_session(
        self,
        session_id: str,
        club_id: str,
        member: str = MEMBER_EMAIL,
        status: str = "complete",
        payment_intent: Optional[str] = "pi_123",
        amount_total: int = 2500,
    ) -> CheckoutSession:
        session = CheckoutSession(
            id=session_id,
            status=status,
            payment_intent=payment_intent,
            amount_total=amount_total,
            payment_status="paid" if status == "complete" else "unpaid",
            customer_email=member,
            customer_name="Test Member",
            metadata={"clubId": club_id, "member": member},
        )
        self.sessions[session_id] = session
        return session

    async def create_session(self, line_item, success_url, cancel_url, metadata, customer_email=None):
        self.created.append({
            "line_item": line_item,
            "success_url": success_url,
            "cancel_url": cancel_url,
            "metadata": metadata,
            "customer_email": customer_email,
        })
        return {"id": f"cs_{len(self.created)}", "url": f"https://checkout.test/cs_{len(self.created)}"}

    async def retrieve_session(self, session_id):
        session = self.sessions.get(session_id)
        if not session:
            raise UpstreamError("Payment provider error")
        return session


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def store():
    """역할별 사용자가 저장된 메모리 스토어"""
    s = InMemoryStore()
    s.seed("users", {"email": ADMIN_EMAIL, "role": "admin", "created_at": "2025-01-05T09:00:00+00:00"})
    s.seed("users", {"email": MANAGER_EMAIL, "role": "clubManager", "created_at": "2025-02-10T09:00:00+00:00"})
    s.seed("users", {"email": OTHER_MANAGER_EMAIL, "role": "clubManager", "created_at": "2025-02-11T09:00:00+00:00"})
    s.seed("users", {"email": MEMBER_EMAIL, "role": "member", "created_at": "2025-03-15T09:00:00+00:00"})
    return s


@pytest.fixture
def repos(store):
    return Repositories(store)


@pytest.fixture
def checkout():
    return FakeCheckout()


@pytest.fixture
def settings():
    return Settings(
        SUPABASE_URL="",
        SUPABASE_KEY="",
        STRIPE_SECRET_KEY="",
        CLIENT_DOMAIN="http://localhost:5173",
        ANALYTICS_MONTHS=6,
    )


@pytest.fixture
def app(settings, store, checkout):
    return create_app(
        settings=settings,
        store=store,
        identity_verifier=FakeIdentityVerifier(TOKENS),
        checkout_gateway=checkout,
    )


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def club(store):
    """MANAGER_EMAIL 이 관리하는 승인된 클럽"""
    return store.seed("clubs", {
        "name": "Riverside Runners",
        "managerEmail": MANAGER_EMAIL,
        "status": "approved",
        "membershipFee": 25,
        "location": "Dhaka",
        "createdAt": "2025-03-01T10:00:00+00:00",
        "updateAt": "2025-03-01T10:00:00+00:00",
    })
