"""
Identity Verification Adapter

Bearer 토큰을 외부 인증 제공자(Supabase Auth)로 검증하고 이메일을 반환
"""
from abc import ABC, abstractmethod
from typing import Optional

from loguru import logger
from supabase import AuthApiError, AuthError, Client

from app.errors import Unauthorized, UpstreamError
from .models import Principal


class IdentityVerifier(ABC):
    """인증 제공자 인터페이스"""

    @abstractmethod
    async def verify(self, token: str) -> Principal:
        """토큰 검증. 실패 시 Unauthorized"""


class SupabaseIdentityVerifier(IdentityVerifier):
    """Supabase Auth 토큰 검증"""

    def __init__(self, client: Optional[Client] = None):
        if client is None:
            from database.supabase_client import get_supabase_client
            client = get_supabase_client()
        self.client = client

    async def verify(self, token: str) -> Principal:
        try:
            user_response = self.client.auth.get_user(token)
        except AuthApiError as e:
            # 만료/위조 토큰
            raise Unauthorized() from e
        except AuthError as e:
            logger.error(f"인증 제공자 오류: {e}")
            raise UpstreamError("Identity provider unavailable") from e

        if not user_response or not user_response.user:
            raise Unauthorized()

        email = user_response.user.email
        if not email:
            raise Unauthorized("Token has no email claim")

        return Principal(email=email, uid=user_response.user.id)


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Authorization 헤더에서 Bearer 토큰 추출"""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
