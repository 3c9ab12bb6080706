"""
Authorization Dependencies

인증(토큰 검증) 및 역할 게이트 의존성
"""
from fastapi import Depends, Request

from app.dependencies import get_identity_verifier, get_repositories
from app.errors import Forbidden, Unauthorized
from database.repository import Repositories
from .identity import IdentityVerifier, extract_bearer_token
from .models import Principal, Role
from .roles import RoleStore


async def get_principal(
    request: Request,
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> Principal:
    """
    현재 요청의 검증된 주체

    - Authorization 헤더 없음/형식 오류 -> 401
    - 토큰 검증 실패 -> 401
    검증된 주체는 request.state.principal 에도 저장된다.
    """
    token = extract_bearer_token(request.headers.get("Authorization"))
    if not token:
        raise Unauthorized()

    principal = await verifier.verify(token)
    request.state.principal = principal
    return principal


def get_role_store(repos: Repositories = Depends(get_repositories)) -> RoleStore:
    return RoleStore(repos.users)


def require_roles(*allowed_roles: Role):
    """특정 역할 필요 (사용자 레코드가 없으면 역할 불일치로 처리)"""
    allowed = set(allowed_roles)
    names = ", ".join(r.value for r in allowed_roles)

    async def _check(
        principal: Principal = Depends(get_principal),
        roles: RoleStore = Depends(get_role_store),
    ) -> Principal:
        role = await roles.get_role(principal.email)
        if role not in allowed:
            raise Forbidden(
                f"{names} only Actions!",
                role=role.value if role else None,
            )
        return principal

    return _check


require_admin = require_roles(Role.ADMIN)
require_club_manager = require_roles(Role.CLUB_MANAGER)
require_manager_or_admin = require_roles(Role.CLUB_MANAGER, Role.ADMIN)
