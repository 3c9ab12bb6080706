"""
Auth Router - 사용자/역할 API
"""
from fastapi import APIRouter, Depends

from app.dependencies import get_repositories
from database.repository import Repositories
from .dependencies import get_principal, get_role_store, require_admin
from .models import Principal, RoleUpdate, UserLogin
from .roles import RoleStore

router = APIRouter(tags=["auth"])


@router.post("/user")
async def save_user(
    profile: UserLogin,
    roles: RoleStore = Depends(get_role_store),
):
    """
    로그인 시 사용자 저장

    최초 로그인이면 member 역할로 생성하고, 이후에는 last_loggedIn 만 갱신합니다.
    """
    return await roles.record_login(profile)


@router.get("/user/role")
async def get_user_role(
    principal: Principal = Depends(get_principal),
    roles: RoleStore = Depends(get_role_store),
):
    """현재 사용자 역할"""
    role = await roles.get_role(principal.email)
    return {"role": role.value if role else None}


@router.get("/users")
async def list_users(
    principal: Principal = Depends(require_admin),
    repos: Repositories = Depends(get_repositories),
):
    """전체 사용자 목록 (본인 제외)"""
    return await repos.users.list({"email": {"neq": principal.email}}, sort="created_at")


@router.get("/users/count")
async def count_users(
    principal: Principal = Depends(require_admin),
    repos: Repositories = Depends(get_repositories),
):
    return {"count": await repos.users.count()}


@router.patch("/update-role")
async def update_role(
    update: RoleUpdate,
    principal: Principal = Depends(require_admin),
    roles: RoleStore = Depends(get_role_store),
):
    """사용자 역할 변경 (관리자)"""
    return await roles.set_role(update.email, update.role)
