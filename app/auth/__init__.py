"""
Auth Module - 인증/역할 게이트
"""
from .router import router as auth_router
from .models import Role, Principal, UserLogin, RoleUpdate
from .identity import IdentityVerifier, SupabaseIdentityVerifier
from .roles import RoleStore
from .dependencies import (
    get_principal,
    require_roles,
    require_admin,
    require_club_manager,
    require_manager_or_admin,
)

__all__ = [
    "auth_router",
    "Role",
    "Principal",
    "UserLogin",
    "RoleUpdate",
    "IdentityVerifier",
    "SupabaseIdentityVerifier",
    "RoleStore",
    "get_principal",
    "require_roles",
    "require_admin",
    "require_club_manager",
    "require_manager_or_admin",
]
