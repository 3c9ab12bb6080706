"""
Role Store

users 컬렉션에 저장된 이메일 -> 역할 매핑
"""
from typing import Any, Dict, Optional

from loguru import logger

from database.repository import Repository, utc_now_iso
from database.store import DuplicateKeyError
from .models import Role, UserLogin


class RoleStore:
    """역할 조회/변경"""

    def __init__(self, users: Repository):
        self.users = users

    async def get_role(self, email: str) -> Optional[Role]:
        user = await self.users.find_one(email=email)
        if not user or not user.get("role"):
            return None
        try:
            return Role(user["role"])
        except ValueError:
            logger.warning(f"알 수 없는 역할 값: {user['role']} ({email})")
            return None

    async def set_role(self, email: str, role: Role) -> Dict[str, int]:
        """
        역할 변경 (무조건 적용, 마지막 쓰기 우선)

        대상 사용자가 없어도 에러가 아니며 matchedCount 0 을 반환한다.
        """
        matched = await self.users.update_where({"email": email}, {"role": role.value})
        logger.info(f"역할 변경: {email} -> {role.value} (matched={matched})")
        return {"matchedCount": matched}

    async def record_login(self, profile: UserLogin) -> Dict[str, Any]:
        """
        로그인 기록 (이메일 기준 upsert)

        - 신규: role=member 로 생성
        - 기존: last_loggedIn 만 갱신
        """
        now = utc_now_iso()
        existing = await self.users.find_one(email=profile.email)
        if existing:
            await self.users.update_where({"email": profile.email}, {"last_loggedIn": now})
            return {"created": False, "user": {**existing, "last_loggedIn": now}}

        document = profile.model_dump(exclude_none=True)
        document.update({
            "role": Role.MEMBER.value,
            "created_at": now,
            "last_loggedIn": now,
        })
        try:
            user = await self.users.insert(document)
        except DuplicateKeyError:
            # 동시 첫 로그인: 다른 요청이 먼저 생성
            user = await self.users.find_one(email=profile.email)
            return {"created": False, "user": user}
        logger.info(f"신규 사용자 생성: {profile.email}")
        return {"created": True, "user": user}
