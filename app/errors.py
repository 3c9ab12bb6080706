"""
API 에러 정의

모든 응답 에러는 {"message": ...} 형태로 내려간다 (server.py 핸들러)
"""
from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class ClubSphereError(HTTPException):
    """기본 API 에러"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server Error"

    def __init__(self, message: Optional[str] = None, **extra: Any):
        self.message = message or self.default_message
        self.extra: Dict[str, Any] = extra
        super().__init__(status_code=self.status_code, detail=self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message, **self.extra}


class Unauthorized(ClubSphereError):
    """인증 정보 없음/유효하지 않음"""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized Access!"


class Forbidden(ClubSphereError):
    """인증됐지만 역할 불일치"""
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFound(ClubSphereError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not Found"


class Conflict(ClubSphereError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class UpstreamError(ClubSphereError):
    """인증/결제 제공자 실패"""
    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Upstream provider error"


class ServerError(ClubSphereError):
    pass
