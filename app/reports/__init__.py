"""
Dashboard Module - 관리자/매니저/회원 통계
"""
from .router import router as reports_router

__all__ = ["reports_router"]
