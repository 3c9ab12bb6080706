"""
ClubSphere - FastAPI 웹 서버

클럽 승인, 이벤트/멤버십 관리, 회비 결제, 대시보드 통계 API

데이터 소스: Supabase
인증: Supabase Auth (Bearer 토큰)
결제: Stripe Checkout
"""
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from app.auth import auth_router
from app.auth.identity import IdentityVerifier, SupabaseIdentityVerifier
from app.club import club_router
from app.config import Settings, get_settings
from app.errors import ClubSphereError
from app.events import events_router
from app.payments import payments_router
from app.payments.checkout import CheckoutGateway, StripeCheckout
from app.reports import reports_router
from database.repository import Repositories
from database.store import DocumentStore, StoreError


async def clubsphere_error_handler(request: Request, exc: ClubSphereError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={"message": "Validation Error", "errors": jsonable_encoder(exc.errors())},
    )


async def store_error_handler(request: Request, exc: StoreError):
    logger.error(f"스토어 오류 {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"message": "Server Error"})


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"처리되지 않은 오류 {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"message": "Server Error"})


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[DocumentStore] = None,
    identity_verifier: Optional[IdentityVerifier] = None,
    checkout_gateway: Optional[CheckoutGateway] = None,
) -> FastAPI:
    """
    FastAPI 앱 생성

    저장소/인증/결제 객체는 여기서 한 번 만들어 app.state 로 핸들러에 주입한다.
    전달하지 않으면 Supabase / Stripe 구현을 사용한다.
    """
    settings = settings or get_settings()

    if store is None:
        from database.supabase_client import SupabaseStore
        store = SupabaseStore()
    if identity_verifier is None:
        identity_verifier = SupabaseIdentityVerifier()
    if checkout_gateway is None:
        checkout_gateway = StripeCheckout(settings.STRIPE_SECRET_KEY)

    app = FastAPI(
        title=settings.APP_NAME,
        description="클럽 멤버십 및 이벤트 관리 플랫폼 API",
        version=settings.APP_VERSION,
    )

    app.state.settings = settings
    app.state.repositories = Repositories(store)
    app.state.identity_verifier = identity_verifier
    app.state.checkout_gateway = checkout_gateway

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.CLIENT_DOMAIN],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ClubSphereError, clubsphere_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(auth_router)
    app.include_router(club_router)
    app.include_router(events_router)
    app.include_router(payments_router)
    app.include_router(reports_router)

    @app.get("/")
    async def root():
        return {"message": "Hello from ClubSphere Server.."}

    logger.info(f"{settings.APP_NAME} v{settings.APP_VERSION} 초기화 완료")
    return app
