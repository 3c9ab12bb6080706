"""
Payment Router - 회비 결제 API
"""
from fastapi import APIRouter, Depends

from app.auth.dependencies import get_principal, require_admin
from app.auth.models import Principal
from app.config import Settings
from app.dependencies import get_app_settings, get_checkout_gateway, get_repositories
from database.repository import Repositories
from .checkout import CheckoutGateway
from .models import CheckoutRequest, PaymentSuccess
from .service import MembershipPaymentService

router = APIRouter(tags=["Payments"])


def get_payment_service(
    repos: Repositories = Depends(get_repositories),
    checkout: CheckoutGateway = Depends(get_checkout_gateway),
    settings: Settings = Depends(get_app_settings),
) -> MembershipPaymentService:
    return MembershipPaymentService(
        repos,
        checkout,
        client_domain=settings.CLIENT_DOMAIN,
        currency=settings.CHECKOUT_CURRENCY,
    )


@router.post("/create-checkout-session")
async def create_checkout_session(
    request: CheckoutRequest,
    principal: Principal = Depends(get_principal),
    service: MembershipPaymentService = Depends(get_payment_service),
):
    """회비 결제 세션 생성 -> 결제 페이지 URL"""
    return await service.create_checkout(request, principal)


@router.post("/payment-success")
async def payment_success(
    body: PaymentSuccess,
    service: MembershipPaymentService = Depends(get_payment_service),
):
    """
    결제 완료 확인

    같은 세션으로 여러 번 호출해도 Membership/Payment 는 한 번만 생성됩니다.
    """
    return await service.complete_payment(body.session_id)


@router.get("/admin/payments")
async def list_all_payments(
    principal: Principal = Depends(require_admin),
    repos: Repositories = Depends(get_repositories),
):
    """전체 결제 내역 (최신순)"""
    return await repos.payments.list(sort="createdAt", descending=True)


@router.get("/member/payments")
async def list_member_payments(
    principal: Principal = Depends(get_principal),
    repos: Repositories = Depends(get_repositories),
):
    """내 결제 내역 (최신순)"""
    return await repos.payments.list(
        {"memberEmail": principal.email}, sort="createdAt", descending=True
    )
