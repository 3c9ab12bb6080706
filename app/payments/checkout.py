"""
Checkout Gateway

외부 결제 제공자(Stripe Checkout) 세션 생성/조회
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import stripe
from loguru import logger

from app.errors import UpstreamError


@dataclass
class LineItem:
    """결제 항목 (금액은 최소 화폐 단위, 예: cent)"""
    name: str
    unit_amount: int
    quantity: int = 1
    currency: str = "usd"
    description: Optional[str] = None
    image: Optional[str] = None


@dataclass
class CheckoutSession:
    """조회된 결제 세션"""
    id: str
    status: Optional[str]
    payment_intent: Optional[str]
    amount_total: int = 0
    payment_status: Optional[str] = None
    customer_email: Optional[str] = None
    customer_name: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    @property
    def is_complete(self) -> bool:
        return self.status == "complete"

    @property
    def amount(self) -> float:
        """금액 (주 화폐 단위)"""
        return self.amount_total / 100


class CheckoutGateway(ABC):
    """결제 제공자 인터페이스"""

    @abstractmethod
    async def create_session(
        self,
        line_item: LineItem,
        success_url: str,
        cancel_url: str,
        metadata: Dict[str, str],
        customer_email: Optional[str] = None,
    ) -> Dict[str, str]:
        """세션 생성, {"id", "url"} 반환"""

    @abstractmethod
    async def retrieve_session(self, session_id: str) -> CheckoutSession:
        """세션 조회. 제공자 오류/알 수 없는 id 는 UpstreamError"""


def _stripe_attr(obj: Any, name: str, default: Any = None) -> Any:
    if obj is None:
        return default
    value = getattr(obj, name, default)
    return default if value is None else value


class StripeCheckout(CheckoutGateway):
    """Stripe Checkout 구현"""

    def __init__(self, api_key: str):
        if not api_key:
            raise ValueError("STRIPE_SECRET_KEY 환경변수를 설정해주세요")
        stripe.api_key = api_key

    async def create_session(
        self,
        line_item: LineItem,
        success_url: str,
        cancel_url: str,
        metadata: Dict[str, str],
        customer_email: Optional[str] = None,
    ) -> Dict[str, str]:
        product_data: Dict[str, Any] = {"name": line_item.name}
        if line_item.description:
            product_data["description"] = line_item.description
        if line_item.image:
            product_data["images"] = [line_item.image]

        line_items: List[Dict[str, Any]] = [{
            "price_data": {
                "currency": line_item.currency,
                "product_data": product_data,
                "unit_amount": line_item.unit_amount,
            },
            "quantity": line_item.quantity,
        }]

        try:
            session = stripe.checkout.Session.create(
                line_items=line_items,
                mode="payment",
                customer_email=customer_email,
                metadata=metadata,
                success_url=success_url,
                cancel_url=cancel_url,
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe 세션 생성 오류: {e}")
            raise UpstreamError("Payment provider error") from e

        return {"id": session.id, "url": session.url}

    async def retrieve_session(self, session_id: str) -> CheckoutSession:
        try:
            session = stripe.checkout.Session.retrieve(session_id)
        except stripe.StripeError as e:
            logger.error(f"Stripe 세션 조회 오류 ({session_id}): {e}")
            raise UpstreamError("Payment provider error") from e

        metadata = _stripe_attr(session, "metadata")
        details = _stripe_attr(session, "customer_details")
        return CheckoutSession(
            id=session.id,
            status=_stripe_attr(session, "status"),
            payment_intent=_stripe_attr(session, "payment_intent"),
            amount_total=_stripe_attr(session, "amount_total", 0),
            payment_status=_stripe_attr(session, "payment_status"),
            customer_email=_stripe_attr(details, "email") or _stripe_attr(session, "customer_email"),
            customer_name=_stripe_attr(details, "name"),
            metadata={
                key: _stripe_attr(metadata, key)
                for key in ("clubId", "member")
                if _stripe_attr(metadata, key) is not None
            },
        )
