"""
Payment Module - 회비 결제 (Stripe Checkout)
"""
from .router import router as payments_router
from .checkout import CheckoutGateway, CheckoutSession, LineItem, StripeCheckout
from .service import MembershipPaymentService

__all__ = [
    "payments_router",
    "CheckoutGateway",
    "CheckoutSession",
    "LineItem",
    "StripeCheckout",
    "MembershipPaymentService",
]
