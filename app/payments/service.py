"""
Membership Payment Service

결제 완료 처리 (Membership/Payment 일관성)

불변식: 결제 트랜잭션 id(paymentId) 하나에 Membership 과 Payment 는 각각 최대 1개.
- payments.paymentId, memberships.paymentId 에 스토어 레벨 유니크 키
- Payment 를 먼저 기록 (내구성 기준), Membership 은 그 다음
- 유니크 위반은 "이미 처리됨" 으로 간주
두 insert 사이에서 중단되면 Payment 만 남고, 다음 완료 요청에서 Membership 이 채워진다.
Membership 기록 후 Payment 에 membershipId 를 남겨, 만료(삭제)된 멤버십은 재발급되지 않는다.
"""
from typing import Any, Dict, Optional

from loguru import logger

from app.auth.models import Principal
from app.club.models import MembershipStatus
from app.errors import Conflict, NotFound
from database.repository import Repositories, utc_now_iso
from database.store import DuplicateKeyError
from .checkout import CheckoutGateway, CheckoutSession, LineItem
from .models import CheckoutRequest

PAYMENT_TYPE_MEMBERSHIP = "membership"


class MembershipPaymentService:
    """클럽 회비 결제 서비스"""

    def __init__(
        self,
        repos: Repositories,
        checkout: CheckoutGateway,
        client_domain: str,
        currency: str = "usd",
    ):
        self.repos = repos
        self.checkout = checkout
        self.client_domain = client_domain.rstrip("/")
        self.currency = currency

    # =============================================
    # 결제 세션 생성
    # =============================================

    async def create_checkout(self, request: CheckoutRequest, principal: Principal) -> Dict[str, str]:
        """
        회비 결제 세션 생성

        금액은 저장된 클럽 회비(membershipFee)를 우선 사용합니다.
        """
        club = await self.repos.clubs.get(request.club_id)
        if not club:
            raise NotFound("Club not found")

        fee = club.get("membershipFee") or request.membership_fee or 0
        line_item = LineItem(
            name=request.name or club.get("name") or "Club membership",
            description=request.description or club.get("description"),
            image=request.banner_image or club.get("bannerImage"),
            unit_amount=int(round(float(fee) * 100)),
            quantity=request.quantity,
            currency=self.currency,
        )

        session = await self.checkout.create_session(
            line_item,
            success_url=f"{self.client_domain}/payment-success?session_id={{CHECKOUT_SESSION_ID}}",
            cancel_url=f"{self.client_domain}/clubs/{request.club_id}",
            metadata={"clubId": request.club_id, "member": principal.email},
            customer_email=principal.email,
        )
        logger.info(f"결제 세션 생성: club={request.club_id} member={principal.email}")
        return {"url": session["url"]}

    # =============================================
    # 결제 완료
    # =============================================

    async def complete_payment(self, session_id: str) -> Dict[str, Any]:
        """
        결제 완료 처리 (클라이언트 폴링)

        1. 결제 세션 조회 (실패 시 UpstreamError)
        2. 클럽 조회 (없으면 NotFound)
        3. paymentId 로 기존 Membership 조회
        4. 완료 + 미처리 -> Payment, Membership 순으로 기록
           (Payment 에 membershipId 가 있으면 재발급하지 않음, 만료 후 재요청은 Conflict)
        5. 기처리 -> 기존 Membership 반환
        6. 미완료 + 미처리 -> Conflict
        """
        session = await self.checkout.retrieve_session(session_id)

        club_id = session.metadata.get("clubId")
        club = await self.repos.clubs.get(club_id) if club_id else None
        if not club:
            raise NotFound("Club not found")

        transaction_id = session.payment_intent
        membership = None
        if transaction_id:
            membership = await self.repos.memberships.find_one(paymentId=transaction_id)

        if session.is_complete and transaction_id and not membership:
            payment = await self._record_payment(session, club)
            if payment.get("membershipId"):
                return await self._issued_membership(transaction_id)

            membership = await self._record_membership(session, club)
            await self.repos.payments.update_where(
                {"paymentId": transaction_id}, {"membershipId": membership["id"]}
            )
            return {"paymentId": transaction_id, "memberId": membership["id"]}

        if membership:
            return {
                "paymentId": transaction_id,
                "memberId": membership["id"],
                "alreadyProcessed": True,
            }

        raise Conflict(
            "Payment is not complete",
            paymentStatus=session.payment_status,
            sessionStatus=session.status,
        )

    async def _issued_membership(self, transaction_id: str) -> Dict[str, Any]:
        """
        Payment 에 membershipId 가 이미 기록된 경우

        멤버십이 남아 있으면 기처리, 만료(삭제)됐으면 재발급하지 않는다.
        """
        membership = await self.repos.memberships.find_one(paymentId=transaction_id)
        if membership:
            return {
                "paymentId": transaction_id,
                "memberId": membership["id"],
                "alreadyProcessed": True,
            }
        logger.warning(f"만료된 멤버십 재발급 요청 거부: payment={transaction_id}")
        raise Conflict("Membership was already issued for this payment", paymentId=transaction_id)

    async def _record_payment(self, session: CheckoutSession, club: Dict[str, Any]) -> Dict[str, Any]:
        document = {
            "paymentId": session.payment_intent,
            "clubId": club["id"],
            "club": club.get("name"),
            "memberEmail": self._member_email(session),
            "type": PAYMENT_TYPE_MEMBERSHIP,
            "amount": session.amount,
            "status": session.payment_status,
            "createdAt": utc_now_iso(),
        }
        try:
            return await self.repos.payments.insert(document)
        except DuplicateKeyError:
            # 이미 기록된 결제 (동시 요청, Membership 기록 전 중단, 만료 후 재요청)
            logger.info(f"결제 중복 기록 무시: {session.payment_intent}")
            return await self.repos.payments.find_one(paymentId=session.payment_intent) or {}

    async def _record_membership(self, session: CheckoutSession, club: Dict[str, Any]) -> Dict[str, Any]:
        document = {
            "clubId": club["id"],
            "memberEmail": self._member_email(session),
            "memberName": session.customer_name,
            "paymentId": session.payment_intent,
            "status": MembershipStatus.active.value,
            "joinedAt": utc_now_iso(),
        }
        try:
            membership = await self.repos.memberships.insert(document)
        except DuplicateKeyError:
            logger.info(f"멤버십 중복 생성 무시: {session.payment_intent}")
            membership = await self.repos.memberships.find_one(paymentId=session.payment_intent)
            if not membership:
                raise
            return membership

        logger.info(
            f"멤버십 생성: club={club['id']} member={document['memberEmail']} "
            f"payment={session.payment_intent}"
        )
        return membership

    @staticmethod
    def _member_email(session: CheckoutSession) -> Optional[str]:
        return session.metadata.get("member") or session.customer_email
