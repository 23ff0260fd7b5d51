"""Payment service - Business logic for client payments and collection tasks"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Payment, User
from ...shared.timeutils import local_now
from ..clients.repository import ClientRepository
from ..sessions.repository import SessionRepository
from ..tasks.repository import TaskRepository
from .repository import PaymentRepository
from .schemas import PaymentCreate, PaymentUpdate

logger = logging.getLogger(__name__)


def format_amount(amount: float) -> str:
    return f"₪{amount:,.0f}" if float(amount).is_integer() else f"₪{amount:,.2f}"


class PaymentService:
    """Service layer for payment business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PaymentRepository()

    def get_payments(
        self, user: User, client_id: Optional[int] = None, status: Optional[str] = None
    ) -> list[Payment]:
        return self.repo.get_payments(self.db, user.id, client_id, status)

    def get_payment(self, payment_id: int, user: User) -> Payment:
        payment = self.repo.get_payment_by_id(self.db, payment_id, user.id)
        if not payment:
            raise HTTPException(status_code=404, detail="Payment not found")
        return payment

    def create_payment(self, data: PaymentCreate, user: User) -> Payment:
        client = ClientRepository.get_client_by_id(self.db, data.clientId, user.id)
        if not client:
            raise HTTPException(status_code=404, detail="Client not found")

        if data.sessionId is not None:
            session = SessionRepository.get_session_by_id(self.db, data.sessionId, user.id)
            if not session or session.client_id != client.id:
                raise HTTPException(status_code=404, detail="Session not found")
            if self.repo.get_payment_for_session(self.db, session.id):
                raise HTTPException(status_code=400, detail="Session already has a payment")

        payment = self.repo.add_payment(
            self.db,
            client_id=client.id,
            session_id=data.sessionId,
            amount=data.amount,
            method=data.method,
            status=data.status,
            notes=data.notes,
            receipt_url=data.receiptUrl,
            paid_at=local_now() if data.status == "PAID" else None,
        )
        self.db.flush()

        if data.status == "PENDING":
            TaskRepository.add_task(
                self.db,
                user.id,
                type="COLLECT_PAYMENT",
                title=f"גביית תשלום - {client.name} ({format_amount(data.amount)})",
                priority="MEDIUM",
                related_entity_id=payment.id,
                related_entity="Payment",
            )

        self.db.commit()
        self.db.refresh(payment)
        logger.info(f"💰 Payment {payment.id} ({payment.status}) recorded for client {client.id}")
        return payment

    def update_payment(self, payment_id: int, data: PaymentUpdate, user: User) -> Payment:
        payment = self.get_payment(payment_id, user)
        fields_set = data.model_fields_set

        if data.method:
            payment.method = data.method
        if "notes" in fields_set:
            payment.notes = data.notes
        if "receiptUrl" in fields_set:
            payment.receipt_url = data.receiptUrl
        if data.paidAt is not None:
            payment.paid_at = data.paidAt

        if data.status:
            payment.status = data.status
            if data.status == "PAID":
                payment.paid_at = data.paidAt or local_now()
                completed = TaskRepository.complete_related_tasks(
                    self.db, user.id, "COLLECT_PAYMENT", payment.id
                )
                logger.info(f"✅ Payment {payment.id} paid, {completed} collection task(s) completed")

        self.db.commit()
        self.db.refresh(payment)
        return payment

    def delete_payment(self, payment_id: int, user: User) -> dict:
        payment = self.get_payment(payment_id, user)
        self.repo.delete_payment(self.db, payment)
        return {"message": "Payment deleted"}
