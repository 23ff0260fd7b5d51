"""Payment repository - Database operations for payments"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ...models import Client, Payment


class PaymentRepository:
    """Repository for payment database operations; ownership runs through the client"""

    @staticmethod
    def _owned(db: Session, therapist_id: int):
        return db.query(Payment).join(Client, Payment.client_id == Client.id).filter(
            Client.therapist_id == therapist_id
        )

    @staticmethod
    def get_payments(
        db: Session,
        therapist_id: int,
        client_id: Optional[int] = None,
        status: Optional[str] = None,
    ) -> list[Payment]:
        query = PaymentRepository._owned(db, therapist_id).options(joinedload(Payment.client))
        if client_id:
            query = query.filter(Payment.client_id == client_id)
        if status:
            query = query.filter(Payment.status == status)
        return query.order_by(Payment.created_at.desc(), Payment.id.desc()).all()

    @staticmethod
    def get_payment_by_id(db: Session, payment_id: int, therapist_id: int) -> Optional[Payment]:
        return PaymentRepository._owned(db, therapist_id).filter(Payment.id == payment_id).first()

    @staticmethod
    def get_payment_for_session(db: Session, session_id: int) -> Optional[Payment]:
        return db.query(Payment).filter(Payment.session_id == session_id).first()

    @staticmethod
    def get_pending_payments(
        db: Session, therapist_id: int, created_before: Optional[datetime] = None
    ) -> list[Payment]:
        query = PaymentRepository._owned(db, therapist_id).filter(Payment.status == "PENDING")
        if created_before:
            query = query.filter(Payment.created_at < created_before)
        return query.all()

    @staticmethod
    def count_pending(db: Session, therapist_id: int) -> int:
        return PaymentRepository._owned(db, therapist_id).filter(Payment.status == "PENDING").count()

    @staticmethod
    def paid_income(db: Session, therapist_id: int, start: datetime, end: datetime) -> float:
        """Sum of PAID amounts with paid_at in [start, end)"""
        total = (
            db.query(func.coalesce(func.sum(Payment.amount), 0))
            .join(Client, Payment.client_id == Client.id)
            .filter(
                Client.therapist_id == therapist_id,
                Payment.status == "PAID",
                Payment.paid_at >= start,
                Payment.paid_at < end,
            )
            .scalar()
        )
        return float(total or 0)

    @staticmethod
    def add_payment(db: Session, **payment_data) -> Payment:
        """Stage a payment in the current transaction; the caller commits"""
        payment = Payment(**payment_data)
        db.add(payment)
        return payment

    @staticmethod
    def delete_payment(db: Session, payment: Payment) -> None:
        db.delete(payment)
        db.commit()
