"""Payment router - FastAPI endpoints for payments"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...schemas import MessageResponse
from .schemas import PaymentCreate, PaymentResponse, PaymentStatus, PaymentUpdate
from .service import PaymentService

router = APIRouter(prefix="/payments", tags=["Payments"])


def get_payment_service(db: Session = Depends(get_db)) -> PaymentService:
    """Dependency injection for PaymentService"""
    return PaymentService(db)


@router.get("", response_model=list[PaymentResponse])
async def get_payments(
    clientId: Optional[int] = Query(None),
    status: Optional[PaymentStatus] = Query(None),
    current_user: User = Depends(get_current_user),
    service: PaymentService = Depends(get_payment_service),
):
    """List payments, newest first"""
    return [PaymentResponse.from_model(p) for p in service.get_payments(current_user, clientId, status)]


@router.post("", response_model=PaymentResponse, status_code=201)
async def create_payment(
    data: PaymentCreate,
    current_user: User = Depends(get_current_user),
    service: PaymentService = Depends(get_payment_service),
):
    return PaymentResponse.from_model(service.create_payment(data, current_user))


@router.get("/{payment_id}", response_model=PaymentResponse)
async def get_payment(
    payment_id: int,
    current_user: User = Depends(get_current_user),
    service: PaymentService = Depends(get_payment_service),
):
    return PaymentResponse.from_model(service.get_payment(payment_id, current_user))


@router.put("/{payment_id}", response_model=PaymentResponse)
async def update_payment(
    payment_id: int,
    data: PaymentUpdate,
    current_user: User = Depends(get_current_user),
    service: PaymentService = Depends(get_payment_service),
):
    """Update a payment; marking it PAID closes its collection task"""
    return PaymentResponse.from_model(service.update_payment(payment_id, data, current_user))


@router.delete("/{payment_id}", response_model=MessageResponse)
async def delete_payment(
    payment_id: int,
    current_user: User = Depends(get_current_user),
    service: PaymentService = Depends(get_payment_service),
):
    return service.delete_payment(payment_id, current_user)
