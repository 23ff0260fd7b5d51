"""Email router - free-text e-mails from a therapist to a client"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...email_service import send_client_email
from ...email_templates import DEFAULT_THERAPIST_NAME
from ...models import User
from ...schemas import MessageResponse
from ..clients.repository import ClientRepository
from .schemas import SendEmailRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/email", tags=["Email"])


@router.post("/send", response_model=MessageResponse)
async def send_email_to_client(
    data: SendEmailRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Send an e-mail to one of the therapist's clients using the generic template"""
    client = ClientRepository.get_client_by_id(db, data.clientId, current_user.id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    if not client.email:
        raise HTTPException(status_code=400, detail="Client has no email address")

    try:
        await send_client_email(
            to=client.email,
            client_name=client.name,
            subject=data.subject,
            content=data.content,
            sender_name=current_user.name or DEFAULT_THERAPIST_NAME,
        )
    except Exception as e:
        logger.error(f"❌ Failed to e-mail client {client.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to send email") from e

    logger.info(f"✅ E-mail sent to client {client.id} by therapist {current_user.id}")
    return {"message": "Email sent successfully"}
