import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status

from backoffice.api.deps import get_current_identity, request_now
from backoffice.schemas.email import EmailSent, PaymentLinkEmail
from backoffice.services.mailer import MailError, MailNotConfigured, send_payment_link_email

router = APIRouter(dependencies=[Depends(get_current_identity)])
logger = logging.getLogger(__name__)


@router.post("/payment-link", response_model=EmailSent)
def send_payment_link(payload: PaymentLinkEmail, now: datetime = Depends(request_now)):
    """Mail the customer their itinerary summary with the payment link."""
    if not payload.member.email or payload.payment.amount is None or not payload.payment.payment_link:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing required fields: member.email, payment.amount, payment.paymentLink",
        )
    try:
        message_id = send_payment_link_email(payload, now)
    except MailNotConfigured as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    except MailError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Failed to send email: {e}")
    return {"success": True, "message_id": message_id}
