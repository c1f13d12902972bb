"""
Booking Notification Service
Builds the gateway payload from an appointment and sends it without ever
letting a delivery failure reach the caller
"""

import logging

from ..config import CURRENCY_PREFIX
from ..models import Appointment
from .whatsapp_service import NotificationKind, NotificationPayload, WhatsAppSender

logger = logging.getLogger(__name__)


def format_amount(value: float) -> str:
    """12.5 -> "R$ 12,50" """
    return f"{CURRENCY_PREFIX} {value:.2f}".replace(".", ",")


def build_payload(appointment: Appointment) -> NotificationPayload:
    phone = appointment.client_phone or ""
    return NotificationPayload(
        phone=phone[1:] if phone.startswith("+") else phone,
        clientName=appointment.client_name,
        date=appointment.date.strftime("%d/%m/%Y"),
        time=appointment.start_time.strftime("%H:%M"),
        serviceNames=", ".join(s.name for s in appointment.services),
        tenantId=appointment.tenant_id.lower(),
        amount=format_amount(appointment.total_price),
    )


def get_default_sender() -> WhatsAppSender:
    return WhatsAppSender()


def notify(sender, kind: NotificationKind, appointment: Appointment) -> bool:
    """
    Best-effort delivery

    Args:
        sender: Anything with ``send(kind, payload) -> bool``
        kind: Which message to send
        appointment: Appointment the message is about

    Returns:
        Whether the message was delivered. Exceptions are logged, never raised.
    """
    try:
        payload = build_payload(appointment)
        delivered = bool(sender.send(kind, payload))
    except Exception as e:
        logger.error(f"❌ Failed to send {kind.value} notification for appointment {appointment.id}: {e}")
        return False

    if not delivered:
        logger.warning(f"⚠️ {kind.value} notification for appointment {appointment.id} was not delivered")
    return delivered
