"""
WhatsApp Gateway Service
Posts booking, reminder and cancellation messages to the WhatsApp gateway
"""

import logging
from enum import Enum
from typing import Optional

import httpx
from pydantic import BaseModel

from ..config import WHATSAPP_BASE_URL, WHATSAPP_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


class NotificationKind(str, Enum):
    BOOKING_CREATED = "booking-created"
    REMINDER = "reminder"
    CANCELLATION = "cancellation"


ENDPOINTS = {
    NotificationKind.BOOKING_CREATED: "/agendamento",
    NotificationKind.REMINDER: "/lembrete",
    NotificationKind.CANCELLATION: "/cancelamento",
}


class NotificationPayload(BaseModel):
    """Flat message body understood by the gateway"""

    phone: str  # digits only, no leading "+"
    clientName: str
    date: str  # dd/MM/yyyy
    time: str  # HH:mm
    serviceNames: str
    tenantId: str
    amount: str  # "R$ 12,50"


class WhatsAppSender:
    """
    Sends notifications over HTTP

    Args:
        base_url: Gateway base URL, endpoints are appended per notification kind
        timeout: Request timeout in seconds
        transport: Optional httpx transport (tests inject httpx.MockTransport)
    """

    def __init__(
        self,
        base_url: str = WHATSAPP_BASE_URL,
        timeout: float = WHATSAPP_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def send(self, kind: NotificationKind, payload: NotificationPayload) -> bool:
        """
        Post one message

        Returns:
            True when the gateway accepted the message, False on transport errors or non-2xx replies
        """
        url = f"{self.base_url}{ENDPOINTS[kind]}"

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(url, json=payload.model_dump())
        except httpx.HTTPError as e:
            logger.error(f"❌ WhatsApp {kind.value} to {payload.phone} failed: {e}")
            return False

        if response.status_code >= 400:
            logger.error(
                f"❌ WhatsApp gateway rejected {kind.value} for {payload.phone}: "
                f"{response.status_code} {response.text[:200]}"
            )
            return False

        logger.info(f"📱 WhatsApp {kind.value} sent to {payload.clientName} ({payload.phone})")
        return True
