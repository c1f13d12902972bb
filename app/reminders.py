"""
Appointment reminders

``run_reminder_sweep`` is one tick: for every active tenant, find appointments
whose (date, start) falls inside [now, now + look-ahead] and whose reminder has
not been sent, send it, and flag the appointment only after a successful send.
A failed send leaves the flag down so the next tick retries it.

``reminder_loop`` is the ticker the API process runs in its lifespan; the ARQ
worker calls ``run_scheduled_sweep`` from a cron job instead.
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from .config import REMINDER_INTERVAL_SECONDS, REMINDER_LOOKAHEAD_HOURS
from .database import SessionLocal
from .domain.appointments.repository import AppointmentRepository
from .domain.scheduling.time_calculator import window
from .domain.tenants.repository import TenantRepository
from .services.notification_service import get_default_sender, notify
from .services.whatsapp_service import NotificationKind

logger = logging.getLogger(__name__)


def run_reminder_sweep(
    db: Session,
    sender=None,
    now: Optional[datetime] = None,
    lookahead: Optional[timedelta] = None,
) -> dict:
    """
    Send due reminders once

    Args:
        db: Database session
        sender: Notification sender, defaults to the WhatsApp gateway
        now: Reference instant, defaults to the local wall clock
        lookahead: Window length, defaults to REMINDER_LOOKAHEAD_HOURS

    Returns:
        dict with tenants, candidates, sent and failed counts
    """
    sender = sender or get_default_sender()
    now = now or datetime.now()
    lookahead = lookahead if lookahead is not None else timedelta(hours=REMINDER_LOOKAHEAD_HOURS)
    (now_date, now_time), (limit_date, limit_time) = window(now, lookahead)

    repo = AppointmentRepository()
    tenant_keys = TenantRepository.get_active_keys(db)

    candidates = 0
    sent = 0
    failed = 0

    for tenant_id in tenant_keys:
        appointments = repo.find_appointments_to_remind(
            db, tenant_id, now_date, now_time, limit_date, limit_time
        )
        candidates += len(appointments)

        for appointment in appointments:
            try:
                if not notify(sender, NotificationKind.REMINDER, appointment):
                    failed += 1
                    continue
                repo.mark_reminder_sent(db, appointment)
                sent += 1
            except Exception as e:
                db.rollback()
                failed += 1
                logger.error(f"❌ Failed to record reminder for appointment {appointment.id}: {e}")
                continue

    logger.info(
        f"🔔 Reminder sweep: {len(tenant_keys)} tenants, {candidates} due, {sent} sent, {failed} failed"
    )
    return {"tenants": len(tenant_keys), "candidates": candidates, "sent": sent, "failed": failed}


def run_scheduled_sweep(sender=None) -> dict:
    """One tick with its own session, for timers and cron jobs"""
    db = SessionLocal()
    try:
        return run_reminder_sweep(db, sender=sender)
    finally:
        db.close()


async def reminder_loop(
    stop_event: asyncio.Event, interval_seconds: float = REMINDER_INTERVAL_SECONDS, sender=None
) -> None:
    """Run a sweep every ``interval_seconds`` until ``stop_event`` is set"""
    logger.info(f"🔔 Reminder loop started (every {interval_seconds}s)")

    while not stop_event.is_set():
        try:
            await asyncio.to_thread(run_scheduled_sweep, sender)
        except Exception as e:
            logger.error(f"❌ Reminder sweep failed: {e}")

        try:
            await asyncio.wait_for(stop_event.wait(), timeout=interval_seconds)
        except asyncio.TimeoutError:
            pass

    logger.info("🔔 Reminder loop stopped")
