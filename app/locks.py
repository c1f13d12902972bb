"""
Booking locks - serialize commits per (professional, date)

Uses a Redis lock when REDIS_URL or REDIS_HOST is configured so several API
workers share one lock. Without Redis a process-local lock is used, which is
enough for a single process deployment and for tests.
"""

import logging
import os
from contextlib import contextmanager
from datetime import date
from threading import Lock
from typing import Optional

import redis
from redis.exceptions import LockNotOwnedError

from .config import BOOKING_LOCK_TIMEOUT_SECONDS
from .errors import BookingError

logger = logging.getLogger(__name__)

redis_client: Optional[redis.Redis] = None

# Format: {"booking:<professional_id>:<date>": [Lock, threads holding or waiting]}
local_locks: dict[str, list] = {}
local_locks_guard = Lock()


def redis_configured() -> bool:
    return bool(os.getenv("REDIS_URL") or os.getenv("REDIS_HOST"))


def get_redis_client() -> redis.Redis:
    """Get or create the Redis client used for distributed locks"""
    global redis_client

    if redis_client is None:
        redis_url = os.getenv("REDIS_URL")

        if redis_url:
            redis_client = redis.from_url(
                redis_url,
                socket_connect_timeout=15,
                socket_timeout=30,
                retry_on_timeout=True,
                health_check_interval=30,
            )
        else:
            redis_client = redis.Redis(
                host=os.getenv("REDIS_HOST", "localhost"),
                port=int(os.getenv("REDIS_PORT", "6379")),
                password=os.getenv("REDIS_PASSWORD"),
                db=int(os.getenv("REDIS_DB", "0")),
                ssl=os.getenv("REDIS_SSL", "false").lower() == "true",
                socket_connect_timeout=15,
                socket_timeout=30,
                retry_on_timeout=True,
            )
        logger.info("🔒 Redis client initialized for booking locks")

    return redis_client


def lock_key(professional_id: int, day: date) -> str:
    return f"booking:{professional_id}:{day.isoformat()}"


def _checkout_local_lock(key: str) -> list:
    """Entry for ``key`` with its user count raised; created on first use"""
    with local_locks_guard:
        entry = local_locks.get(key)
        if entry is None:
            entry = [Lock(), 0]
            local_locks[key] = entry
        entry[1] += 1
        return entry


def _return_local_lock(key: str, entry: list) -> None:
    """Drop the entry once no thread holds or waits for it"""
    with local_locks_guard:
        entry[1] -= 1
        if entry[1] == 0 and local_locks.get(key) is entry:
            del local_locks[key]


@contextmanager
def _redis_lock(key: str, timeout: float):
    lock = get_redis_client().lock(key, timeout=timeout, blocking_timeout=timeout)
    if not lock.acquire():
        logger.warning(f"⚠️ Could not lock {key} within {timeout}s")
        raise BookingError.business("Calendar is busy, please try again")

    try:
        yield
    finally:
        try:
            lock.release()
        except LockNotOwnedError:
            # Lease expired while held
            logger.warning(f"⚠️ Lock {key} expired before release (lease {timeout}s)")


@contextmanager
def _local_lock(key: str, timeout: float):
    entry = _checkout_local_lock(key)
    try:
        if not entry[0].acquire(timeout=timeout):
            logger.warning(f"⚠️ Could not lock {key} within {timeout}s")
            raise BookingError.business("Calendar is busy, please try again")
        try:
            yield
        finally:
            entry[0].release()
    finally:
        _return_local_lock(key, entry)


@contextmanager
def booking_lock(professional_id: int, day: date, timeout: float = BOOKING_LOCK_TIMEOUT_SECONDS):
    """
    Hold the calendar of one professional on one date

    Raises:
        BookingError: BUSINESS when the lock cannot be acquired within ``timeout``
    """
    key = lock_key(professional_id, day)
    manager = _redis_lock if redis_configured() else _local_lock
    with manager(key, timeout):
        yield
