import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./salon_booking.db")

# Tenant resolution - every request carries the tenant key in this header
TENANT_HEADER = os.getenv("TENANT_HEADER", "X-Tenant-Id")

# Fallback working hours used when neither the professional nor the tenant configured any
DEFAULT_WORK_START = os.getenv("DEFAULT_WORK_START", "09:00")
DEFAULT_WORK_END = os.getenv("DEFAULT_WORK_END", "18:00")
DEFAULT_SLOT_INTERVAL_MINUTES = int(os.getenv("DEFAULT_SLOT_INTERVAL_MINUTES", "30"))
MIN_SLOT_INTERVAL_MINUTES = 1
MAX_SLOT_INTERVAL_MINUTES = 120

# Reminder sweep
REMINDER_LOOKAHEAD_HOURS = float(os.getenv("REMINDER_LOOKAHEAD_HOURS", "2"))
REMINDER_INTERVAL_SECONDS = int(os.getenv("REMINDER_INTERVAL_SECONDS", "60"))
# Disable when the ARQ worker owns the sweep
REMINDER_LOOP_ENABLED = os.getenv("REMINDER_LOOP_ENABLED", "true").lower() == "true"

# WhatsApp gateway
WHATSAPP_BASE_URL = os.getenv("WHATSAPP_BASE_URL", "http://localhost:3001/whatsapp")
WHATSAPP_TIMEOUT_SECONDS = float(os.getenv("WHATSAPP_TIMEOUT_SECONDS", "10"))
CURRENCY_PREFIX = os.getenv("CURRENCY_PREFIX", "R$")

# Per (professional, date) booking lock
BOOKING_LOCK_TIMEOUT_SECONDS = float(os.getenv("BOOKING_LOCK_TIMEOUT_SECONDS", "30"))
