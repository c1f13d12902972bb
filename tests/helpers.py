"""Shared fixtures: in-memory database, seeded salon and a recording notification sender"""

import os
import unittest
from datetime import date, time

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Booking locks fall back to process-local locks without Redis settings
os.environ.pop("REDIS_URL", None)
os.environ.pop("REDIS_HOST", None)

from app import models  # noqa: E402,F401
from app.database import Base  # noqa: E402
from app.domain.appointments.repository import AppointmentRepository  # noqa: E402
from app.domain.catalog.repository import QualificationRepository, ServiceRepository  # noqa: E402
from app.domain.tenants.repository import ProfessionalRepository, TenantRepository  # noqa: E402

# A Monday far enough ahead that "future" checks never flip during a test run
MONDAY = date(2030, 3, 4)


def make_engine(url: str = "sqlite://"):
    if url == "sqlite://":
        engine = create_engine(url, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    else:
        engine = create_engine(url, connect_args={"check_same_thread": False})
    Base.metadata.create_all(engine)
    return engine


class RecordingSender:
    """Stands in for the WhatsApp gateway"""

    def __init__(self, deliver: bool = True, raise_error: bool = False):
        self.deliver = deliver
        self.raise_error = raise_error
        self.sent = []

    def send(self, kind, payload):
        if self.raise_error:
            raise RuntimeError("gateway unreachable")
        self.sent.append((kind, payload))
        return self.deliver

    def kinds(self):
        return [kind for kind, _ in self.sent]


class SalonTestCase(unittest.TestCase):
    """Seeds tenant "kc" with professional Ana qualified for lash lifting (60 min) and brow design (30 min)"""

    database_url = "sqlite://"

    def setUp(self):
        self.engine = make_engine(self.database_url)
        self.Session = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)
        self.db = self.Session()
        self.sender = RecordingSender()
        self.day = MONDAY

        self.tenant = TenantRepository.create(
            self.db, tenant_key="kc", business_name="KC Lash Studio", active=True
        )
        self.professional = ProfessionalRepository.create(self.db, "kc", name="Ana", active=True)
        self.lash = ServiceRepository.create(self.db, "kc", name="Lash lifting", duration=60, price=120.0)
        self.brow = ServiceRepository.create(self.db, "kc", name="Brow design", duration=30, price=50.5)
        QualificationRepository.replace_links(self.db, self.professional, [self.lash, self.brow])

    def tearDown(self):
        self.db.close()
        Base.metadata.drop_all(self.engine)
        self.engine.dispose()

    def add_appointment(self, start, end, services=None, day=None, client="Maria", phone="+5511999990000",
                        tenant_id="kc", professional=None):
        """Insert straight into the ledger, bypassing booking validation"""
        professional = professional or self.professional
        return AppointmentRepository.create(
            self.db,
            services if services is not None else [self.brow],
            tenant_id=tenant_id,
            professional_id=professional.id,
            date=day or self.day,
            start_time=start,
            end_time=end,
            client_name=client,
            client_phone=phone,
            reminder_sent=False,
        )


def hm(value: str) -> time:
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))
