from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Table,
    Time,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

# Which services each professional is qualified to perform
professional_services = Table(
    "professional_services",
    Base.metadata,
    Column("professional_id", Integer, ForeignKey("professionals.id"), primary_key=True),
    Column("service_id", Integer, ForeignKey("services.id"), primary_key=True),
)

# Services booked within an appointment
appointment_services = Table(
    "appointment_services",
    Base.metadata,
    Column("appointment_id", Integer, ForeignKey("appointments.id"), primary_key=True),
    Column("service_id", Integer, ForeignKey("services.id"), primary_key=True),
)


class Tenant(Base):
    """A salon account. Its key is what clients send in the X-Tenant-Id header."""

    __tablename__ = "tenants"

    id = Column(Integer, primary_key=True, index=True)
    tenant_key = Column(String(50), unique=True, index=True, nullable=False)
    business_name = Column(String(255), nullable=False)
    contact_email = Column(String(255), nullable=True)
    contact_phone = Column(String(20), nullable=True)
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    professionals = relationship("Professional", back_populates="tenant")


class Professional(Base):
    __tablename__ = "professionals"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String(50), ForeignKey("tenants.tenant_key"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)
    active = Column(Boolean, default=True, nullable=False)  # Inactive professionals take no bookings
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    tenant = relationship("Tenant", back_populates="professionals")
    services = relationship(
        "Service", secondary=professional_services, back_populates="professionals", order_by="Service.id"
    )


class Service(Base):
    """A bookable service with its duration in minutes and its price."""

    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String(50), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    duration = Column(Integer, nullable=False)  # minutes
    price = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime, server_default=func.now())

    professionals = relationship(
        "Professional", secondary=professional_services, back_populates="services"
    )


class WorkingHours(Base):
    """
    Working hours for a whole tenant (professional_id is NULL) or for one professional.
    Absence of a row means the built-in default applies; the default is never stored.
    """

    __tablename__ = "working_hours"
    __table_args__ = (UniqueConstraint("tenant_id", "professional_id", name="uq_working_hours_scope"),)

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String(50), nullable=False, index=True)
    professional_id = Column(Integer, ForeignKey("professionals.id"), nullable=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    slot_interval_minutes = Column(Integer, nullable=False, default=30)
    active = Column(Boolean, default=True, nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class BlockedDay(Base):
    """Whole-day closure: either a specific date or a weekday that repeats every week."""

    __tablename__ = "blocked_days"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String(50), nullable=False, index=True)
    specific_date = Column(Date, nullable=True, index=True)
    day_of_week = Column(Integer, nullable=True)  # 0=Monday ... 6=Sunday
    recurring = Column(Boolean, default=False, nullable=False)
    reason = Column(String(255), nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class BlockedTimeSlot(Base):
    """Partial-day block [start_time, end_time) such as a lunch break or a meeting."""

    __tablename__ = "blocked_time_slots"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String(50), nullable=False, index=True)
    professional_id = Column(Integer, ForeignKey("professionals.id"), nullable=True)  # NULL = whole tenant
    specific_date = Column(Date, nullable=True, index=True)
    day_of_week = Column(Integer, nullable=True)  # 0=Monday ... 6=Sunday
    recurring = Column(Boolean, default=False, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    reason = Column(String(255), nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String(50), nullable=False, index=True)
    professional_id = Column(Integer, ForeignKey("professionals.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)  # start_time + sum of service durations
    client_name = Column(String(255), nullable=False)
    client_phone = Column(String(20), nullable=False, index=True)
    reminder_sent = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    professional = relationship("Professional")
    services = relationship("Service", secondary=appointment_services, order_by="Service.id")

    @property
    def professional_name(self):
        return self.professional.name if self.professional else None

    @property
    def total_price(self) -> float:
        return sum(s.price or 0.0 for s in self.services)
