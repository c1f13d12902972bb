"""Block repository - Database operations for day closures and interval blocks"""

from datetime import date, time
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from ...models import BlockedDay, BlockedTimeSlot


class BlockedDayRepository:
    """Repository for whole-day blocks"""

    @staticmethod
    def get_by_id(db: Session, block_id: int) -> Optional[BlockedDay]:
        return db.query(BlockedDay).filter(BlockedDay.id == block_id).first()

    @staticmethod
    def find_specific(db: Session, tenant_id: str, day: date) -> Optional[BlockedDay]:
        return (
            db.query(BlockedDay)
            .filter(
                BlockedDay.tenant_id == tenant_id,
                BlockedDay.recurring.is_(False),
                BlockedDay.specific_date == day,
            )
            .first()
        )

    @staticmethod
    def find_recurring(db: Session, tenant_id: str, day_of_week: int) -> Optional[BlockedDay]:
        return (
            db.query(BlockedDay)
            .filter(
                BlockedDay.tenant_id == tenant_id,
                BlockedDay.recurring.is_(True),
                BlockedDay.day_of_week == day_of_week,
            )
            .first()
        )

    @staticmethod
    def get_all(db: Session, tenant_id: str, recurring: Optional[bool] = None) -> list[BlockedDay]:
        query = db.query(BlockedDay).filter(BlockedDay.tenant_id == tenant_id)
        if recurring is not None:
            query = query.filter(BlockedDay.recurring.is_(recurring))
        return query.order_by(BlockedDay.recurring, BlockedDay.specific_date, BlockedDay.day_of_week).all()

    @staticmethod
    def create(db: Session, **block_data) -> BlockedDay:
        block = BlockedDay(**block_data)
        db.add(block)
        db.commit()
        db.refresh(block)
        return block

    @staticmethod
    def delete(db: Session, block: BlockedDay) -> None:
        db.delete(block)
        db.commit()


def _applies_to(query: Query, professional_id: Optional[int]) -> Query:
    """Tenant-wide blocks always apply; a professional also gets their own"""
    if professional_id is None:
        return query.filter(BlockedTimeSlot.professional_id.is_(None))
    return query.filter(
        or_(
            BlockedTimeSlot.professional_id.is_(None),
            BlockedTimeSlot.professional_id == professional_id,
        )
    )


def _same_scope(query: Query, professional_id: Optional[int]) -> Query:
    if professional_id is None:
        return query.filter(BlockedTimeSlot.professional_id.is_(None))
    return query.filter(BlockedTimeSlot.professional_id == professional_id)


class BlockedTimeSlotRepository:
    """Repository for partial-day blocks"""

    @staticmethod
    def get_by_id(db: Session, block_id: int) -> Optional[BlockedTimeSlot]:
        return db.query(BlockedTimeSlot).filter(BlockedTimeSlot.id == block_id).first()

    @staticmethod
    def get_specific_for_date(
        db: Session, tenant_id: str, day: date, professional_id: Optional[int] = None
    ) -> list[BlockedTimeSlot]:
        query = db.query(BlockedTimeSlot).filter(
            BlockedTimeSlot.tenant_id == tenant_id,
            BlockedTimeSlot.recurring.is_(False),
            BlockedTimeSlot.specific_date == day,
        )
        return _applies_to(query, professional_id).all()

    @staticmethod
    def get_recurring_for_weekday(
        db: Session, tenant_id: str, day_of_week: int, professional_id: Optional[int] = None
    ) -> list[BlockedTimeSlot]:
        query = db.query(BlockedTimeSlot).filter(
            BlockedTimeSlot.tenant_id == tenant_id,
            BlockedTimeSlot.recurring.is_(True),
            BlockedTimeSlot.day_of_week == day_of_week,
        )
        return _applies_to(query, professional_id).all()

    @staticmethod
    def find_conflicting_on_date(
        db: Session, tenant_id: str, day: date, start: time, end: time, professional_id: Optional[int]
    ) -> list[BlockedTimeSlot]:
        query = db.query(BlockedTimeSlot).filter(
            BlockedTimeSlot.tenant_id == tenant_id,
            BlockedTimeSlot.recurring.is_(False),
            BlockedTimeSlot.specific_date == day,
            BlockedTimeSlot.start_time < end,
            BlockedTimeSlot.end_time > start,
        )
        return _same_scope(query, professional_id).all()

    @staticmethod
    def find_conflicting_recurring(
        db: Session, tenant_id: str, day_of_week: int, start: time, end: time, professional_id: Optional[int]
    ) -> list[BlockedTimeSlot]:
        query = db.query(BlockedTimeSlot).filter(
            BlockedTimeSlot.tenant_id == tenant_id,
            BlockedTimeSlot.recurring.is_(True),
            BlockedTimeSlot.day_of_week == day_of_week,
            BlockedTimeSlot.start_time < end,
            BlockedTimeSlot.end_time > start,
        )
        return _same_scope(query, professional_id).all()

    @staticmethod
    def get_all(db: Session, tenant_id: str, recurring: Optional[bool] = None) -> list[BlockedTimeSlot]:
        query = db.query(BlockedTimeSlot).filter(BlockedTimeSlot.tenant_id == tenant_id)
        if recurring is not None:
            query = query.filter(BlockedTimeSlot.recurring.is_(recurring))
        return query.order_by(
            BlockedTimeSlot.specific_date, BlockedTimeSlot.day_of_week, BlockedTimeSlot.start_time
        ).all()

    @staticmethod
    def create(db: Session, **block_data) -> BlockedTimeSlot:
        block = BlockedTimeSlot(**block_data)
        db.add(block)
        db.commit()
        db.refresh(block)
        return block

    @staticmethod
    def delete(db: Session, block: BlockedTimeSlot) -> None:
        db.delete(block)
        db.commit()
