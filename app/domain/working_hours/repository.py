"""Working hours repository - Database operations for configured schedules"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import WorkingHours


class WorkingHoursRepository:
    @staticmethod
    def get(db: Session, tenant_id: str, professional_id: Optional[int] = None) -> Optional[WorkingHours]:
        """Row for exactly this scope; professional_id=None is the tenant-wide row"""
        query = db.query(WorkingHours).filter(
            WorkingHours.tenant_id == tenant_id, WorkingHours.active.is_(True)
        )
        if professional_id is None:
            query = query.filter(WorkingHours.professional_id.is_(None))
        else:
            query = query.filter(WorkingHours.professional_id == professional_id)
        return query.first()

    @staticmethod
    def save(db: Session, working_hours: WorkingHours) -> WorkingHours:
        db.add(working_hours)
        db.commit()
        db.refresh(working_hours)
        return working_hours

    @staticmethod
    def delete(db: Session, working_hours: WorkingHours) -> None:
        db.delete(working_hours)
        db.commit()
