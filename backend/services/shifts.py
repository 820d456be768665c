# services/shifts.py
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from models.shift import Shift, ShiftType
from models.users import User

logger = logging.getLogger(__name__)

SLOTS = ("primary", "secondary")


def shifts_for_user(db: Session, user: User) -> List[Shift]:
    """Union of the shifts a user holds as primary or as secondary assignee."""
    return (
        db.query(Shift)
        .filter(or_(Shift.primary_id == user.id, Shift.secondary_id == user.id))
        .order_by(Shift.start.asc(), Shift.id.asc())
        .all()
    )


def create_shift_type(db: Session, name: str, description: Optional[str] = None) -> ShiftType:
    shift_type = ShiftType(name=name.strip(), description=description)
    db.add(shift_type)
    db.commit()
    db.refresh(shift_type)
    return shift_type


def get_shift_type(db: Session, shift_type_id: int) -> Optional[ShiftType]:
    return db.query(ShiftType).filter(ShiftType.id == shift_type_id).first()


def create_shift(
    db: Session,
    shift_type: ShiftType,
    start: datetime,
    primary: Optional[User] = None,
    secondary: Optional[User] = None,
) -> Shift:
    shift = Shift(
        shift_type_id=shift_type.id,
        start=start,
        primary_id=primary.id if primary else None,
        secondary_id=secondary.id if secondary else None,
    )
    db.add(shift)
    db.commit()
    db.refresh(shift)
    logger.info("created shift id=%s start=%s", shift.id, shift.start)
    return shift


def get_shift(db: Session, shift_id: int) -> Optional[Shift]:
    return db.query(Shift).filter(Shift.id == shift_id).first()


def assign(db: Session, shift: Shift, slot: str, user: Optional[User]) -> Shift:
    """Put ``user`` into the primary or secondary slot; ``None`` releases it."""
    if slot not in SLOTS:
        raise ValueError(f"Unknown slot '{slot}', expected one of {', '.join(SLOTS)}")
    setattr(shift, f"{slot}_id", user.id if user else None)
    db.commit()
    db.refresh(shift)
    return shift


def list_shifts(
    db: Session,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
) -> List[Shift]:
    query = db.query(Shift).options(joinedload(Shift.shift_type))
    if date_from:
        query = query.filter(Shift.start >= date_from)
    if date_to:
        query = query.filter(Shift.start <= date_to)
    return query.order_by(Shift.start.asc(), Shift.id.asc()).all()
