# backend/routes/shifts.py
from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database import get_db
from models.shift import ShiftType
from models.users import User
from schemas.shift import (
    ShiftAssignment,
    ShiftCreate,
    ShiftList,
    ShiftResponse,
    ShiftSlot,
    ShiftTypeCreate,
    ShiftTypeResponse,
)
from services import accounts
from services import shifts as shift_service
from utils.audit import write_log
from utils.tokenJWT import admin_required, get_current_user

router = APIRouter(tags=["Shifts"])


def _user_or_404(db: Session, user_id: Optional[int]) -> Optional[User]:
    if user_id is None:
        return None
    user = accounts.get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"User {user_id} not found")
    return user


# Create a shift type (Admin only)
@router.post("/shift-types", response_model=ShiftTypeResponse, status_code=status.HTTP_201_CREATED)
def create_shift_type(
    payload: ShiftTypeCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    try:
        return shift_service.create_shift_type(db, payload.name, payload.description)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Shift type already exists")


@router.get("/shift-types", response_model=List[ShiftTypeResponse])
def list_shift_types(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return db.query(ShiftType).order_by(ShiftType.name.asc()).all()


# Schedule a new shift (Admin only)
@router.post("/shifts", response_model=ShiftResponse, status_code=status.HTTP_201_CREATED)
def create_shift(
    payload: ShiftCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    shift_type = shift_service.get_shift_type(db, payload.shift_type_id)
    if not shift_type:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Shift type not found")

    primary = _user_or_404(db, payload.primary_id)
    secondary = _user_or_404(db, payload.secondary_id)

    shift = shift_service.create_shift(db, shift_type, payload.start, primary=primary, secondary=secondary)
    write_log(db, user_id=current_user.id, action="CREATE_SHIFT", resource="shifts", status="SUCCESS",
              ip=request.client.host if request.client else None,
              meta={"shift_id": shift.id, "primary_id": shift.primary_id, "secondary_id": shift.secondary_id})
    return shift


# List shifts, optionally within a date range
@router.get("/shifts", response_model=ShiftList)
def list_shifts(
    date_from: Optional[datetime] = Query(None, description="Start from (ISO 8601)"),
    date_to: Optional[datetime] = Query(None, description="Start until (ISO 8601)"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    items = shift_service.list_shifts(db, date_from=date_from, date_to=date_to)
    return {"items": items, "total": len(items)}


# Assign or release the primary/secondary slot of a shift (Admin only)
@router.put("/shifts/{shift_id}/{slot}", response_model=ShiftResponse)
def assign_shift(
    shift_id: int,
    slot: ShiftSlot,
    payload: ShiftAssignment,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    shift = shift_service.get_shift(db, shift_id)
    if not shift:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Shift not found")

    user = _user_or_404(db, payload.user_id)
    shift = shift_service.assign(db, shift, slot, user)
    write_log(db, user_id=current_user.id, action="ASSIGN_SHIFT", resource="shifts", status="SUCCESS",
              ip=request.client.host if request.client else None,
              meta={"shift_id": shift.id, "slot": slot, "assignee_id": payload.user_id})
    return shift
