# backend/routes/logs.py
from datetime import date, datetime, time, timedelta
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from database import get_db
from models.log import Log
from models.users import User
from utils.tokenJWT import admin_required

router = APIRouter(prefix="/logs", tags=["Logs"])


class AuditEntry(BaseModel):
    id: int
    ts: datetime
    user_id: Optional[int] = None
    action: str
    resource: str
    status: str
    ip: Optional[str] = None
    meta: Optional[Any] = None

    class Config:
        from_attributes = True


class AuditPage(BaseModel):
    items: List[AuditEntry]
    total: int
    page: int
    page_size: int


# Browse the audit trail (Admin only)
@router.get("", response_model=AuditPage)
def get_logs(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    action: Optional[str] = Query(None, description="Event name, e.g. LOGIN or TOGGLE_FLAG"),
    resource: Optional[str] = Query(None, description="auth, users or shifts"),
    status: Optional[str] = Query(None, description="SUCCESS or FAIL"),
    actor_id: Optional[int] = Query(None, description="User who performed the action"),
    target_id: Optional[int] = Query(None, description="Account affected by an admin action"),
    shift_id: Optional[int] = Query(None, description="Shift created or reassigned"),
    date_from: Optional[date] = Query(None, description="First day included (YYYY-MM-DD)"),
    date_to: Optional[date] = Query(None, description="Last day included (YYYY-MM-DD)"),
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    query = db.query(Log)

    if action:
        query = query.filter(Log.action == action.upper())
    if resource:
        query = query.filter(Log.resource == resource.lower())
    if status:
        query = query.filter(Log.status == status.upper())
    if actor_id is not None:
        query = query.filter(Log.user_id == actor_id)

    # Ids recorded in the event metadata by the users and shifts routes
    if target_id is not None:
        query = query.filter(Log.meta["target_id"].as_integer() == target_id)
    if shift_id is not None:
        query = query.filter(Log.meta["shift_id"].as_integer() == shift_id)

    if date_from:
        query = query.filter(Log.ts >= datetime.combine(date_from, time.min))
    if date_to:
        query = query.filter(Log.ts < datetime.combine(date_to + timedelta(days=1), time.min))

    query = query.order_by(Log.ts.desc(), Log.id.desc())

    total = query.count()
    entries = query.offset((page - 1) * page_size).limit(page_size).all()

    return {"items": entries, "total": total, "page": page, "page_size": page_size}
