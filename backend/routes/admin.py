# backend/routes/admin.py
from fastapi import APIRouter, Depends, HTTPException, status, Query, Request
from typing import List, Optional, Literal
from sqlalchemy import func
from sqlalchemy.orm import Session
from pydantic import BaseModel
from database import get_db
from models.users import User
from utils.tokenJWT import admin_required
from utils.audit import write_log
from schemas.user import UserResponse
from schemas.shift import ShiftResponse
from services import accounts
from services.shifts import shifts_for_user

router = APIRouter(tags=["Admin"])

# Schema for paginated user list response
class PaginatedUsersResponse(BaseModel):
    items: List[UserResponse]
    total: int
    page: int
    page_size: int


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = accounts.get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


# Retrieve a list of users with filtering, sorting, and pagination (Admin only)
@router.get("/users", response_model=PaginatedUsersResponse)
def get_all_users(
    q: Optional[str] = Query(None, description="Search by email"),
    last_name: Optional[str] = Query(None, description="Search by last name"),
    admin: Optional[bool] = Query(None, description="Filter by admin flag"),
    primary: Optional[bool] = Query(None, description="Filter by primary flag"),
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    sort_by: Literal["id", "email", "first_name", "last_name"] = "id",
    order: Literal["asc", "desc"] = "asc",
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required)
):
    query = db.query(User)

    # Filter by email
    if q:
        query = query.filter(func.lower(User.email).like(f"%{q.lower()}%"))

    # Filter by role flags
    if admin is not None:
        query = query.filter(User.admin == admin)
    if primary is not None:
        query = query.filter(User.primary == primary)

    # Filter by last name
    if last_name:
        query = query.filter(User.last_name.ilike(f"%{last_name}%"))

    # Apply sorting based on selected field and order
    sort_map = {
        "id": User.id,
        "email": User.email,
        "first_name": User.first_name,
        "last_name": User.last_name,
    }
    col = sort_map.get(sort_by, User.id)
    query = query.order_by(col.asc() if order == "asc" else col.desc())

    # Apply pagination
    total = query.count()
    users = query.offset((page - 1) * page_size).limit(page_size).all()

    return {
        "items": users,
        "total": total,
        "page": page,
        "page_size": page_size,
    }


# Flip the admin or primary flag of a user (Admin only)
@router.post("/users/{user_id}/toggle/{flag}", response_model=UserResponse)
def toggle_user_flag(
    user_id: int,
    flag: Literal["admin", "primary"],
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required)
):
    user = _get_user_or_404(db, user_id)

    # An admin cannot demote themselves and lock everyone out
    if flag == "admin" and user.id == current_user.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot change your own admin flag")

    accounts.toggle(db, user, flag)
    write_log(db, user_id=current_user.id, action="TOGGLE_FLAG", resource="users", status="SUCCESS",
              ip=request.client.host if request.client else None,
              meta={"target_id": user.id, "flag": flag, "value": getattr(user, flag)})
    return user


# Shifts held by a given user (Admin only)
@router.get("/users/{user_id}/shifts", response_model=List[ShiftResponse])
def get_user_shifts(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required)
):
    user = _get_user_or_404(db, user_id)
    return shifts_for_user(db, user)


# Delete a user account (Admin only)
@router.delete("/users/{user_id}")
def delete_user(
    user_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required)
):
    user = _get_user_or_404(db, user_id)

    # Prevent self-deletion
    if user.id == current_user.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot delete your own account")

    email = user.email
    accounts.delete_user(db, user)
    write_log(db, user_id=current_user.id, action="DELETE_USER", resource="users", status="SUCCESS",
              ip=request.client.host if request.client else None,
              meta={"target_id": user_id, "email": email})

    return {"message": f"User {email} deleted", "id": user_id}
