# backend/routes/auth.py
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.orm import Session
from utils.tokenJWT import create_access_token, get_current_user
from utils.audit import write_log
from models import users as models
from schemas import user as schemas
from schemas.shift import ShiftResponse
from services import accounts
from services.shifts import shifts_for_user
from database import get_db

router = APIRouter(tags=["Auth"])


def _client_ip(request: Request):
    return request.client.host if request and request.client else None


# Register a new user
@router.post("/register", response_model=schemas.UserResponse, status_code=status.HTTP_201_CREATED)
def register(user: schemas.UserRegistration, request: Request, db: Session = Depends(get_db)):
    try:
        new_user = accounts.create_user(db, user.model_dump())
    except accounts.UserValidationError as e:
        write_log(
            db,
            user_id=None,
            action="REGISTER",
            resource="auth",
            status="FAIL",
            ip=_client_ip(request),
            meta={"email": user.email, "errors": e.errors},
        )
        raise HTTPException(status_code=422, detail={"errors": e.errors})

    # Log successful registration event
    write_log(
        db,
        user_id=new_user.id,
        action="REGISTER",
        resource="auth",
        status="SUCCESS",
        ip=_client_ip(request),
        meta={"email": new_user.email},
    )

    return new_user


# Authenticate user and issue JWT token
@router.post("/login", response_model=schemas.Token)
def login(payload: schemas.UserLogin, request: Request, db: Session = Depends(get_db)):
    db_user = accounts.authenticate(db, payload.email, payload.password)

    # Same response for unknown email and wrong password
    if db_user is None:
        write_log(db, user_id=None, action="LOGIN", resource="auth",
                  status="FAIL", ip=_client_ip(request), meta={"email": payload.email})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    # Generate access token
    access_token = create_access_token(data={"sub": db_user.email})

    # Log successful login event
    write_log(db, user_id=db_user.id, action="LOGIN", resource="auth",
              status="SUCCESS", ip=_client_ip(request), meta={"email": db_user.email})

    return {"access_token": access_token, "token_type": "bearer"}


# Retrieve current authenticated user details
@router.get("/me", response_model=schemas.UserResponse)
def me(current_user: models.User = Depends(get_current_user)):
    return current_user


# Update own profile or password
@router.put("/me", response_model=schemas.UserResponse)
def update_me(
    payload: schemas.ProfileUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    try:
        user = accounts.update_user(db, current_user, payload.model_dump(exclude_unset=True))
    except accounts.UserValidationError as e:
        raise HTTPException(status_code=422, detail={"errors": e.errors})

    write_log(db, user_id=user.id, action="UPDATE_PROFILE", resource="users",
              status="SUCCESS", ip=_client_ip(request),
              meta={"fields": sorted(payload.model_dump(exclude_unset=True, exclude={"password", "password_confirmation"}))})
    return user


# Shifts taken by the current user as primary or secondary
@router.get("/me/shifts", response_model=List[ShiftResponse])
def my_shifts(db: Session = Depends(get_db), current_user: models.User = Depends(get_current_user)):
    return shifts_for_user(db, current_user)
