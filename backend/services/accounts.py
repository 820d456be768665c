# services/accounts.py
"""
Account service.

Creation, validation, authentication and role-flag management for
:class:`models.users.User`. Every write goes through an explicit call here and
is committed before returning.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ValidationError
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.shift import Shift
from models.users import User
from schemas.user import UserCreate, UserUpdate
from utils.hashing import dummy_verify, get_password_hash, verify_password

logger = logging.getLogger(__name__)

TOGGLEABLE_FLAGS = ("admin", "primary")
DUPLICATE_EMAIL = "has already been taken"

FieldErrors = Dict[str, List[str]]
Attributes = Union[Mapping[str, Any], BaseModel]


class UserValidationError(Exception):
    """One or more account fields failed validation; nothing was persisted."""

    def __init__(self, errors: FieldErrors):
        self.errors = errors
        summary = "; ".join(f"{field} {', '.join(msgs)}" for field, msgs in errors.items())
        super().__init__(summary or "invalid account")


def _as_dict(attributes: Attributes) -> Dict[str, Any]:
    if isinstance(attributes, BaseModel):
        return attributes.model_dump(exclude_unset=True)
    return dict(attributes)


def _collect(errors: FieldErrors, exc: ValidationError) -> None:
    for err in exc.errors():
        field = str(err["loc"][0]) if err["loc"] else "__root__"
        if err["type"] == "value_error":
            message = str(err["ctx"]["error"])
        elif err["type"] == "missing":
            message = "can't be blank"
        else:
            message = err["msg"]
        errors.setdefault(field, []).append(message)


def email_taken(db: Session, email: str, exclude_id: Optional[int] = None) -> bool:
    # Fold both sides in the database so the check agrees with the lower(email) index
    query = db.query(User.id).filter(func.lower(User.email) == func.lower(email.strip()))
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return db.query(query.exists()).scalar()


def _validate(db: Session, schema, data: Dict[str, Any], exclude_id: Optional[int] = None):
    errors: FieldErrors = {}
    parsed = None
    try:
        parsed = schema.model_validate(data)
    except ValidationError as exc:
        _collect(errors, exc)

    # Uniqueness is checked even when other fields failed, so one pass reports everything
    email = data.get("email")
    if isinstance(email, str) and email.strip() and "email" not in errors:
        if email_taken(db, email, exclude_id=exclude_id):
            errors.setdefault("email", []).append(DUPLICATE_EMAIL)

    return parsed, errors


def validate_user(db: Session, attributes: Attributes, *, exclude_id: Optional[int] = None) -> FieldErrors:
    """Return every field error for a prospective account without persisting it."""
    _, errors = _validate(db, UserCreate, _as_dict(attributes), exclude_id=exclude_id)
    return errors


def _commit_or_translate(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        # Only the lower(email) index can reject an account write
        logger.warning("account write rejected by the database: %s", exc.orig)
        raise UserValidationError({"email": [DUPLICATE_EMAIL]}) from exc


def create_user(db: Session, attributes: Attributes) -> User:
    parsed, errors = _validate(db, UserCreate, _as_dict(attributes))
    if errors:
        raise UserValidationError(errors)

    user = User(
        first_name=parsed.first_name,
        last_name=parsed.last_name,
        email=parsed.email,
        password_hash=get_password_hash(parsed.password),
        admin=False,
        primary=False,
    )
    db.add(user)
    _commit_or_translate(db)
    db.refresh(user)
    logger.info("created user id=%s", user.id)
    return user


def update_user(db: Session, user: User, attributes: Attributes) -> User:
    data = {k: v for k, v in _as_dict(attributes).items() if v is not None}
    parsed, errors = _validate(db, UserUpdate, data, exclude_id=user.id)
    # A confirmation on its own would otherwise be dropped without a password change
    if "password_confirmation" in data and "password" not in data:
        errors.setdefault("password", []).append("can't be blank")
    if errors:
        raise UserValidationError(errors)

    for field in ("first_name", "last_name", "email"):
        value = getattr(parsed, field)
        if value is not None:
            setattr(user, field, value)
    if parsed.password is not None:
        user.password_hash = get_password_hash(parsed.password)

    _commit_or_translate(db)
    db.refresh(user)
    return user


def has_password(user: User, candidate: str) -> bool:
    return verify_password(candidate, user.password_hash)


def authenticate(db: Session, email: str, password: str) -> Optional[User]:
    """
    Exact, case-sensitive lookup on the stored email followed by a password check.

    Returns None for an unknown email or a wrong password alike; the unknown
    email path still runs a hash verification so both take the same time.
    """
    user = db.query(User).filter(User.email == email).first()
    if user is None:
        dummy_verify()
        return None
    if not has_password(user, password):
        return None
    return user


def toggle(db: Session, user: User, flag: str) -> User:
    if flag not in TOGGLEABLE_FLAGS:
        raise ValueError(f"Unknown flag '{flag}', expected one of {', '.join(TOGGLEABLE_FLAGS)}")
    setattr(user, flag, not getattr(user, flag))
    db.commit()
    db.refresh(user)
    logger.info("user id=%s %s=%s", user.id, flag, getattr(user, flag))
    return user


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def delete_user(db: Session, user: User) -> None:
    # Release the user's shift slots; SQLite does not apply ON DELETE SET NULL by default
    db.query(Shift).filter(Shift.primary_id == user.id).update(
        {Shift.primary_id: None}, synchronize_session=False
    )
    db.query(Shift).filter(Shift.secondary_id == user.id).update(
        {Shift.secondary_id: None}, synchronize_session=False
    )
    db.delete(user)
    db.commit()
