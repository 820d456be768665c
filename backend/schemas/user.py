import re
from datetime import datetime
from pydantic import BaseModel, Field, ValidationInfo, field_validator
from typing import Optional

PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 40

# ASCII only: local-part @ label(.label)*.tld, no commas, no trailing dot
EMAIL_REGEX = re.compile(r"[\w+\-.]+@[a-z\d\-]+(\.[a-z\d\-]+)*\.[a-z]+", re.IGNORECASE | re.ASCII)


def is_valid_email(value: str) -> bool:
    return EMAIL_REGEX.fullmatch(value) is not None


def _require_text(value: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError("can't be blank")
    return value


def _check_email(value: str) -> str:
    value = _require_text(value)
    if not is_valid_email(value):
        raise ValueError("is invalid")
    return value


def _check_password(value: str) -> str:
    if not value:
        raise ValueError("can't be blank")
    if len(value) < PASSWORD_MIN_LENGTH:
        raise ValueError(f"is too short (minimum is {PASSWORD_MIN_LENGTH} characters)")
    if len(value) > PASSWORD_MAX_LENGTH:
        raise ValueError(f"is too long (maximum is {PASSWORD_MAX_LENGTH} characters)")
    return value


def _check_confirmation(value: Optional[str], info: ValidationInfo) -> Optional[str]:
    # A failed password is already reported under its own key
    if "password" not in info.data:
        return value
    password = info.data["password"]
    if password is not None and value != password:
        raise ValueError("doesn't match password")
    return value


# Schema for account registration; every field is checked so all problems surface together
class UserCreate(BaseModel):
    first_name: str
    last_name: str
    email: str
    password: str
    password_confirmation: str

    @field_validator("first_name", "last_name")
    @classmethod
    def names_not_blank(cls, value):
        return _require_text(value)

    @field_validator("email")
    @classmethod
    def email_format(cls, value):
        return _check_email(value)

    @field_validator("password")
    @classmethod
    def password_length(cls, value):
        return _check_password(value)

    @field_validator("password_confirmation")
    @classmethod
    def confirmation_matches(cls, value, info: ValidationInfo):
        return _check_confirmation(value, info)


# Schema for partial profile updates; a new password needs its confirmation
class UserUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    password_confirmation: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("first_name", "last_name")
    @classmethod
    def names_not_blank(cls, value):
        return None if value is None else _require_text(value)

    @field_validator("email")
    @classmethod
    def email_format(cls, value):
        return None if value is None else _check_email(value)

    @field_validator("password")
    @classmethod
    def password_length(cls, value):
        return None if value is None else _check_password(value)

    @field_validator("password_confirmation")
    @classmethod
    def confirmation_matches(cls, value, info: ValidationInfo):
        return _check_confirmation(value, info)


# Raw request bodies; field rules are applied by the account service so every error is reported at once
class UserRegistration(BaseModel):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    password: str = ""
    password_confirmation: str = ""


class ProfileUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    password_confirmation: Optional[str] = None


# Schema for user authentication credentials
class UserLogin(BaseModel):
    email: str
    password: str


# Output schema for user profile details
class UserResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    admin: bool
    primary: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Schema for JWT authentication token response
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
