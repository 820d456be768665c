from pydantic import BaseModel, Field
from typing import List, Optional, Literal
from datetime import datetime


# Input schema for a new shift category
class ShiftTypeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None


class ShiftTypeResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None

    class Config:
        from_attributes = True


# Input schema for scheduling a shift; assignees are optional user ids
class ShiftCreate(BaseModel):
    shift_type_id: int
    start: datetime
    primary_id: Optional[int] = None
    secondary_id: Optional[int] = None


# Assign or release (user_id = None) a shift slot
class ShiftAssignment(BaseModel):
    user_id: Optional[int] = None


ShiftSlot = Literal["primary", "secondary"]


# Output schema for shift details
class ShiftResponse(BaseModel):
    id: int
    shift_type_id: int
    start: datetime
    primary_id: Optional[int] = None
    secondary_id: Optional[int] = None

    class Config:
        from_attributes = True


class ShiftList(BaseModel):
    items: List[ShiftResponse]
    total: int
