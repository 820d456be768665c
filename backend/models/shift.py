from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from database import Base

# Category of a shift (e.g. "Night", "Weekend on-call")
class ShiftType(Base):
    __tablename__ = "shift_types"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(String, nullable=True)

    shifts = relationship("Shift", back_populates="shift_type")


# A scheduled shift with an optional primary and an optional secondary assignee
class Shift(Base):
    __tablename__ = "shifts"

    id = Column(Integer, primary_key=True, index=True)
    shift_type_id = Column(Integer, ForeignKey("shift_types.id"), nullable=False)
    start = Column(DateTime(timezone=True), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Assignees
    primary_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    secondary_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    shift_type = relationship("ShiftType", back_populates="shifts")
    primary = relationship("User", foreign_keys=[primary_id])
    secondary = relationship("User", foreign_keys=[secondary_id])

    def __repr__(self) -> str:
        return f"<Shift(id={self.id}, start={self.start}, primary_id={self.primary_id}, secondary_id={self.secondary_id})>"
