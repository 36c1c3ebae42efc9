from datetime import datetime
from enum import Enum as PyEnum
from sqlalchemy import DateTime, Enum, ForeignKey, Integer, Numeric, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ..session import Base


class FieldStatus(str, PyEnum):
    available = "available"
    maintenance = "maintenance"
    blocked = "blocked"


class Field(Base):
    __tablename__ = "fields"
    __table_args__ = (
        UniqueConstraint("complex_id", "name", name="uq_field_complex_name"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    complex_id: Mapped[int] = mapped_column(ForeignKey("complexes.id", ondelete="CASCADE"))
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    type: Mapped[str | None] = mapped_column(String(64))
    price: Mapped[float] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[FieldStatus] = mapped_column(Enum(FieldStatus), default=FieldStatus.available)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    complex = relationship("Complex", back_populates="fields")
    bookings = relationship("Booking", back_populates="field")
