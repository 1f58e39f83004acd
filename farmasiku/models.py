# farmasiku/models.py
from datetime import datetime, timezone
import uuid

from sqlalchemy import (
    String,
    DateTime,
    Integer,
    Float,
    JSON,
    CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from farmasiku.db import Base


ORDER_STATUSES = (
    "pending",
    "confirmed",
    "processing",
    "shipped",
    "delivered",
    "cancelled",
)


def generate_uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserSession(Base):
    """
    One wizard run. `data` accumulates the context snapshots pushed at
    each major transition (age, body part, confirmation...).
    """
    __tablename__ = "user_sessions"

    id: Mapped[str] = mapped_column(
        String, primary_key=True, default=generate_uuid
    )
    data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )


class SymptomAssessmentRecord(Base):
    __tablename__ = "symptom_assessments"

    id: Mapped[str] = mapped_column(
        String, primary_key=True, default=generate_uuid
    )
    session_id: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    user_age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    body_part: Mapped[str | None] = mapped_column(String, nullable=True)
    symptom: Mapped[str] = mapped_column(String, nullable=False, index=True)
    assessment: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(
        String, primary_key=True, default=generate_uuid
    )
    session_id: Mapped[str | None] = mapped_column(String, nullable=True)
    customer_email: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    total_amount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    status: Mapped[str] = mapped_column(String, nullable=False, default="pending")
    # Full order document: customer info, medications, symptoms, assessments
    data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'processing', 'shipped', 'delivered', 'cancelled')",
            name="ck_orders_status_valid",
        ),
    )
