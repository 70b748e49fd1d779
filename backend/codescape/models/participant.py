"""
Participant model
Flow: Registration form -> Validation -> participants table
"""

import uuid
from datetime import datetime, timezone
from enum import Enum as PyEnum

from sqlalchemy import CheckConstraint, DateTime, Enum, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from codescape.core.database import Base

NAME_MAX_LENGTH = 100
TEAM_SIZE_MIN = 1
TEAM_SIZE_MAX = 10


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ParticipantStatus(str, PyEnum):
    """Participant lifecycle status"""
    REGISTERED = "registered"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class Participant(Base):
    """A registered individual or team representative for the event."""

    __tablename__ = "participants"
    __table_args__ = (
        UniqueConstraint("email", name="uq_participants_email"),
        CheckConstraint(
            f"team_size >= {TEAM_SIZE_MIN} AND team_size <= {TEAM_SIZE_MAX}",
            name="ck_participants_team_size",
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    # Always stored lowercase, so the unique constraint is case-insensitive
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    team_size: Mapped[int] = mapped_column(Integer, nullable=False)
    registration_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )
    status: Mapped[ParticipantStatus] = mapped_column(
        Enum(
            ParticipantStatus,
            name="participantstatus",
            values_callable=lambda enum: [member.value for member in enum],
        ),
        default=ParticipantStatus.REGISTERED,
        nullable=False,
        index=True,
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now()
    )

    def __repr__(self):
        return f"<Participant {self.email} team={self.team_size} ({self.status.value})>"

    def confirmation_message(self) -> str:
        """Personalized message shown after a successful registration."""
        return f"Thank you, {self.name}! Your team of {self.team_size} is registered."
