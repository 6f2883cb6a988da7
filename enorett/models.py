"""SQLAlchemy ORM models."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Text
from sqlalchemy.orm import Mapped, mapped_column

from enorett.database import Base

ACTIVE_STATUSES = ("active", "trialing")


def _utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Purchase(Base):
    """Premium purchase record for a user."""

    __tablename__ = "purchases"
    __table_args__ = (Index("ix_purchases_user_status", "user_id", "status"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(Text, index=True)
    plan: Mapped[str] = mapped_column(Text, default="premium")  # premium, lifetime
    status: Mapped[str] = mapped_column(
        Text, default="active"
    )  # active, trialing, canceled, expired, refunded
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utc_now)

    def is_active(self, now: datetime | None = None) -> bool:
        """Active status with no expiry, or an expiry still in the future."""
        if self.status not in ACTIVE_STATUSES:
            return False
        if self.expires_at is None:
            return True
        return _as_utc(self.expires_at) > (now or _utc_now())
