"""ORM models for users, stations, campaigns, reservations, and badges.

Schema is owned by the Alembic migrations in ``migrations/versions``; keep the
two in sync when adding columns.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from smartcharge.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, Enum):
    DRIVER = "DRIVER"
    OPERATOR = "OPERATOR"


class CampaignStatus(str, Enum):
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    ENDED = "ENDED"


class ReservationStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class User(Base):
    """Drivers and operators with cumulative reward balances."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(256), nullable=False)
    role: Mapped[str] = mapped_column(String(16), nullable=False, default=Role.DRIVER.value)

    # Balances are only ever incremented by reward settlement
    coins: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    co2_saved: Mapped[float] = mapped_column(Float, nullable=False, default=0.0, server_default="0")
    xp: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)

    stations: Mapped[list[Station]] = relationship("Station", back_populates="owner")
    reservations: Mapped[list[Reservation]] = relationship("Reservation", back_populates="user")


# ---------------------------------------------------------------------------
# Badges
# ---------------------------------------------------------------------------


class Badge(Base):
    """Static badge catalog, seeded on startup."""

    __tablename__ = "badges"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    slug: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    icon: Mapped[str] = mapped_column(String(64), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")


class UserBadge(Base):
    """Badges held by users. UNIQUE(user_id, badge_id) prevents duplicates."""

    __tablename__ = "user_badges"
    __table_args__ = (UniqueConstraint("user_id", "badge_id", name="user_badges_user_id_badge_id_key"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    badge_id: Mapped[int] = mapped_column(Integer, ForeignKey("badges.id"), nullable=False)
    earned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)

    badge: Mapped[Badge] = relationship("Badge", lazy="joined")


# ---------------------------------------------------------------------------
# Stations
# ---------------------------------------------------------------------------


class Station(Base):
    """A charging station, optionally owned by an operator."""

    __tablename__ = "stations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    lat: Mapped[float] = mapped_column(Float, nullable=False)
    lng: Mapped[float] = mapped_column(Float, nullable=False)
    address: Mapped[str | None] = mapped_column(String(256), nullable=True)
    density: Mapped[int] = mapped_column(Integer, nullable=False, default=50, server_default="50")
    owner_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)

    owner: Mapped[User | None] = relationship("User", back_populates="stations")


# ---------------------------------------------------------------------------
# Campaigns
# ---------------------------------------------------------------------------


campaign_target_badges = Table(
    "campaign_target_badges",
    Base.metadata,
    Column("campaign_id", Integer, ForeignKey("campaigns.id", ondelete="CASCADE"), primary_key=True),
    Column("badge_id", Integer, ForeignKey("badges.id", ondelete="CASCADE"), primary_key=True),
)


class Campaign(Base):
    """Operator promotion; station-scoped or global, optionally badge-targeted."""

    __tablename__ = "campaigns"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True
    )
    station_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("stations.id", ondelete="CASCADE"), nullable=True
    )
    title: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=CampaignStatus.DRAFT.value)
    target: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    discount: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    coin_reward: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)

    station: Mapped[Station | None] = relationship("Station")
    target_badges: Mapped[list[Badge]] = relationship("Badge", secondary=campaign_target_badges)


# ---------------------------------------------------------------------------
# Reservations
# ---------------------------------------------------------------------------


class Reservation(Base):
    """One booking; PENDING until settled, COMPLETED is terminal."""

    __tablename__ = "reservations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    station_id: Mapped[int] = mapped_column(Integer, ForeignKey("stations.id", ondelete="CASCADE"), nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    hour: Mapped[str] = mapped_column(String(32), nullable=False)
    is_green: Mapped[bool] = mapped_column(Boolean, nullable=False)
    earned_coins: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=ReservationStatus.PENDING.value, index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    user: Mapped[User] = relationship("User", back_populates="reservations")
    station: Mapped[Station] = relationship("Station")
