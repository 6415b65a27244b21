from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Enum, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from eventpulse.models.base import Base, TimestampMixin
from eventpulse.models.enums import WaitingListStatus


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)

    registrations: Mapped[list[Registration]] = relationship(back_populates="user")
    waiting_list_entries: Mapped[list[WaitingListEntry]] = relationship(back_populates="user")


class Event(TimestampMixin, Base):
    __tablename__ = "events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    parent_event_id: Mapped[int | None] = mapped_column(
        ForeignKey("events.id", ondelete="CASCADE"), nullable=True, index=True
    )
    host_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)

    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    start_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    end_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    team_size: Mapped[int | None] = mapped_column(Integer, nullable=True)
    flexible_team_size: Mapped[bool] = mapped_column(Boolean, default=False)
    team_size_min: Mapped[int | None] = mapped_column(Integer, nullable=True)
    team_size_max: Mapped[int | None] = mapped_column(Integer, nullable=True)

    payment_enabled: Mapped[bool] = mapped_column(Boolean, default=False)
    custom_fields: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON, nullable=True)
    whatsapp_group_link: Mapped[str | None] = mapped_column(String(512), nullable=True)

    sub_events: Mapped[list[Event]] = relationship(back_populates="parent_event")
    parent_event: Mapped[Event | None] = relationship(back_populates="sub_events", remote_side="Event.id")
    registrations: Mapped[list[Registration]] = relationship(back_populates="event")
    waiting_list_entries: Mapped[list[WaitingListEntry]] = relationship(back_populates="event")


class Registration(TimestampMixin, Base):
    __tablename__ = "registrations"
    __table_args__ = (UniqueConstraint("event_id", "user_id", name="uq_registration_event_user"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    event_id: Mapped[int] = mapped_column(ForeignKey("events.id", ondelete="CASCADE"), index=True)
    user_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True
    )

    team_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    responses: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    payment_proof: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    event: Mapped[Event] = relationship(back_populates="registrations")
    user: Mapped[User | None] = relationship(back_populates="registrations")
    participants: Mapped[list[Participant]] = relationship(
        back_populates="registration", cascade="all, delete-orphan"
    )


class Participant(Base):
    __tablename__ = "participants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    registration_id: Mapped[int] = mapped_column(
        ForeignKey("registrations.id", ondelete="CASCADE"), index=True
    )
    details: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)

    registration: Mapped[Registration] = relationship(back_populates="participants")


class WaitingListEntry(TimestampMixin, Base):
    __tablename__ = "waiting_list"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    event_id: Mapped[int] = mapped_column(ForeignKey("events.id", ondelete="CASCADE"), index=True)
    user_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True
    )

    team_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    responses: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    # Stored as submitted: historical rows may hold a list, an index-keyed dict or nothing.
    participants: Mapped[Any] = mapped_column(JSON, nullable=True)
    payment_proof: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    status: Mapped[WaitingListStatus] = mapped_column(
        Enum(WaitingListStatus, name="waiting_list_status"),
        default=WaitingListStatus.pending,
        index=True,
    )

    event: Mapped[Event] = relationship(back_populates="waiting_list_entries")
    user: Mapped[User | None] = relationship(back_populates="waiting_list_entries")
