from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from eventpulse.models import Base, Event, User
from eventpulse.services.schemas import FieldDefinition


@pytest_asyncio.fixture
async def session() -> AsyncSession:
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    Session = async_sessionmaker(engine, expire_on_commit=False)
    async with Session() as session:
        yield session

    await engine.dispose()


async def create_user(session: AsyncSession, name: str = "Alice", email: str | None = None) -> User:
    user = User(name=name, email=email or f"{name.lower()}@example.com")
    session.add(user)
    await session.flush()
    return user


async def create_event(
    session: AsyncSession,
    host: User,
    *,
    parent: Event | None = None,
    team_size: int | None = None,
    flexible: bool = False,
    team_size_min: int | None = None,
    team_size_max: int | None = None,
    payment_enabled: bool = False,
    fields: list[FieldDefinition] | None = None,
    now: datetime | None = None,
) -> Event:
    now = now or datetime.now(tz=UTC)
    event = Event(
        parent_event_id=parent.id if parent else None,
        host_id=host.id,
        title="Hackathon" if parent else "Tech Fest",
        description="desc",
        location="Campus",
        start_at=now + timedelta(days=2),
        end_at=now + timedelta(days=3),
        team_size=team_size,
        flexible_team_size=flexible,
        team_size_min=team_size_min,
        team_size_max=team_size_max,
        payment_enabled=payment_enabled,
        custom_fields=[f.to_dict() for f in fields] if fields else None,
    )
    session.add(event)
    await session.flush()
    return event


def college_and_name_fields() -> list[FieldDefinition]:
    return [
        FieldDefinition(label="College", required=True, is_individual=False),
        FieldDefinition(label="Name", required=True, is_individual=True),
    ]


def event_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": 1,
        "title": "Hackathon",
        "teamSize": 2,
        "flexibleTeamSize": False,
        "teamSizeMin": None,
        "teamSizeMax": None,
        "paymentEnabled": False,
        "customFields": [f.to_dict() for f in college_and_name_fields()],
    }
    payload.update(overrides)
    return payload
