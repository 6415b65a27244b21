from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from eventpulse.models import Event


class EventRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, event_id: int) -> Event | None:
        result = await self.session.execute(select(Event).where(Event.id == event_id))
        return result.scalar_one_or_none()

    async def get_locked(self, event_id: int) -> Event | None:
        result = await self.session.execute(
            select(Event).where(Event.id == event_id).with_for_update()
        )
        return result.scalar_one_or_none()

    async def list_mega_events(self) -> list[Event]:
        result = await self.session.execute(
            select(Event).where(Event.parent_event_id.is_(None)).order_by(Event.start_at.asc())
        )
        return list(result.scalars().all())

    async def list_sub_events(self, parent_event_id: int) -> list[Event]:
        result = await self.session.execute(
            select(Event)
            .where(Event.parent_event_id == parent_event_id)
            .order_by(Event.start_at.asc(), Event.id.asc())
        )
        return list(result.scalars().all())
