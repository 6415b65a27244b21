from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from eventpulse.models import WaitingListEntry, WaitingListStatus


class WaitingListRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_locked(self, entry_id: int) -> WaitingListEntry | None:
        result = await self.session.execute(
            select(WaitingListEntry)
            .options(selectinload(WaitingListEntry.user), selectinload(WaitingListEntry.event))
            .where(WaitingListEntry.id == entry_id)
            .with_for_update()
        )
        return result.scalar_one_or_none()

    async def list_by_event(
        self,
        event_id: int,
        status: WaitingListStatus | None = None,
    ) -> list[WaitingListEntry]:
        stmt = (
            select(WaitingListEntry)
            .options(selectinload(WaitingListEntry.user))
            .where(WaitingListEntry.event_id == event_id)
        )
        if status is not None:
            stmt = stmt.where(WaitingListEntry.status == status)
        stmt = stmt.order_by(WaitingListEntry.created_at.asc(), WaitingListEntry.id.asc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_ids(self, event_id: int, entry_ids: list[int]) -> list[WaitingListEntry]:
        result = await self.session.execute(
            select(WaitingListEntry)
            .options(selectinload(WaitingListEntry.user), selectinload(WaitingListEntry.event))
            .where(WaitingListEntry.event_id == event_id, WaitingListEntry.id.in_(entry_ids))
            .with_for_update()
        )
        return list(result.scalars().all())

    async def count_by_status(self, event_id: int) -> dict[str, int]:
        result = await self.session.execute(
            select(WaitingListEntry.status, func.count(WaitingListEntry.id))
            .where(WaitingListEntry.event_id == event_id)
            .group_by(WaitingListEntry.status)
        )
        counters = {status.value: 0 for status in WaitingListStatus}
        for status, count in result.all():
            counters[status.value] = int(count)
        return counters
