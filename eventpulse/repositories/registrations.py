from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from eventpulse.models import Registration


class RegistrationRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, registration_id: int) -> Registration | None:
        result = await self.session.execute(
            select(Registration)
            .options(selectinload(Registration.participants), selectinload(Registration.user))
            .where(Registration.id == registration_id)
        )
        return result.scalar_one_or_none()

    async def list_by_event(self, event_id: int) -> list[Registration]:
        result = await self.session.execute(
            select(Registration)
            .options(selectinload(Registration.participants), selectinload(Registration.user))
            .where(Registration.event_id == event_id)
            .order_by(Registration.created_at.desc(), Registration.id.desc())
        )
        return list(result.scalars().all())

    async def for_user_event(self, user_id: int, event_id: int) -> Registration | None:
        result = await self.session.execute(
            select(Registration).where(
                Registration.user_id == user_id,
                Registration.event_id == event_id,
            )
        )
        return result.scalar_one_or_none()
