from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from eventpulse.config import get_settings
from eventpulse.models import Event
from eventpulse.repositories.events import EventRepository
from eventpulse.repositories.users import UserRepository
from eventpulse.services.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from eventpulse.services.field_builder import FieldDefinitionBuilder
from eventpulse.services.schemas import FieldDefinition, SubEventCreateInput, TeamConfiguration

logger = logging.getLogger(__name__)

WHATSAPP_GROUP_HOST = "chat.whatsapp.com"


def team_configuration(event: Event) -> TeamConfiguration:
    return TeamConfiguration(
        team_size=event.team_size,
        flexible_team_size=bool(event.flexible_team_size),
        team_size_min=event.team_size_min,
        team_size_max=event.team_size_max,
    )


def custom_fields(event: Event) -> list[FieldDefinition]:
    raw = event.custom_fields or []
    if isinstance(raw, dict):
        raw = list(raw.values())
    return [FieldDefinition.from_dict(item) for item in raw if isinstance(item, dict)]


class EventService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = EventRepository(session)
        self.users = UserRepository(session)
        self.settings = get_settings()

    async def create_mega_event(
        self,
        host_id: int,
        title: str,
        description: str | None = None,
        location: str | None = None,
        start_at: datetime | None = None,
        end_at: datetime | None = None,
    ) -> Event:
        await self._check_host(host_id)
        if not title or not title.strip():
            raise ValidationError("Title is required")
        self._validate_window(start_at, end_at)
        event = Event(
            host_id=host_id,
            title=title.strip(),
            description=description,
            location=location,
            start_at=start_at,
            end_at=end_at,
        )
        self.session.add(event)
        await self.session.flush()
        logger.info("Mega event created id=%s host_id=%s", event.id, host_id)
        return event

    async def create_sub_event(self, host_id: int, parent_event_id: int, payload: SubEventCreateInput) -> Event:
        parent = await self.repo.get(parent_event_id)
        if not parent:
            raise NotFoundError("Event not found")
        if parent.host_id != host_id:
            raise PermissionDeniedError("Only the host can add sub-events")
        if parent.parent_event_id is not None:
            raise ValidationError("Sub-events cannot be nested")

        self._validate_payload(payload)
        team = self._normalize_team(payload.team)
        fields = FieldDefinitionBuilder(payload.custom_fields).validate()

        event = Event(
            parent_event_id=parent.id,
            host_id=host_id,
            title=payload.title.strip(),
            description=payload.description,
            location=payload.location or parent.location,
            start_at=payload.start_at,
            end_at=payload.end_at,
            team_size=team.team_size,
            flexible_team_size=team.flexible_team_size,
            team_size_min=team.team_size_min,
            team_size_max=team.team_size_max,
            payment_enabled=payload.payment_enabled,
            custom_fields=[f.to_dict() for f in fields] or None,
            whatsapp_group_link=payload.whatsapp_group_link,
        )
        self.session.add(event)
        await self.session.flush()
        logger.info(
            "Sub-event created id=%s parent_id=%s custom_fields=%s",
            event.id,
            parent.id,
            len(fields),
        )
        return event

    async def get_event(self, event_id: int) -> Event:
        event = await self.repo.get(event_id)
        if not event:
            raise NotFoundError("Event not found")
        return event

    async def list_mega_events(self) -> list[Event]:
        return await self.repo.list_mega_events()

    async def list_sub_events(self, parent_event_id: int) -> list[Event]:
        await self.get_event(parent_event_id)
        return await self.repo.list_sub_events(parent_event_id)

    async def get_custom_fields(self, event_id: int) -> list[FieldDefinition]:
        return custom_fields(await self.get_event(event_id))

    async def update_custom_fields(
        self,
        host_id: int,
        event_id: int,
        fields: list[FieldDefinition],
    ) -> Event:
        # Existing registrations keep the labels they were submitted under.
        event = await self.repo.get_locked(event_id)
        if not event:
            raise NotFoundError("Event not found")
        if event.host_id != host_id:
            raise PermissionDeniedError("Only the host can edit this event")
        validated = FieldDefinitionBuilder(fields).validate()
        event.custom_fields = [f.to_dict() for f in validated] or None
        logger.info("Custom fields replaced event_id=%s count=%s", event.id, len(validated))
        return event

    async def _check_host(self, user_id: int) -> None:
        if self.settings.host_ids and user_id not in self.settings.host_ids:
            raise PermissionDeniedError("Only hosts can create events")
        if not await self.users.get_by_id(user_id):
            raise NotFoundError("User not found")

    def _validate_window(self, start_at: datetime | None, end_at: datetime | None) -> None:
        if start_at and end_at and start_at >= end_at:
            raise ValidationError("Event start must be before end")

    def _validate_payload(self, payload: SubEventCreateInput) -> None:
        if not payload.title or not payload.title.strip():
            raise ValidationError("Title is required")
        self._validate_window(payload.start_at, payload.end_at)
        link = payload.whatsapp_group_link
        if link and WHATSAPP_GROUP_HOST not in link:
            raise ValidationError(
                "Please provide a valid WhatsApp group link (should contain chat.whatsapp.com)."
            )

    def _normalize_team(self, team: TeamConfiguration) -> TeamConfiguration:
        limit = self.settings.team_size_limit
        if team.flexible_team_size:
            low, high = team.team_size_min, team.team_size_max
            if low is None or high is None:
                raise ValidationError("Team min/max size is required for flexible teams")
            if not (1 <= low <= limit and 1 <= high <= limit):
                raise ValidationError(f"Team sizes must be between 1 and {limit}")
            if low > high:
                raise ValidationError("Team min size cannot exceed max")
            return TeamConfiguration(
                team_size=team.team_size or high,
                flexible_team_size=True,
                team_size_min=low,
                team_size_max=high,
            )
        if team.team_size is not None and not 1 <= team.team_size <= limit:
            raise ValidationError(f"Team size must be between 1 and {limit}")
        return TeamConfiguration(team_size=team.team_size)
