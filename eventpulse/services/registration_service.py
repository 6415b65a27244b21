from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from eventpulse.models import Event, Participant, Registration, WaitingListEntry, WaitingListStatus
from eventpulse.repositories.events import EventRepository
from eventpulse.repositories.registrations import RegistrationRepository
from eventpulse.repositories.waiting_list import WaitingListRepository
from eventpulse.services.exceptions import (
    NoMeaningfulDataError,
    NotFoundError,
    PaymentProofRequiredError,
    PermissionDeniedError,
    ValidationError,
)
from eventpulse.services.extraction import decode_participants
from eventpulse.services.schemas import RegistrationSubmission

logger = logging.getLogger(__name__)

BULK_ACTIONS = ("approve", "reject")


def merge_participant_details(
    responses: Mapping[str, Any] | None,
    participants: Any,
) -> list[dict[str, Any]]:
    """Participant rows carry the team answers too; participant keys win on clash."""
    shared = dict(responses or {})
    return [
        {**shared, **dict(details)}
        for details in decode_participants(participants)
        if isinstance(details, Mapping)
    ]


class RegistrationService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.events = EventRepository(session)
        self.repo = RegistrationRepository(session)
        self.waiting = WaitingListRepository(session)

    async def submit(
        self,
        event_id: int,
        user_id: int | None,
        data: RegistrationSubmission,
    ) -> Registration | WaitingListEntry:
        event = await self._get_event(event_id)
        if event.payment_enabled:
            if not data.payment_proof:
                raise PaymentProofRequiredError()
            return await self.create_waiting_list_entry(event_id, user_id, data)
        return await self.create_registration(event_id, user_id, data)

    async def create_registration(
        self,
        event_id: int,
        user_id: int | None,
        data: RegistrationSubmission,
    ) -> Registration:
        await self._get_event(event_id)
        self._validate_payload(data)
        await self._validate_user_uniqueness(user_id, event_id)

        merged = merge_participant_details(data.responses, data.participants)
        registration = Registration(
            event_id=event_id,
            user_id=user_id,
            team_name=data.team_name,
            responses=dict(data.responses),
            payment_proof=data.payment_proof,
            participants=[Participant(details=details) for details in merged],
        )

        self.session.add(registration)
        await self.session.flush()
        logger.info(
            "Registration created id=%s event_id=%s participants=%s",
            registration.id,
            event_id,
            len(merged),
        )
        return registration

    async def create_waiting_list_entry(
        self,
        event_id: int,
        user_id: int | None,
        data: RegistrationSubmission,
    ) -> WaitingListEntry:
        await self._get_event(event_id)
        self._validate_payload(data)
        await self._validate_user_uniqueness(user_id, event_id)

        entry = WaitingListEntry(
            event_id=event_id,
            user_id=user_id,
            team_name=data.team_name,
            responses=dict(data.responses),
            participants=[dict(p) for p in data.participants],
            payment_proof=data.payment_proof,
            status=WaitingListStatus.pending,
        )
        self.session.add(entry)
        await self.session.flush()
        logger.info("Waiting list entry created id=%s event_id=%s", entry.id, event_id)
        return entry

    async def add_participants(
        self,
        registration_id: int,
        participants: list[dict[str, Any]],
    ) -> Registration:
        if not isinstance(participants, list) or not participants:
            raise ValidationError("participants array required")
        registration = await self.repo.get(registration_id)
        if not registration:
            raise NotFoundError("Registration not found")

        existing = [p.details for p in registration.participants]
        for details in participants:
            if not isinstance(details, Mapping):
                raise ValidationError("Each participant must be an object")
            if dict(details) in existing:
                continue
            registration.participants.append(Participant(details=dict(details)))
            existing.append(dict(details))
        await self.session.flush()
        return registration

    async def list_registrations(self, event_id: int) -> list[Registration]:
        return await self.repo.list_by_event(event_id)

    async def is_registered(self, event_id: int, user_id: int) -> bool:
        return await self.repo.for_user_event(user_id=user_id, event_id=event_id) is not None

    async def list_pending(self, event_id: int, host_id: int) -> list[WaitingListEntry]:
        await self._get_hosted_event(event_id, host_id)
        return await self.waiting.list_by_event(event_id, WaitingListStatus.pending)

    async def waiting_list_stats(self, event_id: int, host_id: int) -> dict[str, int]:
        await self._get_hosted_event(event_id, host_id)
        counters = await self.waiting.count_by_status(event_id)
        counters["total"] = sum(counters.values())
        return counters

    async def approve(self, entry_id: int, host_id: int) -> Registration:
        entry = await self._get_reviewable_entry(entry_id, host_id)
        registration = await self._approve_entry(entry)
        logger.info("Waiting list entry approved id=%s registration_id=%s", entry.id, registration.id)
        return registration

    async def reject(self, entry_id: int, host_id: int) -> WaitingListEntry:
        entry = await self._get_reviewable_entry(entry_id, host_id)
        entry.status = WaitingListStatus.rejected
        logger.info("Waiting list entry rejected id=%s event_id=%s", entry.id, entry.event_id)
        return entry

    async def bulk_action(
        self,
        event_id: int,
        host_id: int,
        entry_ids: list[int],
        action: str,
    ) -> dict[str, list[int]]:
        if action not in BULK_ACTIONS or not entry_ids:
            raise ValidationError("Invalid request data")
        await self._get_hosted_event(event_id, host_id)

        done: list[int] = []
        skipped: list[int] = []
        for entry in await self.waiting.list_by_ids(event_id, entry_ids):
            if entry.status != WaitingListStatus.pending:
                skipped.append(entry.id)
                continue
            if action == "approve":
                if entry.user_id is not None and await self.is_registered(event_id, entry.user_id):
                    skipped.append(entry.id)
                    continue
                await self._approve_entry(entry)
            else:
                entry.status = WaitingListStatus.rejected
            done.append(entry.id)

        logger.info("Bulk %s event_id=%s done=%s skipped=%s", action, event_id, len(done), len(skipped))
        return {"processed": done, "skipped": skipped}

    async def analytics_entries(self, event_id: int, host_id: int) -> list[Registration | WaitingListEntry]:
        """Registrations plus still-open waiting list rows; approved rows already live on as registrations."""
        await self._get_hosted_event(event_id, host_id)
        registrations = await self.repo.list_by_event(event_id)
        waiting = [
            entry
            for entry in await self.waiting.list_by_event(event_id)
            if entry.status != WaitingListStatus.approved
        ]
        return [*registrations, *waiting]

    async def _approve_entry(self, entry: WaitingListEntry) -> Registration:
        registration = Registration(
            event_id=entry.event_id,
            user_id=entry.user_id,
            team_name=entry.team_name,
            responses=dict(entry.responses or {}),
            payment_proof=entry.payment_proof,
            participants=[
                Participant(details=details)
                for details in merge_participant_details(entry.responses, entry.participants)
            ],
        )
        self.session.add(registration)
        entry.status = WaitingListStatus.approved
        await self.session.flush()
        return registration

    async def _get_event(self, event_id: int) -> Event:
        if event_id is None or event_id <= 0:
            raise ValidationError("Invalid event ID")
        event = await self.events.get(event_id)
        if not event:
            raise NotFoundError("Event not found")
        return event

    async def _get_hosted_event(self, event_id: int, host_id: int) -> Event:
        event = await self._get_event(event_id)
        if event.host_id != host_id:
            raise PermissionDeniedError("Unauthorized")
        return event

    async def _get_reviewable_entry(self, entry_id: int, host_id: int) -> WaitingListEntry:
        entry = await self.waiting.get_locked(entry_id)
        if not entry:
            raise NotFoundError("Waiting list entry not found")
        if entry.event.host_id != host_id:
            raise PermissionDeniedError("Unauthorized")
        if entry.status != WaitingListStatus.pending:
            raise ValidationError(f"Waiting list entry is already {entry.status.value}")
        if entry.user_id is not None and await self.is_registered(entry.event_id, entry.user_id):
            raise ValidationError("User is already registered for this event")
        return entry

    async def _validate_user_uniqueness(self, user_id: int | None, event_id: int) -> None:
        if user_id is None:
            return
        if await self.is_registered(event_id, user_id):
            raise ValidationError("You are already registered for this event")
        pending = [
            entry
            for entry in await self.waiting.list_by_event(event_id, WaitingListStatus.pending)
            if entry.user_id == user_id
        ]
        if pending:
            raise ValidationError("You already have a registration awaiting review for this event")

    @staticmethod
    def _validate_payload(data: RegistrationSubmission) -> None:
        if not isinstance(data.responses, Mapping):
            raise ValidationError("responses must be an object")
        if not isinstance(data.participants, list):
            raise ValidationError("participants must be an array")
        if data.is_empty:
            raise NoMeaningfulDataError()
