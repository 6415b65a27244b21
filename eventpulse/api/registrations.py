from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query, status

from eventpulse.api.deps import OptionalUserIdDep, SessionDep, UserIdDep
from eventpulse.api.schemas import ParticipantsIn, RegistrationIn, registration_out, waiting_list_out
from eventpulse.models import WaitingListEntry
from eventpulse.services.registration_service import RegistrationService

router = APIRouter(tags=["registration"])


@router.post("/registration", status_code=status.HTTP_201_CREATED)
async def create_registration(
    payload: RegistrationIn,
    session: SessionDep,
    header_user_id: OptionalUserIdDep,
) -> dict[str, Any]:
    user_id = payload.user_id or header_user_id
    result = await RegistrationService(session).submit(payload.event_id, user_id, payload.to_submission())
    await session.commit()
    if isinstance(result, WaitingListEntry):
        return {"waitingList": waiting_list_out(result), "message": "Added to waiting list"}
    return {"registration": registration_out(result)}


@router.post("/waiting-list", status_code=status.HTTP_201_CREATED)
async def create_waiting_list_entry(
    payload: RegistrationIn,
    session: SessionDep,
    header_user_id: OptionalUserIdDep,
) -> dict[str, Any]:
    user_id = payload.user_id or header_user_id
    entry = await RegistrationService(session).create_waiting_list_entry(
        payload.event_id,
        user_id,
        payload.to_submission(),
    )
    await session.commit()
    return {"waitingList": waiting_list_out(entry)}


@router.get("/registration")
async def list_registrations(
    session: SessionDep,
    event_id: int = Query(alias="eventId", gt=0),
) -> dict[str, Any]:
    registrations = await RegistrationService(session).list_registrations(event_id)
    return {"registrations": [registration_out(r) for r in registrations]}


@router.get("/registration/{event_id}/check")
async def check_registration(event_id: int, session: SessionDep, user_id: UserIdDep) -> dict[str, bool]:
    registered = await RegistrationService(session).is_registered(event_id, user_id)
    return {"registered": registered}


@router.post("/registration/{registration_id}/participants", status_code=status.HTTP_201_CREATED)
async def add_participants(
    registration_id: int,
    payload: ParticipantsIn,
    session: SessionDep,
) -> dict[str, Any]:
    registration = await RegistrationService(session).add_participants(registration_id, payload.participants)
    await session.commit()
    return {"participants": registration_out(registration)["participants"]}
