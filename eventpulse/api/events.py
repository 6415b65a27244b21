from __future__ import annotations

from typing import Any

from fastapi import APIRouter, status

from eventpulse.api.deps import SessionDep, UserIdDep
from eventpulse.api.schemas import CustomFieldsIn, MegaEventIn, SubEventIn, event_out
from eventpulse.services.event_service import EventService

router = APIRouter(prefix="/events", tags=["events"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_event(payload: MegaEventIn, session: SessionDep, user_id: UserIdDep) -> dict[str, Any]:
    event = await EventService(session).create_mega_event(
        host_id=user_id,
        title=payload.title,
        description=payload.description,
        location=payload.location,
        start_at=payload.start_at,
        end_at=payload.end_at,
    )
    await session.commit()
    return event_out(event)


@router.get("")
async def list_events(session: SessionDep) -> dict[str, Any]:
    events = await EventService(session).list_mega_events()
    return {"events": [event_out(e) for e in events]}


@router.get("/{event_id}")
async def get_event(event_id: int, session: SessionDep) -> dict[str, Any]:
    event = await EventService(session).get_event(event_id)
    return event_out(event)


@router.get("/{event_id}/sub-events")
async def list_sub_events(event_id: int, session: SessionDep) -> dict[str, Any]:
    events = await EventService(session).list_sub_events(event_id)
    return {"subEvents": [event_out(e) for e in events]}


@router.post("/{event_id}/sub", status_code=status.HTTP_201_CREATED)
async def create_sub_event(
    event_id: int,
    payload: SubEventIn,
    session: SessionDep,
    user_id: UserIdDep,
) -> dict[str, Any]:
    event = await EventService(session).create_sub_event(user_id, event_id, payload.to_input())
    await session.commit()
    return event_out(event)


@router.get("/{event_id}/custom-fields")
async def get_custom_fields(event_id: int, session: SessionDep) -> dict[str, Any]:
    fields = await EventService(session).get_custom_fields(event_id)
    return {"customFields": [f.to_dict() for f in fields]}


@router.put("/{event_id}/custom-fields")
async def update_custom_fields(
    event_id: int,
    payload: CustomFieldsIn,
    session: SessionDep,
    user_id: UserIdDep,
) -> dict[str, Any]:
    event = await EventService(session).update_custom_fields(
        user_id,
        event_id,
        [f.to_definition() for f in payload.custom_fields],
    )
    await session.commit()
    return event_out(event)
