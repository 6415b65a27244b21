from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from eventpulse.api.deps import SessionDep, UserIdDep
from eventpulse.api.schemas import BulkActionIn, registration_out, waiting_list_out
from eventpulse.services.registration_service import RegistrationService

router = APIRouter(prefix="/waiting-list", tags=["waiting-list"])


@router.get("/{event_id}")
async def list_pending(event_id: int, session: SessionDep, user_id: UserIdDep) -> dict[str, Any]:
    entries = await RegistrationService(session).list_pending(event_id, user_id)
    return {"waitingList": [waiting_list_out(e) for e in entries]}


@router.get("/{event_id}/stats")
async def stats(event_id: int, session: SessionDep, user_id: UserIdDep) -> dict[str, int]:
    return await RegistrationService(session).waiting_list_stats(event_id, user_id)


@router.post("/{entry_id}/approve")
async def approve(entry_id: int, session: SessionDep, user_id: UserIdDep) -> dict[str, Any]:
    registration = await RegistrationService(session).approve(entry_id, user_id)
    await session.commit()
    return {
        "success": True,
        "registration": registration_out(registration),
        "message": "Registration approved successfully",
    }


@router.post("/{entry_id}/reject")
async def reject(entry_id: int, session: SessionDep, user_id: UserIdDep) -> dict[str, Any]:
    await RegistrationService(session).reject(entry_id, user_id)
    await session.commit()
    return {"success": True, "message": "Registration rejected successfully"}


@router.post("/{event_id}/bulk-action")
async def bulk_action(
    event_id: int,
    payload: BulkActionIn,
    session: SessionDep,
    user_id: UserIdDep,
) -> dict[str, Any]:
    result = await RegistrationService(session).bulk_action(event_id, user_id, payload.ids, payload.action)
    await session.commit()
    return {"success": True, **result}
