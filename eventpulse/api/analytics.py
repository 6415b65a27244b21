from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Response

from eventpulse.api.deps import SessionDep, UserIdDep
from eventpulse.services.export_service import ExportService, entry_kind, entry_status
from eventpulse.services.extraction import extract_participants
from eventpulse.services.registration_service import RegistrationService

router = APIRouter(prefix="/analytics", tags=["analytics"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _attachment(filename: str) -> dict[str, str]:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


@router.get("/{event_id}/participants")
async def participants(event_id: int, session: SessionDep, user_id: UserIdDep) -> dict[str, Any]:
    entries = await RegistrationService(session).analytics_entries(event_id, user_id)
    return {
        "entries": [
            {
                "id": entry.id,
                "registrationType": entry_kind(entry).value,
                "status": entry_status(entry),
                "participants": [asdict(p) for p in extract_participants(entry)],
            }
            for entry in entries
        ],
        "report": ExportService.generate_report(entries),
    }


@router.get("/{event_id}/export.csv")
async def export_csv(event_id: int, session: SessionDep, user_id: UserIdDep) -> Response:
    entries = await RegistrationService(session).analytics_entries(event_id, user_id)
    return Response(
        content=ExportService.export_csv(entries),
        media_type="text/csv",
        headers=_attachment(f"event_{event_id}_registrations.csv"),
    )


@router.get("/{event_id}/export.json")
async def export_json(event_id: int, session: SessionDep, user_id: UserIdDep) -> Response:
    entries = await RegistrationService(session).analytics_entries(event_id, user_id)
    return Response(
        content=ExportService.export_json(entries),
        media_type="application/json",
        headers=_attachment(f"event_{event_id}_registrations.json"),
    )


@router.get("/{event_id}/export.xlsx")
async def export_xlsx(event_id: int, session: SessionDep, user_id: UserIdDep) -> Response:
    entries = await RegistrationService(session).analytics_entries(event_id, user_id)
    return Response(
        content=ExportService.export_xlsx(entries),
        media_type=XLSX_MEDIA_TYPE,
        headers=_attachment(f"event_{event_id}_registrations.xlsx"),
    )
