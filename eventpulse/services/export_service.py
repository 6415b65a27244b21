from __future__ import annotations

import csv
import json
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from io import BytesIO, StringIO
from typing import Any

from openpyxl import Workbook

from eventpulse.models import Registration, RegistrationKind, WaitingListEntry
from eventpulse.services.extraction import (
    PLACEHOLDER,
    as_mapping,
    canonical_label,
    decode_participants,
    extract_participants,
    lookup,
    resolve_field,
)
from eventpulse.services.schemas import ParticipantRow

CANONICAL_HEADER = [
    "Team Name",
    "Name",
    "College Name",
    "Degree Name",
    "USN",
    "Email",
    "Gender",
    "Payment Proof",
    "WhatsApp Number",
]

ROW_VALUES = {
    "Name": "name",
    "College Name": "college",
    "Degree Name": "degree",
    "USN": "usn",
    "Email": "email",
    "Gender": "gender",
    "WhatsApp Number": "whatsapp",
}


def _get(entry: Any, name: str) -> Any:
    if isinstance(entry, Mapping):
        return entry.get(name)
    return getattr(entry, name, None)


def entry_kind(entry: Any) -> RegistrationKind:
    if isinstance(entry, WaitingListEntry):
        return RegistrationKind.waiting_list
    if isinstance(entry, Registration):
        return RegistrationKind.registration
    raw = _get(entry, "registrationType") or _get(entry, "kind")
    if raw == RegistrationKind.waiting_list.value:
        return RegistrationKind.waiting_list
    return RegistrationKind.registration


def entry_status(entry: Any) -> str:
    status = _get(entry, "status")
    if status is None:
        return "confirmed" if entry_kind(entry) == RegistrationKind.registration else "pending"
    status = getattr(status, "value", status)
    return "confirmed" if status == "approved" else str(status)


def _responses(entry: Any) -> Mapping[str, Any]:
    responses = _get(entry, "responses")
    return responses if isinstance(responses, Mapping) else {}


def payment_proof_of(entry: Any) -> Any:
    return resolve_field("Payment Proof", [as_mapping(entry), _responses(entry)])


def _scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float, bool))


def custom_labels(entries: Sequence[Any]) -> list[str]:
    """Response labels not already covered by the canonical header, in first-seen order."""
    labels: list[str] = []
    seen: set[str] = set()

    def note(label: Any, value: Any) -> None:
        if not isinstance(label, str) or not _scalar(value):
            return
        if canonical_label(label) is not None or label.lower() in seen:
            return
        seen.add(label.lower())
        labels.append(label)

    for entry in entries:
        for label, value in _responses(entry).items():
            note(label, value)
        for participant in extract_participants(entry):
            for label, value in participant.details.items():
                if label in ("id", "created_at", "updated_at", "details"):
                    continue
                note(label, value)
    return labels


def _cell(value: Any) -> str:
    if value is None:
        return PLACEHOLDER
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    text = str(value)
    return text if text.strip() else PLACEHOLDER


def build_rows(entries: Sequence[Any]) -> tuple[list[str], list[list[str]]]:
    extra = custom_labels(entries)
    header = [*CANONICAL_HEADER, *extra]
    rows: list[list[str]] = []
    seen: set[tuple[str, ...]] = set()

    for entry in entries:
        responses = _responses(entry)
        payment_proof = payment_proof_of(entry)
        for participant in extract_participants(entry):
            row = [_cell(participant.team_name)]
            row.extend(_cell(getattr(participant, ROW_VALUES[label])) for label in CANONICAL_HEADER[1:7])
            row.append(_cell(payment_proof))
            row.append(_cell(participant.whatsapp))
            row.extend(_cell(lookup([label], [participant.details, responses])) for label in extra)
            key = tuple(row)
            if key in seen:
                continue
            seen.add(key)
            rows.append(row)
    return header, rows


def _none_if_placeholder(value: Any) -> Any:
    return None if value == PLACEHOLDER else value


def _participant_payload(index: int, row: ParticipantRow) -> dict[str, Any]:
    return {
        "participantNumber": index + 1,
        "name": row.name,
        "email": row.email,
        "usn": row.usn,
        "gender": row.gender,
        "college": row.college,
        "degree": row.degree,
        "whatsapp": row.whatsapp,
        "teamName": row.team_name,
        "details": row.details,
    }


def _stored_participant_count(entry: Any) -> int:
    return len(decode_participants(_get(entry, "participants")))


class ExportService:
    @staticmethod
    def export_csv(entries: Sequence[Any]) -> bytes:
        header, rows = build_rows(entries)
        output = StringIO()
        writer = csv.writer(output)
        writer.writerow(header)
        writer.writerows(rows)
        return output.getvalue().encode("utf-8")

    @staticmethod
    def export_xlsx(entries: Sequence[Any]) -> bytes:
        header, rows = build_rows(entries)
        wb = Workbook()
        ws = wb.active
        ws.title = "registrations"
        ws.append(header)
        for row in rows:
            ws.append(row)

        payload = BytesIO()
        wb.save(payload)
        payload.seek(0)
        return payload.read()

    @staticmethod
    def generate_report(entries: Sequence[Any]) -> dict[str, Any]:
        if not entries:
            return {"totalRegistrations": 0, "statistics": {}, "summary": "No registration data available"}

        kinds = [entry_kind(e) for e in entries]
        statuses = [entry_status(e) for e in entries]
        team_entries = [e for e in entries if _stored_participant_count(e) > 1]
        total_participants = sum(len(extract_participants(e)) for e in entries)
        pending = statuses.count("pending")

        return {
            "totalRegistrations": len(entries),
            "statistics": {
                "registrationTypes": {
                    "registration": kinds.count(RegistrationKind.registration),
                    "waitingList": kinds.count(RegistrationKind.waiting_list),
                },
                "status": {
                    "confirmed": statuses.count("confirmed"),
                    "pending": pending,
                    "rejected": statuses.count("rejected"),
                },
                "teams": {
                    "teamRegistrations": len(team_entries),
                    "totalParticipants": total_participants,
                },
            },
            "summary": (
                f"Total: {len(entries)} registrations | Participants: {total_participants} "
                f"| Teams: {len(team_entries)} | Pending: {pending}"
            ),
        }

    @staticmethod
    def export_json(entries: Sequence[Any], now: datetime | None = None) -> bytes:
        now = now or datetime.now(tz=UTC)
        report = ExportService.generate_report(entries)
        registrations = []
        for entry in entries:
            participants = extract_participants(entry)
            created_at = _get(entry, "created_at")
            registrations.append(
                {
                    "id": _get(entry, "id"),
                    "userId": _get(entry, "user_id"),
                    "registrationType": entry_kind(entry).value,
                    "status": entry_status(entry),
                    "registrationDate": created_at.isoformat() if isinstance(created_at, datetime) else created_at,
                    "teamName": participants[0].team_name if participants else PLACEHOLDER,
                    "paymentProof": _none_if_placeholder(payment_proof_of(entry)),
                    "responses": dict(_responses(entry)),
                    "isTeamEvent": _stored_participant_count(entry) > 1,
                    "participantCount": len(participants),
                    "participants": [_participant_payload(i, p) for i, p in enumerate(participants)],
                }
            )

        payload = {
            "metadata": {
                "exportDate": now.isoformat(),
                "exportedBy": "EventPulse Analytics",
                "description": "Complete event registration data with all participant details",
                "version": "2.0",
            },
            "summary": {"totalRegistrations": report["totalRegistrations"], **report["statistics"]},
            "registrations": registrations,
        }
        return json.dumps(payload, ensure_ascii=False, indent=2, default=str).encode("utf-8")
