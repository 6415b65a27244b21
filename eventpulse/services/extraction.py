from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from eventpulse.services.schemas import ParticipantRow

PLACEHOLDER = "-"

# canonical label -> label variants seen in stored responses, in lookup order
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "Team Name": ("Team Name", "teamName", "team_name", "Team", "Group Name", "Group"),
    "Name": ("Name", "name", "fullName", "firstName", "participantName"),
    "College Name": ("College Name", "College"),
    "Degree Name": ("Degree Name", "Degree"),
    "USN": ("USN",),
    "Email": ("EMAIL ID", "Email", "email"),
    "Gender": ("Gender",),
    "Payment Proof": ("Payment Proof", "paymentProof", "payment_proof"),
    "WhatsApp Number": ("WhatsApp Number", "Whats App Number"),
}

ROW_ATTRIBUTES = {
    "name": "Name",
    "email": "Email",
    "degree": "Degree Name",
    "college": "College Name",
    "usn": "USN",
    "gender": "Gender",
    "whatsapp": "WhatsApp Number",
}


def _has_value(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, dict)):
        return bool(value)
    return True


def canonical_label(label: str) -> str | None:
    lowered = label.lower()
    for canonical, variants in FIELD_ALIASES.items():
        if any(lowered == v.lower() for v in variants):
            return canonical
    return None


def lookup(keys: Iterable[str], sources: Iterable[Any], fallback: str = PLACEHOLDER) -> Any:
    """First non-empty value across ``sources`` for any of ``keys``.

    Exact keys are tried across every source before case-insensitive matches.
    """
    keys = list(keys)
    sources = [s for s in sources if isinstance(s, Mapping)]
    for key in keys:
        for src in sources:
            if _has_value(src.get(key)):
                return src[key]
    for key in keys:
        lowered = key.lower()
        for src in sources:
            for k, v in src.items():
                if isinstance(k, str) and k.lower() == lowered and _has_value(v):
                    return v
    return fallback


def resolve_field(canonical: str, sources: Iterable[Any], fallback: str = PLACEHOLDER) -> Any:
    return lookup(FIELD_ALIASES.get(canonical, (canonical,)), sources, fallback)


def _entry_value(entry: Any, name: str) -> Any:
    if isinstance(entry, Mapping):
        return entry.get(name)
    return getattr(entry, name, None)


def as_mapping(value: Any) -> Mapping[str, Any]:
    if isinstance(value, Mapping):
        return value
    if value is None:
        return {}
    # ORM rows: expose their column attributes as a plain dict
    mapper = getattr(value, "__mapper__", None)
    if mapper is not None:
        return {attr.key: getattr(value, attr.key, None) for attr in mapper.column_attrs}
    return {}


def decode_participants(raw: Any) -> list[Any]:
    """Normalise a stored ``participants`` value to a list.

    Stored shapes are a list, a dict keyed by index, or nothing at all.
    """
    if raw is None:
        return []
    if isinstance(raw, (list, tuple)):
        return list(raw)
    if isinstance(raw, Mapping):
        return list(raw.values())
    return []


def participant_candidates(entry: Any) -> list[Any]:
    candidates = decode_participants(_entry_value(entry, "participants"))

    responses = _entry_value(entry, "responses")
    if isinstance(responses, Mapping):
        for label, value in responses.items():
            if isinstance(value, list) and "participant" in str(label).lower():
                candidates.extend(value)

    if not candidates:
        user = _entry_value(entry, "user")
        if user is not None:
            candidates.append(user)
        elif isinstance(responses, Mapping) and responses:
            # solo entry with neither participants nor a linked user
            candidates.append(dict(responses))
    return candidates


def _details_of(candidate: Any) -> Mapping[str, Any]:
    if isinstance(candidate, Mapping):
        details = candidate.get("details")
        return details if isinstance(details, Mapping) else candidate
    details = getattr(candidate, "details", None)
    if isinstance(details, Mapping):
        return details
    return as_mapping(candidate)


def extract_participants(entry: Any) -> list[ParticipantRow]:
    responses = _entry_value(entry, "responses")
    responses = responses if isinstance(responses, Mapping) else {}
    entry_map = as_mapping(entry)
    user_map = as_mapping(_entry_value(entry, "user"))

    rows: list[ParticipantRow] = []
    for candidate in participant_candidates(entry):
        if isinstance(candidate, str):
            if candidate.strip():
                rows.append(ParticipantRow(name=candidate.strip()))
            continue
        candidate_map = as_mapping(candidate)
        if not isinstance(candidate, Mapping) and not candidate_map:
            continue
        # an empty record still yields a row of placeholders
        details = _details_of(candidate)
        sources = [details, responses, candidate_map, entry_map, user_map]
        values = {attr: resolve_field(label, sources) for attr, label in ROW_ATTRIBUTES.items()}
        rows.append(
            ParticipantRow(
                **values,
                team_name=resolve_field("Team Name", sources),
                details=dict(details),
            )
        )
    return rows
