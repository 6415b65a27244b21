from __future__ import annotations

import logging
from dataclasses import dataclass

from eventpulse.services.exceptions import NoMeaningfulDataError, TeamSizeNotSelectedError, ValidationError
from eventpulse.services.form_renderer import (
    is_individual_scope,
    participant_field_key,
    resolve_team_size,
    team_field_key,
    validate_form,
)
from eventpulse.services.schemas import FieldDefinition, RegistrationSubmission, TeamConfiguration

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Applicant:
    name: str | None = None
    email: str | None = None


def _clean(value: str | None) -> str:
    if value is None:
        return ""
    return str(value).strip()


def build_submission(
    fields: list[FieldDefinition],
    team: TeamConfiguration,
    form_data: dict[str, str | None],
    selected_size: int | None = None,
    manual_participants: list[dict[str, str]] | None = None,
    applicant: Applicant | None = None,
    payment_proof: str | None = None,
    team_name: str | None = None,
) -> RegistrationSubmission:
    """Reshape flat ``field_*`` form input into ``responses`` and ``participants``.

    Team-scoped answers land once in ``responses`` keyed by label. Individual
    answers are regrouped per participant index. Both keys are always present.
    """
    if team.flexible_team_size and selected_size is None:
        raise TeamSizeNotSelectedError()
    if fields:
        validate_form(fields, team, form_data, selected_size)
    size = 1 if team.is_solo else resolve_team_size(team, selected_size)

    responses: dict[str, str] = {}
    for idx, definition in enumerate(fields):
        if not is_individual_scope(definition, team):
            responses[definition.label] = _clean(form_data.get(team_field_key(idx)))

    if fields:
        participants = _participants_from_fields(fields, team, form_data, size)
    elif team.is_solo:
        applicant = applicant or Applicant()
        participants = [{"name": applicant.name or "Participant", "email": applicant.email or ""}]
    else:
        participants = _manual_participants(manual_participants or [], size)

    submission = RegistrationSubmission(
        responses=responses,
        participants=participants,
        payment_proof=payment_proof or None,
        team_name=_clean(team_name) or None,
    )
    if submission.is_empty:
        raise NoMeaningfulDataError()
    return submission


def _participants_from_fields(
    fields: list[FieldDefinition],
    team: TeamConfiguration,
    form_data: dict[str, str | None],
    size: int | None,
) -> list[dict[str, str]]:
    if team.is_solo or not size:
        return []
    individual = [(idx, f) for idx, f in enumerate(fields) if is_individual_scope(f, team)]
    if not individual:
        return []
    return [
        {f.label: _clean(form_data.get(participant_field_key(idx, p))) for idx, f in individual}
        for p in range(size)
    ]


def _manual_participants(manual: list[dict[str, str]], size: int) -> list[dict[str, str]]:
    if len(manual) != size:
        raise ValidationError(f"Please add {size} participants to your team.")
    records = [{"name": _clean(p.get("name")), "email": _clean(p.get("email"))} for p in manual]
    if any(not r["name"] or not r["email"] for r in records):
        raise ValidationError("Please fill in all participant details (name and email).")
    return records
