from __future__ import annotations

from eventpulse.models.enums import FieldType
from eventpulse.services.exceptions import MissingRequiredAnswerError, TeamSizeNotSelectedError, ValidationError
from eventpulse.services.schemas import FieldDefinition, InputSlot, TeamConfiguration

WHATSAPP_PATTERN = r"[0-9]{10}"
USN_PATTERN = r"[A-Za-z0-9]+"

HTML_INPUT_TYPES = {
    FieldType.text: "text",
    FieldType.email: "email",
    FieldType.number: "number",
    FieldType.whatsapp: "text",
    FieldType.usn: "text",
    FieldType.textarea: "textarea",
    FieldType.dropdown: "select",
}


def team_field_key(field_index: int) -> str:
    return f"field_{field_index}"


def participant_field_key(field_index: int, participant_index: int) -> str:
    return f"field_{field_index}_participant_{participant_index}"


def resolve_team_size(team: TeamConfiguration, selected_size: int | None = None) -> int | None:
    """Participant count for the form, ``None`` while a flexible size is still unpicked.

    Solo events resolve to 1.
    """
    if team.flexible_team_size:
        if selected_size is None:
            return None
        sizes = team.available_sizes()
        if sizes and selected_size not in sizes:
            raise ValidationError(
                f"Team size must be between {team.team_size_min} and {team.team_size_max}"
            )
        return selected_size
    if team.team_size:
        return team.team_size
    return 1


def is_individual_scope(definition: FieldDefinition, team: TeamConfiguration) -> bool:
    return definition.is_individual and not team.is_solo


def expand_fields(
    fields: list[FieldDefinition],
    team: TeamConfiguration,
    selected_size: int | None = None,
) -> list[InputSlot]:
    """Concrete input slots for a registration form.

    Individual-scoped fields of a flexible team event are skipped until a size
    has been chosen.
    """
    size = resolve_team_size(team, selected_size)
    slots: list[InputSlot] = []
    for idx, definition in enumerate(fields):
        if is_individual_scope(definition, team):
            if size is None:
                continue
            for p in range(size):
                slots.append(
                    InputSlot(
                        key=participant_field_key(idx, p),
                        field_index=idx,
                        definition=definition,
                        participant_index=p,
                    )
                )
        else:
            slots.append(InputSlot(key=team_field_key(idx), field_index=idx, definition=definition))
    return slots


def input_attributes(slot: InputSlot) -> dict[str, str | bool | list[str]]:
    definition = slot.definition
    field_type = definition.type or FieldType.text
    suffix = f" (Participant {slot.participant_index + 1})" if slot.participant_index is not None else ""
    attrs: dict[str, str | bool | list[str]] = {
        "name": slot.key,
        "id": slot.key,
        "type": HTML_INPUT_TYPES[field_type],
        "required": definition.required,
        "placeholder": f"Enter {definition.label.lower()}{suffix}",
    }
    if field_type == FieldType.number:
        attrs["min"] = "0"
    elif field_type == FieldType.whatsapp:
        attrs["pattern"] = WHATSAPP_PATTERN
        attrs["title"] = "Please enter a 10-digit phone number"
    elif field_type == FieldType.usn:
        attrs["pattern"] = USN_PATTERN
        attrs["title"] = "Please enter your USN"
    elif field_type == FieldType.dropdown:
        attrs["options"] = list(definition.options)
    return attrs


def missing_required(slots: list[InputSlot], form_data: dict[str, str | None]) -> list[str]:
    missing: list[str] = []
    for slot in slots:
        if not slot.definition.required:
            continue
        value = form_data.get(slot.key)
        if value is None or not str(value).strip():
            missing.append(slot.display_label)
    return missing


def validate_form(
    fields: list[FieldDefinition],
    team: TeamConfiguration,
    form_data: dict[str, str | None],
    selected_size: int | None = None,
) -> list[InputSlot]:
    if team.flexible_team_size and selected_size is None:
        raise TeamSizeNotSelectedError()
    slots = expand_fields(fields, team, selected_size)
    missing = missing_required(slots, form_data)
    if missing:
        raise MissingRequiredAnswerError(missing)
    return slots
