from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from eventpulse.models.enums import FieldType
from eventpulse.services.exceptions import ValidationError


def parse_field_type(value: Any) -> FieldType:
    try:
        return FieldType(value)
    except ValueError:
        raise ValidationError(f"Unknown field type: {value}") from None


@dataclass(slots=True)
class FieldDefinition:
    label: str = ""
    type: FieldType | None = FieldType.text
    required: bool = False
    options: list[str] = field(default_factory=list)
    is_individual: bool = False

    @property
    def is_complete(self) -> bool:
        if not self.label.strip():
            return False
        if not self.type:
            return False
        if self.type == FieldType.dropdown and not self.options:
            return False
        return True

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "type": self.type.value if self.type else None,
            "required": self.required,
            "options": list(self.options),
            "isIndividual": self.is_individual,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FieldDefinition:
        options = data.get("options") or []
        if isinstance(options, str):
            options = options.split(",")
        return cls(
            label=str(data.get("label") or ""),
            type=parse_field_type(data.get("type") or FieldType.text.value),
            required=bool(data.get("required", False)),
            options=[str(o).strip() for o in options if str(o).strip()],
            is_individual=bool(data.get("isIndividual", data.get("is_individual", False))),
        )


@dataclass(slots=True)
class TeamConfiguration:
    team_size: int | None = None
    flexible_team_size: bool = False
    team_size_min: int | None = None
    team_size_max: int | None = None

    @property
    def is_solo(self) -> bool:
        return not self.team_size and not self.flexible_team_size

    def available_sizes(self) -> list[int]:
        if not self.flexible_team_size or not self.team_size_min or not self.team_size_max:
            return []
        return list(range(self.team_size_min, self.team_size_max + 1))


@dataclass(slots=True)
class InputSlot:
    key: str
    field_index: int
    definition: FieldDefinition
    participant_index: int | None = None

    @property
    def display_label(self) -> str:
        if self.participant_index is None:
            return self.definition.label
        return f"{self.definition.label} (Participant {self.participant_index + 1})"


@dataclass(slots=True)
class RegistrationSubmission:
    responses: dict[str, str] = field(default_factory=dict)
    participants: list[dict[str, str]] = field(default_factory=list)
    payment_proof: str | None = None
    team_name: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.responses and not self.participants


@dataclass(slots=True)
class ParticipantRow:
    name: str = "-"
    email: str = "-"
    degree: str = "-"
    college: str = "-"
    usn: str = "-"
    gender: str = "-"
    whatsapp: str = "-"
    team_name: str = "-"
    details: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class SubEventCreateInput:
    title: str
    description: str | None = None
    location: str | None = None
    start_at: datetime | None = None
    end_at: datetime | None = None
    team: TeamConfiguration = field(default_factory=TeamConfiguration)
    payment_enabled: bool = False
    custom_fields: list[FieldDefinition] = field(default_factory=list)
    whatsapp_group_link: str | None = None
