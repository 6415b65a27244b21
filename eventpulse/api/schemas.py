from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from eventpulse.models import Event, Participant, Registration, WaitingListEntry
from eventpulse.models.enums import FieldType
from eventpulse.services.field_builder import split_options
from eventpulse.services.schemas import FieldDefinition, RegistrationSubmission, SubEventCreateInput, TeamConfiguration


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class FieldDefinitionIn(CamelModel):
    label: str = ""
    type: FieldType | None = FieldType.text
    required: bool = False
    options: list[str] = Field(default_factory=list)
    is_individual: bool = Field(default=False, alias="isIndividual")

    @field_validator("options", mode="before")
    @classmethod
    def _split(cls, value: str | list[str] | None) -> list[str]:
        return split_options(value)

    def to_definition(self) -> FieldDefinition:
        return FieldDefinition(
            label=self.label,
            type=self.type,
            required=self.required,
            options=list(self.options),
            is_individual=self.is_individual,
        )


class MegaEventIn(CamelModel):
    title: str
    description: str | None = None
    location: str | None = None
    start_at: datetime | None = Field(default=None, alias="startTime")
    end_at: datetime | None = Field(default=None, alias="endTime")


class SubEventIn(MegaEventIn):
    team_size: int | None = Field(default=None, alias="teamSize")
    flexible_team_size: bool = Field(default=False, alias="flexibleTeamSize")
    team_size_min: int | None = Field(default=None, alias="teamSizeMin")
    team_size_max: int | None = Field(default=None, alias="teamSizeMax")
    payment_enabled: bool = Field(default=False, alias="paymentEnabled")
    custom_fields: list[FieldDefinitionIn] = Field(default_factory=list, alias="customFields")
    whatsapp_group_link: str | None = Field(default=None, alias="whatsappGroupLink")

    def to_input(self) -> SubEventCreateInput:
        return SubEventCreateInput(
            title=self.title,
            description=self.description,
            location=self.location,
            start_at=self.start_at,
            end_at=self.end_at,
            team=TeamConfiguration(
                team_size=self.team_size,
                flexible_team_size=self.flexible_team_size,
                team_size_min=self.team_size_min,
                team_size_max=self.team_size_max,
            ),
            payment_enabled=self.payment_enabled,
            custom_fields=[f.to_definition() for f in self.custom_fields],
            whatsapp_group_link=self.whatsapp_group_link,
        )


class CustomFieldsIn(CamelModel):
    custom_fields: list[FieldDefinitionIn] = Field(alias="customFields")


class RegistrationIn(CamelModel):
    event_id: int = Field(alias="eventId", gt=0)
    user_id: int | None = Field(default=None, alias="userId", gt=0)
    team_name: str | None = Field(default=None, alias="teamName")
    responses: dict[str, Any] = Field(default_factory=dict)
    participants: list[dict[str, Any]] = Field(default_factory=list)
    payment_proof: str | None = Field(default=None, alias="paymentProof")

    @field_validator("responses", mode="before")
    @classmethod
    def _responses(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("participants", mode="before")
    @classmethod
    def _participants(cls, value: Any) -> Any:
        return [] if value is None else value

    def to_submission(self) -> RegistrationSubmission:
        return RegistrationSubmission(
            responses=dict(self.responses),
            participants=[dict(p) for p in self.participants],
            payment_proof=self.payment_proof,
            team_name=self.team_name,
        )


class ParticipantsIn(CamelModel):
    participants: list[dict[str, Any]]


class BulkActionIn(CamelModel):
    ids: list[int] = Field(alias="waitingListIds")
    action: str


def event_out(event: Event) -> dict[str, Any]:
    return {
        "id": event.id,
        "parentEventId": event.parent_event_id,
        "hostId": event.host_id,
        "title": event.title,
        "description": event.description,
        "location": event.location,
        "startTime": event.start_at.isoformat() if event.start_at else None,
        "endTime": event.end_at.isoformat() if event.end_at else None,
        "teamSize": event.team_size,
        "flexibleTeamSize": bool(event.flexible_team_size),
        "teamSizeMin": event.team_size_min,
        "teamSizeMax": event.team_size_max,
        "paymentEnabled": bool(event.payment_enabled),
        "customFields": event.custom_fields or [],
        "whatsappGroupLink": event.whatsapp_group_link,
    }


def participant_out(participant: Participant) -> dict[str, Any]:
    return {"id": participant.id, "details": participant.details or {}}


def registration_out(registration: Registration) -> dict[str, Any]:
    return {
        "id": registration.id,
        "eventId": registration.event_id,
        "userId": registration.user_id,
        "teamName": registration.team_name,
        "responses": registration.responses or {},
        "paymentProof": registration.payment_proof,
        "participants": [participant_out(p) for p in registration.participants],
        "createdAt": registration.created_at.isoformat() if registration.created_at else None,
    }


def waiting_list_out(entry: WaitingListEntry) -> dict[str, Any]:
    return {
        "id": entry.id,
        "eventId": entry.event_id,
        "userId": entry.user_id,
        "teamName": entry.team_name,
        "responses": entry.responses or {},
        "participants": entry.participants,
        "paymentProof": entry.payment_proof,
        "status": entry.status.value,
        "createdAt": entry.created_at.isoformat() if entry.created_at else None,
    }
