from eventpulse.models.base import Base
from eventpulse.models.entities import Event, Participant, Registration, User, WaitingListEntry
from eventpulse.models.enums import FieldType, RegistrationKind, WaitingListStatus

__all__ = [
    "Base",
    "Event",
    "FieldType",
    "Participant",
    "Registration",
    "RegistrationKind",
    "User",
    "WaitingListEntry",
    "WaitingListStatus",
]
