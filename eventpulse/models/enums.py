from enum import Enum


class FieldType(str, Enum):
    text = "text"
    email = "email"
    textarea = "textarea"
    whatsapp = "whatsapp"
    usn = "usn"
    dropdown = "dropdown"
    number = "number"


class WaitingListStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class RegistrationKind(str, Enum):
    registration = "Registration"
    waiting_list = "Waiting List"
