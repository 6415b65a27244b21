from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any

from eventpulse.services.exceptions import AuthoringIncompleteFieldError, ValidationError
from eventpulse.services.schemas import FieldDefinition, parse_field_type

logger = logging.getLogger(__name__)

EDITABLE_KEYS = ("label", "type", "required", "options", "is_individual")


def split_options(value: str | list[str] | None) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [str(item).strip() for item in value if str(item).strip()]


class FieldDefinitionBuilder:
    """Ordered list of custom registration fields for a sub-event being authored.

    Updates replace the definition at its position instead of mutating it, so
    lists handed out by ``fields`` stay stable for the caller.
    """

    def __init__(self, fields: list[FieldDefinition] | None = None):
        self._fields: list[FieldDefinition] = list(fields or [])

    @property
    def fields(self) -> list[FieldDefinition]:
        return list(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def all_complete(self) -> bool:
        return all(f.is_complete for f in self._fields)

    def incomplete_positions(self) -> list[int]:
        return [idx for idx, f in enumerate(self._fields) if not f.is_complete]

    def add_field(self) -> FieldDefinition:
        if not self.all_complete():
            logger.info("Refused to add field, incomplete positions=%s", self.incomplete_positions())
            raise AuthoringIncompleteFieldError()
        blank = FieldDefinition()
        self._fields = [*self._fields, blank]
        return blank

    def update_field(self, index: int, key: str, value: Any) -> FieldDefinition:
        self._check_index(index)
        if key == "isIndividual":
            key = "is_individual"
        if key not in EDITABLE_KEYS:
            raise ValidationError(f"Unknown field attribute: {key}")

        if key == "type":
            value = parse_field_type(value) if value else None
        elif key == "options":
            value = split_options(value)
        elif key in ("required", "is_individual"):
            value = bool(value)
        elif key == "label":
            value = "" if value is None else str(value)

        updated = replace(self._fields[index], **{key: value})
        self._fields = [*self._fields[:index], updated, *self._fields[index + 1 :]]
        return updated

    def remove_field(self, index: int) -> FieldDefinition:
        self._check_index(index)
        removed = self._fields[index]
        self._fields = [f for i, f in enumerate(self._fields) if i != index]
        return removed

    def validate(self) -> list[FieldDefinition]:
        """Final gate before the sub-event is saved."""
        incomplete = self.incomplete_positions()
        if incomplete:
            labels = ", ".join(f"#{idx + 1}" for idx in incomplete)
            raise AuthoringIncompleteFieldError(f"Custom fields are incomplete: {labels}")
        return self.fields

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= len(self._fields):
            raise ValidationError(f"No custom field at position {index}")
