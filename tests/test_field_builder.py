from __future__ import annotations

import pytest

from eventpulse.models.enums import FieldType
from eventpulse.services.exceptions import AuthoringIncompleteFieldError, ValidationError
from eventpulse.services.field_builder import FieldDefinitionBuilder, split_options
from eventpulse.services.schemas import FieldDefinition


def test_add_field_blocked_until_current_fields_complete():
    builder = FieldDefinitionBuilder()
    builder.add_field()

    with pytest.raises(AuthoringIncompleteFieldError) as exc:
        builder.add_field()
    assert str(exc.value) == "Please complete all current fields before adding new ones."

    builder.update_field(0, "label", "College")
    builder.add_field()
    assert len(builder) == 2
    assert builder.incomplete_positions() == [1]


def test_dropdown_needs_options_to_be_complete():
    builder = FieldDefinitionBuilder()
    builder.add_field()
    builder.update_field(0, "label", "T-shirt")
    builder.update_field(0, "type", "dropdown")

    assert not builder.all_complete()
    with pytest.raises(AuthoringIncompleteFieldError):
        builder.add_field()

    builder.update_field(0, "options", " S, M ,, L ")
    assert builder.fields[0].options == ["S", "M", "L"]
    builder.add_field()


def test_update_replaces_definition_instead_of_mutating():
    builder = FieldDefinitionBuilder([FieldDefinition(label="Name")])
    before = builder.fields

    updated = builder.update_field(0, "isIndividual", True)

    assert updated.is_individual is True
    assert before[0].is_individual is False
    assert builder.fields[0] is updated


def test_update_rejects_unknown_key_and_bad_index():
    builder = FieldDefinitionBuilder([FieldDefinition(label="Name")])
    with pytest.raises(ValidationError):
        builder.update_field(0, "color", "red")
    with pytest.raises(ValidationError):
        builder.update_field(3, "label", "x")


def test_remove_and_validate():
    builder = FieldDefinitionBuilder(
        [FieldDefinition(label="Name"), FieldDefinition(label="", type=FieldType.email)]
    )
    with pytest.raises(AuthoringIncompleteFieldError, match="#2"):
        builder.validate()

    removed = builder.remove_field(1)
    assert removed.type == FieldType.email
    assert [f.label for f in builder.validate()] == ["Name"]


def test_split_options():
    assert split_options(None) == []
    assert split_options("a, b,,") == ["a", "b"]
    assert split_options([" x ", ""]) == ["x"]


def test_field_definition_dict_shape():
    definition = FieldDefinition.from_dict(
        {"label": "Size", "type": "dropdown", "options": "S,M", "isIndividual": True, "required": True}
    )
    assert definition.options == ["S", "M"]
    assert definition.to_dict() == {
        "label": "Size",
        "type": "dropdown",
        "required": True,
        "options": ["S", "M"],
        "isIndividual": True,
    }


def test_unknown_field_type_is_a_validation_error():
    builder = FieldDefinitionBuilder([FieldDefinition(label="Name")])
    with pytest.raises(ValidationError, match="Unknown field type: colour"):
        builder.update_field(0, "type", "colour")
    assert builder.fields[0].type == FieldType.text

    with pytest.raises(ValidationError):
        FieldDefinition.from_dict({"label": "Name", "type": "colour"})
