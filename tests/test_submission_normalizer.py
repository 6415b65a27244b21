from __future__ import annotations

import pytest

from eventpulse.services.exceptions import MissingRequiredAnswerError, TeamSizeNotSelectedError, ValidationError
from eventpulse.services.schemas import FieldDefinition, TeamConfiguration
from eventpulse.services.submission_normalizer import Applicant, build_submission
from tests.conftest import college_and_name_fields


def test_team_answers_and_participant_answers_are_split():
    submission = build_submission(
        college_and_name_fields(),
        TeamConfiguration(team_size=2),
        {"field_0": "MIT", "field_1_participant_0": "Alice", "field_1_participant_1": "Bob"},
    )

    assert submission.responses == {"College": "MIT"}
    assert submission.participants == [{"Name": "Alice"}, {"Name": "Bob"}]


def test_blank_participant_answer_blocks_submission():
    with pytest.raises(MissingRequiredAnswerError) as exc:
        build_submission(
            college_and_name_fields(),
            TeamConfiguration(team_size=2),
            {"field_0": "MIT", "field_1_participant_0": "Alice", "field_1_participant_1": ""},
        )
    assert "Name" in str(exc.value)
    assert "Participant 2" in str(exc.value)


def test_no_cross_contamination_between_scopes():
    fields = [
        FieldDefinition(label="Team Name"),
        FieldDefinition(label="Name", is_individual=True),
        FieldDefinition(label="Email", is_individual=True),
        FieldDefinition(label="Track"),
    ]
    form = {
        "field_0": "Rockets",
        "field_1_participant_0": "Ann",
        "field_2_participant_0": "ann@x.io",
        "field_1_participant_1": "Ben",
        "field_3": " AI ",
    }
    submission = build_submission(fields, TeamConfiguration(team_size=2), form)

    assert submission.responses == {"Team Name": "Rockets", "Track": "AI"}
    assert submission.participants == [
        {"Name": "Ann", "Email": "ann@x.io"},
        {"Name": "Ben", "Email": ""},
    ]


def test_solo_event_keeps_everything_in_responses():
    submission = build_submission(
        college_and_name_fields(),
        TeamConfiguration(),
        {"field_0": "MIT", "field_1": "Alice"},
    )
    assert submission.responses == {"College": "MIT", "Name": "Alice"}
    assert submission.participants == []


def test_flexible_team_uses_selected_size():
    team = TeamConfiguration(flexible_team_size=True, team_size_min=1, team_size_max=3)
    form = {"field_0": "IIT", "field_1_participant_0": "A", "field_1_participant_1": "B"}

    with pytest.raises(TeamSizeNotSelectedError):
        build_submission(college_and_name_fields(), team, form)

    submission = build_submission(college_and_name_fields(), team, form, selected_size=2)
    assert len(submission.participants) == 2


def test_no_fields_solo_uses_applicant():
    submission = build_submission([], TeamConfiguration(), {}, applicant=Applicant("Dana", "dana@x.io"))
    assert submission.responses == {}
    assert submission.participants == [{"name": "Dana", "email": "dana@x.io"}]


def test_no_fields_team_needs_every_manual_participant():
    team = TeamConfiguration(team_size=2)
    with pytest.raises(ValidationError, match="2 participants"):
        build_submission([], team, {}, manual_participants=[{"name": "A", "email": "a@x.io"}])
    with pytest.raises(ValidationError, match="name and email"):
        build_submission(
            [],
            team,
            {},
            manual_participants=[{"name": "A", "email": "a@x.io"}, {"name": "B", "email": ""}],
        )

    submission = build_submission(
        [],
        team,
        {},
        manual_participants=[{"name": "A", "email": "a@x.io"}, {"name": "B", "email": "b@x.io"}],
        team_name=" Owls ",
    )
    assert len(submission.participants) == 2
    assert submission.team_name == "Owls"
