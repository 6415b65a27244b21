from __future__ import annotations

from eventpulse.services.extraction import (
    canonical_label,
    decode_participants,
    extract_participants,
    lookup,
    resolve_field,
)


def test_decode_participants_shapes():
    assert decode_participants(None) == []
    assert decode_participants([{"Name": "A"}]) == [{"Name": "A"}]
    assert decode_participants({"0": {"Name": "A"}, "1": {"Name": "B"}}) == [{"Name": "A"}, {"Name": "B"}]
    assert decode_participants("garbage") == []


def test_resolve_field_handles_variants_and_case():
    assert resolve_field("WhatsApp Number", [{"Whats App Number": "999"}]) == "999"
    assert resolve_field("Email", [{"EMAIL ID": "a@x.io"}]) == "a@x.io"
    assert resolve_field("College Name", [{"college name": "NIT"}]) == "NIT"
    assert resolve_field("Gender", [{"Gender": "  "}]) == "-"
    assert canonical_label("whats app number") == "WhatsApp Number"
    assert canonical_label("Favourite colour") is None


def test_lookup_prefers_exact_key_over_case_insensitive():
    assert lookup(["Name"], [{"name": "lower"}, {"Name": "exact"}]) == "exact"


def test_index_keyed_participants():
    entry = {
        "responses": {"Team Name": "Owls", "College": "MIT"},
        "participants": {"0": {"Name": "A", "Email": "a@x.io"}, "1": {"Name": "B"}},
    }
    rows = extract_participants(entry)

    assert [r.name for r in rows] == ["A", "B"]
    assert rows[1].email == "-"
    assert {r.team_name for r in rows} == {"Owls"}


def test_missing_participants_fall_back_to_user():
    entry = {"responses": {}, "participants": None, "user": {"name": "Una", "email": "una@x.io"}}
    [row] = extract_participants(entry)
    assert (row.name, row.email) == ("Una", "una@x.io")


def test_solo_entry_without_user_uses_responses():
    entry = {"responses": {"Name": "Solo", "Whats App Number": "1234567890"}, "participants": []}
    [row] = extract_participants(entry)
    assert row.name == "Solo"
    assert row.whatsapp == "1234567890"
    assert row.college == "-"


def test_participant_arrays_inside_responses():
    entry = {"responses": {"Participants": [{"name": "P1"}, "P2"]}}
    rows = extract_participants(entry)
    assert [r.name for r in rows] == ["P1", "P2"]


def test_empty_participant_record_keeps_placeholder_row():
    entry = {"responses": {"Team Name": "Owls"}, "participants": [{}, {"Name": "B"}]}
    rows = extract_participants(entry)

    assert [r.name for r in rows] == ["-", "B"]
    assert rows[0].team_name == "Owls"
    assert rows[0].email == "-"
