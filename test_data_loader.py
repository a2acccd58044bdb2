import json

import pytest

from casematch.matching_engine import (
    Availability,
    CohortPreference,
    EducationLevel,
    ExperienceLevel,
    Participant,
    ParticipantLoader,
    ParticipantValidationError,
    validate_participant,
)


def raw_record(**overrides):
    record = {
        "id": "r1",
        "fullName": "Alice Johnson",
        "email": "alice@test.com",
        "collegeName": "MIT",
        "educationLevel": "Undergraduate",
        "coreStrengths": ["Research", "Modeling"],
        "preferredRoles": ["Team Lead"],
        "workingStyle": ["I enjoy brainstorming"],
        "casePreferences": ["Consulting", "Finance"],
        "availability": "Fully Available (10–15 hrs/week)",
        "experience": "Participated in 1–2",
        "preferredTeamSize": 4,
        "teamCohortPreference": "Either UG or PG",
    }
    record.update(overrides)
    return record


def test_from_dict_reads_camel_case():
    participant = Participant.from_dict(raw_record())
    assert participant.id == "r1"
    assert participant.core_strengths == frozenset({"Research", "Modeling"})
    assert participant.preferred_roles == ("Team Lead",)
    assert participant.availability == Availability.FULLY
    assert participant.experience == ExperienceLevel.PARTICIPATED_1_2
    assert participant.education_level == EducationLevel.UNDERGRADUATE
    assert participant.team_cohort_preference == CohortPreference.EITHER
    assert participant.preferred_team_size == 4


def test_from_dict_reads_snake_case_and_defaults_optional_fields():
    participant = Participant.from_dict({
        "id": 7, "full_name": "Bob", "core_strengths": "Markets", "preferred_team_size": "3",
    })
    assert participant.id == "7"
    assert participant.core_strengths == frozenset({"Markets"})
    assert participant.preferred_team_size == 3
    assert participant.availability == Availability.UNSPECIFIED
    assert participant.experience == ExperienceLevel.UNSPECIFIED
    assert participant.case_preferences == frozenset()


def test_from_dict_rejects_unknown_labels():
    with pytest.raises(ParticipantValidationError) as excinfo:
        Participant.from_dict(raw_record(availability="Whenever", experience="Lots"))
    assert len(excinfo.value.reasons) == 2
    assert excinfo.value.participant_id == "r1"


def test_to_dict_round_trips_through_from_dict():
    participant = Participant.from_dict(raw_record())
    assert Participant.from_dict(participant.to_dict()) == participant


def test_validate_participant(make_participant):
    assert validate_participant(make_participant("a")) == []
    assert validate_participant(make_participant("a", core_strengths=frozenset()))
    assert validate_participant(make_participant("a", core_strengths=frozenset({"a", "b", "c", "d"})))
    assert validate_participant(make_participant("a", preferred_team_size=5))


def test_loader_splits_valid_and_invalid_records(make_participant):
    loader = ParticipantLoader()
    result = loader.load_records([
        raw_record(id="a"),
        raw_record(id="b", coreStrengths=[]),
        raw_record(id="c", preferredTeamSize="four"),
        {"fullName": "No Id", "coreStrengths": ["Research"], "preferredTeamSize": 2},
        make_participant("d"),
        raw_record(id="a"),
    ])

    assert [p.id for p in result.participants] == ["a", "d"]
    reasons = {invalid.participant_id: invalid.reasons for invalid in result.invalid_records}
    assert set(reasons) == {"b", "c", None, "a"}
    assert any("duplicate" in reason for reason in reasons["a"])
    assert any("coreStrengths" in reason for reason in reasons["b"])


def test_invalid_record_keeps_raw_input():
    result = ParticipantLoader().load_records([raw_record(id="x", preferredTeamSize=9)])
    assert result.invalid_records[0].record["preferredTeamSize"] == 9


def test_load_json(tmp_path):
    path = tmp_path / "participants.json"
    path.write_text(json.dumps({"participants": [raw_record(id="a"), raw_record(id="b")]}), encoding="utf-8")
    result = ParticipantLoader().load_json(path)
    assert [p.id for p in result.participants] == ["a", "b"]


@pytest.mark.parametrize("entry", [None, "Alice", 42])
def test_loader_sets_aside_entries_that_are_not_mappings(entry):
    result = ParticipantLoader().load_records([raw_record(id="a"), entry, raw_record(id="b")])

    assert [p.id for p in result.participants] == ["a", "b"]
    assert len(result.invalid_records) == 1
    invalid = result.invalid_records[0]
    assert invalid.record == {"value": repr(entry)}
    assert invalid.reasons == ("record is not a mapping",)
    assert invalid.participant_id is None


@pytest.mark.parametrize("field", ["coreStrengths", "preferredRoles", "workingStyle", "casePreferences"])
def test_from_dict_rejects_scalar_list_fields(field):
    with pytest.raises(ParticipantValidationError) as excinfo:
        Participant.from_dict(raw_record(**{field: 5}))
    assert any(field in reason for reason in excinfo.value.reasons)


def test_loader_reports_scalar_core_strengths_as_invalid():
    result = ParticipantLoader().load_records([
        raw_record(id="a"),
        {"id": "c", "coreStrengths": 5, "preferredTeamSize": 2},
    ])
    assert [p.id for p in result.participants] == ["a"]
    assert result.invalid_records[0].participant_id == "c"


@pytest.mark.parametrize("size", [2.9, "2.5", True])
def test_from_dict_rejects_non_integral_team_size(size):
    with pytest.raises(ParticipantValidationError) as excinfo:
        Participant.from_dict(raw_record(preferredTeamSize=size))
    assert any("preferredTeamSize" in reason for reason in excinfo.value.reasons)


def test_from_dict_accepts_whole_float_team_size():
    assert Participant.from_dict(raw_record(preferredTeamSize=3.0)).preferred_team_size == 3
