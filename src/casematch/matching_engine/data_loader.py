"""
ParticipantLoader class responsible for turning incoming participant records
into validated Participant objects. Bad records are set aside with their
reasons instead of failing the batch.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Tuple, Union

from .data_models import (
    InvalidRecord,
    Participant,
    ParticipantValidationError,
    MIN_TEAM_SIZE,
    MAX_TEAM_SIZE,
    MAX_CORE_STRENGTHS,
)

ParticipantInput = Union[Participant, Mapping[str, Any]]


@dataclass(frozen=True)
class LoadResult:
    """Participants that passed validation, and the records that did not."""
    participants: Tuple[Participant, ...]
    invalid_records: Tuple[InvalidRecord, ...]


def validate_participant(participant: Participant) -> List[str]:
    """Return the invariant violations of a participant; empty when valid."""
    problems = []
    if not participant.core_strengths:
        problems.append("coreStrengths must not be empty")
    elif len(participant.core_strengths) > MAX_CORE_STRENGTHS:
        problems.append(f"coreStrengths has more than {MAX_CORE_STRENGTHS} entries")
    if not MIN_TEAM_SIZE <= participant.preferred_team_size <= MAX_TEAM_SIZE:
        problems.append(
            f"preferredTeamSize {participant.preferred_team_size} outside "
            f"{MIN_TEAM_SIZE}-{MAX_TEAM_SIZE}"
        )
    return problems


class ParticipantLoader:
    """Handles validation of participant records and loading them from JSON."""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def load_records(self, records: Iterable[ParticipantInput]) -> LoadResult:
        """Validate every record, keeping input order for the valid ones."""
        participants = []
        invalid = []
        seen_ids = set()

        for record in records:
            raw = {'value': repr(record)}
            try:
                if isinstance(record, Participant):
                    raw = record.to_dict()
                elif isinstance(record, Mapping):
                    raw = dict(record)
                else:
                    raise ParticipantValidationError(["record is not a mapping"])
                participant = self._to_participant(record)
                if participant.id in seen_ids:
                    raise ParticipantValidationError(
                        [f"duplicate id {participant.id!r}"], participant.id)
            except ParticipantValidationError as e:
                invalid.append(InvalidRecord(record=raw, reasons=tuple(e.reasons),
                                             participant_id=e.participant_id))
                if self.verbose:
                    print(f"  ❌ Rejected record {e.participant_id or '<no id>'}: {e}")
                continue

            seen_ids.add(participant.id)
            participants.append(participant)

        if self.verbose:
            print(f"✅ Loaded {len(participants)} participants, rejected {len(invalid)} records")

        return LoadResult(participants=tuple(participants), invalid_records=tuple(invalid))

    def load_json(self, path: Union[str, Path]) -> LoadResult:
        """Load a JSON file holding a list of records, or an object with a 'participants' list."""
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        if isinstance(data, dict):
            data = data.get('participants', [])
        return self.load_records(data)

    @staticmethod
    def _to_participant(record: ParticipantInput) -> Participant:
        participant = record if isinstance(record, Participant) else Participant.from_dict(record)
        problems = validate_participant(participant)
        if problems:
            raise ParticipantValidationError(problems, participant.id)
        return participant
