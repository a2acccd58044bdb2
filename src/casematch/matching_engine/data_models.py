"""
Data models for the team formation engine.
Centralizes all enumerations and dataclass definitions for type safety and clean code organization.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Any, Tuple, FrozenSet, Mapping


class ParticipantValidationError(ValueError):
    """Raised when a participant record cannot be turned into a valid Participant."""

    def __init__(self, reasons: List[str], participant_id: Optional[str] = None):
        self.reasons = list(reasons)
        self.participant_id = participant_id
        super().__init__("; ".join(self.reasons))


class EducationLevel(str, Enum):
    UNDERGRADUATE = "Undergraduate"
    POSTGRADUATE = "Postgraduate"


class CohortPreference(str, Enum):
    UNDERGRAD_ONLY = "Undergrads only"
    POSTGRAD_ONLY = "Postgrads only"
    EITHER = "Either UG or PG"


class Availability(str, Enum):
    """Availability over the next few weeks, on an ordinal scale."""
    UNSPECIFIED = "Unspecified"
    LIGHTLY = "Lightly Available (1–4 hrs/week)"
    MODERATELY = "Moderately Available (5–10 hrs/week)"
    FULLY = "Fully Available (10–15 hrs/week)"

    @property
    def rank(self) -> int:
        # Unspecified sits on the midpoint of the scale
        return {
            Availability.UNSPECIFIED: 1,
            Availability.LIGHTLY: 0,
            Availability.MODERATELY: 1,
            Availability.FULLY: 2,
        }[self]


class ExperienceLevel(str, Enum):
    """Previous case competition experience, on an ordinal scale."""
    UNSPECIFIED = "Unspecified"
    NONE = "None"
    PARTICIPATED_1_2 = "Participated in 1–2"
    PARTICIPATED_3_PLUS = "Participated in 3+"
    FINALIST_WINNER = "Finalist/Winner in at least one"

    @property
    def rank(self) -> int:
        return {
            ExperienceLevel.UNSPECIFIED: 0,
            ExperienceLevel.NONE: 0,
            ExperienceLevel.PARTICIPATED_1_2: 1,
            ExperienceLevel.PARTICIPATED_3_PLUS: 2,
            ExperienceLevel.FINALIST_WINNER: 3,
        }[self]


AVAILABILITY_SPAN = 2
EXPERIENCE_SPAN = 3
MIN_TEAM_SIZE = 2
MAX_TEAM_SIZE = 4
MAX_CORE_STRENGTHS = 3


class Tier(str, Enum):
    """Relaxation tiers, in the order they are attempted."""
    STRICT = "strict"
    RELAXED = "relaxed"
    STRATEGIC = "strategic"


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first present key, so both camelCase and snake_case input work."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _as_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    elif isinstance(value, Mapping) or not isinstance(value, Iterable):
        raise TypeError(f"expected a string or a list, got {type(value).__name__}")
    return [str(v).strip() for v in value if str(v).strip()]


def _as_team_size(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError("a boolean is not a team size")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"{value} is not a whole number")
    return int(value)


@dataclass(frozen=True)
class Participant:
    """A single participant profile, already normalized into the fixed enumerations."""
    id: str
    full_name: str
    core_strengths: FrozenSet[str]
    preferred_team_size: int
    education_level: EducationLevel = EducationLevel.UNDERGRADUATE
    team_cohort_preference: CohortPreference = CohortPreference.EITHER
    availability: Availability = Availability.UNSPECIFIED
    experience: ExperienceLevel = ExperienceLevel.UNSPECIFIED
    preferred_roles: Tuple[str, ...] = ()
    working_style: FrozenSet[str] = frozenset()
    case_preferences: FrozenSet[str] = frozenset()
    email: str = ""
    college_name: str = ""

    @property
    def skill_profile(self) -> FrozenSet[str]:
        """Core strengths together with preferred roles."""
        return self.core_strengths | frozenset(self.preferred_roles)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Participant':
        """Create Participant from dictionary data.

        Raises:
            ParticipantValidationError: if a field holds a label outside its enumeration
                or a required field is missing.
        """
        participant_id = _pick(data, 'id')
        reasons = []
        if participant_id is None or str(participant_id).strip() == "":
            reasons.append("missing id")
        else:
            participant_id = str(participant_id)

        def enum_field(enum_cls, keys, default):
            raw = _pick(data, *keys)
            if raw is None or raw == "":
                return default
            try:
                return enum_cls(raw)
            except ValueError:
                reasons.append(f"{keys[0]} has unknown value {raw!r}")
                return default

        education_level = enum_field(
            EducationLevel, ('educationLevel', 'education_level'), EducationLevel.UNDERGRADUATE)
        cohort = enum_field(
            CohortPreference, ('teamCohortPreference', 'team_cohort_preference'), CohortPreference.EITHER)
        availability = enum_field(
            Availability, ('availability',), Availability.UNSPECIFIED)
        experience = enum_field(
            ExperienceLevel, ('experience',), ExperienceLevel.UNSPECIFIED)

        def list_field(keys):
            raw = _pick(data, *keys)
            try:
                return _as_list(raw)
            except TypeError:
                reasons.append(f"{keys[0]} must be a string or a list, not {raw!r}")
                return []

        core_strengths = list_field(('coreStrengths', 'core_strengths'))
        preferred_roles = list_field(('preferredRoles', 'preferred_roles'))
        working_style = list_field(('workingStyle', 'working_style'))
        case_preferences = list_field(('casePreferences', 'case_preferences'))

        raw_size = _pick(data, 'preferredTeamSize', 'preferred_team_size')
        try:
            preferred_team_size = _as_team_size(raw_size)
        except (TypeError, ValueError):
            reasons.append(f"preferredTeamSize is not an integer: {raw_size!r}")
            preferred_team_size = 0

        if reasons:
            raise ParticipantValidationError(reasons, participant_id)

        return cls(
            id=participant_id,
            full_name=str(_pick(data, 'fullName', 'full_name', default='')),
            email=str(_pick(data, 'email', default='')),
            college_name=str(_pick(data, 'collegeName', 'college_name', default='')),
            education_level=education_level,
            core_strengths=frozenset(core_strengths),
            preferred_roles=tuple(preferred_roles),
            working_style=frozenset(working_style),
            case_preferences=frozenset(case_preferences),
            availability=availability,
            experience=experience,
            preferred_team_size=preferred_team_size,
            team_cohort_preference=cohort,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'fullName': self.full_name,
            'email': self.email,
            'collegeName': self.college_name,
            'educationLevel': self.education_level.value,
            'coreStrengths': sorted(self.core_strengths),
            'preferredRoles': list(self.preferred_roles),
            'workingStyle': sorted(self.working_style),
            'casePreferences': sorted(self.case_preferences),
            'availability': self.availability.value,
            'experience': self.experience.value,
            'preferredTeamSize': self.preferred_team_size,
            'teamCohortPreference': self.team_cohort_preference.value,
        }


@dataclass(frozen=True)
class Team:
    """A formed team with its compatibility details."""
    id: str
    members: Tuple[Participant, ...]
    compatibility_score: float
    team_size: int
    average_experience: float
    preferred_team_size_match: float
    common_case_types: Tuple[str, ...]
    work_style_compatibility: str
    tier: Tier
    iteration: int = 0

    @property
    def member_ids(self) -> Tuple[str, ...]:
        return tuple(member.id for member in self.members)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'members': [member.to_dict() for member in self.members],
            'compatibilityScore': self.compatibility_score,
            'teamSize': self.team_size,
            'averageExperience': self.average_experience,
            'preferredTeamSizeMatch': self.preferred_team_size_match,
            'commonCaseTypes': list(self.common_case_types),
            'workStyleCompatibility': self.work_style_compatibility,
            'tier': self.tier.value,
            'iteration': self.iteration,
        }


@dataclass(frozen=True)
class IterationRecord:
    """Bookkeeping for a single pass over the unmatched pool."""
    iteration: int
    participants_processed: int
    teams_formed: int
    participants_matched: int
    efficiency: float
    remaining_unmatched: int
    tier: Optional[Tier] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'iteration': self.iteration,
            'participantsProcessed': self.participants_processed,
            'teamsFormed': self.teams_formed,
            'participantsMatched': self.participants_matched,
            'efficiency': self.efficiency,
            'remainingUnmatched': self.remaining_unmatched,
            'tier': self.tier.value if self.tier else None,
        }


@dataclass(frozen=True)
class MatchingStatistics:
    """Summary statistics over a complete matching run."""
    total_participants: int
    teams_formed: int
    average_team_size: float
    matching_efficiency: float
    team_size_distribution: Dict[int, int]
    case_type_distribution: Dict[str, int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'totalParticipants': self.total_participants,
            'teamsFormed': self.teams_formed,
            'averageTeamSize': self.average_team_size,
            'matchingEfficiency': self.matching_efficiency,
            'teamSizeDistribution': {str(k): v for k, v in self.team_size_distribution.items()},
            'caseTypeDistribution': dict(self.case_type_distribution),
        }


@dataclass(frozen=True)
class IterationSummary:
    """Roll-up of the iteration history."""
    total_iterations: int
    total_teams_formed: int
    total_participants_matched: int
    final_efficiency: float
    average_iteration_efficiency: float
    best_iteration: Optional[IterationRecord]
    worst_iteration: Optional[IterationRecord]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'totalIterations': self.total_iterations,
            'totalTeamsFormed': self.total_teams_formed,
            'totalParticipantsMatched': self.total_participants_matched,
            'finalEfficiency': self.final_efficiency,
            'averageIterationEfficiency': self.average_iteration_efficiency,
            'bestIteration': self.best_iteration.to_dict() if self.best_iteration else None,
            'worstIteration': self.worst_iteration.to_dict() if self.worst_iteration else None,
        }


@dataclass(frozen=True)
class InvalidRecord:
    """A rejected input record and why it was rejected."""
    record: Dict[str, Any]
    reasons: Tuple[str, ...]
    participant_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'participantId': self.participant_id,
            'reasons': list(self.reasons),
            'record': self.record,
        }


@dataclass(frozen=True)
class MatchingResult:
    """Complete output of one engine invocation."""
    teams: Tuple[Team, ...]
    unmatched: Tuple[Participant, ...]
    statistics: MatchingStatistics
    iterations: int
    iteration_history: Tuple[IterationRecord, ...]
    iteration_summary: IterationSummary
    invalid_records: Tuple[InvalidRecord, ...] = field(default_factory=tuple)

    @property
    def matched(self) -> List[Participant]:
        return [member for team in self.teams for member in team.members]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'teams': [team.to_dict() for team in self.teams],
            'unmatched': [participant.to_dict() for participant in self.unmatched],
            'statistics': self.statistics.to_dict(),
            'iterations': self.iterations,
            'iterationHistory': [record.to_dict() for record in self.iteration_history],
            'iterationSummary': self.iteration_summary.to_dict(),
            'invalidRecords': [invalid.to_dict() for invalid in self.invalid_records],
        }
