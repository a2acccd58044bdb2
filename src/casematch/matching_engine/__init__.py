"""
Matching Engine Package
========================
Core logic of the iterative team formation engine.

This package provides:
- Participant and team data models
- Pairwise compatibility scoring
- Hard-constraint validation per relaxation tier
- Strict, relaxed and strategic team builders
- Iteration control and result aggregation
"""

from .data_models import (
    Participant,
    Team,
    Tier,
    IterationRecord,
    IterationSummary,
    MatchingStatistics,
    MatchingResult,
    InvalidRecord,
    EducationLevel,
    CohortPreference,
    Availability,
    ExperienceLevel,
    ParticipantValidationError,
)
from .data_loader import ParticipantLoader, LoadResult, validate_participant
from .matcher import CompatibilityScorer, compatibility_score
from .constraints import ConstraintValidator, is_valid_group
from .team_builder import (
    TeamBuilder,
    StrictTeamBuilder,
    RelaxedTeamBuilder,
    StrategicTeamBuilder,
    BuildContext,
    TierOutcome,
)
from .iteration import IterationController, IterationState
from .aggregator import ResultAggregator
from .analysis import UnmatchedAnalyzer, UnmatchedReport

__all__ = [
    'Participant',
    'Team',
    'Tier',
    'IterationRecord',
    'IterationSummary',
    'MatchingStatistics',
    'MatchingResult',
    'InvalidRecord',
    'EducationLevel',
    'CohortPreference',
    'Availability',
    'ExperienceLevel',
    'ParticipantValidationError',
    'ParticipantLoader',
    'LoadResult',
    'validate_participant',
    'CompatibilityScorer',
    'compatibility_score',
    'ConstraintValidator',
    'is_valid_group',
    'TeamBuilder',
    'StrictTeamBuilder',
    'RelaxedTeamBuilder',
    'StrategicTeamBuilder',
    'BuildContext',
    'TierOutcome',
    'IterationController',
    'IterationState',
    'ResultAggregator',
    'UnmatchedAnalyzer',
    'UnmatchedReport',
]
