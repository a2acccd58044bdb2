"""
UnmatchedAnalyzer explains why participants could not be placed in a team.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from .constraints import ConstraintValidator
from .data_models import MatchingResult, Participant, Tier
from .matcher import CompatibilityScorer


class ReasonCategory(str, Enum):
    INSUFFICIENT_CANDIDATES = "INSUFFICIENT_CANDIDATES"
    TEAM_SIZE = "TEAM_SIZE"
    TEAM_PREFERENCE = "TEAM_PREFERENCE"
    COMPATIBILITY = "COMPATIBILITY"


@dataclass(frozen=True)
class UnmatchedReason:
    category: ReasonCategory
    severity: str
    description: str


@dataclass(frozen=True)
class PotentialMatch:
    participant: Participant
    compatibility_score: float
    blocking_issues: Tuple[str, ...]


@dataclass(frozen=True)
class UnmatchedAnalysis:
    participant: Participant
    reasons: Tuple[UnmatchedReason, ...]
    potential_matches: Tuple[PotentialMatch, ...]


@dataclass(frozen=True)
class UnmatchedReport:
    total_unmatched: int
    analyses: Tuple[UnmatchedAnalysis, ...]
    reason_breakdown: Dict[str, int]

    def to_dict(self) -> Dict:
        return {
            'totalUnmatched': self.total_unmatched,
            'reasonBreakdown': dict(self.reason_breakdown),
            'analyses': [
                {
                    'participantId': analysis.participant.id,
                    'reasons': [
                        {'category': r.category.value, 'severity': r.severity, 'description': r.description}
                        for r in analysis.reasons
                    ],
                    'potentialMatches': [
                        {
                            'participantId': m.participant.id,
                            'compatibilityScore': m.compatibility_score,
                            'blockingIssues': list(m.blocking_issues),
                        }
                        for m in analysis.potential_matches
                    ],
                }
                for analysis in self.analyses
            ],
        }


class UnmatchedAnalyzer:
    """Builds a per-participant explanation for everyone left unmatched."""

    def __init__(self, score_floor: float = 30.0, top_k: int = 3,
                 scorer: Optional[CompatibilityScorer] = None,
                 validator: Optional[ConstraintValidator] = None):
        self.score_floor = score_floor
        self.top_k = top_k
        self.scorer = scorer or CompatibilityScorer()
        self.validator = validator or ConstraintValidator()

    def analyze(self, result: MatchingResult) -> UnmatchedReport:
        unmatched = list(result.unmatched)
        analyses = tuple(self.analyze_participant(p, unmatched) for p in unmatched)

        breakdown: Dict[str, int] = {}
        for analysis in analyses:
            for reason in analysis.reasons:
                breakdown[reason.category.value] = breakdown.get(reason.category.value, 0) + 1

        return UnmatchedReport(
            total_unmatched=len(unmatched),
            analyses=analyses,
            reason_breakdown=breakdown,
        )

    def analyze_participant(self, participant: Participant,
                            unmatched: Sequence[Participant]) -> UnmatchedAnalysis:
        others = [p for p in unmatched if p.id != participant.id]
        potential = sorted(
            (self._potential_match(participant, other) for other in others),
            key=lambda m: (-m.compatibility_score, m.participant.id),
        )
        reasons = self._reasons(participant, others, potential)
        return UnmatchedAnalysis(
            participant=participant,
            reasons=tuple(reasons),
            potential_matches=tuple(potential[:self.top_k]),
        )

    def _potential_match(self, participant: Participant, other: Participant) -> PotentialMatch:
        score = self.scorer.score(participant, other)
        issues = list(self.validator.violations([participant, other], Tier.STRATEGIC))
        if score < self.score_floor:
            issues.append(f"compatibility {score:.1f} below floor {self.score_floor:.1f}")
        return PotentialMatch(participant=other, compatibility_score=score, blocking_issues=tuple(issues))

    def _reasons(self, participant: Participant, others: List[Participant],
                 potential: List[PotentialMatch]) -> List[UnmatchedReason]:
        if not others:
            return [UnmatchedReason(
                ReasonCategory.INSUFFICIENT_CANDIDATES, "CRITICAL",
                "No other unmatched participants were left to form a team with.",
            )]

        reasons = []
        cohort_ok = [p for p in others if self.validator.is_cohort_compatible([participant, p])]
        if not cohort_ok:
            reasons.append(UnmatchedReason(
                ReasonCategory.TEAM_PREFERENCE, "HIGH",
                f"None of the {len(others)} remaining participants satisfy the cohort preferences "
                f"({participant.team_cohort_preference.value}, {participant.education_level.value}).",
            ))

        size_ok = [p for p in cohort_ok
                   if abs(p.preferred_team_size - participant.preferred_team_size) <= 1]
        if cohort_ok and not size_ok:
            reasons.append(UnmatchedReason(
                ReasonCategory.TEAM_SIZE, "MEDIUM",
                f"No compatible participant prefers a team size near {participant.preferred_team_size}.",
            ))

        if cohort_ok and all(m.compatibility_score < self.score_floor
                             for m in potential if m.participant in cohort_ok):
            reasons.append(UnmatchedReason(
                ReasonCategory.COMPATIBILITY, "MEDIUM",
                f"Every compatible participant scores below {self.score_floor:.1f}.",
            ))

        if not reasons:
            reasons.append(UnmatchedReason(
                ReasonCategory.INSUFFICIENT_CANDIDATES, "LOW",
                "Too few compatible participants remained to complete a team before matching stopped.",
            ))
        return reasons
