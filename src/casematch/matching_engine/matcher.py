"""
CompatibilityScorer class encapsulates all logic related to scoring
the mutual fit of two participants.
"""

from itertools import combinations
from typing import List, Sequence, Iterable, AbstractSet

import numpy as np
from sklearn.preprocessing import MultiLabelBinarizer

from .data_models import Participant, AVAILABILITY_SPAN, EXPERIENCE_SPAN, MIN_TEAM_SIZE, MAX_TEAM_SIZE


def jaccard(a: AbstractSet[str], b: AbstractSet[str]) -> float:
    """Jaccard similarity of two sets; two empty sets share nothing and score 0."""
    union = len(a | b)
    if union == 0:
        return 0.0
    return len(a & b) / union


class CompatibilityScorer:
    """Handles pairwise compatibility scoring between participants."""

    def __init__(self):
        """Initialize scorer as stateless utility class."""
        self.case_weight = 0.30
        self.skill_weight = 0.25
        self.experience_weight = 0.20
        self.availability_weight = 0.15
        self.team_size_weight = 0.10
        self.team_size_span = MAX_TEAM_SIZE - MIN_TEAM_SIZE

    def score(self, a: Participant, b: Participant) -> float:
        """Score two participants' mutual fit on a 0-100 scale."""
        case_overlap = jaccard(a.case_preferences, b.case_preferences)
        skill_overlap = jaccard(a.skill_profile, b.skill_profile)
        experience = 1 - abs(a.experience.rank - b.experience.rank) / EXPERIENCE_SPAN
        availability = 1 - abs(a.availability.rank - b.availability.rank) / AVAILABILITY_SPAN
        size_distance = min(abs(a.preferred_team_size - b.preferred_team_size), self.team_size_span)
        team_size = 1 - size_distance / self.team_size_span

        total = (self.case_weight * case_overlap
                 + self.skill_weight * skill_overlap
                 + self.experience_weight * experience
                 + self.availability_weight * availability
                 + self.team_size_weight * team_size)
        return float(min(100.0, max(0.0, total * 100)))

    def team_score(self, members: Sequence[Participant]) -> float:
        """Mean of all pairwise scores among the members."""
        pairs = list(combinations(members, 2))
        if not pairs:
            return 0.0
        return sum(self.score(a, b) for a, b in pairs) / len(pairs)

    def _jaccard_matrix(self, label_sets: List[Iterable[str]]) -> np.ndarray:
        """Pairwise Jaccard similarity of label sets via a binary indicator matrix."""
        binarizer = MultiLabelBinarizer()
        indicators = binarizer.fit_transform([sorted(labels) for labels in label_sets]).astype(float)
        if indicators.shape[1] == 0:
            return np.zeros((len(label_sets), len(label_sets)))

        intersection = indicators @ indicators.T
        sizes = indicators.sum(axis=1)
        union = sizes[:, None] + sizes[None, :] - intersection
        with np.errstate(divide='ignore', invalid='ignore'):
            similarity = np.where(union > 0, intersection / np.where(union > 0, union, 1), 0.0)
        return similarity

    def score_matrix(self, participants: Sequence[Participant]) -> np.ndarray:
        """Generate the full symmetric participant-participant score matrix."""
        n = len(participants)
        if n == 0:
            return np.zeros((0, 0))

        case_overlap = self._jaccard_matrix([p.case_preferences for p in participants])
        skill_overlap = self._jaccard_matrix([p.skill_profile for p in participants])

        experience = np.array([p.experience.rank for p in participants], dtype=float)
        availability = np.array([p.availability.rank for p in participants], dtype=float)
        sizes = np.array([p.preferred_team_size for p in participants], dtype=float)

        experience_fit = 1 - np.abs(experience[:, None] - experience[None, :]) / EXPERIENCE_SPAN
        availability_fit = 1 - np.abs(availability[:, None] - availability[None, :]) / AVAILABILITY_SPAN
        size_distance = np.minimum(np.abs(sizes[:, None] - sizes[None, :]), self.team_size_span)
        size_fit = 1 - size_distance / self.team_size_span

        matrix = (self.case_weight * case_overlap
                  + self.skill_weight * skill_overlap
                  + self.experience_weight * experience_fit
                  + self.availability_weight * availability_fit
                  + self.team_size_weight * size_fit) * 100
        return np.clip(matrix, 0.0, 100.0)


_default_scorer = CompatibilityScorer()


def compatibility_score(a: Participant, b: Participant) -> float:
    """Pure-function form of CompatibilityScorer.score."""
    return _default_scorer.score(a, b)
