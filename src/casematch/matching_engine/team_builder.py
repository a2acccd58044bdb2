"""
TeamBuilder classes contain all algorithms and logic for assembling
teams from a pool of unmatched participants under one relaxation tier.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from itertools import combinations
from typing import List, Optional, Sequence, Tuple, Mapping

import numpy as np

from .constraints import ConstraintValidator
from .data_models import Participant, Team, Tier, MIN_TEAM_SIZE, MAX_TEAM_SIZE
from .matcher import jaccard

# Scores closer than this are treated as ties
SCORE_DECIMALS = 9


@dataclass(frozen=True)
class BuildContext:
    """Read-only inputs shared by every builder within one iteration."""
    scores: np.ndarray
    index: Mapping[str, int]
    iteration: int = 1
    wait_counts: Mapping[str, int] = field(default_factory=dict)
    score_floor: float = 30.0
    team_offset: int = 0
    verbose: bool = False

    def rows(self, participants: Sequence[Participant]) -> np.ndarray:
        return np.array([self.index[p.id] for p in participants], dtype=int)

    def waits(self, participants: Sequence[Participant]) -> np.ndarray:
        return np.array([self.wait_counts.get(p.id, 0) for p in participants], dtype=int)


@dataclass(frozen=True)
class TierOutcome:
    """Teams produced by one tier and the participants it left behind."""
    tier: Tier
    teams: Tuple[Team, ...]
    remaining: Tuple[Participant, ...]

    @property
    def matched_count(self) -> int:
        return sum(team.team_size for team in self.teams)


def work_style_label(members: Sequence[Participant]) -> str:
    """Qualitative label from the mean pairwise working-style overlap."""
    if not any(member.working_style for member in members):
        return "Unspecified"
    pairs = list(combinations(members, 2))
    overlap = sum(jaccard(a.working_style, b.working_style) for a, b in pairs) / len(pairs)
    if overlap >= 0.6:
        return "Highly Compatible"
    if overlap >= 0.3:
        return "Moderately Compatible"
    return "Diverse Styles"


def assemble_team(members: Sequence[Participant], team_id: str, tier: Tier,
                  iteration: int, scores: np.ndarray, index: Mapping[str, int]) -> Team:
    """Create the Team record and its derived metrics."""
    size = len(members)
    rows = [index[member.id] for member in members]
    pair_scores = [scores[i, j] for i, j in combinations(rows, 2)]
    compatibility = float(np.mean(pair_scores)) if pair_scores else 0.0

    common = frozenset.intersection(*(member.case_preferences for member in members))
    size_matches = sum(1 for member in members if member.preferred_team_size == size)

    return Team(
        id=team_id,
        members=tuple(members),
        compatibility_score=min(100.0, max(0.0, compatibility)),
        team_size=size,
        average_experience=sum(member.experience.rank for member in members) / size,
        preferred_team_size_match=size_matches / size * 100,
        common_case_types=tuple(sorted(common)),
        work_style_compatibility=work_style_label(members),
        tier=tier,
        iteration=iteration,
    )


class TeamBuilder(ABC):
    """Greedy team assembly under one relaxation tier."""

    tier: Tier
    target_sizes = tuple(range(MAX_TEAM_SIZE, MIN_TEAM_SIZE - 1, -1))

    def __init__(self, validator: Optional[ConstraintValidator] = None):
        self.validator = validator or ConstraintValidator()

    @abstractmethod
    def score_floor(self, context: BuildContext) -> Optional[float]:
        """Minimum mean score a group must reach, or None for no floor."""

    def eligible(self, participant: Participant, size: int) -> bool:
        return self.validator.fits_size(participant, size, self.tier)

    def build(self, pool: Sequence[Participant], context: BuildContext) -> TierOutcome:
        """Form as many teams as possible from the pool, largest sizes first."""
        remaining = list(pool)
        groups = []
        floor = self.score_floor(context)

        for size in self.target_sizes:
            candidates = [p for p in remaining if self.eligible(p, size)]
            if len(candidates) < size:
                continue

            formed = self._form_groups(self._density_order(candidates, context), size, context, floor)
            if formed:
                placed = {member.id for group in formed for member in group}
                remaining = [p for p in remaining if p.id not in placed]
                groups.extend(formed)

            if context.verbose:
                print(f"  [{self.tier.value}] size {size}: {len(formed)} teams "
                      f"from {len(candidates)} candidates, {len(remaining)} remaining")

        teams = tuple(
            assemble_team(group, f"team-{context.team_offset + n + 1}-iter{context.iteration}",
                          self.tier, context.iteration, context.scores, context.index)
            for n, group in enumerate(groups)
        )
        return TierOutcome(tier=self.tier, teams=teams, remaining=tuple(remaining))

    def _density_order(self, candidates: Sequence[Participant],
                       context: BuildContext) -> List[Participant]:
        """Sort candidates by mean score against the rest of the candidates, densest first."""
        if len(candidates) < 2:
            return list(candidates)
        rows = context.rows(candidates)
        sub = context.scores[np.ix_(rows, rows)]
        density = (sub.sum(axis=1) - np.diag(sub)) / (len(candidates) - 1)
        waits = context.waits(candidates)
        order = sorted(
            range(len(candidates)),
            key=lambda k: (-round(float(density[k]), SCORE_DECIMALS), -int(waits[k]), k),
        )
        return [candidates[k] for k in order]

    def _form_groups(self, candidates: Sequence[Participant], size: int,
                     context: BuildContext, floor: Optional[float]) -> List[List[Participant]]:
        available = list(candidates)
        groups = []
        while len(available) >= size:
            group = self._best_group(available, size, context, floor)
            if group is None:
                break
            groups.append(group)
            placed = {member.id for member in group}
            available = [p for p in available if p.id not in placed]
        return groups

    def _best_group(self, candidates: Sequence[Participant], size: int,
                    context: BuildContext, floor: Optional[float]) -> Optional[List[Participant]]:
        """Seed with the best pair, then grow by the candidate that maximizes the mean score.

        Seeds are tried best-first until one grows into a valid group.
        """
        rows = context.rows(candidates)
        sub = context.scores[np.ix_(rows, rows)]
        waits = context.waits(candidates)

        seeds = [
            (i, j) for i, j in combinations(range(len(candidates)), 2)
            if self.validator.is_cohort_compatible([candidates[i], candidates[j]])
        ]
        seeds.sort(key=lambda pair: (
            -round(float(sub[pair]), SCORE_DECIMALS),
            -int(waits[pair[0]] + waits[pair[1]]),
            pair,
        ))

        for seed in seeds:
            grown = self._grow(list(seed), size, sub, waits, candidates)
            if grown is None:
                continue
            members = [candidates[k] for k in grown]
            if not self.validator.is_valid_group(members, self.tier):
                continue
            if floor is not None and self._mean(sub, grown) < floor:
                continue
            return members
        return None

    def _grow(self, group: List[int], size: int, sub: np.ndarray, waits: np.ndarray,
              candidates: Sequence[Participant]) -> Optional[List[int]]:
        group_sum = float(sub[group[0], group[1]])
        while len(group) < size:
            pair_count = (len(group) + 1) * len(group) / 2
            gains = sub[:, group].sum(axis=1)
            members = [candidates[k] for k in group]

            best, best_key, best_gain = None, None, 0.0
            for k in range(len(candidates)):
                if k in group:
                    continue
                if not self.validator.is_cohort_compatible(members + [candidates[k]]):
                    continue
                mean = (group_sum + gains[k]) / pair_count
                key = (round(float(mean), SCORE_DECIMALS), int(waits[k]), -k)
                if best_key is None or key > best_key:
                    best, best_key, best_gain = k, key, float(gains[k])

            if best is None:
                return None
            group.append(best)
            group_sum += best_gain
        return group

    @staticmethod
    def _mean(sub: np.ndarray, group: Sequence[int]) -> float:
        pair_scores = [sub[i, j] for i, j in combinations(group, 2)]
        return float(np.mean(pair_scores)) if pair_scores else 0.0


class StrictTeamBuilder(TeamBuilder):
    """Every member's preferred team size must equal the team size."""

    tier = Tier.STRICT

    def score_floor(self, context: BuildContext) -> Optional[float]:
        return None


class RelaxedTeamBuilder(TeamBuilder):
    """Team size may differ from each member's preference by at most one."""

    tier = Tier.RELAXED

    def score_floor(self, context: BuildContext) -> Optional[float]:
        return None


class StrategicTeamBuilder(TeamBuilder):
    """Any size from 2 to 4; maximizes matched count as long as the group clears the score floor."""

    tier = Tier.STRATEGIC

    def score_floor(self, context: BuildContext) -> Optional[float]:
        return context.score_floor


def default_builders(validator: Optional[ConstraintValidator] = None) -> Tuple[TeamBuilder, ...]:
    """Builders in the order the tiers are attempted."""
    return (
        StrictTeamBuilder(validator),
        RelaxedTeamBuilder(validator),
        StrategicTeamBuilder(validator),
    )
