"""
ResultAggregator computes summary statistics and the iteration roll-up
from the teams, the unmatched pool and the iteration history.
"""

from typing import Dict, Sequence

import pandas as pd

from .data_models import (
    IterationRecord,
    IterationSummary,
    MatchingStatistics,
    Participant,
    Team,
)


class ResultAggregator:
    """Pure statistics over a finished matching run."""

    def team_size_distribution(self, teams: Sequence[Team]) -> Dict[int, int]:
        if not teams:
            return {}
        counts = pd.Series([team.team_size for team in teams], dtype="int64").value_counts()
        return {int(size): int(count) for size, count in counts.sort_index().items()}

    def case_type_distribution(self, teams: Sequence[Team]) -> Dict[str, int]:
        """Occurrences of each case preference across matched participants, most frequent first."""
        tags = [tag for team in teams for member in team.members for tag in member.case_preferences]
        if not tags:
            return {}
        counts = pd.Series(tags, dtype="object").value_counts()
        ordered = sorted(counts.items(), key=lambda item: (-int(item[1]), str(item[0])))
        return {str(tag): int(count) for tag, count in ordered}

    def aggregate(self, teams: Sequence[Team], unmatched: Sequence[Participant],
                  history: Sequence[IterationRecord]) -> MatchingStatistics:
        matched = sum(team.team_size for team in teams)
        total = matched + len(unmatched)

        return MatchingStatistics(
            total_participants=total,
            teams_formed=len(teams),
            average_team_size=matched / len(teams) if teams else 0.0,
            matching_efficiency=matched / total * 100 if total else 0.0,
            team_size_distribution=self.team_size_distribution(teams),
            case_type_distribution=self.case_type_distribution(teams),
        )

    def summarize_iterations(self, history: Sequence[IterationRecord],
                             statistics: MatchingStatistics) -> IterationSummary:
        """Average, best and worst iteration efficiency."""
        if not history:
            return IterationSummary(
                total_iterations=0,
                total_teams_formed=statistics.teams_formed,
                total_participants_matched=0,
                final_efficiency=statistics.matching_efficiency,
                average_iteration_efficiency=0.0,
                best_iteration=None,
                worst_iteration=None,
            )

        frame = self.history_frame(history)
        best = history[int(frame['efficiency'].to_numpy().argmax())]
        worst = history[int(frame['efficiency'].to_numpy().argmin())]

        return IterationSummary(
            total_iterations=len(history),
            total_teams_formed=int(frame['teams_formed'].sum()),
            total_participants_matched=int(frame['participants_matched'].sum()),
            final_efficiency=statistics.matching_efficiency,
            average_iteration_efficiency=float(frame['efficiency'].mean()),
            best_iteration=best,
            worst_iteration=worst,
        )

    @staticmethod
    def history_frame(history: Sequence[IterationRecord]) -> pd.DataFrame:
        """Iteration history as a DataFrame, one row per iteration."""
        columns = ['iteration', 'participants_processed', 'teams_formed',
                   'participants_matched', 'efficiency', 'remaining_unmatched', 'tier']
        rows = [
            [record.iteration, record.participants_processed, record.teams_formed,
             record.participants_matched, record.efficiency, record.remaining_unmatched,
             record.tier.value if record.tier else None]
            for record in history
        ]
        return pd.DataFrame(rows, columns=columns)
