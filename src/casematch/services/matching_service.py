"""
Team Matching Service
=====================
The single entry point of the team formation engine.

This service orchestrates a matching run by:
1. Validating incoming participant records (bad records are reported, not fatal)
2. Running the tiered iterative matching over the valid pool
3. Aggregating statistics and the iteration history into a MatchingResult

Architecture:
- Accepts: a list of Participant objects or already-normalized participant dicts
- Performs: validation, scoring, strict/relaxed/strategic team building, aggregation
- Returns: an immutable MatchingResult, to be persisted by the caller as one unit
"""

from typing import Iterable, Mapping, Optional

from ..config import EngineSettings, load_settings
from ..matching_engine import (
    IterationController,
    MatchingResult,
    ParticipantLoader,
    ResultAggregator,
    UnmatchedAnalyzer,
    UnmatchedReport,
)
from ..matching_engine.data_loader import ParticipantInput


class MatchingService:
    """
    Team Matching Service

    Holds configuration only; every call to run() is independent.
    """

    def __init__(self, settings: Optional[EngineSettings] = None):
        """
        Initialize the Matching Service.

        Args:
            settings: Engine settings; read from the environment when omitted
        """
        self.settings = settings or load_settings()
        self.loader = ParticipantLoader(verbose=self.settings.verbose)
        self.aggregator = ResultAggregator()

    def _controller(self) -> IterationController:
        return IterationController(
            max_iterations=self.settings.max_iterations,
            score_floor=self.settings.strategic_score_floor,
            verbose=self.settings.verbose,
        )

    def run(self, participants: Iterable[ParticipantInput],
            wait_counts: Optional[Mapping[str, int]] = None) -> MatchingResult:
        """
        Form teams from a batch of participants.

        Args:
            participants: Participant objects or participant dicts
            wait_counts: Optional iterations already spent unmatched in earlier runs, by id

        Returns:
            MatchingResult with teams, unmatched participants, statistics and history
        """
        loaded = self.loader.load_records(participants)
        state = self._controller().run(loaded.participants, wait_counts)

        statistics = self.aggregator.aggregate(state.teams, state.pool, state.history)
        summary = self.aggregator.summarize_iterations(state.history, statistics)

        return MatchingResult(
            teams=state.teams,
            unmatched=state.pool,
            statistics=statistics,
            iterations=state.iteration,
            iteration_history=state.history,
            iteration_summary=summary,
            invalid_records=loaded.invalid_records,
        )

    def explain_unmatched(self, result: MatchingResult) -> UnmatchedReport:
        """Per-participant reasons for everyone the run left unmatched."""
        analyzer = UnmatchedAnalyzer(score_floor=self.settings.strategic_score_floor)
        return analyzer.analyze(result)


def form_teams(participants: Iterable[ParticipantInput],
               settings: Optional[EngineSettings] = None,
               wait_counts: Optional[Mapping[str, int]] = None) -> MatchingResult:
    """Partition participants into teams of 2-4 and return the MatchingResult."""
    return MatchingService(settings).run(participants, wait_counts)
