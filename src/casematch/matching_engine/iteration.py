"""
IterationController drives successive passes over the unmatched pool,
escalating relaxation tiers until everyone is matched, no progress is made,
or the iteration cap is reached.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Sequence, Tuple, Mapping

from .data_models import IterationRecord, Participant, Team
from .matcher import CompatibilityScorer
from .team_builder import BuildContext, TeamBuilder, TierOutcome, default_builders

MAX_ITERATIONS = 10


@dataclass(frozen=True)
class IterationState:
    """Immutable snapshot between iterations."""
    pool: Tuple[Participant, ...]
    teams: Tuple[Team, ...] = ()
    history: Tuple[IterationRecord, ...] = ()
    wait_counts: Mapping[str, int] = field(default_factory=dict)

    @property
    def iteration(self) -> int:
        return len(self.history)

    @property
    def stalled(self) -> bool:
        return bool(self.history) and self.history[-1].participants_matched == 0


class IterationController:
    """Runs the tiered team builders over the pool until a terminal condition is hit."""

    def __init__(self, max_iterations: int = MAX_ITERATIONS, score_floor: float = 30.0,
                 builders: Optional[Sequence[TeamBuilder]] = None,
                 scorer: Optional[CompatibilityScorer] = None, verbose: bool = False):
        self.max_iterations = max(1, min(int(max_iterations), MAX_ITERATIONS))
        self.score_floor = score_floor
        self.builders = tuple(builders) if builders is not None else default_builders()
        self.scorer = scorer or CompatibilityScorer()
        self.verbose = verbose

    def run(self, participants: Sequence[Participant],
            wait_counts: Optional[Mapping[str, int]] = None) -> IterationState:
        """Fold iterations over the pool and return the final state."""
        pool = tuple(participants)
        scores = self.scorer.score_matrix(pool)
        index = {participant.id: row for row, participant in enumerate(pool)}

        if self.verbose:
            print("\n🚀 Starting iterative team formation")
            print(f"👥 Total participants: {len(pool)}")
            print(f"🔁 Max iterations: {self.max_iterations}")

        state = IterationState(pool=pool, wait_counts=dict(wait_counts or {}))
        while state.pool and state.iteration < self.max_iterations and not state.stalled:
            state = self.step(state, scores, index)

        if self.verbose:
            matched = sum(team.team_size for team in state.teams)
            print(f"✅ Finished after {state.iteration} iterations: "
                  f"{len(state.teams)} teams, {matched}/{len(pool)} matched, "
                  f"{len(state.pool)} unmatched")
        return state

    def step(self, state: IterationState, scores, index: Mapping[str, int]) -> IterationState:
        """Run one iteration: try each tier in order until one forms a team."""
        iteration = state.iteration + 1
        context = BuildContext(
            scores=scores,
            index=index,
            iteration=iteration,
            wait_counts=state.wait_counts,
            score_floor=self.score_floor,
            team_offset=len(state.teams),
            verbose=self.verbose,
        )

        if self.verbose:
            print(f"\n--- Iteration {iteration}: {len(state.pool)} unmatched participants ---")

        outcome = self._first_productive_tier(state.pool, context)
        teams = outcome.teams if outcome else ()
        remaining = outcome.remaining if outcome else state.pool
        matched = outcome.matched_count if outcome else 0
        processed = len(state.pool)

        record = IterationRecord(
            iteration=iteration,
            participants_processed=processed,
            teams_formed=len(teams),
            participants_matched=matched,
            efficiency=matched / processed * 100 if processed else 0.0,
            remaining_unmatched=len(remaining),
            tier=outcome.tier if outcome else None,
        )

        if self.verbose:
            tier_name = record.tier.value if record.tier else "none"
            print(f"📊 Iteration {iteration} ({tier_name}): {record.teams_formed} teams, "
                  f"{matched} matched, {record.remaining_unmatched} remaining "
                  f"({record.efficiency:.1f}%)")
            if matched == 0:
                print(f"⚠️ No progress in iteration {iteration}, stopping")

        waits: Dict[str, int] = {
            participant.id: state.wait_counts.get(participant.id, 0) + 1 for participant in remaining
        }
        return replace(
            state,
            pool=tuple(remaining),
            teams=state.teams + tuple(teams),
            history=state.history + (record,),
            wait_counts=waits,
        )

    def _first_productive_tier(self, pool: Sequence[Participant],
                               context: BuildContext) -> Optional[TierOutcome]:
        for builder in self.builders:
            outcome = builder.build(pool, context)
            if outcome.teams:
                return outcome
        return None
