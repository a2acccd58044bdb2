"""
Engine configuration read from the environment (and a local .env file, if present).
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .matching_engine.iteration import MAX_ITERATIONS

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class EngineSettings:
    """Tunable knobs of the matching engine."""
    max_iterations: int = MAX_ITERATIONS
    strategic_score_floor: float = 30.0
    verbose: bool = False

    def __post_init__(self):
        # The iteration cap is a hard limit; configuration can only lower it
        object.__setattr__(self, 'max_iterations', max(1, min(int(self.max_iterations), MAX_ITERATIONS)))


def load_settings() -> EngineSettings:
    """Build settings from CASEMATCH_* environment variables."""
    return EngineSettings(
        max_iterations=int(os.getenv("CASEMATCH_MAX_ITERATIONS", MAX_ITERATIONS)),
        strategic_score_floor=float(os.getenv("CASEMATCH_STRATEGIC_SCORE_FLOOR", "30.0")),
        verbose=_env_bool("CASEMATCH_VERBOSE", False),
    )
