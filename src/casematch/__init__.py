"""
CaseMatch Source Package
========================
Iterative team formation for case competition participants.
"""

from .config import EngineSettings, load_settings
from .matching_engine import MatchingResult, Participant, Team
from .reporter import ResultExporter
from .services import MatchingService, form_teams

__version__ = "0.1.0"

__all__ = [
    'EngineSettings',
    'load_settings',
    'MatchingResult',
    'Participant',
    'Team',
    'ResultExporter',
    'MatchingService',
    'form_teams',
]
