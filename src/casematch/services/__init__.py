from .matching_service import MatchingService, form_teams

__all__ = ['MatchingService', 'form_teams']
