"""
ConstraintValidator checks whether a candidate group satisfies the hard
constraints of a relaxation tier.
"""

from typing import List, Sequence

from .data_models import (
    Participant,
    Tier,
    CohortPreference,
    EducationLevel,
    MIN_TEAM_SIZE,
    MAX_TEAM_SIZE,
)

# Largest allowed gap between a member's preferred size and the actual team size
SIZE_TOLERANCE = {
    Tier.STRICT: 0,
    Tier.RELAXED: 1,
    Tier.STRATEGIC: None,
}

_COHORT_REQUIREMENTS = {
    CohortPreference.UNDERGRAD_ONLY: EducationLevel.UNDERGRADUATE,
    CohortPreference.POSTGRAD_ONLY: EducationLevel.POSTGRADUATE,
}


class ConstraintValidator:
    """Hard-constraint checks for candidate groups."""

    def is_cohort_compatible(self, candidates: Sequence[Participant]) -> bool:
        """Every member's cohort preference is satisfied by the whole group.

        Monotone: a subset that fails can never pass once more members are added.
        """
        for requirement in self._required_levels(candidates):
            if any(member.education_level != requirement for member in candidates):
                return False
        return True

    def fits_size(self, participant: Participant, team_size: int, tier: Tier) -> bool:
        """Whether a participant may sit in a team of this size under the tier."""
        tolerance = SIZE_TOLERANCE[tier]
        if tolerance is None:
            return True
        return abs(participant.preferred_team_size - team_size) <= tolerance

    def is_valid_group(self, candidates: Sequence[Participant], tier: Tier) -> bool:
        return not self.violations(candidates, tier)

    def violations(self, candidates: Sequence[Participant], tier: Tier) -> List[str]:
        """Human-readable list of every rule the group breaks; empty when valid."""
        problems = []
        size = len(candidates)

        if not MIN_TEAM_SIZE <= size <= MAX_TEAM_SIZE:
            problems.append(f"group size {size} outside {MIN_TEAM_SIZE}-{MAX_TEAM_SIZE}")

        ids = [member.id for member in candidates]
        if len(set(ids)) != len(ids):
            problems.append("duplicate participant ids")

        for requirement in self._required_levels(candidates):
            mismatched = [m.full_name or m.id for m in candidates if m.education_level != requirement]
            if mismatched:
                problems.append(
                    f"cohort requires {requirement.value} only, but {', '.join(mismatched)} "
                    f"{'is' if len(mismatched) == 1 else 'are'} not"
                )

        for member in candidates:
            if not self.fits_size(member, size, tier):
                problems.append(
                    f"{member.full_name or member.id} prefers team size "
                    f"{member.preferred_team_size}, not {size} ({tier.value})"
                )

        return problems

    @staticmethod
    def _required_levels(candidates: Sequence[Participant]) -> List[EducationLevel]:
        return sorted(
            {_COHORT_REQUIREMENTS[m.team_cohort_preference]
             for m in candidates if m.team_cohort_preference in _COHORT_REQUIREMENTS},
            key=lambda level: level.value,
        )


_default_validator = ConstraintValidator()


def is_valid_group(candidates: Sequence[Participant], tier: Tier) -> bool:
    """Pure-function form of ConstraintValidator.is_valid_group."""
    return _default_validator.is_valid_group(candidates, tier)
