"""Shared fixtures for the CaseMatch test suite."""

import pytest

from casematch.config import EngineSettings
from casematch.matching_engine import (
    Availability,
    CohortPreference,
    EducationLevel,
    ExperienceLevel,
    Participant,
)


def build_participant(pid, preferred_team_size=4, **overrides):
    fields = dict(
        id=pid,
        full_name=f"Participant {pid}",
        core_strengths=frozenset({"Research", "Modeling"}),
        preferred_roles=("Team Lead",),
        case_preferences=frozenset({"Consulting", "Finance"}),
        working_style=frozenset({"I enjoy brainstorming"}),
        availability=Availability.FULLY,
        experience=ExperienceLevel.PARTICIPATED_1_2,
        education_level=EducationLevel.UNDERGRADUATE,
        team_cohort_preference=CohortPreference.EITHER,
        preferred_team_size=preferred_team_size,
    )
    fields.update(overrides)
    return Participant(**fields)


@pytest.fixture
def make_participant():
    return build_participant


@pytest.fixture
def settings():
    return EngineSettings(max_iterations=10, strategic_score_floor=30.0, verbose=False)


# Rows of the ten-person iterative matching fixture: all undergraduates,
# five prefer size 4, three prefer size 3, two prefer size 2.
_FIXTURE_ROWS = [
    ("alice", "Alice Johnson", "Research;Modeling", "Team Lead", "I enjoy brainstorming",
     Availability.FULLY, ExperienceLevel.PARTICIPATED_1_2, "Consulting;Finance", 4, CohortPreference.EITHER),
    ("bob", "Bob Smith", "Modeling;Markets", "Data Analyst", "I prefer divided responsibilities",
     Availability.MODERATELY, ExperienceLevel.PARTICIPATED_3_PLUS, "Finance;Consulting", 4,
     CohortPreference.UNDERGRAD_ONLY),
    ("carol", "Carol Davis", "Product;Technical", "Designer", "I like owning tasks",
     Availability.LIGHTLY, ExperienceLevel.NONE, "Product/Tech;Marketing", 4, CohortPreference.EITHER),
    ("david", "David Wilson", "Design;Pitching", "Presenter", "I enjoy brainstorming",
     Availability.FULLY, ExperienceLevel.FINALIST_WINNER, "Marketing;Social Impact", 4,
     CohortPreference.UNDERGRAD_ONLY),
    ("eva", "Eva Brown", "Ideation;Storytelling", "Researcher", "I prefer working independently",
     Availability.MODERATELY, ExperienceLevel.PARTICIPATED_1_2, "Social Impact;Consulting", 3,
     CohortPreference.EITHER),
    ("frank", "Frank Miller", "Coordination;Research", "Coordinator", "I enjoy brainstorming",
     Availability.FULLY, ExperienceLevel.PARTICIPATED_3_PLUS, "Consulting;Operations/Supply Chain", 3,
     CohortPreference.UNDERGRAD_ONLY),
    ("grace", "Grace Lee", "Research;Modeling", "Data Analyst", "I prefer divided responsibilities",
     Availability.MODERATELY, ExperienceLevel.NONE, "Finance;Product/Tech", 3, CohortPreference.EITHER),
    ("henry", "Henry Taylor", "Pitching;Ideation", "Presenter", "I like representing team",
     Availability.LIGHTLY, ExperienceLevel.PARTICIPATED_1_2, "Marketing;Consulting", 2,
     CohortPreference.UNDERGRAD_ONLY),
    ("iris", "Iris Chen", "Technical;Product", "Designer", "I prefer backstage roles",
     Availability.FULLY, ExperienceLevel.FINALIST_WINNER, "Product/Tech;Social Impact", 2,
     CohortPreference.EITHER),
    ("jack", "Jack Anderson", "Markets;Storytelling", "Researcher", "I enjoy brainstorming",
     Availability.MODERATELY, ExperienceLevel.PARTICIPATED_3_PLUS, "Operations/Supply Chain;Marketing", 4,
     CohortPreference.UNDERGRAD_ONLY),
]


@pytest.fixture
def iterative_fixture():
    return [
        Participant(
            id=pid,
            full_name=name,
            email=f"{pid}@test.com",
            core_strengths=frozenset(strengths.split(";")),
            preferred_roles=(role,),
            working_style=frozenset({style}),
            availability=availability,
            experience=experience,
            case_preferences=frozenset(cases.split(";")),
            preferred_team_size=size,
            team_cohort_preference=cohort,
            education_level=EducationLevel.UNDERGRADUATE,
        )
        for pid, name, strengths, role, style, availability, experience, cases, size, cohort in _FIXTURE_ROWS
    ]
