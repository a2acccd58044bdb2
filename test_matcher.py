import pytest

from casematch.matching_engine import (
    Availability,
    CompatibilityScorer,
    ExperienceLevel,
    compatibility_score,
)
from casematch.matching_engine.matcher import jaccard


def test_identical_participants_score_full_marks(make_participant):
    a = make_participant("a")
    b = make_participant("b")
    assert compatibility_score(a, b) == pytest.approx(100.0)


def test_score_is_symmetric(iterative_fixture):
    scorer = CompatibilityScorer()
    for a in iterative_fixture:
        for b in iterative_fixture:
            assert scorer.score(a, b) == pytest.approx(scorer.score(b, a))


def test_weighted_sub_scores(make_participant):
    a = make_participant(
        "a", preferred_team_size=2,
        case_preferences=frozenset({"Consulting", "Finance"}),
        core_strengths=frozenset({"Research"}), preferred_roles=("Team Lead",),
        experience=ExperienceLevel.NONE, availability=Availability.LIGHTLY,
    )
    b = make_participant(
        "b", preferred_team_size=4,
        case_preferences=frozenset({"Finance", "Marketing"}),
        core_strengths=frozenset({"Research"}), preferred_roles=("Designer",),
        experience=ExperienceLevel.FINALIST_WINNER, availability=Availability.FULLY,
    )
    # Only the two Jaccard terms contribute: 1/3 each
    assert compatibility_score(a, b) == pytest.approx((0.30 / 3 + 0.25 / 3) * 100)


def test_partial_team_size_and_ordinal_distance(make_participant):
    a = make_participant("a", preferred_team_size=3, experience=ExperienceLevel.NONE,
                         availability=Availability.MODERATELY)
    b = make_participant("b", preferred_team_size=4, experience=ExperienceLevel.PARTICIPATED_3_PLUS,
                         availability=Availability.FULLY)
    expected = 30 + 25 + 20 * (1 - 2 / 3) + 15 * (1 - 1 / 2) + 10 * 0.5
    assert compatibility_score(a, b) == pytest.approx(expected)


def test_unspecified_levels_fall_back_to_neutral_ranks(make_participant):
    a = make_participant("a", availability=Availability.UNSPECIFIED, experience=ExperienceLevel.UNSPECIFIED)
    b = make_participant("b", availability=Availability.MODERATELY, experience=ExperienceLevel.NONE)
    assert compatibility_score(a, b) == pytest.approx(100.0)


def test_jaccard_of_empty_sets_is_zero():
    assert jaccard(frozenset(), frozenset()) == 0.0
    assert jaccard({"a"}, {"a", "b"}) == pytest.approx(0.5)


def test_score_matrix_matches_pairwise_scores(iterative_fixture):
    scorer = CompatibilityScorer()
    matrix = scorer.score_matrix(iterative_fixture)
    assert matrix.shape == (10, 10)
    for i, a in enumerate(iterative_fixture):
        for j, b in enumerate(iterative_fixture):
            if i != j:
                assert matrix[i, j] == pytest.approx(scorer.score(a, b))


def test_score_matrix_handles_empty_case_preferences(make_participant):
    pool = [make_participant(pid, case_preferences=frozenset()) for pid in "abc"]
    scorer = CompatibilityScorer()
    matrix = scorer.score_matrix(pool)
    assert matrix[0, 1] == pytest.approx(scorer.score(pool[0], pool[1]))
    assert matrix[0, 1] == pytest.approx(70.0)


def test_team_score_is_mean_of_pairs(iterative_fixture):
    scorer = CompatibilityScorer()
    a, b, c = iterative_fixture[:3]
    expected = (scorer.score(a, b) + scorer.score(a, c) + scorer.score(b, c)) / 3
    assert scorer.team_score([a, b, c]) == pytest.approx(expected)
    assert scorer.team_score([a]) == 0.0
