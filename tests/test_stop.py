"""Tests for the stop condition."""

from lyra.core.session import Session
from lyra.scoring.stop import score_lead, should_stop


def test_two_classes_with_lead_two_stop():
    assert should_stop(Session(scores={"A": 5, "B": 3})) is True


def test_three_classes_with_lead_two_stop():
    assert should_stop(Session(scores={"A": 5, "B": 3, "C": 3})) is True


def test_four_classes_never_stop_early():
    assert should_stop(Session(scores={"A": 5, "B": 3, "C": 3, "D": 3})) is False
    assert should_stop(Session(scores={"A": 50, "B": 3, "C": 3, "D": 3})) is False


def test_excluded_classes_do_not_count():
    session = Session(scores={"A": 5, "B": 3, "C": 3, "D": 9}, excluded={"D"})
    assert score_lead(session) == 2
    assert should_stop(session) is True


def test_small_lead_continues():
    assert should_stop(Session(scores={"A": 4, "B": 3})) is False


def test_single_survivor_does_not_stop_early():
    assert should_stop(Session(scores={"A": 5, "B": 0}, excluded={"B"})) is False


def test_question_budget_is_a_hard_stop():
    asked = [f"q{i}" for i in range(15)]
    assert should_stop(Session(asked=asked, scores={c: 0 for c in "ABCDE"})) is True
    assert should_stop(Session(asked=asked[:14], scores={c: 0 for c in "ABCDE"})) is False
    assert should_stop(Session(asked=asked[:3], scores={"A": 0}), max_questions=3) is True


def test_thresholds_are_configurable():
    session = Session(scores={"A": 3, "B": 2, "C": 0, "D": 0})
    assert should_stop(session) is False
    assert should_stop(session, min_lead=1, max_alive=4) is True
