"""Tests for the turn-by-turn controller."""

from pathlib import Path
import threading

import pytest

from lyra.core.config import LyraConfig
from lyra.core.controller import LyraController, create_controller
from lyra.core.errors import InvalidOptionError, NoActiveQuestionError, SessionFinishedError
from lyra.data.catalog import Catalog, load_catalog
from lyra.utils.webhook import close_webhook_loggers, get_webhook_logger

from conftest import FakeAnalytics, FakeCommentator

SHIPPED_CATALOG = Path(__file__).resolve().parent.parent / "data" / "lyra"


@pytest.fixture
def controller(small_catalog, lyra_config, commentator, analytics):
    return LyraController(
        catalog=small_catalog,
        config=lyra_config,
        commentator=commentator,
        analytics=analytics,
    )


def test_start_asks_highest_priority_opening_question(controller):
    response = controller.start(language="it", intro="Two of us, mostly weekends")
    assert response.response_type == "question"
    assert response.question_id == "o1"
    assert response.message == "Yes or no?"
    assert response.options == [{"id": "1", "label": "Yes"}, {"id": "2", "label": "No"}]
    assert response.question_count == 0
    assert controller.session.user_language == "it"
    assert controller.history[0] == {"role": "user", "content": "Two of us, mostly weekends"}


def test_start_twice_returns_current_question(controller):
    controller.start()
    assert controller.start().question_id == "o1"


def test_opening_questions_then_early_stop(controller, analytics):
    controller.start()
    second = controller.answer("Yes")
    assert second.question_id == "o2"
    assert second.comment == "Fine choice."

    final = controller.answer("Red")
    assert final.response_type == "result"
    assert final.result["class_id"] == "A"
    assert final.result["tips"] == ["tip 1", "tip 2", "tip 3", "tip 4", "tip 5", "tip 6"]
    assert final.message.startswith("Your recommended class: Class A")
    assert final.question_count == 2
    assert controller.finished

    types = [event_type for event_type, _ in analytics.events]
    assert types == ["step", "step", "result"]
    first_step = analytics.events[0][1]
    assert first_step["question_id"] == "o1"
    assert first_step["answer"] == "Yes"
    assert first_step["gpt_comment"] == "Fine choice."
    # scores are reported as they were before the answer was applied
    assert first_step["scores"] == {"A": 0, "B": 0, "C": 0, "D": 0}
    result_event = analytics.events[2][1]
    assert result_event["asked"] == ["o1", "o2"]
    assert result_event["answers"] == {"o1": "Yes", "o2": "Red"}
    assert result_event["result"]["class_id"] == "A"


def test_adaptive_question_follows_opening_set(controller):
    controller.start()
    controller.answer("Yes")
    response = controller.answer("Blue")
    # a1 can still move A and B, a2 only C
    assert response.question_id == "a1"

    final = controller.answer("Left")
    assert final.response_type == "result"
    assert final.result["class_id"] == "A"
    assert controller.session.scores == {"A": 2, "B": 0, "C": 0, "D": 0}


def test_question_budget(small_catalog, commentator, analytics):
    controller = LyraController(
        catalog=small_catalog,
        config=LyraConfig(commentary_enabled=False, max_questions=2),
        commentator=commentator,
        analytics=analytics,
    )
    controller.start()
    controller.answer("Yes")
    final = controller.answer("Blue")
    assert final.response_type == "result"
    # A and B tie at 1, catalog order decides
    assert final.result["class_id"] == "A"


def test_everything_excluded_gives_no_recommendation(controller):
    controller.start()
    controller.answer("No")
    controller.answer("Blue")
    controller.answer("Left")
    final = controller.answer("Up")
    assert final.response_type == "no_recommendation"
    assert final.result["class_id"] is None
    assert controller.session.asked == ["o1", "o2", "a1", "a2"]


def test_answer_label_is_trimmed(controller):
    controller.start()
    assert controller.answer("  Yes ").question_id == "o2"
    assert controller.session.answers == {"o1": "Yes"}


def test_invalid_option(controller):
    controller.start()
    with pytest.raises(InvalidOptionError):
        controller.answer("Maybe")
    assert controller.session.asked == []


def test_answer_before_start(controller):
    with pytest.raises(NoActiveQuestionError):
        controller.answer("Yes")


def test_answer_after_result(controller):
    controller.start()
    controller.answer("Yes")
    controller.answer("Red")
    with pytest.raises(SessionFinishedError):
        controller.answer("Left")


def test_missing_commentary_does_not_change_the_outcome(small_catalog, lyra_config, analytics):
    controller = LyraController(
        catalog=small_catalog,
        config=lyra_config,
        commentator=FakeCommentator(text=None),
        analytics=analytics,
    )
    controller.start()
    response = controller.answer("Yes")
    assert response.comment is None
    assert response.question_id == "o2"
    assert "gpt_comment" not in analytics.events[0][1]


def test_reset(controller):
    controller.start(language="es")
    controller.answer("Yes")
    controller.reset()
    assert controller.session.asked == []
    assert controller.session.excluded == set()
    assert controller.session.user_language == "es"
    assert controller.current_question is None
    assert controller.start().question_id == "o1"


def test_empty_question_catalog_finishes_immediately(lyra_config, commentator, analytics):
    catalog = Catalog(classes=[{"class_id": "only", "name": "Only class"}])
    controller = LyraController(catalog=catalog, config=lyra_config, commentator=commentator, analytics=analytics)
    response = controller.start()
    assert response.response_type == "result"
    assert response.result["name"] == "Only class"


def test_full_run_on_shipped_catalog_keeps_invariants(lyra_config):
    catalog = load_catalog(SHIPPED_CATALOG)
    controller = LyraController(
        catalog=catalog,
        config=lyra_config,
        commentator=FakeCommentator(text=None),
        analytics=FakeAnalytics(),
    )

    response = controller.start()
    previous_excluded = set()
    previous_asked = []
    while response.response_type == "question":
        response = controller.answer(response.options[-1]["label"])

        session = controller.session
        assert previous_excluded <= session.excluded
        assert len(session.asked) == len(set(session.asked))
        assert session.asked[:len(previous_asked)] == previous_asked
        assert set(session.scores) == {c.class_id for c in catalog.classes}
        previous_excluded = set(session.excluded)
        previous_asked = list(session.asked)

    assert response.response_type in ("result", "no_recommendation")
    assert len(controller.session.asked) <= lyra_config.max_questions


def test_controllers_share_one_webhook_logger(small_catalog):
    config = LyraConfig(commentary_enabled=False, webhook_url="http://127.0.0.1:9/hook", webhook_timeout_seconds=0.5)
    threads_before = threading.active_count()
    try:
        controllers = [
            LyraController(catalog=small_catalog, config=config, commentator=FakeCommentator())
            for _ in range(20)
        ]
        for controller in controllers:
            controller.start()
            controller.answer("Yes")

        assert len({id(c.analytics) for c in controllers}) == 1
        assert controllers[0].analytics is get_webhook_logger(url="http://127.0.0.1:9/hook", timeout=0.5)
        # At most the shared pool's workers
        assert threading.active_count() - threads_before <= 2
    finally:
        close_webhook_loggers()


def test_create_controller_uses_given_side_channels(small_catalog, lyra_config, commentator, analytics):
    controller = create_controller(
        catalog=small_catalog,
        config=lyra_config,
        commentator=commentator,
        analytics=analytics,
    )
    controller.start()
    controller.answer("Yes")
    assert commentator.calls
    assert [event_type for event_type, _ in analytics.events] == ["step"]
