"""Shared fixtures for LYRA tests."""

import json

import pytest

from lyra.core.config import LyraConfig
from lyra.data.catalog import Catalog


class FakeCommentator:
    """Records calls and returns a canned remark (None simulates a failure)."""

    def __init__(self, text="Fine choice."):
        self.text = text
        self.calls = []

    def comment(self, question, answer, language="en"):
        self.calls.append((question, answer, language))
        return self.text


class FakeAnalytics:
    """Collects events instead of posting them."""

    def __init__(self):
        self.events = []

    def send(self, event_type, payload):
        self.events.append((event_type, payload))
        return None


# ---------------------------------------------------------------------------
# A four-class catalog small enough to trace by hand:
#   o1 (phase 1, priority 2)  Yes -> A+1, exclude D      No -> exclude everything
#   o2 (phase 1, priority 1)  Red -> A+1, exclude C      Blue -> B+1
#   a1 (phase 2)              Left -> A+1, B-1
#   a2 (phase 2)              Up -> C+1
# ---------------------------------------------------------------------------

SMALL_CATALOG = {
    "classes": [
        {"class_id": "A", "name": "Class A", "summary": "First class"},
        {"class_id": "B", "name": "Class B", "summary": "Second class"},
        {"class_id": "C", "name": "Class C", "summary": "Third class"},
        {"class_id": "D", "name": "Class D", "summary": "Fourth class"},
    ],
    "questions": [
        {"id": "o2", "text": "Red or blue?", "phase": 1, "priority": 1, "options": "Red | Blue"},
        {"id": "a1", "text": "Left or right?", "phase": 2, "priority": 0, "options": "Left, Right"},
        {"id": "o1", "text": "Yes or no?", "phase": 1, "priority": 2, "options": "Yes, No"},
        {"id": "a2", "text": "Up or down?", "phase": 2, "priority": 0, "options": "Up, Down"},
    ],
    "effects": [
        {"question_id": "o1", "option": "Yes", "exclude": ["D"], "up": ["A"], "down": []},
        {"question_id": "o1", "option": "No", "exclude": ["A", "B", "C", "D"], "up": [], "down": []},
        {"question_id": "o2", "option": "Red", "exclude": ["C"], "up": ["A"], "down": []},
        {"question_id": "o2", "option": "Blue", "exclude": [], "up": ["B"], "down": []},
        {"question_id": "a1", "option": "Left", "exclude": [], "up": ["A"], "down": ["B"]},
        {"question_id": "a2", "option": "Up", "exclude": [], "up": ["C"], "down": []},
    ],
    "tips_links": {
        "A": {
            "tips": ["tip 1", "tip 2", "tip 3", "tip 4", "tip 5", "tip 6"],
            "links": [{"label": "Yard A", "href": "https://a.example.com"}],
        },
    },
}


@pytest.fixture
def small_catalog():
    return Catalog(**SMALL_CATALOG)


@pytest.fixture
def lyra_config():
    return LyraConfig(commentary_enabled=False, webhook_url="")


@pytest.fixture
def commentator():
    return FakeCommentator()


@pytest.fixture
def analytics():
    return FakeAnalytics()


@pytest.fixture
def catalog_dir(tmp_path):
    """Write SMALL_CATALOG to disk the way the front end serves it."""
    (tmp_path / "classes.json").write_text(json.dumps(SMALL_CATALOG["classes"]))
    (tmp_path / "questions.json").write_text(json.dumps(SMALL_CATALOG["questions"]))
    (tmp_path / "effects.json").write_text(json.dumps(SMALL_CATALOG["effects"]))
    (tmp_path / "tips_links.json").write_text(json.dumps(SMALL_CATALOG["tips_links"]))
    (tmp_path / "config.json").write_text(json.dumps({"webhookUrl": "https://hooks.example.com/lyra"}))
    return tmp_path
