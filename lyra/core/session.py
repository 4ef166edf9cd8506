"""
Per-user questionnaire progress.

A Session is the only mutable object in the engine. It is created from the
class catalog, owned by a single controller, and threaded explicitly through
every engine call.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Set

from lyra.data.catalog import ClassInfo


@dataclass
class Session:
    """State for one questionnaire run."""
    asked: List[str] = field(default_factory=list)          # Question ids, in ask order, no duplicates
    answers: Dict[str, str] = field(default_factory=dict)   # Question id -> chosen option label
    excluded: Set[str] = field(default_factory=set)         # Only ever grows
    scores: Dict[str, int] = field(default_factory=dict)    # Every class id, never deleted
    user_language: str = "en"

    def record_answer(self, question_id: str, option_label: str) -> None:
        """Store an answer and count the question against the budget once."""
        self.answers[question_id] = option_label
        if question_id not in self.asked:
            self.asked.append(question_id)

    def alive(self) -> List[str]:
        """Class ids still in contention, in score-table order."""
        return [class_id for class_id in self.scores if class_id not in self.excluded]

    def snapshot(self) -> Dict[str, Any]:
        """JSON-friendly copy for logging and the API."""
        return {
            "asked": list(self.asked),
            "answers": dict(self.answers),
            "excluded": sorted(self.excluded),
            "scores": dict(self.scores),
            "user_language": self.user_language,
        }


def init_session(classes: Iterable[ClassInfo], user_language: str = "en") -> Session:
    """
    Create a fresh session with every class scored 0.

    Args:
        classes: Class catalog entries
        user_language: Language tag passed on to the commentary provider

    Returns:
        New Session
    """
    return Session(
        scores={cls.class_id: 0 for cls in classes},
        user_language=user_language,
    )
