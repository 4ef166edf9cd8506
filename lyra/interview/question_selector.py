"""
Next-question selection.

Questions are asked in two phases:

1. The fixed opening set (phase 1), always asked first, highest priority
   first, ties in catalog order.
2. Adaptive questions (any other phase), picked one at a time by impact:
   the number of still-contending classes the question's effects could move.
   Ties go to the higher priority, then to the earlier catalog position.

Excluded classes never count toward impact.
"""
from typing import Dict, Iterable, List, Optional, Sequence, Set

from lyra.core.session import Session
from lyra.data.catalog import Effect, Question
from lyra.utils.logger import get_logger

logger = get_logger("interview.question_selector")

OPENING_PHASE = 1


def first_phase_questions(questions: Sequence[Question]) -> List[Question]:
    """
    Every opening-phase question, highest priority first.

    The front end historically called this "first five questions", but the
    count is whatever the catalog holds for phase 1.
    """
    opening = [q for q in questions if q.phase == OPENING_PHASE]
    # sorted() is stable, so equal priorities keep catalog order
    return sorted(opening, key=lambda q: q.priority, reverse=True)


def _effects_by_question(effects: Iterable[Effect]) -> Dict[str, List[Effect]]:
    grouped: Dict[str, List[Effect]] = {}
    for effect in effects:
        grouped.setdefault(effect.question_id, []).append(effect)
    return grouped


def question_impact(question_effects: Iterable[Effect], excluded: Set[str]) -> int:
    """Distinct non-excluded classes referenced by any of the question's effects."""
    impacted = set()
    for effect in question_effects:
        for class_id in (*effect.exclude, *effect.up, *effect.down):
            if class_id not in excluded:
                impacted.add(class_id)
    return len(impacted)


def pick_next_question(
    session: Session,
    questions: Sequence[Question],
    effects: Iterable[Effect],
) -> Optional[Question]:
    """
    Pick the unasked adaptive question with the highest impact.

    Args:
        session: Current session
        questions: Question catalog, in catalog order
        effects: Effect catalog

    Returns:
        The chosen question, or None when no adaptive question is left
    """
    asked = set(session.asked)
    remaining = [q for q in questions if q.phase != OPENING_PHASE and q.id not in asked]
    if not remaining:
        logger.info("No adaptive questions left")
        return None

    grouped = _effects_by_question(effects)

    best: Optional[Question] = None
    best_key = None
    for question in remaining:
        impact = question_impact(grouped.get(question.id, []), session.excluded)
        key = (impact, question.priority)
        # Strictly greater: the earlier catalog position wins a full tie
        if best_key is None or key > best_key:
            best, best_key = question, key

    logger.debug(f"Picked {best.id} (impact={best_key[0]}, priority={best_key[1]})")
    return best


def next_question(
    session: Session,
    questions: Sequence[Question],
    effects: Iterable[Effect],
) -> Optional[Question]:
    """
    The question to ask now: the next unasked opening question, otherwise the
    best adaptive one.

    Returns:
        Question to ask, or None when the catalog is exhausted
    """
    asked = set(session.asked)
    for question in first_phase_questions(questions):
        if question.id not in asked:
            return question
    return pick_next_question(session, questions, effects)
