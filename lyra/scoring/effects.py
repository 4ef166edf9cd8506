"""
Answer effect application.

An answer to a question triggers every effect rule registered for that
(question, option) pair. Exclusions are a set union and score changes are
integer additions, so the order in which matching rules are applied does not
matter.
"""
from typing import Iterable, List

from lyra.core.session import Session
from lyra.data.catalog import Effect
from lyra.utils.logger import get_logger

logger = get_logger("scoring.effects")


def matching_effects(effects: Iterable[Effect], question_id: str, option_label: str) -> List[Effect]:
    """Effects for this question whose option equals the label after trimming (case-sensitive)."""
    label = str(option_label).strip()
    return [
        e for e in effects
        if e.question_id == question_id and e.option.strip() == label
    ]


def apply_answer(
    session: Session,
    effects: Iterable[Effect],
    question_id: str,
    option_label: str,
) -> Session:
    """
    Apply all effects of one answer to the session, in place.

    Args:
        session: Session to update
        effects: Full effect catalog
        question_id: Answered question
        option_label: Chosen option label

    Returns:
        The same session, for chaining
    """
    hits = matching_effects(effects, question_id, option_label)
    if not hits:
        logger.debug(f"No effects for {question_id}='{option_label}'")
        return session

    for effect in hits:
        session.excluded.update(effect.exclude)
        for class_id in effect.up:
            session.scores[class_id] = session.scores.get(class_id, 0) + 1
        for class_id in effect.down:
            session.scores[class_id] = session.scores.get(class_id, 0) - 1

    logger.debug(
        f"Applied {len(hits)} effect(s) for {question_id}='{option_label}': "
        f"excluded={sorted(session.excluded)}"
    )
    return session
