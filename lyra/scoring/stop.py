"""
Stop condition for the questionnaire.

The interview ends when the question budget is spent, or early when the
leading class is clearly ahead of a field that exclusions have already
narrowed down. A wide field never stops early, whatever the lead.
"""
from lyra.core.session import Session
from lyra.utils.logger import get_logger

logger = get_logger("scoring.stop")


def score_lead(session: Session) -> int:
    """Gap between the top two non-excluded scores (0 with fewer than two classes)."""
    alive_scores = sorted((session.scores[c] for c in session.alive()), reverse=True)
    if len(alive_scores) < 2:
        return 0
    return alive_scores[0] - alive_scores[1]


def should_stop(
    session: Session,
    max_questions: int = 15,
    min_lead: int = 2,
    max_alive: int = 3,
) -> bool:
    """
    Decide whether the session has enough signal to produce a result.

    Args:
        session: Current session
        max_questions: Hard question budget
        min_lead: Minimum gap between the top two classes for an early stop
        max_alive: Early stop only when at most this many classes remain

    Returns:
        True to stop and synthesize the result
    """
    if len(session.asked) >= max_questions:
        logger.info(f"Question budget reached ({len(session.asked)}/{max_questions})")
        return True

    alive_count = len(session.alive())
    if alive_count >= 2:
        lead = score_lead(session)
        if lead >= min_lead and alive_count <= max_alive:
            logger.info(f"Early stop: lead={lead}, alive={alive_count}")
            return True

    return False
