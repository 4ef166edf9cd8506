"""
Result synthesis.

Picks the winning class among the classes that survived exclusion and builds
the recommendation payload: class metadata, rationale, tips and links.
"""
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional, Sequence

from lyra.core.config import DEFAULT_RATIONALE
from lyra.core.session import Session
from lyra.data.catalog import ClassInfo, TipsLinks
from lyra.utils.logger import get_logger

logger = get_logger("recommendation.result")


@dataclass
class Result:
    """Final recommendation. Derived from the session, never stored."""
    class_id: Optional[str]
    name: Optional[str]
    summary: str = ""
    why: List[str] = field(default_factory=list)
    tips: List[str] = field(default_factory=list)
    links: List[Dict[str, str]] = field(default_factory=list)

    @property
    def has_recommendation(self) -> bool:
        return self.class_id is not None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def rank_candidates(session: Session, classes: Sequence[ClassInfo]) -> List[str]:
    """
    Non-excluded class ids, best first.

    Equal scores are ordered by catalog position; ids that only exist in the
    score table come after catalog classes with the same score.
    """
    catalog_order = {cls.class_id: i for i, cls in enumerate(classes)}
    alive = session.alive()
    table_order = {class_id: i for i, class_id in enumerate(alive)}
    return sorted(
        alive,
        key=lambda c: (-session.scores[c], catalog_order.get(c, len(catalog_order)), table_order[c]),
    )


def get_result(
    session: Session,
    classes: Sequence[ClassInfo],
    tips_links: Dict[str, TipsLinks],
    rationale: Optional[List[str]] = None,
    max_tips: int = 7,
    max_links: int = 5,
) -> Result:
    """
    Build the recommendation for the current session.

    Args:
        session: Finished (or stopped) session
        classes: Class catalog
        tips_links: Tips and links keyed by class id
        rationale: Fixed "why" strings (defaults to the built-in three)
        max_tips: Maximum tips in the payload
        max_links: Maximum links in the payload

    Returns:
        Result; class_id is None when every class was excluded
    """
    ranked = rank_candidates(session, classes)
    if not ranked:
        logger.warning("Every class was excluded, no recommendation")
        return Result(class_id=None, name=None)

    best = ranked[0]
    cls = next((c for c in classes if c.class_id == best), None)
    if cls is None:
        logger.warning(f"No catalog entry for winning class {best}, using raw id")
    tl = tips_links.get(best) or TipsLinks()

    why = list(rationale if rationale is not None else DEFAULT_RATIONALE)[:3]

    result = Result(
        class_id=best,
        name=cls.name if cls and cls.name else best,
        summary=cls.summary if cls else "",
        why=why,
        tips=list(tl.tips[:max_tips]),
        links=[link.model_dump() for link in tl.links[:max_links]],
    )
    logger.info(f"Result: {best} (score={session.scores[best]}, runner-up={ranked[1] if len(ranked) > 1 else None})")
    return result


def render_result_text(result: Result, max_tips: int = 5, max_links: int = 5) -> str:
    """Format a result as the chat message shown to the user."""
    if not result.has_recommendation:
        return (
            "None of our classes fits every answer you gave. "
            "Start over and relax one of your requirements to get a recommendation."
        )

    parts = [f"Your recommended class: {result.name}"]
    if result.summary:
        parts.append(result.summary)

    bullets = "\n".join(f"• {str(w).strip()}" for w in result.why)
    if bullets:
        parts.append(bullets)

    tips = "\n".join(f"• {t}" for t in result.tips[:max_tips])
    if tips:
        parts.append(f"Top tips:\n{tips}")

    links = "\n".join(f"- {l['label']}: {l['href']}" for l in result.links[:max_links])
    if links:
        parts.append(f"Links:\n{links}")

    return "\n\n".join(parts)
