"""
Scoring for LYRA: answer effects and the stop condition.
"""
from lyra.scoring.effects import apply_answer, matching_effects
from lyra.scoring.stop import should_stop, score_lead

__all__ = [
    "apply_answer",
    "matching_effects",
    "should_stop",
    "score_lead",
]
