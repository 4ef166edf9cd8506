"""
Recommendation synthesis for LYRA.
"""
from lyra.recommendation.result import Result, get_result, rank_candidates, render_result_text

__all__ = [
    "Result",
    "get_result",
    "rank_candidates",
    "render_result_text",
]
