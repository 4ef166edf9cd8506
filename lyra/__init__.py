"""
LYRA - adaptive class-matching questionnaire

Narrows a catalog of classes down to one recommendation with:
- A fixed opening question set, then impact-ranked adaptive questions
- Per-answer exclusion and scoring rules
- Early stop once one class leads a small field
"""

__version__ = '0.1.0'

from lyra.core.controller import LyraController, LyraResponse, create_controller
from lyra.core.config import LyraConfig, get_config, set_config
from lyra.core.session import Session, init_session
from lyra.scoring.effects import apply_answer
from lyra.scoring.stop import should_stop
from lyra.interview.question_selector import first_phase_questions, pick_next_question, next_question
from lyra.interview.options import normalize_options
from lyra.recommendation.result import Result, get_result

__all__ = [
    'LyraController',
    'LyraResponse',
    'create_controller',
    'LyraConfig',
    'get_config',
    'set_config',
    'Session',
    'init_session',
    'apply_answer',
    'should_stop',
    'first_phase_questions',
    'pick_next_question',
    'next_question',
    'normalize_options',
    'Result',
    'get_result',
]
