"""
Main LYRA controller.

Drives one questionnaire session turn by turn:

    answer -> commentary -> effects -> stop check -> next question | result

Commentary and analytics are side channels. Their failures are swallowed so
the next question or the result is always produced.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from lyra.core.config import LyraConfig, get_config
from lyra.core.errors import InvalidOptionError, NoActiveQuestionError, SessionFinishedError
from lyra.core.session import Session, init_session
from lyra.data.catalog import Catalog, Question, get_catalog
from lyra.interview.commentary import Commentator
from lyra.interview.options import normalize_options
from lyra.interview.question_selector import next_question
from lyra.recommendation.result import Result, get_result, render_result_text
from lyra.scoring.effects import apply_answer
from lyra.scoring.stop import should_stop
from lyra.utils.logger import get_logger
from lyra.utils.webhook import WebhookLogger, get_webhook_logger

logger = get_logger("core.controller")

RESPONSE_QUESTION = "question"
RESPONSE_RESULT = "result"
RESPONSE_NO_RECOMMENDATION = "no_recommendation"


@dataclass
class LyraResponse:
    """Response from the LYRA controller."""
    response_type: str  # 'question', 'result' or 'no_recommendation'
    message: str
    comment: Optional[str] = None                    # Remark on the previous answer
    question_id: Optional[str] = None
    options: Optional[List[Dict[str, str]]] = None
    result: Optional[Dict[str, Any]] = None
    question_count: int = 0


class LyraController:
    """
    Owns one Session and the question currently on screen.

    The catalog is shared and read-only; everything mutable lives in
    self.session.
    """

    def __init__(
        self,
        catalog: Optional[Catalog] = None,
        config: Optional[LyraConfig] = None,
        commentator: Optional[Commentator] = None,
        analytics: Optional[WebhookLogger] = None,
    ):
        """
        Initialize the controller.

        Args:
            catalog: Question/effect/class data. Uses the global catalog if not provided.
            config: Configuration object. Uses default config if not provided.
            commentator: Commentary provider. Built from config if not provided.
            analytics: Webhook logger. The process-wide logger for the configured
                (or the catalog's) webhook URL if not provided.
        """
        self.config = config or get_config()
        self.catalog = catalog if catalog is not None else get_catalog()
        self.commentator = commentator or Commentator(self.config)
        self.analytics = analytics or get_webhook_logger(
            url=self.config.webhook_url or self.catalog.webhook_url,
            timeout=self.config.webhook_timeout_seconds,
        )

        self.session: Session = init_session(self.catalog.classes, self.config.default_language)
        self.current_question: Optional[Question] = None
        self.finished = False
        self.result: Optional[Result] = None
        self.history: List[Dict[str, str]] = []

        logger.info(
            f"LYRA controller initialized: classes={len(self.catalog.classes)}, "
            f"max_questions={self.config.max_questions}"
        )

    def start(self, language: Optional[str] = None, intro: Optional[str] = None) -> LyraResponse:
        """
        Open the questionnaire and return the first question.

        Args:
            language: Language tag for commentary (keeps the default when None)
            intro: Optional free-text self description; recorded, not parsed

        Returns:
            LyraResponse with the first question
        """
        if language:
            self.session.user_language = language
        if intro:
            self._push("user", intro)

        if self.current_question is not None or self.finished:
            logger.info("start() on an active session, returning current state")
            return self._current_response()

        return self._advance(comment=None)

    def answer(self, option_label: str) -> LyraResponse:
        """
        Process the user's answer to the current question.

        Args:
            option_label: Label of the chosen option

        Returns:
            LyraResponse with the next question or the result

        Raises:
            SessionFinishedError: The result was already produced
            NoActiveQuestionError: start() was not called
            InvalidOptionError: The label is not an option of the current question
        """
        if self.finished:
            raise SessionFinishedError("Session already produced a result; reset to start over")
        question = self.current_question
        if question is None:
            raise NoActiveQuestionError("No question is active; call start() first")

        label = str(option_label).strip()
        labels = [o["label"] for o in normalize_options(question)]
        if labels and label not in labels:
            raise InvalidOptionError(question.id, label)

        self._push("user", label)
        logger.info(f"Answer {question.id}='{label}'")

        comment = self.commentator.comment(question.text, label, self.session.user_language)
        if comment:
            self._push("assistant", comment)

        step = {
            "question_id": question.id,
            "question_text": question.text,
            "answer": label,
            "scores": dict(self.session.scores),
        }
        if comment:
            step["gpt_comment"] = comment
        self.analytics.send("step", step)

        self.session.record_answer(question.id, label)
        apply_answer(self.session, self.catalog.effects, question.id, label)

        if should_stop(
            self.session,
            max_questions=self.config.max_questions,
            min_lead=self.config.min_lead,
            max_alive=self.config.max_alive,
        ):
            return self._finish(comment)

        return self._advance(comment)

    def reset(self) -> None:
        """Reset the session state for a new run."""
        language = self.session.user_language
        self.session = init_session(self.catalog.classes, language)
        self.current_question = None
        self.finished = False
        self.result = None
        self.history = []
        logger.info("Session reset")

    def _advance(self, comment: Optional[str]) -> LyraResponse:
        question = next_question(self.session, self.catalog.questions, self.catalog.effects)
        if question is None:
            logger.info("Catalog exhausted, producing result")
            return self._finish(comment)

        self.current_question = question
        self._push("assistant", question.text)
        return self._question_response(question, comment)

    def _finish(self, comment: Optional[str]) -> LyraResponse:
        self.current_question = None
        self.finished = True
        self.result = get_result(
            self.session,
            self.catalog.classes,
            self.catalog.tips_links,
            rationale=self.config.rationale,
            max_tips=self.config.max_tips,
            max_links=self.config.max_links,
        )
        message = render_result_text(self.result, max_tips=self.config.display_tips, max_links=self.config.max_links)
        self._push("assistant", message)

        self.analytics.send("result", {
            "result": self.result.to_dict(),
            "answers": dict(self.session.answers),
            "asked": list(self.session.asked),
            "scores": dict(self.session.scores),
        })

        return LyraResponse(
            response_type=RESPONSE_RESULT if self.result.has_recommendation else RESPONSE_NO_RECOMMENDATION,
            message=message,
            comment=comment,
            result=self.result.to_dict(),
            question_count=len(self.session.asked),
        )

    def _question_response(self, question: Question, comment: Optional[str]) -> LyraResponse:
        return LyraResponse(
            response_type=RESPONSE_QUESTION,
            message=question.text,
            comment=comment,
            question_id=question.id,
            options=normalize_options(question),
            question_count=len(self.session.asked),
        )

    def _current_response(self) -> LyraResponse:
        if self.finished and self.result is not None:
            return LyraResponse(
                response_type=RESPONSE_RESULT if self.result.has_recommendation else RESPONSE_NO_RECOMMENDATION,
                message=render_result_text(self.result, max_tips=self.config.display_tips, max_links=self.config.max_links),
                result=self.result.to_dict(),
                question_count=len(self.session.asked),
            )
        return self._question_response(self.current_question, None)

    def _push(self, role: str, content: str) -> None:
        self.history.append({"role": role, "content": content})


def create_controller(
    catalog: Optional[Catalog] = None,
    config: Optional[LyraConfig] = None,
    commentator: Optional[Commentator] = None,
    analytics: Optional[WebhookLogger] = None,
) -> LyraController:
    """Factory for a controller bound to the global (or given) catalog, config and side channels."""
    return LyraController(
        catalog=catalog,
        config=config,
        commentator=commentator,
        analytics=analytics,
    )
