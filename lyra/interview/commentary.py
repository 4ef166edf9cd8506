"""
LLM commentary after each answer.

After the user picks an option, LYRA acknowledges it with a short, courteous
remark plus one practical fact related to the question. The remark is purely
cosmetic: it never feeds back into scoring, question selection or stopping,
and any failure simply yields no remark.
"""
from typing import Optional

from openai import OpenAI

from lyra.core.config import LyraConfig, get_config
from lyra.utils.logger import get_logger

logger = get_logger("interview.commentary")

SYSTEM_PROMPT = (
    "You are LYRA Intelligence: a concise, courteous yacht advisor. "
    "Tone: refined, calm, premium. No emojis. 1–2 sentences max. "
    "After each user answer, acknowledge politely and add one tasteful, "
    "practical fact from yachting relevant to the topic of the question."
)

USER_PROMPT_TEMPLATE = """User language: {language}
Question: {question}
User answer: {answer}

Return ONLY the comment text (1–2 sentences)."""


class Commentator:
    """
    Produces the one-line remark shown after an answer.

    The OpenAI client is created lazily so that a missing API key only
    disables commentary instead of breaking the session.
    """

    def __init__(self, config: Optional[LyraConfig] = None, client: Optional[OpenAI] = None):
        self.config = config or get_config()
        self._client = client

    def _get_client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(
                timeout=self.config.commentary_timeout_seconds,
                max_retries=0,
            )
        return self._client

    def comment(self, question: str, answer: str, language: str = "en") -> Optional[str]:
        """
        Ask the model for a remark on one answer.

        Args:
            question: Question text as shown to the user
            answer: Chosen option label
            language: Language tag for the reply

        Returns:
            The remark, or None when disabled, empty or failed
        """
        if not self.config.commentary_enabled:
            return None

        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": USER_PROMPT_TEMPLATE.format(
                language=language or "en",
                question=question,
                answer=answer,
            )},
        ]

        try:
            response = self._get_client().chat.completions.create(
                model=self.config.commentary_model,
                messages=messages,
                temperature=self.config.commentary_temperature,
            )
            text = (response.choices[0].message.content or "").strip()
        except Exception as e:
            logger.warning(f"Commentary unavailable: {e}")
            return None

        return text or None
