"""
Exceptions raised by the LYRA controller and catalog loader.

The scoring engine itself never raises: malformed options, missing class
metadata and unmatched answers are all recovered locally.
"""


class LyraError(Exception):
    """Base class for LYRA errors."""


class CatalogError(LyraError):
    """The catalog directory is missing or holds invalid data."""


class SessionFinishedError(LyraError):
    """An answer arrived after the session produced its result."""


class NoActiveQuestionError(LyraError):
    """An answer arrived before the session was started."""


class InvalidOptionError(LyraError):
    """The answer is not one of the current question's options."""

    def __init__(self, question_id: str, option: str):
        super().__init__(f"'{option}' is not an option of question {question_id}")
        self.question_id = question_id
        self.option = option
