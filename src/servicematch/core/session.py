"""
QuestionnaireSession: navigation state machine for one respondent.

States:
    in_progress(position) → completed(result)

The visible-question list is recomputed after every answer; the position is
clamped whenever that list shrinks. Scoring and ranking run exactly once per
transition into the completed state.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from .config import EngineConfig, default_config
from .errors import InvalidAnswerError
from .filtering import visible_questions
from .model import MODE_SINGLE, AnswerMap, AnswerValue, Question
from .progress import ProgressEstimator
from .ranking import RecommendationResult, rank
from .scoring import score

logger = logging.getLogger(__name__)

# State constants
STATE_IN_PROGRESS = "in_progress"
STATE_COMPLETED = "completed"


class QuestionnaireSession:
    """
    Questionnaire state for a single respondent.

    Holds only the bank reference, the answers, the position, the progress
    high-water mark and the cached result. Create one per respondent.

    Usage:
        session = QuestionnaireSession(load_question_bank())
        session.answer("project_type", "website")
        session.next()
        ...
        if session.is_complete:
            session.result.primary_category
    """

    def __init__(self, bank, config: Optional[EngineConfig] = None):
        self.bank = bank
        self.config = config or default_config()
        # Fail at construction rather than on the first empty result
        self.config.resolve_fallback(bank.categories)

        self._answers: AnswerMap = {}
        self._visible: List[Question] = []
        self._position: int = 0
        self._state: str = STATE_IN_PROGRESS
        self._result: Optional[RecommendationResult] = None
        self._progress = ProgressEstimator(self.config)

        self._refresh()

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def state(self) -> str:
        return self._state

    @property
    def is_complete(self) -> bool:
        return self._state == STATE_COMPLETED

    @property
    def position(self) -> int:
        return self._position

    @property
    def answers(self) -> Mapping[str, AnswerValue]:
        return MappingProxyType(self._answers)

    @property
    def visible_questions(self) -> List[Question]:
        return list(self._visible)

    @property
    def current_question(self) -> Optional[Question]:
        """The question to render, or None when results should be shown."""
        if self.is_complete or not self._visible:
            return None
        return self._visible[self._position]

    @property
    def is_last_question(self) -> bool:
        return not self.is_complete and self._position == len(self._visible) - 1

    @property
    def is_current_answered(self) -> bool:
        question = self.current_question
        return question is not None and question.id in self._answers

    @property
    def result(self) -> Optional[RecommendationResult]:
        return self._result

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def answer(self, question_id: str, value: Union[str, Iterable[str]]) -> None:
        """
        Record (or overwrite) the answer to a visible question.

        Raises:
            InvalidAnswerError: unknown or invisible question, selection-mode
                mismatch, unknown option, or the session is already completed.
                The answers are left unchanged.
        """
        question = self.bank.get(question_id)
        if question is None:
            self._reject(f"Unknown question '{question_id}'", question_id)
        if self.is_complete:
            self._reject(
                "Questionnaire is complete; go back or reset before answering", question_id
            )
        if question_id not in {q.id for q in self._visible}:
            self._reject(f"Question '{question_id}' is not currently visible", question_id)

        normalized = self._normalize_answer(question, value)
        self._answers[question_id] = normalized
        logger.debug(f"[Session] answer {question_id}={normalized!r}")
        self._refresh()

    def next(self) -> None:
        """Advance, or complete the questionnaire from the last question."""
        if self.is_complete:
            return
        if self._position < len(self._visible) - 1:
            self._position += 1
            return
        self._complete()

    def previous(self) -> None:
        """Step back; from the results, return to the last visible question."""
        if self.is_complete:
            self._visible = visible_questions(self.bank, self._answers)
            if not self._visible:
                return
            self._state = STATE_IN_PROGRESS
            self._result = None
            self._position = len(self._visible) - 1
            logger.info("[Session] back from results to last question")
            return
        if self._position > 0:
            self._position -= 1

    def reset(self) -> None:
        """Clear answers, cached result and progress; restart at the first question."""
        self._answers = {}
        self._result = None
        self._state = STATE_IN_PROGRESS
        self._position = 0
        self._progress.reset()
        logger.info("[Session] reset")
        self._refresh()

    # ------------------------------------------------------------------
    # Progress & serialization
    # ------------------------------------------------------------------

    def progress(self) -> float:
        """Current progress percentage, never below a previously reported value."""
        if self.is_complete:
            return self._progress.complete()
        question = self.current_question
        return self._progress.report(
            self._position,
            len(self._visible),
            question.is_final_stage if question else False,
            self.is_last_question,
        )

    def snapshot(self) -> Dict[str, Any]:
        """JSON-ready view of the session state."""
        question = self.current_question
        return {
            "state": self._state,
            "position": self._position,
            "visible_count": len(self._visible),
            "visible_question_ids": [q.id for q in self._visible],
            "current_question": question.to_dict() if question else None,
            "is_last_question": self.is_last_question,
            "is_current_answered": self.is_current_answered,
            "answers": serialize_answers(self._answers),
            "progress": self.progress(),
            "result": self._result.to_dict() if self._result else None,
        }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _refresh(self) -> None:
        """Recompute the visible list and keep the position valid."""
        self._visible = visible_questions(self.bank, self._answers)
        if not self._visible:
            if not self.is_complete:
                logger.info("[Session] no applicable questions")
                self._complete()
            return
        if self._position >= len(self._visible):
            logger.debug(
                f"[Session] clamping position {self._position} -> {len(self._visible) - 1}"
            )
            self._position = len(self._visible) - 1

    def _complete(self) -> None:
        self._state = STATE_COMPLETED
        self._result = rank(score(self.bank, self._answers), self.config)
        self._progress.complete()
        logger.info(
            f"[Session] completed: primary={self._result.primary_category} "
            f"(fallback={self._result.is_fallback}, entries={len(self._result.entries)})"
        )

    def _normalize_answer(self, question: Question, value: Any) -> AnswerValue:
        allowed = set(question.option_values)
        if question.mode == MODE_SINGLE:
            if not isinstance(value, str):
                self._reject(
                    f"Question '{question.id}' takes a single value, got {type(value).__name__}",
                    question.id,
                )
            if value not in allowed:
                self._reject(f"'{value}' is not an option of '{question.id}'", question.id)
            return value

        if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple, set, frozenset)):
            self._reject(
                f"Question '{question.id}' takes a list of values, got {type(value).__name__}",
                question.id,
            )
        if not all(isinstance(v, str) for v in value):
            self._reject(
                f"Question '{question.id}' takes string option values",
                question.id,
            )
        unknown = [v for v in value if v not in allowed]
        if unknown:
            self._reject(f"{unknown} are not options of '{question.id}'", question.id)
        return frozenset(value)

    def _reject(self, message: str, question_id: Optional[str]) -> None:
        logger.warning(f"[Session] rejected answer: {message}")
        raise InvalidAnswerError(message, question_id=question_id)


def serialize_answers(answers: Mapping[str, AnswerValue]) -> Dict[str, Union[str, List[str]]]:
    """Answers as plain JSON types; multiple-choice selections become sorted lists."""
    return {
        qid: value if isinstance(value, str) else sorted(value)
        for qid, value in answers.items()
    }
