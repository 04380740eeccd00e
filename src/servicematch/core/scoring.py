"""
Scoring aggregator: turns the final answers into a per-category score vector.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Mapping

import numpy as np

from .filtering import visible_questions
from .model import MODE_SINGLE, AnswerValue, Question, ScoreVector
from .utils import weight_vector

if TYPE_CHECKING:
    from ..content.question_bank import QuestionBank

logger = logging.getLogger(__name__)

DEFAULT_IMPORTANCE = 1.0


def question_contribution(
    question: Question,
    answer: AnswerValue,
    categories,
) -> np.ndarray:
    """
    Unweighted contribution of one answered question.

    Single mode takes the chosen option's weights; multiple mode sums the
    weights of every chosen option. Unknown option values contribute nothing.
    """
    total = np.zeros(len(categories), dtype=np.float64)
    chosen = (answer,) if question.mode == MODE_SINGLE else tuple(answer)
    for value in chosen:
        option = question.get_option(value)
        if option is not None:
            total += weight_vector(option.weights, categories)
    return total


def score(bank: "QuestionBank", answers: Mapping[str, AnswerValue]) -> ScoreVector:
    """
    Accumulate the score vector for a set of answers.

    Only questions visible under these answers count; stale answers to
    questions that are no longer applicable stay in the map but are ignored.
    Each contribution is scaled by the question's importance multiplier.
    """
    categories = bank.categories
    totals = np.zeros(len(categories), dtype=np.float64)

    visible = visible_questions(bank, answers)
    for question in visible:
        answer = answers.get(question.id)
        if answer is None:
            continue
        importance = bank.importance.get(question.id, DEFAULT_IMPORTANCE)
        totals += question_contribution(question, answer, categories) * importance

    visible_ids = {q.id for q in visible}
    ignored = [qid for qid in answers if qid not in visible_ids]
    if ignored:
        logger.debug(f"Ignoring stale answers for inapplicable questions: {ignored}")

    return {category: float(totals[i]) for i, category in enumerate(categories)}
