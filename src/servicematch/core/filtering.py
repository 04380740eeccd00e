"""
Applicability filter: which questions this respondent should see.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping

from .model import AnswerValue, Question


def visible_questions(
    bank: Iterable[Question],
    answers: Mapping[str, AnswerValue],
) -> List[Question]:
    """
    Ordered subset of the bank applicable under the current answers.

    Predicates only look backward in bank order, so a single forward pass
    is enough. Each predicate sees a read-only view holding only the answers
    to questions already found visible, so an answer left behind on a hidden
    question cannot unlock its follow-ups.
    """
    accumulated: Dict[str, AnswerValue] = {}
    view = MappingProxyType(accumulated)
    visible = []
    for question in bank:
        if not question.is_applicable(view):
            continue
        visible.append(question)
        if question.id in answers:
            accumulated[question.id] = answers[question.id]
    return visible
