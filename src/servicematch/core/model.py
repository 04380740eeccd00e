"""
Questionnaire data model: categories, options, questions and applicability
predicates.

Predicates are tagged variants evaluated against a read-only view of the
answers given so far. Each declares the question ids it reads so the bank
can reject forward references at load time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, FrozenSet, Iterable, Mapping, Optional, Tuple, Union


# =============================================================================
# CATEGORIES & SELECTION MODES
# =============================================================================

CATEGORIES: Tuple[str, ...] = (
    "web",
    "photo",
    "cinema",
    "automation",
    "ai",
    "tech",
)

MODE_SINGLE = "single"
MODE_MULTIPLE = "multiple"
SELECTION_MODES = (MODE_SINGLE, MODE_MULTIPLE)

AnswerValue = Union[str, FrozenSet[str]]
AnswerMap = Dict[str, AnswerValue]
ScoreVector = Dict[str, float]


def _selected(answer: Optional[AnswerValue]) -> FrozenSet[str]:
    """Answer as a set of option values, whatever the selection mode."""
    if answer is None:
        return frozenset()
    if isinstance(answer, str):
        return frozenset((answer,))
    return frozenset(answer)


# =============================================================================
# PREDICATES
# =============================================================================

class Predicate:
    """Base class for applicability predicates."""

    def evaluate(self, answers: Mapping[str, AnswerValue]) -> bool:
        raise NotImplementedError

    def references(self) -> FrozenSet[str]:
        raise NotImplementedError

    def __call__(self, answers: Mapping[str, AnswerValue]) -> bool:
        return self.evaluate(answers)


@dataclass(frozen=True)
class AnswerEquals(Predicate):
    """True when the referenced answer is (or, for multiple mode, contains) value."""
    question_id: str
    value: str

    def evaluate(self, answers):
        return self.value in _selected(answers.get(self.question_id))

    def references(self):
        return frozenset((self.question_id,))


@dataclass(frozen=True)
class AnswerIn(Predicate):
    """True when the referenced answer shares at least one value with values."""
    question_id: str
    values: FrozenSet[str]

    def __init__(self, question_id: str, values: Iterable[str]):
        object.__setattr__(self, "question_id", question_id)
        object.__setattr__(self, "values", frozenset(values))

    def evaluate(self, answers):
        return bool(self.values & _selected(answers.get(self.question_id)))

    def references(self):
        return frozenset((self.question_id,))


@dataclass(frozen=True)
class Answered(Predicate):
    """True when the referenced question has a non-empty answer."""
    question_id: str

    def evaluate(self, answers):
        return bool(_selected(answers.get(self.question_id)))

    def references(self):
        return frozenset((self.question_id,))


@dataclass(frozen=True)
class AllOf(Predicate):
    predicates: Tuple[Predicate, ...]

    def __init__(self, *predicates: Predicate):
        object.__setattr__(self, "predicates", tuple(predicates))

    def evaluate(self, answers):
        return all(p.evaluate(answers) for p in self.predicates)

    def references(self):
        return frozenset().union(*(p.references() for p in self.predicates))


@dataclass(frozen=True)
class AnyOf(Predicate):
    predicates: Tuple[Predicate, ...]

    def __init__(self, *predicates: Predicate):
        object.__setattr__(self, "predicates", tuple(predicates))

    def evaluate(self, answers):
        return any(p.evaluate(answers) for p in self.predicates)

    def references(self):
        return frozenset().union(*(p.references() for p in self.predicates))


@dataclass(frozen=True)
class Not(Predicate):
    predicate: Predicate

    def evaluate(self, answers):
        return not self.predicate.evaluate(answers)

    def references(self):
        return self.predicate.references()


@dataclass(frozen=True)
class Custom(Predicate):
    """
    Arbitrary pure callable over the answer view.

    refs must list every question id the callable reads; the bank checks
    them for forward references like any other predicate.
    """
    func: Callable[[Mapping[str, AnswerValue]], bool]
    refs: FrozenSet[str] = frozenset()

    def __init__(self, func: Callable[[Mapping[str, AnswerValue]], bool], refs: Iterable[str] = ()):
        object.__setattr__(self, "func", func)
        object.__setattr__(self, "refs", frozenset(refs))

    def evaluate(self, answers):
        return bool(self.func(answers))

    def references(self):
        return self.refs


# =============================================================================
# OPTIONS & QUESTIONS
# =============================================================================

@dataclass(frozen=True)
class Option:
    """A selectable answer with its category weights."""
    value: str
    label: str
    weights: Mapping[str, float] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        # Freeze the weights so a loaded bank cannot be edited in place
        object.__setattr__(self, "weights", MappingProxyType(dict(self.weights)))

    def to_dict(self) -> Dict:
        return {
            "value": self.value,
            "label": self.label,
            "weights": dict(self.weights),
        }


@dataclass(frozen=True)
class Question:
    """A questionnaire step."""
    id: str
    text: str
    mode: str                                  # "single" or "multiple"
    options: Tuple[Option, ...] = ()
    predicate: Optional[Predicate] = None      # None = always shown
    is_final_stage: bool = False               # e.g. the timeline question

    def __post_init__(self):
        object.__setattr__(self, "options", tuple(self.options))

    @property
    def option_values(self) -> Tuple[str, ...]:
        return tuple(o.value for o in self.options)

    def get_option(self, value: str) -> Optional[Option]:
        for option in self.options:
            if option.value == value:
                return option
        return None

    def is_applicable(self, answers: Mapping[str, AnswerValue]) -> bool:
        if self.predicate is None:
            return True
        return self.predicate.evaluate(answers)

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "text": self.text,
            "mode": self.mode,
            "options": [{"value": o.value, "label": o.label} for o in self.options],
            "is_final_stage": self.is_final_stage,
        }
