"""
Question bank for the service-match questionnaire.

8 questions (6 single-choice, 2 multiple-choice), 3 of them conditional on
earlier answers. Each option carries a category weight vector; each question
may carry an importance multiplier applied at scoring time.

The bank is validated eagerly when constructed: any authoring error raises
ConfigurationError so the process never starts with a broken bank.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Union

from ..core.errors import ConfigurationError
from ..core.model import (
    CATEGORIES,
    SELECTION_MODES,
    AllOf,
    AnswerEquals,
    AnswerIn,
    Answered,
    AnyOf,
    Not,
    Option,
    Predicate,
    Question,
)

logger = logging.getLogger(__name__)


class QuestionBank:
    """
    Immutable, ordered catalog of questions.

    Usage:
        bank = QuestionBank(questions, importance={"project_type": 2.0})
        bank.get("project_type")
        for question in bank: ...
    """

    def __init__(
        self,
        questions: Iterable[Question],
        categories: Sequence[str] = CATEGORIES,
        importance: Optional[Mapping[str, float]] = None,
    ):
        self._questions = tuple(questions)
        self._categories = tuple(categories)
        self._importance = MappingProxyType(dict(importance or {}))
        self._index = MappingProxyType(
            {q.id: i for i, q in enumerate(self._questions)}
        )
        self._validate()
        logger.info(
            f"Question bank loaded: {len(self._questions)} questions, "
            f"{len(self._categories)} categories"
        )

    # ------------------------------------------------------------------
    # Read-only access
    # ------------------------------------------------------------------

    @property
    def questions(self) -> tuple:
        return self._questions

    @property
    def categories(self) -> tuple:
        return self._categories

    @property
    def importance(self) -> Mapping[str, float]:
        return self._importance

    def get(self, question_id: str) -> Optional[Question]:
        """Look up a question by ID."""
        i = self._index.get(question_id)
        return self._questions[i] if i is not None else None

    def index_of(self, question_id: str) -> int:
        return self._index[question_id]

    def __iter__(self) -> Iterator[Question]:
        return iter(self._questions)

    def __len__(self) -> int:
        return len(self._questions)

    def __contains__(self, question_id: object) -> bool:
        return question_id in self._index

    def to_list(self) -> List[Dict]:
        return [q.to_dict() for q in self._questions]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _validate(self) -> None:
        if not self._categories:
            raise ConfigurationError("Category enumeration is empty")
        if len(set(self._categories)) != len(self._categories):
            raise ConfigurationError(f"Duplicate categories in {list(self._categories)}")

        seen: Dict[str, int] = {}
        for position, question in enumerate(self._questions):
            if question.id in seen:
                raise ConfigurationError(f"Duplicate question id '{question.id}'")
            seen[question.id] = position
            self._validate_question(question, seen, position)

        for question_id, multiplier in self._importance.items():
            if question_id not in self._index:
                raise ConfigurationError(
                    f"Importance given for unknown question '{question_id}'"
                )
            if not multiplier >= 0.0:
                raise ConfigurationError(
                    f"Importance for '{question_id}' must be non-negative, got {multiplier}"
                )

    def _validate_question(
        self, question: Question, earlier: Dict[str, int], position: int
    ) -> None:
        if question.mode not in SELECTION_MODES:
            raise ConfigurationError(
                f"Question '{question.id}' has unknown mode '{question.mode}'"
            )
        if not question.options:
            raise ConfigurationError(f"Question '{question.id}' has no options")

        values = question.option_values
        if len(set(values)) != len(values):
            raise ConfigurationError(f"Question '{question.id}' has duplicate option values")

        for option in question.options:
            self._validate_weights(question.id, option)

        if question.predicate is not None:
            for ref in question.predicate.references():
                if ref == question.id:
                    raise ConfigurationError(
                        f"Question '{question.id}' predicate references itself"
                    )
                if ref not in self._index:
                    raise ConfigurationError(
                        f"Question '{question.id}' predicate references unknown question '{ref}'"
                    )
                if ref not in earlier:
                    raise ConfigurationError(
                        f"Question '{question.id}' (position {position}) predicate "
                        f"references later question '{ref}'"
                    )

    def _validate_weights(self, question_id: str, option: Option) -> None:
        if not option.weights:
            raise ConfigurationError(
                f"Option '{option.value}' of '{question_id}' has no weights"
            )
        for category, weight in option.weights.items():
            if category not in self._categories:
                raise ConfigurationError(
                    f"Option '{option.value}' of '{question_id}' weights unknown category '{category}'"
                )
            if not weight >= 0.0:
                raise ConfigurationError(
                    f"Option '{option.value}' of '{question_id}' has negative weight for '{category}'"
                )
        if sum(option.weights.values()) <= 0.0:
            raise ConfigurationError(
                f"Option '{option.value}' of '{question_id}' has an all-zero weight vector"
            )

    # ------------------------------------------------------------------
    # Loading from plain configuration
    # ------------------------------------------------------------------

    @classmethod
    def from_dicts(
        cls,
        records: Iterable[Mapping[str, Any]],
        categories: Sequence[str] = CATEGORIES,
        importance: Optional[Mapping[str, float]] = None,
    ) -> "QuestionBank":
        """
        Build a bank from plain dicts, e.g. parsed JSON.

        Each record: {"id", "text", "mode", "options": [{"value", "label",
        "weights"}], optional "when" predicate, "is_final_stage" and
        "importance"}. Importance found on records is merged over the
        importance argument.
        """
        questions = []
        table = dict(importance or {})
        for record in records:
            try:
                options = [
                    Option(
                        value=str(o["value"]),
                        label=str(o.get("label", o["value"])),
                        weights={str(k): float(v) for k, v in o.get("weights", {}).items()},
                    )
                    for o in record.get("options", [])
                ]
                question = Question(
                    id=str(record["id"]),
                    text=str(record.get("text", "")),
                    mode=str(record.get("mode", "single")),
                    options=tuple(options),
                    predicate=parse_predicate(record["when"]) if record.get("when") else None,
                    is_final_stage=bool(record.get("is_final_stage", False)),
                )
            except (KeyError, TypeError, ValueError) as e:
                raise ConfigurationError(f"Malformed question record {record!r}: {e}") from e
            if "importance" in record:
                table[question.id] = float(record["importance"])
            questions.append(question)
        return cls(questions, categories=categories, importance=table)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "QuestionBank":
        """
        Load a bank from a JSON file.

        Accepts either a list of question records, or an object with
        "questions" and optional "categories" / "importance" keys.
        """
        path = Path(path)
        try:
            data = json.loads(path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot read question bank {path}: {e}") from e

        if isinstance(data, list):
            return cls.from_dicts(data)
        if not isinstance(data, dict) or "questions" not in data:
            raise ConfigurationError(f"{path}: expected a list or an object with 'questions'")
        return cls.from_dicts(
            data["questions"],
            categories=tuple(data.get("categories", CATEGORIES)),
            importance=data.get("importance"),
        )


def parse_predicate(spec: Mapping[str, Any]) -> Predicate:
    """
    Build a predicate from its dict form.

        {"equals": {"question": "q1", "value": "x"}}
        {"in": {"question": "q1", "values": ["x", "y"]}}
        {"answered": "q1"}
        {"all": [...]}, {"any": [...]}, {"not": {...}}
    """
    if not isinstance(spec, Mapping) or len(spec) != 1:
        raise ConfigurationError(f"Predicate must be a single-key object, got {spec!r}")

    (kind, arg), = spec.items()
    if kind == "equals":
        return AnswerEquals(str(arg["question"]), str(arg["value"]))
    if kind == "in":
        return AnswerIn(str(arg["question"]), [str(v) for v in arg["values"]])
    if kind == "answered":
        return Answered(str(arg))
    if kind == "all":
        return AllOf(*(parse_predicate(p) for p in arg))
    if kind == "any":
        return AnyOf(*(parse_predicate(p) for p in arg))
    if kind == "not":
        return Not(parse_predicate(arg))
    raise ConfigurationError(f"Unknown predicate kind '{kind}'")


# =============================================================================
# DEFAULT BANK
# =============================================================================

DEFAULT_QUESTIONS: List[Question] = [
    # Q1: Project type: the strongest single signal
    Question(
        id="project_type",
        text="What kind of project are you planning?",
        mode="single",
        options=(
            Option("website", "A website or landing page", {"web": 4, "tech": 1}),
            Option("web_app", "A web application (React, Next.js, etc.)", {"web": 3, "tech": 2}),
            Option("photography", "Photography for my brand or event", {"photo": 5}),
            Option("video", "A video, film or reel", {"cinema": 5}),
            Option("automation", "Automating a workflow or process", {"automation": 5, "tech": 1}),
            Option("ai", "An AI-powered tool or assistant", {"ai": 5, "tech": 1}),
            Option("not_sure", "Other / not sure yet", {
                "web": 1, "photo": 1, "cinema": 1, "automation": 1, "ai": 1, "tech": 1,
            }),
        ),
    ),

    # Q2: Visual content: only for projects that plausibly need media
    Question(
        id="media_needs",
        text="Which kinds of visual content do you need?",
        mode="multiple",
        options=(
            Option("product_photos", "Product photos", {"photo": 3}),
            Option("portraits", "Portraits or team photos", {"photo": 3}),
            Option("promo_video", "A promotional video", {"cinema": 4}),
            Option("aerial", "Aerial / drone footage", {"cinema": 2, "photo": 1}),
            Option("motion_graphics", "Motion graphics or animation", {"cinema": 2, "web": 1}),
            Option("site_visuals", "Visuals for a website", {"web": 2, "photo": 1}),
        ),
        predicate=AnswerIn(
            "project_type", ["website", "web_app", "photography", "video", "not_sure"]
        ),
    ),

    # Q3: Shoot setting: follows up on any requested shoot
    Question(
        id="shoot_setting",
        text="Where would the shoot take place?",
        mode="single",
        options=(
            Option("studio", "In a studio", {"photo": 2}),
            Option("on_location", "On location", {"photo": 1, "cinema": 1}),
            Option("event", "At a live event", {"cinema": 2, "photo": 1}),
        ),
        predicate=AnswerIn(
            "media_needs", ["product_photos", "portraits", "promo_video", "aerial"]
        ),
    ),

    # Q4: Automation scope
    Question(
        id="automation_scope",
        text="Which processes would you like to automate or augment?",
        mode="multiple",
        options=(
            Option("lead_capture", "Lead capture and follow-up", {"automation": 3, "web": 1}),
            Option("reporting", "Reporting and dashboards", {"automation": 3, "ai": 1}),
            Option("content_generation", "Content generation", {"ai": 4}),
            Option("customer_support", "Customer support", {"ai": 3, "automation": 2}),
            Option("integrations", "Connecting the tools we already use", {"automation": 2, "tech": 2}),
        ),
        predicate=AnswerIn("project_type", ["web_app", "automation", "ai", "not_sure"]),
    ),

    # Q5: Data readiness: only when AI work is on the table
    Question(
        id="data_readiness",
        text="How much existing data (documents, tickets, records) could an AI system use?",
        mode="single",
        options=(
            Option("plenty", "Plenty, and it is organized", {"ai": 3, "tech": 1}),
            Option("some", "Some, scattered across tools", {"ai": 2, "automation": 1}),
            Option("little", "Very little", {"ai": 1, "tech": 1}),
        ),
        predicate=AnyOf(
            AnswerEquals("project_type", "ai"),
            AnswerIn("automation_scope", ["content_generation", "customer_support"]),
        ),
    ),

    # Q6: Existing resources
    Question(
        id="resources",
        text="Do you have existing technical resources?",
        mode="single",
        options=(
            Option("none", "No technical team, need full development", {"web": 2, "automation": 1}),
            Option("designers", "Have designers but need developers", {"web": 2}),
            Option("backend", "Have a backend team but need frontend", {"web": 2, "tech": 1}),
            Option("developers", "Have developers but need architecture guidance", {"tech": 3}),
            Option("full_team", "Full team but need consultation", {"tech": 3, "ai": 1}),
            Option("review", "Just need a code review or audit", {"tech": 4}),
        ),
    ),

    # Q7: Budget
    Question(
        id="budget",
        text="What is your approximate budget range?",
        mode="single",
        options=(
            Option("under_1k", "Under $1,000", {"photo": 2, "web": 1}),
            Option("1k_5k", "$1,000 - $5,000", {"web": 2, "photo": 1, "cinema": 1}),
            Option("5k_15k", "$5,000 - $15,000", {"web": 2, "cinema": 2, "automation": 1}),
            Option("15k_50k", "$15,000 - $50,000", {"cinema": 2, "ai": 2, "automation": 2, "tech": 1}),
            Option("50k_plus", "$50,000+", {"ai": 3, "tech": 2, "cinema": 2}),
            Option("discuss", "Let's discuss", {"tech": 1, "web": 1}),
        ),
    ),

    # Q8: Timeline: final stage of the questionnaire
    Question(
        id="timeline",
        text="What is your timeline for this project?",
        mode="single",
        options=(
            Option("asap", "ASAP (rush job)", {"tech": 2, "photo": 1}),
            Option("1_2_weeks", "1-2 weeks", {"photo": 2, "web": 1}),
            Option("1_2_months", "1-2 months", {"web": 2, "cinema": 1}),
            Option("3_6_months", "3-6 months", {"web": 1, "automation": 2, "ai": 1}),
            Option("6_plus_months", "6+ months", {"ai": 2, "automation": 1}),
            Option("flexible", "Flexible", {
                "web": 1, "photo": 1, "cinema": 1, "automation": 1, "ai": 1, "tech": 1,
            }),
        ),
        is_final_stage=True,
    ),
]

# Per-question importance multipliers (default 1.0)
QUESTION_IMPORTANCE: Dict[str, float] = {
    "project_type": 2.0,
    "media_needs": 1.5,
    "automation_scope": 1.5,
    "data_readiness": 1.2,
    "budget": 0.8,
    "timeline": 0.5,
}


def load_question_bank(path: Union[str, Path, None] = None) -> QuestionBank:
    """
    Load the question bank: the authored default, or a JSON file if given.

    Raises:
        ConfigurationError: if the bank is malformed
    """
    if path is not None:
        return QuestionBank.from_json(path)
    return QuestionBank(DEFAULT_QUESTIONS, categories=CATEGORIES, importance=QUESTION_IMPORTANCE)
