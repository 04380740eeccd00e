"""
Pydantic request/response models for the ServiceMatch API.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field


# =============================================================================
# REQUEST MODELS
# =============================================================================

class AnswerRequest(BaseModel):
    """Answer to one question."""
    question_id: str = Field(..., description="Question being answered")
    value: Union[str, List[str]] = Field(
        ..., description="Option value (single) or list of option values (multiple)"
    )


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class OptionData(BaseModel):
    value: str
    label: str


class QuestionData(BaseModel):
    """A question as shown to the respondent."""
    id: str
    text: str
    mode: str
    options: List[OptionData]
    is_final_stage: bool = False


class EntryData(BaseModel):
    category: str
    raw_score: float
    percentage: float
    is_detailed: bool


class ResultData(BaseModel):
    primary_category: str
    is_fallback: bool
    total_score: float
    entries: List[EntryData]
    percentages: Dict[str, float]


class SessionState(BaseModel):
    """Full state of a questionnaire session."""
    session_id: str
    state: str
    position: int
    visible_count: int
    visible_question_ids: List[str]
    current_question: Optional[QuestionData] = None
    is_last_question: bool = False
    is_current_answered: bool = False
    answers: Dict[str, Union[str, List[str]]] = Field(default_factory=dict)
    progress: float
    result: Optional[ResultData] = None


class ServiceCard(BaseModel):
    category: str
    title: str
    description: str
    recommendations: List[str]
    call_to_action: str
    percentage: Optional[float] = None


class ResultResponse(BaseModel):
    """Final recommendations with presentation cards."""
    session_id: str
    result: ResultData
    cards: List[ServiceCard]


class QuestionBankResponse(BaseModel):
    categories: List[str]
    questions: List[QuestionData]


class ChartResponse(BaseModel):
    bar: Dict[str, Any]
    radar: Dict[str, Any]
