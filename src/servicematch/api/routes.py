"""
REST API routes for ServiceMatch.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException

from ..content.services import get_service_cards
from ..core.errors import InvalidAnswerError
from ..core.session import QuestionnaireSession
from ..viz.match_chart import create_match_chart, create_match_radar
from .schemas import (
    AnswerRequest,
    ChartResponse,
    QuestionBankResponse,
    ResultResponse,
    SessionState,
)
from .session import SessionManager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

# Global session manager (created on first use)
session_manager: Optional[SessionManager] = None


def get_session_manager() -> SessionManager:
    global session_manager
    if session_manager is None:
        session_manager = SessionManager()
    return session_manager


def _get_session(session_id: str) -> QuestionnaireSession:
    session = get_session_manager().get_session(session_id)
    if session is None:
        raise HTTPException(404, f"Session {session_id} not found")
    return session


def _state(session_id: str, session: QuestionnaireSession) -> SessionState:
    return SessionState(session_id=session_id, **session.snapshot())


def _completed_result(session_id: str) -> QuestionnaireSession:
    session = _get_session(session_id)
    if not session.is_complete or session.result is None:
        raise HTTPException(409, f"Session {session_id} has not completed the questionnaire")
    return session


@router.get("/questions", response_model=QuestionBankResponse)
async def list_questions():
    """List the full question bank."""
    bank = get_session_manager().bank
    return QuestionBankResponse(categories=list(bank.categories), questions=bank.to_list())


@router.post("/session/start", response_model=SessionState)
async def start_session():
    """Start a new questionnaire session."""
    sm = get_session_manager()
    session_id = sm.create_session()
    logger.info(f"Started session {session_id}")
    return _state(session_id, sm.get_session(session_id))


@router.get("/session/{session_id}", response_model=SessionState)
async def get_state(session_id: str):
    """Get the current state of a session."""
    return _state(session_id, _get_session(session_id))


@router.post("/session/{session_id}/answer", response_model=SessionState)
async def answer(session_id: str, request: AnswerRequest):
    """Record an answer for a visible question."""
    session = _get_session(session_id)
    try:
        session.answer(request.question_id, request.value)
    except InvalidAnswerError as e:
        raise HTTPException(422, str(e))
    return _state(session_id, session)


@router.post("/session/{session_id}/next", response_model=SessionState)
async def next_question(session_id: str):
    """Advance to the next question, or to the results."""
    session = _get_session(session_id)
    session.next()
    return _state(session_id, session)


@router.post("/session/{session_id}/previous", response_model=SessionState)
async def previous_question(session_id: str):
    """Go back one question (from the results: to the last question)."""
    session = _get_session(session_id)
    session.previous()
    return _state(session_id, session)


@router.post("/session/{session_id}/reset", response_model=SessionState)
async def reset_session(session_id: str):
    """Clear all answers and restart."""
    session = _get_session(session_id)
    session.reset()
    return _state(session_id, session)


@router.get("/session/{session_id}/result", response_model=ResultResponse)
async def get_result(session_id: str):
    """Get the ranked recommendations with service cards."""
    session = _completed_result(session_id)
    return ResultResponse(
        session_id=session_id,
        result=session.result.to_dict(),
        cards=get_service_cards(session.result),
    )


@router.get("/session/{session_id}/chart", response_model=ChartResponse)
async def get_chart(session_id: str):
    """Get Plotly figures of the match percentages."""
    session = _completed_result(session_id)
    return ChartResponse(
        bar=json.loads(create_match_chart(session.result)),
        radar=json.loads(create_match_radar(session.result)),
    )


@router.delete("/session/{session_id}")
async def delete_session(session_id: str):
    """Discard a session."""
    _get_session(session_id)
    get_session_manager().delete_session(session_id)
    return {"deleted": session_id}
