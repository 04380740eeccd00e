"""
In-memory session manager for the ServiceMatch API.

Stores one QuestionnaireSession per respondent, keyed by session_id.
"""

from __future__ import annotations

import uuid
from typing import Dict, List, Optional

from ..content.question_bank import QuestionBank, load_question_bank
from ..core.config import EngineConfig, default_config
from ..core.session import QuestionnaireSession


class SessionManager:
    """
    Manages active questionnaire sessions in memory.

    All sessions share the read-only question bank; each has its own
    answers, position and result.
    """

    def __init__(
        self,
        bank: Optional[QuestionBank] = None,
        config: Optional[EngineConfig] = None,
    ):
        self.bank = bank or load_question_bank()
        self.config = config or default_config()
        self._sessions: Dict[str, QuestionnaireSession] = {}

    def create_session(self) -> str:
        """Create a new session and return its ID."""
        session_id = str(uuid.uuid4())[:8]
        self._sessions[session_id] = QuestionnaireSession(self.bank, self.config)
        return session_id

    def get_session(self, session_id: str) -> Optional[QuestionnaireSession]:
        return self._sessions.get(session_id)

    def session_exists(self, session_id: str) -> bool:
        return session_id in self._sessions

    def delete_session(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def list_sessions(self) -> List[str]:
        return list(self._sessions.keys())
