"""In-memory registry of calculator sessions (nothing is persisted)."""
import logging
import uuid
from collections import OrderedDict
from typing import Optional

from app import config
from app.services.component_store import CalculatorSession, EngineState

logger = logging.getLogger("garment-calc.sessions")


class SessionRegistry:
    """
    Bounded map of session_id -> CalculatorSession.

    Lookups refresh recency; when the registry is full the least recently
    used session is dropped.
    """

    def __init__(self, max_sessions: int = config.MAX_SESSIONS) -> None:
        self.max_sessions = max(1, int(max_sessions))
        self._sessions: "OrderedDict[str, CalculatorSession]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def create(self, state: Optional[EngineState] = None) -> CalculatorSession:
        session = CalculatorSession(str(uuid.uuid4()), state)
        self._sessions[session.session_id] = session
        while len(self._sessions) > self.max_sessions:
            evicted_id, _ = self._sessions.popitem(last=False)
            logger.info("session evicted", extra={"session_id": evicted_id})
        logger.info("session created", extra={"session_id": session.session_id})
        return session

    def get(self, session_id: str) -> Optional[CalculatorSession]:
        session = self._sessions.get(session_id)
        if session is not None:
            self._sessions.move_to_end(session_id)
        return session

    def discard(self, session_id: str) -> bool:
        removed = self._sessions.pop(session_id, None) is not None
        if removed:
            logger.info("session discarded", extra={"session_id": session_id})
        return removed

    def clear(self) -> None:
        self._sessions.clear()


registry = SessionRegistry()
