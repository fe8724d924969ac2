"""FastAPI dependency injection - session lookup."""
from fastapi import Depends, HTTPException, status

from app.services.component_store import CalculatorSession
from app.services.session_registry import SessionRegistry, registry


async def get_registry() -> SessionRegistry:
    return registry


async def get_session(
    session_id: str,
    sessions: SessionRegistry = Depends(get_registry),
) -> CalculatorSession:
    """Resolve the path's session_id; 404 when it is unknown or was evicted."""
    session = sessions.get(session_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session {session_id} not found",
        )
    return session
