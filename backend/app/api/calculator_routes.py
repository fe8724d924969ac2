"""
Calculator API Routes

POST   /api/calculator/sessions                               - new session (one primary component)
GET    /api/calculator/sessions/{id}                          - derived view
DELETE /api/calculator/sessions/{id}                          - discard session
POST   /api/calculator/sessions/{id}/components               - add an additional fabric
PATCH  /api/calculator/sessions/{id}/components/{position}    - merge component fields
DELETE /api/calculator/sessions/{id}/components/{position}    - remove (primary is permanent)
PATCH  /api/calculator/sessions/{id}/parameters               - merge pricing parameters
POST   /api/calculator/quote                                  - stateless quote
POST   /api/calculator/parse                                  - id-ID text → numbers
"""
import logging

from fastapi import APIRouter, Depends, status

from app.api.deps import get_registry, get_session
from app.models.calculator_schema import (
    CalculatorView,
    ComponentUpdate,
    ParametersUpdate,
    ParseRequest,
    ParseResponse,
    QuoteRequest,
    RemoveComponentResponse,
    to_calculator_view,
)
from app.services.component_store import CalculatorSession, build_state
from app.services.number_io import parse_number
from app.services.pricing_engine import get_derived_view
from app.services.session_registry import SessionRegistry

router = APIRouter(prefix="/api/calculator", tags=["Garment Calculator"])
logger = logging.getLogger("garment-calc.routes")


def _view(session: CalculatorSession) -> CalculatorView:
    return to_calculator_view(session.get_derived_view(), session_id=session.session_id)


# ── Sessions ────────────────────────────────────────────────────────────────

@router.post("/sessions", response_model=CalculatorView, status_code=status.HTTP_201_CREATED)
async def create_session(sessions: SessionRegistry = Depends(get_registry)):
    """Start a calculator with a single zero-valued primary component."""
    session = sessions.create()
    return _view(session)


@router.get("/sessions/{session_id}", response_model=CalculatorView)
async def get_view(session: CalculatorSession = Depends(get_session)):
    return _view(session)


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def discard_session(
    session: CalculatorSession = Depends(get_session),
    sessions: SessionRegistry = Depends(get_registry),
):
    sessions.discard(session.session_id)


# ── Components ──────────────────────────────────────────────────────────────

@router.post("/sessions/{session_id}/components", response_model=CalculatorView)
async def add_component(session: CalculatorSession = Depends(get_session)):
    """Append a zero-valued additional fabric to the end of the list."""
    position = session.add_component()
    logger.info(f"Added additional fabric at position {position}", extra={"session_id": session.session_id})
    return _view(session)


@router.patch("/sessions/{session_id}/components/{position}", response_model=CalculatorView)
async def update_component(
    position: int,
    req: ComponentUpdate,
    session: CalculatorSession = Depends(get_session),
):
    """Merge the given fields; fields not sent are left untouched."""
    session.update_component(position, req.model_dump(exclude_unset=True, exclude_none=True))
    return _view(session)


@router.delete("/sessions/{session_id}/components/{position}", response_model=RemoveComponentResponse)
async def remove_component(position: int, session: CalculatorSession = Depends(get_session)):
    """Remove an additional fabric. The primary component and unknown positions are a no-op."""
    removed = session.remove_component(position)
    return RemoveComponentResponse(removed=removed, view=_view(session))


# ── Parameters ──────────────────────────────────────────────────────────────

@router.patch("/sessions/{session_id}/parameters", response_model=CalculatorView)
async def set_parameters(req: ParametersUpdate, session: CalculatorSession = Depends(get_session)):
    session.set_parameters(req.model_dump(exclude_unset=True, exclude_none=True))
    return _view(session)


# ── Stateless helpers ───────────────────────────────────────────────────────

@router.post("/quote", response_model=CalculatorView)
async def quote(req: QuoteRequest):
    """Compute a full view from a one-off payload without creating a session."""
    state = build_state(
        [c.model_dump(exclude_none=True) for c in req.components],
        req.params.model_dump(exclude_none=True),
    )
    return to_calculator_view(get_derived_view(state))


@router.post("/parse", response_model=ParseResponse)
async def parse_values(req: ParseRequest):
    """Parse id-ID formatted text ("1.234,56") the same way form fields are parsed."""
    return ParseResponse(values=[parse_number(v) for v in req.values])
