"""
ComponentStore - immutable calculator state and its edit transitions.

An EngineState holds the ordered fabric components and the global pricing
parameters. Every transition (add / remove / update / set parameters) takes a
state and returns a new one; nothing is mutated in place. CalculatorSession is
the owning context that keeps the current state for one user.

Numeric inputs may arrive as numbers or as id-ID text ("1.234,56"); both are
normalised to non-negative floats, so malformed or negative input becomes 0.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from app import config
from app.services.number_io import to_non_negative

logger = logging.getLogger("garment-calc.store")


class Unit(str, Enum):
    YARD = "yard"
    METER = "meter"


class ComponentRole(str, Enum):
    PRIMARY = "primary"
    ADDITIONAL = "additional"


COMPONENT_NUMERIC_FIELDS: Tuple[str, ...] = (
    "quantity",
    "price_per_meter",
    "shipping_cost",
    "sewing_cost",
)
PARAMETER_FIELDS: Tuple[str, ...] = ("rnd_cost", "quantity", "markup_percent")


@dataclass(frozen=True)
class FabricComponent:
    quantity: float = 0.0
    unit: Unit = Unit.METER
    price_per_meter: float = 0.0
    shipping_cost: float = 0.0
    sewing_cost: float = 0.0
    role: ComponentRole = ComponentRole.ADDITIONAL

    @property
    def is_primary(self) -> bool:
        return self.role is ComponentRole.PRIMARY


@dataclass(frozen=True)
class PricingParameters:
    rnd_cost: float = field(default_factory=lambda: config.DEFAULT_RND_COST)
    quantity: float = field(default_factory=lambda: config.DEFAULT_PRODUCTION_QUANTITY)
    markup_percent: float = field(default_factory=lambda: config.DEFAULT_MARKUP_PCT)


@dataclass(frozen=True)
class EngineState:
    components: Tuple[FabricComponent, ...] = ()
    params: PricingParameters = field(default_factory=PricingParameters)

    @property
    def primary(self) -> Optional[FabricComponent]:
        for component in self.components:
            if component.is_primary:
                return component
        return None


def parse_unit(value: Any) -> Optional[Unit]:
    """Return the Unit for 'yard'/'meter' (case-insensitive), else None."""
    if isinstance(value, Unit):
        return value
    try:
        return Unit(str(value).strip().lower())
    except ValueError:
        return None


def new_state(params: Optional[PricingParameters] = None) -> EngineState:
    """Fresh state: one zero-valued primary component and default parameters."""
    return EngineState(
        components=(FabricComponent(role=ComponentRole.PRIMARY),),
        params=params or PricingParameters(),
    )


# ---------------------------------------------------------------------------
# Field normalisation
# ---------------------------------------------------------------------------

def _normalise_component_fields(fields: Mapping[str, Any]) -> Dict[str, Any]:
    changes: Dict[str, Any] = {}
    for name, value in fields.items():
        if name in COMPONENT_NUMERIC_FIELDS:
            changes[name] = to_non_negative(value)
        elif name == "unit":
            unit = parse_unit(value)
            if unit is None:
                logger.warning(f"Ignoring unrecognised unit {value!r}")
                continue
            changes["unit"] = unit
        else:
            logger.warning(f"Ignoring unknown component field {name!r}")
    return changes


def _normalise_parameter_fields(fields: Mapping[str, Any]) -> Dict[str, float]:
    changes: Dict[str, float] = {}
    for name, value in fields.items():
        if name in PARAMETER_FIELDS:
            changes[name] = to_non_negative(value)
        else:
            logger.warning(f"Ignoring unknown parameter field {name!r}")
    return changes


def make_component(
    fields: Optional[Mapping[str, Any]] = None,
    role: ComponentRole = ComponentRole.ADDITIONAL,
) -> FabricComponent:
    """Build a component from raw (possibly textual) fields."""
    return replace(FabricComponent(role=role), **_normalise_component_fields(fields or {}))


def make_parameters(fields: Optional[Mapping[str, Any]] = None) -> PricingParameters:
    """Build pricing parameters from raw fields, defaults for anything missing."""
    return replace(PricingParameters(), **_normalise_parameter_fields(fields or {}))


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------

def add_component(state: EngineState) -> EngineState:
    """Append a zero-valued additional fabric."""
    role = ComponentRole.ADDITIONAL if state.components else ComponentRole.PRIMARY
    return replace(state, components=state.components + (FabricComponent(role=role),))


def remove_component(state: EngineState, position: int) -> EngineState:
    """
    Remove the component at *position*. The primary component is permanent and
    out-of-range positions are ignored; both return *state* unchanged.
    """
    if not 0 <= position < len(state.components):
        logger.info(f"Remove ignored: no component at position {position}")
        return state
    if state.components[position].is_primary:
        logger.info("Remove ignored: the primary component cannot be removed")
        return state
    components = state.components[:position] + state.components[position + 1:]
    return replace(state, components=components)


def update_component(state: EngineState, position: int, fields: Mapping[str, Any]) -> EngineState:
    """Merge *fields* into the component at *position*; others are untouched."""
    if not 0 <= position < len(state.components):
        logger.warning(f"Update ignored: no component at position {position}")
        return state
    changes = _normalise_component_fields(fields)
    if not changes:
        return state
    updated = replace(state.components[position], **changes)
    components = state.components[:position] + (updated,) + state.components[position + 1:]
    return replace(state, components=components)


def set_parameters(state: EngineState, fields: Mapping[str, Any]) -> EngineState:
    """Merge a subset of rnd_cost / quantity / markup_percent into the parameters."""
    changes = _normalise_parameter_fields(fields)
    if not changes:
        return state
    return replace(state, params=replace(state.params, **changes))


def build_state(
    components: Optional[list] = None,
    params: Optional[Mapping[str, Any]] = None,
) -> EngineState:
    """
    Build a complete state from raw payloads. The first component becomes the
    primary one; an empty list still yields a zero-valued primary.
    """
    raw_components = list(components or [])
    if not raw_components:
        raw_components = [{}]
    built = tuple(
        make_component(raw, ComponentRole.PRIMARY if idx == 0 else ComponentRole.ADDITIONAL)
        for idx, raw in enumerate(raw_components)
    )
    return EngineState(components=built, params=make_parameters(params))


# ---------------------------------------------------------------------------
# Owning context
# ---------------------------------------------------------------------------

class CalculatorSession:
    """
    Holds the current EngineState for one user and applies edit events to it.

    Each operation replaces the state wholesale, so a snapshot taken with
    ``session.state`` is never changed by later edits.
    """

    def __init__(self, session_id: str, state: Optional[EngineState] = None) -> None:
        self.session_id = session_id
        self._state: EngineState = state or new_state()

    @property
    def state(self) -> EngineState:
        return self._state

    def add_component(self) -> int:
        """Append an additional fabric; returns its position."""
        self._state = add_component(self._state)
        logger.debug("component added", extra={"session_id": self.session_id})
        return len(self._state.components) - 1

    def remove_component(self, position: int) -> bool:
        """Returns True when a component was actually removed."""
        before = self._state
        self._state = remove_component(before, position)
        return self._state is not before

    def update_component(self, position: int, fields: Mapping[str, Any]) -> None:
        self._state = update_component(self._state, position, fields)

    def set_parameters(self, fields: Mapping[str, Any]) -> None:
        self._state = set_parameters(self._state, fields)

    def get_derived_view(self):
        from app.services.pricing_engine import get_derived_view
        return get_derived_view(self._state)
