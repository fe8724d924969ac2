"""
PricingEngine - pure cost derivation for garment production.

Covers:
  - Yard → meter conversion (1 yard = 1.1 m)
  - Fabric cost and per-component subtotal
  - Total HPP across all components
  - R&D allocation per produced unit
  - Markup, tax (10 % on HPP + R&D, plus markup), final price
  - Derived view with raw and id-ID formatted figures

Every function reads a snapshot and returns new values; nothing here mutates
or caches state. Formula chain:

    total   = Σ subtotal
    rnd     = (total − primary.sewing_cost + rnd_cost) / quantity
    markup  = (total + rnd) × markup_percent / 100
    tax     = (total + rnd) × 0.10 + markup
    final   = total + rnd + markup + tax
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Tuple

from app import config
from app.services.component_store import (
    ComponentRole,
    EngineState,
    FabricComponent,
    PricingParameters,
    Unit,
)
from app.services.number_io import format_number


# ---------------------------------------------------------------------------
# Per-component figures
# ---------------------------------------------------------------------------

def to_meters(quantity: float, unit: Unit) -> float:
    """Yards are converted with the fixed 1.1 factor; meters pass through."""
    if unit == Unit.YARD:
        return quantity * config.YARD_TO_METER
    return quantity


def fabric_cost(component: FabricComponent) -> float:
    return to_meters(component.quantity, component.unit) * component.price_per_meter


def subtotal(component: FabricComponent) -> float:
    return fabric_cost(component) + component.shipping_cost + component.sewing_cost


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------

def total_cost(components: Iterable[FabricComponent]) -> float:
    """Total HPP: sum of subtotals in list order (0 for an empty list)."""
    total = 0.0
    for component in components:
        total += subtotal(component)
    return total


def _primary_sewing_cost(components: Sequence[FabricComponent]) -> float:
    for component in components:
        if component.role is ComponentRole.PRIMARY:
            return component.sewing_cost
    return 0.0


def rnd_allocation(components: Sequence[FabricComponent], params: PricingParameters) -> float:
    """
    Per-unit R&D share. The primary component's sewing cost is excluded from
    the base; sewing on additional fabrics stays in. Zero when there is no
    cost or no production quantity.
    """
    total = total_cost(components)
    if total == 0 or params.quantity == 0:
        return 0.0
    return (total - _primary_sewing_cost(components) + params.rnd_cost) / params.quantity


def markup(total: float, rnd: float, params: PricingParameters) -> float:
    if total == 0:
        return 0.0
    return (total + rnd) * (params.markup_percent / 100)


def tax(total: float, rnd: float, markup_amount: float) -> float:
    """10 % of (HPP + R&D) with the markup added on top of the tax figure."""
    if total == 0:
        return 0.0
    return (total + rnd) * config.TAX_RATE + markup_amount


def final_price(total: float, rnd: float, markup_amount: float, tax_amount: float) -> float:
    return total + rnd + markup_amount + tax_amount


def hpp_plus_markup(total: float, params: PricingParameters) -> float:
    """HPP grossed up by the markup percent alone (no R&D, no tax)."""
    return total * (1 + params.markup_percent / 100)


# ---------------------------------------------------------------------------
# Derived view
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ComponentFigures:
    position: int
    role: ComponentRole
    title: str
    quantity: float
    unit: Unit
    price_per_meter: float
    shipping_cost: float
    sewing_cost: float
    meters: float
    fabric_cost: float
    subtotal: float
    formatted: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class SummaryFigures:
    total_cost: float
    rnd_allocation: float
    markup: float
    tax: float
    final_price: float
    hpp_plus_markup: float
    formatted: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class DerivedView:
    components: Tuple[ComponentFigures, ...]
    summary: SummaryFigures
    params: PricingParameters
    formatted_params: Dict[str, str] = field(default_factory=dict)


def _format_all(values: Dict[str, float], digits: Dict[str, int]) -> Dict[str, str]:
    return {name: format_number(values[name], digits[name]) for name in digits}


def component_title(role: ComponentRole, additional_index: int) -> str:
    if role is ComponentRole.PRIMARY:
        return config.PRIMARY_TITLE
    return config.ADDITIONAL_TITLE_TEMPLATE.format(n=additional_index)


def component_figures(position: int, component: FabricComponent, additional_index: int = 0) -> ComponentFigures:
    raw = {
        "quantity": component.quantity,
        "price_per_meter": component.price_per_meter,
        "shipping_cost": component.shipping_cost,
        "sewing_cost": component.sewing_cost,
        "meters": to_meters(component.quantity, component.unit),
        "fabric_cost": fabric_cost(component),
        "subtotal": subtotal(component),
    }
    return ComponentFigures(
        position=position,
        role=component.role,
        title=component_title(component.role, additional_index),
        unit=component.unit,
        formatted=_format_all(raw, config.COMPONENT_DISPLAY_DIGITS),
        **raw,
    )


def summarize(components: Sequence[FabricComponent], params: PricingParameters) -> SummaryFigures:
    total = total_cost(components)
    rnd = rnd_allocation(components, params)
    markup_amount = markup(total, rnd, params)
    tax_amount = tax(total, rnd, markup_amount)
    raw = {
        "total_cost": total,
        "rnd_allocation": rnd,
        "markup": markup_amount,
        "tax": tax_amount,
        "final_price": final_price(total, rnd, markup_amount, tax_amount),
        "hpp_plus_markup": hpp_plus_markup(total, params),
    }
    return SummaryFigures(formatted=_format_all(raw, config.SUMMARY_DISPLAY_DIGITS), **raw)


def get_derived_view(state: EngineState) -> DerivedView:
    """Recompute every per-component and aggregate figure from *state*."""
    figures: List[ComponentFigures] = []
    additional_index = 0
    for position, component in enumerate(state.components):
        if component.role is ComponentRole.ADDITIONAL:
            additional_index += 1
        figures.append(component_figures(position, component, additional_index))

    params = state.params
    formatted_params = _format_all(
        {"rnd_cost": params.rnd_cost, "quantity": params.quantity, "markup_percent": params.markup_percent},
        config.PARAMETER_DISPLAY_DIGITS,
    )
    return DerivedView(
        components=tuple(figures),
        summary=summarize(state.components, params),
        params=params,
        formatted_params=formatted_params,
    )
