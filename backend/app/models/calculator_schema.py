"""
Request / response models for the calculator API.

Numeric request fields accept either JSON numbers or id-ID text such as
"1.234,56"; the store normalises both, so these models never reject a value
for being malformed or negative.
"""
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

from app.services.pricing_engine import ComponentFigures, DerivedView

NumberInput = Union[float, str]


# ── Requests ────────────────────────────────────────────────────────────────

class ComponentUpdate(BaseModel):
    """Partial component edit - only the fields present are merged."""
    quantity: Optional[NumberInput] = None
    unit: Optional[str] = None            # "yard" | "meter"
    price_per_meter: Optional[NumberInput] = None
    shipping_cost: Optional[NumberInput] = None
    sewing_cost: Optional[NumberInput] = None


class ParametersUpdate(BaseModel):
    rnd_cost: Optional[NumberInput] = None
    quantity: Optional[NumberInput] = None
    markup_percent: Optional[NumberInput] = None


class QuoteRequest(BaseModel):
    """Stateless quote: the first component is the primary one."""
    components: List[ComponentUpdate] = Field(default_factory=list)
    params: ParametersUpdate = Field(default_factory=ParametersUpdate)


class ParseRequest(BaseModel):
    values: List[str]


# ── Responses ───────────────────────────────────────────────────────────────

class ComponentView(BaseModel):
    position: int
    role: str
    title: str
    quantity: float
    unit: str
    price_per_meter: float
    shipping_cost: float
    sewing_cost: float
    meters: float
    fabric_cost: float
    subtotal: float
    formatted: Dict[str, str]


class SummaryView(BaseModel):
    total_cost: float
    rnd_allocation: float
    markup: float
    tax: float
    final_price: float
    hpp_plus_markup: float
    formatted: Dict[str, str]


class ParametersView(BaseModel):
    rnd_cost: float
    quantity: float
    markup_percent: float
    formatted: Dict[str, str]


class CalculatorView(BaseModel):
    session_id: Optional[str] = None
    components: List[ComponentView]
    summary: SummaryView
    params: ParametersView

    model_config = {"json_schema_extra": {
        "example": {
            "session_id": "3f0c9a7e-0d5b-4d4e-9f55-1b1f3e2a9c10",
            "components": [{
                "position": 0,
                "role": "primary",
                "title": "Komponen Utama",
                "quantity": 10.0,
                "unit": "meter",
                "price_per_meter": 50000.0,
                "shipping_cost": 20000.0,
                "sewing_cost": 30000.0,
                "meters": 10.0,
                "fabric_cost": 500000.0,
                "subtotal": 550000.0,
                "formatted": {"subtotal": "550.000"},
            }],
            "summary": {
                "total_cost": 550000.0,
                "rnd_allocation": 6450.0,
                "markup": 11129.0,
                "tax": 66774.0,
                "final_price": 634353.0,
                "hpp_plus_markup": 561000.0,
                "formatted": {"final_price": "634.353"},
            },
            "params": {
                "rnd_cost": 125000.0,
                "quantity": 100.0,
                "markup_percent": 2.0,
                "formatted": {"rnd_cost": "125.000"},
            },
        }
    }}


class RemoveComponentResponse(BaseModel):
    removed: bool
    view: CalculatorView


class ParseResponse(BaseModel):
    values: List[float]


def _component_view(figures: ComponentFigures) -> ComponentView:
    return ComponentView(
        position=figures.position,
        role=figures.role.value,
        title=figures.title,
        quantity=figures.quantity,
        unit=figures.unit.value,
        price_per_meter=figures.price_per_meter,
        shipping_cost=figures.shipping_cost,
        sewing_cost=figures.sewing_cost,
        meters=figures.meters,
        fabric_cost=figures.fabric_cost,
        subtotal=figures.subtotal,
        formatted=dict(figures.formatted),
    )


def to_calculator_view(view: DerivedView, session_id: Optional[str] = None) -> CalculatorView:
    summary = view.summary
    params = view.params
    return CalculatorView(
        session_id=session_id,
        components=[_component_view(c) for c in view.components],
        summary=SummaryView(
            total_cost=summary.total_cost,
            rnd_allocation=summary.rnd_allocation,
            markup=summary.markup,
            tax=summary.tax,
            final_price=summary.final_price,
            hpp_plus_markup=summary.hpp_plus_markup,
            formatted=dict(summary.formatted),
        ),
        params=ParametersView(
            rnd_cost=params.rnd_cost,
            quantity=params.quantity,
            markup_percent=params.markup_percent,
            formatted=dict(view.formatted_params),
        ),
    )
