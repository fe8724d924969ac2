"""
test_pricing_engine.py - Unit tests for the garment pricing engine.

Tests cover:
  - Yard → meter conversion (fixed 1.1 factor)
  - Fabric cost and component subtotal
  - Total HPP across components, empty list
  - R&D allocation: primary sewing exclusion, zero-quantity guard
  - Markup, tax (markup compounded into tax), final price
  - HPP + markup summary line
  - Derived view: titles, roles, formatted figures, blank zeros
  - Reference scenario end-to-end

All tests are pure unit tests; no database or external services required.
"""

from dataclasses import replace

import pytest

from app.services import pricing_engine as pe
from app.services.component_store import (
    ComponentRole,
    EngineState,
    FabricComponent,
    PricingParameters,
    Unit,
    new_state,
)


# ===========================================================================
# Class 1: Unit conversion & per-component figures
# ===========================================================================

class TestComponentFigures:
    """Tests for to_meters, fabric_cost and subtotal."""

    def test_ten_yards_is_eleven_meters(self):
        assert pe.to_meters(10, Unit.YARD) == pytest.approx(11.0)

    def test_meters_pass_through(self):
        assert pe.to_meters(10, Unit.METER) == 10.0

    def test_zero_quantity(self):
        assert pe.to_meters(0, Unit.YARD) == 0.0

    def test_fabric_cost_meters(self, primary_component):
        """10 m × 50 000 = 500 000."""
        assert pe.fabric_cost(primary_component) == pytest.approx(500_000.0)

    def test_fabric_cost_yards(self, lining_component):
        """5 yd = 5.5 m; 5.5 × 20 000 = 110 000."""
        assert pe.fabric_cost(lining_component) == pytest.approx(110_000.0)

    def test_subtotal_adds_shipping_and_sewing(self, primary_component):
        assert pe.subtotal(primary_component) == pytest.approx(550_000.0)

    def test_subtotal_without_fabric(self):
        """Shipping and sewing count even when no fabric is priced."""
        component = FabricComponent(shipping_cost=1_000.0, sewing_cost=2_000.0)
        assert pe.fabric_cost(component) == 0.0
        assert pe.subtotal(component) == 3_000.0


# ===========================================================================
# Class 2: Aggregates
# ===========================================================================

class TestAggregates:
    """Tests for total_cost, rnd_allocation, markup, tax, final_price."""

    def test_total_cost_empty_list(self):
        assert pe.total_cost([]) == 0.0

    def test_total_cost_sums_subtotals(self, primary_component, lining_component):
        """550 000 + 130 000 = 680 000."""
        assert pe.total_cost([primary_component, lining_component]) == pytest.approx(680_000.0)

    def test_empty_list_everything_zero(self, default_params):
        total = pe.total_cost([])
        rnd = pe.rnd_allocation([], default_params)
        markup = pe.markup(total, rnd, default_params)
        tax = pe.tax(total, rnd, markup)
        assert (total, rnd, markup, tax) == (0.0, 0.0, 0.0, 0.0)
        assert pe.final_price(total, rnd, markup, tax) == 0.0

    def test_zero_total_zero_rnd_despite_rnd_cost(self, default_params):
        """A blank primary component must not produce an R&D share of rnd_cost / quantity."""
        blank = FabricComponent(role=ComponentRole.PRIMARY)
        assert pe.rnd_allocation([blank], default_params) == 0.0

    def test_rnd_excludes_primary_sewing(self, primary_component, default_params):
        """(550 000 − 30 000 + 125 000) / 100 = 6 450."""
        assert pe.rnd_allocation([primary_component], default_params) == pytest.approx(6_450.0)

    def test_rnd_keeps_additional_sewing(self, primary_component, lining_component, default_params):
        """
        Only the primary sewing cost is excluded:
          (680 000 − 30 000 + 125 000) / 100 = 7 750.
        """
        rnd = pe.rnd_allocation([primary_component, lining_component], default_params)
        assert rnd == pytest.approx(7_750.0)

    def test_rnd_zero_quantity_guard(self, primary_component):
        """quantity = 0 yields 0 instead of a division error."""
        params = PricingParameters(rnd_cost=125_000.0, quantity=0.0, markup_percent=2.0)
        assert pe.rnd_allocation([primary_component], params) == 0.0

    def test_markup_zero_total(self, default_params):
        assert pe.markup(0.0, 500.0, default_params) == 0.0

    def test_markup_formula(self, default_params):
        """(550 000 + 6 450) × 2 % = 11 129."""
        assert pe.markup(550_000.0, 6_450.0, default_params) == pytest.approx(11_129.0)

    def test_tax_includes_markup(self):
        """(550 000 + 6 450) × 10 % + 11 129 = 55 645 + 11 129 = 66 774."""
        assert pe.tax(550_000.0, 6_450.0, 11_129.0) == pytest.approx(66_774.0)

    def test_tax_zero_total(self):
        assert pe.tax(0.0, 0.0, 0.0) == 0.0

    def test_final_price_is_plain_sum(self):
        assert pe.final_price(1.0, 2.0, 3.0, 4.0) == 10.0

    def test_hpp_plus_markup(self, default_params):
        """550 000 × 1.02 = 561 000."""
        assert pe.hpp_plus_markup(550_000.0, default_params) == pytest.approx(561_000.0)

    def test_zero_markup_percent(self, primary_component):
        params = PricingParameters(rnd_cost=125_000.0, quantity=100.0, markup_percent=0.0)
        summary = pe.summarize([primary_component], params)
        assert summary.markup == 0.0
        assert summary.tax == pytest.approx(55_645.0)


# ===========================================================================
# Class 3: Reference scenario
# ===========================================================================

class TestReferenceScenario:
    """
    One primary component {10 m, 50 000/m, shipping 20 000, sewing 30 000},
    params {rnd 125 000, quantity 100, markup 2 %}:
      fabric 500 000, total 550 000, rnd 6 450, markup 11 129,
      tax 66 774, final 634 353.
    """

    def test_summary_figures(self, reference_state):
        summary = pe.get_derived_view(reference_state).summary
        assert summary.total_cost == pytest.approx(550_000.0)
        assert summary.rnd_allocation == pytest.approx(6_450.0)
        assert summary.markup == pytest.approx(11_129.0)
        assert summary.tax == pytest.approx(66_774.0)
        assert summary.final_price == pytest.approx(634_353.0)

    def test_formatted_summary(self, reference_state):
        formatted = pe.get_derived_view(reference_state).summary.formatted
        assert formatted["total_cost"] == "550.000"
        assert formatted["rnd_allocation"] == "6.450"
        assert formatted["markup"] == "11.129"
        assert formatted["tax"] == "66.774"
        assert formatted["final_price"] == "634.353"
        assert formatted["hpp_plus_markup"] == "561.000"

    def test_component_figures(self, reference_state):
        figures = pe.get_derived_view(reference_state).components[0]
        assert figures.meters == 10.0
        assert figures.fabric_cost == pytest.approx(500_000.0)
        assert figures.subtotal == pytest.approx(550_000.0)
        assert figures.formatted["meters"] == "10,00"
        assert figures.formatted["fabric_cost"] == "500.000"
        assert figures.formatted["price_per_meter"] == "50.000"
        assert figures.formatted["quantity"] == "10,00"


# ===========================================================================
# Class 4: Derived view
# ===========================================================================

class TestDerivedView:
    """Tests for get_derived_view labelling and formatting."""

    def test_fresh_state_all_blank(self):
        view = pe.get_derived_view(new_state(PricingParameters(125_000.0, 100.0, 2.0)))
        assert len(view.components) == 1
        assert all(text == "" for text in view.components[0].formatted.values())
        assert all(text == "" for text in view.summary.formatted.values())

    def test_titles_and_roles(self, primary_component, lining_component, default_params):
        state = EngineState(
            components=(primary_component, lining_component, lining_component),
            params=default_params,
        )
        view = pe.get_derived_view(state)
        assert [c.title for c in view.components] == [
            "Komponen Utama",
            "Tambahan Kain 1",
            "Tambahan Kain 2",
        ]
        assert view.components[0].role is ComponentRole.PRIMARY
        assert view.components[2].role is ComponentRole.ADDITIONAL
        assert [c.position for c in view.components] == [0, 1, 2]

    def test_yard_meters_formatted(self, lining_component, default_params):
        figures = pe.component_figures(1, lining_component, 1)
        assert figures.meters == pytest.approx(5.5)
        assert figures.formatted["meters"] == "5,50"
        assert figures.unit is Unit.YARD

    def test_formatted_params(self, reference_state):
        view = pe.get_derived_view(reference_state)
        assert view.formatted_params == {
            "rnd_cost": "125.000",
            "quantity": "100",
            "markup_percent": "2,00",
        }

    def test_view_does_not_mutate_state(self, reference_state):
        snapshot = replace(
            reference_state,
            components=tuple(replace(c) for c in reference_state.components),
            params=replace(reference_state.params),
        )
        assert snapshot is not reference_state
        pe.get_derived_view(reference_state)
        pe.get_derived_view(reference_state)
        assert reference_state == snapshot
        assert reference_state.components[0].quantity == 10.0
        assert reference_state.params.rnd_cost == 125_000.0

    def test_half_rupiah_fabric_cost_rounds_up(self):
        """0.5 m × 24 689 = 12 344.5 → displayed as 12.345."""
        component = FabricComponent(quantity=0.5, price_per_meter=24_689.0, role=ComponentRole.PRIMARY)
        figures = pe.component_figures(0, component)
        assert figures.fabric_cost == 12_344.5
        assert figures.formatted["fabric_cost"] == "12.345"
        assert figures.formatted["quantity"] == "0,50"
