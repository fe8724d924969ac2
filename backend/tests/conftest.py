"""
conftest.py - Shared pytest fixtures for the garment calculator test suite.

No database or external service fixtures are defined here. Engine tests are
pure unit tests; route tests drive the FastAPI app in-process with TestClient.

Import-path bootstrapping:
    The ``backend/`` directory is inserted into sys.path so that all
    ``app.*`` imports resolve correctly regardless of where pytest is invoked.
"""

import sys
import os
import pytest

# ---------------------------------------------------------------------------
# Ensure ``backend/`` is on the import path before any app imports occur.
# ---------------------------------------------------------------------------
_BACKEND_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)


# ---------------------------------------------------------------------------
# Parameter fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def default_params():
    """
    Pricing parameters with the documented defaults, set explicitly so the
    tests do not depend on CALC_DEFAULT_* env vars.

      rnd_cost = 125 000, quantity = 100, markup = 2 %
    """
    from app.services.component_store import PricingParameters
    return PricingParameters(rnd_cost=125_000.0, quantity=100.0, markup_percent=2.0)


# ---------------------------------------------------------------------------
# Component fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def primary_component():
    """
    The reference primary component:
      10 m × 50 000/m = 500 000 fabric, + 20 000 shipping + 30 000 sewing
      → subtotal 550 000.
    """
    from app.services.component_store import ComponentRole, FabricComponent, Unit
    return FabricComponent(
        quantity=10.0,
        unit=Unit.METER,
        price_per_meter=50_000.0,
        shipping_cost=20_000.0,
        sewing_cost=30_000.0,
        role=ComponentRole.PRIMARY,
    )


@pytest.fixture
def reference_state(primary_component, default_params):
    """EngineState holding only the reference primary component."""
    from app.services.component_store import EngineState
    return EngineState(components=(primary_component,), params=default_params)


@pytest.fixture
def lining_component():
    """
    An additional fabric measured in yards:
      5 yd → 5.5 m × 20 000/m = 110 000 fabric, + 5 000 shipping + 15 000 sewing
      → subtotal 130 000.
    """
    from app.services.component_store import ComponentRole, FabricComponent, Unit
    return FabricComponent(
        quantity=5.0,
        unit=Unit.YARD,
        price_per_meter=20_000.0,
        shipping_cost=5_000.0,
        sewing_cost=15_000.0,
        role=ComponentRole.ADDITIONAL,
    )


# ---------------------------------------------------------------------------
# API fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def client():
    """TestClient over the FastAPI app with an empty session registry."""
    from fastapi.testclient import TestClient
    from app.main import app
    from app.services.session_registry import registry

    registry.clear()
    with TestClient(app) as test_client:
        yield test_client
    registry.clear()
