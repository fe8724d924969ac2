"""
Calculator configuration - single source of truth for pricing constants,
display precision, and env-driven defaults.

Import from here in services and routes rather than hardcoding values.
"""
from __future__ import annotations

import logging
import os

logger = logging.getLogger("garment-calc.config")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Invalid value for {name}: {raw!r} - using default {default}")
        return default
    if value < 0:
        logger.warning(f"Negative value for {name}: {raw!r} - using default {default}")
        return default
    return value


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Invalid value for {name}: {raw!r} - using default {default}")
        return default
    return value if value > 0 else default


# ── Fixed domain constants ────────────────────────────────────────────────────

# 1 yard is priced as 1.1 meter of fabric
YARD_TO_METER: float = 1.1

# Flat tax rate applied on (HPP + R&D allocation)
TAX_RATE: float = 0.10


# ── Pricing parameter defaults (overridable per deployment) ──────────────────

DEFAULT_RND_COST: float = _env_float("CALC_DEFAULT_RND_COST", 125_000.0)
DEFAULT_PRODUCTION_QUANTITY: float = _env_float("CALC_DEFAULT_QUANTITY", 100.0)
DEFAULT_MARKUP_PCT: float = _env_float("CALC_DEFAULT_MARKUP_PCT", 2.0)


# ── Display precision (fractional digits per figure) ─────────────────────────

COMPONENT_DISPLAY_DIGITS: dict[str, int] = {
    "quantity":        2,
    "price_per_meter": 0,
    "shipping_cost":   0,
    "sewing_cost":     0,
    "meters":          2,
    "fabric_cost":     0,
    "subtotal":        0,
}

SUMMARY_DISPLAY_DIGITS: dict[str, int] = {
    "total_cost":      0,
    "rnd_allocation":  0,
    "markup":          0,
    "tax":             0,
    "final_price":     0,
    "hpp_plus_markup": 0,
}

PARAMETER_DISPLAY_DIGITS: dict[str, int] = {
    "rnd_cost":       0,
    "quantity":       0,
    "markup_percent": 2,
}


# ── Section titles ────────────────────────────────────────────────────────────

PRIMARY_TITLE: str = "Komponen Utama"
ADDITIONAL_TITLE_TEMPLATE: str = "Tambahan Kain {n}"


# ── Service settings ──────────────────────────────────────────────────────────

APP_VERSION: str = "1.0.0"

MAX_SESSIONS: int = _env_int("CALC_MAX_SESSIONS", 1000)

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
LOG_JSON: bool = os.getenv("LOG_FORMAT", "json").lower() != "text"

_cors_default = "http://localhost:3000,http://localhost:5173"
CORS_ORIGINS: list[str] = [
    o.strip() for o in os.getenv("CORS_ORIGINS", _cors_default).split(",") if o.strip()
]
