"""
Garment Cost Calculator API v1.0
FastAPI backend for fabric-component costing: HPP, R&D allocation, markup,
tax and final price, with id-ID number parsing and formatting.
"""
import logging
import time
from contextlib import asynccontextmanager

from dotenv import load_dotenv

# Load .env before app.config reads the environment
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app import config
from app.api.calculator_routes import router as calculator_router
from app.services.logging_config import setup_logging
from app.services.middleware import RequestTimingMiddleware, SecurityHeadersMiddleware
from app.services.session_registry import registry

setup_logging(level=config.LOG_LEVEL, json_output=config.LOG_JSON)
logger = logging.getLogger("garment-calc")

# Record process start time for uptime calculation
_PROCESS_START = time.monotonic()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        f"Calculator ready (max_sessions={config.MAX_SESSIONS}, "
        f"rnd_cost={config.DEFAULT_RND_COST}, quantity={config.DEFAULT_PRODUCTION_QUANTITY}, "
        f"markup_pct={config.DEFAULT_MARKUP_PCT})"
    )
    yield
    registry.clear()
    logger.info("Calculator sessions cleared on shutdown.")


app = FastAPI(
    title="Garment Cost Calculator API",
    version=config.APP_VERSION,
    description="Fabric costing, HPP, R&D allocation, markup, tax and final price",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Accept", "X-Requested-With"],
)
app.add_middleware(SecurityHeadersMiddleware)
# Request timing + X-Request-ID must be outermost so it wraps all other middleware
app.add_middleware(RequestTimingMiddleware)

app.include_router(calculator_router)


@app.get("/health")
async def health_check():
    return {
        "status": "active",
        "version": config.APP_VERSION,
        "uptime_seconds": round(time.monotonic() - _PROCESS_START, 1),
        "active_sessions": len(registry),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
