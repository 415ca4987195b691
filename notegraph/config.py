"""
Runtime settings for the notegraph server.

Environment variables are the single source of truth. `.env` is loaded
first, then `.env.local` is overlaid without overriding values that are
already set.
"""
from __future__ import annotations
from typing import List, Optional
import os
import sys

from dotenv import load_dotenv
from loguru import logger
from pydantic import BaseModel, Field

load_dotenv()
load_dotenv(dotenv_path=os.path.join(os.getcwd(), ".env.local"), override=False)


class Settings(BaseModel):
    database_url: str = "sqlite+aiosqlite:///./notegraph.db"
    # Frame clock for the layout loop
    fps: float = Field(default=60.0, gt=0)
    # Initial viewport until the client reports its size
    width: float = Field(default=600.0, ge=0)
    height: float = Field(default=420.0, ge=0)
    layout_seed: Optional[int] = None
    log_level: str = "INFO"
    cors_origins: List[str] = Field(default_factory=lambda: [
        "http://127.0.0.1:5173",
        "http://localhost:5173",
    ])


def _split_csv(s: str) -> List[str]:
    return [x.strip() for x in s.split(",") if x.strip()]


def get_settings() -> Settings:
    seed = os.getenv("GRAPH_LAYOUT_SEED", "").strip()
    origins = os.getenv("CORS_ORIGINS", "")
    data = {
        "database_url": os.getenv("DATABASE_URL", Settings.model_fields["database_url"].default),
        "fps": float(os.getenv("GRAPH_FPS", "60")),
        "width": float(os.getenv("GRAPH_WIDTH", "600")),
        "height": float(os.getenv("GRAPH_HEIGHT", "420")),
        "layout_seed": int(seed) if seed else None,
        "log_level": os.getenv("LOG_LEVEL", "INFO").upper(),
    }
    if origins:
        data["cors_origins"] = _split_csv(origins)
    return Settings(**data)


def configure_logging(level: str = "INFO") -> None:
    """Route loguru output to stderr at the given level.

    stdout stays clean for the stdio tool server.
    """
    logger.remove()
    logger.add(sys.stderr, level=level)
