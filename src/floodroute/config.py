"""Runtime settings read from the environment (and an optional .env file)."""

import logging
import os
from pathlib import Path
from typing import Literal

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_SNAP_TOLERANCE_KM = 0.05

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Settings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    roads_path: Path | None = None
    flood_zones_path: Path | None = None
    snap_tolerance_km: float = Field(DEFAULT_SNAP_TOLERANCE_KM, gt=0)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    host: str = "0.0.0.0"
    port: int = Field(8000, ge=1, le=65535)


def load_settings() -> Settings:
    """Build ``Settings`` from ``FLOODROUTE_*`` environment variables.

    A .env file in the working directory (or a parent) fills in unset variables.
    """
    load_dotenv(find_dotenv(usecwd=True))

    values = {
        "roads_path": os.getenv("FLOODROUTE_ROADS"),
        "flood_zones_path": os.getenv("FLOODROUTE_FLOOD_ZONES"),
        "snap_tolerance_km": os.getenv("FLOODROUTE_SNAP_TOLERANCE_KM"),
        "log_level": os.getenv("FLOODROUTE_LOG_LEVEL", "").upper() or None,
        "host": os.getenv("FLOODROUTE_HOST"),
        "port": os.getenv("FLOODROUTE_PORT"),
    }
    return Settings(**{k: v for k, v in values.items() if v})


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
