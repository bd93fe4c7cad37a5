"""Environment-driven settings for the Sularchi waste reporter."""

from __future__ import annotations

import os
from typing import Optional


def _optional_float(name: str) -> Optional[float]:
    value = os.getenv(name, "").strip()
    if not value:
        return None
    return float(value)


GOOGLE_VISION_API_KEY = os.getenv("GOOGLE_VISION_API_KEY", "")
VISION_API_URL = os.getenv("VISION_API_URL", "https://vision.googleapis.com/v1/images:annotate")
# Unset means the transport default (no deadline).
VISION_API_TIMEOUT = _optional_float("VISION_API_TIMEOUT")
VISION_MAX_IMAGE_SIDE = int(os.getenv("VISION_MAX_IMAGE_SIDE", "1600"))
VISION_JPEG_QUALITY = int(os.getenv("VISION_JPEG_QUALITY", "70"))
VISION_MAX_LABELS = 15
VISION_MAX_OBJECTS = 10

HEURISTIC_DELAY_SECONDS = float(os.getenv("HEURISTIC_DELAY_SECONDS", "1.0"))

DATABASE_PATH = os.getenv("SULARCHI_DB_PATH", "sularchi.db")
IMAGE_DIR = os.getenv("SULARCHI_IMAGE_DIR", "captures")
STORAGE_NAMESPACE = "@sularchi"

DEFAULT_LATITUDE = _optional_float("SULARCHI_DEFAULT_LATITUDE")
DEFAULT_LONGITUDE = _optional_float("SULARCHI_DEFAULT_LONGITUDE")
REVERSE_GEOCODE = os.getenv("SULARCHI_REVERSE_GEOCODE", "0").lower() in {"1", "true", "yes"}
GEOCODER_USER_AGENT = os.getenv("SULARCHI_GEOCODER_USER_AGENT", "sularchi")

LOG_LEVEL = os.getenv("SULARCHI_LOG_LEVEL", "INFO").upper()
