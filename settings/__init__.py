"""Application settings."""

import os
from pathlib import Path

from settings.units import parse_duration, parse_size

# Cache
CACHE_DIR = Path(os.getenv("CACHE_DIR", "cache"))
MAX_CACHE_SIZE = parse_size(os.getenv("MAX_CACHE_SIZE", "100MB"))
CACHE_TTL = parse_duration(os.getenv("CACHE_TTL", "30d"))
CLEANUP_INTERVAL = parse_duration(os.getenv("CLEANUP_INTERVAL", "1h"))
MAX_CACHE_AGE = parse_duration(os.getenv("MAX_CACHE_AGE", "30d"))

# Events
EVENTS_DIR = Path(os.getenv("EVENTS_DIR", str(CACHE_DIR / "events")))
EVENT_MAX_AGE = parse_duration(os.getenv("EVENT_MAX_AGE", "30d"))
EVENT_CLEANUP_INTERVAL = parse_duration(os.getenv("EVENT_CLEANUP_INTERVAL", "1h"))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_DIR = Path(os.getenv("LOG_DIR", "logs"))
LOG_ROTATION = os.getenv("LOG_ROTATION", "10 MB")
LOG_RETENTION = os.getenv("LOG_RETENTION", "14 days")

# Catalog API
BGG_API_URL = os.getenv("BGG_API_URL", "https://boardgamegeek.com/xmlapi2")
BGG_API_TOKEN = os.getenv("BGG_API_TOKEN")
BGG_TIMEOUT = int(os.getenv("BGG_TIMEOUT", "60"))
BGG_RATE_LIMIT_DELAY = float(os.getenv("BGG_RATE_LIMIT_DELAY", "5.0"))
BGG_BATCH_SIZE = int(os.getenv("BGG_BATCH_SIZE", "20"))
