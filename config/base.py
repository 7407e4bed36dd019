"""Settings shared by every environment; environment modules override."""

import os


def _flag(name: str, default: str) -> bool:
    return bool(int(os.getenv(name, default)))


DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "campus_attendance"),
    "connect_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "10")),
}

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_JSON = _flag("LOG_JSON", "0")

# Seconds an assembled dashboard payload is reused; 0 disables the cache.
ANALYTICS_CACHE_SECONDS = float(os.getenv("ANALYTICS_CACHE_SECONDS", "300"))
PATTERN_DEFAULT_DAYS = int(os.getenv("PATTERN_DEFAULT_DAYS", "30"))
