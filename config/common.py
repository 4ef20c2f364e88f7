"""Settings shared by every environment; each env module star-imports this and overrides."""

import os


def env_bool(name: str, default: str = "0") -> bool:
    return bool(int(os.getenv(name, default)))


def env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": env_int("DB_PORT", 3306),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "emp_hr"),
}

# Shift label used when an employee has none; must exist in the shifts table.
DEFAULT_SHIFT = os.getenv("DEFAULT_SHIFT", "General")

LATE_THRESHOLD_MINUTES = env_int("LATE_THRESHOLD_MINUTES", 6)
HALF_DAY_THRESHOLD_MINUTES = env_int("HALF_DAY_THRESHOLD_MINUTES", 240)
HALF_DAY_MAX_MINUTES = env_int("HALF_DAY_MAX_MINUTES", 270)

JWT_EXPIRES_MINUTES = env_int("JWT_EXPIRES_MINUTES", 12 * 60)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
