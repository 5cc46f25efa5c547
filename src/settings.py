"""Configuration values sourced from environment variables."""

import os
from typing import Final

LOG_LEVEL: Final[str] = os.getenv(key="LOG_LEVEL", default="INFO")
LOGGER_NAME: Final[str] = os.getenv(key="LOGGER_NAME", default="hbase-manager")
LOG_COLOUR_ENABLED: Final[bool] = bool(
    os.getenv(key="LOG_COLOUR_ENABLED", default="True").upper() == "TRUE"
)

# Fallback REST gateway when the schema document's connection block has no rest_url.
HBASE_REST_URL: Final[str] = os.getenv(key="HBASE_REST_URL", default="http://localhost:8080")
HBASE_REST_TIMEOUT_SECONDS: Final[float] = float(
    os.getenv(key="HBASE_REST_TIMEOUT_SECONDS", default="30")
)
