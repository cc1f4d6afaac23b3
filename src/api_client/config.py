"""
Harness constants and project path locations.

Values come from config/api_config.py (the authoritative source); this module
only adds the filesystem location of timing reports.
"""

from pathlib import Path

from config.api_config import (  # noqa: F401  (re-exported)
    BASE_URL,
    DATA_SEED,
    LARGE_PAYLOAD_TIME_LIMIT_MS,
    LIVE_TESTS_ENABLED,
    MAX_RETRIES,
    MOCK_OBJECT_IDS,
    OBJECTS_PATH,
    REQUEST_TIMEOUT_SECONDS,
    RESPONSE_TIME_LIMIT_MS,
    RETRY_DELAY_SECONDS,
)

# ---------------------------------------------------------------------------
# Project paths
# ---------------------------------------------------------------------------

# Resolve from this file: src/api_client/config.py → src/api_client → src → root
PROJECT_ROOT = Path(__file__).resolve().parents[2]

RESULTS_DIR = PROJECT_ROOT / "results"

TIMING_REPORT_PATH = RESULTS_DIR / "response_times.csv"

# Content type sent with every request body
JSON_CONTENT_TYPE = "application/json"
