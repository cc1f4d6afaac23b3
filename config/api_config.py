"""
API endpoint, retry, and test-run configuration for the restful-api.dev harness.

This is the AUTHORITATIVE source for harness configuration.
src/api_client/config.py imports from here; do not maintain parallel copies.

ENVIRONMENT VARIABLES (all optional):
    RESTFUL_API_BASE_URL     HTTPS origin of the object API
    RESTFUL_API_TIMEOUT      per-attempt timeout in seconds
    RESTFUL_API_MAX_RETRIES  total attempts allowed per call
    RESTFUL_API_RETRY_DELAY  base unit (seconds) for linear backoff
    RESTFUL_API_SEED         seed for reproducible test data
    RESTFUL_API_LIVE         set to "1" to run the live suite
"""

from __future__ import annotations

import os

# ---------------------------------------------------------------------------
# Remote API
# ---------------------------------------------------------------------------

BASE_URL: str = os.getenv("RESTFUL_API_BASE_URL", "https://api.restful-api.dev")
OBJECTS_PATH: str = "/objects"

# Pre-seeded read-only objects on the public API; PATCH on these is refused.
MOCK_OBJECT_IDS: list[str] = [str(i) for i in range(1, 14)]

# ---------------------------------------------------------------------------
# Transport and retry
# ---------------------------------------------------------------------------

REQUEST_TIMEOUT_SECONDS: float = float(os.getenv("RESTFUL_API_TIMEOUT", "30"))
MAX_RETRIES: int = int(os.getenv("RESTFUL_API_MAX_RETRIES", "3"))
RETRY_DELAY_SECONDS: float = float(os.getenv("RESTFUL_API_RETRY_DELAY", "1.0"))

# ---------------------------------------------------------------------------
# Test run
# ---------------------------------------------------------------------------

DATA_SEED: int = int(os.getenv("RESTFUL_API_SEED", "42"))
LIVE_TESTS_ENABLED: bool = os.getenv("RESTFUL_API_LIVE", "") == "1"

RESPONSE_TIME_LIMIT_MS: int = 2000
LARGE_PAYLOAD_TIME_LIMIT_MS: int = 3000
