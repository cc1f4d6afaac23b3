"""
src/api_client: resilient client and PATCH test harness for restful-api.dev.

Module layout
-------------
config.py        constants from config/api_config.py, project paths
errors.py        InvalidArgumentError, TransportFailure, DecodeFailure,
                 RetryExhaustedError
models.py        Resource, UpdateRequest, ErrorPayload, ResponseEnvelope
parser.py        JSON decode guard, field matching, error-body parsing
retry.py         failure classification, linear backoff, retry state machine
logger.py        ApiLogger capability and NullLogger/StdlibLogger/RunLogger
client.py        ResilientApiClient
helpers.py       assertion and formatting helpers
data_builder.py  seeded test-data construction
scenarios.py     PATCH scenario catalog and batch runner
performance.py   response-time summaries and reports

Public interface
----------------
Issue calls:
    client = ResilientApiClient(logger=RunLogger())
    envelope = client.patch("6", UpdateRequest(name="Updated Name"))

Run the scenario catalog:
    process_scenarios_batch(client, malformed_json_scenarios(), factory)

Summarize response times:
    summarize_response_times(build_timing_frame(records))
"""

from .client import ResilientApiClient
from .data_builder import DataBuilder
from .errors import (
    ApiClientError,
    DecodeFailure,
    InvalidArgumentError,
    RetryExhaustedError,
    TransportFailure,
)
from .logger import ApiLogger, NullLogger, RunLogger, StdlibLogger, setup_logging
from .models import ErrorPayload, Resource, ResponseEnvelope, UpdateRequest
from .performance import build_timing_frame, summarize_response_times, timing_record
from .retry import AttemptOutcome, FailureKind, RetryPolicy, RetryState, linear_backoff
from .scenarios import PatchScenario, delete_objects, process_scenarios_batch, run_scenario

__all__ = [
    # Client
    "ResilientApiClient",
    "RetryPolicy",
    "RetryState",
    "AttemptOutcome",
    "FailureKind",
    "linear_backoff",
    # Models
    "Resource",
    "UpdateRequest",
    "ErrorPayload",
    "ResponseEnvelope",
    # Errors
    "ApiClientError",
    "InvalidArgumentError",
    "TransportFailure",
    "DecodeFailure",
    "RetryExhaustedError",
    # Logging
    "ApiLogger",
    "NullLogger",
    "StdlibLogger",
    "RunLogger",
    "setup_logging",
    # Test support
    "DataBuilder",
    "PatchScenario",
    "run_scenario",
    "process_scenarios_batch",
    "delete_objects",
    "timing_record",
    "build_timing_frame",
    "summarize_response_times",
]
