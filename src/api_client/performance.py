"""
Response-time records, per-method summaries, and CSV timing reports.

Callers collect one record per envelope with timing_record; the functions
below turn those records into pandas DataFrames for assertions and reports.
"""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from .config import RESPONSE_TIME_LIMIT_MS, TIMING_REPORT_PATH
from .models import ResponseEnvelope

TIMING_COLUMNS: list[str] = [
    "label",
    "method",
    "status_code",
    "is_successful",
    "duration_ms",
    "attempts",
]

SUMMARY_COLUMNS: list[str] = [
    "method",
    "n_calls",
    "successes",
    "success_rate",
    "mean_ms",
    "p95_ms",
    "max_ms",
]


def timing_record(label: str, method: str, envelope: ResponseEnvelope) -> dict:
    """Flatten one envelope into a timing row."""
    return {
        "label": label,
        "method": method.upper(),
        "status_code": envelope.status_code,
        "is_successful": envelope.is_successful,
        "duration_ms": envelope.duration_ms,
        "attempts": envelope.attempts,
    }


def build_timing_frame(records: list[dict]) -> pd.DataFrame:
    """DataFrame with exactly TIMING_COLUMNS, empty when there are no records."""
    return pd.DataFrame(records, columns=TIMING_COLUMNS)


def summarize_response_times(timing_df: pd.DataFrame) -> pd.DataFrame:
    """
    Per-method call counts, success rate and latency statistics.

    Rows are sorted by method name so output is deterministic regardless of
    record order.

    Args:
        timing_df: Frame from :func:`build_timing_frame`.

    Returns:
        DataFrame with SUMMARY_COLUMNS, one row per HTTP method.
    """
    if timing_df.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    records: list[dict] = []
    for method in sorted(timing_df["method"].unique()):
        subset = timing_df[timing_df["method"] == method]
        n = len(subset)
        successes = int(subset["is_successful"].astype(bool).sum())
        durations = subset["duration_ms"].astype(float)
        records.append({
            "method": method,
            "n_calls": n,
            "successes": successes,
            "success_rate": round(successes / n, 4),
            "mean_ms": round(float(durations.mean()), 3),
            "p95_ms": round(float(durations.quantile(0.95)), 3),
            "max_ms": round(float(durations.max()), 3),
        })

    return pd.DataFrame(records, columns=SUMMARY_COLUMNS)


def flag_slow_calls(
    timing_df: pd.DataFrame,
    limit_ms: float = RESPONSE_TIME_LIMIT_MS,
) -> pd.DataFrame:
    """Rows whose ``duration_ms`` exceeds ``limit_ms``, slowest first."""
    slow = timing_df[timing_df["duration_ms"].astype(float) > limit_ms]
    return slow.sort_values("duration_ms", ascending=False).reset_index(drop=True)


def save_timing_report(
    timing_df: pd.DataFrame,
    output_path: Path = TIMING_REPORT_PATH,
) -> Path:
    """
    Write the raw timing rows to CSV, creating parent directories.

    Returns:
        The path written.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    timing_df.to_csv(output_path, index=False)
    print(f"Timing report ({len(timing_df)} calls) saved to {output_path}")
    return output_path
