"""Report window and threshold configuration."""

from dataclasses import dataclass, fields
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dateutil.relativedelta import relativedelta

from .reading import parse_timestamp

DEFAULT_LOOKBACK_DAYS = 30
DEFAULT_MAX_RATE_PER_DAY = 24.0
DEFAULT_LONG_GAP_DAYS = 60.0
DEFAULT_NEAR_DUE_THRESHOLD = 100.0
DEFAULT_FAR_FUTURE_THRESHOLD = 1000.0

# camelCase keys accepted in config files
_CONFIG_KEYS = {
    "lookbackDays": "lookback_days",
    "resetTolerance": "reset_tolerance",
    "maxRatePerDay": "max_rate_per_day",
    "longGapDays": "long_gap_days",
    "minElapsedDays": "min_elapsed_days",
    "corridorFactor": "corridor_factor",
    "nearDueThreshold": "near_due_threshold",
    "farFutureThreshold": "far_future_threshold",
    "maxWorkers": "max_workers",
    "collaboratorTimeout": "collaborator_timeout",
}


@dataclass(frozen=True)
class ReportConfig:
    """Reporting window `[window_start, window_end)` and engine thresholds."""

    window_start: datetime
    window_end: datetime
    lookback_days: int = DEFAULT_LOOKBACK_DAYS
    reset_tolerance: float = 0.0
    max_rate_per_day: float = DEFAULT_MAX_RATE_PER_DAY
    long_gap_days: float = DEFAULT_LONG_GAP_DAYS
    min_elapsed_days: float = 1 / 24
    corridor_factor: float = 2.0
    near_due_threshold: float = DEFAULT_NEAR_DUE_THRESHOLD
    far_future_threshold: float = DEFAULT_FAR_FUTURE_THRESHOLD
    max_workers: Optional[int] = None
    collaborator_timeout: float = 30.0

    def __post_init__(self):
        if self.window_end <= self.window_start:
            raise ValueError(
                f"Report window end {self.window_end} must be after start {self.window_start}"
            )
        if self.lookback_days < 0:
            raise ValueError("lookback_days cannot be negative")

    @property
    def extended_start(self) -> datetime:
        """Start of the reading lookback window."""
        return self.window_start - timedelta(days=self.lookback_days)

    @property
    def date_from(self) -> str:
        return self.window_start.date().isoformat()

    @property
    def date_to(self) -> str:
        """Last calendar day inside the window (inclusive)."""
        return (self.window_end - timedelta(microseconds=1)).date().isoformat()

    @classmethod
    def for_dates(
        cls, date_from: Union[str, date], date_to: Union[str, date], **overrides: Any
    ) -> "ReportConfig":
        """
        Build a config from inclusive calendar dates.

        The window runs from `date_from` at midnight up to, but excluding,
        midnight after `date_to`.
        """
        start = parse_timestamp(date_from)
        end = parse_timestamp(date_to)
        if start is None or end is None:
            raise ValueError(f"Invalid report dates: {date_from!r} to {date_to!r}")
        start = datetime(start.year, start.month, start.day)
        end = datetime(end.year, end.month, end.day) + relativedelta(days=1)
        return cls(window_start=start, window_end=end, **overrides)


def parse_overrides(data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Translate camelCase config keys into ReportConfig field names."""
    if not data:
        return {}
    valid = {f.name for f in fields(ReportConfig)}
    overrides = {}
    for key, value in data.items():
        name = _CONFIG_KEYS.get(key, key)
        if name not in valid or name in ("window_start", "window_end"):
            raise ValueError(f"Unknown config key: {key}")
        overrides[name] = value
    return overrides


def load_config(filename: Union[str, Path]) -> Dict[str, Any]:
    """Load threshold overrides from a YAML file."""
    with open(filename, "r") as fp:
        data = yaml.safe_load(fp) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {filename} must contain a mapping")
    return parse_overrides(data)
