""" Counters bucketed by calendar period, with range and total queries. """

from .clock import CalendarTime
from .config import Settings, LoadSettings
from .errors import (
    BucketSumError,
    DecompositionNonTermination,
    FetchLimitExceeded,
    InvalidResolution,
    InvalidTimestamp,
    StoreFailure,
)
from .resolution import Resolution, LADDER
from .strategy import PlanEntry
from .timecounter import TimeCounter

__all__ = [
    "CalendarTime",
    "Settings",
    "LoadSettings",
    "BucketSumError",
    "DecompositionNonTermination",
    "FetchLimitExceeded",
    "InvalidResolution",
    "InvalidTimestamp",
    "StoreFailure",
    "Resolution",
    "LADDER",
    "PlanEntry",
    "TimeCounter",
]
