import os
from dataclasses import dataclass, fields
from typing import Optional

from .clock import ResolveTimeZone
from .resolution import Resolution, ParseResolution
from .strategy import DEFAULT_MAX_DEPTH

ENV_PREFIX = "BUCKETSUM_"


@dataclass
class Settings:
    """ Per-TimeCounter configuration.

    FetchLimit: most buckets one GetRange/GetTotal may read, 0 disables the check.
        Protects against lookups like the last twenty years at second resolution.
    TimeZone: pytz zone name whose calendar defines the buckets.
    DefaultResolution: lowest write resolution used when Increment gets no
        resolution or an unknown one. Unset means such calls raise InvalidResolution.
    MaxDecompositionDepth: recursion guard for range decomposition.
    FanoutWorkers: threads issuing one Increment's bucket writes, 1 is sequential.
    """
    FetchLimit: int = 0
    TimeZone: str = "UTC"
    DefaultResolution: Optional[Resolution] = None
    MaxDecompositionDepth: int = DEFAULT_MAX_DEPTH
    FanoutWorkers: int = len(Resolution)

    def __post_init__(self):
        if self.FetchLimit < 0:
            raise ValueError("FetchLimit must be >= 0")
        if self.MaxDecompositionDepth < 1:
            raise ValueError("MaxDecompositionDepth must be >= 1")
        if self.FanoutWorkers < 1:
            raise ValueError("FanoutWorkers must be >= 1")
        if self.DefaultResolution is not None:
            self.DefaultResolution = ParseResolution(self.DefaultResolution)
        # Fail on unknown zones here rather than on the first write
        ResolveTimeZone(self.TimeZone)

    def Zone(self):
        return ResolveTimeZone(self.TimeZone)


# Settings field -> environment variable suffix
ENV_NAMES = {
    "FetchLimit": "FETCH_LIMIT",
    "TimeZone": "TIME_ZONE",
    "DefaultResolution": "DEFAULT_RESOLUTION",
    "MaxDecompositionDepth": "MAX_DEPTH",
    "FanoutWorkers": "FANOUT_WORKERS",
}


def LoadSettings(environ=None, **overrides) -> Settings:
    """ Settings from BUCKETSUM_* environment variables, keyword overrides win """
    if environ is None:
        environ = os.environ
    values = {}
    for f in fields(Settings):
        raw = environ.get(ENV_PREFIX + ENV_NAMES[f.name])
        if raw is None or raw.strip() == "":
            continue
        raw = raw.strip()
        if f.type is int:
            values[f.name] = int(raw)
        else:
            values[f.name] = raw
    values.update(overrides)
    return Settings(**values)
