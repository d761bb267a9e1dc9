from enum import Enum

from .errors import InvalidResolution


class Resolution(Enum):
    """ Calendar granularities a counter can be stored at """
    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    def LadderIndex(self) -> int:
        """ Position on the ladder, 0 is the coarsest (year) """
        return LADDER.index(self)

    def IsCoarserThan(self, other: "Resolution") -> bool:
        return self.LadderIndex() < other.LadderIndex()

    def AlignsWith(self, finer: "Resolution") -> bool:
        """ True when every bucket boundary of self is also a boundary of finer """
        if self is finer:
            return True
        if not self.IsCoarserThan(finer):
            return False
        # Weeks straddle months and years
        return finer is not Resolution.WEEK


# Order matters! Coarsest first. Decomposition prefers earlier entries.
LADDER = (
    Resolution.YEAR,
    Resolution.MONTH,
    Resolution.WEEK,
    Resolution.DAY,
    Resolution.HOUR,
    Resolution.MINUTE,
    Resolution.SECOND,
)


def ParseResolution(token) -> Resolution:
    """ Accepts a Resolution or its name, e.g. "day" """
    if isinstance(token, Resolution):
        return token
    if isinstance(token, str):
        try:
            return Resolution(token.strip().lower())
        except ValueError:
            pass
    raise InvalidResolution(token)


def LadderDownTo(lowest: Resolution):
    """ Resolutions from year down to lowest, inclusive """
    return LADDER[:ParseResolution(lowest).LadderIndex() + 1]
