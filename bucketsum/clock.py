from datetime import datetime
from functools import total_ordering
import pytz

from .buckets import RuleFor
from .errors import InvalidTimestamp

TIME_FORMATS = ["%Y-%m-%dT%H:%M:%S%z", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%dT%H:%M%z", "%Y-%m-%dT%H:%M", "%Y-%m-%d"]

def ResolveTimeZone(timeZone):
    """ Accepts a pytz zone or its name. Raises pytz.UnknownTimeZoneError. """
    if isinstance(timeZone, str):
        return pytz.timezone(timeZone)
    return timeZone

def tryParseDatetime(date_string: str) -> datetime:
    for format in TIME_FORMATS:
        try:
            return datetime.strptime(date_string, format)
        except ValueError:
            pass
    raise InvalidTimestamp(date_string)

@total_ordering
class CalendarTime:
    """ An instant seen through the calendar of one time zone.

    Holds the naive local wall-clock time. Every bucket computation works on
    the wall clock, so a day is midnight to midnight local time even when
    daylight saving makes it 23 or 25 hours long.
    """

    __slots__ = ("Wall", "TimeZone")

    def __init__(self, wall: datetime, timeZone=pytz.utc):
        if wall.tzinfo is not None:
            raise ValueError("CalendarTime wall time must be naive")
        self.Wall = wall
        self.TimeZone = ResolveTimeZone(timeZone)

    @classmethod
    def FromValue(cls, value, timeZone=pytz.utc) -> "CalendarTime":
        """ Build from a CalendarTime, datetime, epoch seconds, or string.

        Aware datetimes (and strings carrying an offset) are converted into
        timeZone. Naive ones are taken as wall-clock time in timeZone already.
        """
        timeZone = ResolveTimeZone(timeZone)
        if isinstance(value, CalendarTime):
            if value.TimeZone is timeZone:
                return value
            return cls.FromValue(value.Aware(), timeZone)
        if isinstance(value, str):
            value = tryParseDatetime(value)
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            value = datetime.fromtimestamp(value, pytz.utc)
        elif not isinstance(value, datetime):
            raise InvalidTimestamp(value)

        if value.tzinfo is not None:
            value = timeZone.normalize(value.astimezone(timeZone)).replace(tzinfo=None)
        return cls(value, timeZone)

    # Calendar fields
    def Year(self) -> int:
        return self.Wall.year

    def Month(self) -> int:
        """ 1 through 12 """
        return self.Wall.month

    def Week(self) -> int:
        """ ISO week number, see IsoYear for the year it belongs to """
        return self.Wall.isocalendar()[1]

    def IsoYear(self) -> int:
        return self.Wall.isocalendar()[0]

    def Day(self) -> int:
        return self.Wall.day

    def Hour(self) -> int:
        return self.Wall.hour

    def Minute(self) -> int:
        return self.Wall.minute

    def Second(self) -> int:
        return self.Wall.second

    # Calendar arithmetic
    def _with(self, wall: datetime) -> "CalendarTime":
        return CalendarTime(wall, self.TimeZone)

    def Bucket(self, resolution):
        """ The bucket rule instance holding this time at resolution """
        return RuleFor(resolution)(self.Wall)

    def StartOf(self, resolution) -> "CalendarTime":
        return self._with(self.Bucket(resolution).BucketStartTime())

    def EndOf(self, resolution) -> "CalendarTime":
        """ Last microsecond of the period containing this time """
        return self._with(self.Bucket(resolution).BucketEndTime())

    def NextStart(self, resolution) -> "CalendarTime":
        """ Start of the period after the one containing this time """
        return self._with(self.Bucket(resolution).NextBucketStart())

    def Add(self, count: int, resolution) -> "CalendarTime":
        """ Move count periods, keeping the offset into the period where possible.

        Month and year steps keep the day of month, clamping it to the last
        day of shorter months.
        """
        rule = self.Bucket(resolution)
        return self._with(self.Wall + rule.BucketDuration() * count)

    def IsSame(self, other: "CalendarTime", resolution) -> bool:
        return self.Bucket(resolution).BucketID() == other.Bucket(resolution).BucketID()

    def Diff(self, other: "CalendarTime", resolution) -> int:
        """ Whole periods from other to self, negative when self is earlier """
        if self < other:
            return -other.Diff(self, resolution)
        return self.Bucket(resolution).UnitsBetween(other.Wall, self.Wall)

    def Aware(self) -> datetime:
        """ The wall time localized into TimeZone """
        return self.TimeZone.localize(self.Wall, is_dst=False)

    def Format(self) -> str:
        """ ISO 8601 with the zone's UTC offset, e.g. 2015-01-01T00:00:00+00:00 """
        return self.Aware().isoformat()

    def __eq__(self, other):
        if not isinstance(other, CalendarTime):
            return NotImplemented
        return self.Wall == other.Wall

    def __lt__(self, other):
        if not isinstance(other, CalendarTime):
            return NotImplemented
        return self.Wall < other.Wall

    def __hash__(self):
        return hash(self.Wall)

    def __repr__(self):
        return "CalendarTime({0}, {1})".format(self.Wall.isoformat(), self.TimeZone.zone)

    def __str__(self):
        return self.Format()
