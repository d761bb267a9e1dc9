from datetime import datetime, timedelta
from monthdelta import monthdelta, monthmod

from .resolution import Resolution, ParseResolution

class BucketRule:
    """ Defines a rule for bucketing by calendar windows, e.g. minute, day, year.

    All times handled here are naive local wall-clock datetimes. Time zone
    handling belongs to CalendarTime.
    """

    Grain = None
    BucketFormat = None

    def __init__(self, eventTime: datetime):
        self.EventTime = eventTime

    def BucketID(self) -> str:
        """ Key used in underlying storage, unique per calendar window """
        return self.EventTime.strftime(self.BucketFormat)

    def BucketStartTime(self) -> datetime:
        # Subclass must implement
        raise NotImplementedError

    def BucketDuration(self):
        """ timedelta, or monthdelta for calendar months and years """
        # Subclass must implement
        raise NotImplementedError

    def ShiftStart(self, count: int) -> datetime:
        """ Start of the bucket count windows away from this one """
        return self.BucketStartTime() + self.BucketDuration() * count

    def NextBucketStart(self) -> datetime:
        return self.ShiftStart(1)

    def BucketEndTime(self) -> datetime:
        """ Bucket end time, INCLUSIVE. Last microsecond of the window. """
        return self.NextBucketStart() - timedelta(microseconds=1)

    def Contains(self, time: datetime) -> bool:
        return self.BucketStartTime() <= time < self.NextBucketStart()

    def UnitsBetween(self, start: datetime, end: datetime) -> int:
        """ Whole windows of this size from start to end, end at or after start """
        # Subclass must implement
        raise NotImplementedError

    def UnitsUntil(self, end: datetime) -> int:
        """ Whole windows between this bucket's start and end """
        return self.UnitsBetween(self.BucketStartTime(), end)

class StartViaFormatBucket():
    def BucketStartTime(self) -> datetime:
        """ For rules whose format names the start exactly (everything but Week) """
        return datetime.strptime(self.BucketID(), self.BucketFormat)

class FixedDurationBucket():
    def UnitsBetween(self, start: datetime, end: datetime) -> int:
        return (end - start) // self.BucketDuration()

class MonthlyDurationBucket():
    MonthsInBucket = 1

    def BucketDuration(self):
        return monthdelta(self.MonthsInBucket)

    def UnitsBetween(self, start: datetime, end: datetime) -> int:
        months, leftover = monthmod(start, end)
        count = months.months
        # monthmod ignores the time of day
        if leftover < timedelta(0):
            count -= 1
        return count // self.MonthsInBucket

class SecondBucket(StartViaFormatBucket, FixedDurationBucket, BucketRule):
    Grain = Resolution.SECOND
    BucketFormat = "%Y-%m-%dT%H:%M:%S"

    def BucketDuration(self) -> timedelta:
        return timedelta(seconds=1)

class MinuteBucket(StartViaFormatBucket, FixedDurationBucket, BucketRule):
    Grain = Resolution.MINUTE
    BucketFormat = "%Y-%m-%dT%H:%M"

    def BucketDuration(self) -> timedelta:
        return timedelta(minutes=1)

class HourBucket(StartViaFormatBucket, FixedDurationBucket, BucketRule):
    Grain = Resolution.HOUR
    BucketFormat = "%Y-%m-%dT%H"

    def BucketDuration(self) -> timedelta:
        return timedelta(hours=1)

class DayBucket(StartViaFormatBucket, FixedDurationBucket, BucketRule):
    Grain = Resolution.DAY
    BucketFormat = "%Y-%m-%d"

    def BucketDuration(self) -> timedelta:
        return timedelta(days=1)

class WeekBucket(FixedDurationBucket, BucketRule):
    """ ISO weeks: Monday 00:00 through Sunday 23:59:59 """
    Grain = Resolution.WEEK

    def BucketID(self) -> str:
        # strftime %G/%V is platform dependent, isocalendar is not
        isoYear, isoWeek, _ = self.EventTime.isocalendar()
        return "{0:04d}-W{1:02d}".format(isoYear, isoWeek)

    def BucketStartTime(self) -> datetime:
        day = self.EventTime.replace(hour=0, minute=0, second=0, microsecond=0)
        return day - timedelta(days=self.EventTime.weekday())

    def BucketDuration(self) -> timedelta:
        return timedelta(weeks=1)

class MonthBucket(StartViaFormatBucket, MonthlyDurationBucket, BucketRule):
    Grain = Resolution.MONTH
    BucketFormat = "%Y-%m"

class YearBucket(StartViaFormatBucket, MonthlyDurationBucket, BucketRule):
    """ Year is 12 months, not 365 days, since years are irregularly sized """
    Grain = Resolution.YEAR
    BucketFormat = "%Y"
    MonthsInBucket = 12

RULES = {rule.Grain: rule for rule in
         (SecondBucket, MinuteBucket, HourBucket, DayBucket, WeekBucket, MonthBucket, YearBucket)}

def RuleFor(resolution) -> type:
    """ Bucket rule class for a Resolution or resolution name """
    return RULES[ParseResolution(resolution)]
