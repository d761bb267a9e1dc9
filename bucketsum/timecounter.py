""" Time bucketed counters on top of a hash store.

Every increment is written to one bucket per calendar resolution, from year
down to the lowest resolution the caller asks for. Reads can then fetch a
single bucket, a contiguous range of buckets at one resolution, or a total
over any window using the fewest buckets that cover it exactly.
"""

import dataclasses
import logging
import threading
from collections import OrderedDict
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait

from . import strategy
from .clock import CalendarTime
from .config import Settings
from .errors import BucketSumError, FetchLimitExceeded, InvalidResolution, StoreFailure
from .keys import BucketKey, BucketKeyChain
from .resolution import Resolution, ParseResolution
from .stores.base import CounterStore

logger = logging.getLogger(__name__)


class TimeCounter:
    def __init__(self, store: CounterStore, settings: Settings = None, **overrides):
        """ overrides are Settings fields, e.g. TimeCounter(store, FetchLimit=1000) """
        if settings is None:
            settings = Settings(**overrides)
        elif overrides:
            settings = dataclasses.replace(settings, **overrides)
        self.Store = store
        self.Settings = settings
        self.TimeZone = settings.Zone()
        self._executor = None
        self._executorLock = threading.Lock()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.Close()

    def Close(self) -> None:
        """ Stop the fan-out threads. A later Increment starts new ones. """
        with self._executorLock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)

    def _fanout(self) -> ThreadPoolExecutor:
        """ Thread pool shared by every Increment of this counter, created on first use """
        with self._executorLock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.Settings.FanoutWorkers, thread_name_prefix="bucketsum-fanout")
            return self._executor

    def Time(self, value) -> CalendarTime:
        """ Any accepted timestamp value, in this counter's calendar """
        return CalendarTime.FromValue(value, self.TimeZone)

    def BucketKey(self, time, resolution) -> str:
        return BucketKey(self.Time(time), resolution)

    def BucketKeyChain(self, time, lowestResolution) -> list:
        return BucketKeyChain(self.Time(time), lowestResolution)

    def WriteResolution(self, resolution) -> Resolution:
        """ Lowest resolution for a write, falling back to Settings.DefaultResolution """
        try:
            return ParseResolution(resolution)
        except InvalidResolution:
            if self.Settings.DefaultResolution is None:
                raise
            logger.debug("Resolution %r not recognized, writing down to %s",
                         resolution, self.Settings.DefaultResolution.value)
            return self.Settings.DefaultResolution

    def Increment(self, key: str, time, delta: int, resolution=None) -> None:
        """ Add delta to every bucket of key holding time, down to resolution.

        Buckets are written independently. When one write fails the others
        may already be applied and are not rolled back.

        With FanoutWorkers above 1 the writes run on a thread pool owned by
        this counter, call Close (or use the counter as a context manager)
        to stop its threads.
        """
        chain = self.BucketKeyChain(time, self.WriteResolution(resolution))
        if self.Settings.FanoutWorkers <= 1 or len(chain) <= 1:
            for _, field in chain:
                self._storeCall("increment", key, self.Store.Increment, key, field, delta)
            return

        executor = self._fanout()
        futures = [executor.submit(self.Store.Increment, key, field, delta) for _, field in chain]
        done, pending = wait(futures, return_when=FIRST_EXCEPTION)
        failed = [future for future in done if future.exception() is not None]
        if failed:
            for future in pending:
                future.cancel()
            applied = sum(1 for future in done if future.exception() is None)
            logger.warning("Increment of %s failed after %d of %d bucket writes", key, applied, len(chain))
            raise StoreFailure("increment", key) from failed[0].exception()

    def Get(self, key: str, time, resolutions) -> dict:
        """ Bucket values holding time, {resolution name: value or None if never written} """
        if isinstance(resolutions, (str, Resolution)):
            resolutions = [resolutions]
        resolutions = [ParseResolution(resolution) for resolution in resolutions]
        calendarTime = self.Time(time)
        fields = [BucketKey(calendarTime, resolution) for resolution in resolutions]
        values = self._storeCall("read_many", key, self.Store.ReadMany, key, fields)
        return {resolution.value: (None if value is None else int(value))
                for resolution, value in zip(resolutions, values)}

    def GetRange(self, key: str, startTimestamp, endTimestamp, resolution) -> OrderedDict:
        """ Every bucket from start through end at resolution, oldest first.

        Keys are the bucket start times formatted as ISO 8601, values are the
        counters with unwritten buckets as 0.
        """
        resolution = ParseResolution(resolution)
        start = self.Time(startTimestamp)
        end = self.Time(endTimestamp)

        # Normalize the timestamps in case user passes them in reversed order.
        if end < start:
            start, end = end, start

        start = start.StartOf(resolution)
        end = end.EndOf(resolution)
        self.CheckFetchLimit(end.Diff(start, resolution) + 1)

        moments, fields = [], []
        current = start
        while current <= end:
            moments.append(current.Format())
            fields.append(BucketKey(current, resolution))
            current = current.NextStart(resolution)

        if len(fields) == 1:
            value = self._storeCall("read_one", key, self.Store.ReadOne, key, fields[0])
            return OrderedDict([(moments[0], _asCount(value))])

        values = self._storeCall("read_many", key, self.Store.ReadMany, key, fields)
        return OrderedDict(zip(moments, map(_asCount, values)))

    def BuildDateRangeStrategy(self, startTimestamp, endTimestamp, minResolution) -> list:
        return strategy.BuildDateRangeStrategy(
            self.Time(startTimestamp), self.Time(endTimestamp), minResolution,
            self.Settings.MaxDecompositionDepth)

    def GetTotal(self, key: str, startTimestamp, endTimestamp, minResolution) -> int:
        """ Sum of key from start through end, read with the fewest buckets """
        plan = self.BuildDateRangeStrategy(startTimestamp, endTimestamp, minResolution)
        self.CheckFetchLimit(len(plan))
        values = self._storeCall("read_many", key, self.Store.ReadMany, key, [entry.Key() for entry in plan])
        return sum(map(_asCount, values))

    def BasicTotal(self, key: str, startTimestamp, endTimestamp, minResolution) -> int:
        """ Same answer as GetTotal, reading every minResolution bucket in the window """
        return sum(self.GetRange(key, startTimestamp, endTimestamp, minResolution).values())

    def CheckFetchLimit(self, count: int) -> None:
        limit = self.Settings.FetchLimit
        if limit > 0 and count > limit:
            raise FetchLimitExceeded(count, limit)

    def _storeCall(self, operation: str, key: str, func, *args):
        try:
            return func(*args)
        except BucketSumError:
            raise
        except Exception as err:
            raise StoreFailure(operation, key) from err


def _asCount(value) -> int:
    return 0 if value is None else int(value)
