from datetime import datetime

import pytest

from bucketsum.clock import CalendarTime
from bucketsum.errors import InvalidResolution
from bucketsum.keys import BucketKey, BucketKeyChain
from bucketsum.resolution import LADDER, Resolution, ParseResolution, LadderDownTo

eventTime = CalendarTime(datetime(2015,2,1,13,7,42))

def test_parse_resolution():
    assert ParseResolution("day") is Resolution.DAY
    assert ParseResolution(" Week ") is Resolution.WEEK
    assert ParseResolution(Resolution.YEAR) is Resolution.YEAR
    for token in ("fortnight", "", None, 3):
        with pytest.raises(InvalidResolution):
            ParseResolution(token)

def test_ladder_order():
    assert [r.value for r in LADDER] == ["year", "month", "week", "day", "hour", "minute", "second"]
    assert Resolution.MONTH.IsCoarserThan(Resolution.WEEK)
    assert not Resolution.SECOND.IsCoarserThan(Resolution.SECOND)
    assert LadderDownTo("week") == (Resolution.YEAR, Resolution.MONTH, Resolution.WEEK)

def test_aligns_with():
    assert Resolution.MONTH.AlignsWith(Resolution.DAY)
    assert Resolution.WEEK.AlignsWith(Resolution.HOUR)
    assert not Resolution.MONTH.AlignsWith(Resolution.WEEK)
    assert not Resolution.YEAR.AlignsWith(Resolution.WEEK)
    assert not Resolution.DAY.AlignsWith(Resolution.MONTH)

def test_bucket_key_every_resolution():
    assert BucketKey(eventTime, "year") == "2015"
    assert BucketKey(eventTime, "month") == "2015-02"
    assert BucketKey(eventTime, "week") == "2015-W05"
    assert BucketKey(eventTime, "day") == "2015-02-01"
    assert BucketKey(eventTime, "hour") == "2015-02-01T13"
    assert BucketKey(eventTime, "minute") == "2015-02-01T13:07"
    assert BucketKey(eventTime, "second") == "2015-02-01T13:07:42"

def test_bucket_key_rejects_unknown_resolution():
    with pytest.raises(InvalidResolution):
        BucketKey(eventTime, "decade")

def test_bucket_key_is_stable_and_distinct():
    for resolution in Resolution:
        assert BucketKey(eventTime, resolution) == BucketKey(CalendarTime(eventTime.Wall), resolution)
        sameBucket = eventTime.StartOf(resolution)
        nextBucket = eventTime.NextStart(resolution)
        assert BucketKey(sameBucket, resolution) == BucketKey(eventTime, resolution)
        assert BucketKey(nextBucket, resolution) != BucketKey(eventTime, resolution)

def test_keys_never_collide_across_resolutions():
    keys = [BucketKey(eventTime, resolution) for resolution in Resolution]
    assert len(set(keys)) == len(keys)

def test_chain():
    assert BucketKeyChain(eventTime, "year") == [(Resolution.YEAR, "2015")]
    assert BucketKeyChain(eventTime, "day") == [
        (Resolution.YEAR, "2015"),
        (Resolution.MONTH, "2015-02"),
        (Resolution.WEEK, "2015-W05"),
        (Resolution.DAY, "2015-02-01"),
    ]
    assert len(BucketKeyChain(eventTime, Resolution.SECOND)) == 7
    with pytest.raises(InvalidResolution):
        BucketKeyChain(eventTime, "minutes")
