from .clock import CalendarTime
from .resolution import LadderDownTo, ParseResolution

def BucketKey(time: CalendarTime, resolution) -> str:
    """ Storage field for the bucket holding time at resolution.

    Every resolution renders differently, so all resolutions of a metric can
    share one hash without colliding:

        year    2015
        month   2015-02
        week    2015-W05
        day     2015-02-01
        hour    2015-02-01T13
        minute  2015-02-01T13:07
        second  2015-02-01T13:07:42
    """
    return time.Bucket(ParseResolution(resolution)).BucketID()

def BucketKeyChain(time: CalendarTime, lowestResolution) -> list:
    """ (Resolution, key) pairs from year down to lowestResolution inclusive """
    return [(resolution, BucketKey(time, resolution)) for resolution in LadderDownTo(lowestResolution)]
