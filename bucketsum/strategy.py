import logging
from dataclasses import dataclass

from .clock import CalendarTime
from .errors import DecompositionNonTermination
from .keys import BucketKey
from .resolution import LADDER, Resolution, ParseResolution

logger = logging.getLogger(__name__)

# Edge fills always recurse into a strictly smaller window
DEFAULT_MAX_DEPTH = 32


@dataclass(frozen=True)
class PlanEntry:
    """ One bucket read of a range decomposition plan """
    Grain: Resolution
    Start: CalendarTime

    def Key(self) -> str:
        return BucketKey(self.Start, self.Grain)

    def End(self) -> CalendarTime:
        """ Start of the following bucket, EXCLUSIVE end of this one """
        return self.Start.NextStart(self.Grain)

    def Format(self) -> str:
        return self.Start.Format()


def Candidates(minResolution: Resolution):
    """ Resolutions the decomposition may use, coarsest first """
    return [r for r in LADDER[:minResolution.LadderIndex() + 1] if r.AlignsWith(minResolution)]


def BuildDateRangeStrategy(start: CalendarTime, end: CalendarTime, minResolution,
                           maxDepth: int = DEFAULT_MAX_DEPTH) -> list:
    """ Fewest buckets that exactly cover start..end at minResolution granularity.

    The window runs from the start of the minResolution period holding start
    through the end of the one holding end, inclusive. Returns PlanEntry items
    in chronological order, pairwise disjoint, covering the window exactly.
    Whole coarse buckets fill the middle; the ragged edges recurse with
    progressively finer resolutions.
    """
    minResolution = ParseResolution(minResolution)
    if end < start:
        # User passed in the timestamps in reverse order.
        start, end = end, start

    if start.IsSame(end, minResolution):
        # Same bucket, one lookup
        return [PlanEntry(minResolution, start.StartOf(minResolution))]

    return _decompose(start.StartOf(minResolution), end.NextStart(minResolution), minResolution, maxDepth, 0)


def _decompose(start: CalendarTime, endExclusive: CalendarTime, minResolution: Resolution,
               maxDepth: int, depth: int) -> list:
    if depth > maxDepth or not start < endExclusive:
        raise DecompositionNonTermination(start, endExclusive, depth)

    logger.debug("Finding keys for range from %s to %s (depth %d)", start, endExclusive, depth)

    if start.NextStart(minResolution) == endExclusive:
        return [PlanEntry(minResolution, start)]

    # Largest resolution where a whole bucket fits entirely within the range
    chosen = first = None
    for candidate in Candidates(minResolution):
        capacity = endExclusive.Diff(start, candidate)
        if capacity < 1:
            continue
        first = start.StartOf(candidate)
        if first < start:
            first = first.NextStart(candidate)
        if first.NextStart(candidate) <= endExclusive:
            chosen = candidate
            break
        logger.debug("%s has capacity %d but no aligned bucket fits", candidate.value, capacity)

    if chosen is None:
        # minResolution always fits an aligned, non-empty window
        raise DecompositionNonTermination(start, endExclusive, depth)

    middle = []
    current = first
    while current.NextStart(chosen) <= endExclusive:
        middle.append(PlanEntry(chosen, current))
        current = current.NextStart(chosen)

    logger.debug("Selected %d %s bucket(s) from %s to %s", len(middle), chosen.value, first, current)

    front, back = [], []
    if first > start:
        front = _recurse(start, first, start, endExclusive, minResolution, maxDepth, depth)
    if current < endExclusive:
        back = _recurse(current, endExclusive, start, endExclusive, minResolution, maxDepth, depth)

    return front + middle + back


def _recurse(subStart, subEnd, start, endExclusive, minResolution, maxDepth, depth) -> list:
    """ Decompose an uncovered edge, which must be strictly inside the current window """
    shrinks = start <= subStart < subEnd <= endExclusive and (subStart, subEnd) != (start, endExclusive)
    if not shrinks:
        raise DecompositionNonTermination(subStart, subEnd, depth + 1)
    return _decompose(subStart, subEnd, minResolution, maxDepth, depth + 1)
