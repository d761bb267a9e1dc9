class BucketSumError(Exception):
    """ Base class for every error raised by bucketsum """


class InvalidResolution(BucketSumError, ValueError):
    def __init__(self, token):
        super().__init__("Unknown resolution {0!r}".format(token))
        self.Token = token


class InvalidTimestamp(BucketSumError, ValueError):
    def __init__(self, value):
        super().__init__("Unable to interpret {0!r} as a timestamp".format(value))
        self.Value = value


class FetchLimitExceeded(BucketSumError):
    """ A range or total query would read more buckets than the configured ceiling """
    def __init__(self, requested: int, limit: int):
        super().__init__(
            "Operation would require {0} reads to complete which is over the lookup limit of {1}".format(requested, limit))
        self.Requested = requested
        self.Limit = limit


class StoreFailure(BucketSumError):
    """ The backing store raised. The original exception is kept as __cause__. """
    def __init__(self, operation: str, hashName: str):
        super().__init__("Store operation {0} failed for {1!r}".format(operation, hashName))
        self.Operation = operation
        self.Hash = hashName


class DecompositionNonTermination(BucketSumError, RuntimeError):
    """ The range decomposition stopped making progress. Always a bug. """
    def __init__(self, start, end, depth: int):
        super().__init__(
            "Range decomposition of {0} .. {1} did not terminate (depth {2})".format(start, end, depth))
        self.Start = start
        self.End = end
        self.Depth = depth
