"""
Exception hierarchy for the k-means package.

Every error raised by the package derives from `KMeansError`. The concrete
classes also derive from the closest built-in exception so callers that
already catch `ValueError` or `OverflowError` keep working.
"""


class KMeansError(Exception):
    """Base class for all clustering errors."""


class InvalidArgumentError(KMeansError, ValueError):
    """Bad `k`, empty input, malformed points or an unknown option."""


class NarrowingError(KMeansError, OverflowError):
    """
    An integer mean does not fit the coordinate dtype.

    Means of in-range values are always in range, so this signals a broken
    adapter or corrupted input rather than a recoverable condition.
    """


class EmptyClusterError(KMeansError):
    """A cluster lost all of its members under the ``"raise"`` policy."""

    def __init__(self, cluster_index: int):
        self.cluster_index = cluster_index
        super().__init__(
            f"Cluster {cluster_index} has no members; cannot recalculate its centroid."
        )


class NotFittedError(KMeansError, AttributeError):
    """The estimator was used before `fit` was called."""
