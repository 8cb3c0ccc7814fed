"""
K-Means++ Initialization.

This module selects the starting centroids for the clustering loop using the
k-means++ strategy of Arthur & Vassilvitskii. After a uniformly random first
centre, every following centre is drawn with probability proportional to the
squared distance between a candidate and its nearest already chosen centre,
so far-away points are favoured and the initial centres end up well
separated.

References
----------
[1] Arthur, D., Vassilvitskii, S., "k-means++: The Advantages of Careful
    Seeding", 2007, Proc. 18th ACM-SIAM Symp. Discrete Algorithms,
    pp. 1027-1035.
"""

import logging
from typing import Any, List, Sequence

import numpy as np

from .cluster import IntermediateCluster
from .exceptions import InvalidArgumentError
from .points import PointAdapter

logger = logging.getLogger(__name__)


def weighted_choice(weights: np.ndarray, rng: np.random.Generator) -> int:
    """
    Draw an index with probability proportional to its weight.

    A uniform value is drawn in ``[0, total)`` and the first index whose
    cumulative weight strictly exceeds it is returned. Index 0 goes through
    the same comparison as every other index, and zero-weight entries can
    never be picked while some weight is positive.

    Parameters
    ----------
    weights : np.ndarray
        Non-negative weights, one per candidate.
    rng : np.random.Generator
        Random source.

    Returns
    -------
    int
        Selected index. Uniform over all candidates when every weight is 0,
        and uniform over the infinite weights when there are any.
    """
    n_candidates = len(weights)
    if n_candidates == 0:
        raise InvalidArgumentError("Cannot select from an empty candidate pool.")

    weights = np.asarray(weights, dtype=np.float64)
    if np.isnan(weights).any():
        raise InvalidArgumentError(
            "Seeding weights contain NaN; check the adapter's distance function."
        )

    # Squared distances past the float64 range: those points dominate the draw
    infinite = np.flatnonzero(np.isinf(weights))
    if infinite.size:
        return int(infinite[rng.integers(infinite.size)])

    cumulative = np.cumsum(weights)
    if not np.isfinite(cumulative[-1]):
        # Finite weights whose sum overflows; the draw is scale-invariant
        cumulative = np.cumsum(weights / weights.max())
    total = cumulative[-1]

    # Every remaining candidate coincides with a chosen centre
    if total <= 0.0:
        return int(rng.integers(n_candidates))

    draw = rng.uniform(0.0, total)
    selection = int(np.searchsorted(cumulative, draw, side="right"))
    return min(selection, n_candidates - 1)


def squared_distances(
    centre: Any,
    points: Sequence[Any],
    indices: Sequence[int],
    adapter: PointAdapter,
) -> np.ndarray:
    """
    D(x)^2 from `centre` to each indexed point, in float64.

    Squares beyond the float64 range become ``inf`` instead of raising.
    """
    distances = np.array([adapter.distance(centre, points[i]) for i in indices], dtype=np.float64)
    with np.errstate(over="ignore"):
        return np.square(distances)


def kmeans_plusplus(
    points: Sequence[Any],
    k: int,
    adapter: PointAdapter,
    rng: np.random.Generator,
) -> List[IntermediateCluster]:
    """
    Pick `k` initial centroids from `points` with k-means++.

    1. Choose one centre uniformly at random among the points.
    2. For each remaining point x, compute D(x)^2, the squared distance to
       the nearest centre chosen so far.
    3. Choose the next centre among the remaining points with probability
       proportional to D(x)^2.
    4. Repeat 2-3 until `k` centres have been chosen.

    A point is removed from the candidate pool once chosen, so the same
    input position is never used twice.

    Parameters
    ----------
    points : sequence
        Input points, validated by the caller.
    k : int
        Number of centres, ``1 <= k <= len(points)``.
    adapter : PointAdapter
        Supplies the distance function.
    rng : np.random.Generator
        Random source.

    Returns
    -------
    list of IntermediateCluster
        `k` clusters with empty memberships.
    """
    n_points = len(points)
    if n_points == 0:
        raise InvalidArgumentError("Cannot seed clusters from an empty set of points.")
    if k < 1 or k > n_points:
        raise InvalidArgumentError(
            f"k must satisfy 1 <= k <= number of points ({n_points}), got {k}."
        )

    candidates = list(range(n_points))

    # 1. First centre, uniform
    first = candidates.pop(int(rng.integers(n_points)))
    clusters = [IntermediateCluster(points[first])]
    logger.debug("k-means++ picked point %d as centre 0 (uniform)", first)

    # 2. D(x)^2 against the first centre
    weights = squared_distances(points[first], points, candidates, adapter)

    while len(clusters) < k:
        # 3. Weighted draw
        position = weighted_choice(weights, rng)
        chosen = candidates.pop(position)
        weights = np.delete(weights, position)
        centre = points[chosen]
        clusters.append(IntermediateCluster(centre))
        logger.debug("k-means++ picked point %d as centre %d", chosen, len(clusters) - 1)

        # Keep D(x)^2 as the distance to the nearest chosen centre
        if candidates:
            to_new_centre = squared_distances(centre, points, candidates, adapter)
            weights = np.minimum(weights, to_new_centre)

    return clusters
