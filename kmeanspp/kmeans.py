"""
K-Means Clustering with K-Means++ Seeding.

This module implements Lloyd's algorithm (batch k-means) over an arbitrary
point representation. Points are measured and averaged through a
`PointAdapter`, so the same loop clusters float, unsigned and signed integer
tuples as well as any custom representation.

The loop alternates two steps until the clustering stops changing:

- Assignment: each point joins the cluster with the nearest centroid.
- Recalculation: each centroid moves to the mean of its members and the
  memberships are cleared.

Convergence is exact: the loop ends when two consecutive rounds produce the
same centroids and the same ordered memberships.

References
----------
[1] Lloyd, S.P., "Least squares quantization in PCM", 1982, IEEE Trans.
    Information Theory, 28(2), pp. 129-137.
[2] Arthur, D., Vassilvitskii, S., "k-means++: The Advantages of Careful
    Seeding", 2007, Proc. 18th ACM-SIAM Symp. Discrete Algorithms.
"""

import logging
from typing import Any, List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from .cluster import Cluster, IntermediateCluster
from .exceptions import EmptyClusterError, InvalidArgumentError, NotFittedError
from .points import PointAdapter, infer_adapter
from .seeding import kmeans_plusplus
from .utils.clustering_metrics import inertia, labels_from_clusters

logger = logging.getLogger(__name__)

EMPTY_CLUSTER_POLICIES = ("keep", "raise")
DEFAULT_EMPTY_CLUSTER = "keep"

RandomState = Union[None, int, np.random.Generator]


def as_points(X) -> List[Any]:
    """
    Normalise the accepted input containers to a list of points.

    DataFrames and 2-D arrays are split into row tuples (numpy scalars of
    the array dtype); any other iterable is taken as a sequence of points.
    """
    if isinstance(X, pd.DataFrame):
        X = X.values
    if isinstance(X, np.ndarray):
        if X.ndim != 2:
            raise InvalidArgumentError(
                f"Array input must be 2-D (n_samples, n_features), got shape {X.shape}."
            )
        return [tuple(row) for row in X]
    return list(X)


def assign_point(point: Any, centroids: Sequence[Any], adapter: PointAdapter) -> int:
    """
    Index of the centroid closest to `point`.

    Only a strictly smaller distance replaces the current best, so ties go
    to the lowest cluster index.
    """
    closest = 0
    closest_distance = adapter.distance(point, centroids[0])
    for index in range(1, len(centroids)):
        distance = adapter.distance(point, centroids[index])
        if distance < closest_distance:
            closest = index
            closest_distance = distance
    return closest


def same_clustering(
    current: Sequence[IntermediateCluster],
    previous: Sequence[IntermediateCluster],
    adapter: PointAdapter,
) -> bool:
    """
    Whether two rounds ended with the same clustering.

    Memberships are compared first; centroids go through `adapter.equal`,
    since `==` on array points is elementwise.
    """
    if len(current) != len(previous):
        return False
    if any(a.point_indices != b.point_indices for a, b in zip(current, previous)):
        return False
    return all(adapter.equal(a.centroid, b.centroid) for a, b in zip(current, previous))


class KMeans:
    """
    K-Means clustering (Lloyd's algorithm) with k-means++ initialization.

    Parameters
    ----------
    n_clusters : int
        The number of clusters to form, ``1 <= n_clusters <= n_samples``.
    adapter : PointAdapter, optional
        Distance and mean of the point representation. Inferred from the
        data with `infer_adapter` when omitted.
    max_iters : int, optional
        Maximum number of recalculation rounds. ``None`` (default) runs
        until the clustering is stable.
    empty_cluster : {'keep', 'raise'}, default='keep'
        What to do when a cluster loses all its members.
        - 'keep': carry the previous centroid forward.
        - 'raise': raise `EmptyClusterError`.
    random_state : int or np.random.Generator, optional
        Seed or generator for the k-means++ draws.

    Attributes
    ----------
    clusters_ : list of Cluster
        Final clusters, members in input order.
    centroids_ : list
        Final centroids, one per cluster.
    labels_ : np.ndarray
        Cluster index of each input point.
    inertia_ : float
        Within-cluster sum of squared distances.
    n_iter_ : int
        Number of recalculation rounds performed.
    converged_ : bool
        False only when `max_iters` stopped the loop early.
    """

    def __init__(
        self,
        n_clusters: int,
        adapter: Optional[PointAdapter] = None,
        max_iters: Optional[int] = None,
        empty_cluster: str = DEFAULT_EMPTY_CLUSTER,
        random_state: RandomState = None,
    ):
        if isinstance(n_clusters, bool) or not isinstance(n_clusters, (int, np.integer)):
            raise InvalidArgumentError(f"n_clusters must be an integer, got {n_clusters!r}.")
        if n_clusters < 1:
            raise InvalidArgumentError(f"n_clusters must be at least 1, got {n_clusters}.")
        if max_iters is not None and (
            isinstance(max_iters, bool)
            or not isinstance(max_iters, (int, np.integer))
            or max_iters < 1
        ):
            raise InvalidArgumentError(f"max_iters must be a positive integer or None, got {max_iters!r}.")
        if empty_cluster not in EMPTY_CLUSTER_POLICIES:
            raise InvalidArgumentError(
                f"empty_cluster must be one of {EMPTY_CLUSTER_POLICIES}, got {empty_cluster!r}."
            )
        if adapter is not None and not isinstance(adapter, PointAdapter):
            raise InvalidArgumentError(f"adapter must be a PointAdapter, got {type(adapter).__name__}.")

        self.n_clusters = int(n_clusters)
        self.adapter = adapter
        self.max_iters = max_iters
        self.empty_cluster = empty_cluster
        self.random_state = random_state

        self.adapter_ = None
        self.clusters_ = None
        self.centroids_ = None
        self.labels_ = None
        self.inertia_ = None
        self.n_iter_ = 0
        self.converged_ = False

    def _check_points(self, points: List[Any]) -> PointAdapter:
        if len(points) == 0:
            raise InvalidArgumentError("Cannot cluster an empty set of points.")
        if self.n_clusters > len(points):
            raise InvalidArgumentError(
                f"n_clusters ({self.n_clusters}) exceeds the number of points ({len(points)})."
            )

        adapter = self.adapter if self.adapter is not None else infer_adapter(points)
        for point in points:
            adapter.validate(point)
        return adapter

    def _assign_clusters(
        self,
        points: Sequence[Any],
        clusters: List[IntermediateCluster],
        adapter: PointAdapter,
    ) -> None:
        """Append every point's index to its nearest cluster, in input order."""
        centroids = [c.centroid for c in clusters]
        for index, point in enumerate(points):
            clusters[assign_point(point, centroids, adapter)].point_indices.append(index)

    def _recalculate_centroids(
        self,
        points: Sequence[Any],
        clusters: List[IntermediateCluster],
        adapter: PointAdapter,
    ) -> List[IntermediateCluster]:
        """
        Build the next round's clusters: moved centroids, empty memberships.

        The clusters passed in are left untouched so they can serve as the
        previous state for the convergence test.
        """
        recalculated = []
        for index, cluster in enumerate(clusters):
            if cluster.point_indices:
                centroid = adapter.mean([points[i] for i in cluster.point_indices])
            elif self.empty_cluster == "raise":
                raise EmptyClusterError(index)
            else:
                logger.warning("Cluster %d is empty; keeping its previous centroid", index)
                centroid = cluster.centroid
            recalculated.append(IntermediateCluster(centroid))
        return recalculated

    def fit(self, X):
        """
        Cluster the data.

        Parameters
        ----------
        X : sequence of points, np.ndarray or pd.DataFrame
            Input data. Arrays and frames are read row by row.

        Returns
        -------
        self
        """
        points = as_points(X)
        adapter = self._check_points(points)
        rng = np.random.default_rng(self.random_state)

        clusters = kmeans_plusplus(points, self.n_clusters, adapter, rng)
        self._assign_clusters(points, clusters, adapter)

        n_iter = 0
        converged = False
        while True:
            if self.max_iters is not None and n_iter >= self.max_iters:
                logger.warning(
                    "k-means stopped after max_iters=%d rounds without converging", self.max_iters
                )
                break

            previous = clusters
            clusters = self._recalculate_centroids(points, previous, adapter)
            self._assign_clusters(points, clusters, adapter)
            n_iter += 1
            logger.debug(
                "Round %d: cluster sizes %s", n_iter, [len(c.point_indices) for c in clusters]
            )

            if same_clustering(clusters, previous, adapter):
                converged = True
                logger.info("k-means converged after %d rounds (k=%d)", n_iter, self.n_clusters)
                break

        self.adapter_ = adapter
        self.n_iter_ = n_iter
        self.converged_ = converged
        self.clusters_ = [Cluster.from_intermediate(c, points) for c in clusters]
        self.centroids_ = Cluster.centroids(self.clusters_)
        self.labels_ = labels_from_clusters(clusters, len(points))
        self.inertia_ = inertia(self.clusters_, adapter)

        return self

    def predict(self, X) -> np.ndarray:
        """
        Index of the closest fitted centroid for each point in X.

        Parameters
        ----------
        X : sequence of points, np.ndarray or pd.DataFrame
            New data.

        Returns
        -------
        np.ndarray
            Cluster assignments.
        """
        if self.centroids_ is None:
            raise NotFittedError("Model has not been fitted yet. Call fit() first.")

        points = as_points(X)
        for point in points:
            self.adapter_.validate(point)
        return np.array(
            [assign_point(p, self.centroids_, self.adapter_) for p in points], dtype=np.intp
        )

    def fit_predict(self, X) -> np.ndarray:
        """Fit the model and return the cluster index of each point."""
        self.fit(X)
        return self.labels_


def kmeans(
    k: int,
    points,
    adapter: Optional[PointAdapter] = None,
    max_iters: Optional[int] = None,
    empty_cluster: str = DEFAULT_EMPTY_CLUSTER,
    random_state: RandomState = None,
) -> List[Cluster]:
    """
    Partition `points` into `k` clusters.

    Parameters
    ----------
    k : int
        Number of clusters, ``1 <= k <= len(points)``.
    points : sequence of points, np.ndarray or pd.DataFrame
        Input data.
    adapter, max_iters, empty_cluster, random_state
        See `KMeans`.

    Returns
    -------
    list of Cluster
        Exactly `k` clusters. Every input point appears in exactly one
        cluster, members kept in input order.
    """
    model = KMeans(
        k,
        adapter=adapter,
        max_iters=max_iters,
        empty_cluster=empty_cluster,
        random_state=random_state,
    )
    return model.fit(points).clusters_
