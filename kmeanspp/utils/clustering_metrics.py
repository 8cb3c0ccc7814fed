"""
Clustering quality helpers.

Inertia measures how compact a clustering is on its own; the label array
turns index-based clusters into the flat form `predict` returns.
"""

from typing import Sequence

import numpy as np

from ..cluster import Cluster, IntermediateCluster
from ..points import PointAdapter


def inertia(clusters: Sequence[Cluster], adapter: PointAdapter) -> float:
    """
    Within-cluster sum of squared distances (SSE).

    SSE = sum_k sum_{x in C_k} d(x, c_k)^2, the objective k-means minimizes.
    Squares and the total are taken in float64, so a sum beyond its range is
    ``inf``.

    Parameters
    ----------
    clusters : sequence of Cluster
        Clusters holding their member points.
    adapter : PointAdapter
        Distance of the point representation.

    Returns
    -------
    float
        Total inertia.
    """
    distances = np.array(
        [adapter.distance(point, cluster.centroid)
         for cluster in clusters
         for point in cluster.points],
        dtype=np.float64,
    )
    with np.errstate(over="ignore"):
        return float(np.sum(np.square(distances)))


def labels_from_clusters(clusters: Sequence[IntermediateCluster], n_points: int) -> np.ndarray:
    """
    Label array (cluster index per input position) from index-based clusters.

    Positions that belong to no cluster keep the label -1.
    """
    labels = np.full(n_points, -1, dtype=np.intp)
    for index, cluster in enumerate(clusters):
        labels[cluster.point_indices] = index
    return labels
