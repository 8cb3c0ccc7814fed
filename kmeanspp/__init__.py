"""
K-Means++ Clustering Package.

Lloyd's k-means over arbitrary point representations, seeded with
k-means++.

Modules
-------
- points: PointAdapter contract and the built-in numeric tuple adapters.
- cluster: Cluster and IntermediateCluster containers.
- seeding: k-means++ initialization.
- kmeans: KMeans estimator and the `kmeans` function.
- exceptions: Error hierarchy.
- utils: Inertia, label arrays and logging setup.
"""

import logging

from .cluster import Cluster, IntermediateCluster
from .exceptions import (
    KMeansError,
    InvalidArgumentError,
    NarrowingError,
    EmptyClusterError,
    NotFittedError,
)
from .points import (
    PointAdapter,
    NumericTupleAdapter,
    FloatTupleAdapter,
    UnsignedTupleAdapter,
    SignedTupleAdapter,
    tuple_adapter,
    infer_adapter,
)
from .seeding import kmeans_plusplus, weighted_choice
from .kmeans import KMeans, kmeans, assign_point

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
