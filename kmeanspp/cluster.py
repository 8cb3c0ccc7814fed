"""
Cluster containers.

`Cluster` is what callers get back: a centroid and the member points
themselves. `IntermediateCluster` is the working form used inside the
clustering loop; it stores indices into the input sequence so that point
payloads are never copied while iterating.

Both compare equal only when the centroid and the ordered membership are
equal. The loop itself compares rounds with `kmeans.same_clustering`, which
goes through the adapter for centroid equality.
"""

from dataclasses import dataclass, field
from typing import Any, List, Sequence


@dataclass
class Cluster:
    """A clustering of `points` around a `centroid`."""

    centroid: Any
    points: List[Any] = field(default_factory=list)

    @classmethod
    def from_intermediate(cls, intermediate: "IntermediateCluster", points: Sequence[Any]) -> "Cluster":
        """Resolve an index-based cluster against the input points."""
        return cls(
            centroid=intermediate.centroid,
            points=[points[i] for i in intermediate.point_indices],
        )

    @staticmethod
    def centroids(clusters: Sequence["Cluster"]) -> List[Any]:
        return [c.centroid for c in clusters]


@dataclass
class IntermediateCluster:
    """Index-based cluster used while iterating."""

    centroid: Any
    point_indices: List[int] = field(default_factory=list)
