"""
Utilities package initialization.

Exposes the clustering quality helpers and logging setup.
"""

from .clustering_metrics import (
    inertia,
    labels_from_clusters
)

from .log import setup_logging
