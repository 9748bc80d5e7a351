# ============================================================================
# CLUSTER ACCESS
# ============================================================================
# EPOCH: 1 - DEFINITION RENDERING
# STATUS: Cluster - Read-only access to live objects
# PURPOSE: Object helpers and reader implementations
# CREATED: 19 OCT 2026
# ============================================================================
"""
Cluster Access

- objects: GroupVersionKind and Unstructured helpers
- reader: ClusterReader interface and in-memory store
- kube_api: Kubernetes REST reader (httpx)
"""

from cluster.objects import GroupVersionKind, Unstructured
from cluster.reader import ClusterReader, InMemoryClusterReader
from cluster.kube_api import KubeApiReader

__all__ = [
    "GroupVersionKind",
    "Unstructured",
    "ClusterReader",
    "InMemoryClusterReader",
    "KubeApiReader",
]
