# ============================================================================
# CLUSTER READERS
# ============================================================================
# EPOCH: 1 - DEFINITION RENDERING
# STATUS: Cluster - Read interface and in-memory store
# PURPOSE: Fetch live objects by name or by label selection
# CREATED: 19 OCT 2026
# ============================================================================
"""
Cluster Readers

The engine only reads from the cluster. Implementations must be safe for
concurrent reads; the engine never retries a failed read.

Implementations:
- InMemoryClusterReader: local store for tools and tests
- KubeApiReader (cluster.kube_api): Kubernetes REST API over httpx
"""

import copy
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Tuple

from core.errors import ResourceNotFoundError
from core.logging import get_logger, ComponentType
from cluster.objects import GroupVersionKind, Unstructured

logger = get_logger(__name__, ComponentType.CLUSTER)


class ClusterReader(ABC):
    """Read access to live cluster objects."""

    @abstractmethod
    def get_object(
        self,
        gvk: GroupVersionKind,
        namespace: str,
        name: str,
    ) -> Dict[str, Any]:
        """
        Fetch one object by name.

        Raises:
            ResourceNotFoundError: If the object does not exist
            ResolveError: If the read fails
        """
        pass

    @abstractmethod
    def list_objects(
        self,
        gvk: GroupVersionKind,
        namespace: str,
        labels: Optional[Dict[str, str]] = None,
    ) -> List[Dict[str, Any]]:
        """
        List objects of a kind in a namespace matching all labels.

        Raises:
            ResolveError: If the read fails
        """
        pass


class InMemoryClusterReader(ClusterReader):
    """
    Thread-safe in-memory object store.

    Objects are keyed by (gvk, namespace, name); reads return copies.
    """

    def __init__(self, objects: Optional[Iterable[Dict[str, Any]]] = None):
        self._objects: Dict[Tuple[GroupVersionKind, str, str], Dict[str, Any]] = {}
        self._lock = threading.Lock()
        for obj in objects or []:
            self.add(obj)

    def add(self, obj: Dict[str, Any], namespace: Optional[str] = None) -> None:
        """Store (or replace) an object. namespace defaults to metadata.namespace."""
        u = Unstructured(obj)
        key = (u.gvk, namespace if namespace is not None else u.namespace, u.name)
        with self._lock:
            self._objects[key] = copy.deepcopy(obj)

    def get_object(self, gvk: GroupVersionKind, namespace: str, name: str) -> Dict[str, Any]:
        with self._lock:
            obj = self._objects.get((gvk, namespace, name))
        if obj is None:
            raise ResourceNotFoundError(
                f"{gvk.kind} {namespace}/{name} not found",
                gvk=str(gvk),
                namespace=namespace,
            )
        return copy.deepcopy(obj)

    def list_objects(
        self,
        gvk: GroupVersionKind,
        namespace: str,
        labels: Optional[Dict[str, str]] = None,
    ) -> List[Dict[str, Any]]:
        with self._lock:
            candidates = [
                obj for (obj_gvk, obj_ns, _), obj in self._objects.items()
                if obj_gvk == gvk and obj_ns == namespace
            ]
        matched = [
            copy.deepcopy(obj) for obj in candidates
            if Unstructured(obj).matches_labels(labels)
        ]
        logger.debug(f"Listed {len(matched)} {gvk.kind} objects in {namespace} with {labels}")
        return matched


__all__ = ["ClusterReader", "InMemoryClusterReader"]
