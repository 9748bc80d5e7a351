# ============================================================================
# LIVE RESOURCE RESOLVER
# ============================================================================
# EPOCH: 1 - DEFINITION RENDERING
# STATUS: Definition - Rendered object -> live cluster object
# PURPOSE: Find the object a rendered output materialized as
# CREATED: 19 OCT 2026
# ============================================================================
"""
Live Resource Resolver

Resolution order:
1. The rendered object has metadata.name -> fetch by gvk and name
2. Otherwise list by gvk and the label set (the outputs qualifier is NOT
   part of the selector, so the candidate set is broader)
   - exactly one candidate -> it
   - several -> sorted by (namespace, name), first whose
     trait.oam.dev/resource label equals the qualifier
   - none -> ResourceNotFoundError; several without match ->
     AmbiguousResourceError
"""

from typing import Any, Dict, List, Optional

from core.contracts import LABEL_TRAIT_RESOURCE
from core.errors import AmbiguousResourceError, ResourceNotFoundError
from core.logging import get_logger, ComponentType
from cluster.objects import Unstructured
from cluster.reader import ClusterReader

logger = get_logger(__name__, ComponentType.RESOLVER)


def _sort_key(obj: Dict[str, Any]):
    u = Unstructured(obj)
    return (u.namespace, u.name)


class LiveResourceResolver:
    """Maps rendered objects back to live cluster objects."""

    def __init__(self, cluster: ClusterReader):
        self.cluster = cluster

    def resolve(
        self,
        obj: Unstructured,
        namespace: str,
        labels: Dict[str, str],
        outputs_resource: str = "",
    ) -> Dict[str, Any]:
        """
        Resolve one rendered object.

        Args:
            obj: Rendered (symbolic) object
            namespace: Namespace to read from
            labels: Label set of the candidates
            outputs_resource: Expected trait.oam.dev/resource label value

        Returns:
            Live object mapping

        Raises:
            ResourceNotFoundError: No live object
            AmbiguousResourceError: Several candidates, none carries the qualifier
            ResolveError: Read failure
        """
        gvk = obj.gvk
        if obj.name:
            logger.debug(f"Resolving {gvk} {namespace}/{obj.name} by name")
            return self.cluster.get_object(gvk, namespace, obj.name)

        candidates = self.cluster.list_objects(gvk, namespace, dict(labels))
        if len(candidates) == 1:
            return candidates[0]

        if not candidates:
            raise ResourceNotFoundError(
                f"no resources found gvk({gvk}) labels({labels})",
                gvk=str(gvk),
                namespace=namespace,
                labels=labels,
            )

        for candidate in sorted(candidates, key=_sort_key):
            if Unstructured(candidate).label(LABEL_TRAIT_RESOURCE) == outputs_resource:
                logger.debug(
                    f"Disambiguated {len(candidates)} {gvk.kind} candidates "
                    f"by {LABEL_TRAIT_RESOURCE}={outputs_resource!r}"
                )
                return candidate

        raise AmbiguousResourceError(
            f"{len(candidates)} resources found gvk({gvk}) labels({labels}), "
            f"none labeled {LABEL_TRAIT_RESOURCE}={outputs_resource!r}",
            gvk=str(gvk),
            namespace=namespace,
            labels=labels,
            details={"candidates": [Unstructured(c).name for c in sorted(candidates, key=_sort_key)]},
        )


def get_resource_from_obj(
    obj: Unstructured,
    cluster: ClusterReader,
    namespace: str,
    labels: Dict[str, str],
    outputs_resource: str = "",
) -> Dict[str, Any]:
    """Function form of LiveResourceResolver.resolve."""
    return LiveResourceResolver(cluster).resolve(obj, namespace, labels, outputs_resource)


__all__ = ["LiveResourceResolver", "get_resource_from_obj"]
