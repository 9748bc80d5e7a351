# ============================================================================
# CLUSTER OBJECT HELPERS
# ============================================================================
# EPOCH: 1 - DEFINITION RENDERING
# STATUS: Cluster - Generic object model
# PURPOSE: Group/version/kind identity and accessors over plain mappings
# CREATED: 19 OCT 2026
# ============================================================================
"""
Cluster Object Helpers

Kubernetes-style objects are plain mappings. Unstructured adds typed
accessors for the identity fields without copying the mapping.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class GroupVersionKind:
    """Identity of an object type."""
    group: str
    version: str
    kind: str

    @classmethod
    def from_api_version(cls, api_version: str, kind: str) -> "GroupVersionKind":
        """Split "apps/v1" into group and version ("v1" is the core group)."""
        if "/" in api_version:
            group, version = api_version.split("/", 1)
        else:
            group, version = "", api_version
        return cls(group=group, version=version, kind=kind)

    @property
    def api_version(self) -> str:
        if self.group:
            return f"{self.group}/{self.version}"
        return self.version

    def __str__(self) -> str:
        return f"{self.api_version}, Kind={self.kind}"


class Unstructured:
    """Typed accessors over an object mapping."""

    def __init__(self, obj: Dict[str, Any]):
        self.object = obj

    @property
    def api_version(self) -> str:
        return str(self.object.get("apiVersion") or "")

    @property
    def kind(self) -> str:
        return str(self.object.get("kind") or "")

    @property
    def gvk(self) -> GroupVersionKind:
        return GroupVersionKind.from_api_version(self.api_version, self.kind)

    @property
    def metadata(self) -> Dict[str, Any]:
        metadata = self.object.get("metadata")
        return metadata if isinstance(metadata, dict) else {}

    @property
    def name(self) -> str:
        return str(self.metadata.get("name") or "")

    @property
    def namespace(self) -> str:
        return str(self.metadata.get("namespace") or "")

    @property
    def labels(self) -> Dict[str, str]:
        labels = self.metadata.get("labels")
        if not isinstance(labels, dict):
            return {}
        return {str(k): str(v) for k, v in labels.items()}

    def label(self, key: str, default: str = "") -> str:
        return self.labels.get(key, default)

    def matches_labels(self, selector: Optional[Dict[str, str]]) -> bool:
        """Equality-based label selection."""
        labels = self.labels
        return all(labels.get(k) == v for k, v in (selector or {}).items())

    def __repr__(self) -> str:
        return f"Unstructured({self.gvk}, name={self.name!r})"


__all__ = ["GroupVersionKind", "Unstructured"]
