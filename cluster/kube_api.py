# ============================================================================
# KUBERNETES API READER
# ============================================================================
# EPOCH: 1 - DEFINITION RENDERING
# STATUS: Cluster - Sync HTTP client for the Kubernetes REST API
# PURPOSE: Live object reads for health and status evaluation
# CREATED: 19 OCT 2026
# ============================================================================
"""
Kubernetes API Reader

Sync httpx client reading objects from the Kubernetes REST API.

Paths:
    core group:   /api/{version}/namespaces/{ns}/{plural}[/{name}]
    named group:  /apis/{group}/{version}/namespaces/{ns}/{plural}[/{name}]

The plural is derived from the kind (Deployment -> deployments,
Ingress -> ingresses, NetworkPolicy -> networkpolicies) unless an override
is configured. No retries: failures surface immediately as ResolveError.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import httpx

from core.config import ClusterDefaults, get_defaults
from core.errors import ResolveError, ResourceNotFoundError
from core.logging import get_logger, ComponentType
from cluster.objects import GroupVersionKind
from cluster.reader import ClusterReader

logger = get_logger(__name__, ComponentType.CLUSTER)


def kind_to_plural(kind: str, overrides: Optional[Dict[str, str]] = None) -> str:
    """Derive the REST resource name of a kind."""
    if overrides and kind in overrides:
        return overrides[kind]
    lower = kind.lower()
    if lower.endswith(("s", "x", "z", "ch", "sh")):
        return lower + "es"
    if lower.endswith("y") and len(lower) > 1 and lower[-2] not in "aeiou":
        return lower[:-1] + "ies"
    return lower + "s"


def label_selector(labels: Optional[Dict[str, str]]) -> str:
    """Render an equality label selector (sorted for stable URLs)."""
    return ",".join(f"{k}={v}" for k, v in sorted((labels or {}).items()))


class KubeApiReader(ClusterReader):
    """Sync HTTP reader for the Kubernetes API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        verify: Optional[Union[bool, str]] = None,
        timeout: Optional[float] = None,
        config: Optional[ClusterDefaults] = None,
    ):
        self._config = config or get_defaults().cluster
        self._base_url = (base_url or self._config.api_server).rstrip("/")
        self._token = token if token is not None else self._read_token()
        self._verify = verify if verify is not None else self._default_verify()
        self._timeout = httpx.Timeout(timeout or self._config.timeout_seconds)

    def _read_token(self) -> Optional[str]:
        path = Path(self._config.token_path)
        if path.is_file():
            return path.read_text().strip()
        return None

    def _default_verify(self) -> Union[bool, str]:
        if not self._config.verify_tls:
            return False
        if Path(self._config.ca_path).is_file():
            return self._config.ca_path
        return True

    def resource_path(
        self,
        gvk: GroupVersionKind,
        namespace: str,
        name: Optional[str] = None,
    ) -> str:
        """Build the REST path for a kind (and optionally one object)."""
        prefix = f"/apis/{gvk.group}/{gvk.version}" if gvk.group else f"/api/{gvk.version}"
        plural = kind_to_plural(gvk.kind, self._config.plural_overrides)
        path = f"{prefix}/namespaces/{namespace}/{plural}" if namespace else f"{prefix}/{plural}"
        if name:
            path = f"{path}/{name}"
        return path

    def _request(
        self,
        path: str,
        gvk: GroupVersionKind,
        namespace: str,
        params: Optional[Dict[str, str]] = None,
        labels: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """
        GET a path and return the decoded body.

        Raises:
            ResourceNotFoundError: On 404
            ResolveError: On any other failure
        """
        url = f"{self._base_url}{path}"
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        try:
            with httpx.Client(timeout=self._timeout, verify=self._verify) as client:
                resp = client.get(url, headers=headers, params=params)
        except httpx.TimeoutException as e:
            logger.error(f"Kubernetes API timeout: {url}: {e}")
            raise ResolveError(
                f"timeout reading {path}", gvk=str(gvk), namespace=namespace, labels=labels
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Cannot reach Kubernetes API at {url}: {e}")
            raise ResolveError(
                f"cannot read {path}", gvk=str(gvk), namespace=namespace, labels=labels
            ) from e

        if resp.status_code == 404:
            raise ResourceNotFoundError(
                f"{path} not found", gvk=str(gvk), namespace=namespace, labels=labels
            )
        if resp.status_code >= 400:
            logger.error(f"Kubernetes API error {resp.status_code}: {path} -> {resp.text}")
            raise ResolveError(
                f"read {path} failed with status {resp.status_code}",
                gvk=str(gvk),
                namespace=namespace,
                labels=labels,
            )

        try:
            return resp.json()
        except ValueError as e:
            raise ResolveError(
                f"invalid JSON from {path}", gvk=str(gvk), namespace=namespace, labels=labels
            ) from e

    def get_object(self, gvk: GroupVersionKind, namespace: str, name: str) -> Dict[str, Any]:
        return self._request(self.resource_path(gvk, namespace, name), gvk, namespace)

    def list_objects(
        self,
        gvk: GroupVersionKind,
        namespace: str,
        labels: Optional[Dict[str, str]] = None,
    ) -> List[Dict[str, Any]]:
        params = {}
        selector = label_selector(labels)
        if selector:
            params["labelSelector"] = selector
        body = self._request(
            self.resource_path(gvk, namespace), gvk, namespace, params=params, labels=labels
        )
        items = body.get("items") or []
        # List items omit apiVersion/kind
        for item in items:
            item.setdefault("apiVersion", gvk.api_version)
            item.setdefault("kind", gvk.kind)
        return items


__all__ = ["KubeApiReader", "kind_to_plural", "label_selector"]
