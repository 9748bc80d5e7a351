# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# EPOCH: 1 - DEFINITION RENDERING
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for evaluation, cluster reads, pre-processing
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides sensible defaults for the render engine.
These can be overridden via environment variables.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Optional


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class EngineDefaults:
    """
    Defaults for template evaluation.

    Controls how many times expressions are re-evaluated while
    references between fields settle.
    """
    max_resolve_passes: int = 16

    @classmethod
    def from_env(cls) -> "EngineDefaults":
        """Create from environment variables."""
        return cls(
            max_resolve_passes=int(os.getenv("ENGINE_MAX_RESOLVE_PASSES", 16)),
        )


@dataclass(frozen=True)
class ClusterDefaults:
    """
    Defaults for the Kubernetes API reader.

    In-cluster values work for a pod running with a service account.
    """
    api_server: str = "https://kubernetes.default.svc"
    token_path: str = "/var/run/secrets/kubernetes.io/serviceaccount/token"
    ca_path: str = "/var/run/secrets/kubernetes.io/serviceaccount/ca.crt"
    timeout_seconds: float = 30.0
    verify_tls: bool = True

    # Kinds whose plural is not derivable from the kind name
    plural_overrides: Dict[str, str] = field(default_factory=lambda: {
        "Endpoints": "endpoints",
        "PodSecurityPolicy": "podsecuritypolicies",
        "NetworkPolicy": "networkpolicies",
        "Ingress": "ingresses",
    })

    @classmethod
    def from_env(cls) -> "ClusterDefaults":
        """Create from environment variables."""
        return cls(
            api_server=os.getenv("KUBE_API_SERVER", "https://kubernetes.default.svc"),
            token_path=os.getenv(
                "KUBE_TOKEN_PATH", "/var/run/secrets/kubernetes.io/serviceaccount/token"
            ),
            ca_path=os.getenv(
                "KUBE_CA_PATH", "/var/run/secrets/kubernetes.io/serviceaccount/ca.crt"
            ),
            timeout_seconds=float(os.getenv("KUBE_TIMEOUT_SECONDS", 30.0)),
            verify_tls=_env_bool("KUBE_VERIFY_TLS", True),
        )


@dataclass(frozen=True)
class PreProcessDefaults:
    """
    Defaults for trait pre-processing.

    Applies to HTTP calls declared under `processing.http`.
    """
    http_timeout_seconds: float = 10.0
    default_method: str = "GET"

    @classmethod
    def from_env(cls) -> "PreProcessDefaults":
        """Create from environment variables."""
        return cls(
            http_timeout_seconds=float(os.getenv("PREPROCESS_HTTP_TIMEOUT_SECONDS", 10.0)),
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    engine: EngineDefaults = field(default_factory=EngineDefaults)
    cluster: ClusterDefaults = field(default_factory=ClusterDefaults)
    preprocess: PreProcessDefaults = field(default_factory=PreProcessDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(
            engine=EngineDefaults.from_env(),
            cluster=ClusterDefaults.from_env(),
            preprocess=PreProcessDefaults.from_env(),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


__all__ = [
    "EngineDefaults",
    "ClusterDefaults",
    "PreProcessDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
