# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# EPOCH: 1 - DEFINITION RENDERING
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for the render engine.
"""

from core.config.defaults import (
    EngineDefaults,
    ClusterDefaults,
    PreProcessDefaults,
    Defaults,
    get_defaults,
    reset_defaults,
)

__all__ = [
    "EngineDefaults",
    "ClusterDefaults",
    "PreProcessDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
