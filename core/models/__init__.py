# ============================================================================
# MODELS MODULE
# ============================================================================
# EPOCH: 1 - DEFINITION RENDERING
# STATUS: Model exports
# PURPOSE: Central export point for render models
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
Models Module - Central Export Point
"""

from core.models.render import RenderRequest, Auxiliary, json_field_source

__all__ = [
    "RenderRequest",
    "Auxiliary",
    "json_field_source",
]
