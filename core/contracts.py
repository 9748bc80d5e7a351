# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# EPOCH: 1 - DEFINITION RENDERING
# STATUS: Foundation - Field names, label keys, renderer enums
# PURPOSE: Names shared by renderers, context builder and resolver
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: RendererKind, RenderStage, field and label constants
# DEPENDENCIES: enum
# ============================================================================
"""
Base contracts for the definition render engine.

These names cross every boundary:
- Template (field names a definition template must use)
- Cluster (labels stamped on materialized resources)
- Python (renderer identity and stage tags carried by errors)
"""

from enum import Enum


# ============================================================================
# TEMPLATE FIELD NAMES
# ============================================================================

OUTPUT_FIELD_NAME = "output"          # Main rendered object
OUTPUTS_FIELD_NAME = "outputs"        # Named secondary objects
PATCH_FIELD_NAME = "patch"            # Trait patch applied to the base
PROCESSING_FIELD_NAME = "processing"  # Trait pre-process declaration
PARAMETER_FIELD_NAME = "parameter"    # User supplied parameters
CONTEXT_FIELD_NAME = "context"        # Injected execution context
CUSTOM_MESSAGE = "message"            # Status template result field
HEALTH_CHECK_POLICY = "isHealth"      # Health policy result field

# Extra objects produced by a workload definition
# (e.g. the Service of a Deployment + Service workload)
AUXILIARY_WORKLOAD = "AuxiliaryWorkload"


# ============================================================================
# BASE CONTEXT KEYS
# ============================================================================

CONTEXT_NAME = "name"
CONTEXT_APP_NAME = "appName"
CONTEXT_CONFIG = "config"


# ============================================================================
# RESOURCE LABELS
# ============================================================================

LABEL_APP_NAME = "app.oam.dev/name"
LABEL_APP_COMPONENT = "app.oam.dev/component"
LABEL_RESOURCE_TYPE = "app.oam.dev/resourceType"
LABEL_TRAIT_TYPE = "trait.oam.dev/type"
LABEL_TRAIT_RESOURCE = "trait.oam.dev/resource"

RESOURCE_TYPE_WORKLOAD = "WORKLOAD"


# ============================================================================
# RENDERER ENUMS
# ============================================================================

class RendererKind(str, Enum):
    """Renderer variants."""
    WORKLOAD = "workload"
    TRAIT = "trait"

    @property
    def label(self) -> str:
        """Prefix used in error messages and logs."""
        return f"{self.value} definition"


class RenderStage(str, Enum):
    """
    Stages of a render or verdict call.

    Carried by errors so a failure can be located without re-running.
    """
    BUILD = "build"              # Source assembly
    EVAL = "eval"                # Template evaluation
    PREPROCESS = "preprocess"    # Trait processing stage
    OUTPUT = "output"            # Wrapping the output field
    OUTPUTS = "outputs"          # Wrapping an outputs entry
    PATCH = "patch"              # Unifying a patch into the base
    CONTEXT = "context"          # Building the template context
    HEALTH = "health"            # Health policy evaluation
    STATUS = "status"            # Status template evaluation


__all__ = [
    "OUTPUT_FIELD_NAME",
    "OUTPUTS_FIELD_NAME",
    "PATCH_FIELD_NAME",
    "PROCESSING_FIELD_NAME",
    "PARAMETER_FIELD_NAME",
    "CONTEXT_FIELD_NAME",
    "CUSTOM_MESSAGE",
    "HEALTH_CHECK_POLICY",
    "AUXILIARY_WORKLOAD",
    "CONTEXT_NAME",
    "CONTEXT_APP_NAME",
    "CONTEXT_CONFIG",
    "LABEL_APP_NAME",
    "LABEL_APP_COMPONENT",
    "LABEL_RESOURCE_TYPE",
    "LABEL_TRAIT_TYPE",
    "LABEL_TRAIT_RESOURCE",
    "RESOURCE_TYPE_WORKLOAD",
    "RendererKind",
    "RenderStage",
]
