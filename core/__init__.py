# ============================================================================
# CORE MODULE
# ============================================================================
# EPOCH: 1 - DEFINITION RENDERING
# STATUS: Core module initialization
# PURPOSE: Export contracts, errors and models
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================

from core.contracts import RendererKind, RenderStage, AUXILIARY_WORKLOAD
from core.errors import DefinitionError
from core.models import RenderRequest, Auxiliary

__all__ = [
    # Enums
    "RendererKind",
    "RenderStage",
    "AUXILIARY_WORKLOAD",
    # Errors
    "DefinitionError",
    # Models
    "RenderRequest",
    "Auxiliary",
]
