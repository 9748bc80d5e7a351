# ============================================================================
# PROCESS MODULE
# ============================================================================
# EPOCH: 1 - DEFINITION RENDERING
# STATUS: Process - Render pipeline state and stages
# PURPOSE: Execution context and trait pre-processing
# CREATED: 19 OCT 2026
# ============================================================================
"""
Process Module

- context: ExecutionContext shared by one component's renderers
- preprocess: PreProcessor interface and HTTP implementation
"""

from process.context import ExecutionContext
from process.preprocess import PreProcessor, HttpPreProcessor

__all__ = [
    "ExecutionContext",
    "PreProcessor",
    "HttpPreProcessor",
]
