# ============================================================================
# EXECUTION CONTEXT
# ============================================================================
# EPOCH: 1 - DEFINITION RENDERING
# STATUS: Process - Per-component render accumulator
# PURPOSE: Carry base, auxiliaries and context labels through a render
# CREATED: 19 OCT 2026
# ============================================================================
"""
Execution Context

One ExecutionContext belongs to exactly one component render pipeline:
the workload renders first, then each trait in order. It is not shared
between components and is not thread-safe.

Injected into every template as the `context` field:
    context:
      name: <component name>
      appName: <application name>
      output: <current base>               (once a workload rendered)
      outputs: {<name>: <object>, ...}     (named auxiliaries)
      config: [...]                        (when configs were supplied)
"""

from typing import Any, Dict, List, Optional, Tuple

from core.contracts import (
    CONTEXT_APP_NAME,
    CONTEXT_CONFIG,
    CONTEXT_FIELD_NAME,
    CONTEXT_NAME,
    OUTPUT_FIELD_NAME,
    OUTPUTS_FIELD_NAME,
)
from core.logging import get_logger, ComponentType
from core.models import Auxiliary, json_field_source
from engine.model import RenderedObject

logger = get_logger(__name__, ComponentType.RENDERER)


class ExecutionContext:
    """Base + ordered auxiliaries of one component."""

    def __init__(
        self,
        name: str,
        app_name: str,
        configs: Optional[List[Dict[str, str]]] = None,
    ):
        self.name = name
        self.app_name = app_name
        self._configs = list(configs or [])
        self._base: Optional[RenderedObject] = None
        self._auxiliaries: List[Auxiliary] = []

    def set_base(self, base: RenderedObject) -> None:
        """Install the base, replacing any previous one."""
        if self._base is not None:
            logger.debug(f"Replacing base of component {self.name}")
        self._base = base

    def put_auxiliaries(self, *auxiliaries: Auxiliary) -> None:
        """Append auxiliaries in order."""
        self._auxiliaries.extend(auxiliaries)

    def insert_configs(self, configs: List[Dict[str, str]]) -> None:
        self._configs.extend(configs)

    def output(self) -> Tuple[Optional[RenderedObject], List[Auxiliary]]:
        """Current base (None before a workload render) and auxiliaries."""
        return self._base, list(self._auxiliaries)

    def base_context_labels(self) -> Dict[str, str]:
        return {
            CONTEXT_APP_NAME: self.app_name,
            CONTEXT_NAME: self.name,
        }

    def base_context(self) -> Dict[str, Any]:
        """The `context` mapping injected into templates."""
        context: Dict[str, Any] = {
            CONTEXT_NAME: self.name,
            CONTEXT_APP_NAME: self.app_name,
        }
        if self._base is not None:
            context[OUTPUT_FIELD_NAME] = self._base.to_dict()
        outputs = {
            aux.name: aux.ins.to_dict()
            for aux in self._auxiliaries
            if aux.is_outputs
        }
        if outputs:
            context[OUTPUTS_FIELD_NAME] = outputs
        if self._configs:
            context[CONTEXT_CONFIG] = [dict(c) for c in self._configs]
        return context

    def base_context_file(self) -> str:
        """Template source declaring the `context` field."""
        return json_field_source(CONTEXT_FIELD_NAME, self.base_context())

    def __repr__(self) -> str:
        return (
            f"ExecutionContext(app={self.app_name!r}, name={self.name!r}, "
            f"base={self._base is not None}, auxiliaries={len(self._auxiliaries)})"
        )


__all__ = ["ExecutionContext"]
