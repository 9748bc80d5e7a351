# ============================================================================
# AUXILIARY OUTPUT COLLECTOR
# ============================================================================
# EPOCH: 1 - DEFINITION RENDERING
# STATUS: Definition - Secondary outputs of a template
# PURPOSE: Filter and wrap `outputs` entries into Auxiliaries
# CREATED: 19 OCT 2026
# ============================================================================
"""
Auxiliary Output Collector

Reads the `outputs` struct of an evaluated template. Fields flagged as
definition ("#x"), hidden ("_x") or optional ("x?") are skipped for every
renderer; each remaining field becomes an Auxiliary named after the field,
in declaration order.

Collection is all-or-nothing: if any entry fails to wrap, nothing is
registered and the error names the entry.
"""

from typing import List

from core.contracts import OUTPUTS_FIELD_NAME, RenderStage
from core.errors import WrapError
from core.logging import get_logger, ComponentType
from core.models import Auxiliary
from engine.instance import Instance
from engine.model import RenderedObject
from engine.value import ValueKind
from process.context import ExecutionContext

logger = get_logger(__name__, ComponentType.RENDERER)


class AuxiliaryOutputCollector:
    """Collects `outputs` entries for one producer."""

    def __init__(self, producer_type: str, renderer_label: str):
        """
        Args:
            producer_type: Auxiliary type (trait name or AUXILIARY_WORKLOAD)
            renderer_label: Renderer identity for error messages
        """
        self.producer_type = producer_type
        self.renderer_label = renderer_label

    def collect(self, instance: Instance) -> List[Auxiliary]:
        """
        Wrap every regular `outputs` field.

        Returns:
            Auxiliaries in declaration order (empty if `outputs` is absent
            or not a struct)

        Raises:
            WrapError: If an entry cannot be wrapped
        """
        outputs = instance.lookup(OUTPUTS_FIELD_NAME)
        if outputs.kind is not ValueKind.STRUCT:
            return []

        auxiliaries = []
        skipped = 0
        for field_info in outputs.as_struct():
            if field_info.is_definition or field_info.is_hidden or field_info.is_optional:
                skipped += 1
                continue
            try:
                other = RenderedObject.new_other(field_info.value)
            except WrapError as e:
                raise WrapError(
                    f"wrap outputs entry {field_info.name}",
                    renderer=self.renderer_label,
                    stage=RenderStage.OUTPUTS,
                    field=field_info.name,
                ) from e
            auxiliaries.append(Auxiliary(
                ins=other,
                type=self.producer_type,
                name=field_info.name,
                is_outputs=True,
            ))

        logger.debug(
            f"Collected {len(auxiliaries)} outputs for {self.renderer_label} "
            f"(skipped {skipped} flagged fields)"
        )
        return auxiliaries

    def register(self, instance: Instance, ctx: ExecutionContext) -> List[Auxiliary]:
        """Collect and put the auxiliaries into the execution context."""
        auxiliaries = self.collect(instance)
        ctx.put_auxiliaries(*auxiliaries)
        return auxiliaries


__all__ = ["AuxiliaryOutputCollector"]
