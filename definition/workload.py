# ============================================================================
# WORKLOAD RENDERER
# ============================================================================
# EPOCH: 1 - DEFINITION RENDERING
# STATUS: Definition - Primary resource of a component
# PURPOSE: Render a workload template into the Base of an execution context
# CREATED: 19 OCT 2026
# ============================================================================
"""
Workload Renderer

Template fields:
    output:   the workload object; always replaces the Base
    outputs:  named auxiliary objects (type AuxiliaryWorkload)

Example:
    parameter:
      image: nginx
    output:
      apiVersion: apps/v1
      kind: Deployment
      spec:
        template:
          spec:
            containers:
              - name: "{{ context.name }}"
                image: "{{ parameter.image }}"
    outputs:
      service:
        apiVersion: v1
        kind: Service
        metadata:
          name: "{{ context.name }}"
"""

from typing import Any, Dict

from core.contracts import AUXILIARY_WORKLOAD, OUTPUT_FIELD_NAME, RendererKind, RenderStage
from core.errors import WrapError
from core.logging import get_logger, ComponentType
from core.models import RenderRequest
from cluster.reader import ClusterReader
from definition.base import DefinitionRenderer
from definition.context_builder import TemplateContextBuilder
from definition.outputs import AuxiliaryOutputCollector
from engine.model import RenderedObject
from process.context import ExecutionContext

logger = get_logger(__name__, ComponentType.RENDERER)


class WorkloadRenderer(DefinitionRenderer):
    """Renders workload definitions."""

    kind = RendererKind.WORKLOAD

    def render(self, request: RenderRequest, ctx: ExecutionContext) -> None:
        """
        Render a workload template.

        Raises:
            BuildError: Malformed template or parameters
            EvalError: Evaluation failure
            WrapError: `output` or an `outputs` entry cannot be wrapped
        """
        instance = self.build_instance(request)

        try:
            base = RenderedObject.new_base(instance.lookup(OUTPUT_FIELD_NAME))
        except WrapError as e:
            raise WrapError(
                f"wrap {OUTPUT_FIELD_NAME}",
                renderer=self.label,
                stage=RenderStage.OUTPUT,
                field=OUTPUT_FIELD_NAME,
            ) from e
        ctx.set_base(base)

        auxiliaries = AuxiliaryOutputCollector(AUXILIARY_WORKLOAD, self.label).register(instance, ctx)
        logger.info(
            f"Rendered {self.label} for component {ctx.name}: "
            f"base {base.to_dict().get('kind')}, {len(auxiliaries)} outputs"
        )

    def get_template_context(
        self,
        ctx: ExecutionContext,
        cluster: ClusterReader,
        namespace: str,
    ) -> Dict[str, Any]:
        return TemplateContextBuilder(cluster, namespace).for_workload(ctx)


__all__ = ["WorkloadRenderer"]
