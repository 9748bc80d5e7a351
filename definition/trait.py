# ============================================================================
# TRAIT RENDERER
# ============================================================================
# EPOCH: 1 - DEFINITION RENDERING
# STATUS: Definition - Supplementary resources and patches
# PURPOSE: Render a trait template on top of a rendered workload
# CREATED: 19 OCT 2026
# ============================================================================
"""
Trait Renderer

Template fields, applied in this order:
    processing:  external data fetched before outputs are wrapped
    output:      one auxiliary object (type = trait name, unnamed)
    outputs:     named auxiliary objects (type = trait name)
    patch:       unified into the Base of the execution context

A trait's `output` never replaces the Base.
"""

from typing import Any, Dict, Optional

from core.contracts import (
    OUTPUT_FIELD_NAME,
    PATCH_FIELD_NAME,
    PROCESSING_FIELD_NAME,
    RendererKind,
    RenderStage,
)
from core.errors import PatchError, PreProcessError, WrapError
from core.logging import get_logger, ComponentType
from core.models import Auxiliary, RenderRequest
from cluster.reader import ClusterReader
from definition.base import DefinitionRenderer, _tag
from definition.context_builder import TemplateContextBuilder
from definition.outputs import AuxiliaryOutputCollector
from engine.instance import Instance
from engine.model import RenderedObject
from process.context import ExecutionContext
from process.preprocess import HttpPreProcessor, PreProcessor

logger = get_logger(__name__, ComponentType.RENDERER)


class TraitRenderer(DefinitionRenderer):
    """Renders trait definitions."""

    kind = RendererKind.TRAIT

    def __init__(
        self,
        name: str,
        params: Optional[Any] = None,
        preprocessor: Optional[PreProcessor] = None,
    ):
        super().__init__(name, params)
        self._preprocessor = preprocessor or HttpPreProcessor()

    @property
    def preprocessor(self) -> PreProcessor:
        return self._preprocessor

    def render(self, request: RenderRequest, ctx: ExecutionContext) -> None:
        """
        Render a trait template.

        Raises:
            BuildError: Malformed template or parameters
            EvalError: Evaluation failure
            PreProcessError: `processing` stage failure
            WrapError: `output`, an `outputs` entry or `patch` cannot be wrapped
            PatchError: `patch` conflicts with the Base
        """
        instance = self.build_instance(request)

        if instance.lookup(PROCESSING_FIELD_NAME).exists():
            instance = self._preprocess(instance)

        output = instance.lookup(OUTPUT_FIELD_NAME)
        if output.exists():
            try:
                other = RenderedObject.new_other(output)
            except WrapError as e:
                raise WrapError(
                    f"wrap {OUTPUT_FIELD_NAME}",
                    renderer=self.label,
                    stage=RenderStage.OUTPUT,
                    field=OUTPUT_FIELD_NAME,
                ) from e
            ctx.put_auxiliaries(Auxiliary(ins=other, type=self.name))

        AuxiliaryOutputCollector(self.name, self.label).register(instance, ctx)

        patch = instance.lookup(PATCH_FIELD_NAME)
        if patch.exists():
            self._patch(patch, ctx)

        logger.info(f"Rendered {self.label} for component {ctx.name}")

    def _preprocess(self, instance: Instance) -> Instance:
        try:
            return self._preprocessor.transform(instance)
        except PreProcessError as e:
            _tag(e, self.label, RenderStage.PREPROCESS)
            raise

    def _patch(self, patch, ctx: ExecutionContext) -> None:
        base, _ = ctx.output()
        if base is None:
            logger.warning(
                f"{self.label} declares a patch but component {ctx.name} "
                f"has no base yet; patch skipped"
            )
            return

        try:
            patch_obj = RenderedObject.new_other(patch)
        except WrapError as e:
            raise WrapError(
                f"wrap {PATCH_FIELD_NAME}",
                renderer=self.label,
                stage=RenderStage.PATCH,
                field=PATCH_FIELD_NAME,
            ) from e

        try:
            base.unify(patch_obj)
        except PatchError as e:
            raise PatchError(
                f"invalid patch trait {self.name} into workload",
                renderer=self.label,
                stage=RenderStage.PATCH,
                field=e.field,
            ) from e

    def get_template_context(
        self,
        ctx: ExecutionContext,
        cluster: ClusterReader,
        namespace: str,
    ) -> Dict[str, Any]:
        return TemplateContextBuilder(cluster, namespace).for_trait(ctx, self.name)


__all__ = ["TraitRenderer"]
