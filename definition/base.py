# ============================================================================
# DEFINITION RENDERER BASE
# ============================================================================
# EPOCH: 1 - DEFINITION RENDERING
# STATUS: Definition - Shared renderer surface
# PURPOSE: Render, health check and status entry points for definitions
# CREATED: 19 OCT 2026
# ============================================================================
"""
Definition Renderer Base

Public surface shared by workload and trait renderers:

    renderer = WorkloadRenderer("webservice").with_params({"image": "nginx"})
    renderer.complete(ctx, template)                     # render into ctx
    renderer.health_check(ctx, reader, "default", policy)  # -> bool
    renderer.status(ctx, reader, "default", template)      # -> str

Renderers are immutable: with_params returns a new renderer, and every
render goes through a frozen RenderRequest.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from core.contracts import RendererKind, RenderStage
from core.errors import BuildError, DefinitionError, EvalError
from core.logging import get_logger, log_checkpoint, log_context, ComponentType
from core.models import RenderRequest
from cluster.reader import ClusterReader
from definition.evaluator import check_health, get_status_message
from engine.instance import Instance, Source, build
from process.context import ExecutionContext

logger = get_logger(__name__, ComponentType.RENDERER)


def _tag(error: DefinitionError, renderer: str, stage: RenderStage) -> None:
    """Attach renderer identity and stage to an error that has none."""
    if error.renderer is None:
        error.renderer = renderer
    if error.stage is None:
        error.stage = stage.value


class DefinitionRenderer(ABC):
    """
    Base class for definition renderers.

    Attributes:
        kind: Renderer variant (workload or trait)
        name: Definition name (e.g. "webservice", "ingress")
        params: User parameters injected as `parameter`
    """

    kind: RendererKind = RendererKind.WORKLOAD

    def __init__(self, name: str, params: Optional[Any] = None):
        self._name = name
        self._params = params

    @property
    def name(self) -> str:
        return self._name

    @property
    def params(self) -> Optional[Any]:
        return self._params

    @property
    def label(self) -> str:
        """Renderer identity used in errors ("workload definition webservice")."""
        return f"{self.kind.label} {self._name}"

    def with_params(self, params: Optional[Any]) -> "DefinitionRenderer":
        """Return a copy of this renderer with params set."""
        clone = self._copy()
        clone._params = params
        return clone

    def _copy(self) -> "DefinitionRenderer":
        clone = object.__new__(type(self))
        clone.__dict__.update(self.__dict__)
        return clone

    # ------------------------------------------------------------------
    # RENDER
    # ------------------------------------------------------------------

    def request(self, ctx: ExecutionContext, template: str) -> RenderRequest:
        """Freeze the inputs of a render."""
        return RenderRequest(
            template=template,
            params=self._params,
            base_context=ctx.base_context_file(),
        )

    def complete(self, ctx: ExecutionContext, template: str) -> None:
        """
        Render a template into the execution context.

        Raises:
            DefinitionError: Any render failure (build, eval, wrap, patch)
        """
        request = self.request(ctx, template)
        with log_context(
            app_name=ctx.app_name,
            component=ctx.name,
            definition=self._name,
            operation="render",
        ):
            self.render(request, ctx)
            log_checkpoint(f"{self.kind.value}_rendered", {"definition": self._name})

    @abstractmethod
    def render(self, request: RenderRequest, ctx: ExecutionContext) -> None:
        """Render a frozen request into the execution context."""
        pass

    def build_instance(self, request: RenderRequest) -> Instance:
        """
        Assemble and evaluate the template sources of a request.

        Sources: template, `parameter: <json>` (when params were given),
        and the execution context file.

        Raises:
            BuildError: Malformed template or parameters
            EvalError: Evaluation failure, tagged with stage "eval"
        """
        sources: List[Source] = [Source("template", request.template)]
        try:
            parameter_file = request.parameter_file()
        except BuildError as e:
            _tag(e, self.label, RenderStage.BUILD)
            raise
        if parameter_file is not None:
            sources.append(Source("parameter", parameter_file, literal=True, override=True))
        if request.base_context:
            sources.append(Source("context", request.base_context, literal=True))

        try:
            instance = build(sources)
        except BuildError as e:
            raise BuildError(
                "build template", renderer=self.label, stage=RenderStage.BUILD
            ) from e
        except EvalError as e:
            raise EvalError(
                "evaluate template", renderer=self.label, stage=RenderStage.EVAL
            ) from e

        logger.debug(f"Evaluated {self.label} from {len(sources)} sources")
        return instance

    # ------------------------------------------------------------------
    # HEALTH & STATUS
    # ------------------------------------------------------------------

    @abstractmethod
    def get_template_context(
        self,
        ctx: ExecutionContext,
        cluster: ClusterReader,
        namespace: str,
    ) -> Dict[str, Any]:
        """Root context for health and status templates."""
        pass

    def _template_context(
        self,
        ctx: ExecutionContext,
        cluster: ClusterReader,
        namespace: str,
    ) -> Dict[str, Any]:
        try:
            return self.get_template_context(ctx, cluster, namespace)
        except DefinitionError as e:
            _tag(e, self.label, RenderStage.CONTEXT)
            logger.warning(f"Get template context for {self.label} failed: {e}")
            raise

    def health_check(
        self,
        ctx: ExecutionContext,
        cluster: ClusterReader,
        namespace: str,
        health_policy_template: str,
    ) -> bool:
        """
        Evaluate the health policy against live resources.

        An empty policy is a vacuous pass.

        Raises:
            DefinitionError: Context building or evaluation failure
        """
        if not health_policy_template:
            return True
        with log_context(
            app_name=ctx.app_name,
            component=ctx.name,
            definition=self._name,
            namespace=namespace,
            operation="health_check",
        ):
            template_context = self._template_context(ctx, cluster, namespace)
            try:
                healthy = check_health(template_context, health_policy_template)
            except DefinitionError as e:
                _tag(e, self.label, RenderStage.HEALTH)
                raise
            log_checkpoint("health_checked", {"definition": self._name, "healthy": healthy})
            return healthy

    def status(
        self,
        ctx: ExecutionContext,
        cluster: ClusterReader,
        namespace: str,
        custom_status_template: str,
    ) -> str:
        """
        Evaluate the custom status template against live resources.

        An empty template yields "".

        Raises:
            DefinitionError: Context building or evaluation failure
        """
        if not custom_status_template:
            return ""
        with log_context(
            app_name=ctx.app_name,
            component=ctx.name,
            definition=self._name,
            namespace=namespace,
            operation="status",
        ):
            template_context = self._template_context(ctx, cluster, namespace)
            try:
                message = get_status_message(template_context, custom_status_template)
            except DefinitionError as e:
                _tag(e, self.label, RenderStage.STATUS)
                raise
            log_checkpoint("status_evaluated", {"definition": self._name})
            return message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r})"


__all__ = ["DefinitionRenderer"]
