# ============================================================================
# TEMPLATE CONTEXT BUILDER
# ============================================================================
# EPOCH: 1 - DEFINITION RENDERING
# STATUS: Definition - Root context for health and status templates
# PURPOSE: Resolve rendered objects to live ones and assemble the root
# CREATED: 19 OCT 2026
# ============================================================================
"""
Template Context Builder

Builds the root mapping a health policy or status template is evaluated
against:

    {
        "name": "frontend",                 # base-context labels, verbatim
        "appName": "shop",
        "output": {...live object...},
        "outputs": {"service": {...}},      # when a named output resolved
    }

Label sets used for the live lookup:
- workload base:      app.oam.dev/resourceType=WORKLOAD + common labels
- workload outputs:   trait.oam.dev/type=AuxiliaryWorkload + common labels
- trait auxiliaries:  trait.oam.dev/type=<trait name> + common labels

Common labels come from the `appName` and `name` base-context keys only.

Known behavior: every named auxiliary replaces `outputs` instead of
merging into it, so only the last one is visible to the template.
"""

from typing import Any, Dict, Tuple

from core.contracts import (
    AUXILIARY_WORKLOAD,
    CONTEXT_APP_NAME,
    CONTEXT_NAME,
    LABEL_APP_COMPONENT,
    LABEL_APP_NAME,
    LABEL_RESOURCE_TYPE,
    LABEL_TRAIT_TYPE,
    OUTPUT_FIELD_NAME,
    OUTPUTS_FIELD_NAME,
    RESOURCE_TYPE_WORKLOAD,
)
from core.errors import ConfigError
from core.logging import get_logger, ComponentType
from cluster.reader import ClusterReader
from definition.resolver import LiveResourceResolver
from process.context import ExecutionContext

logger = get_logger(__name__, ComponentType.RESOLVER)


def _common_root(ctx: ExecutionContext) -> Tuple[Dict[str, Any], Dict[str, str]]:
    """Root seeded with base-context labels, plus the common label set."""
    root: Dict[str, Any] = {}
    common_labels: Dict[str, str] = {}
    for key, value in ctx.base_context_labels().items():
        if key == CONTEXT_APP_NAME:
            common_labels[LABEL_APP_NAME] = value
        elif key == CONTEXT_NAME:
            common_labels[LABEL_APP_COMPONENT] = value
        root[key] = value
    return root, common_labels


def _with_common(labels: Dict[str, str], common_labels: Dict[str, str]) -> Dict[str, str]:
    merged = dict(labels)
    merged.update(common_labels)
    return merged


class TemplateContextBuilder:
    """Assembles health/status root contexts from live resources."""

    def __init__(self, cluster: ClusterReader, namespace: str):
        self.namespace = namespace
        self._resolver = LiveResourceResolver(cluster)

    def for_workload(self, ctx: ExecutionContext) -> Dict[str, Any]:
        """
        Root context for a workload definition.

        Raises:
            ConfigError: No base rendered yet, or an unnamed workload auxiliary
            ResolveError: Live lookup failure
        """
        root, common_labels = _common_root(ctx)
        base, auxiliaries = ctx.output()
        if base is None:
            raise ConfigError(f"component {ctx.name} has no rendered workload")

        labels = _with_common({LABEL_RESOURCE_TYPE: RESOURCE_TYPE_WORKLOAD}, common_labels)
        root[OUTPUT_FIELD_NAME] = self._resolver.resolve(
            base.unstructured(), self.namespace, labels
        )

        for aux in auxiliaries:
            if aux.type != AUXILIARY_WORKLOAD:
                continue
            if not aux.name:
                raise ConfigError("auxiliary of workload must have a name")
            labels = _with_common({LABEL_TRAIT_TYPE: AUXILIARY_WORKLOAD}, common_labels)
            resolved = self._resolver.resolve(
                aux.ins.unstructured(), self.namespace, labels, aux.name
            )
            root[OUTPUTS_FIELD_NAME] = {aux.name: resolved}

        logger.debug(f"Built workload template context for component {ctx.name}")
        return root

    def for_trait(self, ctx: ExecutionContext, trait_name: str) -> Dict[str, Any]:
        """
        Root context for a trait definition.

        Only auxiliaries produced by `trait_name` are resolved.

        Raises:
            ConfigError: A named-output auxiliary without a name
            ResolveError: Live lookup failure
        """
        root, common_labels = _common_root(ctx)
        _, auxiliaries = ctx.output()

        for aux in auxiliaries:
            if aux.type != trait_name:
                continue
            if aux.is_outputs and not aux.name:
                raise ConfigError(f"outputs auxiliary of trait {trait_name} must have a name")
            labels = _with_common({LABEL_TRAIT_TYPE: aux.type}, common_labels)
            outputs_resource = aux.name if aux.is_outputs else ""
            resolved = self._resolver.resolve(
                aux.ins.unstructured(), self.namespace, labels, outputs_resource
            )
            if aux.is_outputs:
                root[OUTPUTS_FIELD_NAME] = {aux.name: resolved}
            else:
                root[OUTPUT_FIELD_NAME] = resolved

        logger.debug(f"Built trait template context for {trait_name} of component {ctx.name}")
        return root


def get_workload_template_context(
    ctx: ExecutionContext, cluster: ClusterReader, namespace: str
) -> Dict[str, Any]:
    return TemplateContextBuilder(cluster, namespace).for_workload(ctx)


def get_trait_template_context(
    ctx: ExecutionContext, cluster: ClusterReader, namespace: str, trait_name: str
) -> Dict[str, Any]:
    return TemplateContextBuilder(cluster, namespace).for_trait(ctx, trait_name)


__all__ = [
    "TemplateContextBuilder",
    "get_workload_template_context",
    "get_trait_template_context",
]
