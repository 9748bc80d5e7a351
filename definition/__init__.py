"""
Definition renderers.

Exports:
    WorkloadRenderer: Renders workload templates into the Base
    TraitRenderer: Renders trait templates (auxiliaries, patches)
    DefinitionRenderer: Shared renderer surface
    TemplateContextBuilder: Health/status root context from live objects
    LiveResourceResolver: Rendered object -> live cluster object
    AuxiliaryOutputCollector: `outputs` field -> auxiliaries
    evaluate, check_health, get_status_message: Expression evaluation
"""

from .base import DefinitionRenderer
from .context_builder import (
    TemplateContextBuilder,
    get_trait_template_context,
    get_workload_template_context,
)
from .evaluator import check_health, evaluate, get_status_message
from .outputs import AuxiliaryOutputCollector
from .resolver import LiveResourceResolver, get_resource_from_obj
from .trait import TraitRenderer
from .workload import WorkloadRenderer

__all__ = [
    "DefinitionRenderer",
    "WorkloadRenderer",
    "TraitRenderer",
    "TemplateContextBuilder",
    "get_workload_template_context",
    "get_trait_template_context",
    "LiveResourceResolver",
    "get_resource_from_obj",
    "AuxiliaryOutputCollector",
    "evaluate",
    "check_health",
    "get_status_message",
]
