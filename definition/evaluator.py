# ============================================================================
# EXPRESSION EVALUATOR
# ============================================================================
# EPOCH: 1 - DEFINITION RENDERING
# STATUS: Definition - Health and status verdicts
# PURPOSE: Evaluate a short template against a JSON template context
# CREATED: 19 OCT 2026
# ============================================================================
"""
Expression Evaluator

The template context is serialized to JSON and prepended as a `context`
field, then the template is compiled and one field is read:

    context: {"appName": "shop", "output": {...live object...}}
    isHealth: "{{ context.output.status.readyReplicas == context.output.spec.replicas }}"

- health: field `isHealth`, must be a bool
- status: field `message`, must be a string

Strings of the injected context are data, never expressions.
"""

from typing import Any, Dict

from core.contracts import CONTEXT_FIELD_NAME, CUSTOM_MESSAGE, HEALTH_CHECK_POLICY
from core.errors import DefinitionError, EvaluationError
from core.logging import get_logger, ComponentType
from core.models import json_field_source
from engine.instance import compile_source
from engine.value import ValueKind

logger = get_logger(__name__, ComponentType.EVALUATOR)


def evaluate(
    template_context: Dict[str, Any],
    template: str,
    field_path: str,
    expected_kind: ValueKind,
) -> Any:
    """
    Evaluate a template against a context and read one typed field.

    Args:
        template_context: JSON-serializable root context
        template: Template text (YAML with {{ }} expressions)
        field_path: Field to read (e.g. "isHealth")
        expected_kind: Required kind of the field

    Returns:
        Field value of the expected kind

    Raises:
        EvaluationError: Serialization, compilation, missing field,
            incomplete value or kind mismatch
    """
    try:
        context_file = json_field_source(CONTEXT_FIELD_NAME, template_context)
    except (TypeError, ValueError) as e:
        raise EvaluationError("json marshal template context") from e

    buff = f"{context_file}\n{template}"
    try:
        instance = compile_source(buff, literal_fields=(CONTEXT_FIELD_NAME,))
    except DefinitionError as e:
        raise EvaluationError(f"compile {field_path} template") from e

    try:
        return instance.lookup(field_path).as_kind(expected_kind)
    except DefinitionError as e:
        raise EvaluationError(f"evaluate {field_path}", field=field_path) from e


def check_health(template_context: Dict[str, Any], health_policy_template: str) -> bool:
    """Evaluate the `isHealth` field of a health policy."""
    healthy = evaluate(
        template_context, health_policy_template, HEALTH_CHECK_POLICY, ValueKind.BOOL
    )
    logger.debug(f"Health policy evaluated to {healthy}")
    return healthy


def get_status_message(template_context: Dict[str, Any], custom_status_template: str) -> str:
    """Evaluate the `message` field of a custom status template."""
    return evaluate(
        template_context, custom_status_template, CUSTOM_MESSAGE, ValueKind.STRING
    )


__all__ = ["evaluate", "check_health", "get_status_message"]
