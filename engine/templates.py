# ============================================================================
# EXPRESSION RESOLUTION ENGINE
# ============================================================================
# EPOCH: 1 - DEFINITION RENDERING
# STATUS: Engine - Expression resolution with Jinja2
# PURPOSE: Resolve {{ }} expressions in definition template values
# CREATED: 19 OCT 2026
# ============================================================================
"""
Expression Resolution Engine

Resolves template expressions in the values of a parsed definition template.
Every top-level field of the document is a variable.

Supported patterns:
- {{ parameter.image }}                    - User parameters
- {{ context.name }}                       - Injected execution context
- {{ output.metadata.name }}               - Another field of the same template
- {{ context.output.status.readyReplicas == context.output.spec.replicas }}

Examples:
    output:
      apiVersion: apps/v1
      kind: Deployment
      spec:
        replicas: "{{ parameter.replicas }}"
        template:
          metadata:
            labels:
              app.oam.dev/component: "{{ context.name }}"

A value made of a single expression keeps the native type of the result;
mixed text renders to a string. Expressions touching data that is not
available yet resolve to Incomplete instead of failing.
"""

import re
from typing import Any, Dict

from jinja2 import (
    BaseLoader,
    StrictUndefined,
    TemplateError,
    TemplateSyntaxError,
    Undefined,
    UndefinedError,
)
from jinja2.sandbox import SandboxedEnvironment

from core.errors import EvalError
from engine.value import Incomplete, Literal, LiteralKey


class ExpressionResolver:
    """
    Jinja2-based resolver for template values.

    Expressions run in a sandboxed environment; results are data only.

    Thread-safe, can be reused across multiple resolutions.
    """

    def __init__(self):
        """Initialize the resolver with a Jinja2 environment."""
        self._env = SandboxedEnvironment(
            loader=BaseLoader(),
            autoescape=False,
            # Keep undefined as undefined for incomplete detection
            undefined=StrictUndefined,
        )
        # Simple pattern for quick detection
        self._template_pattern = re.compile(r'\{\{.*?\}\}', re.DOTALL)

    def resolve(self, value: Any, scope: Dict[str, Any]) -> Any:
        """
        Resolve all template expressions in a value.

        Args:
            value: Raw tree (mapping, list or scalar)
            scope: Variables visible to expressions

        Returns:
            New tree with expressions replaced by results or Incomplete

        Raises:
            EvalError: If an expression is malformed or fails on concrete data
        """
        return self._resolve_value(value, to_scope(scope))

    def _resolve_value(self, value: Any, scope: Dict[str, Any]) -> Any:
        """Recursively resolve template expressions in a value."""
        if isinstance(value, Literal):
            return value
        if isinstance(value, str):
            return self._resolve_string(value, scope)
        elif isinstance(value, dict):
            return {k: self._resolve_value(v, scope) for k, v in value.items()}
        elif isinstance(value, list):
            return [self._resolve_value(item, scope) for item in value]
        elif isinstance(value, Incomplete):
            return self._resolve_string(value.expression, scope)
        else:
            return value

    def _resolve_string(self, value: str, scope: Dict[str, Any]) -> Any:
        """Resolve template expressions in a string value."""
        # Quick check: if no template markers, return as-is
        if '{{' not in value:
            return value

        # A single expression keeps the native result type
        stripped = value.strip()
        if stripped.startswith('{{') and stripped.endswith('}}'):
            inner = stripped[2:-2].strip()
            if '{{' not in inner and '}}' not in inner:
                try:
                    expression = self._env.compile_expression(inner, undefined_to_none=False)
                    return from_native(expression(**scope), value)
                except UndefinedError as e:
                    return Incomplete(value, str(e))
                except TemplateSyntaxError as e:
                    raise EvalError(f"invalid expression '{value}': {e}") from e
                except (TemplateError, TypeError, ValueError, ArithmeticError, LookupError) as e:
                    raise EvalError(f"failed to evaluate '{value}': {e}") from e

        # Multiple expressions or mixed content - render as string
        try:
            return Literal(self._env.from_string(value).render(scope))
        except UndefinedError as e:
            return Incomplete(value, str(e))
        except TemplateSyntaxError as e:
            raise EvalError(f"invalid template '{value}': {e}") from e
        except (TemplateError, TypeError, ValueError, ArithmeticError, LookupError) as e:
            raise EvalError(f"failed to render '{value}': {e}") from e

    def has_templates(self, value: Any) -> bool:
        """Check if a tree contains any unresolved expressions."""
        if isinstance(value, Incomplete):
            return True
        if isinstance(value, Literal):
            return False
        if isinstance(value, str):
            return bool(self._template_pattern.search(value))
        elif isinstance(value, dict):
            return any(self.has_templates(v) for v in value.values())
        elif isinstance(value, list):
            return any(self.has_templates(item) for item in value)
        return False


def to_scope(value: Any) -> Any:
    """
    Prepare a tree for use as expression variables.

    Incomplete leaves and unresolved expressions become StrictUndefined so
    any use of them marks the dependent expression incomplete.
    """
    if isinstance(value, Incomplete):
        return StrictUndefined(hint=f"incomplete value '{value.expression}'")
    if isinstance(value, Literal):
        return value
    if isinstance(value, str) and '{{' in value:
        return StrictUndefined(hint=f"unresolved expression '{value}'")
    if isinstance(value, dict):
        return {k: to_scope(v) for k, v in value.items()}
    if isinstance(value, list):
        return [to_scope(item) for item in value]
    return value


def from_native(result: Any, expression: str) -> Any:
    """Normalize an expression result back into tree data."""
    if isinstance(result, Undefined):
        return Incomplete(expression, "undefined value")
    if isinstance(result, str):
        return Literal(result)
    if result is None or isinstance(result, (bool, int, float)):
        return result
    if isinstance(result, dict):
        return {
            k if isinstance(k, LiteralKey) else str(k): from_native(v, expression)
            for k, v in result.items()
        }
    if isinstance(result, (list, tuple)):
        return [from_native(item, expression) for item in result]
    raise EvalError(
        f"expression '{expression}' produced unsupported type {type(result).__name__}"
    )


# ============================================================================
# CONVENIENCE FUNCTIONS
# ============================================================================

_resolver = None


def get_resolver() -> ExpressionResolver:
    """Get shared expression resolver instance."""
    global _resolver
    if _resolver is None:
        _resolver = ExpressionResolver()
    return _resolver


__all__ = [
    "ExpressionResolver",
    "to_scope",
    "from_native",
    "get_resolver",
]
