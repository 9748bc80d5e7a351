# ============================================================================
# ERROR HIERARCHY
# ============================================================================
# EPOCH: 1 - DEFINITION RENDERING
# STATUS: Foundation - Exceptions raised by the engine
# PURPOSE: Terminal, self-describing errors for render and verdict calls
# CREATED: 19 OCT 2026
# ============================================================================
"""
Error Hierarchy

Every failure is terminal for the current call and propagated to the caller,
who decides whether to retry (e.g. via reconciliation backoff).

Errors keep enough context to diagnose without re-running:
- renderer: "<kind> definition <name>"
- stage: RenderStage value
- field: template field or outputs entry involved
- details: free-form diagnostics (gvk, labels, path)

Hierarchy:
    DefinitionError
    ├── BuildError
    ├── EvalError
    │   ├── FieldError
    │   │   ├── FieldNotFoundError
    │   │   ├── KindMismatchError
    │   │   └── IncompleteValueError
    │   ├── UnifyConflictError
    │   └── EvaluationError
    ├── WrapError
    ├── PatchError
    ├── PreProcessError
    ├── ConfigError
    └── ResolveError
        ├── ResourceNotFoundError
        └── AmbiguousResourceError
"""

from typing import Any, Dict, Optional


class DefinitionError(Exception):
    """Base class for all engine errors."""

    def __init__(
        self,
        message: str,
        *,
        renderer: Optional[str] = None,
        stage: Optional[str] = None,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.renderer = renderer
        self.stage = getattr(stage, "value", stage)
        self.field = field
        self.details = details or {}

    def __str__(self) -> str:
        prefix = " ".join(p for p in (self.renderer, self.stage) if p)
        if self.field:
            prefix = f"{prefix}({self.field})" if prefix else f"({self.field})"
        message = f"{prefix}: {self.message}" if prefix else self.message
        if self.__cause__ is not None:
            message = f"{message}: {self.__cause__}"
        return message

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for structured logging."""
        result = {
            "error": type(self).__name__,
            "message": self.message,
        }
        if self.renderer:
            result["renderer"] = self.renderer
        if self.stage:
            result["stage"] = self.stage
        if self.field:
            result["field"] = self.field
        if self.details:
            result["details"] = self.details
        if self.__cause__ is not None:
            result["cause"] = str(self.__cause__)
        return result


class BuildError(DefinitionError):
    """Malformed template or parameter injection."""
    pass


class EvalError(DefinitionError):
    """Template evaluation failed."""
    pass


class FieldError(EvalError):
    """A typed field access failed."""

    def __init__(self, message: str, *, path: str = "", **kwargs):
        kwargs.setdefault("field", path or None)
        super().__init__(message, **kwargs)
        self.path = path


class FieldNotFoundError(FieldError):
    """Field does not exist."""
    pass


class KindMismatchError(FieldError):
    """Field exists but holds another kind of value."""

    def __init__(self, message: str, *, expected: str = "", actual: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.expected = expected
        self.actual = actual


class IncompleteValueError(FieldError):
    """Field still depends on values that never became available."""
    pass


class UnifyConflictError(EvalError):
    """Two values cannot be unified."""

    def __init__(self, message: str, *, path: str = "", **kwargs):
        kwargs.setdefault("field", path or None)
        super().__init__(message, **kwargs)
        self.path = path


class EvaluationError(EvalError):
    """Health or status template could not produce a verdict."""
    pass


class WrapError(DefinitionError):
    """Value cannot be converted into the generic object model."""
    pass


class PatchError(DefinitionError):
    """Trait patch conflicts with the base."""
    pass


class PreProcessError(DefinitionError):
    """Trait pre-process stage failed."""
    pass


class ConfigError(DefinitionError):
    """Execution context violates a naming or presence invariant."""
    pass


class ResolveError(DefinitionError):
    """Live resource lookup failed."""

    def __init__(
        self,
        message: str,
        *,
        gvk: Optional[str] = None,
        namespace: Optional[str] = None,
        labels: Optional[Dict[str, str]] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", None) or {}
        if gvk:
            details["gvk"] = gvk
        if namespace is not None:
            details["namespace"] = namespace
        if labels is not None:
            details["labels"] = dict(labels)
        super().__init__(message, details=details, **kwargs)
        self.gvk = gvk
        self.namespace = namespace
        self.labels = dict(labels) if labels is not None else None


class ResourceNotFoundError(ResolveError):
    """No live object matches."""
    pass


class AmbiguousResourceError(ResolveError):
    """Several live objects match and none carries the outputs label."""
    pass


__all__ = [
    "DefinitionError",
    "BuildError",
    "EvalError",
    "FieldError",
    "FieldNotFoundError",
    "KindMismatchError",
    "IncompleteValueError",
    "UnifyConflictError",
    "EvaluationError",
    "WrapError",
    "PatchError",
    "PreProcessError",
    "ConfigError",
    "ResolveError",
    "ResourceNotFoundError",
    "AmbiguousResourceError",
]
