# ============================================================================
# TEMPLATE ENGINE
# ============================================================================
# EPOCH: 1 - DEFINITION RENDERING
# STATUS: Engine - Template evaluation components
# PURPOSE: Parse, unify and evaluate definition templates
# CREATED: 19 OCT 2026
# ============================================================================
"""
Template Engine Components

- value: tagged-union view over evaluated fields
- unify: merge rules for sources and patches
- templates: Jinja2-based expression resolution
- instance: build/compile of template sources
- model: rendered objects kept in an execution context
"""

from engine.value import (
    ValueKind,
    Value,
    FieldInfo,
    Incomplete,
    Literal,
    LiteralKey,
)
from engine.unify import unify, override_merge
from engine.templates import ExpressionResolver, get_resolver
from engine.instance import Source, Instance, build, compile_source
from engine.model import RenderedObject

__all__ = [
    # Values
    "ValueKind",
    "Value",
    "FieldInfo",
    "Incomplete",
    "Literal",
    "LiteralKey",
    # Unification
    "unify",
    "override_merge",
    # Expressions
    "ExpressionResolver",
    "get_resolver",
    # Instances
    "Source",
    "Instance",
    "build",
    "compile_source",
    # Model
    "RenderedObject",
]
