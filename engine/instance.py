# ============================================================================
# TEMPLATE INSTANCES
# ============================================================================
# EPOCH: 1 - DEFINITION RENDERING
# STATUS: Engine - Build and evaluate definition templates
# PURPOSE: Parse sources, unify them, resolve expressions until stable
# CREATED: 19 OCT 2026
# ============================================================================
"""
Template Instances

An Instance is the evaluated form of one or more template sources.

Build steps:
1. Parse every source as a YAML mapping (empty source = empty mapping)
2. Mark literal sources (parameters, injected context) as verbatim data
3. Unify the sources; override sources replace conflicting values
4. Resolve expressions against the unified root, repeating until the tree
   stops changing (references between fields settle one level per pass)

Usage:
    instance = build([
        Source("template", template_text),
        Source("parameter", "parameter: {\"image\": \"nginx\"}",
               literal=True, override=True),
    ])
    output = instance.lookup("output").as_object()
"""

import copy
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Sequence

import yaml

from core.config import get_defaults
from core.errors import BuildError, EvalError, UnifyConflictError
from core.logging import get_logger, ComponentType
from engine.templates import ExpressionResolver, get_resolver
from engine.unify import override_merge, unify
from engine.value import PathLike, Value, literalize, split_path

logger = get_logger(__name__, ComponentType.ENGINE)


class TemplateLoader(yaml.SafeLoader):
    """Safe loader that also reads JSON exponent floats (1e-05) as floats."""
    pass


TemplateLoader.add_implicit_resolver(
    "tag:yaml.org,2002:float",
    re.compile(r"^[-+]?[0-9][0-9_]*(?:\.[0-9_]*)?[eE][-+]?[0-9]+$"),
    list("-+0123456789"),
)


@dataclass(frozen=True)
class Source:
    """
    One template source.

    Attributes:
        name: Source name used in error messages
        text: YAML text
        literal: Strings are data, never expressions
        override: Values replace conflicting values instead of unifying
        literal_fields: Top-level fields taken verbatim even if literal=False
    """
    name: str
    text: str
    literal: bool = False
    override: bool = False
    literal_fields: Sequence[str] = ()


def parse_source(source: Source) -> Dict[str, Any]:
    """
    Parse one source into a raw tree.

    Raises:
        BuildError: If the text is not YAML or not a mapping
    """
    try:
        data = yaml.load(source.text, Loader=TemplateLoader) if source.text else None
    except yaml.YAMLError as e:
        raise BuildError(f"parse source {source.name}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise BuildError(
            f"source {source.name} must be a mapping, got {type(data).__name__}"
        )

    data = {str(k): v for k, v in data.items()}
    if source.literal:
        return literalize(data)
    for key in source.literal_fields:
        if key in data:
            data[key] = literalize(data[key])
    return data


class Instance:
    """
    Evaluated template instance.

    Keeps the raw (unresolved) tree so the instance can be refilled and
    re-evaluated, e.g. after pre-processing.
    """

    def __init__(
        self,
        raw: Dict[str, Any],
        resolver: Optional[ExpressionResolver] = None,
        max_passes: Optional[int] = None,
    ):
        self._raw = raw
        self._resolver = resolver or get_resolver()
        self._max_passes = max_passes or get_defaults().engine.max_resolve_passes
        self._resolved = self._evaluate()

    def _evaluate(self) -> Dict[str, Any]:
        resolved = self._resolver.resolve(self._raw, self._raw)
        for _ in range(self._max_passes - 1):
            next_pass = self._resolver.resolve(self._raw, resolved)
            if next_pass == resolved:
                break
            resolved = next_pass
        else:
            logger.debug(f"Expression resolution stopped after {self._max_passes} passes")
        return resolved

    @property
    def raw(self) -> Dict[str, Any]:
        return copy.deepcopy(self._raw)

    def value(self) -> Value:
        """Root value."""
        return Value(self._resolved)

    def lookup(self, path: PathLike) -> Value:
        """Look up a (dotted) field path."""
        return self.value().lookup(path)

    def fill(self, path: PathLike, data: Any) -> "Instance":
        """
        Unify literal data into a field and re-evaluate.

        Returns:
            New Instance; this one is left untouched

        Raises:
            EvalError: If the data conflicts with the field
        """
        selectors = split_path(path)
        patch: Any = literalize(data)
        for selector in reversed(selectors):
            patch = {selector: patch}
        try:
            raw = unify(self._raw, patch)
        except UnifyConflictError as e:
            raise EvalError(f"fill {'.'.join(selectors)}") from e
        return Instance(raw, self._resolver, self._max_passes)

    def to_dict(self) -> Dict[str, Any]:
        """Resolved tree (may contain Incomplete leaves)."""
        return copy.deepcopy(self._resolved)


def build(
    sources: Iterable[Source],
    resolver: Optional[ExpressionResolver] = None,
) -> Instance:
    """
    Build an instance from several sources.

    Raises:
        BuildError: If a source cannot be parsed
        EvalError: If sources conflict or an expression fails
    """
    raw: Dict[str, Any] = {}
    for source in sources:
        data = parse_source(source)
        if source.override:
            raw = override_merge(raw, data)
            continue
        try:
            raw = unify(raw, data)
        except UnifyConflictError as e:
            raise EvalError(f"unify source {source.name}") from e
    return Instance(raw, resolver)


def compile_source(
    text: str,
    name: str = "-",
    literal_fields: Sequence[str] = (),
    resolver: Optional[ExpressionResolver] = None,
) -> Instance:
    """Build an instance from a single source text."""
    return build([Source(name, text, literal_fields=tuple(literal_fields))], resolver)


__all__ = [
    "Source",
    "Instance",
    "parse_source",
    "build",
    "compile_source",
]
