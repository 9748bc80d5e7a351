# ============================================================================
# RENDERED OBJECTS
# ============================================================================
# EPOCH: 1 - DEFINITION RENDERING
# STATUS: Engine - Generic wrapper around an evaluated field
# PURPOSE: Base and auxiliary objects stored in an execution context
# CREATED: 19 OCT 2026
# ============================================================================
"""
Rendered Objects

A RenderedObject is the concrete export of a template field (`output`,
an `outputs` entry, or a `patch`). The base object of a component can be
patched in place by unifying another RenderedObject into it.
"""

import copy
import json
from typing import Any, Dict

from core.errors import DefinitionError, PatchError, UnifyConflictError, WrapError
from cluster.objects import Unstructured
from engine.unify import unify
from engine.value import Value, ValueKind


class RenderedObject:
    """Concrete rendered object."""

    def __init__(self, data: Dict[str, Any], is_base: bool = False):
        self._data = data
        self._is_base = is_base

    @classmethod
    def from_value(cls, value: Value, is_base: bool = False) -> "RenderedObject":
        """
        Wrap an evaluated value.

        Raises:
            WrapError: If the value is not a complete struct
        """
        if value.kind is not ValueKind.STRUCT:
            raise WrapError(
                f"{value.path or 'value'} must be a struct, got {value.kind.value}",
                field=value.path or None,
            )
        try:
            data = value.as_object()
        except DefinitionError as e:
            raise WrapError(f"export {value.path}", field=value.path or None) from e
        return cls(data, is_base=is_base)

    @classmethod
    def new_base(cls, value: Value) -> "RenderedObject":
        return cls.from_value(value, is_base=True)

    @classmethod
    def new_other(cls, value: Value) -> "RenderedObject":
        return cls.from_value(value, is_base=False)

    @property
    def is_base(self) -> bool:
        return self._is_base

    def unstructured(self) -> Unstructured:
        """
        Generic object view.

        Raises:
            WrapError: If the object has no kind or apiVersion
        """
        obj = self.to_dict()
        if not obj.get("kind"):
            raise WrapError("object 'kind' is missing")
        if not obj.get("apiVersion"):
            raise WrapError("object 'apiVersion' is missing")
        return Unstructured(obj)

    def unify(self, other: "RenderedObject") -> None:
        """
        Unify another object into this one, in place.

        Raises:
            PatchError: If concrete values conflict
        """
        try:
            self._data = unify(self._data, other._data)
        except UnifyConflictError as e:
            raise PatchError("unify patch", field=e.path or None) from e

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._data)

    def string(self) -> str:
        """JSON text of the object."""
        return json.dumps(self._data, sort_keys=False)

    def __repr__(self) -> str:
        kind = "base" if self._is_base else "other"
        return f"RenderedObject({kind}, kind={self._data.get('kind')!r})"


__all__ = ["RenderedObject"]
