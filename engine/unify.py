# ============================================================================
# UNIFICATION
# ============================================================================
# EPOCH: 1 - DEFINITION RENDERING
# STATUS: Engine - Merge of template sources and trait patches
# PURPOSE: Combine two trees, failing on conflicting concrete values
# CREATED: 19 OCT 2026
# ============================================================================
"""
Unification

Rules:
- mapping + mapping: merged field by field (left order kept, new keys appended)
- list + list: unified element-wise, lengths must match
- scalar + scalar: must be equal (bool never equals a number)
- incomplete + anything: the other side wins

Override merge is the relaxed variant used for parameters: the right side
replaces conflicting scalars instead of raising.
"""

import copy
from numbers import Number
from typing import Any, Tuple

from core.errors import UnifyConflictError
from engine.value import Incomplete


def _format_path(path: Tuple[str, ...]) -> str:
    return ".".join(path) or "<root>"


def _scalars_equal(left: Any, right: Any) -> bool:
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, Number) and isinstance(right, Number):
        return left == right
    if isinstance(left, str) and isinstance(right, str):
        return str(left) == str(right)
    return left is None and right is None


def unify(left: Any, right: Any, path: Tuple[str, ...] = ()) -> Any:
    """
    Unify two trees into a new tree.

    Raises:
        UnifyConflictError: If concrete values disagree
    """
    if isinstance(left, Incomplete):
        return copy.deepcopy(right)
    if isinstance(right, Incomplete):
        return copy.deepcopy(left)

    if isinstance(left, dict) and isinstance(right, dict):
        merged = copy.deepcopy(left)
        for key, value in right.items():
            if key in merged:
                merged[key] = unify(merged[key], value, path + (str(key),))
            else:
                merged[key] = copy.deepcopy(value)
        return merged

    if isinstance(left, list) and isinstance(right, list):
        if len(left) != len(right):
            raise UnifyConflictError(
                f"conflicting list lengths at {_format_path(path)}: {len(left)} != {len(right)}",
                path=_format_path(path),
            )
        return [unify(a, b, path + (str(i),)) for i, (a, b) in enumerate(zip(left, right))]

    if isinstance(left, (dict, list)) or isinstance(right, (dict, list)):
        raise UnifyConflictError(
            f"conflicting values at {_format_path(path)}: "
            f"{type(left).__name__} and {type(right).__name__}",
            path=_format_path(path),
        )

    if _scalars_equal(left, right):
        return left

    raise UnifyConflictError(
        f"conflicting values at {_format_path(path)}: {left!r} != {right!r}",
        path=_format_path(path),
    )


def override_merge(base: Any, override: Any) -> Any:
    """Deep merge where the override wins on every conflict."""
    if isinstance(base, dict) and isinstance(override, dict):
        merged = copy.deepcopy(base)
        for key, value in override.items():
            if key in merged:
                merged[key] = override_merge(merged[key], value)
            else:
                merged[key] = copy.deepcopy(value)
        return merged
    return copy.deepcopy(override)


__all__ = ["unify", "override_merge"]
