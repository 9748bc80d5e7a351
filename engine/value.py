# ============================================================================
# EVALUATED VALUES
# ============================================================================
# EPOCH: 1 - DEFINITION RENDERING
# STATUS: Engine - Tagged-union view over an evaluated tree
# PURPOSE: Typed, explicit access to template fields
# CREATED: 19 OCT 2026
# ============================================================================
"""
Evaluated Values

A Value wraps one node of an evaluated template tree and exposes its kind
explicitly. Typed accessors either return the requested Python value or
raise one of:

- FieldNotFoundError: the field does not exist
- KindMismatchError: the field holds another kind
- IncompleteValueError: the field still references unavailable data

Field flags come from the key spelling:
    "#name"  definition
    "_name"  hidden
    "name?"  optional
Flagged fields are never exported by as_object(). Keys of literal data
(parameters, injected context, filled data) are always regular fields,
whatever their spelling.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, List, Sequence, Tuple, Union

from core.errors import (
    FieldNotFoundError,
    IncompleteValueError,
    KindMismatchError,
)


class ValueKind(str, Enum):
    """Kinds of evaluated values."""
    NULL = "null"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    LIST = "list"
    STRUCT = "struct"
    INCOMPLETE = "incomplete"    # Expression waiting on unavailable data
    MISSING = "missing"          # Lookup of a field that does not exist


@dataclass(frozen=True)
class Incomplete:
    """Placeholder for an expression that could not be evaluated yet."""
    expression: str
    reason: str = ""


class Literal(str):
    """String taken verbatim; never evaluated as an expression."""
    __slots__ = ()


class LiteralKey(str):
    """Mapping key of literal data; never parsed for field flags."""
    __slots__ = ()


@dataclass(frozen=True)
class Label:
    """Parsed field key."""
    name: str
    is_definition: bool = False
    is_hidden: bool = False
    is_optional: bool = False

    @property
    def is_regular(self) -> bool:
        return not (self.is_definition or self.is_hidden or self.is_optional)

    @classmethod
    def parse(cls, key: Any) -> "Label":
        """Parse a mapping key into a label with its flags."""
        if isinstance(key, LiteralKey):
            return cls(name=str(key))
        name = str(key)
        is_optional = name.endswith("?")
        if is_optional:
            name = name[:-1]
        is_definition = name.startswith("#")
        if is_definition:
            name = name[1:]
        is_hidden = name.startswith("_")
        return cls(
            name=name,
            is_definition=is_definition,
            is_hidden=is_hidden,
            is_optional=is_optional,
        )


@dataclass(frozen=True)
class FieldInfo:
    """One declared field of a struct value."""
    name: str
    selector: str
    value: "Value"
    is_definition: bool = False
    is_hidden: bool = False
    is_optional: bool = False


PathLike = Union[str, Sequence[str]]


def split_path(path: PathLike) -> Tuple[str, ...]:
    """Split a dotted path ("outputs.service") into its selectors."""
    if isinstance(path, str):
        return tuple(p for p in path.split(".") if p)
    return tuple(path)


def kind_of(data: Any) -> ValueKind:
    """Classify a raw tree node."""
    if isinstance(data, Incomplete):
        return ValueKind.INCOMPLETE
    if data is None:
        return ValueKind.NULL
    # bool before int: bool is an int subclass
    if isinstance(data, bool):
        return ValueKind.BOOL
    if isinstance(data, int):
        return ValueKind.INT
    if isinstance(data, float):
        return ValueKind.FLOAT
    if isinstance(data, str):
        return ValueKind.STRING
    if isinstance(data, (list, tuple)):
        return ValueKind.LIST
    if isinstance(data, dict):
        return ValueKind.STRUCT
    raise TypeError(f"unsupported value type: {type(data).__name__}")


_MISSING = object()


class Value:
    """
    Evaluated template value.

    Immutable view: accessors return copies of containers.
    """

    def __init__(self, data: Any = _MISSING, path: Tuple[str, ...] = ()):
        self._data = data
        self._path = path

    @classmethod
    def missing(cls, path: Tuple[str, ...]) -> "Value":
        return cls(_MISSING, path)

    @property
    def path(self) -> str:
        return ".".join(self._path)

    @property
    def kind(self) -> ValueKind:
        if self._data is _MISSING:
            return ValueKind.MISSING
        return kind_of(self._data)

    def exists(self) -> bool:
        return self._data is not _MISSING

    def __repr__(self) -> str:
        return f"Value(path={self.path!r}, kind={self.kind.value})"

    # ------------------------------------------------------------------
    # NAVIGATION
    # ------------------------------------------------------------------

    def lookup(self, path: PathLike) -> "Value":
        """
        Look up a (dotted) path below this value.

        Exact keys win. Below the root, an optional field is also found by
        its name, so "web" finds a field declared as "web?". Definition and
        hidden fields are only reachable by their exact key, and top-level
        fields (output, patch, isHealth, ...) never match by name.
        """
        current = self
        for selector in split_path(path):
            current = current._child(selector)
        return current

    def _child(self, selector: str) -> "Value":
        path = self._path + (selector,)
        if not isinstance(self._data, dict):
            return Value.missing(path)
        if selector in self._data:
            return Value(self._data[selector], path)
        if not self._path:
            return Value.missing(path)
        for key, child in self._data.items():
            label = Label.parse(key)
            if label.is_optional and not (label.is_definition or label.is_hidden) and label.name == selector:
                return Value(child, path)
        return Value.missing(path)

    # ------------------------------------------------------------------
    # TYPED ACCESSORS
    # ------------------------------------------------------------------

    def _expect(self, *kinds: ValueKind) -> Any:
        kind = self.kind
        if kind is ValueKind.MISSING:
            raise FieldNotFoundError(f"field not found: {self.path or '<root>'}", path=self.path)
        if kind is ValueKind.INCOMPLETE:
            raise IncompleteValueError(
                f"incomplete value: {self._data.expression} ({self._data.reason})",
                path=self.path,
            )
        if kind not in kinds:
            expected = "|".join(k.value for k in kinds)
            raise KindMismatchError(
                f"cannot use value of kind {kind.value} as {expected}",
                path=self.path,
                expected=expected,
                actual=kind.value,
            )
        return self._data

    def as_bool(self) -> bool:
        return self._expect(ValueKind.BOOL)

    def as_string(self) -> str:
        return str(self._expect(ValueKind.STRING))

    def as_int(self) -> int:
        return self._expect(ValueKind.INT)

    def as_struct(self) -> List[FieldInfo]:
        """Declared fields of a struct, in declaration order."""
        data = self._expect(ValueKind.STRUCT)
        fields = []
        for key, child in data.items():
            label = Label.parse(key)
            fields.append(FieldInfo(
                name=label.name,
                selector=str(key),
                value=Value(child, self._path + (str(key),)),
                is_definition=label.is_definition,
                is_hidden=label.is_hidden,
                is_optional=label.is_optional,
            ))
        return fields

    def iter_fields(self) -> Iterator[FieldInfo]:
        """Regular (unflagged) fields of a struct."""
        for info in self.as_struct():
            if info.is_definition or info.is_hidden or info.is_optional:
                continue
            yield info

    def as_object(self) -> Any:
        """
        Export the value as concrete Python data.

        Raises IncompleteValueError if any exported leaf is incomplete.
        """
        if self.kind is ValueKind.MISSING:
            raise FieldNotFoundError(f"field not found: {self.path or '<root>'}", path=self.path)
        return export(self._data, self._path)

    def as_kind(self, kind: ValueKind) -> Any:
        """Typed access by kind tag."""
        if kind is ValueKind.BOOL:
            return self.as_bool()
        if kind is ValueKind.STRING:
            return self.as_string()
        if kind is ValueKind.STRUCT:
            return self.as_object()
        return self._expect(kind)


def export(data: Any, path: Tuple[str, ...] = ()) -> Any:
    """Concrete copy of a tree, dropping flagged fields."""
    if isinstance(data, Incomplete):
        raise IncompleteValueError(
            f"incomplete value: {data.expression} ({data.reason})",
            path=".".join(path),
        )
    if isinstance(data, dict):
        result = {}
        for key, child in data.items():
            if not Label.parse(key).is_regular:
                continue
            result[str(key)] = export(child, path + (str(key),))
        return result
    if isinstance(data, (list, tuple)):
        return [export(item, path + (str(i),)) for i, item in enumerate(data)]
    if isinstance(data, str):
        return str(data)
    return data


def literalize(data: Any) -> Any:
    """Mark every string and mapping key of a data tree as literal."""
    if isinstance(data, dict):
        return {LiteralKey(key): literalize(child) for key, child in data.items()}
    if isinstance(data, (list, tuple)):
        return [literalize(item) for item in data]
    if isinstance(data, str) and not isinstance(data, Literal):
        return Literal(data)
    return data


__all__ = [
    "ValueKind",
    "Incomplete",
    "Literal",
    "LiteralKey",
    "Label",
    "FieldInfo",
    "Value",
    "split_path",
    "kind_of",
    "export",
    "literalize",
]
