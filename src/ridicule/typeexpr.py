"""Type expressions as a closed tagged union.

Every variant is a frozen dataclass; nested expressions are held by value so a
tree is immutable once decoded. `decode_type` converts the tagged JSON nodes
produced by the source scanner into these values.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from .errors import DocumentError


@dataclass(frozen=True)
class Field:
    """A parameter/result group: zero or more names sharing one type."""

    names: tuple[str, ...]
    type: "TypeExpr"


@dataclass(frozen=True)
class Ident:
    name: str


@dataclass(frozen=True)
class Qualified:
    namespace: str
    name: str


@dataclass(frozen=True)
class Pointer:
    inner: "TypeExpr"


@dataclass(frozen=True)
class Slice:
    inner: "TypeExpr"


@dataclass(frozen=True)
class Array:
    length: str
    inner: "TypeExpr"


@dataclass(frozen=True)
class Map:
    key: "TypeExpr"
    value: "TypeExpr"


@dataclass(frozen=True)
class Variadic:
    inner: "TypeExpr"


@dataclass(frozen=True)
class Channel:
    # "both", "send" or "recv"
    direction: str
    inner: "TypeExpr"


@dataclass(frozen=True)
class FuncType:
    params: tuple[Field, ...]
    results: tuple[Field, ...]


@dataclass(frozen=True)
class InlineContract:
    """An anonymous `interface{...}` literal used as a type."""

    fields: tuple[Field, ...] = ()


@dataclass(frozen=True)
class GenericInstantiation:
    base: "TypeExpr"
    args: tuple["TypeExpr", ...]


@dataclass(frozen=True)
class Tilde:
    inner: "TypeExpr"


@dataclass(frozen=True)
class TypeUnion:
    terms: tuple["TypeExpr", ...]


@dataclass(frozen=True)
class Unsupported:
    # Name of the syntax node, e.g. "*ast.StructType".
    shape: str


TypeExpr = Union[
    Ident,
    Qualified,
    Pointer,
    Slice,
    Array,
    Map,
    Variadic,
    Channel,
    FuncType,
    InlineContract,
    GenericInstantiation,
    Tilde,
    TypeUnion,
    Unsupported,
]

_CHAN_DIRS = {"both", "send", "recv"}


def decode_fields(raw: Any) -> tuple[Field, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise DocumentError(f"expected field list, got {type(raw).__name__}")
    out: list[Field] = []
    for item in raw:
        if not isinstance(item, dict):
            raise DocumentError("field must be an object")
        names = item.get("names") or []
        if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
            raise DocumentError("field names must be a list of strings")
        out.append(Field(names=tuple(names), type=decode_type(item.get("type"))))
    return tuple(out)


def decode_type(node: Any) -> TypeExpr:
    """Decode one scanner type node into a `TypeExpr`."""
    if not isinstance(node, dict):
        raise DocumentError(f"type node must be an object, got {type(node).__name__}")
    kind = node.get("kind")

    if kind == "ident":
        return Ident(_str(node, "name"))
    if kind == "selector":
        x = node.get("x")
        # Only `pkg.Name` is a qualified type name.
        if not (isinstance(x, dict) and x.get("kind") == "ident"):
            return Unsupported("*ast.SelectorExpr")
        return Qualified(_str(x, "name"), _str(node, "sel"))
    if kind == "star":
        return Pointer(decode_type(node.get("x")))
    if kind == "array":
        length = node.get("len")
        if length is None:
            return Slice(decode_type(node.get("elt")))
        if not isinstance(length, str) or not length:
            raise DocumentError("array length must be a non-empty string")
        return Array(length, decode_type(node.get("elt")))
    if kind == "map":
        return Map(decode_type(node.get("key")), decode_type(node.get("value")))
    if kind == "ellipsis":
        return Variadic(decode_type(node.get("elt")))
    if kind == "chan":
        direction = node.get("dir", "both")
        if direction not in _CHAN_DIRS:
            raise DocumentError(f"unknown channel direction: {direction!r}")
        return Channel(direction, decode_type(node.get("value")))
    if kind == "func":
        return FuncType(decode_fields(node.get("params")), decode_fields(node.get("results")))
    if kind == "interface":
        return InlineContract(decode_fields(node.get("methods")))
    if kind == "index":
        indices = node.get("indices")
        if not isinstance(indices, list) or not indices:
            raise DocumentError("index node needs at least one type argument")
        return GenericInstantiation(
            decode_type(node.get("x")), tuple(decode_type(i) for i in indices)
        )
    if kind == "unary":
        if node.get("op") != "~":
            return Unsupported("*ast.UnaryExpr")
        return Tilde(decode_type(node.get("x")))
    if kind == "binary":
        if node.get("op") != "|":
            return Unsupported("*ast.BinaryExpr")
        return TypeUnion(_flatten_union(decode_type(node.get("x")), decode_type(node.get("y"))))
    if kind == "unknown":
        return Unsupported(_str(node, "node"))
    raise DocumentError(f"unknown type node kind: {kind!r}")


def _flatten_union(x: TypeExpr, y: TypeExpr) -> tuple[TypeExpr, ...]:
    # `A | B | C` parses left-associative: ((A | B) | C).
    left = x.terms if isinstance(x, TypeUnion) else (x,)
    return (*left, y)


def _str(node: dict[str, Any], key: str) -> str:
    v = node.get(key)
    if not isinstance(v, str) or not v:
        raise DocumentError(f"{node.get('kind')} node: {key} must be a non-empty string")
    return v
