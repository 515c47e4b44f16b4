"""Type expression resolver.

`render` produces the canonical Go text of a `TypeExpr`; `resolve` expands a
parameter group into one `ParameterDescriptor` per name. Both are pure.
"""

from __future__ import annotations

from collections.abc import Sequence

from .errors import UnsupportedTypeError
from .model import ParameterDescriptor
from .typeexpr import (
    Array,
    Channel,
    Field,
    FuncType,
    GenericInstantiation,
    Ident,
    InlineContract,
    Map,
    Pointer,
    Qualified,
    Slice,
    Tilde,
    TypeExpr,
    TypeUnion,
    Unsupported,
    Variadic,
)

# Inline interface literals are not expanded.
ANY_CONTRACT = "interface{}"

_CHAN_PREFIX = {"both": "chan ", "send": "chan<- ", "recv": "<-chan "}


def resolve(expr: TypeExpr, names: Sequence[str] = ()) -> list[ParameterDescriptor]:
    """Resolve one parameter group.

    With no names a single anonymous descriptor is returned; otherwise one
    descriptor per name, all carrying the same type text, in name order.

    Raises `UnsupportedTypeError` if any part of `expr` is not modelled.
    """
    t = render(expr)
    if not names:
        return [ParameterDescriptor(type=t)]
    return [ParameterDescriptor(type=t, name=n) for n in names]


def resolve_fields(fields: Sequence[Field]) -> list[ParameterDescriptor]:
    out: list[ParameterDescriptor] = []
    for f in fields:
        out.extend(resolve(f.type, f.names))
    return out


def render(expr: TypeExpr) -> str:
    if isinstance(expr, Ident):
        return expr.name
    if isinstance(expr, Qualified):
        return f"{expr.namespace}.{expr.name}"
    if isinstance(expr, Pointer):
        return "*" + render(expr.inner)
    if isinstance(expr, Slice):
        return "[]" + render(expr.inner)
    if isinstance(expr, Array):
        return f"[{expr.length}]" + render(expr.inner)
    if isinstance(expr, Map):
        return f"map[{render(expr.key)}]{render(expr.value)}"
    if isinstance(expr, Variadic):
        return "..." + render(expr.inner)
    if isinstance(expr, Channel):
        inner = render(expr.inner)
        # `chan (<-chan T)` needs the parens to keep its meaning.
        if expr.direction == "both" and isinstance(expr.inner, Channel) and expr.inner.direction == "recv":
            inner = f"({inner})"
        return _CHAN_PREFIX[expr.direction] + inner
    if isinstance(expr, InlineContract):
        return ANY_CONTRACT
    if isinstance(expr, FuncType):
        return _render_func(expr)
    if isinstance(expr, GenericInstantiation):
        return render(expr.base) + "[" + ", ".join(render(a) for a in expr.args) + "]"
    if isinstance(expr, Tilde):
        return "~" + render(expr.inner)
    if isinstance(expr, TypeUnion):
        return " | ".join(render(t) for t in expr.terms)
    if isinstance(expr, Unsupported):
        raise UnsupportedTypeError(expr.shape)
    raise UnsupportedTypeError(type(expr).__name__)


def _render_func(ft: FuncType) -> str:
    params = ", ".join(p.type for p in resolve_fields(ft.params))
    out = f"func({params})"

    results = resolve_fields(ft.results)
    if not results:
        return out
    if len(results) == 1:
        return f"{out} {results[0].type}"
    pairs = ", ".join(f"{r.name} {r.type}" if r.name else r.type for r in results)
    return f"{out} ({pairs})"
