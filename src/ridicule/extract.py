from __future__ import annotations

import logging

from .errors import UnsupportedTypeError
from .model import Contracts, InterfaceDescriptor, MethodDescriptor, ParameterDescriptor
from .resolve import resolve
from .source.document import DeclarationDocument, ImportSpec, TypeSpec
from .typeexpr import (
    Field,
    FuncType,
    Ident,
    InlineContract,
    Pointer,
    Qualified,
    Tilde,
    TypeExpr,
    TypeUnion,
)

logger = logging.getLogger(__name__)

MOCK_PREFIX = "Mock"
UNSUPPORTED_PLACEHOLDER = "RIDICULE_UNSUPPORTED_{shape}"

# Embedding one of these restricts an interface's type set.
_PREDECLARED_NON_INTERFACE = frozenset(
    {
        "bool",
        "byte",
        "comparable",
        "complex64",
        "complex128",
        "float32",
        "float64",
        "int",
        "int8",
        "int16",
        "int32",
        "int64",
        "rune",
        "string",
        "uint",
        "uint8",
        "uint16",
        "uint32",
        "uint64",
        "uintptr",
    }
)


def extract_contracts(
    document: DeclarationDocument,
    *,
    mock_prefix: str = MOCK_PREFIX,
    strict: bool = False,
) -> Contracts:
    """Build the descriptor model for every interface in `document`.

    Unsupported type expressions are replaced by a placeholder that cannot
    compile (and a warning is logged) unless `strict` is set, in which case
    the `UnsupportedTypeError` propagates.
    """
    constraints = _constraint_only(document.types)
    interfaces: list[InterfaceDescriptor] = []
    for spec in document.types:
        if not isinstance(spec.type, InlineContract):
            continue
        if spec.name in constraints:
            logger.warning("interface %s is only usable as a type constraint; no mock generated", spec.name)
            continue
        interfaces.append(
            _extract_interface(spec, spec.type, mock_prefix=mock_prefix, strict=strict)
        )
        logger.debug("extracted interface %s", spec.name)

    return Contracts(
        package=document.package,
        imports=tuple(_import_line(i) for i in document.imports),
        interfaces=tuple(interfaces),
    )


def embedded_mock_ref(expr: TypeExpr, *, mock_prefix: str = MOCK_PREFIX) -> str | None:
    """Mock reference for an embedded member, or None for shapes with no mock."""
    if isinstance(expr, Ident):
        return mock_prefix + expr.name
    if isinstance(expr, Qualified):
        return f"{expr.namespace}.{mock_prefix}{expr.name}"
    if isinstance(expr, Pointer):
        inner = embedded_mock_ref(expr.inner, mock_prefix=mock_prefix)
        if inner is None or inner.startswith("*"):
            return None
        return "*" + inner
    return None


def _constraint_only(types: tuple[TypeSpec, ...]) -> set[str]:
    """Names of interfaces whose type set makes them constraints, not types.

    That is any interface embedding a `~T` term, a union, a predeclared
    non-interface type, or another such interface declared in the same file.
    """
    embeds: dict[str, list[TypeExpr]] = {}
    for spec in types:
        if isinstance(spec.type, InlineContract):
            embeds[spec.name] = [f.type for f in spec.type.fields if not f.names]

    found: set[str] = set()
    changed = True
    while changed:
        changed = False
        for name, members in embeds.items():
            if name in found:
                continue
            if any(_is_type_set_term(t, found) for t in members):
                found.add(name)
                changed = True
    return found


def _is_type_set_term(expr: TypeExpr, constraints: set[str]) -> bool:
    if isinstance(expr, (Tilde, TypeUnion)):
        return True
    if isinstance(expr, Ident):
        return expr.name in _PREDECLARED_NON_INTERFACE or expr.name in constraints
    return False


def _extract_interface(
    spec: TypeSpec, contract: InlineContract, *, mock_prefix: str, strict: bool
) -> InterfaceDescriptor:
    type_params: list[ParameterDescriptor] = []
    for tp in spec.type_params:
        type_params.extend(
            _resolve_or_placeholder(tp, strict=strict, where=f"{spec.name} type parameters")
        )

    embedded: list[str] = []
    methods: list[MethodDescriptor] = []
    for member in contract.fields:
        if not member.names:
            ref = embedded_mock_ref(member.type, mock_prefix=mock_prefix)
            if ref is None:
                logger.warning(
                    "interface %s: dropping embedded member of unsupported shape %s",
                    spec.name,
                    type(member.type).__name__,
                )
                continue
            embedded.append(ref)
            continue

        if not isinstance(member.type, FuncType):
            logger.warning(
                "interface %s: member %s is not a method; skipping", spec.name, member.names[0]
            )
            continue

        name = member.names[0]
        where = f"{spec.name}.{name}"
        params: list[ParameterDescriptor] = []
        for f in member.type.params:
            params.extend(_resolve_or_placeholder(f, strict=strict, where=where))
        results: list[ParameterDescriptor] = []
        for f in member.type.results:
            results.extend(_resolve_or_placeholder(f, strict=strict, where=where))
        methods.append(MethodDescriptor(name=name, params=tuple(params), results=tuple(results)))

    return InterfaceDescriptor(
        name=spec.name,
        type_params=tuple(type_params),
        embedded=tuple(embedded),
        methods=tuple(methods),
    )


def _resolve_or_placeholder(field: Field, *, strict: bool, where: str) -> list[ParameterDescriptor]:
    try:
        return resolve(field.type, field.names)
    except UnsupportedTypeError as e:
        if strict:
            raise UnsupportedTypeError(e.shape, f"{where}: {e}") from None
        shape = e.shape.replace("*ast.", "").replace(".", "_")
        logger.warning("%s: %s; emitting placeholder type", where, e)
        placeholder = ParameterDescriptor(type=UNSUPPORTED_PLACEHOLDER.format(shape=shape))
        if not field.names:
            return [placeholder]
        return [ParameterDescriptor(type=placeholder.type, name=n) for n in field.names]


def _import_line(spec: ImportSpec) -> str:
    if spec.name:
        return f"{spec.name} {spec.path}"
    return spec.path
