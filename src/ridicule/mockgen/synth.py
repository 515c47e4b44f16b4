"""Build the mock code model from extracted contracts.

The model is a plain tree of frozen dataclasses; `render.render_mock_file`
turns it into Go source. Every name that appears in a generated body is
decided here so rendering never has to look at the descriptors.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from ..errors import SynthesisError
from ..model import Contracts, InterfaceDescriptor, MethodDescriptor, ParameterDescriptor
from .normalize import package_name_candidates

DEFAULT_BANNER = "\n".join(
    [
        "// Code generated by 'ridicule' DO NOT EDIT.",
        "//",
        "// *** DO NOT EDIT *** This file was generated by 'ridicule' *** DO NOT EDIT ***",
    ]
)

RECORDER_IMPORT = "github.com/stretchr/testify/mock"

_QUALIFIER_RE = re.compile(r"\b([A-Za-z_][A-Za-z0-9_]*)\.")
_NON_IDENT_RE = re.compile(r"[^A-Za-z0-9_]")


@dataclass(frozen=True)
class MockgenOptions:
    banner: bool = True
    banner_text: str = DEFAULT_BANNER
    mock_prefix: str = "Mock"
    # Package providing `Mock` with `Called(...) Arguments`.
    recorder_import: str = RECORDER_IMPORT
    strict: bool = False

    @property
    def recorder_package(self) -> str:
        return self.recorder_import.rstrip("/").rsplit("/", 1)[-1]


@dataclass(frozen=True)
class Param:
    name: str
    type: str


@dataclass(frozen=True)
class MockStruct:
    name: str
    interface: str
    type_params: tuple[Param, ...]
    # First field is always the recorder, e.g. "mock.Mock".
    fields: tuple[str, ...]


@dataclass(frozen=True)
class Assertion:
    interface: str
    mock: str
    type_params: tuple[Param, ...]


@dataclass(frozen=True)
class ResultCheck:
    index: int
    var: str
    type: str


@dataclass(frozen=True)
class MockMethod:
    interface: str
    mock: str
    type_args: tuple[str, ...]
    receiver: str
    name: str
    params: tuple[Param, ...]
    results: tuple[Param, ...]
    # Names passed to the recorder, one per parameter, in order.
    call_args: tuple[str, ...]
    args_var: str
    ok_var: str
    checks: tuple[ResultCheck, ...]


@dataclass(frozen=True)
class MockFile:
    package: str
    banner: str | None
    imports: tuple[str, ...]
    structs: tuple[MockStruct, ...]
    assertions: tuple[Assertion, ...]
    methods: tuple[MockMethod, ...]


def synthesize(contracts: Contracts, opts: MockgenOptions | None = None) -> MockFile:
    """Build the `MockFile` for every interface in `contracts`.

    Order is structs, then assertions, then methods grouped by interface, each
    in extraction order.
    """
    opts = opts or MockgenOptions()
    if not contracts.package:
        raise SynthesisError("package name is required")

    recorder, recorder_spec = _recorder_binding(opts, contracts.imports)
    recorder_field = f"{recorder}.Mock"
    structs: list[MockStruct] = []
    assertions: list[Assertion] = []
    methods: list[MockMethod] = []
    for iface in contracts.interfaces:
        mock_name = opts.mock_prefix + iface.name
        type_params = _type_params(iface)
        structs.append(
            MockStruct(
                name=mock_name,
                interface=iface.name,
                type_params=type_params,
                fields=(recorder_field, *iface.embedded),
            )
        )
        assertions.append(Assertion(interface=iface.name, mock=mock_name, type_params=type_params))
        for m in iface.methods:
            methods.append(
                _method(
                    m,
                    interface=iface.name,
                    mock_name=mock_name,
                    type_args=tuple(p.name for p in type_params),
                )
            )

    return MockFile(
        package=contracts.package,
        banner=opts.banner_text if opts.banner else None,
        imports=(recorder_spec, *contracts.imports),
        structs=tuple(structs),
        assertions=tuple(assertions),
        methods=tuple(methods),
    )


def param_names(params: Iterable[ParameterDescriptor], prefix: str = "p") -> list[str]:
    """Argument names as they appear in the generated signature.

    Anonymous (and blank `_`) parameters become `<prefix><index>`, where index
    is the 0-based position in the parameter list.
    """
    params = list(params)
    taken = {p.name for p in params if _is_named(p)}
    out: list[str] = []
    for i, p in enumerate(params):
        if _is_named(p):
            out.append(p.name)  # type: ignore[arg-type]
            continue
        name = _free_name(f"{prefix}{i}", taken)
        taken.add(name)
        out.append(name)
    return out


def _type_params(iface: InterfaceDescriptor) -> tuple[Param, ...]:
    out: list[Param] = []
    for tp in iface.type_params:
        if not tp.name:
            raise SynthesisError(f"interface {iface.name}: type parameter without a name")
        out.append(Param(name=tp.name, type=tp.type))
    return tuple(out)


def _method(
    m: MethodDescriptor,
    *,
    interface: str,
    mock_name: str,
    type_args: tuple[str, ...],
) -> MockMethod:
    names = param_names(m.params)
    params = tuple(Param(name=n, type=p.type) for n, p in zip(names, m.params, strict=True))

    taken = set(names)
    # Body locals must not shadow a package the signature refers to.
    for p in (*m.params, *m.results):
        taken.update(_QUALIFIER_RE.findall(p.type))
    receiver = _free_name("mock", taken)
    taken.add(receiver)
    args_var = _free_name("args", taken)
    taken.add(args_var)
    ok_var = _free_name("argOk", taken)
    taken.add(ok_var)

    results: list[Param] = []
    checks: list[ResultCheck] = []
    for i, r in enumerate(m.results):
        if not r.type:
            raise SynthesisError(f"{interface}.{m.name}: result {i} has no type")
        var = _free_name(f"r{i}", taken)
        taken.add(var)
        results.append(Param(name=var, type=r.type))
        checks.append(ResultCheck(index=i, var=var, type=r.type))

    return MockMethod(
        interface=interface,
        mock=mock_name,
        type_args=type_args,
        receiver=receiver,
        name=m.name,
        params=params,
        results=tuple(results),
        call_args=tuple(names),
        args_var=args_var,
        ok_var=ok_var,
        checks=tuple(checks),
    )


def _recorder_binding(opts: MockgenOptions, imports: Iterable[str]) -> tuple[str, str]:
    """Local name and import spec for the recorder package.

    The recorder is aliased (`testifymock` for the default import) when a
    source import could bind the same name.
    """
    name = opts.recorder_package
    taken: set[str] = set()
    for line in imports:
        alias, _, path = line.rpartition(" ")
        path = path.strip('"')
        if path == opts.recorder_import and not alias:
            continue
        taken.update((alias,) if alias else package_name_candidates(path))
    if name not in taken:
        return name, f'"{opts.recorder_import}"'

    parts = [p for p in opts.recorder_import.split("/") if p]
    base = _NON_IDENT_RE.sub("", "".join(parts[-2:])) or f"{name}rec"
    alias = _free_name(base, taken)
    return alias, f'{alias} "{opts.recorder_import}"'


def _is_named(p: ParameterDescriptor) -> bool:
    return bool(p.name and p.name.strip() and p.name != "_")


def _free_name(base: str, taken: set[str]) -> str:
    if base not in taken:
        return base
    n = 1
    while f"{base}{n}" in taken:
        n += 1
    return f"{base}{n}"
