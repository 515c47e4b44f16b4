from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ParameterDescriptor:
    type: str
    name: str | None = None  # None: anonymous


@dataclass(frozen=True)
class MethodDescriptor:
    name: str
    params: tuple[ParameterDescriptor, ...]
    results: tuple[ParameterDescriptor, ...]


@dataclass(frozen=True)
class InterfaceDescriptor:
    name: str
    type_params: tuple[ParameterDescriptor, ...]
    # Rendered mock references, e.g. "MockCloser", "io.MockCloser", "*MockBase".
    embedded: tuple[str, ...]
    methods: tuple[MethodDescriptor, ...]

    @property
    def is_generic(self) -> bool:
        return bool(self.type_params)


@dataclass(frozen=True)
class Contracts:
    package: str
    # Verbatim import specs: '"context"' or 'ctxpkg "context"'.
    imports: tuple[str, ...]
    interfaces: tuple[InterfaceDescriptor, ...]
