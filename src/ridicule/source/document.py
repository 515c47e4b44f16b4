from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..errors import DocumentError
from ..typeexpr import Field, TypeExpr, decode_fields, decode_type


@dataclass(frozen=True)
class ImportSpec:
    path: str  # quoted, as written in source: '"context"'
    name: str | None = None


@dataclass(frozen=True)
class TypeSpec:
    name: str
    type_params: tuple[Field, ...]
    type: TypeExpr


@dataclass(frozen=True)
class DeclarationDocument:
    """One parsed Go source file, as reported by the source scanner.

    `types` lists every type spec in the file in source order, including specs
    declared inside function bodies.
    """

    package: str
    imports: tuple[ImportSpec, ...]
    types: tuple[TypeSpec, ...]

    @classmethod
    def from_json(cls, obj: Any) -> "DeclarationDocument":
        if not isinstance(obj, dict):
            raise DocumentError("declaration document must be an object")

        package = obj.get("package")
        if not isinstance(package, str) or not package:
            raise DocumentError("declaration document: missing package name")

        imports: list[ImportSpec] = []
        raw_imports = obj.get("imports") or []
        if not isinstance(raw_imports, list):
            raise DocumentError("declaration document: imports must be a list")
        for item in raw_imports:
            if not isinstance(item, dict):
                raise DocumentError("declaration document: import must be an object")
            path = item.get("path")
            name = item.get("name")
            if not isinstance(path, str) or not path:
                raise DocumentError("declaration document: import path must be a string")
            if name is not None and not isinstance(name, str):
                raise DocumentError(f"declaration document: bad import name for {path}")
            imports.append(ImportSpec(path=path, name=name or None))

        types: list[TypeSpec] = []
        raw_types = obj.get("types") or []
        if not isinstance(raw_types, list):
            raise DocumentError("declaration document: types must be a list")
        for item in raw_types:
            if not isinstance(item, dict):
                raise DocumentError("declaration document: type spec must be an object")
            name = item.get("name")
            if not isinstance(name, str) or not name:
                raise DocumentError("declaration document: type spec without a name")
            try:
                types.append(
                    TypeSpec(
                        name=name,
                        type_params=decode_fields(item.get("type_params")),
                        type=decode_type(item.get("type")),
                    )
                )
            except DocumentError as e:
                raise DocumentError(f"type {name}: {e}") from None

        return cls(package=package, imports=tuple(imports), types=tuple(types))
