from __future__ import annotations

import pytest

from ridicule.errors import UnsupportedTypeError
from ridicule.model import ParameterDescriptor
from ridicule.resolve import ANY_CONTRACT, render, resolve
from ridicule.typeexpr import (
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
    TypeUnion,
    Unsupported,
    Variadic,
)


def test_render_nested_types():
    assert render(Slice(Pointer(Ident("T")))) == "[]*T"
    assert render(Map(Ident("string"), Slice(Ident("int")))) == "map[string][]int"
    assert render(Variadic(Ident("T"))) == "...T"
    assert render(Pointer(Qualified("context", "Context"))) == "*context.Context"
    assert render(Map(Qualified("uuid", "UUID"), Map(Ident("string"), Pointer(Ident("User"))))) == (
        "map[uuid.UUID]map[string]*User"
    )
    assert render(Array("4", Ident("byte"))) == "[4]byte"


def test_render_channels():
    assert render(Channel("both", Ident("int"))) == "chan int"
    assert render(Channel("recv", Ident("Event"))) == "<-chan Event"
    assert render(Channel("send", Slice(Ident("byte")))) == "chan<- []byte"
    assert render(Channel("both", Channel("recv", Ident("int")))) == "chan (<-chan int)"


def test_inline_contract_renders_as_any_placeholder():
    closer = InlineContract(
        (Field(("Close",), FuncType((), (Field((), Ident("error")),))),)
    )
    assert render(closer) == ANY_CONTRACT == "interface{}"
    assert render(Slice(InlineContract())) == "[]interface{}"


def test_render_func_types():
    no_results = FuncType((Field(("a", "b"), Ident("int")),), ())
    assert render(no_results) == "func(int, int)"

    one_result = FuncType((Field((), Ident("string")),), (Field((), Ident("error")),))
    assert render(one_result) == "func(string) error"

    named_single = FuncType((), (Field(("n",), Ident("int")),))
    assert render(named_single) == "func() int"

    anon_multi = FuncType((), (Field((), Ident("int")), Field((), Ident("error"))))
    assert render(anon_multi) == "func() (int, error)"

    named_multi = FuncType((), (Field(("n",), Ident("int")), Field(("err",), Ident("error"))))
    assert render(named_multi) == "func() (n int, err error)"

    grouped_multi = FuncType((), (Field(("a", "b"), Ident("int")),))
    assert render(grouped_multi) == "func() (a int, b int)"

    variadic = FuncType(
        (Field(("format",), Ident("string")), Field(("args",), Variadic(InlineContract()))), ()
    )
    assert render(variadic) == "func(string, ...interface{})"


def test_render_func_type_nested_in_func_type():
    pred = FuncType((Field((), Ident("int")),), (Field((), Ident("bool")),))
    filt = FuncType(
        (Field(("xs",), Slice(Ident("int"))), Field(("keep",), pred)),
        (Field((), Slice(Ident("int"))),),
    )
    assert render(filt) == "func([]int, func(int) bool) []int"


def test_render_generic_instantiation():
    assert render(GenericInstantiation(Ident("Box"), (Ident("K"), Slice(Ident("V"))))) == "Box[K, []V]"
    assert render(GenericInstantiation(Qualified("maps", "Ordered"), (Ident("string"),))) == (
        "maps.Ordered[string]"
    )
    assert render(Pointer(GenericInstantiation(Ident("List"), (Ident("T"),)))) == "*List[T]"


def test_render_constraints():
    assert render(TypeUnion((Tilde(Ident("int")), Tilde(Ident("int64")), Ident("string")))) == (
        "~int | ~int64 | string"
    )


def test_resolve_without_names_yields_one_anonymous_descriptor():
    assert resolve(Slice(Ident("byte"))) == [ParameterDescriptor(type="[]byte")]
    assert resolve(Slice(Ident("byte")), []) == [ParameterDescriptor(type="[]byte", name=None)]


def test_resolve_grouped_names_share_type_and_keep_order():
    out = resolve(Ident("int"), ["c", "a", "b"])
    assert [p.name for p in out] == ["c", "a", "b"]
    assert {p.type for p in out} == {"int"}


def test_unsupported_shape_raises_with_shape():
    with pytest.raises(UnsupportedTypeError, match=r"StructType") as ei:
        render(Slice(Unsupported("*ast.StructType")))
    assert ei.value.shape == "*ast.StructType"

    with pytest.raises(UnsupportedTypeError):
        resolve(Map(Ident("string"), Unsupported("*ast.StructType")), ["m"])


def test_render_is_deterministic():
    expr = FuncType(
        (Field(("ctx",), Qualified("context", "Context")), Field(("opts",), Variadic(Pointer(Ident("Opt"))))),
        (Field((), Map(Ident("string"), Slice(Ident("int")))), Field((), Ident("error"))),
    )
    first = render(expr)
    assert render(expr) == first
    assert first == "func(context.Context, ...*Opt) (map[string][]int, error)"
