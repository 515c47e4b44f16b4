from __future__ import annotations

from .synth import Assertion, MockFile, MockMethod, MockStruct, Param


def render_mock_file(mf: MockFile) -> str:
    """Render a `MockFile` as Go source (tab-indented, gofmt-compatible)."""
    lines: list[str] = []
    if mf.banner:
        lines.extend(mf.banner.rstrip("\n").splitlines())
        lines.append("")

    lines.append(f"package {mf.package}")
    lines.append("")
    lines.append("import (")
    for spec in mf.imports:
        lines.append(f"\t{spec}")
    lines.append(")")

    for st in mf.structs:
        lines.append("")
        lines.extend(_struct(st))

    if mf.assertions:
        lines.append("")
    for a in mf.assertions:
        lines.extend(_assertion(a))

    for m in mf.methods:
        lines.append("")
        lines.extend(_method(m))

    return "\n".join(lines) + "\n"


def _struct(st: MockStruct) -> list[str]:
    lines = [f"// {st.name} mocks the {st.interface} interface"]
    lines.append(f"type {st.name}{_type_param_list(st.type_params)} struct {{")
    for f in st.fields:
        lines.append(f"\t{f}")
    lines.append("}")
    return lines


def _assertion(a: Assertion) -> list[str]:
    if not a.type_params:
        return [f"var _ {a.interface} = &{a.mock}{{}}"]
    # A generic contract can only be checked inside a generic scope.
    args = _type_arg_list(tuple(p.name for p in a.type_params))
    return [
        f"func _{_type_param_list(a.type_params)}() {{",
        f"\tvar _ {a.interface}{args} = &{a.mock}{args}{{}}",
        "}",
    ]


def _method(m: MockMethod) -> list[str]:
    params = ", ".join(f"{p.name} {p.type}" for p in m.params)
    recv = f"{m.receiver} *{m.mock}{_type_arg_list(m.type_args)}"
    call = f"{m.receiver}.Called({', '.join(m.call_args)})"

    lines = [f"// {m.name} mocks the {m.name} function"]
    lines.append(f"func ({recv}) {m.name}({params}){_results(m.results)} {{")
    if not m.results:
        lines.append(f"\t{call}")
        lines.append("}")
        return lines

    lines.append(f"\t{m.args_var} := {call}")
    for c in m.checks:
        got = f"{m.args_var}.Get({c.index})"
        msg = _go_string(f"incorrect type supplied for return value [{c.index}], expected {c.type}")
        lines.extend(
            [
                "",
                f"\tif {got} != nil {{",
                f"\t\t{m.ok_var} := false",
                f"\t\t{c.var}, {m.ok_var} = {got}.({c.type})",
                f"\t\tif !{m.ok_var} {{",
                f"\t\t\tpanic({msg})",
                "\t\t}",
                "\t}",
            ]
        )
    lines.append("")
    lines.append(f"\treturn {', '.join(r.name for r in m.results)}")
    lines.append("}")
    return lines


def _results(results: tuple[Param, ...]) -> str:
    if not results:
        return ""
    return " (" + ", ".join(f"{r.name} {r.type}" for r in results) + ")"


def _type_param_list(tps: tuple[Param, ...]) -> str:
    if not tps:
        return ""
    return "[" + ", ".join(f"{p.name} {p.type}" for p in tps) + "]"


def _type_arg_list(names: tuple[str, ...]) -> str:
    if not names:
        return ""
    return "[" + ", ".join(names) + "]"


def _go_string(s: str) -> str:
    return '"' + s.replace("\\", "\\\\").replace('"', '\\"') + '"'
