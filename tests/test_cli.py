from __future__ import annotations

import sys
from pathlib import Path

import pytest

from ridicule.source.document import DeclarationDocument

GREETER_DOC = {
    "package": "svc",
    "imports": [],
    "types": [
        {
            "name": "Greeter",
            "type_params": [],
            "type": {
                "kind": "interface",
                "methods": [
                    {
                        "names": ["Greet"],
                        "type": {
                            "kind": "func",
                            "params": [{"names": ["name"], "type": {"kind": "ident", "name": "string"}}],
                            "results": [
                                {"names": [], "type": {"kind": "ident", "name": "string"}},
                                {"names": [], "type": {"kind": "ident", "name": "error"}},
                            ],
                        },
                    }
                ],
            },
        }
    ],
}


@pytest.fixture()
def fake_scan(monkeypatch):
    import ridicule.generate

    monkeypatch.setattr(
        ridicule.generate, "scan_source", lambda *, source: DeclarationDocument.from_json(GREETER_DOC)
    )
    monkeypatch.setenv("RIDICULE_GOFMT", "ridicule-test-no-such-gofmt")


def test_cli_requires_in():
    from ridicule.cli import main

    with pytest.raises(SystemExit, match="--in"):
        main([])


def test_cli_version(capsys):
    from ridicule.cli import main

    main(["--version"])
    assert capsys.readouterr().out.strip()


def test_cli_generates_default_out(fake_scan, tmp_path: Path, capsys):
    from ridicule.cli import main

    src = tmp_path / "greeter.go"
    src.write_text("package svc\n", encoding="utf-8")
    main(["--in", str(src)])

    out = tmp_path / "greeter_mock.go"
    text = out.read_text(encoding="utf-8")
    assert text.startswith("// Code generated by 'ridicule' DO NOT EDIT.")
    assert "func (mock *MockGreeter) Greet(name string) (r0 string, r1 error) {" in text
    assert f"generated {out}" in capsys.readouterr().out


def test_cli_no_banner_and_out_override(fake_scan, tmp_path: Path):
    from ridicule.cli import main

    src = tmp_path / "greeter.go"
    src.write_text("package svc\n", encoding="utf-8")
    dest = tmp_path / "mocks" / "greeter.go"
    main(["--in", str(src), "--out", str(dest), "--no-banner"])

    text = dest.read_text(encoding="utf-8")
    assert text.startswith("package svc\n")
    assert not (tmp_path / "greeter_mock.go").exists()


def test_cli_regeneration_is_byte_identical(fake_scan, tmp_path: Path):
    from ridicule.cli import main

    src = tmp_path / "greeter.go"
    src.write_text("package svc\n", encoding="utf-8")
    main(["--in", str(src)])
    first = (tmp_path / "greeter_mock.go").read_bytes()
    main(["--in", str(src)])
    assert (tmp_path / "greeter_mock.go").read_bytes() == first


def test_cli_reports_input_errors(tmp_path: Path):
    from ridicule.cli import main

    with pytest.raises(SystemExit, match=r"^error: source file not found"):
        main(["--in", str(tmp_path / "missing.go")])
    assert not (tmp_path / "missing_mock.go").exists()


def test_cli_entrypoint_reads_sys_argv(monkeypatch, fake_scan, tmp_path: Path):
    from ridicule.cli import main

    src = tmp_path / "greeter.go"
    src.write_text("package svc\n", encoding="utf-8")
    monkeypatch.setattr(sys, "argv", ["ridicule", "--in", str(src), "--no-banner"])
    main()
    assert (tmp_path / "greeter_mock.go").exists()
