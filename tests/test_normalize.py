from __future__ import annotations

import logging
import subprocess

from ridicule.mockgen.normalize import assumed_package_name, normalize, package_name_candidates, tidy_imports

RAW = "\n".join(
    [
        "package svc",
        "",
        "import (",
        '\t"github.com/stretchr/testify/mock"',
        '\t"context"',
        '\t"io"',
        '\t"context"',
        '\tpb "example.com/api/gen/pb"',
        '\t_ "embed"',
        '\t. "example.com/dsl"',
        '\t"time"',
        ")",
        "",
        "type MockX struct {",
        "\tmock.Mock",
        "}",
        "",
        "func (mock *MockX) Do(ctx context.Context, req *pb.Req) {",
        "\tmock.Called(ctx, req)",
        '\tpanic("time.Time")',
        "}",
        "",
    ]
)


def test_tidy_imports_prunes_dedups_and_groups():
    out = tidy_imports(RAW)
    assert out.startswith(
        "\n".join(
            [
                "package svc",
                "",
                "import (",
                '\t"context"',
                "",
                '\tpb "example.com/api/gen/pb"',
                '\t. "example.com/dsl"',
                '\t"github.com/stretchr/testify/mock"',
                ")",
                "",
                "type MockX struct {",
            ]
        )
    )
    # Only mentioned inside a string literal.
    assert '"time"' not in out
    assert '"io"' not in out
    assert '"embed"' not in out


def test_tidy_imports_removes_empty_block():
    text = 'package svc\n\nimport (\n\t"io"\n)\n\ntype X struct{}\n'
    assert tidy_imports(text) == "package svc\n\ntype X struct{}\n"


def test_assumed_package_name():
    assert assumed_package_name("github.com/stretchr/testify/mock") == "mock"
    assert assumed_package_name("gopkg.in/yaml.v3") == "yaml"
    assert assumed_package_name("github.com/redis/go-redis/v9") == "redis"
    assert assumed_package_name("context") == "context"


def test_normalize_falls_back_when_gofmt_missing(monkeypatch, caplog):
    def fake_run(*args, **kwargs):  # noqa: ANN001
        raise FileNotFoundError("gofmt")

    monkeypatch.setattr(subprocess, "run", fake_run)

    with caplog.at_level(logging.WARNING, logger="ridicule.mockgen.normalize"):
        out = normalize(RAW, "x_mock.go")
    assert out == tidy_imports(RAW)
    assert "x_mock.go" in caplog.text
    assert "gofmt" in caplog.text


def test_normalize_uses_gofmt_output(monkeypatch):
    seen = {}

    def fake_run(cmd, **kwargs):  # noqa: ANN001
        seen["cmd"] = cmd
        seen["input"] = kwargs.get("input")
        return subprocess.CompletedProcess(cmd, 0, stdout=b"formatted\n", stderr=b"")

    monkeypatch.setattr(subprocess, "run", fake_run)
    monkeypatch.setenv("RIDICULE_GOFMT", "/opt/go/bin/gofmt")

    assert normalize(RAW, "x_mock.go") == "formatted\n"
    assert seen["cmd"] == ["/opt/go/bin/gofmt"]
    assert seen["input"] == tidy_imports(RAW).encode("utf-8")


def test_normalize_keeps_raw_text_when_every_stage_fails(monkeypatch, caplog):
    def fake_run(cmd, **kwargs):  # noqa: ANN001
        return subprocess.CompletedProcess(cmd, 2, stdout=b"", stderr=b"<standard input>:1:1: expected 'package'")

    monkeypatch.setattr(subprocess, "run", fake_run)

    text = "not go at all\n"
    with caplog.at_level(logging.WARNING, logger="ridicule.mockgen.normalize"):
        assert normalize(text, "x_mock.go") == text
    assert "tidy_imports failed" in caplog.text
    assert "expected 'package'" in caplog.text


def test_tidy_imports_keeps_major_version_package_used_by_its_own_name():
    text = "\n".join(
        [
            "package svc",
            "",
            "import (",
            '\t"github.com/stretchr/testify/mock"',
            '\t"k8s.io/api/core/v1"',
            '\t"github.com/redis/go-redis/v9"',
            ")",
            "",
            "func (mock *MockX) Get(p *v1.Pod, c *redis.Client) {",
            "\tmock.Called(p, c)",
            "}",
            "",
        ]
    )
    out = tidy_imports(text)
    assert '\t"k8s.io/api/core/v1"' in out
    assert '\t"github.com/redis/go-redis/v9"' in out


def test_package_name_candidates():
    assert package_name_candidates("k8s.io/api/core/v1") == ("core", "v1")
    assert package_name_candidates("github.com/redis/go-redis/v9") == ("redis", "v9")
    assert package_name_candidates("github.com/mattn/go-sqlite3") == ("sqlite3", "gosqlite3")
    assert package_name_candidates("gopkg.in/yaml.v3") == ("yaml",)
    assert package_name_candidates("context") == ("context",)


def test_tidy_imports_warns_when_a_name_is_bound_twice(caplog):
    text = "\n".join(
        [
            "package svc",
            "",
            "import (",
            '\t"github.com/stretchr/testify/mock"',
            '\tmock "example.com/fake/mock"',
            ")",
            "",
            "var _ = mock.Anything",
            "",
        ]
    )
    with caplog.at_level(logging.WARNING, logger="ridicule.mockgen.normalize"):
        out = tidy_imports(text)
    assert '"example.com/fake/mock"' not in out
    assert "example.com/fake/mock" in caplog.text
