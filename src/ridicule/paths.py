from __future__ import annotations

import os
from pathlib import Path

MOCK_SUFFIX = "_mock.go"


def go_binary() -> str:
    """Return the Go binary used to run the source scanner.

    Override with `RIDICULE_GO`.
    """
    return os.environ.get("RIDICULE_GO") or "go"


def gofmt_binary() -> str:
    """Return the gofmt binary used by the output normalizer.

    Override with `RIDICULE_GOFMT`.
    """
    return os.environ.get("RIDICULE_GOFMT") or "gofmt"


def default_out_path(in_path: Path) -> Path:
    """Sibling destination for `in_path`: `service.go` -> `service_mock.go`."""
    in_path = Path(in_path)
    stem = in_path.name[: -len(".go")] if in_path.name.endswith(".go") else in_path.name
    # Never map a source onto itself.
    return in_path.parent / f"{stem}{MOCK_SUFFIX}"
