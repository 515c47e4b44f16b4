from __future__ import annotations

import argparse
import importlib.metadata
import logging
import os
from pathlib import Path

from .errors import RidiculeError


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="ridicule",
        description="Generate testify mocks for the interfaces declared in a Go source file.",
    )
    parser.add_argument("--in", dest="in_path", default=None, help="Source .go file.")
    parser.add_argument(
        "--out",
        default=None,
        help="Destination file override (default: <source>_mock.go next to the source).",
    )
    parser.add_argument(
        "--banner",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Emit the 'Code generated ... DO NOT EDIT.' banner.",
    )
    parser.add_argument("--version", action="store_true", help="Print ridicule version.")

    args = parser.parse_args(argv)
    if args.version:
        try:
            print(importlib.metadata.version("ridicule"))
        except importlib.metadata.PackageNotFoundError:
            print("0.0.0")
        return

    if not args.in_path:
        raise SystemExit("error: invalid flags: please provide at least the --in param")

    level_name = os.environ.get("RIDICULE_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )

    from .generate import generate_mock
    from .mockgen.synth import MockgenOptions

    source = Path(args.in_path)
    try:
        out = generate_mock(
            source=source,
            out=Path(args.out) if args.out else None,
            opts=MockgenOptions(banner=args.banner),
        )
    except RidiculeError as e:
        raise SystemExit(f"error: {e}") from None
    print(f"generated {out} from {source}")
