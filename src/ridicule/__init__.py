"""ridicule: generate testify mocks for Go interfaces."""

from __future__ import annotations

from . import errors
from .extract import extract_contracts
from .generate import generate_mock, generate_mock_source
from .mockgen.synth import MockgenOptions
from .resolve import render, resolve

__all__ = [
    "MockgenOptions",
    "errors",
    "extract_contracts",
    "generate_mock",
    "generate_mock_source",
    "render",
    "resolve",
]
