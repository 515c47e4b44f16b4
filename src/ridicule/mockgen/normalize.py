"""Cosmetic cleanup of generated Go source.

Two stages run in order: `tidy_imports` (deduplicate, prune unused, group and
sort the import block) and `gofmt`. A stage that fails logs a warning and
passes its input through, so `normalize` never raises.
"""

from __future__ import annotations

import logging
import re

from .. import gotool
from ..errors import NormalizeError
from ..paths import gofmt_binary

logger = logging.getLogger(__name__)

_IMPORT_BLOCK_RE = re.compile(r"^import \(\n(?P<body>.*?)^\)\n", re.MULTILINE | re.DOTALL)
_IMPORT_SPEC_RE = re.compile(r'^(?:(?P<name>[A-Za-z_][A-Za-z0-9_]*|\.)\s+)?(?P<path>"[^"]+")$')
_STRING_RE = re.compile(r'"(?:[^"\\\n]|\\.)*"|`[^`]*`')
_COMMENT_RE = re.compile(r"//[^\n]*|/\*.*?\*/", re.DOTALL)
_SELECTOR_RE = re.compile(r"\b([A-Za-z_][A-Za-z0-9_]*)\.")
_NOT_IDENT_RE = re.compile(r"[^A-Za-z0-9_]")
_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_MAJOR_VERSION_RE = re.compile(r"v[0-9]+")


def normalize(text: str, filename: str) -> str:
    """Return tidied, gofmt-formatted `text`; degrade stage by stage on failure."""
    out = text
    for stage in (tidy_imports, gofmt):
        try:
            out = stage(out)
        except NormalizeError as e:
            logger.warning("%s: %s failed, keeping previous output: %s", filename, stage.__name__, e)
    return out


def tidy_imports(text: str) -> str:
    m = _IMPORT_BLOCK_RE.search(text)
    if m is None:
        raise NormalizeError("no import block found")

    specs: list[tuple[str | None, str]] = []
    for raw in m.group("body").splitlines():
        line = raw.strip()
        if not line:
            continue
        sm = _IMPORT_SPEC_RE.match(line)
        if sm is None:
            raise NormalizeError(f"cannot parse import spec: {line}")
        spec = (sm.group("name"), sm.group("path"))
        if spec not in specs:
            specs.append(spec)

    used = _referenced_names(text[m.end() :])
    kept: list[tuple[str | None, str]] = []
    owners: dict[str, str] = {}
    for name, path in specs:
        if name == ".":
            kept.append((name, path))
            continue
        if name == "_":
            continue
        candidates = (name,) if name else package_name_candidates(path.strip('"'))
        referenced = [c for c in candidates if c in used]
        if not referenced:
            continue
        clash = next((c for c in referenced if c in owners), None)
        if clash is not None:
            logger.warning("import %s dropped: name %s already refers to %s", path, clash, owners[clash])
            continue
        for c in referenced:
            owners[c] = path
        kept.append((name, path))

    std = sorted((s for s in kept if _is_stdlib(s[1])), key=lambda s: s[1])
    third = sorted((s for s in kept if not _is_stdlib(s[1])), key=lambda s: s[1])

    if not kept:
        return text[: m.start()] + text[m.end() :].lstrip("\n")

    block = ["import ("]
    block.extend(f"\t{_spec_line(s)}" for s in std)
    if std and third:
        block.append("")
    block.extend(f"\t{_spec_line(s)}" for s in third)
    block.append(")")
    return text[: m.start()] + "\n".join(block) + "\n" + text[m.end() :]


def gofmt(text: str) -> str:
    return gotool.run([gofmt_binary()], stdin=text, error=NormalizeError)


def assumed_package_name(import_path: str) -> str:
    """Package name Go tooling assumes for an unaliased import path."""
    parts = import_path.split("/")
    base = parts[-1]
    if _MAJOR_VERSION_RE.fullmatch(base) and len(parts) > 1:
        base = parts[-2]
    base = base.removeprefix("go-")
    cut = _NOT_IDENT_RE.search(base)
    if cut is not None:
        base = base[: cut.start()]
    return base


def package_name_candidates(import_path: str) -> tuple[str, ...]:
    """Every name an unaliased import of `import_path` may plausibly bind.

    The declared package name is only known from the package's own source, so
    an import is treated as used when any of these is referenced. For
    `k8s.io/api/core/v1` both `core` and `v1` qualify.
    """
    out = [assumed_package_name(import_path)]
    parts = import_path.split("/")
    for elem in (parts[-1], parts[-1].removeprefix("go-"), parts[-1].replace("-", "")):
        if _IDENT_RE.fullmatch(elem):
            out.append(elem)
    return tuple(dict.fromkeys(c for c in out if c))


def _referenced_names(body: str) -> set[str]:
    body = _COMMENT_RE.sub("", _STRING_RE.sub('""', body))
    return set(_SELECTOR_RE.findall(body))


def _is_stdlib(quoted_path: str) -> bool:
    first = quoted_path.strip('"').split("/", 1)[0]
    return "." not in first


def _spec_line(spec: tuple[str | None, str]) -> str:
    name, path = spec
    return f"{name} {path}" if name else path
