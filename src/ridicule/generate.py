from __future__ import annotations

import logging
from pathlib import Path

from .extract import extract_contracts
from .mockgen.normalize import normalize
from .mockgen.render import render_mock_file
from .mockgen.synth import MockgenOptions, synthesize
from .model import Contracts
from .output import write_artifact
from .paths import default_out_path
from .source.document import DeclarationDocument
from .source.scan import scan_source

logger = logging.getLogger(__name__)


def generate_mock_source(
    document: DeclarationDocument,
    *,
    filename: str,
    opts: MockgenOptions | None = None,
    normalize_output: bool = True,
) -> str:
    """Generate mock Go source for a declaration document (no I/O)."""
    opts = opts or MockgenOptions()
    contracts = extract_contracts(document, mock_prefix=opts.mock_prefix, strict=opts.strict)
    if not contracts.interfaces:
        logger.warning("%s: no interfaces found in package %s", filename, contracts.package)
    return render_contracts(contracts, filename=filename, opts=opts, normalize_output=normalize_output)


def render_contracts(
    contracts: Contracts,
    *,
    filename: str,
    opts: MockgenOptions | None = None,
    normalize_output: bool = True,
) -> str:
    text = render_mock_file(synthesize(contracts, opts))
    if normalize_output:
        text = normalize(text, filename)
    return text


def generate_mock(
    *,
    source: Path,
    out: Path | None = None,
    opts: MockgenOptions | None = None,
) -> Path:
    """Scan `source`, generate mocks for its interfaces and write them to `out`.

    `out` defaults to the sibling `<name>_mock.go`. Returns the written path.
    """
    source = Path(source)
    out = Path(out) if out is not None else default_out_path(source)

    document = scan_source(source=source)
    text = generate_mock_source(document, filename=out.name, opts=opts)
    write_artifact(out, text)
    logger.debug("wrote %s", out)
    return out
