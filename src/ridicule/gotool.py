from __future__ import annotations

import subprocess
from pathlib import Path

from .errors import RidiculeError


def run(
    cmd: list[str],
    *,
    cwd: Path | None = None,
    stdin: str | None = None,
    env: dict[str, str] | None = None,
    error: type[RidiculeError] = RidiculeError,
) -> str:
    """Run a Go toolchain command and return its stdout.

    Output is decoded as UTF-8 with replacement so a stray byte in compiler
    output never masks the real failure. Failures raise `error`.
    """
    prog = cmd[0] if cmd else "<unknown>"
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd is not None else None,
            env=env,
            input=stdin.encode("utf-8") if stdin is not None else None,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=False,
            check=False,
        )
    except FileNotFoundError as e:
        raise error(
            f"Go toolchain not found (`{prog}` is missing from PATH). "
            "Install Go and ensure it is available on PATH, or point "
            "RIDICULE_GO / RIDICULE_GOFMT at the binaries."
        ) from e

    stdout = (proc.stdout or b"").decode("utf-8", errors="replace")
    stderr = (proc.stderr or b"").decode("utf-8", errors="replace")
    if proc.returncode != 0:
        out = "\n".join([s for s in [stdout.strip("\n"), stderr.strip("\n")] if s])
        raise error(f"command failed: {' '.join(cmd)}\n{out}")
    return stdout
