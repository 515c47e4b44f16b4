from __future__ import annotations

import os
import tempfile
from pathlib import Path

from .errors import OutputError

FILE_MODE = 0o600


def write_artifact(path: Path, text: str) -> Path:
    """Atomically write `text` to `path` with owner-only permissions.

    The content goes to a temp file in the destination directory which then
    replaces `path`; on failure no partial file is left behind.
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=path.name + ".", dir=str(path.parent))
    except OSError as e:
        raise OutputError(f"cannot write {path}: {e}") from e
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
        os.chmod(tmp, FILE_MODE)
        os.replace(tmp, path)
    except OSError as e:
        raise OutputError(f"cannot write {path}: {e}") from e
    finally:
        try:
            if os.path.exists(tmp):
                os.unlink(tmp)
        except OSError:
            pass
    return path
