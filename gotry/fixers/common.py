"""Shared fixer utilities: safe in-place writes."""

import os
import tempfile
from pathlib import Path


def backup_file(p: Path, data: bytes, mode: int) -> Path:
    """Write data to a new, uniquely named file beside p with permissions mode."""
    fd, name = tempfile.mkstemp(prefix=p.name + ".", dir=p.parent)
    bak = Path(name)
    try:
        with os.fdopen(fd, "wb") as f:
            os.chmod(bak, mode)
            f.write(data)
    except BaseException:
        bak.unlink(missing_ok=True)
        raise
    return bak


def write_with_backup(path: str | Path, original: bytes, new_content: bytes) -> None:
    """Replace the contents of path, keeping a backup until the write succeeds.

    The new content goes through a temporary file and ``os.replace``. If
    that fails the backup is moved back over path and the error re-raised;
    on success the backup is removed.
    """
    p = Path(path)
    mode = p.stat().st_mode & 0o7777
    bak = backup_file(p, original, mode)
    tmp = p.with_suffix(p.suffix + ".tmp")
    try:
        tmp.write_bytes(new_content)
        os.chmod(tmp, mode)
        os.replace(str(tmp), str(p))
    except BaseException:
        tmp.unlink(missing_ok=True)
        os.replace(str(bak), str(p))
        raise
    bak.unlink()
