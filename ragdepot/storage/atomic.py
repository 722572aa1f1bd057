# ragdepot/storage/atomic.py
"""
Write-temp-then-rename file replacement.

The new content is written to a sibling "<name>.tmp" file, flushed to
disk, then moved over the target with os.replace(). Readers therefore
see either the previous file or the complete new one, never a partial
write. On failure the temp file is removed and the target is untouched.
"""

from __future__ import annotations

import os
from pathlib import Path

from ragdepot.logging.logger import get_logger
from ragdepot.logging.tags import STORAGE

logger = get_logger(__name__)


def temp_path_for(path: Path) -> Path:
    return path.with_name(path.name + ".tmp")


def write_text_atomic(path: Path, content: str) -> None:
    """
    Atomically replace `path` with `content` (UTF-8).

    Raises:
        OSError: Whatever the filesystem raised; the target is left as it was.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = temp_path_for(path)

    try:
        with tmp.open("w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    except BaseException:
        try:
            tmp.unlink()
        except FileNotFoundError:
            pass
        raise

    logger.debug(f"{STORAGE} Wrote {len(content)} chars to {path}")


__all__ = ["write_text_atomic", "temp_path_for"]
