"""File writing helpers."""

import contextlib
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import TextIO


def write_atomically(path: Path, write: Callable[[TextIO], None]) -> int:
    """Write a text file through a temporary sibling, then move it into place.

    The target is either left untouched or fully replaced; a failed write
    removes the temporary file and re-raises.

    Args:
        path: Destination file
        write: Callback receiving the open temporary file

    Returns:
        Size of the written file in bytes
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            newline="",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            tmp_path = Path(handle.name)
            write(handle)
        tmp_path.replace(path)
    except Exception:
        if tmp_path is not None:
            with contextlib.suppress(OSError):
                tmp_path.unlink()
        raise
    return path.stat().st_size
