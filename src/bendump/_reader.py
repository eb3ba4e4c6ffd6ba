"""Whole-file loading for bencoded documents."""

from __future__ import annotations

import io
import os
from pathlib import Path


class FileReadError(OSError):
    """Raised when a file cannot be read in full."""


def read_file(path: str | os.PathLike[str]) -> bytes:
    """Reads an entire file into memory.

    The file size is taken by seeking to its end, and the number of bytes
    actually read must match it. Unseekable files (pipes, terminals) are
    rejected.

    Args:
        path: Location of the file to read

    Returns:
        The complete file contents

    Raises:
        FileReadError: If the file is unseekable or shorter than reported
        OSError: If the file cannot be opened or read
    """
    file_path = Path(path)
    with file_path.open("rb") as fp:
        try:
            size = fp.seek(0, io.SEEK_END)
            fp.seek(0)
        except io.UnsupportedOperation as e:
            raise FileReadError(f"{file_path}: file is not seekable") from e

        data = fp.read(size)

    if len(data) != size:
        raise FileReadError(
            f"{file_path}: expected {size} bytes, read {len(data)}"
        )
    return data
