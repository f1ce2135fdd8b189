"""Reading HTML++ sources and writing the compiled HTML."""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path

from .constants import HTMLPLUSPLUS_EXTENSIONS

MAX_FILE_SIZE_ENV_VAR = "HTMLPLUSPLUS_MAX_FILE_SIZE"


def resolve_max_file_size(configured: int) -> int:
    """Return the input size limit in bytes.

    `HTMLPLUSPLUS_MAX_FILE_SIZE`, when set, takes precedence over `configured`.

    Raises:
        ValueError: If the environment value is not a positive integer.
    """
    raw_value = os.environ.get(MAX_FILE_SIZE_ENV_VAR, "").strip()
    if not raw_value:
        return configured
    if not raw_value.isdigit() or int(raw_value) == 0:
        raise ValueError(f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {raw_value!r}")
    return int(raw_value)


def resolve_source(raw_path: str) -> Path:
    """Return the absolute path of an HTML++ source file.

    Args:
        raw_path: Path given on the command line.

    Returns:
        Path: The resolved path.

    Raises:
        ValueError: If nothing is there, it is not a regular file, or its
            extension is not one of `HTMLPLUSPLUS_EXTENSIONS`.

    Examples:
        resolve_source("posts/intro.hpp")
    """
    path = Path(raw_path).expanduser().resolve()
    if not path.exists():
        raise ValueError(f"{path} does not exist.")
    if not path.is_file():
        raise ValueError(f"{path} is not a regular file.")
    if path.suffix.lower() not in HTMLPLUSPLUS_EXTENSIONS:
        raise ValueError(
            f"{path.name} is not an HTML++ file "
            f"(expected one of: {', '.join(HTMLPLUSPLUS_EXTENSIONS)})."
        )
    return path


def check_source_size(path: Path, max_size: int) -> None:
    """Reject sources larger than `max_size` bytes.

    Raises:
        IOError: If the file cannot be inspected or is too large.
    """
    try:
        size = path.stat().st_size
    except OSError as error:
        raise IOError(f"Error accessing {path}: {error}") from error
    if size > max_size:
        raise IOError(f"{path} is {size} bytes, over the limit of {max_size} bytes.")


def read_source(path: Path) -> str:
    """Return the UTF-8 text of an HTML++ source file.

    Raises:
        IOError: If the file cannot be opened or read.
        UnicodeDecodeError: If the file is not valid UTF-8.
    """
    try:
        return path.read_text(encoding="UTF-8")
    except OSError as error:
        raise IOError(f"Error accessing {path}: {error}") from error


def write_output(path: Path, html: str) -> None:
    """Replace `path` with `html` in a single rename.

    An existing file keeps its permission bits; a new one gets ``0o644``.

    Raises:
        IOError: If `path` is a symlink or the write fails.

    Examples:
        write_output(Path("post.html"), "<p>Hello</p>")
    """
    if path.is_symlink():
        raise IOError(f"Refusing to write through symlink: {path}")

    mode = stat.S_IMODE(path.stat().st_mode) if path.exists() else 0o644
    handle, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(handle, "w", encoding="UTF-8") as stream:
            stream.write(html)
        os.chmod(temp_name, mode)
        os.replace(temp_name, path)
    except OSError as error:
        Path(temp_name).unlink(missing_ok=True)
        raise IOError(f"Error writing {path}: {error}") from error
