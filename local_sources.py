"""Local filesystem statement discovery for the dashboard picker."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from parsing import STATEMENT_FILE_EXTENSIONS


def collect_statement_paths(
    folder_path: str,
    recursive: bool = False,
    supported_extensions: Iterable[str] = (),
) -> list[Path]:
    """Collect statement file paths from a folder, newest first."""
    root = Path(folder_path).expanduser()
    if not root.exists():
        raise FileNotFoundError(f"Folder does not exist: {root}")
    if not root.is_dir():
        raise NotADirectoryError(f"Not a folder: {root}")

    exts = {str(ext).lower() for ext in supported_extensions}
    if not exts:
        exts = set(STATEMENT_FILE_EXTENSIONS)

    iterator = root.rglob("*") if recursive else root.glob("*")
    paths = [
        path
        for path in iterator
        if path.is_file() and path.suffix.lower() in exts
    ]
    return sorted(paths, key=lambda p: (-p.stat().st_mtime, p.name))
