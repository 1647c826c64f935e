"""
Utility functions for file system paths and upload filenames.
"""

from __future__ import annotations

import time
from pathlib import Path, PurePath
from typing import Optional


def ensure_directory(path: Path) -> Path:
    """
    Create a directory if it doesn't exist, including parent directories.

    Args:
        path: The directory path to create

    Returns:
        The same path object for chaining
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def original_basename(filename: str) -> str:
    """
    Reduce a client supplied filename to its last path component.

    Example:
        >>> original_basename("C:\\\\photos\\\\me.png")
        "me.png"
    """
    return PurePath(filename.replace("\\", "/")).name


def make_photo_filename(original_name: str, now_ms: Optional[int] = None) -> str:
    """
    Build the storage key for an uploaded file: ``{epoch-millis}-{name}``.

    Two uploads with the same name in the same millisecond map to the same
    key; the second silently replaces the first.
    """
    timestamp = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"{timestamp}-{original_basename(original_name) or 'photo'}"
