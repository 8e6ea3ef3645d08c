from pathlib import Path
import posixpath
import re
from typing import Callable, Tuple

import fsspec

from annotation_stitching.errors import NotFoundError, WriteError


def create_storage(config: dict) -> Tuple[fsspec.AbstractFileSystem, Callable[[str], str]]:
    """Create filesystem and path resolver from config."""
    storage_type = config["type"]
    base_data_dir = config["base_data_dir"]

    if base_data_dir is None:
        raise ValueError(f"Missing base_data_dir for storage environment: {storage_type}")

    # Create filesystem
    fs = fsspec.filesystem(storage_type, **(config.get("fs_kwargs") or {}))

    # Create path resolver
    if storage_type == "file":

        def resolve_path(relative_path: str) -> str:
            relative_path = _normalize_path(relative_path)
            return str(Path(base_data_dir) / relative_path)

    else:
        base_data_dir = _normalize_path(str(base_data_dir))

        def resolve_path(relative_path: str) -> str:
            relative_path = _normalize_path(relative_path)
            return f"{storage_type}://{posixpath.join(base_data_dir, relative_path)}"

    return fs, resolve_path


def parent_path(path: str) -> str:
    """Directory-like parent of a resolved path, keeping any protocol prefix."""
    return posixpath.dirname(path.replace("\\", "/").rstrip("/"))


def read_bytes(fs: fsspec.AbstractFileSystem, path: str) -> bytes:
    """Read a whole blob, raising NotFoundError when no blob exists at the location."""
    try:
        with fs.open(path, "rb") as f:
            return f.read()
    except FileNotFoundError as e:
        raise NotFoundError(f"Location not found: {path}") from e
    except IsADirectoryError as e:
        raise NotFoundError(f"Location is a directory, not a blob: {path}") from e


def write_bytes(fs: fsspec.AbstractFileSystem, path: str, data: bytes) -> None:
    """Write a whole blob, creating the parent prefix if the backend needs it."""
    try:
        parent = parent_path(path)
        if parent:
            fs.makedirs(parent, exist_ok=True)
        with fs.open(path, "wb") as f:
            f.write(data)
    except OSError as e:
        raise WriteError(f"Could not write {path}: {e}") from e


def _normalize_path(path: str) -> str:
    """Normalize path for cross-platform compatibility."""
    normalized = path.replace("\\", "/")
    normalized = normalized.strip("/")
    normalized = re.sub(r"/{2,}", "/", normalized)

    return normalized
