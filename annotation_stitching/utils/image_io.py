import logging
from pathlib import PurePosixPath

import cv2
import fsspec
import numpy as np

from annotation_stitching.errors import DecodeError, EncodingError

from .storage_fs import read_bytes, write_bytes

logger = logging.getLogger(__name__)


def image_extension(filename: str, default: str = ".jpg") -> str:
    """Container format of an image file, as a lower-case extension."""
    suffix = PurePosixPath(filename.replace("\\", "/")).suffix.lower()
    return suffix or default


def decode_image(data: bytes, source: str = "<bytes>") -> np.ndarray:
    """Decode image bytes to a 3-channel BGR array."""
    buffer = np.frombuffer(data, dtype=np.uint8)
    image = cv2.imdecode(buffer, cv2.IMREAD_COLOR) if buffer.size else None

    if image is None:
        raise DecodeError(f"Could not decode image: {source}")

    return image


def encode_image(image: np.ndarray, extension: str) -> bytes:
    try:
        ok, buffer = cv2.imencode(extension, image)
    except cv2.error as e:
        raise EncodingError(f"Could not encode image as {extension}: {e}") from e

    if not ok:
        raise EncodingError(f"Could not encode image as {extension}")

    return buffer.tobytes()


def load_image(fs: fsspec.AbstractFileSystem, path: str) -> np.ndarray:
    image = decode_image(read_bytes(fs, path), source=path)
    logger.debug(f"Loaded image {path} with shape {image.shape}")
    return image


def save_image(fs: fsspec.AbstractFileSystem, path: str, image: np.ndarray, extension: str) -> None:
    write_bytes(fs, path, encode_image(image, extension))
    logger.debug(f"Saved image with shape {image.shape} to {path}")
