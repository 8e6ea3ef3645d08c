import json
import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, Mapping, Tuple

import fsspec

from annotation_stitching.errors import EncodingError, ParseError

from .storage_fs import read_bytes, write_bytes

logger = logging.getLogger(__name__)


def _as_int(value: Any, field_name: str) -> int:
    """Coerce a JSON number to a plain int, rejecting booleans and fractional values."""
    if isinstance(value, bool):
        raise ParseError(f"Field '{field_name}' must be an integer, got boolean")

    if isinstance(value, int):
        return int(value)

    if isinstance(value, float) and value.is_integer():
        return int(value)

    raise ParseError(f"Field '{field_name}' must be an integer, got {value!r}")


def _require(payload: Any, key: str, context: str) -> Any:
    if not isinstance(payload, Mapping):
        raise ParseError(f"{context} must be a JSON object, got {type(payload).__name__}")
    if key not in payload:
        raise ParseError(f"{context} is missing required field '{key}'")
    return payload[key]


def _require_list(payload: Any, key: str, context: str) -> list:
    value = _require(payload, key, context)
    if not isinstance(value, list):
        raise ParseError(f"Field '{key}' in {context} must be a list")
    return value


@dataclass(frozen=True)
class BBox:
    """Axis-aligned pixel box with top-left origin."""

    class_id: int
    left: int
    top: int
    width: int
    height: int

    @classmethod
    def from_dict(cls, payload: Any) -> "BBox":
        values = {
            key: _as_int(_require(payload, key, "annotation"), key)
            for key in ("class_id", "left", "top", "width", "height")
        }
        return cls(**values)

    def to_dict(self) -> Dict[str, int]:
        return {
            "class_id": int(self.class_id),
            "left": int(self.left),
            "top": int(self.top),
            "width": int(self.width),
            "height": int(self.height),
        }

    def shifted(self, dy: int) -> "BBox":
        """Copy of the box moved down by dy pixels."""
        return replace(self, top=int(self.top + dy))

    def fits_within(self, width: int, height: int) -> bool:
        return (
            self.left >= 0
            and self.top >= 0
            and self.left + self.width <= width
            and self.top + self.height <= height
        )

    @property
    def xyxy(self) -> Tuple[int, int, int, int]:
        return (self.left, self.top, self.left + self.width, self.top + self.height)


@dataclass(frozen=True)
class Category:
    class_id: int
    name: str

    @classmethod
    def from_dict(cls, payload: Any) -> "Category":
        name = _require(payload, "name", "category")
        if not isinstance(name, str):
            raise ParseError(f"Category name must be a string, got {name!r}")
        return cls(class_id=_as_int(_require(payload, "class_id", "category"), "class_id"), name=name)

    def to_dict(self) -> Dict[str, Any]:
        return {"class_id": int(self.class_id), "name": self.name}


@dataclass(frozen=True)
class ImageSize:
    width: int
    height: int
    depth: int = 3

    @classmethod
    def from_dict(cls, payload: Any) -> "ImageSize":
        return cls(
            width=_as_int(_require(payload, "width", "image_size"), "width"),
            height=_as_int(_require(payload, "height", "image_size"), "height"),
            depth=_as_int(_require(payload, "depth", "image_size"), "depth"),
        )

    def to_dict(self) -> Dict[str, int]:
        return {"width": int(self.width), "height": int(self.height), "depth": int(self.depth)}


@dataclass(frozen=True)
class AnnotationDocument:
    """Labelled image description as exchanged with the training pipeline.

    A merged result uses the same shape with a single-element image_size.
    """

    file: str
    image_size: Tuple[ImageSize, ...]
    annotations: Tuple[BBox, ...]
    categories: Tuple[Category, ...]

    @classmethod
    def from_dict(cls, payload: Any) -> "AnnotationDocument":
        file = _require(payload, "file", "annotation document")
        if not isinstance(file, str) or not file:
            raise ParseError(f"Field 'file' must be a non-empty string, got {file!r}")

        image_size = tuple(
            ImageSize.from_dict(item)
            for item in _require_list(payload, "image_size", "annotation document")
        )
        if not image_size:
            raise ParseError(f"Field 'image_size' of {file} must not be empty")

        annotations = tuple(
            BBox.from_dict(item)
            for item in _require_list(payload, "annotations", "annotation document")
        )
        categories = tuple(
            Category.from_dict(item)
            for item in _require_list(payload, "categories", "annotation document")
        )

        return cls(file=file, image_size=image_size, annotations=annotations, categories=categories)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file": self.file,
            "image_size": [size.to_dict() for size in self.image_size],
            "annotations": [box.to_dict() for box in self.annotations],
            "categories": [category.to_dict() for category in self.categories],
        }

    def with_categories(self, categories: Tuple[Category, ...]) -> "AnnotationDocument":
        return replace(self, categories=tuple(categories))


def categories_from_class_label(class_label: Mapping[int, str]) -> Tuple[Category, ...]:
    """Build an ordered category table from a {class_id: name} mapping."""
    return tuple(
        Category(class_id=int(class_id), name=str(name))
        for class_id, name in sorted(class_label.items(), key=lambda item: int(item[0]))
    )


def parse_annotation_document(raw: bytes, source: str = "<bytes>") -> AnnotationDocument:
    try:
        payload = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ParseError(f"Malformed annotation JSON in {source}: {e}") from e

    try:
        return AnnotationDocument.from_dict(payload)
    except ParseError as e:
        raise ParseError(f"Invalid annotation document {source}: {e}") from e


def dump_annotation_document(document: AnnotationDocument) -> bytes:
    """Serialize to UTF-8 JSON in strict mode."""
    text = json.dumps(document.to_dict(), ensure_ascii=False, indent=2)
    try:
        return text.encode("utf-8", errors="strict")
    except UnicodeEncodeError as e:
        raise EncodingError(f"Annotation document {document.file!r} is not UTF-8 encodable: {e}") from e


def load_annotation_document(fs: fsspec.AbstractFileSystem, path: str) -> AnnotationDocument:
    logger.debug(f"Loading annotation document: {path}")
    return parse_annotation_document(read_bytes(fs, path), source=path)


def save_annotation_document(
    fs: fsspec.AbstractFileSystem, path: str, document: AnnotationDocument
) -> None:
    data = dump_annotation_document(document)
    write_bytes(fs, path, data)
    logger.debug(f"Saved annotation document with {len(document.annotations)} boxes to {path}")
