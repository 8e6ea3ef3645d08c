from .annotation_json import (
    AnnotationDocument,
    BBox,
    Category,
    ImageSize,
    categories_from_class_label,
    load_annotation_document,
    save_annotation_document,
)
from .image_io import image_extension, load_image, save_image
from .logging import setup_logging
from .storage_fs import create_storage
from .yaml_config import check_missing_keys, load_config

__all__ = [
    # Annotation documents
    "AnnotationDocument",
    "BBox",
    "Category",
    "ImageSize",
    "categories_from_class_label",
    "load_annotation_document",
    "save_annotation_document",
    # Images
    "image_extension",
    "load_image",
    "save_image",
    # Logging
    "setup_logging",
    # Storage
    "create_storage",
    # Config
    "load_config",
    "check_missing_keys",
]
