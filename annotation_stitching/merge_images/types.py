import posixpath
from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple

import fsspec
import numpy as np

from annotation_stitching.errors import NotFoundError
from annotation_stitching.utils.annotation_json import AnnotationDocument


@dataclass
class ImageMergingContext:
    fs: fsspec.AbstractFileSystem
    resolve_path: Callable[[str], str]

    dataset_folder: str
    annotations_folder: str
    images_folder: str
    output_folder: str

    class_label: Dict[int, str]

    group_size: int = 6
    keep_remainder: bool = False
    draw_debug: bool = False
    output_prefix: str = "merged"

    @property
    def annotations_dir(self) -> str:
        return self.resolve_path(posixpath.join(self.dataset_folder, self.annotations_folder))

    @property
    def images_dir(self) -> str:
        return self.resolve_path(posixpath.join(self.dataset_folder, self.images_folder))

    @property
    def output_dir(self) -> str:
        return self.resolve_path(posixpath.join(self.dataset_folder, self.output_folder))

    def image_path(self, filename: str) -> str:
        return self.resolve_path(posixpath.join(self.dataset_folder, self.images_folder, filename))

    def output_path(self, subfolder: str, filename: str) -> str:
        return self.resolve_path(
            posixpath.join(self.dataset_folder, self.output_folder, subfolder, filename)
        )

    def __post_init__(self):
        """Validate settings and that the input folders exist."""
        if int(self.group_size) < 1:
            raise ValueError(f"group_size must be a positive integer, got {self.group_size}")
        self.group_size = int(self.group_size)

        if not self.class_label:
            raise ValueError("class_label must map at least one class id to a name")
        self.class_label = {int(k): str(v) for k, v in self.class_label.items()}

        for input_dir in (self.annotations_dir, self.images_dir):
            if not self.fs.exists(input_dir):
                raise NotFoundError(f"Input folder not found: {input_dir}")


@dataclass(frozen=True)
class CanvasLayout:
    """Vertical stacking plan: canvas size and each image's row offset."""

    height: int
    width: int
    offsets: Tuple[int, ...]


@dataclass
class LoadedSample:
    location: str
    document: AnnotationDocument
    image: np.ndarray


@dataclass
class MergedGroup:
    image: np.ndarray
    document: AnnotationDocument
    layout: CanvasLayout
    extension: str
    sources: List[str]

    @property
    def stem(self) -> str:
        return posixpath.splitext(self.document.file)[0]
