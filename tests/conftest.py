import json
import uuid
from pathlib import Path
from typing import List, Sequence, Tuple

import cv2
import fsspec
import numpy as np
import pytest

from annotation_stitching.merge_images import ImageMergingContext
from annotation_stitching.utils import create_storage

CLASS_LABEL = {0: "person", 1: "bicycle", 2: "car"}


def make_image(height: int, width: int, seed: int) -> np.ndarray:
    rng = np.random.default_rng(seed)
    return rng.integers(1, 255, size=(height, width, 3), dtype=np.uint8)


def make_document(file: str, height: int, width: int, boxes: Sequence[Tuple[int, ...]]) -> dict:
    return {
        "file": file,
        "image_size": [{"width": width, "height": height, "depth": 3}],
        "annotations": [
            {"class_id": c, "left": l, "top": t, "width": w, "height": h} for c, l, t, w, h in boxes
        ],
        "categories": [{"class_id": 0, "name": "local-name"}],
    }


def write_sample(root: Path, stem: str, image: np.ndarray, boxes=()) -> None:
    """Store a PNG image and its annotation document under a local dataset root."""
    (root / "images").mkdir(parents=True, exist_ok=True)
    (root / "annotations").mkdir(parents=True, exist_ok=True)

    cv2.imwrite(str(root / "images" / f"{stem}.png"), image)
    document = make_document(f"{stem}.png", image.shape[0], image.shape[1], boxes)
    (root / "annotations" / f"{stem}.json").write_text(json.dumps(document), encoding="utf-8")


@pytest.fixture
def dataset_root(tmp_path: Path) -> Path:
    root = tmp_path / "dataset"
    (root / "images").mkdir(parents=True)
    (root / "annotations").mkdir(parents=True)
    return root


@pytest.fixture
def make_context(tmp_path: Path, dataset_root: Path):
    def _make(**overrides) -> ImageMergingContext:
        fs, resolve_path = create_storage(
            {"type": "file", "base_data_dir": str(tmp_path), "fs_kwargs": {}}
        )
        params = dict(
            fs=fs,
            resolve_path=resolve_path,
            dataset_folder=dataset_root.name,
            annotations_folder="annotations",
            images_folder="images",
            output_folder="merged",
            class_label=dict(CLASS_LABEL),
        )
        params.update(overrides)
        return ImageMergingContext(**params)

    return _make


@pytest.fixture
def memory_storage():
    """In-memory fsspec storage rooted at a bucket unique to the test."""
    bucket = f"bucket-{uuid.uuid4().hex}"
    return create_storage({"type": "memory", "base_data_dir": bucket, "fs_kwargs": {}})


def put_sample(fs: fsspec.AbstractFileSystem, resolve_path, stem: str, image: np.ndarray, boxes=()):
    ok, buffer = cv2.imencode(".png", image)
    assert ok
    fs.pipe(resolve_path(f"ds/images/{stem}.png"), buffer.tobytes())

    document = make_document(f"{stem}.png", image.shape[0], image.shape[1], boxes)
    fs.pipe(resolve_path(f"ds/annotations/{stem}.json"), json.dumps(document).encode("utf-8"))


def read_json(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


def stems(count: int) -> List[str]:
    return [f"frame_{i:03d}" for i in range(count)]
