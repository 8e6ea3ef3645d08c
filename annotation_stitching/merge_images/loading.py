import logging
import posixpath
from typing import List, Sequence

from annotation_stitching.utils import load_annotation_document, load_image

from .types import ImageMergingContext, LoadedSample

logger = logging.getLogger(__name__)


def list_annotation_documents(ctx: ImageMergingContext) -> List[str]:
    """List annotation documents under the annotations prefix, in a stable order."""
    pattern = posixpath.join(ctx.annotations_dir.replace("\\", "/"), "*.json")
    locations = sorted(path for path in ctx.fs.glob(pattern) if not ctx.fs.isdir(path))

    logger.info(f"Found {len(locations)} annotation documents in {ctx.annotations_dir}")
    return locations


def group_locations(
    locations: Sequence[str], group_size: int, keep_remainder: bool = False
) -> List[List[str]]:
    """Split locations into consecutive groups of group_size."""
    if group_size < 1:
        raise ValueError(f"group_size must be a positive integer, got {group_size}")

    groups = [list(locations[i : i + group_size]) for i in range(0, len(locations), group_size)]

    if groups and len(groups[-1]) < group_size and not keep_remainder:
        dropped = groups.pop()
        logger.warning(
            f"Dropping {len(dropped)} trailing documents that do not fill a group of {group_size}"
        )

    return groups


def _load_sample(ctx: ImageMergingContext, location: str) -> LoadedSample:
    document = load_annotation_document(ctx.fs, location)
    image = load_image(ctx.fs, ctx.image_path(document.file))

    height, width = image.shape[:2]
    declared = document.image_size[0]
    if (declared.width, declared.height) != (width, height):
        logger.warning(
            f"Declared size {declared.width}x{declared.height} of {document.file} differs "
            f"from decoded size {width}x{height}; using decoded size"
        )

    outside = [box for box in document.annotations if not box.fits_within(width, height)]
    if outside:
        logger.warning(f"{len(outside)} boxes fall outside image {document.file}")

    return LoadedSample(location=location, document=document, image=image)


def load_group(ctx: ImageMergingContext, locations: Sequence[str]) -> List[LoadedSample]:
    """Load annotation documents and their images, keeping the given order."""
    logger.debug(f"Loading group of {len(locations)} documents")

    samples = []
    for idx, location in enumerate(locations):
        logger.debug(f"Loading document {idx + 1}/{len(locations)}: {location}")
        samples.append(_load_sample(ctx, location))

    return samples
