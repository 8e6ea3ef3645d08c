import logging
from typing import Sequence

import numpy as np

from annotation_stitching.errors import EmptyGroupError

from .types import CanvasLayout

logger = logging.getLogger(__name__)


def compose_canvas(layout: CanvasLayout, images: Sequence[np.ndarray]) -> np.ndarray:
    """Copy each image verbatim into its row slot on a black canvas."""
    if len(images) == 0:
        raise EmptyGroupError("Cannot compose a canvas without images")

    if len(images) != len(layout.offsets):
        raise ValueError(f"Got {len(images)} images for {len(layout.offsets)} offsets")

    canvas = np.zeros((layout.height, layout.width, 3), dtype=images[0].dtype)

    for idx, (image, offset) in enumerate(zip(images, layout.offsets)):
        height, width = image.shape[:2]

        if offset + height > layout.height or width > layout.width:
            raise ValueError(
                f"Image {idx} of size {width}x{height} does not fit at row {offset} "
                f"of a {layout.width}x{layout.height} canvas"
            )

        canvas[offset : offset + height, 0:width] = image
        logger.debug(f"Placed image {idx} at rows [{offset}, {offset + height})")

    return canvas
