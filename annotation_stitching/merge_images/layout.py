from itertools import accumulate
from typing import List, Sequence, Tuple

import numpy as np

from annotation_stitching.errors import EmptyGroupError

from .types import CanvasLayout


def image_dimensions(images: Sequence[np.ndarray]) -> List[Tuple[int, int]]:
    """(height, width) of each raster."""
    return [(int(image.shape[0]), int(image.shape[1])) for image in images]


def plan_layout(dimensions: Sequence[Tuple[int, int]]) -> CanvasLayout:
    """Stack images vertically, without scaling, on a canvas as wide as the widest one.

    Args:
        dimensions: (height, width) of each image, in stacking order

    Returns:
        CanvasLayout with the summed height, the maximum width and the row
        offset at which each image starts.
    """
    if len(dimensions) == 0:
        raise EmptyGroupError("Cannot plan a canvas for an empty group")

    heights = [int(h) for h, _ in dimensions]
    widths = [int(w) for _, w in dimensions]

    if min(heights) <= 0 or min(widths) <= 0:
        raise ValueError(f"Image dimensions must be positive, got {list(dimensions)}")

    offsets = tuple([0] + list(accumulate(heights))[:-1])

    return CanvasLayout(height=sum(heights), width=max(widths), offsets=offsets)
