import logging

import numpy as np
import supervision as sv

from annotation_stitching.utils import save_annotation_document, save_image
from annotation_stitching.utils.annotation_json import AnnotationDocument

from .types import ImageMergingContext, MergedGroup

logger = logging.getLogger(__name__)

# Indexed by class_id % 3
DEBUG_PALETTE = sv.ColorPalette(
    colors=[
        sv.Color(r=255, g=0, b=0),
        sv.Color(r=0, g=255, b=0),
        sv.Color(r=0, g=0, b=255),
    ]
)

IMAGES_SUBFOLDER = "images"
ANNOTATIONS_SUBFOLDER = "annotations"
DEBUG_SUBFOLDER = "debug"


def annotations_to_detections(document: AnnotationDocument) -> sv.Detections:
    if not document.annotations:
        return sv.Detections.empty()

    return sv.Detections(
        xyxy=np.array([box.xyxy for box in document.annotations], dtype=np.float32),
        class_id=np.array([box.class_id for box in document.annotations], dtype=int),
    )


def render_debug_image(image: np.ndarray, document: AnnotationDocument, thickness: int = 2) -> np.ndarray:
    """Copy of the image with every box outlined in its class colour."""
    scene = image.copy()
    detections = annotations_to_detections(document)

    if len(detections) == 0:
        return scene

    annotator = sv.BoxAnnotator(
        color=DEBUG_PALETTE, thickness=thickness, color_lookup=sv.ColorLookup.CLASS
    )
    return annotator.annotate(scene=scene, detections=detections)


def write_merged_image(ctx: ImageMergingContext, merged: MergedGroup) -> str:
    path = ctx.output_path(IMAGES_SUBFOLDER, merged.document.file)
    save_image(ctx.fs, path, merged.image, merged.extension)
    return path


def write_annotation_document(ctx: ImageMergingContext, merged: MergedGroup) -> str:
    path = ctx.output_path(ANNOTATIONS_SUBFOLDER, f"{merged.stem}.json")
    save_annotation_document(ctx.fs, path, merged.document)
    return path


def write_debug_image(ctx: ImageMergingContext, merged: MergedGroup) -> str:
    debug_image = render_debug_image(merged.image, merged.document)

    path = ctx.output_path(DEBUG_SUBFOLDER, merged.document.file)
    save_image(ctx.fs, path, debug_image, merged.extension)
    return path


def write_merged_outputs(ctx: ImageMergingContext, merged: MergedGroup) -> None:
    """Persist merged image, merged document and, if enabled, the debug image.

    Each artifact is written on its own; a failure leaves earlier ones in place.
    """
    image_path = write_merged_image(ctx, merged)
    logger.debug(f"Wrote merged image: {image_path}")

    document_path = write_annotation_document(ctx, merged)
    logger.debug(f"Wrote merged annotations: {document_path}")

    if ctx.draw_debug:
        debug_path = write_debug_image(ctx, merged)
        logger.debug(f"Wrote debug image: {debug_path}")

    logger.info(
        f"Saved {merged.stem}: {merged.layout.width}x{merged.layout.height} canvas, "
        f"{len(merged.document.annotations)} boxes"
    )
