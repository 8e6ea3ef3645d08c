import logging
from typing import List, Sequence

from annotation_stitching.errors import EmptyGroupError
from annotation_stitching.utils import ImageSize, image_extension

from .compositing import compose_canvas
from .layout import image_dimensions, plan_layout
from .loading import group_locations, list_annotation_documents, load_group
from .remapping import remap_annotations
from .types import ImageMergingContext, MergedGroup
from .writing import write_merged_outputs

logger = logging.getLogger(__name__)


def merge_group(ctx: ImageMergingContext, locations: Sequence[str], output_stem: str) -> MergedGroup:
    """Stack one group of annotated images into a single image and document."""
    if len(locations) == 0:
        raise EmptyGroupError("Cannot merge an empty group")

    samples = load_group(ctx, locations)
    images = [sample.image for sample in samples]

    layout = plan_layout(image_dimensions(images))
    logger.debug(f"Canvas {layout.width}x{layout.height}, offsets {list(layout.offsets)}")

    canvas = compose_canvas(layout, images)

    extension = image_extension(samples[0].document.file)
    document = remap_annotations(
        [sample.document for sample in samples],
        layout.offsets,
        ctx.class_label,
        file=f"{output_stem}{extension}",
        image_size=ImageSize(width=layout.width, height=layout.height, depth=canvas.shape[2]),
    )

    return MergedGroup(
        image=canvas,
        document=document,
        layout=layout,
        extension=extension,
        sources=list(locations),
    )


def _merge_images(ctx: ImageMergingContext) -> List[MergedGroup]:
    locations = list_annotation_documents(ctx)
    groups = group_locations(locations, ctx.group_size, ctx.keep_remainder)

    if not groups:
        raise EmptyGroupError(
            f"No group of {ctx.group_size} annotation documents found in {ctx.annotations_dir}"
        )

    logger.info(f"Merging {len(groups)} groups of up to {ctx.group_size} images")

    merged_groups = []
    for group_idx, group in enumerate(groups):
        output_stem = f"{ctx.output_prefix}_{group_idx:05d}"
        logger.debug(f"Processing group {group_idx + 1}/{len(groups)}: {output_stem}")

        merged = merge_group(ctx, group, output_stem)
        write_merged_outputs(ctx, merged)
        merged_groups.append(merged)

    return merged_groups


def merge_images(ctx: ImageMergingContext) -> List[MergedGroup]:
    """Stack fixed-size groups of annotated images and save the merged results.

    Args:
        ctx: Context with storage, dataset folders, group size and unified class labels

    Returns:
        The merged groups, in listing order.
    """
    logger.info("Starting image merging process")
    logger.info(f"Annotations directory: {ctx.annotations_dir}")
    logger.info(f"Images directory: {ctx.images_dir}")
    logger.info(f"Output directory: {ctx.output_dir}")

    try:
        merged_groups = _merge_images(ctx)
    except Exception as e:
        logger.error(f"Image merging failed: {e}")
        raise

    logger.info(f"Image merging completed successfully: {len(merged_groups)} merged images")
    return merged_groups
