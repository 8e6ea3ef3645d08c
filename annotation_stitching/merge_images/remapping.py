import logging
from typing import Dict, Sequence, Tuple

from annotation_stitching.errors import EmptyGroupError
from annotation_stitching.utils.annotation_json import (
    AnnotationDocument,
    BBox,
    ImageSize,
    categories_from_class_label,
)

logger = logging.getLogger(__name__)


def shift_annotations(document: AnnotationDocument, offset: int) -> Tuple[BBox, ...]:
    """New boxes moved down by offset; left, width and height are kept."""
    return tuple(box.shifted(int(offset)) for box in document.annotations)


def remap_annotations(
    documents: Sequence[AnnotationDocument],
    offsets: Sequence[int],
    class_label: Dict[int, str],
    file: str,
    image_size: ImageSize,
) -> AnnotationDocument:
    """Merge per-image annotations into one document for the stacked canvas.

    Boxes keep source order, then in-document order. The categories of the
    sources are discarded in favour of the unified class_label mapping, so two
    sources naming the same class id differently cannot collide silently.
    """
    if len(documents) == 0:
        raise EmptyGroupError("Cannot remap annotations of an empty group")

    if len(documents) != len(offsets):
        raise ValueError(f"Got {len(documents)} documents for {len(offsets)} offsets")

    annotations = []
    for document, offset in zip(documents, offsets):
        shifted = shift_annotations(document, offset)
        annotations.extend(shifted)
        logger.debug(f"Shifted {len(shifted)} boxes of {document.file} by {offset} rows")

        conflicting = {
            category.class_id: category.name
            for category in document.categories
            if class_label.get(category.class_id, category.name) != category.name
        }
        if conflicting:
            logger.debug(f"Overriding local category names of {document.file}: {conflicting}")

    return AnnotationDocument(
        file=file,
        image_size=(image_size,),
        annotations=tuple(annotations),
        categories=categories_from_class_label(class_label),
    )
