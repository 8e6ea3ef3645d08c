# merge_images/__init__.py
from .compositing import compose_canvas
from .image_merging import merge_group, merge_images
from .layout import image_dimensions, plan_layout
from .loading import group_locations, list_annotation_documents, load_group
from .remapping import remap_annotations, shift_annotations
from .types import CanvasLayout, ImageMergingContext, LoadedSample, MergedGroup
from .writing import render_debug_image, write_merged_outputs

__all__ = [
    # Pipeline
    "merge_group",
    "merge_images",
    # Loading
    "list_annotation_documents",
    "group_locations",
    "load_group",
    # Layout and compositing
    "plan_layout",
    "image_dimensions",
    "compose_canvas",
    # Remapping
    "shift_annotations",
    "remap_annotations",
    # Writing
    "render_debug_image",
    "write_merged_outputs",
    # Data types
    "ImageMergingContext",
    "CanvasLayout",
    "LoadedSample",
    "MergedGroup",
]
