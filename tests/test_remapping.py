import json

import numpy as np
import pytest

from annotation_stitching.errors import EmptyGroupError
from annotation_stitching.merge_images import plan_layout, remap_annotations, shift_annotations
from annotation_stitching.utils import AnnotationDocument, BBox, Category, ImageSize
from annotation_stitching.utils.annotation_json import dump_annotation_document

from conftest import CLASS_LABEL, make_document


def _document(file, boxes, height=136, width=780):
    return AnnotationDocument.from_dict(make_document(file, height, width, boxes))


def test_shift_only_moves_top():
    document = _document("a.png", [(1, 5, 6, 7, 8)])

    (box,) = shift_annotations(document, 100)

    assert box == BBox(class_id=1, left=5, top=106, width=7, height=8)
    assert document.annotations[0].top == 6


def test_box_in_third_strip_lands_at_310():
    documents = [_document(f"{i}.png", []) for i in range(6)]
    documents[2] = _document("2.png", [(0, 300, 38, 100, 52)])
    layout = plan_layout([(136, 780)] * 6)

    merged = remap_annotations(
        documents, layout.offsets, CLASS_LABEL, "merged.png", ImageSize(780, 816, 3)
    )

    assert merged.annotations == (BBox(class_id=0, left=300, top=310, width=100, height=52),)


def test_order_is_source_then_document_order():
    documents = [
        _document("a.png", [(0, 1, 1, 1, 1), (1, 2, 2, 2, 2)], height=10),
        _document("b.png", [(2, 3, 3, 3, 3)], height=10),
    ]

    merged = remap_annotations(documents, (0, 10), CLASS_LABEL, "m.png", ImageSize(10, 20, 3))

    assert [box.class_id for box in merged.annotations] == [0, 1, 2]
    assert [box.top for box in merged.annotations] == [1, 2, 13]


def test_categories_replaced_by_unified_mapping():
    documents = [_document("a.png", [(0, 1, 1, 1, 1)])]

    merged = remap_annotations(documents, (0,), {2: "car", 0: "person"}, "m.png", ImageSize(780, 136, 3))

    assert merged.categories == (Category(0, "person"), Category(2, "car"))


def test_group_of_one_equals_remapped_source():
    source = _document("a.png", [(0, 10, 20, 30, 40), (2, 0, 0, 5, 5)])
    layout = plan_layout([(136, 780)])

    merged = remap_annotations(
        [source], layout.offsets, CLASS_LABEL, source.file, source.image_size[0]
    )

    assert layout.offsets == (0,)
    expected = AnnotationDocument(
        file=source.file,
        image_size=source.image_size,
        annotations=source.annotations,
        categories=(Category(0, "person"), Category(1, "bicycle"), Category(2, "car")),
    )
    assert merged == expected


def test_numpy_offsets_serialize_as_json_integers():
    documents = [_document("a.png", [(0, 1, 2, 3, 4)]), _document("b.png", [(1, 1, 2, 3, 4)])]
    offsets = np.array([0, 136], dtype=np.int64)

    merged = remap_annotations(documents, offsets, CLASS_LABEL, "m.png", ImageSize(780, 272, 3))
    payload = json.loads(dump_annotation_document(merged))

    assert payload["annotations"][1]["top"] == 138
    assert type(merged.annotations[1].top) is int


def test_empty_group_fails():
    with pytest.raises(EmptyGroupError):
        remap_annotations([], (), CLASS_LABEL, "m.png", ImageSize(1, 1, 3))


def test_offset_count_mismatch():
    with pytest.raises(ValueError):
        remap_annotations([_document("a.png", [])], (0, 5), CLASS_LABEL, "m.png", ImageSize(1, 1, 3))
