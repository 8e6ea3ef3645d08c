from pathlib import Path

from annotation_stitching.config import BASE_DATA_DIR, STORAGE_TYPE
from annotation_stitching.config import LOCAL_DATA_DIR as DATA_DIR
from annotation_stitching.utils import check_missing_keys, create_storage, load_config, setup_logging

script_name = Path(__file__).parent.name
logger = setup_logging(script_name, DATA_DIR)

from annotation_stitching.merge_images import ImageMergingContext, merge_images

logger.info("Starting image merging pipeline")

# Get script specific configs
CONFIG_PATH = Path(__file__).parent.resolve() / "config.yaml"

logger.info(f"Loading config from: {CONFIG_PATH}")
script_config = load_config(CONFIG_PATH)

required_keys = [
    "dataset_folder",
    "annotations_folder",
    "images_folder",
    "output_folder",
    "group_size",
    "class_label",
]
check_missing_keys(required_keys, script_config)

DATASET_FOLDER = script_config["dataset_folder"]
ANNOTATIONS_FOLDER = script_config["annotations_folder"]
IMAGES_FOLDER = script_config["images_folder"]
OUTPUT_FOLDER = script_config["output_folder"]

GROUP_SIZE = int(script_config["group_size"])
KEEP_REMAINDER = bool(script_config.get("keep_remainder", False))
DRAW_DEBUG = bool(script_config.get("draw_debug", False))
OUTPUT_PREFIX = script_config.get("output_prefix", "merged")

CLASS_LABEL = {int(k): v for k, v in script_config["class_label"].items()}

logger.info(f"Storage: {STORAGE_TYPE} at {BASE_DATA_DIR}")

fs, resolve_path = create_storage(
    {
        "type": STORAGE_TYPE,
        "base_data_dir": BASE_DATA_DIR,
        "fs_kwargs": script_config.get("fs_kwargs") or {},
    }
)

context = ImageMergingContext(
    fs=fs,
    resolve_path=resolve_path,
    dataset_folder=DATASET_FOLDER,
    annotations_folder=ANNOTATIONS_FOLDER,
    images_folder=IMAGES_FOLDER,
    output_folder=OUTPUT_FOLDER,
    class_label=CLASS_LABEL,
    group_size=GROUP_SIZE,
    keep_remainder=KEEP_REMAINDER,
    draw_debug=DRAW_DEBUG,
    output_prefix=OUTPUT_PREFIX,
)

# Task main function
merge_images(context)
