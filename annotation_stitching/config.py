from pathlib import Path
from dotenv import load_dotenv
import os

# Load environment variables from .env file
load_dotenv()

# Local directory for logs and other run byproducts
LOCAL_DIR = Path(os.getenv("LOCAL_DIR", ".")).resolve()
DATA_FOLDER = os.getenv("DATA_FOLDER", "data")

LOCAL_DATA_DIR = LOCAL_DIR / DATA_FOLDER

if not LOCAL_DIR.exists():
    raise ValueError(f"LOCAL_DIR path '{LOCAL_DIR}' from .env does not exist.")

# Object storage holding datasets. Credentials stay with the fsspec backend.
STORAGE_TYPE = os.getenv("STORAGE_TYPE", "file")
BASE_DATA_DIR = os.getenv("BASE_DATA_DIR")

if BASE_DATA_DIR is None and STORAGE_TYPE == "file":
    BASE_DATA_DIR = str(LOCAL_DATA_DIR)
