import os
from pathlib import Path

STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "fs")  # 'fs' or 's3'
DATA_DIR = os.getenv("DATA_DIR", str(Path(__file__).resolve().parent / "data"))
S3_BUCKET = os.getenv("S3_BUCKET", "bead-sheets")
S3_ENDPOINT_URL = os.getenv("S3_ENDPOINT_URL", "http://minio:9000")
S3_ACCESS_KEY = os.getenv("S3_ACCESS_KEY", "minioadmin")
S3_SECRET_KEY = os.getenv("S3_SECRET_KEY", "minioadmin")

PALETTE_BRAND = os.getenv("PALETTE_BRAND", "MARD")
PALETTE_FILE = os.getenv("PALETTE_FILE") or None

# Service-side bounds for the grid slider; quantize() itself never clamps.
DEFAULT_GRID_SIZE = int(os.getenv("DEFAULT_GRID_SIZE", "32"))
MIN_GRID_SIZE = int(os.getenv("MIN_GRID_SIZE", "8"))
MAX_GRID_SIZE = int(os.getenv("MAX_GRID_SIZE", "256"))

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_IMAGE_EDIT_URL = os.getenv("OPENAI_IMAGE_EDIT_URL", "https://api.openai.com/v1/images/edits")
STYLIZE_MODEL = os.getenv("STYLIZE_MODEL", "gpt-image-1")
STYLIZE_TIMEOUT = float(os.getenv("STYLIZE_TIMEOUT", "120"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
