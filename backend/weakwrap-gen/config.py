import os
from pathlib import Path

from dotenv import load_dotenv  # type: ignore

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent

# simple name of the marker annotation (@WeakWrap or @com.example.WeakWrap)
ANNOTATION_NAME = (os.getenv("WEAKWRAP_ANNOTATION") or "").strip() or "WeakWrap"

# root of the generated source tree (package directories are created below it)
OUTPUT_DIR = Path(os.getenv("WEAKWRAP_OUTPUT_DIR") or BASE_DIR / "generated")

VERBOSE = os.getenv("WEAKWRAP_VERBOSE", "1").strip().lower() not in ("0", "false", "no", "")

# indentation of generated Java code
INDENT = os.getenv("WEAKWRAP_INDENT", "  ")
