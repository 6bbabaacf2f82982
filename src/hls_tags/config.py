import os

from dotenv import load_dotenv

# Load from .env if it exists (useful for local development)
load_dotenv()

LOGGING_LEVEL = os.getenv("LOGGING_LEVEL", "").upper()

# Zone used to localize naive timestamps for EXT-X-PROGRAM-DATE-TIME
TIMEZONE = os.getenv("HLS_TAGS_TIMEZONE", "UTC")

# When true, MediaSegmentToolbox.parse_lines raises on malformed tag lines
STRICT_LINES = os.getenv("HLS_TAGS_STRICT", "").strip().lower() in (
    "1",
    "true",
    "yes",
)
