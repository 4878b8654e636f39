"""
Station groups configuration.

Data paths and engine defaults, overridable from the environment
(or a .env file).
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# --- Paths ---
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = Path(os.getenv("STATION_GROUPS_DATA_DIR", PROJECT_ROOT / "data"))
STOPS_FILE = Path(os.getenv("STATION_GROUPS_STOPS_FILE", DATA_DIR / "stops.json"))
GROUPS_FILE = Path(os.getenv("STATION_GROUPS_FILE", DATA_DIR / "station-groups.json"))

# --- Clustering ---
MAX_DISTANCE_KM = float(os.getenv("STATION_GROUPS_MAX_DISTANCE_KM", "25"))
MIN_GROUP_NAME_LENGTH = 3

# --- Search ---
SEARCH_LIMIT = int(os.getenv("STATION_GROUPS_SEARCH_LIMIT", "20"))
SUGGEST_THRESHOLD = int(os.getenv("STATION_GROUPS_SUGGEST_THRESHOLD", "70"))

# --- Logging ---
LOG_LEVEL = os.getenv("STATION_GROUPS_LOG_LEVEL", "INFO").upper()
