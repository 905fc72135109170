import os
from pathlib import Path

from dotenv import load_dotenv

# ============================================================
# ENVIRONMENT (SECURE LOAD)
# ============================================================

# 1. Load the .env file immediately
load_dotenv()

ROOT = Path(__file__).resolve().parent

# 2. Deployment subpath (e.g. "/S-P_500_Data_Visualization"). Empty = served at "/".
BASE_PATH = os.environ.get("SP500_BASE_PATH", "").rstrip("/")
if BASE_PATH and not BASE_PATH.startswith("/"):
    BASE_PATH = "/" + BASE_PATH

# 3. Where the CSV resources live: a directory, or an http(s) origin
DATA_ROOT = os.environ.get("SP500_DATA_ROOT", str(ROOT / "data"))

LOAD_TIMEOUT = float(os.environ.get("SP500_LOAD_TIMEOUT", "10"))

LOG_LEVEL = os.environ.get("SP500_LOG_LEVEL", "INFO").upper()

DEBUG = os.environ.get("SP500_DEBUG", "false").lower() in ("1", "true", "yes")

# ============================================================
# RESOURCES
# ============================================================
COMPANIES_FILE = "sp.csv"
PERFORMANCE_FILE = "sp_performance.csv"
INDEX_FILE = "index_data.csv"
HISTORY_FILE = "history.csv"

INDEX_START_YEAR = 1980
GROWTH_START_YEAR = 2009

DEFAULT_INVESTMENT = 10.0

# ============================================================
# CHART FRAMES (pixels)
# ============================================================
# (width, height, margin) where margin = (top, right, bottom, left)
HISTORY_FRAME = (920, 600, (30, 50, 70, 70))   # 800 x 500 drawing area
TREEMAP_FRAME = (800, 550, (0, 0, 0, 0))
GROWTH_FRAME = (800, 500, (50, 50, 50, 80))    # 670 x 400 drawing area
LEGEND_FRAME = (300, 50, (0, 0, 0, 0))

TREEMAP_PADDING = 2
TREEMAP_MIN_LABEL_WIDTH = 30

# Vertical headroom above the largest value
HISTORY_HEADROOM = 500.0
GROWTH_MULTIPLIER = 1.5
GROWTH_HEADROOM = 5.0

# Tick spacing on the time axes (years)
HISTORY_TICK_YEARS = 2
GROWTH_TICK_YEARS = 1

# Tooltip offsets from the anchor point (dx, dy)
HISTORY_TOOLTIP_OFFSET = (50, -50)
GROWTH_TOOLTIP_OFFSET = (10, -40)
TREEMAP_TOOLTIP_OFFSET = (10, -10)

# ============================================================
# GLOBAL COLOR PALETTE
# ============================================================
LINE_COLOR = "#2ec4b6"
GRID_COLOR = "#4e4e4e"

NEGATIVE_COLOR = "red"
NEUTRAL_COLOR = "white"
POSITIVE_COLOR = "green"

# ColorBrewer Set2, used when a company has no return data
CATEGORICAL_PALETTE = [
    "#66c2a5",  # teal
    "#fc8d62",  # orange
    "#8da0cb",  # periwinkle
    "#e78ac3",  # pink
    "#a6d854",  # lime
    "#ffd92f",  # yellow
    "#e5c494",  # tan
    "#b3b3b3",  # gray
]
