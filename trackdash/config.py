from __future__ import annotations

import logging
from pathlib import Path
from typing import Tuple


BASE_DIR = Path(__file__).resolve().parents[1]
DATA_DIR = BASE_DIR / "data"
DATA_PATH = DATA_DIR / "spotify_songs.csv"

ID_COLUMN = "id"
TRACK_COLUMN = "track_name"
ARTIST_COLUMN = "artists"
GENRE_COLUMN = "track_genre"
POPULARITY_COLUMN = "popularity"
REQUIRED_COLUMNS: Tuple[str, ...] = (TRACK_COLUMN, ARTIST_COLUMN, GENRE_COLUMN, POPULARITY_COLUMN)

EXPORT_FILENAME = "spotify_filtered_data.csv"

DEBOUNCE_MS = 300

POPULARITY_MIN = 0.0
POPULARITY_MAX = 100.0

PAGE_SIZE_OPTIONS: Tuple[int, ...] = (5, 10, 25)
DEFAULT_PAGE_SIZE = 10

LOG_LEVEL = logging.INFO
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: int = LOG_LEVEL) -> None:
    """Install a root handler unless the host (streamlit, uvicorn) already did."""
    root = logging.getLogger()
    if root.handlers:
        return
    logging.basicConfig(level=level, format=LOG_FORMAT)
