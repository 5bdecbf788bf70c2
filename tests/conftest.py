# Shared pytest fixtures
from __future__ import annotations

from pathlib import Path
from typing import Callable

import pandas as pd
import pytest

from trackdash.data import clear_cache
from trackdash.normalize import normalize_rows


TRACKS_CSV = """track_id,artists,album_name,track_name,popularity,explicit,track_genre
t0,Jason Mraz,We Sing,I'm Yours,80,False,acoustic
t1,Kina Grannis,Crazy Rich Asians,Can't Help Falling In Love,71,False,acoustic
t2,Zack Tabudlo,Episode,Give Me Your Forever,87,False,pop
t3,Lovelytheband,Finding It Hard,broken,60,True,pop
t4,Brandi Carlile,The Story,The Story,100,False,folk
t5,Boyce Avenue,Cover Sessions,Photograph,0,False,indie
"""


@pytest.fixture(autouse=True)
def _clear_data_cache():
    clear_cache()
    yield
    clear_cache()


@pytest.fixture()
def write_csv(tmp_path: Path) -> Callable[[str, str], Path]:
    def _write(text: str, name: str = "tracks.csv") -> Path:
        p = tmp_path / name
        p.write_text(text, encoding="utf-8")
        return p

    return _write


@pytest.fixture()
def tracks_csv(write_csv) -> Path:
    return write_csv(TRACKS_CSV)


@pytest.fixture()
def records() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "track_name": ["I'm in Love", "Solo", "Hold On", "Lovely Day"],
            "artists": ["The Band", "Dan Berk", "Chord Overstreet", "Bill Withers"],
            "track_genre": ["pop", "pop", "acoustic", "soul"],
            "popularity": ["10", "55", "82", "90"],
            "tempo": ["120.1", "131.0", "119.9", "97.8"],
        }
    )


@pytest.fixture()
def rows(records: pd.DataFrame) -> pd.DataFrame:
    return normalize_rows(records)
