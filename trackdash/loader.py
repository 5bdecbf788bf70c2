from __future__ import annotations

import logging
from pathlib import Path
from typing import Union
from urllib.error import URLError

import pandas as pd

from trackdash.errors import EmptyDatasetError, ParseError, ResourceLoadError


logger = logging.getLogger(__name__)

Source = Union[str, Path]


def is_url(source: Source) -> bool:
    return isinstance(source, str) and source.lower().startswith(("http://", "https://"))


def describe_source(source: Source) -> str:
    return source if is_url(source) else Path(source).name


def load_csv(source: Source) -> pd.DataFrame:
    """Fetch and parse a CSV resource into string-valued records.

    The first line is the header; blank lines are skipped. No type inference
    happens here: every cell comes back as the text found in the file, with
    empty cells as "".
    """
    if not is_url(source):
        path = Path(source)
        if not path.is_file():
            raise ResourceLoadError(f"CSV resource not found: {path}")
        source = path

    try:
        df = pd.read_csv(
            source,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            encoding="utf-8-sig",
        )
    except pd.errors.EmptyDataError as exc:
        raise EmptyDatasetError(f"CSV resource is empty: {describe_source(source)}") from exc
    except (pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise ParseError(f"Failed to parse CSV {describe_source(source)}: {exc}") from exc
    except (URLError, OSError) as exc:
        raise ResourceLoadError(f"Failed to load CSV {describe_source(source)}: {exc}") from exc

    df = df.fillna("")
    df.columns = [str(c).strip() for c in df.columns]
    logger.info("Loaded %s: %d records, %d columns", describe_source(source), len(df), len(df.columns))
    return df

