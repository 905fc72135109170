import io
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import MAXYEAR, MINYEAR
from pathlib import Path

import pandas as pd
import requests

import config
from market_math import build_return_lookup, parse_number, parse_percent
from models import CompanyRecord, PerformanceEntry, PricePoint

logger = logging.getLogger(__name__)


class LoadError(Exception):
    """A CSV resource could not be fetched or parsed."""


# ------------------------------------------------------------
# Resource resolution
# ------------------------------------------------------------

def _is_url(source) -> bool:
    return isinstance(source, str) and source.lower().startswith(("http://", "https://"))


def _describe(source) -> str:
    return source if _is_url(source) else Path(source).name


def resource_location(name, data_root=None, base_path=None):
    """
    Resolve a resource name against the configured data root.

    Remote roots get the deployment subpath and the /data prefix:
        https://host + /S-P_500_Data_Visualization + /data/sp.csv
    Local roots are plain directories.
    """
    data_root = config.DATA_ROOT if data_root is None else data_root
    base_path = config.BASE_PATH if base_path is None else base_path

    if _is_url(data_root):
        return f"{data_root.rstrip('/')}{base_path}/data/{name}"
    return Path(data_root) / name

# ------------------------------------------------------------
# Raw reading
# ------------------------------------------------------------

def read_csv_frame(source, timeout=None) -> pd.DataFrame:
    """
    Read a header-first CSV into an all-string DataFrame.
    Missing cells come back as "" (never NaN).
    """
    timeout = config.LOAD_TIMEOUT if timeout is None else timeout

    try:
        if _is_url(source):
            resp = requests.get(source, timeout=timeout)
            resp.raise_for_status()
            df = pd.read_csv(io.StringIO(resp.text), dtype=str, keep_default_na=False)
        else:
            df = pd.read_csv(source, dtype=str, keep_default_na=False)
    except requests.RequestException as e:
        raise LoadError(f"Could not fetch {source}: {e}") from e
    except FileNotFoundError as e:
        raise LoadError(f"Resource not found: {source}") from e
    except pd.errors.EmptyDataError as e:
        raise LoadError(f"Resource is empty: {source}") from e
    except (pd.errors.ParserError, UnicodeDecodeError, OSError) as e:
        raise LoadError(f"Malformed CSV {source}: {e}") from e

    df.columns = [str(c).strip() for c in df.columns]
    return df.fillna("")


def load_csv(source, row_mapper=None, key_column=None) -> list:
    """
    Load a CSV resource into records.

    Args:
        source: local path or http(s) URL.
        row_mapper: optional callable(dict) -> record. Returning None rejects
            the row. Without a mapper the raw row dicts are returned.
        key_column: column every row must carry. Rows with a blank key are
            dropped; a header without the column is a LoadError.

    Raises:
        LoadError: unreachable or malformed resource.
    """
    df = read_csv_frame(source)
    name = _describe(source)

    if key_column is not None:
        if key_column not in df.columns:
            raise LoadError(f"{name} has no '{key_column}' column (found {list(df.columns)})")
        has_key = df[key_column].astype(str).str.strip() != ""
        dropped = int((~has_key).sum())
        if dropped:
            logger.warning("%s: dropped %d row(s) without %s", name, dropped, key_column)
        df = df[has_key]

    rows = df.to_dict("records")
    if row_mapper is None:
        logger.info("Loaded %d rows from %s", len(rows), name)
        return rows

    records = []
    rejected = 0
    for row in rows:
        record = row_mapper(row)
        if record is None:
            rejected += 1
            continue
        records.append(record)

    if rejected:
        logger.warning("%s: rejected %d malformed row(s)", name, rejected)
    logger.info("Loaded %d rows from %s", len(records), name)
    return records


def load_many(*jobs) -> list:
    """
    Run several zero-argument load callables concurrently and wait for all of
    them. Results come back in job order; the first LoadError propagates.
    """
    if not jobs:
        return []
    with ThreadPoolExecutor(max_workers=len(jobs)) as pool:
        futures = [pool.submit(job) for job in jobs]
        return [f.result() for f in futures]

# ------------------------------------------------------------
# Row mappers
# ------------------------------------------------------------

def company_from_row(row: dict) -> CompanyRecord:
    """sp.csv: Company, Symbol, Weight ("NN.NN%"), Price."""
    return CompanyRecord(
        name=str(row.get("Company", "")).strip(),
        symbol=str(row.get("Symbol", "")).strip(),
        weight=parse_percent(row.get("Weight", "")),
        price=str(row.get("Price", "")).strip(),
    )


def price_point_from_row(row: dict):
    """index_data.csv: Date, SP500. Rows with an unparseable date are rejected."""
    ts = pd.to_datetime(str(row.get("Date", "")).strip(), errors="coerce")
    if pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_localize(None)
    return PricePoint(date=ts.to_pydatetime(), value=parse_number(row.get("SP500", "")))


def performance_entry_from_row(row: dict):
    """history.csv: Year, Performance (signed percent)."""
    year = parse_number(row.get("Year", ""), default=None)
    # Growth points sit on Jan 1 of year + 1, so that date must exist
    if year is None or not MINYEAR <= year <= MAXYEAR - 1:
        return None
    return PerformanceEntry(
        year=int(year),
        performance=parse_number(row.get("Performance", "")),
    )

# ------------------------------------------------------------
# Typed loaders
# ------------------------------------------------------------

def load_companies(source=None) -> list:
    source = source if source is not None else resource_location(config.COMPANIES_FILE)
    return load_csv(source, company_from_row, key_column="Symbol")


def load_performance(source=None) -> dict:
    """Symbol -> raw YTD return string from sp_performance.csv."""
    source = source if source is not None else resource_location(config.PERFORMANCE_FILE)
    return build_return_lookup(load_csv(source, key_column="Symbol"))


def load_index_series(source=None) -> list:
    source = source if source is not None else resource_location(config.INDEX_FILE)
    return load_csv(source, price_point_from_row, key_column="Date")


def load_history(source=None) -> list:
    source = source if source is not None else resource_location(config.HISTORY_FILE)
    return load_csv(source, performance_entry_from_row, key_column="Year")
