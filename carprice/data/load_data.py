"""
Load and validate the used-car listings CSV.

`load_listings()` reads a comma separated file with a header row, keeps the
schema columns (extra columns are dropped), reads `Year` and the other
categorical fields as text and coerces the numeric fields to float. Anything
that does not fit the schema is reported as `DataFormatError` with the
offending column and line numbers; a missing file is a `DataLoadError`.
"""

import os
from typing import List

import numpy as np
import pandas as pd

from carprice.data.schema import LABEL_COLUMN, LISTING_SCHEMA, NUMERIC, category_text
from carprice.errors import DataFormatError, DataLoadError
from carprice.utils import get_logger

LOGGER = get_logger(__name__)

# line 1 is the header
_FIRST_DATA_LINE = 2


def _line_numbers(mask: pd.Series, limit: int = 10) -> List[int]:
    return [int(i) + _FIRST_DATA_LINE for i in mask[mask].index[:limit]]


def _reject_non_finite(values: pd.Series, raw: pd.Series, column: str) -> pd.Series:
    bad = ~np.isfinite(values)
    if bad.any():
        lines = _line_numbers(bad)
        raise DataFormatError(
            f"Column '{column}' has non-finite values on lines {lines}: "
            f"{raw[bad].head(3).tolist()}",
            details={"column": column, "lines": lines},
        )
    return values


def _coerce_numeric(df: pd.DataFrame, column: str) -> pd.Series:
    raw = df[column]
    if pd.api.types.is_numeric_dtype(raw):
        missing = raw.isna()
        if missing.any():
            lines = _line_numbers(missing)
            raise DataFormatError(
                f"Column '{column}' has missing values on lines {lines}",
                details={"column": column, "lines": lines},
            )
        return _reject_non_finite(raw.astype(float), raw, column)

    raw = raw.map(lambda v: None if pd.isna(v) else str(v))
    missing = raw.isna() | (raw.str.strip() == "")
    if missing.any():
        lines = _line_numbers(missing)
        raise DataFormatError(
            f"Column '{column}' has missing values on lines {lines}",
            details={"column": column, "lines": lines},
        )
    coerced = pd.to_numeric(raw.str.strip(), errors="coerce")
    bad = coerced.isna()
    if bad.any():
        lines = _line_numbers(bad)
        raise DataFormatError(
            f"Column '{column}' has non-numeric values on lines {lines}: "
            f"{raw[bad].head(3).tolist()}",
            details={"column": column, "lines": lines},
        )
    return _reject_non_finite(coerced.astype(float), raw, column)


def validate_listings(df: pd.DataFrame, require_label: bool = True) -> pd.DataFrame:
    """
    Check the columns of a raw (all-text) listings frame and convert types.

    Parameters
    ----------
    df : pd.DataFrame
        Listings as read from CSV (all text) or already typed.
    require_label : bool
        If True the `Price` column must be present and numeric.

    Returns
    -------
    pd.DataFrame
        Frame with exactly the schema columns (plus `Price`), in schema order.
    """
    required = list(LISTING_SCHEMA) + ([LABEL_COLUMN] if require_label else [])
    missing_cols = [c for c in required if c not in df.columns]
    if missing_cols:
        raise DataFormatError(
            f"Dataset is missing required columns {missing_cols}; found {df.columns.tolist()}",
            details={"missing_columns": missing_cols},
        )
    if df.empty:
        raise DataFormatError("Dataset contains a header but no rows")

    df = df[required].copy().reset_index(drop=True)
    for col, kind in LISTING_SCHEMA.items():
        if kind == NUMERIC:
            df[col] = _coerce_numeric(df, col)
        else:
            df[col] = df[col].fillna("").map(category_text)
    if require_label:
        df[LABEL_COLUMN] = _coerce_numeric(df, LABEL_COLUMN)
    return df


def load_listings(path) -> pd.DataFrame:
    """
    Load the listings dataset from a CSV file.

    Parameters
    ----------
    path : str or Path
        Comma separated UTF-8 file whose header names match the schema exactly.

    Returns
    -------
    pd.DataFrame
        Validated listings with numeric columns as float and `Price` as label.
    """
    path = os.fspath(path)
    if not os.path.isfile(path):
        raise DataLoadError(f"Dataset file not found: {path}", details={"path": path})

    try:
        raw = pd.read_csv(
            path,
            sep=",",
            quotechar='"',
            dtype=str,
            keep_default_na=False,
            na_values=[],
            encoding="utf-8",
        )
    except OSError as exc:
        raise DataLoadError(f"Cannot read dataset {path}: {exc}", details={"path": path}) from exc
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
        raise DataFormatError(f"Malformed dataset {path}: {exc}", details={"path": path}) from exc

    df = validate_listings(raw, require_label=True)
    LOGGER.info("Loaded %d listings from %s", len(df), path)
    return df
