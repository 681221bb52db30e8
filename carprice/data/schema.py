"""
Field layout of a used-car listing.

`LISTING_SCHEMA` is the single source of truth for column names and kinds. It
is embedded into every trained artifact and compared on load, so any change
here makes older artifacts unloadable on purpose.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Mapping

CATEGORY = "category"
NUMERIC = "numeric"

LISTING_SCHEMA: Dict[str, str] = {
    "Make": CATEGORY,
    "Model": CATEGORY,
    "CubicCapacity": NUMERIC,
    "FuelType": CATEGORY,
    "Gear": CATEGORY,
    "HorsePower": NUMERIC,
    "Range": NUMERIC,
    "Year": CATEGORY,
}

LABEL_COLUMN = "Price"

# one-hot encoded directly; Model is hashed because of its cardinality
CATEGORICAL_COLUMNS: List[str] = ["Make", "FuelType", "Year", "Gear"]
HASHED_COLUMNS: List[str] = ["Model"]
NUMERIC_COLUMNS: List[str] = ["HorsePower", "Range", "CubicCapacity"]

FEATURE_COLUMNS: List[str] = list(LISTING_SCHEMA)


@dataclass
class Listing:
    """One used-car listing without its price."""

    Make: str
    Model: str
    CubicCapacity: float
    FuelType: str
    Gear: str
    HorsePower: float
    Range: float
    Year: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def as_record(record: Any) -> Mapping[str, Any]:
    if isinstance(record, Listing):
        return record.to_dict()
    return record


def category_text(value) -> str:
    """
    Text form of a categorical value, shared by training and prediction.
    """
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return ""
    # 1992.0 -> "1992" when a year column came through as float
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
