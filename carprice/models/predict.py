"""
Used-car price prediction from a saved model artifact.

`Predictor.load(path)` reads the artifact once (pipeline, schema, metadata)
and refuses artifacts whose schema differs from the current listing schema.
`score()` / `score_many()` encode records with the fitted preprocessor from
the artifact and return one float price per record, in input order.

`predict_price(record)` is the one-shot helper used by scripts and the app.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional

import numpy as np
import pandas as pd

from carprice.config import Settings
from carprice.data.schema import FEATURE_COLUMNS, LISTING_SCHEMA, NUMERIC, Listing, as_record, category_text
from carprice.errors import PredictionError
from carprice.models.artifact import ModelArtifact
from carprice.utils import get_logger

LOGGER = get_logger(__name__)


def records_to_frame(records: Iterable[Mapping[str, Any] | Listing]) -> pd.DataFrame:
    """
    Build a typed feature frame from listing records.

    Missing fields, non-mapping records and numeric fields that do not parse
    to a finite number raise `PredictionError`. Extra keys (e.g. `Price`) are ignored.
    Categorical values go through `category_text`, as in training.
    """
    rows = []
    for i, record in enumerate(records):
        record = as_record(record)
        if not isinstance(record, Mapping):
            raise PredictionError(
                f"Record {i} is a {type(record).__name__}, expected a mapping of listing fields",
                details={"index": i},
            )
        missing = [f for f in FEATURE_COLUMNS if f not in record]
        if missing:
            raise PredictionError(
                f"Record {i} is missing fields {missing}",
                details={"index": i, "missing_fields": missing},
            )

        row = {}
        for field, kind in LISTING_SCHEMA.items():
            value = record[field]
            if kind == NUMERIC:
                try:
                    row[field] = float(value)
                except (TypeError, ValueError) as exc:
                    raise PredictionError(
                        f"Record {i}: field '{field}' must be numeric, got {value!r}",
                        details={"index": i, "field": field},
                    ) from exc
                if not np.isfinite(row[field]):
                    raise PredictionError(
                        f"Record {i}: field '{field}' must be finite, got {value!r}",
                        details={"index": i, "field": field},
                    )
            else:
                row[field] = category_text(value)
        rows.append(row)

    return pd.DataFrame(rows, columns=FEATURE_COLUMNS)


class Predictor:
    """
    Scores listings with a loaded `ModelArtifact`. Read-only after construction.
    """

    def __init__(self, artifact: ModelArtifact):
        self.artifact = artifact

    @classmethod
    def load(cls, path, expected_schema: Optional[Mapping[str, str]] = None) -> "Predictor":
        artifact = ModelArtifact.load(path, expected_schema=expected_schema)
        LOGGER.info("Loaded model artifact from %s (trained_on=%s)", path, artifact.metadata.get("trained_on"))
        return cls(artifact)

    @property
    def metadata(self):
        return self.artifact.metadata

    def score_many(self, records: Iterable[Mapping[str, Any] | Listing]) -> List[float]:
        frame = records_to_frame(records)
        if frame.empty:
            return []
        try:
            preds = self.artifact.pipeline.predict(frame)
        except (ValueError, TypeError) as exc:
            raise PredictionError(f"Failed to encode records: {exc}") from exc
        return [float(p) for p in np.asarray(preds).ravel()]

    def score(self, record: Mapping[str, Any] | Listing) -> float:
        return self.score_many([record])[0]


def predict_price(input_dict: Mapping[str, Any] | Listing, settings: Optional[Settings] = None) -> float:
    """
    Predict the price of a single listing with the configured artifact.

    Returns
    -------
    float
        Predicted price, in the currency of the training data.
    """
    settings = settings or Settings.from_env()
    return Predictor.load(settings.artifact_path).score(input_dict)


if __name__ == "__main__":
    example = {
        "Make": "VW",
        "Model": "Golf",
        "CubicCapacity": 1400,
        "FuelType": "Petrol",
        "Gear": "Manual",
        "HorsePower": 60,
        "Range": 200000,
        "Year": "1992",
    }
    print("Predicted price:", predict_price(example))
