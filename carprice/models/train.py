"""
Train the used-car price model and save it as a `ModelArtifact`.

Usage (from project root)
-------------------------
python -m carprice.models.train

# Or import:
from carprice.models.train import Trainer, train_model
artifact = Trainer(settings).train()
"""

from __future__ import annotations

import platform
from typing import Any, Dict, Optional

import numpy as np
import pandas as pd
import sklearn
import xgboost as xgb
from sklearn.metrics import mean_absolute_error, mean_squared_error
from sklearn.pipeline import Pipeline

from carprice.config import Settings
from carprice.data.load_data import load_listings, validate_listings
from carprice.data.schema import FEATURE_COLUMNS, LABEL_COLUMN, LISTING_SCHEMA
from carprice.features.build_features import build_preprocessor
from carprice.models.artifact import ModelArtifact
from carprice.utils import get_logger

LOGGER = get_logger(__name__)


def build_regressor(settings: Settings) -> xgb.XGBRegressor:
    return xgb.XGBRegressor(
        tree_method="hist",
        n_estimators=settings.n_estimators,
        learning_rate=settings.learning_rate,
        max_depth=settings.max_depth,
        min_child_weight=settings.min_child_weight,
        random_state=settings.random_state,
        n_jobs=-1,
        verbosity=0,
    )


def build_pipeline(settings: Settings) -> Pipeline:
    """
    Preprocessor (onehot + hashed onehot + numeric) followed by the XGBoost regressor.
    """
    return Pipeline(
        steps=[
            ("preprocessor", build_preprocessor(hash_bits=settings.hash_bits)),
            ("regressor", build_regressor(settings)),
        ]
    )


class Trainer:
    """
    Fits the price pipeline on a listings frame and persists the result.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()

    def fit(self, listings: pd.DataFrame) -> ModelArtifact:
        listings = validate_listings(listings, require_label=True)

        X = listings[FEATURE_COLUMNS].copy()
        y = listings[LABEL_COLUMN].astype(float)

        pipeline = build_pipeline(self.settings)
        pipeline.fit(X, y)

        y_pred = pipeline.predict(X)
        mae = mean_absolute_error(y, y_pred)
        rmse = np.sqrt(mean_squared_error(y, y_pred))

        regressor = pipeline.named_steps["regressor"]
        metadata = {
            "model_name": "XGBoost Regressor (onehot + hashed model)",
            "trained_on": pd.Timestamp.now().strftime("%Y-%m-%d %H:%M:%S"),
            "train_rows": int(len(X)),
            "features": list(FEATURE_COLUMNS),
            "label": LABEL_COLUMN,
            "hash_bits": self.settings.hash_bits,
            "hyperparameters": {
                "n_estimators": regressor.n_estimators,
                "learning_rate": regressor.learning_rate,
                "max_depth": regressor.max_depth,
                "min_child_weight": regressor.min_child_weight,
                "random_state": regressor.random_state,
            },
            "train_metrics": {"MAE": round(float(mae), 2), "RMSE": round(float(rmse), 2)},
            "python": platform.python_version(),
            "sklearn": sklearn.__version__,
            "xgboost": xgb.__version__,
        }
        LOGGER.info("Fitted model on %d listings (train MAE=%.2f, RMSE=%.2f)", len(X), mae, rmse)
        return ModelArtifact(pipeline=pipeline, schema=dict(LISTING_SCHEMA), metadata=metadata)

    def train(self, dataset_path=None, artifact_path=None) -> ModelArtifact:
        """
        Load the dataset, fit the pipeline and overwrite the artifact file.
        """
        settings = self.settings.with_paths(dataset_path, artifact_path)
        listings = load_listings(settings.dataset_path)
        artifact = self.fit(listings)
        artifact.save(settings.artifact_path)
        return artifact


def train_model(settings: Optional[Settings] = None) -> Dict[str, Any]:
    """
    Train on `settings.dataset_path`, save to `settings.artifact_path` and
    return the artifact metadata.
    """
    settings = settings or Settings.from_env()
    artifact = Trainer(settings).train()
    return artifact.metadata


if __name__ == "__main__":
    metadata = train_model()
    print("Saved model to", Settings.from_env().artifact_path)
    print("Train metrics:", metadata["train_metrics"])
