"""
K-Fold cross-validation of the price pipeline.

Usage (from project root)
-------------------------
# Run k-fold CV on the configured dataset and print metrics:
python -m carprice.models.evaluate

# Or import:
from carprice.models.evaluate import cross_validate
cross_validate(listings, n_splits=5)
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple

import numpy as np
import pandas as pd
from sklearn.metrics import mean_absolute_error, mean_squared_error
from sklearn.model_selection import KFold

from carprice.config import Settings
from carprice.data.load_data import load_listings, validate_listings
from carprice.data.schema import FEATURE_COLUMNS, LABEL_COLUMN
from carprice.errors import DataFormatError
from carprice.models.train import build_pipeline
from carprice.utils import get_logger

LOGGER = get_logger(__name__)


def cross_validate(
    listings: pd.DataFrame,
    settings: Optional[Settings] = None,
    n_splits: int = 5,
) -> Dict[str, Tuple[float, float]]:
    """
    Fit a fresh pipeline per fold and score it on the held-out rows.

    Parameters
    ----------
    listings : pd.DataFrame
        Listings with the `Price` label.
    settings : Settings or None
        Hyperparameters and seed; defaults to `Settings()`.
    n_splits : int

    Returns
    -------
    results : dict
        ``{"MAE": (mean, std), "RMSE": (mean, std)}`` over the folds.
    """
    settings = settings or Settings()
    df = validate_listings(listings, require_label=True)
    if n_splits < 2 or len(df) < n_splits:
        raise DataFormatError(
            f"Cross-validation needs at least {max(n_splits, 2)} rows and 2 folds, "
            f"got {len(df)} rows and n_splits={n_splits}",
            details={"rows": len(df), "n_splits": n_splits},
        )

    X = df[FEATURE_COLUMNS]
    y = df[LABEL_COLUMN]
    kf = KFold(n_splits=n_splits, shuffle=True, random_state=settings.random_state)
    maes = []
    rmses = []

    for fold_idx, (train_idx, val_idx) in enumerate(kf.split(X), start=1):
        pipeline = build_pipeline(settings)
        pipeline.fit(X.iloc[train_idx], y.iloc[train_idx])
        y_pred = pipeline.predict(X.iloc[val_idx])
        y_val = y.iloc[val_idx]

        mae = mean_absolute_error(y_val, y_pred)
        rmse = np.sqrt(mean_squared_error(y_val, y_pred))
        maes.append(mae)
        rmses.append(rmse)
        LOGGER.info("Fold %d/%d: MAE=%.2f, RMSE=%.2f", fold_idx, n_splits, mae, rmse)

    maes = np.array(maes)
    rmses = np.array(rmses)
    LOGGER.info("MAE  mean=%.2f, std=%.2f", maes.mean(), maes.std())
    LOGGER.info("RMSE mean=%.2f, std=%.2f", rmses.mean(), rmses.std())

    return {
        "MAE": (float(maes.mean()), float(maes.std())),
        "RMSE": (float(rmses.mean()), float(rmses.std())),
    }


if __name__ == "__main__":
    settings = Settings.from_env()
    print("Running 5-fold cross-validation on", settings.dataset_path)
    cv_res = cross_validate(load_listings(settings.dataset_path), settings, n_splits=5)
    print("\nCV results:", cv_res)
