"""
Feature engineering for the used-car dataset.

The preprocessor turns a listings frame into one fixed-width vector per row:

1. one-hot encoding of Make, FuelType, Year and Gear (unknown values at
   prediction time produce an all-zero block),
2. hashed one-hot encoding of Model into ``2 ** hash_bits`` buckets,
3. the raw numeric HorsePower, Range and CubicCapacity columns.
"""

from typing import Iterable, List

import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator, TransformerMixin
from sklearn.compose import ColumnTransformer
from sklearn.feature_extraction import FeatureHasher
from sklearn.preprocessing import OneHotEncoder
from sklearn.utils.validation import check_is_fitted

from carprice.data.schema import CATEGORICAL_COLUMNS, HASHED_COLUMNS, NUMERIC_COLUMNS


class HashedOneHotEncoder(TransformerMixin, BaseEstimator):
    """
    One-hot encode categorical columns by hashing ``column=value`` tokens.

    Every value, seen or not, lands in one of ``2 ** hash_bits`` buckets, so
    the output width does not depend on the data. Collisions are possible and
    accepted. Uses scikit-learn's MurmurHash3 based `FeatureHasher` with
    ``alternate_sign=False`` so a hit is always +1.
    """

    def __init__(self, hash_bits: int = 16):
        self.hash_bits = hash_bits

    def _tokens(self, X) -> List[List[str]]:
        frame = pd.DataFrame(X)
        columns = [str(c) for c in frame.columns]
        frame = frame.fillna("").astype(str)
        return [
            [f"{col}={value}" for col, value in zip(columns, row)]
            for row in frame.itertuples(index=False, name=None)
        ]

    def fit(self, X, y=None):
        self.n_features_in_ = pd.DataFrame(X).shape[1]
        self.hasher_ = FeatureHasher(
            n_features=2 ** self.hash_bits,
            input_type="string",
            alternate_sign=False,
        )
        return self

    def transform(self, X):
        check_is_fitted(self, "hasher_")
        return self.hasher_.transform(self._tokens(X))

    def get_feature_names_out(self, input_features=None):
        return np.asarray([f"hash_{i}" for i in range(2 ** self.hash_bits)], dtype=object)


def build_preprocessor(
    hash_bits: int = 16,
    categorical_cols: Iterable[str] = CATEGORICAL_COLUMNS,
    hashed_cols: Iterable[str] = HASHED_COLUMNS,
    numeric_cols: Iterable[str] = NUMERIC_COLUMNS,
) -> ColumnTransformer:
    """
    Create the ColumnTransformer (onehot + hashed onehot + numeric passthrough).
    """
    return ColumnTransformer(
        transformers=[
            ("onehot", OneHotEncoder(handle_unknown="ignore", sparse_output=True), list(categorical_cols)),
            ("hashed", HashedOneHotEncoder(hash_bits=hash_bits), list(hashed_cols)),
            ("num", "passthrough", list(numeric_cols)),
        ],
        remainder="drop",
    )
