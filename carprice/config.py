"""
Central configuration for the project.

This module keeps the default locations of the dataset and of the trained
model artifact, and the `Settings` object that is passed explicitly to the
trainer and the predictor.

Constants
---------
BASE_DIR : str
    Absolute path to the project root (parent of the `carprice` package).
DATA_DIR, DATASET_FILE : str
    Folder and default CSV file with the used-car listings.
MODELS_DIR, MODEL_FILE : str
    Folder and default path of the serialized model artifact.

Environment
-----------
CARPRICE_DATASET, CARPRICE_ARTIFACT
    Override `DATASET_FILE` / `MODEL_FILE` in `Settings.from_env()`.
"""

import os
from dataclasses import dataclass, replace
from pathlib import Path

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DATA_DIR = os.path.join(BASE_DIR, "data")
DATASET_FILE = os.path.join(DATA_DIR, "carsbg.csv")

MODELS_DIR = os.path.join(BASE_DIR, "models")
MODEL_FILE = os.path.join(MODELS_DIR, "price_model.joblib")

RANDOM_SEED = 42


@dataclass(frozen=True)
class Settings:
    """
    Paths and model hyperparameters for one training / scoring run.

    The boosting defaults (100 trees, learning rate 0.2) follow the classic
    FastTree regressor defaults; they were never tuned for this dataset.
    """

    dataset_path: Path = Path(DATASET_FILE)
    artifact_path: Path = Path(MODEL_FILE)
    hash_bits: int = 16
    random_state: int = RANDOM_SEED
    n_estimators: int = 100
    learning_rate: float = 0.2
    max_depth: int = 6
    min_child_weight: float = 1.0

    def __post_init__(self):
        object.__setattr__(self, "dataset_path", Path(self.dataset_path))
        object.__setattr__(self, "artifact_path", Path(self.artifact_path))
        if not 1 <= self.hash_bits <= 30:
            raise ValueError(f"hash_bits must be between 1 and 30, got {self.hash_bits}")

    @property
    def metadata_path(self) -> Path:
        return metadata_path_for(self.artifact_path)

    def with_paths(self, dataset_path=None, artifact_path=None) -> "Settings":
        return replace(
            self,
            dataset_path=dataset_path if dataset_path is not None else self.dataset_path,
            artifact_path=artifact_path if artifact_path is not None else self.artifact_path,
        )

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            dataset_path=os.getenv("CARPRICE_DATASET", DATASET_FILE),
            artifact_path=os.getenv("CARPRICE_ARTIFACT", MODEL_FILE),
        )


def metadata_path_for(artifact_path) -> Path:
    """`models/price_model.joblib` -> `models/price_model.metadata.json`."""
    artifact_path = Path(artifact_path)
    return artifact_path.with_name(artifact_path.stem + ".metadata.json")
