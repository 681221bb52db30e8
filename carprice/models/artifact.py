"""
The persisted result of a training run.

A `ModelArtifact` bundles the fitted scikit-learn pipeline (preprocessor and
regressor), the listing schema it was trained against and a metadata dict. It
is written with joblib as one file and is never updated in place: saving goes
through a temporary file and an atomic rename.
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import joblib
from sklearn.pipeline import Pipeline

from carprice.config import metadata_path_for
from carprice.data.schema import LISTING_SCHEMA
from carprice.errors import ArtifactLoadError
from carprice.utils import get_logger, save_json

LOGGER = get_logger(__name__)

ARTIFACT_FORMAT_VERSION = 1


def _temp_sibling(path: Path) -> str:
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=path.name, suffix=".tmp")
    os.close(fd)
    return tmp_name


@dataclass(frozen=True)
class ModelArtifact:
    pipeline: Pipeline
    schema: Dict[str, str]
    metadata: Dict[str, Any] = field(default_factory=dict)
    format_version: int = ARTIFACT_FORMAT_VERSION

    def save(self, path) -> Path:
        """
        Write the artifact to `path`, replacing any existing file, and write
        the JSON metadata sidecar next to it.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        metadata_path = metadata_path_for(path)
        tmp_artifact = _temp_sibling(path)
        tmp_metadata = _temp_sibling(metadata_path)
        try:
            joblib.dump(self, tmp_artifact)
            save_json(
                {**self.metadata, "schema": self.schema, "model_file": path.name},
                tmp_metadata,
            )
            # both files are complete before either one is swapped in
            os.replace(tmp_artifact, path)
            os.replace(tmp_metadata, metadata_path)
        finally:
            for tmp_name in (tmp_artifact, tmp_metadata):
                if os.path.exists(tmp_name):
                    os.remove(tmp_name)
        LOGGER.info("Saved model artifact to %s", path)
        return path

    @classmethod
    def load(cls, path, expected_schema: Optional[Mapping[str, str]] = None) -> "ModelArtifact":
        """
        Read an artifact and check that its schema equals `expected_schema`
        (the current listing schema by default).
        """
        path = Path(path)
        if not path.is_file():
            raise ArtifactLoadError(path, "file not found")
        try:
            artifact = joblib.load(path)
        except Exception as exc:
            raise ArtifactLoadError(path, f"unreadable or corrupt ({exc.__class__.__name__}: {exc})") from exc

        if not isinstance(artifact, cls):
            raise ArtifactLoadError(path, f"expected a ModelArtifact, found {type(artifact).__name__}")
        if artifact.format_version != ARTIFACT_FORMAT_VERSION:
            raise ArtifactLoadError(
                path, f"unsupported format version {artifact.format_version}"
            )

        expected = dict(LISTING_SCHEMA if expected_schema is None else expected_schema)
        if list(dict(artifact.schema).items()) != list(expected.items()):
            raise ArtifactLoadError(
                path, f"schema mismatch: artifact has {artifact.schema}, expected {expected}"
            )
        return artifact
