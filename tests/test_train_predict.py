import json
import math

import joblib
import pytest

from carprice.config import Settings
from carprice.data.schema import LISTING_SCHEMA, Listing
from carprice.errors import ArtifactLoadError, DataFormatError, DataLoadError, PredictionError
from carprice.models import artifact as artifact_module
from carprice.models.artifact import ModelArtifact
from carprice.models.predict import Predictor, predict_price
from carprice.models.train import Trainer, train_model
from tests.conftest import make_rows, write_csv


@pytest.fixture
def trained(settings):
    artifact = Trainer(settings).train()
    return settings, artifact


def test_train_writes_artifact_and_metadata(trained):
    settings, artifact = trained
    assert settings.artifact_path.is_file()
    meta = json.loads(settings.metadata_path.read_text(encoding="utf-8"))
    assert meta["train_rows"] == len(make_rows())
    assert meta["schema"] == LISTING_SCHEMA
    assert meta["hyperparameters"]["n_estimators"] == 30
    assert artifact.schema == LISTING_SCHEMA
    # no temporary files left next to the artifact
    assert sorted(p.name for p in settings.artifact_path.parent.iterdir()) == [
        "price_model.joblib",
        "price_model.metadata.json",
    ]


def test_reload_reproduces_scores(trained, demo_listing):
    settings, artifact = trained
    in_memory = Predictor(artifact).score(demo_listing)
    for _ in range(3):
        reloaded = Predictor.load(settings.artifact_path).score(demo_listing)
        assert reloaded == pytest.approx(in_memory, rel=1e-6)


def test_two_predictors_give_identical_scores(trained, demo_listing):
    settings, _ = trained
    first = Predictor.load(settings.artifact_path)
    second = Predictor.load(settings.artifact_path)
    assert first.score(demo_listing) == second.score(demo_listing)


def test_training_records_score_close_to_label(trained):
    settings, _ = trained
    predictor = Predictor.load(settings.artifact_path)
    row = make_rows()[0]
    record = dict(zip(["Make", "Model", "CubicCapacity", "FuelType", "Gear", "HorsePower", "Range", "Year"], row))
    assert predictor.score(record) == pytest.approx(row[-1], rel=0.25)


def test_unseen_categories_give_finite_score(trained):
    settings, _ = trained
    predictor = Predictor.load(settings.artifact_path)
    record = Listing(
        Make="Trabant",
        Model="601",
        CubicCapacity=600,
        FuelType="Two-stroke",
        Gear="Semi-automatic",
        HorsePower=26,
        Range=80000,
        Year="1975",
    )
    assert math.isfinite(predictor.score(record))


def test_score_many_keeps_order(trained, demo_listing):
    settings, _ = trained
    predictor = Predictor.load(settings.artifact_path)
    newer = dict(demo_listing, Year="2015", Range=30000)
    single = [predictor.score(demo_listing), predictor.score(newer)]
    assert predictor.score_many([demo_listing, newer]) == pytest.approx(single)
    assert predictor.score_many([]) == []


def test_schema_mismatch_raises(trained):
    settings, _ = trained
    expected = dict(LISTING_SCHEMA, Year="numeric")
    with pytest.raises(ArtifactLoadError, match="schema mismatch"):
        Predictor.load(settings.artifact_path, expected_schema=expected)

    reordered = dict(reversed(list(LISTING_SCHEMA.items())))
    with pytest.raises(ArtifactLoadError):
        Predictor.load(settings.artifact_path, expected_schema=reordered)


def test_artifact_with_other_schema_raises(trained, tmp_path):
    _, artifact = trained
    path = tmp_path / "old.joblib"
    old = ModelArtifact(pipeline=artifact.pipeline, schema={"Make": "category"}, metadata={})
    joblib.dump(old, path)
    with pytest.raises(ArtifactLoadError):
        Predictor.load(path)


def test_missing_and_corrupt_artifact(tmp_path):
    with pytest.raises(ArtifactLoadError, match="not found"):
        Predictor.load(tmp_path / "missing.joblib")

    corrupt = tmp_path / "corrupt.joblib"
    corrupt.write_bytes(b"definitely not a pickle")
    with pytest.raises(ArtifactLoadError):
        Predictor.load(corrupt)

    wrong_type = tmp_path / "dict.joblib"
    joblib.dump({"pipeline": None}, wrong_type)
    with pytest.raises(ArtifactLoadError, match="ModelArtifact"):
        Predictor.load(wrong_type)


def test_missing_dataset_raises(tmp_path):
    settings = Settings(dataset_path=tmp_path / "missing.csv", artifact_path=tmp_path / "m.joblib")
    with pytest.raises(DataLoadError):
        Trainer(settings).train()
    assert not (tmp_path / "m.joblib").exists()


def test_malformed_records_raise_prediction_error(trained, demo_listing):
    settings, _ = trained
    predictor = Predictor.load(settings.artifact_path)

    incomplete = dict(demo_listing)
    del incomplete["Gear"]
    with pytest.raises(PredictionError, match="Gear"):
        predictor.score(incomplete)

    with pytest.raises(PredictionError, match="HorsePower"):
        predictor.score(dict(demo_listing, HorsePower="fast"))

    with pytest.raises(PredictionError):
        predictor.score(["VW", "Golf"])


def test_single_row_dataset_end_to_end(tmp_path, demo_listing):
    path = write_csv(tmp_path / "one.csv", [["VW", "Golf", 1400, "Petrol", "Manual", 60, 200000, 1992, 4500]])
    settings = Settings(dataset_path=path, artifact_path=tmp_path / "one.joblib")

    metadata = train_model(settings)
    assert metadata["train_rows"] == 1

    price = predict_price(demo_listing, settings)
    assert isinstance(price, float)
    assert math.isfinite(price)


def test_retraining_replaces_artifact(trained, tmp_path, demo_listing):
    settings, _ = trained
    before = Predictor.load(settings.artifact_path).score(demo_listing)

    cheap = write_csv(tmp_path / "cheap.csv", [row[:-1] + [100] for row in make_rows()])
    Trainer(settings).train(dataset_path=cheap)
    after = Predictor.load(settings.artifact_path).score(demo_listing)
    assert after == pytest.approx(100, abs=1)
    assert after != before


def test_training_on_inf_raises_data_format_error(tmp_path):
    rows = make_rows()
    rows[3][6] = "inf"
    path = write_csv(tmp_path / "inf.csv", rows)
    settings = Settings(dataset_path=path, artifact_path=tmp_path / "inf.joblib", hash_bits=8)
    with pytest.raises(DataFormatError):
        Trainer(settings).train()
    assert not settings.artifact_path.exists()


def test_year_spellings_score_identically(trained, demo_listing):
    settings, _ = trained
    predictor = Predictor.load(settings.artifact_path)
    scores = [predictor.score(dict(demo_listing, Year=year)) for year in ("2010", 2010, 2010.0)]
    assert scores[0] == scores[1] == scores[2]


def test_non_finite_numeric_field_raises_prediction_error(trained, demo_listing):
    settings, _ = trained
    predictor = Predictor.load(settings.artifact_path)
    with pytest.raises(PredictionError, match="finite"):
        predictor.score(dict(demo_listing, Range=float("inf")))


def test_failed_save_keeps_previous_artifact_and_metadata(trained, monkeypatch):
    settings, artifact = trained
    old_blob = settings.artifact_path.read_bytes()
    old_meta = settings.metadata_path.read_text(encoding="utf-8")

    def broken_save_json(data, path):
        raise OSError("disk full")

    monkeypatch.setattr(artifact_module, "save_json", broken_save_json)
    with pytest.raises(OSError):
        artifact.save(settings.artifact_path)

    assert settings.artifact_path.read_bytes() == old_blob
    assert settings.metadata_path.read_text(encoding="utf-8") == old_meta
    assert sorted(p.name for p in settings.artifact_path.parent.iterdir()) == [
        "price_model.joblib",
        "price_model.metadata.json",
    ]
