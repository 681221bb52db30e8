"""
Command line entry point: train the model if no artifact exists yet, then
score the demo listing and print the input and the predicted price.

Run with ``python -m carprice.main`` or the installed ``carprice`` script.
Paths come from `Settings.from_env()` (CARPRICE_DATASET / CARPRICE_ARTIFACT).
"""

import json
import sys
from typing import Optional

from carprice.config import Settings
from carprice.data.schema import Listing
from carprice.errors import CarPriceError
from carprice.models.predict import Predictor
from carprice.models.train import Trainer
from carprice.utils import get_logger

LOGGER = get_logger(__name__)

DEMO_LISTINGS = [
    Listing(
        Make="VW",
        Model="Golf",
        CubicCapacity=1400,
        FuelType="Petrol",
        Gear="Manual",
        HorsePower=60,
        Range=200000,
        Year="1992",
    ),
]


def run(settings: Settings) -> None:
    if not settings.artifact_path.exists():
        LOGGER.info("No model at %s, training from %s", settings.artifact_path, settings.dataset_path)
        Trainer(settings).train()

    predictor = Predictor.load(settings.artifact_path)
    for listing in DEMO_LISTINGS:
        price = predictor.score(listing)
        print("-" * 60)
        print(f"Input: {json.dumps(listing.to_dict(), ensure_ascii=False)}")
        print(f"Prediction: {price}")


def main(settings: Optional[Settings] = None) -> int:
    try:
        run(settings or Settings.from_env())
    except CarPriceError as exc:
        LOGGER.error("%s", exc.message)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
