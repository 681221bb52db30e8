import csv
import itertools

import pytest

from carprice.config import Settings

HEADER = ["Make", "Model", "CubicCapacity", "FuelType", "Gear", "HorsePower", "Range", "Year", "Price"]

CARS = [
    ("VW", "Golf", 1400, 60),
    ("VW", "Passat", 1900, 110),
    ("Opel", "Astra", 1600, 90),
    ("Opel", "Corsa", 1200, 65),
    ("BMW", "320", 2000, 150),
    ("Audi", "A4", 1800, 125),
]
FUELS = ["Petrol", "Diesel"]
GEARS = ["Manual", "Automatic"]
YEARS = ["1998", "2004", "2010", "2015"]


def make_rows():
    rows = []
    for (make, model, cc, hp), fuel, gear, year in itertools.product(CARS, FUELS, GEARS, YEARS):
        age = 2020 - int(year)
        mileage = 15000 * age + cc
        price = 30000 - 1200 * age + 40 * hp + (1500 if gear == "Automatic" else 0) + (800 if fuel == "Diesel" else 0)
        rows.append([make, model, cc, fuel, gear, hp, mileage, year, price])
    return rows


def write_csv(path, rows, header=HEADER):
    with open(path, "w", encoding="utf-8", newline="") as fh:
        writer = csv.writer(fh)
        writer.writerow(header)
        writer.writerows(rows)
    return path


@pytest.fixture
def listings_csv(tmp_path):
    return write_csv(tmp_path / "cars.csv", make_rows())


@pytest.fixture
def settings(tmp_path, listings_csv):
    # small hash space and few trees keep the tests fast
    return Settings(
        dataset_path=listings_csv,
        artifact_path=tmp_path / "models" / "price_model.joblib",
        hash_bits=8,
        n_estimators=30,
    )


@pytest.fixture
def demo_listing():
    return {
        "Make": "VW",
        "Model": "Golf",
        "CubicCapacity": 1400,
        "FuelType": "Petrol",
        "Gear": "Manual",
        "HorsePower": 60,
        "Range": 200000,
        "Year": "1992",
    }
