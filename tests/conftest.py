import json
from pathlib import Path

import pytest

from core.inventory import JsonVehicleStore

SAMPLE_VEHICLES = [
    {"VRM": "AB12CDE", "Make": "Ford", "Model": "Focus", "Variant": "1.0 EcoBoost Titanium",
     "Colour": "Blue", "BodyType": "Hatchback", "Price": 12995, "Mileage": 45200,
     "DateOfRegistration": "2018-03-14"},
    {"VRM": "BD19XYZ", "Make": "BMW", "Model": "3 Series", "Variant": "320d M Sport",
     "Colour": "Black", "BodyType": "Saloon", "Price": 21450, "Mileage": 32100,
     "DateOfRegistration": "2019-06-01"},
    {"VRM": "EG21MNO", "Make": "Nissan", "Model": "Qashqai", "Variant": "1.3 DiG-T Tekna",
     "Colour": "Grey", "BodyType": "SUV", "Price": 23995, "Mileage": 12995,
     "DateOfRegistration": "2021-04-30"},
    {"VRM": "DF67JKL", "Make": "Vauxhall", "Model": "Corsa", "Variant": "1.4 SRi",
     "Colour": "Red", "BodyType": "Hatchback", "Price": 6995, "Mileage": 58750,
     "DateOfRegistration": "2017-11-03"},
]


@pytest.fixture
def sample_records():
    return [dict(r) for r in SAMPLE_VEHICLES]


@pytest.fixture
def data_file(tmp_path: Path, sample_records) -> Path:
    path = tmp_path / "vehicles.json"
    path.write_text(json.dumps(sample_records))
    return path


@pytest.fixture
def store(data_file: Path) -> JsonVehicleStore:
    return JsonVehicleStore(data_file)
