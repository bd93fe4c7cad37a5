"""Shared fixtures: an isolated on-disk store and a controllable clock."""

from datetime import datetime, timedelta

import pytest
from PIL import Image

from sularchi.complaints import ComplaintStore
from sularchi.models import GeoLocation
from sularchi.storage import KeyValueStorage


class FakeClock:
    """Callable clock pinned to local noon so day arithmetic stays on one date."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current = self.current + timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 3, 10, 12, 0, 0).astimezone())


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "sularchi.db"


@pytest.fixture
def storage(db_path):
    kv = KeyValueStorage(db_path)
    kv.open()
    yield kv
    kv.close()


@pytest.fixture
def store(storage, clock):
    return ComplaintStore(storage, now=clock)


@pytest.fixture
def location():
    return GeoLocation(latitude=6.927079, longitude=79.861244, accuracy=12.5, address="Galle Road, Colombo")


@pytest.fixture
def image_path(tmp_path):
    path = tmp_path / "capture.jpg"
    Image.new("RGB", (32, 24), color=(40, 120, 200)).save(path, format="JPEG")
    return str(path)


@pytest.fixture
def file_report(store, location):
    """File a complaint with defaults for the fields a test does not care about."""

    def _file(category="plastic", confidence=0.9, **kwargs):
        return store.file_complaint(
            image_uri=kwargs.pop("image_uri", "file:///captures/item.jpg"),
            waste_category=category,
            confidence=confidence,
            waste_label=kwargs.pop("waste_label", "Plastic"),
            description=kwargs.pop("description", "Detected: Bottle."),
            location=location,
            **kwargs,
        )

    return _file
