"""Tests for the location adapter."""

import io
from types import SimpleNamespace

from geopy.exc import GeocoderServiceError
from PIL import Image

from sularchi import location as location_module
from sularchi.location import (
    ExifLocationProvider,
    LocationProvider,
    StaticLocationProvider,
    format_address,
    format_coordinates,
    get_current_location,
    has_location_permission,
)
from sularchi.models import GeoLocation


class FakeGeocoder:
    def __init__(self, address=None, error=None):
        self.address = address
        self.error = error
        self.queries = []

    def reverse(self, query, language=None):
        self.queries.append(query)
        if self.error:
            raise self.error
        if self.address is None:
            return None
        return SimpleNamespace(raw={"address": self.address})


class BrokenProvider(LocationProvider):
    def read_position(self):
        return None


def jpeg_bytes():
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8)).save(buffer, format="JPEG")
    return buffer.getvalue()


class TestFormatCoordinates:

    def test_six_decimals(self):
        assert format_coordinates(12.3456789, -0.1) == "12.345679, -0.100000"


class TestGetCurrentLocation:

    def test_unavailable_provider(self):
        provider = StaticLocationProvider(None, None)
        assert not has_location_permission(provider)
        assert get_current_location(provider) is None

    def test_provider_without_fix(self):
        assert get_current_location(BrokenProvider()) is None

    def test_coordinates_without_geocoder(self, monkeypatch):
        monkeypatch.setattr(location_module.config, "REVERSE_GEOCODE", False)
        geo = get_current_location(StaticLocationProvider(6.9271, 79.8612, 15.0))
        assert geo == GeoLocation(latitude=6.9271, longitude=79.8612, accuracy=15.0, address=None)

    def test_reverse_geocoded_address(self):
        geocoder = FakeGeocoder(
            address={"road": "Galle Road", "suburb": "Kollupitiya", "city": "Colombo", "state": "Western Province"}
        )
        geo = get_current_location(StaticLocationProvider(6.9271, 79.8612), geocoder=geocoder)
        assert geo.address == "Galle Road, Kollupitiya, Colombo, Western Province"
        assert geocoder.queries == [(6.9271, 79.8612)]

    def test_partial_address(self):
        geocoder = FakeGeocoder(address={"town": "Kandy", "country": "Sri Lanka"})
        geo = get_current_location(StaticLocationProvider(7.29, 80.63), geocoder=geocoder)
        assert geo.address == "Kandy"

    def test_geocoding_failure_keeps_coordinates(self):
        geocoder = FakeGeocoder(error=GeocoderServiceError("rate limited"))
        geo = get_current_location(StaticLocationProvider(7.29, 80.63), geocoder=geocoder)
        assert (geo.latitude, geo.longitude, geo.address) == (7.29, 80.63, None)


class TestFormatAddress:

    def test_empty(self):
        assert format_address({}) is None


class TestExifLocationProvider:

    def test_photo_without_gps(self):
        assert ExifLocationProvider(jpeg_bytes()).read_position() is None

    def test_not_an_image(self):
        assert ExifLocationProvider(b"not an image").read_position() is None

    def test_reads_gps_block(self, monkeypatch):
        gps = {
            location_module.GPS_LATITUDE_REF: "S",
            location_module.GPS_LATITUDE: (33.0, 51.0, 54.0),
            location_module.GPS_LONGITUDE_REF: b"E",
            location_module.GPS_LONGITUDE: (151.0, 12.0, 36.0),
            location_module.GPS_H_POSITIONING_ERROR: 8,
        }
        fake_exif = SimpleNamespace(get_ifd=lambda tag: gps if tag == location_module.GPS_IFD else {})
        fake_image = SimpleNamespace(getexif=lambda: fake_exif)
        monkeypatch.setattr(location_module.Image, "open", lambda fp: fake_image)

        latitude, longitude, accuracy = ExifLocationProvider(b"...").read_position()
        assert round(latitude, 4) == -33.865
        assert round(longitude, 4) == 151.21
        assert accuracy == 8.0
