"""Location adapter: coordinates for a report plus a best-effort street address."""

from __future__ import annotations

import io
import logging
from typing import Any, Optional, Tuple

from geopy.exc import GeopyError
from geopy.geocoders import Nominatim
from PIL import Image, UnidentifiedImageError

from sularchi import config
from sularchi.models import GeoLocation

logger = logging.getLogger(__name__)

Position = Tuple[float, float, Optional[float]]

GPS_IFD = 0x8825
GPS_LATITUDE_REF = 1
GPS_LATITUDE = 2
GPS_LONGITUDE_REF = 3
GPS_LONGITUDE = 4
GPS_H_POSITIONING_ERROR = 31


class LocationProvider:
    """Source of the device position. Subclasses override :meth:`read_position`."""

    def is_available(self) -> bool:
        return True

    def read_position(self) -> Optional[Position]:
        raise NotImplementedError


class StaticLocationProvider(LocationProvider):
    """Fixed coordinates, e.g. a kiosk or the configured default position."""

    def __init__(self, latitude: Optional[float], longitude: Optional[float], accuracy: Optional[float] = None):
        self.latitude = latitude
        self.longitude = longitude
        self.accuracy = accuracy

    @classmethod
    def from_config(cls) -> "StaticLocationProvider":
        return cls(config.DEFAULT_LATITUDE, config.DEFAULT_LONGITUDE)

    def is_available(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def read_position(self) -> Optional[Position]:
        if not self.is_available():
            return None
        return float(self.latitude), float(self.longitude), self.accuracy


def _dms_to_degrees(value: Any, reference: Any) -> float:
    degrees, minutes, seconds = (float(part) for part in value)
    decimal = degrees + minutes / 60.0 + seconds / 3600.0
    if isinstance(reference, bytes):
        reference = reference.decode("ascii", "ignore")
    if str(reference).strip().upper() in {"S", "W"}:
        decimal = -decimal
    return decimal


class ExifLocationProvider(LocationProvider):
    """Reads the GPS block embedded in a captured photo."""

    def __init__(self, image_bytes: bytes):
        self.image_bytes = image_bytes

    def read_position(self) -> Optional[Position]:
        try:
            exif = Image.open(io.BytesIO(self.image_bytes)).getexif()
            gps = exif.get_ifd(GPS_IFD)
            if GPS_LATITUDE not in gps or GPS_LONGITUDE not in gps:
                return None
            latitude = _dms_to_degrees(gps[GPS_LATITUDE], gps.get(GPS_LATITUDE_REF, "N"))
            longitude = _dms_to_degrees(gps[GPS_LONGITUDE], gps.get(GPS_LONGITUDE_REF, "E"))
            accuracy = gps.get(GPS_H_POSITIONING_ERROR)
        except (UnidentifiedImageError, OSError, ValueError, TypeError, ZeroDivisionError) as error:
            logger.warning(f"Unable to read GPS data from photo: {error}")
            return None
        return latitude, longitude, float(accuracy) if accuracy is not None else None


def format_address(address: dict) -> Optional[str]:
    """Join street, district, city and region where present."""
    street = address.get("road") or address.get("pedestrian") or address.get("street")
    district = address.get("suburb") or address.get("city_district") or address.get("district")
    city = address.get("city") or address.get("town") or address.get("village") or address.get("municipality")
    region = address.get("state") or address.get("region") or address.get("province")
    parts = [part for part in (street, district, city, region) if part]
    return ", ".join(parts) or None


def reverse_geocode(latitude: float, longitude: float, geocoder: Any) -> Optional[str]:
    try:
        location = geocoder.reverse((latitude, longitude), language="en")
    except (GeopyError, ValueError) as error:
        logger.warning(f"Reverse geocoding failed: {error}")
        return None
    if not location:
        return None
    return format_address(location.raw.get("address", {}))


def has_location_permission(provider: LocationProvider) -> bool:
    return provider.is_available()


def get_current_location(provider: LocationProvider, geocoder: Any = None) -> Optional[GeoLocation]:
    """Current position, or ``None`` when the provider has nothing to offer."""
    if not provider.is_available():
        logger.warning("Location unavailable")
        return None

    position = provider.read_position()
    if position is None:
        return None
    latitude, longitude, accuracy = position

    if geocoder is None and config.REVERSE_GEOCODE:
        geocoder = Nominatim(user_agent=config.GEOCODER_USER_AGENT)
    address = reverse_geocode(latitude, longitude, geocoder) if geocoder is not None else None

    return GeoLocation(latitude=latitude, longitude=longitude, accuracy=accuracy, address=address)


def format_coordinates(latitude: float, longitude: float) -> str:
    return f"{latitude:.6f}, {longitude:.6f}"
