"""Persisted records: locations, complaints, and the local user profile."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from sularchi.categories import WasteCategory, parse_category

LOCAL_USER_ID = "local-user"
DEFAULT_USER_NAME = "Eco Warrior"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.astimezone()
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting the trailing ``Z`` form."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    moment = datetime.fromisoformat(value)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


class ComplaintStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"

    @property
    def display_label(self) -> str:
        return {
            ComplaintStatus.PENDING: "Pending",
            ComplaintStatus.IN_PROGRESS: "In Progress",
            ComplaintStatus.RESOLVED: "Resolved",
        }[self]


@dataclass(frozen=True)
class GeoLocation:
    latitude: float
    longitude: float
    accuracy: Optional[float] = None
    address: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "accuracy": self.accuracy,
        }
        if self.address is not None:
            data["address"] = self.address
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GeoLocation":
        accuracy = data.get("accuracy")
        return cls(
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            accuracy=float(accuracy) if accuracy is not None else None,
            address=data.get("address"),
        )


@dataclass
class Complaint:
    id: str
    image_uri: str
    waste_category: WasteCategory
    confidence: float
    waste_label: str
    description: str
    location: GeoLocation
    points_awarded: int
    status: ComplaintStatus
    created_at: str
    updated_at: str
    idempotency_key: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "imageUri": self.image_uri,
            "wasteCategory": self.waste_category.value,
            "confidence": self.confidence,
            "wasteLabel": self.waste_label,
            "description": self.description,
            "location": self.location.as_dict(),
            "pointsAwarded": self.points_awarded,
            "status": self.status.value,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        if self.idempotency_key is not None:
            data["idempotencyKey"] = self.idempotency_key
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Complaint":
        return cls(
            id=str(data["id"]),
            image_uri=str(data["imageUri"]),
            waste_category=parse_category(data["wasteCategory"]),
            confidence=float(data["confidence"]),
            waste_label=str(data["wasteLabel"]),
            description=str(data["description"]),
            location=GeoLocation.from_dict(data["location"]),
            points_awarded=int(data["pointsAwarded"]),
            status=ComplaintStatus(data["status"]),
            created_at=str(data["createdAt"]),
            updated_at=str(data["updatedAt"]),
            idempotency_key=data.get("idempotencyKey"),
        )


@dataclass
class UserProfile:
    id: str = LOCAL_USER_ID
    name: str = DEFAULT_USER_NAME
    total_points: int = 0
    total_reports: int = 0
    streak: int = 0
    last_report_date: Optional[str] = None
    joined_at: str = field(default_factory=lambda: to_iso(utc_now()))
    # Only meaningful inside a computed leaderboard.
    rank: int = 0

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "totalPoints": self.total_points,
            "totalReports": self.total_reports,
            "streak": self.streak,
            "lastReportDate": self.last_report_date,
            "joinedAt": self.joined_at,
            "rank": self.rank,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserProfile":
        last_report_date = data.get("lastReportDate")
        if last_report_date is not None:
            if not isinstance(last_report_date, str):
                raise TypeError(f"lastReportDate must be a string, got {type(last_report_date).__name__}")
            parse_iso(last_report_date)
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            total_points=int(data["totalPoints"]),
            total_reports=int(data["totalReports"]),
            streak=int(data["streak"]),
            last_report_date=last_report_date,
            joined_at=str(data["joinedAt"]),
            rank=int(data.get("rank", 0)),
        )


@dataclass
class LeaderboardEntry:
    id: str
    name: str
    total_points: int
    total_reports: int
    rank: int
    is_current_user: bool = False

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "totalPoints": self.total_points,
            "totalReports": self.total_reports,
            "rank": self.rank,
            "isCurrentUser": self.is_current_user,
        }
