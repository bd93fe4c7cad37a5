"""Complaint store: the local profile, the complaint log, and point awards."""

from __future__ import annotations

import json
import logging
import secrets
from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Union

from sularchi import config
from sularchi.categories import WasteCategory, parse_category
from sularchi.models import (
    Complaint,
    ComplaintStatus,
    GeoLocation,
    UserProfile,
    parse_iso,
    to_iso,
    utc_now,
)
from sularchi.scoring import calculate_points, compute_streak
from sularchi.storage import KeyValueStorage, StorageError

logger = logging.getLogger(__name__)

COMPLAINTS_KEY = f"{config.STORAGE_NAMESPACE}/complaints"
USER_PROFILE_KEY = f"{config.STORAGE_NAMESPACE}/user-profile"

_UNREADABLE = (StorageError, ValueError, KeyError, TypeError)


@dataclass
class FiledComplaint:
    complaint: Complaint
    profile: UserProfile
    points_awarded: int
    # True when an earlier complaint with the same idempotency key was returned.
    replayed: bool = False


@dataclass
class ComplaintStats:
    total_reports: int
    total_points: int
    category_counts: Dict[str, int]
    streak: int

    def as_dict(self) -> Dict[str, Any]:
        return {
            "totalReports": self.total_reports,
            "totalPoints": self.total_points,
            "categoryCounts": dict(self.category_counts),
            "streak": self.streak,
        }


class ComplaintStore:
    """Owns the single local profile and its ordered complaint log.

    ``file_complaint`` runs its read-modify-write under the storage lock and
    writes the log and the profile in one transaction, so ``total_reports``
    always matches the number of stored complaints.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        now: Optional[Callable[[], datetime]] = None,
    ):
        self.storage = storage
        self._now = now or utc_now

    def open(self) -> "ComplaintStore":
        self.storage.open()
        return self

    def close(self) -> None:
        self.storage.close()

    def __enter__(self) -> "ComplaintStore":
        return self.open()

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # Profile

    def _load_profile(self) -> Optional[UserProfile]:
        raw = self.storage.get(USER_PROFILE_KEY)
        if raw is None:
            return None
        return UserProfile.from_dict(json.loads(raw))

    def _default_profile(self) -> UserProfile:
        return UserProfile(joined_at=to_iso(self._now()))

    def get_user_profile(self) -> UserProfile:
        try:
            profile = self._load_profile()
        except _UNREADABLE as error:
            logger.warning(f"Failed to load user profile: {error}")
            profile = None
        return profile or self._default_profile()

    def save_user_profile(self, profile: UserProfile) -> None:
        self.storage.set(USER_PROFILE_KEY, json.dumps(profile.as_dict()))

    def update_user_name(self, name: str) -> UserProfile:
        with self.storage.lock:
            profile = self.get_user_profile()
            profile.name = name
            self.save_user_profile(profile)
        return profile

    # Complaints

    def _load_complaints(self) -> List[Complaint]:
        raw = self.storage.get(COMPLAINTS_KEY)
        if raw is None:
            return []
        records = json.loads(raw)
        if not isinstance(records, list):
            raise ValueError("complaint log is not a list")
        complaints = [Complaint.from_dict(record) for record in records]
        complaints.sort(key=lambda complaint: parse_iso(complaint.created_at), reverse=True)
        return complaints

    def get_complaints(self) -> List[Complaint]:
        """All complaints, newest first."""
        try:
            return self._load_complaints()
        except _UNREADABLE as error:
            logger.warning(f"Failed to load complaints: {error}")
            return []

    def get_complaint_by_id(self, complaint_id: str) -> Optional[Complaint]:
        for complaint in self.get_complaints():
            if complaint.id == complaint_id:
                return complaint
        return None

    def _new_complaint_id(self, moment: datetime, existing: List[Complaint]) -> str:
        taken = {complaint.id for complaint in existing}
        while True:
            candidate = f"complaint-{int(moment.timestamp() * 1000)}-{secrets.token_hex(3)}"
            if candidate not in taken:
                return candidate

    def _write(self, complaints: List[Complaint], profile: UserProfile) -> None:
        self.storage.set_many(
            {
                COMPLAINTS_KEY: json.dumps([complaint.as_dict() for complaint in complaints]),
                USER_PROFILE_KEY: json.dumps(profile.as_dict()),
            }
        )

    def file_complaint(
        self,
        image_uri: str,
        waste_category: Union[WasteCategory, str],
        confidence: float,
        waste_label: str,
        description: str,
        location: GeoLocation,
        idempotency_key: Optional[str] = None,
    ) -> FiledComplaint:
        """Persist a new complaint, award points, and advance the streak.

        Unlike the read helpers, unreadable stored state raises
        :class:`StorageError` here instead of being replaced by defaults, so a
        corrupt record is never overwritten. Retrying with the same
        ``idempotency_key`` returns the original complaint without awarding
        points again.
        """
        category = parse_category(waste_category)

        with self.storage.lock:
            try:
                profile = self._load_profile() or self._default_profile()
                complaints = self._load_complaints()
            except (ValueError, KeyError, TypeError) as error:
                raise StorageError(f"Stored state is unreadable: {error}") from error

            if idempotency_key is not None:
                for existing in complaints:
                    if existing.idempotency_key == idempotency_key:
                        logger.info(f"Complaint {existing.id} already filed for key {idempotency_key}")
                        return FiledComplaint(existing, profile, 0, replayed=True)

            moment = self._now()
            new_streak = compute_streak(profile.last_report_date, profile.streak, now=moment)
            points_awarded = calculate_points(category, confidence, new_streak)

            timestamp = to_iso(moment)
            complaint = Complaint(
                id=self._new_complaint_id(moment, complaints),
                image_uri=image_uri,
                waste_category=category,
                confidence=confidence,
                waste_label=waste_label,
                description=description,
                location=location,
                points_awarded=points_awarded,
                status=ComplaintStatus.PENDING,
                created_at=timestamp,
                updated_at=timestamp,
                idempotency_key=idempotency_key,
            )
            complaints.insert(0, complaint)

            updated = UserProfile.from_dict(profile.as_dict())
            updated.total_points += points_awarded
            updated.total_reports += 1
            updated.streak = new_streak
            updated.last_report_date = timestamp

            self._write(complaints, updated)

        logger.info(
            f"Filed {complaint.id} ({category.value}) for {points_awarded} points, streak {new_streak}"
        )
        return FiledComplaint(complaint, updated, points_awarded)

    def update_complaint_status(
        self, complaint_id: str, status: Union[ComplaintStatus, str]
    ) -> Optional[Complaint]:
        """Moderation hook: change a complaint's status. Points are left untouched."""
        new_status = ComplaintStatus(status)
        with self.storage.lock:
            complaints = self._load_complaints()
            for complaint in complaints:
                if complaint.id == complaint_id:
                    complaint.status = new_status
                    complaint.updated_at = to_iso(self._now())
                    self.storage.set(
                        COMPLAINTS_KEY, json.dumps([record.as_dict() for record in complaints])
                    )
                    return complaint
        return None

    def get_stats(self) -> ComplaintStats:
        profile = self.get_user_profile()
        counts = Counter(complaint.waste_category.value for complaint in self.get_complaints())
        return ComplaintStats(
            total_reports=profile.total_reports,
            total_points=profile.total_points,
            category_counts=dict(counts),
            streak=profile.streak,
        )
