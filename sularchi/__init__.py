"""Sularchi: classify photographed waste, file it as a complaint, earn points."""

from sularchi.categories import CategoryInfo, WasteCategory
from sularchi.classifier import (
    ClassificationError,
    ClassificationResult,
    classify_waste,
    get_disposal_info,
    get_waste_categories,
)
from sularchi.complaints import ComplaintStats, ComplaintStore, FiledComplaint
from sularchi.leaderboard import build_leaderboard, get_leaderboard
from sularchi.location import format_coordinates, get_current_location
from sularchi.models import Complaint, ComplaintStatus, GeoLocation, LeaderboardEntry, UserProfile
from sularchi.storage import KeyValueStorage, StorageError

__version__ = "1.0.0"
