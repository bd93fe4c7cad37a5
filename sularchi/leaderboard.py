"""Leaderboard built from the local profile and a fixed community roster."""

from __future__ import annotations

from typing import Any, Dict, List

from sularchi.complaints import ComplaintStore
from sularchi.models import LeaderboardEntry, UserProfile

# Simulated community members until a networked roster exists.
LEADERBOARD_SEED: List[Dict[str, Any]] = [
    {"id": "u1", "name": "GreenHero", "total_points": 580, "total_reports": 42},
    {"id": "u2", "name": "EcoChamp", "total_points": 445, "total_reports": 35},
    {"id": "u3", "name": "RecycleKing", "total_points": 390, "total_reports": 30},
    {"id": "u4", "name": "WasteWatcher", "total_points": 310, "total_reports": 24},
    {"id": "u5", "name": "CleanStreet", "total_points": 275, "total_reports": 21},
    {"id": "u6", "name": "EarthGuard", "total_points": 220, "total_reports": 18},
    {"id": "u7", "name": "TrashTracker", "total_points": 180, "total_reports": 14},
    {"id": "u8", "name": "BinBuddy", "total_points": 140, "total_reports": 10},
    {"id": "u9", "name": "ZeroWaste", "total_points": 95, "total_reports": 7},
]

RANK_MEDALS = {1: "🥇", 2: "🥈", 3: "🥉"}


def build_leaderboard(profile: UserProfile) -> List[LeaderboardEntry]:
    """Rank the seed roster plus the local user by points, highest first.

    The sort is stable and the local user is appended after the roster, so
    a tie with a community member ranks the local user lower.
    """
    board = [LeaderboardEntry(rank=0, **member) for member in LEADERBOARD_SEED]
    board.append(
        LeaderboardEntry(
            id=profile.id,
            name=profile.name,
            total_points=profile.total_points,
            total_reports=profile.total_reports,
            rank=0,
            is_current_user=True,
        )
    )
    board.sort(key=lambda entry: entry.total_points, reverse=True)
    for position, entry in enumerate(board, start=1):
        entry.rank = position
    return board


def get_leaderboard(store: ComplaintStore) -> List[LeaderboardEntry]:
    return build_leaderboard(store.get_user_profile())


def rank_badge(rank: int) -> str:
    return RANK_MEDALS.get(rank, f"#{rank}")
