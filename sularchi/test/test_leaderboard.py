"""Tests for leaderboard ranking."""

import pytest

from sularchi.leaderboard import LEADERBOARD_SEED, build_leaderboard, get_leaderboard, rank_badge
from sularchi.models import UserProfile


def profile_with(points, reports=0):
    return UserProfile(name="Ada", total_points=points, total_reports=reports)


class TestBuildLeaderboard:

    @pytest.mark.parametrize("points", [0, 95, 400, 580, 10_000])
    def test_invariants(self, points):
        board = build_leaderboard(profile_with(points))
        totals = [entry.total_points for entry in board]

        assert len(board) == len(LEADERBOARD_SEED) + 1
        assert totals == sorted(totals, reverse=True)
        assert [entry.rank for entry in board] == list(range(1, len(board) + 1))
        assert sum(entry.is_current_user for entry in board) == 1

    def test_new_user_ranks_last(self):
        board = build_leaderboard(profile_with(0))
        assert board[-1].is_current_user
        assert board[-1].rank == 10

    def test_user_slots_between_peers(self):
        board = build_leaderboard(profile_with(400, 31))
        me = next(entry for entry in board if entry.is_current_user)
        assert me.rank == 3
        assert (me.name, me.total_reports) == ("Ada", 31)

    def test_tie_ranks_user_after_peer(self):
        board = build_leaderboard(profile_with(580))
        assert board[0].name == "GreenHero"
        assert board[1].is_current_user

    def test_top_spot(self):
        board = build_leaderboard(profile_with(1000))
        assert board[0].is_current_user
        assert board[0].as_dict()["rank"] == 1


class TestGetLeaderboard:

    def test_reads_persisted_profile(self, store, file_report):
        store.update_user_name("Ada")
        filed = file_report(category="hazardous", confidence=0.9)

        me = next(entry for entry in get_leaderboard(store) if entry.is_current_user)
        assert me.name == "Ada"
        assert me.total_points == filed.points_awarded
        assert me.total_reports == 1
        assert me.id == "local-user"


class TestRankBadge:

    def test_medals(self):
        assert [rank_badge(r) for r in (1, 2, 3)] == ["🥇", "🥈", "🥉"]

    def test_numbered(self):
        assert rank_badge(7) == "#7"
