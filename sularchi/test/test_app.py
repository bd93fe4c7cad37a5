"""Smoke test for the Streamlit interface."""

from pathlib import Path

import pytest
import streamlit as st
from streamlit.testing.v1 import AppTest

from sularchi import config
from sularchi.classifier import heuristic_classify
from sularchi.models import GeoLocation

APP_PATH = Path(__file__).resolve().parents[2] / "app.py"


@pytest.fixture
def app(monkeypatch, tmp_path):
    monkeypatch.setattr(config, "DATABASE_PATH", str(tmp_path / "app.db"))
    monkeypatch.setattr(config, "IMAGE_DIR", str(tmp_path / "captures"))
    st.cache_resource.clear()
    yield AppTest.from_file(str(APP_PATH), default_timeout=30)
    st.cache_resource.clear()


class TestApp:

    def test_scanner_renders(self, app):
        app.run()
        assert not app.exception
        assert app.title[0].value == "🌍 Sularchi"

    def test_leaderboard_tab(self, app):
        app.run()
        app.radio(key="main_tab_selector").set_value("🏆 Leaderboard").run()
        assert not app.exception
        assert any("Eco Warrior" in block.value for block in app.markdown)

    def test_reports_tab_starts_empty(self, app):
        app.run()
        app.radio(key="main_tab_selector").set_value("📋 Reports").run()
        assert not app.exception
        assert app.info[0].value.startswith("No reports yet")

    @pytest.mark.parametrize(
        "replayed, points, expected",
        [(False, 20, "Report filed! +20 points"), (True, 0, "Already reported")],
    )
    def test_submission_message(self, app, replayed, points, expected):
        app.session_state["result"] = heuristic_classify("a")
        app.session_state["location"] = GeoLocation(latitude=6.9271, longitude=79.8612)
        app.session_state["points_awarded"] = points
        app.session_state["replayed"] = replayed
        app.run()

        assert not app.exception
        messages = [element.value for element in (*app.success, *app.info)]
        assert any(message.startswith(expected) for message in messages)
        assert not any("+0 points" in message for message in messages)
