"""Streamlit interface for the Sularchi waste reporter."""

from __future__ import annotations

import atexit
import hashlib
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional

import streamlit as st

from sularchi import config
from sularchi.classifier import ClassificationResult, classify_waste
from sularchi.complaints import ComplaintStore
from sularchi.leaderboard import get_leaderboard, rank_badge
from sularchi.location import (
    ExifLocationProvider,
    LocationProvider,
    StaticLocationProvider,
    format_coordinates,
    get_current_location,
)
from sularchi.models import ComplaintStatus, GeoLocation, parse_iso
from sularchi.storage import KeyValueStorage, StorageError

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

st.set_page_config(
    page_title="Sularchi · Smart Waste Classification",
    page_icon="🌍",
    layout="wide",
)


@st.cache_resource(show_spinner=False)
def get_store() -> ComplaintStore:
    """Open the local store once and reuse it across reruns and sessions."""
    store = ComplaintStore(KeyValueStorage(config.DATABASE_PATH)).open()
    atexit.register(store.close)
    return store


def initialize_state() -> None:
    """Ensure required keys exist in Streamlit session state."""
    st.session_state.setdefault("image_uri", None)
    st.session_state.setdefault("result", None)
    st.session_state.setdefault("location", None)
    st.session_state.setdefault("submission_key", None)
    st.session_state.setdefault("points_awarded", None)
    st.session_state.setdefault("replayed", False)
    st.session_state.setdefault("editing_name", False)


def reset_scan() -> None:
    st.session_state.image_uri = None
    st.session_state.result = None
    st.session_state.location = None
    st.session_state.submission_key = None
    st.session_state.points_awarded = None
    st.session_state.replayed = False


def save_capture(image_bytes: bytes) -> str:
    """Store the captured photo locally and return its path as the image reference."""
    digest = hashlib.sha256(image_bytes).hexdigest()
    directory = Path(config.IMAGE_DIR)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{digest[:16]}.jpg"
    if not path.exists():
        path.write_bytes(image_bytes)
    return str(path.resolve())


def pick_location_provider(image_bytes: bytes) -> LocationProvider:
    exif_provider = ExifLocationProvider(image_bytes)
    if exif_provider.read_position() is not None:
        return exif_provider
    return StaticLocationProvider.from_config()


def analyze_capture(image_bytes: bytes) -> None:
    image_uri = save_capture(image_bytes)
    provider = pick_location_provider(image_bytes)
    # Classification and location lookup run side by side.
    with ThreadPoolExecutor(max_workers=2) as executor:
        classification = executor.submit(classify_waste, image_uri)
        location = executor.submit(get_current_location, provider)
        st.session_state.result = classification.result()
        st.session_state.location = location.result()
    st.session_state.image_uri = image_uri
    st.session_state.submission_key = hashlib.sha256(image_bytes).hexdigest()
    st.session_state.points_awarded = None
    st.session_state.replayed = False


def submit_report(store: ComplaintStore) -> None:
    result: ClassificationResult = st.session_state.result
    location: GeoLocation = st.session_state.location
    try:
        filed = store.file_complaint(
            image_uri=st.session_state.image_uri,
            waste_category=result.category,
            confidence=result.confidence,
            waste_label=result.label,
            description=result.description,
            location=location,
            idempotency_key=st.session_state.submission_key,
        )
    except StorageError as error:
        logger.error(f"Error filing complaint: {error}")
        st.error("Failed to submit the report. Please try again.")
        return
    st.session_state.points_awarded = filed.points_awarded
    st.session_state.replayed = filed.replayed


def render_result_card(result: ClassificationResult) -> None:
    st.markdown(f"### {result.icon} {result.label}")
    st.progress(result.confidence, text=f"Confidence {result.confidence:.0%}")
    st.write(result.description)
    st.markdown(f"**Disposal tip:** {result.disposal_tip}")
    st.caption("Recyclable" if result.recyclable else "Not recyclable")


def render_scanner(store: ComplaintStore) -> None:
    left_column, right_column = st.columns([1.5, 1])

    with left_column:
        st.subheader("Capture or Upload")
        camera_input = st.camera_input("Point your camera at a waste item")
        upload = st.file_uploader("…or upload a photo", type=["jpg", "jpeg", "png"])
        source = camera_input or upload

        if st.button("Analyze Image", type="primary"):
            if source is None:
                st.warning("Please capture or upload an image before analyzing.")
            else:
                with st.spinner("Classifying waste and locating you…"):
                    analyze_capture(source.getvalue())

    with right_column:
        result: Optional[ClassificationResult] = st.session_state.result
        if result is None:
            st.info("Capture or upload an image to identify the waste and how to dispose of it.")
            return

        render_result_card(result)

        location: Optional[GeoLocation] = st.session_state.location
        if location is None:
            st.warning("Location unavailable. A report needs GPS coordinates.")
        else:
            st.markdown(f"📍 {location.address or format_coordinates(location.latitude, location.longitude)}")

        if st.session_state.points_awarded is not None:
            if st.session_state.replayed:
                st.info("Already reported. This photo was filed earlier, so no new points were awarded.")
            else:
                st.success(f"Report filed! +{st.session_state.points_awarded} points")
            if st.button("Scan Again"):
                reset_scan()
                st.rerun()
        elif st.button("Submit Report", disabled=location is None):
            submit_report(store)
            st.rerun()


def render_reports(store: ComplaintStore) -> None:
    stats = store.get_stats()
    reports_col, points_col, streak_col = st.columns(3)
    reports_col.metric("Reports", stats.total_reports)
    points_col.metric("Points", stats.total_points)
    streak_col.metric("Streak", f"🔥 {stats.streak}")

    complaints = store.get_complaints()
    if not complaints:
        st.info("No reports yet. Scan some waste to get started!")
        return

    for complaint in complaints:
        status = ComplaintStatus(complaint.status)
        created = parse_iso(complaint.created_at).astimezone().strftime("%b %d, %I:%M %p")
        location = complaint.location
        with st.container(border=True):
            st.markdown(f"**{complaint.waste_label}** · {status.display_label} · +{complaint.points_awarded} pts")
            st.caption(
                f"{created} · {location.address or format_coordinates(location.latitude, location.longitude)}"
            )


def render_leaderboard(store: ComplaintStore) -> None:
    profile = store.get_user_profile()

    if st.session_state.editing_name:
        name_input = st.text_input("Display name", value=profile.name)
        if st.button("Save name"):
            trimmed = name_input.strip()
            if not trimmed:
                st.warning("Please enter a name")
            else:
                store.update_user_name(trimmed)
                st.session_state.editing_name = False
                st.rerun()
    else:
        st.markdown(f"### {profile.name}")
        if st.button("Edit name"):
            st.session_state.editing_name = True
            st.rerun()

    for entry in get_leaderboard(store):
        marker = " (you)" if entry.is_current_user else ""
        st.markdown(
            f"{rank_badge(entry.rank)} **{entry.name}**{marker} · {entry.total_points} pts · {entry.total_reports} reports"
        )


initialize_state()
store = get_store()

st.title("🌍 Sularchi")
st.subheader("Smart Waste Classification")

nav_choices = [
    ("scanner", "📷 Scan"),
    ("reports", "📋 Reports"),
    ("leaderboard", "🏆 Leaderboard"),
]
label_to_choice = {label: value for value, label in nav_choices}

selected_label = st.radio(
    "Choose what to explore",
    options=[label for _, label in nav_choices],
    horizontal=True,
    key="main_tab_selector",
)
selected_tab = label_to_choice[selected_label]

if selected_tab == "scanner":
    render_scanner(store)
elif selected_tab == "reports":
    render_reports(store)
else:
    render_leaderboard(store)
