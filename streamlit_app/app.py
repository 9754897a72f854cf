"""Ghost Engine: Streamlit workout preview dashboard.

Run with:
    streamlit run streamlit_app/app.py

Requires the dashboard extra (pip install -e ".[dashboard]").
"""

from __future__ import annotations

import json
import logging

import streamlit as st

from ghost_engine.serialization import steps_to_frame, timeline_to_dict, timeline_to_frame
from ghost_engine.settings import EngineSettings
from ghost_engine.timing.consistency import check_timing_consistency
from ghost_engine.validator import WorkoutValidator

from helpers import (
    add_clock_columns,
    build_preview,
    format_issue,
    format_total_time,
    list_workouts,
    load_workout_file,
    save_workout_file,
    style_event_rows,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------

st.set_page_config(
    page_title="Ghost Engine",
    page_icon="🎾",
    layout="wide",
)


# ---------------------------------------------------------------------------
# Cached resources
# ---------------------------------------------------------------------------


@st.cache_resource
def get_validator() -> WorkoutValidator:
    return WorkoutValidator()


@st.cache_resource
def get_settings() -> EngineSettings:
    return EngineSettings.from_env()


settings = get_settings()

# ---------------------------------------------------------------------------
# Sidebar: workout source and run options
# ---------------------------------------------------------------------------

st.sidebar.title("Workout")

workout_data = None
with st.sidebar.expander("Source", expanded=True):
    uploaded = st.file_uploader("Upload workout JSON", type=["json"])
    saved = list_workouts(settings)
    selected = st.selectbox("Or pick a saved workout", ["(none)"] + saved)

    if uploaded is not None:
        try:
            workout_data = json.loads(uploaded.getvalue().decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            st.error(f"Could not read {uploaded.name}: {e}")
    elif selected != "(none)":
        workout_data = load_workout_file(selected, settings)

with st.sidebar.expander("Run options", expanded=True):
    seed_text = st.text_input("Random seed (blank = random)", value="")
    lock_choice = st.radio(
        "Config lock",
        ["From document", "Locked", "Unlocked"],
        horizontal=True,
    )

seed = int(seed_text) if seed_text.strip().isdigit() else None
locked = {"From document": None, "Locked": True, "Unlocked": False}[lock_choice]

if workout_data is not None and uploaded is not None:
    with st.sidebar.expander("Save"):
        save_name = st.text_input("Save as", value=str(workout_data.get("name", "workout")))
        if st.button("Save workout"):
            path = save_workout_file(save_name, workout_data, settings)
            st.success(f"Saved to {path.name}")

# ---------------------------------------------------------------------------
# Main area
# ---------------------------------------------------------------------------

st.title("Workout Preview")

if workout_data is None:
    st.info("Upload a workout JSON or pick a saved workout to get started.")
    st.stop()

result = build_preview(
    workout_data, seed=seed, locked=locked, settings=settings, validator=get_validator()
)

tab_preview, tab_events, tab_issues = st.tabs(["Timeline", "Sound Events", "Validation"])

# ---------------------------------------------------------------------------
# Tab 1: Timeline
# ---------------------------------------------------------------------------

with tab_preview:
    if result.error:
        st.error(f"Workout cannot be previewed: {result.error}")
    elif result.timeline is not None:
        timeline = result.timeline
        if result.has_errors:
            st.warning("The workout has validation errors; the preview is best effort.")

        c1, c2, c3, c4 = st.columns(4)
        c1.metric("Total time", format_total_time(timeline.stats.total_time))
        c2.metric("Shots", timeline.stats.total_shots)
        c3.metric("Supersets", timeline.superset_count)
        c4.metric("Events", len(timeline.events))

        if timeline.hit_superset_cap:
            st.warning(f"Stopped after the {settings.max_supersets}-superset safety cap.")
        if timeline.skip_reasons:
            st.caption("Skipped: " + ", ".join(reason.value for reason in timeline.skip_reasons))

        for problem in check_timing_consistency(timeline.steps):
            st.warning(problem)

        steps = add_clock_columns(steps_to_frame(timeline))
        for superset_number, group in steps.groupby("superset"):
            with st.expander(f"Superset {superset_number}", expanded=superset_number == 1):
                st.dataframe(group, use_container_width=True, hide_index=True)

        st.divider()
        st.download_button(
            "Download timeline (.json)",
            data=json.dumps(timeline_to_dict(timeline), indent=2),
            file_name=f"{str(workout_data.get('name', 'workout')).replace(' ', '_')}_timeline.json",
            mime="application/json",
        )

# ---------------------------------------------------------------------------
# Tab 2: Sound events
# ---------------------------------------------------------------------------

with tab_events:
    if result.timeline is not None:
        events = timeline_to_frame(result.timeline)
        st.dataframe(
            events.style.apply(style_event_rows, axis=None),
            use_container_width=True,
            hide_index=True,
        )
    else:
        st.info("No events: the workout could not be walked.")

# ---------------------------------------------------------------------------
# Tab 3: Validation
# ---------------------------------------------------------------------------

with tab_issues:
    if not result.issues:
        st.success("No validation issues.")
    for issue in result.issues:
        st.markdown(format_issue(issue))
