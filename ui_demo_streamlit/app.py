"""Streamlit demo UI for score-engine."""

from __future__ import annotations

import tempfile
from datetime import datetime, time
from pathlib import Path
from typing import Any

from score_engine.adapters import csv_adapter, json_adapter
from score_engine.report import build_report, load_engine

DEMO_ACTIVITIES = "examples/sample_activities.csv"
DEMO_ENTRIES = "examples/sample_entries.csv"


def _adapter_for(file_name: str):
    suffix = Path(file_name).suffix.lower()
    if suffix == ".csv":
        return csv_adapter
    if suffix == ".json":
        return json_adapter
    raise ValueError("Unsupported file type. Please use .csv or .json")


def _save_uploaded(uploaded_file) -> str:
    suffix = Path(uploaded_file.name).suffix.lower()
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as handle:
        handle.write(uploaded_file.getbuffer())
        return handle.name


def run_engine(activities_path: str, entries_path: str, cutoff_hour: int, now: datetime, days: int) -> dict[str, Any]:
    """Load both exports and return the report payload."""

    activities = _adapter_for(activities_path).parse_activities(activities_path)
    entries = _adapter_for(entries_path).parse_entries(entries_path)
    engine = load_engine(activities, entries, cutoff_hour=cutoff_hour)
    report = build_report(engine, now, days=days)
    report["summary"] = {
        "activities": len(activities),
        "entries": len(entries),
        "net_points": sum(entry.computed_points for entry in entries),
    }
    return report


def main() -> None:
    import streamlit as st

    st.set_page_config(page_title="Score Engine Demo", layout="wide")
    st.title("Score Engine - Streamlit Demo")

    with st.sidebar:
        st.header("Controls")
        uploaded_activities = st.file_uploader("Activities export", type=["csv", "json"])
        uploaded_entries = st.file_uploader("Entries export", type=["csv", "json"])
        use_demo = st.checkbox("Load demo dataset", value=True)
        cutoff_hour = st.slider("Day cutoff hour", min_value=0, max_value=23, value=4)
        as_of_date = st.date_input("As of date", value=datetime(2025, 1, 8).date())
        as_of_hour = st.slider("As of hour", min_value=0, max_value=23, value=14)
        days = st.number_input("Days in series", min_value=1, max_value=60, value=7, step=1)
        run = st.button("Run engine", type="primary")

    if not run:
        st.info("Configure inputs in the sidebar and click **Run engine**.")
        return

    try:
        if use_demo:
            activities_path, entries_path = DEMO_ACTIVITIES, DEMO_ENTRIES
        elif uploaded_activities is not None and uploaded_entries is not None:
            activities_path = _save_uploaded(uploaded_activities)
            entries_path = _save_uploaded(uploaded_entries)
        else:
            st.error("Please upload both exports or enable 'Load demo dataset'.")
            return

        now = datetime.combine(as_of_date, time(hour=int(as_of_hour)))
        result = run_engine(activities_path, entries_path, int(cutoff_hour), now, int(days))

        st.subheader("A) Data Summary")
        summary = result["summary"]
        c1, c2, c3 = st.columns(3)
        c1.metric("Activities", summary["activities"])
        c2.metric("Entries", summary["entries"])
        c3.metric("Net points", f"{summary['net_points']:.1f}")

        st.subheader("B) Daily Net Score")
        st.bar_chart({point["day_start"][:10]: point["value"] for point in result["daily_net"]})

        st.subheader("C) Contributions")
        p1, p2 = st.columns(2)
        p1.write("**Positive**")
        p1.table(result["positive_slices"])
        p2.write("**Negative**")
        p2.table(result["negative_slices"])

        st.subheader("D) Suggestions")
        if result["suggestions"]:
            for suggestion in result["suggestions"]:
                st.write(f"{suggestion['title']}: {suggestion['activity']}")
        else:
            st.write("No suggestions right now.")

        st.subheader("E) Insights")
        if result["correlation"]:
            st.write(result["correlation"]["message"])
        if result["comparison"]:
            st.write(result["comparison"])
        if not result["correlation"] and not result["comparison"]:
            st.write("Not enough history for insights yet.")

    except ValueError as exc:
        st.error(f"Input error: {exc}")


if __name__ == "__main__":
    main()
