# app_keyboard.py
from __future__ import annotations
import datetime
import uuid
from pathlib import Path

import streamlit as st
import pandas as pd
import plotly.express as px

from chordcore import describe_chord, pitch_to_note_id, pitch_to_note_name
from chordlab.config import OUTPUTS_DIR, DEFAULT_OCTAVE, OCTAVE_RANGE, MIN_CHORD_MS
from chordlab.analysis import analyze_midi, segments_to_payload


# ==========================
# Helpers
# ==========================
def autoname(prefix: str = "upload", ext: str = "mid") -> Path:
    """outputs/upload_YYYYmmdd-HHMMSS_<short>.mid"""
    ts = datetime.datetime.now().strftime("%Y%m%d-%H%M%S")
    short = uuid.uuid4().hex[:6]
    path = OUTPUTS_DIR / f"{prefix}_{ts}_{short}.{ext}"
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def keyboard_notes(low_octave: int, n_octaves: int) -> list[str]:
    first = 12 * (low_octave + 1)
    return [pitch_to_note_id(p) for p in range(first, first + 12 * n_octaves + 1)]


# ==========================
# UI
# ==========================
st.set_page_config(page_title="Chordlab — chord detector", layout="wide")
st.title("🎹 Chordlab — chord detector")

with st.sidebar:
    st.header("Settings")
    use_flats = st.toggle("Flat spelling (Db, Eb…)", value=False)
    low_oct = st.slider("Lowest octave", OCTAVE_RANGE[0], OCTAVE_RANGE[1] - 1, DEFAULT_OCTAVE - 1)
    n_oct = st.slider("Octaves shown", 1, 3, 2)
    min_ms = st.number_input("Minimum chord duration (ms)", 0, 3000, MIN_CHORD_MS, step=50)

# ---- 1) Virtual keyboard ------------------------------------------------
st.subheader("1) Pick notes")
choices = keyboard_notes(low_oct, n_oct)
picked = st.multiselect("Active notes", choices, default=[])

reading = describe_chord(picked, use_flats=use_flats)
st.metric("Chord", reading.label if reading else "—")
if reading is not None and reading.stacked:
    sharps = not use_flats
    st.caption("Stacked form: " + " · ".join(pitch_to_note_name(pc, sharps) for pc in reading.stacked))

# ---- 2) MIDI file analysis ----------------------------------------------
st.subheader("2) Analyze a MIDI file")
uploaded = st.file_uploader("Drop a .mid file", type=["mid", "midi"])
if uploaded is None:
    st.stop()

midi_path = autoname(prefix="upload", ext="mid")
midi_path.write_bytes(uploaded.getbuffer())

with st.spinner("Analyzing…"):
    segs = analyze_midi(midi_path, use_flats=use_flats, min_chord_ms=int(min_ms))

if not segs:
    st.info("No chord segment found.")
    st.stop()

df = pd.DataFrame(segments_to_payload(segs))
st.success("Chords: " + " ".join(df["label"]))

# px.timeline wants datetimes: seconds -> datetimes from the unix origin
df_tl = df.copy()
df_tl["track"] = "Chords"
df_tl["start_dt"] = pd.to_datetime(df_tl["start"], unit="s", origin="unix")
df_tl["end_dt"] = pd.to_datetime(df_tl["end"], unit="s", origin="unix")
fig = px.timeline(
    df_tl,
    x_start="start_dt", x_end="end_dt",
    y="track", color="label",
    hover_data={"label": True, "start": ":.3f", "end": ":.3f"},
    color_discrete_sequence=px.colors.qualitative.Set3,
)
fig.update_layout(height=220, margin=dict(l=10, r=10, t=10, b=10), legend_title_text="Chord")
fig.update_xaxes(title="Time (s)", tickformat="%S.%L s")
fig.update_yaxes(showticklabels=False)
st.plotly_chart(fig, use_container_width=True)
st.dataframe(df, use_container_width=True)
