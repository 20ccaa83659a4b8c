# ===============================
# File: chordlab/analysis.py
# ===============================
from __future__ import annotations
import json
from pathlib import Path
from typing import List

from .config import (
    MIN_NOTE_MS, DELTA_MERGE_MS, QUANT_GRID, WINDOW_MS, HOP_RATIO, MEDIAN_K, MIN_CHORD_MS,
)
from .midi_utils import NoteEvent, read_midi_to_notes, preprocess_notes
from .chord_events import build_chord_events, label_events
from .chord_smoothing import ChordSeg, median_filter, labels_to_segments, enforce_min_duration


def analyze_notes(notes: List[NoteEvent], *,
                  use_flats: bool = False,
                  window_ms: int = WINDOW_MS,
                  hop_ratio: float = HOP_RATIO,
                  median_k: int = MEDIAN_K,
                  min_chord_ms: int | None = MIN_CHORD_MS,
                  debug: bool = False) -> List[ChordSeg]:
    """Windowed chord labels over a list of notes, smoothed into segments."""
    # 1) windowing
    events = build_chord_events(notes, window_ms=window_ms, hop_ratio=hop_ratio)
    if not events:
        return []

    # 2) one label per window
    label_events(events, use_flats=use_flats)
    if debug:
        for ev in events:
            print(f"[analyze] t={ev.time:.3f} {' '.join(ev.note_ids)} -> {ev.label}")

    # 3) smoothing keeps the length, so times and labels stay aligned
    labels = median_filter([ev.label for ev in events], k=median_k)
    times = [ev.time for ev in events]
    hop_sec = (window_ms / 1000.0) * hop_ratio

    # 4) segments, then minimum duration
    segs = labels_to_segments(times, labels, hop_sec)
    if min_chord_ms and min_chord_ms > 0:
        segs = enforce_min_duration(segs, min_chord_ms / 1000.0)
    return segs


def analyze_midi(midi_path: Path, *,
                 use_flats: bool = False,
                 min_chord_ms: int | None = MIN_CHORD_MS,
                 debug: bool = False) -> List[ChordSeg]:
    notes = read_midi_to_notes(midi_path)
    notes = preprocess_notes(notes, t_min_ms=MIN_NOTE_MS,
                             delta_merge_ms=DELTA_MERGE_MS, grid=QUANT_GRID)
    if debug:
        print(f"[analyze] {midi_path}: {len(notes)} notes after preprocessing")
    return analyze_notes(notes, use_flats=use_flats, min_chord_ms=min_chord_ms, debug=debug)


def segments_to_payload(segs: List[ChordSeg]) -> list[dict]:
    return [{"start": round(s.start, 3), "end": round(s.end, 3), "label": s.label} for s in segs]


def write_segments_json(segs: List[ChordSeg], json_out: Path) -> Path:
    json_out.parent.mkdir(parents=True, exist_ok=True)
    json_out.write_text(json.dumps(segments_to_payload(segs), ensure_ascii=False, indent=2),
                        encoding="utf-8")
    return json_out
