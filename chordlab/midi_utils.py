# ===============================
# File: chordlab/midi_utils.py
# ===============================
from __future__ import annotations
from dataclasses import dataclass
from typing import List
from pathlib import Path
import music21 as m21
from .config import DEFAULT_TEMPO


@dataclass
class NoteEvent:
    onset: float   # seconds
    offset: float  # seconds
    pitch: int     # midi number
    velocity: int  # 0..127 (64 when unknown)


def _estimate_tempo(stream: m21.stream.Stream) -> float:
    """First usable MetronomeMark in BPM, else DEFAULT_TEMPO."""
    for (_start, _end, mark) in stream.metronomeMarkBoundaries():
        number = getattr(mark, "number", None)
        if number is not None and float(number) > 0:
            return float(number)
    return float(DEFAULT_TEMPO)


def _ql_to_seconds(quarter_length: float, bpm: float) -> float:
    return quarter_length * (60.0 / bpm)


def read_midi_to_notes(midi_path: Path) -> List[NoteEvent]:
    s = m21.converter.parse(str(midi_path))
    bpm = _estimate_tempo(s)
    notes: List[NoteEvent] = []
    for el in s.flatten().notes:
        onset_q = float(el.offset)
        dur_q = float(el.duration.quarterLength)
        onset_s = _ql_to_seconds(onset_q, bpm)
        offset_s = _ql_to_seconds(onset_q + dur_q, bpm)
        vel = int(el.volume.velocity) if el.volume.velocity is not None else 64
        # chords in the stream are split into their member pitches
        for p in el.pitches:
            notes.append(NoteEvent(onset_s, offset_s, int(p.midi), vel))
    return notes


def preprocess_notes(notes: List[NoteEvent], *, t_min_ms=60, vel_min=0,
                     delta_merge_ms=25, grid="1/16") -> List[NoteEvent]:
    """Duration/velocity filter, same-pitch onset fusion, simple quantization."""
    if not grid.startswith("1/"):
        raise ValueError("grid must look like '1/16'")

    den = int(grid.split("/")[-1])
    qstep = _ql_to_seconds(4.0 / den, DEFAULT_TEMPO)
    tmin = t_min_ms / 1000.0
    dmerge = delta_merge_ms / 1000.0

    keep = [n for n in notes if (n.offset - n.onset) >= tmin and n.velocity >= vel_min]
    keep.sort(key=lambda x: (x.onset, x.pitch))

    # fuse close onsets of the same pitch, keeping the longer note
    fused: List[NoteEvent] = []
    last_by_pitch: dict[int, int] = {}
    for n in keep:
        idx = last_by_pitch.get(n.pitch)
        if idx is not None and abs(n.onset - fused[idx].onset) <= dmerge:
            prev = fused[idx]
            if (n.offset - n.onset) > (prev.offset - prev.onset):
                fused[idx] = n
            continue
        last_by_pitch[n.pitch] = len(fused)
        fused.append(n)

    def q(x: float) -> float:
        return round(x / qstep) * qstep

    return [NoteEvent(q(n.onset), q(n.offset), n.pitch, n.velocity) for n in fused]
