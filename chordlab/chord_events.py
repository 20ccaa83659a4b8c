# ===============================
# File: chordlab/chord_events.py
# ===============================
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional

from chordcore import detect_chord, pitch_to_note_id
from .midi_utils import NoteEvent


@dataclass
class ChordEvent:
    time: float                                     # window start (s)
    pitches: List[int] = field(default_factory=list)  # distinct midi pitches sounding in the window
    label: Optional[str] = None

    @property
    def note_ids(self) -> List[str]:
        return [pitch_to_note_id(p) for p in self.pitches]

    @property
    def bass_pc(self) -> Optional[int]:
        return min(self.pitches) % 12 if self.pitches else None


def _active_in_window(n: NoteEvent, t0: float, t1: float) -> bool:
    return not (n.offset <= t0 or n.onset >= t1)


def build_chord_events(notes: List[NoteEvent], window_ms=300, hop_ratio=0.5) -> List[ChordEvent]:
    """Slide a window over the notes; one event per window with anything sounding."""
    if window_ms <= 0 or not (0.0 < hop_ratio <= 1.0):
        raise ValueError("window_ms must be > 0 and hop_ratio in (0, 1]")
    if not notes:
        return []
    tmin = min(n.onset for n in notes)
    tmax = max(n.offset for n in notes)
    win = window_ms / 1000.0
    hop = win * hop_ratio

    events: List[ChordEvent] = []
    step = 0
    t = tmin
    while t < tmax:
        actives = [n for n in notes if _active_in_window(n, t, t + win)]
        if actives:
            pitches = sorted({n.pitch for n in actives})
            events.append(ChordEvent(time=t, pitches=pitches))
        step += 1
        t = tmin + step * hop
    return events


def label_events(events: List[ChordEvent], use_flats: bool = False) -> List[ChordEvent]:
    for ev in events:
        ev.label = detect_chord(ev.note_ids, use_flats=use_flats)
    return events
