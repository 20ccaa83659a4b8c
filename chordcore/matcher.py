# ===============================
# File: chordcore/matcher.py
# ===============================
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .pitch import ParseError, interval_name, note_name_to_pitch, pitch_to_note_name
from .stacking import interval_pattern, stacked_chord
from .templates import ChordTemplate, find_template

# distinct pitch classes from which a cluster is no longer worth naming
NOTE_SOUP_SIZE = 9


@dataclass(frozen=True)
class ChordReading:
    label: str
    bass_pc: int
    root_pc: Optional[int] = None               # None for intervals / fallbacks
    template: Optional[ChordTemplate] = None
    stacked: Tuple[int, ...] = ()
    pitches: Tuple[int, ...] = ()


def _parse_all(notes: Iterable[str], strict: bool) -> List[int]:
    pitches = []
    for n in notes:
        try:
            pitches.append(note_name_to_pitch(n))
        except ParseError:
            if strict:
                raise
    return sorted(pitches)


def describe_chord(notes: Iterable[str], use_flats: bool = False,
                   strict: bool = True) -> Optional[ChordReading]:
    """Structured reading of a set of active notes; None when there are none."""
    pitches = _parse_all(notes, strict)
    if not pitches:
        return None

    sharps = not use_flats
    bass = pitches[0]
    bass_pc = bass % 12
    bass_name = pitch_to_note_name(bass, sharps)
    frozen = tuple(pitches)

    if len(pitches) == 1:
        return ChordReading(bass_name, bass_pc, root_pc=bass_pc, pitches=frozen)

    if len(pitches) == 2:
        name = interval_name(pitches[1] - pitches[0]) or "Interval"
        high = pitch_to_note_name(pitches[1], sharps)
        return ChordReading(f"{name} ({bass_name}, {high})", bass_pc, pitches=frozen)

    # distinct pitch classes, in the order they turn up from the bass upwards
    pcs = list(dict.fromkeys(p % 12 for p in pitches))
    if len(pcs) >= NOTE_SOUP_SIZE:
        return ChordReading(f"{bass_name} Note Soup", bass_pc, pitches=frozen)

    stacked = stacked_chord(pcs)
    template = find_template(interval_pattern(stacked))
    if template is None:
        listing = ", ".join(pitch_to_note_name(pc, sharps) for pc in pcs)
        return ChordReading(f"({listing})", bass_pc, stacked=stacked, pitches=frozen)

    root_pc = bass_pc if template.symmetric else stacked[template.root_index]
    label = pitch_to_note_name(root_pc, sharps) + template.name
    if root_pc != bass_pc:
        label += "/" + bass_name
    return ChordReading(label, bass_pc, root_pc=root_pc, template=template,
                        stacked=stacked, pitches=frozen)


def detect_chord(notes: Iterable[str], use_flats: bool = False,
                 strict: bool = True) -> Optional[str]:
    """
    Name the chord formed by `notes` (identifiers like "C4", "F#3", "Bb5").

    Returns None only for an empty input. Malformed identifiers raise
    ParseError, or are dropped when strict=False.
    """
    reading = describe_chord(notes, use_flats=use_flats, strict=strict)
    return reading.label if reading else None
