# ===============================
# File: chordcore/templates.py
# ===============================
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .pitch import note_letter_to_pitch_class
from .stacking import interval_pattern, stacked_chord


@dataclass(frozen=True)
class ChordTemplate:
    name: str                      # suffix appended to the root, "" for a major triad
    pattern: Tuple[int, ...]       # interval pattern of the stacked form
    root_index: int                # position of the root inside the stacked form
    symmetric: bool = False        # every member is an equally valid root (dim7, +)
    notes: Tuple[str, ...] = ()    # authored spelling, root first


# (name, notes spelled from C, [symmetric])
CHORD_DEFINITIONS = [
    ("", "C,E,G"),
    ("5", "C,G"),
    ("6(no3)", "C,G,A"),
    ("Maj7", "C,E,G,B"),
    ("Maj7(#11)", "C,E,F#,B"),
    ("add9", "C,E,G,D"),
    ("Maj7(9)", "C,D,E,B"),
    ("6(9)", "C,D,E,A"),
    ("+", "C,E,G#", True),
    ("m", "C,Eb,G"),
    ("madd9", "C,Eb,G,D"),
    ("m7", "C,Eb,G,Bb"),
    ("m7(9)", "C,D,Eb,Bb"),
    ("mMaj7", "C,Eb,G,B"),
    ("mMaj7(9)", "C,D,Eb,B"),
    ("dim", "C,Eb,F#"),
    ("dim7", "C,Eb,F#,A", True),
    ("7", "C,E,G,Bb"),
    ("7(no5)", "C,E,Bb"),
    ("7sus4", "C,F,G,Bb"),
    ("7(b5)", "C,E,F#,Bb"),
    ("7(9)", "C,D,E,Bb"),
    ("7(13)", "C,E,A,Bb"),
    ("7(b9)", "C,C#,E,Bb"),
    ("+7", "C,E,G#,Bb"),
    ("7(#9)", "C,Eb,E,Bb"),
    ("sus4", "C,F,G"),
    ("6add9", "C,E,G,A,D"),
    ("Maj9", "C,E,G,B,D"),
    ("9", "C,E,G,Bb,D"),
    ("13", "C,E,G,Bb,D,A"),
    ("13", "C,E,G,Bb,D,F,A"),
    ("13", "C,E,Bb,D,A"),
    ("m6", "C,Eb,G,A"),
    ("m6add9", "C,Eb,G,A,D"),
    ("m6/9", "C,Eb,A,D"),
    ("m7add13", "C,Eb,G,A,Bb"),
    ("m9", "C,Eb,G,Bb,D"),
    ("m11", "C,Eb,G,Bb,D,F"),
    ("m11", "C,Eb,Bb,D,F"),
    ("m13", "C,Eb,G,Bb,D,F,A"),
    ("m9/Maj7", "C,Eb,G,B,D"),
    ("m9(b5)", "C,Eb,Gb,Bb,D"),
    ("m11(b5)", "C,Eb,Gb,Bb,D,F"),
    ("Maj7(#5)", "C,E,G#,B"),
    ("Maj7(#11)", "C,E,G,B,F#"),
    ("Maj9(#11)", "C,E,G,B,D,F#"),
    ("7(b9)", "C,E,G,Bb,Db"),
    ("7(#9)", "C,E,G,Bb,D#"),
    ("7(#5)(#9)", "C,E,G#,Bb,D#"),
    ("7(#11)", "C,E,G,Bb,F#"),
    ("9(#11)", "C,E,G,Bb,D,F#"),
    ("7(b9)(#11)", "C,E,G,Bb,Db,F#"),
    ("13b5", "C,E,Gb,Bb,D,A"),
    ("13b5", "C,E,Gb,Bb,D,F,A"),
    ("13b9", "C,E,G,Bb,Db,A"),
    ("13b9", "C,E,G,Bb,Db,F,A"),
    ("13#11", "C,E,G,Bb,D,F#,A"),
    ("7(no3)", "C,G,Bb"),
    ("Maj7(no5)", "C,E,B"),
    ("m(maj9)", "C,D#,G,B,D"),
    ("m7(b9)", "C,D#,G,A#,C#"),
]


def build_template(name: str, notes: str, symmetric: bool = False) -> ChordTemplate:
    spelled = tuple(n.strip() for n in notes.split(","))
    pcs = [note_letter_to_pitch_class(n) for n in spelled]
    stacked = stacked_chord(set(pcs))
    return ChordTemplate(
        name=name,
        pattern=interval_pattern(stacked),
        root_index=stacked.index(pcs[0]),
        symmetric=symmetric,
        notes=spelled,
    )


def build_template_database(definitions: Sequence[tuple]) -> Tuple[ChordTemplate, ...]:
    """
    Compile authored definitions into the lookup table, in order.

    A definition whose pattern is already taken is dropped: the first-match
    lookup could never return it (e.g. "m13" spells the same seven-note shape
    as "13", "m(maj9)" the same as "m9/Maj7").
    """
    table = []
    seen = set()
    for definition in definitions:
        template = build_template(*definition)
        if template.pattern in seen:
            continue
        seen.add(template.pattern)
        table.append(template)
    return tuple(table)


CHORD_DATABASE: Tuple[ChordTemplate, ...] = build_template_database(CHORD_DEFINITIONS)


def find_template(pattern: Sequence[int],
                  database: Sequence[ChordTemplate] = CHORD_DATABASE) -> Optional[ChordTemplate]:
    pattern = tuple(pattern)
    for template in database:
        if template.pattern == pattern:
            return template
    return None
