# ===============================
# File: chordcore/pitch.py
# ===============================
from __future__ import annotations
import re
from typing import Optional

SHARP_NOTES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
FLAT_NOTES  = ["C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B"]

# uncommon spellings -> standard sharp name
ENHARMONIC_TO_SHARP = {
    "B#": "C", "E#": "F", "Fb": "E", "Cb": "B",
    "Db": "C#", "Eb": "D#", "Gb": "F#", "Ab": "G#", "Bb": "A#",
}

NOTE_ID_RX = re.compile(r"^(?P<letter>[A-G])(?P<acc>#|b)?(?P<octave>-?[0-9])$")

INTERVAL_NAMES = {
    0: "Unison",
    1: "Minor 2nd",
    2: "Major 2nd",
    3: "Minor 3rd",
    4: "Major 3rd",
    5: "Perfect 4th",
    6: "Tritone",
    7: "Perfect 5th",
    8: "Minor 6th (or #5)",
    9: "Major 6th",
    10: "Minor 7th",
    11: "Major 7th",
    12: "Octave",
    13: "Flat 9th",
    14: "9th",
    15: "Minor 10th (or #9)",
    16: "Major 10th",
    17: "11th",
    18: "Augmented 11th",
    19: "Perfect 12th",
    20: "Flat 13th",
    21: "13th",
}


class ParseError(ValueError):
    """Raised when a note identifier is not of the form C4, F#3, Bb5."""


def note_letter_to_pitch_class(name: str) -> int:
    """'Eb' -> 3, 'B#' -> 0, 'e' -> 4 (case-insensitive letter)."""
    spelled = name.strip()
    if not spelled:
        raise ParseError("empty note name")
    spelled = spelled[0].upper() + spelled[1:]
    spelled = ENHARMONIC_TO_SHARP.get(spelled, spelled)
    if spelled not in SHARP_NOTES:
        raise ParseError(f"unknown note name: {name!r}")
    return SHARP_NOTES.index(spelled)


def note_name_to_pitch(name: str) -> int:
    """Note identifier -> absolute (MIDI) pitch. 'C4' -> 60, 'A-1' -> 9."""
    m = NOTE_ID_RX.match(name)
    if not m:
        raise ParseError(f"malformed note identifier: {name!r}")
    base = SHARP_NOTES.index(m.group("letter"))
    acc = {"#": 1, "b": -1}.get(m.group("acc") or "", 0)
    octave = int(m.group("octave"))
    # Cb4 is B3 and B#3 is C4: the accidental moves across the octave line
    return 12 * (octave + 1) + base + acc


def pitch_to_note_name(pitch: int, use_sharps: bool = True) -> str:
    return (SHARP_NOTES if use_sharps else FLAT_NOTES)[pitch % 12]


def pitch_to_note_id(pitch: int) -> str:
    """60 -> 'C4'. Always sharp spelling so the result parses back."""
    return f"{SHARP_NOTES[pitch % 12]}{pitch // 12 - 1}"


def interval_name(semitones: int) -> Optional[str]:
    diff = abs(semitones)
    while diff > 21:
        diff -= 12
    return INTERVAL_NAMES.get(diff)
