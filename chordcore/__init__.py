from .pitch import ParseError, interval_name, note_name_to_pitch, pitch_to_note_id, pitch_to_note_name
from .stacking import interval_pattern, stacked_chord
from .templates import CHORD_DATABASE, ChordTemplate, find_template
from .matcher import ChordReading, describe_chord, detect_chord

__all__ = [
    "ParseError", "interval_name", "note_name_to_pitch", "pitch_to_note_id",
    "pitch_to_note_name", "interval_pattern", "stacked_chord", "CHORD_DATABASE",
    "ChordTemplate", "find_template", "ChordReading", "describe_chord", "detect_chord",
]
