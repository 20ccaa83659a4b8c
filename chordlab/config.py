# ===============================
# File: chordlab/config.py
# ===============================
from pathlib import Path

# Default folders
PROJECT_ROOT = Path(__file__).resolve().parents[1]
OUTPUTS_DIR  = PROJECT_ROOT / "outputs"

# Computer keyboard (physical QWERTY positions) -> (note, octave offset)
KEY_CODE_TO_NOTE = {
    # white keys, home row
    "KeyA": ("C", 0), "KeyS": ("D", 0), "KeyD": ("E", 0), "KeyF": ("F", 0),
    "KeyG": ("G", 0), "KeyH": ("A", 0), "KeyJ": ("B", 0), "KeyK": ("C", 1),
    "KeyL": ("D", 1), "Semicolon": ("E", 1),
    # black keys, top row
    "KeyW": ("C#", 0), "KeyE": ("D#", 0), "KeyT": ("F#", 0), "KeyY": ("G#", 0),
    "KeyU": ("A#", 0), "KeyO": ("C#", 1), "KeyP": ("D#", 1),
}
OCTAVE_DOWN_KEY = "KeyZ"
OCTAVE_UP_KEY   = "KeyX"
SUSTAIN_KEY     = "Space"

DEFAULT_OCTAVE = 4
OCTAVE_RANGE   = (1, 8)     # inclusive

# MIDI
SUSTAIN_CC        = 64      # damper pedal controller
SUSTAIN_THRESHOLD = 64      # value >= threshold means pedal down
PITCH_RANGE       = (0, 127)  # inclusive; transposed notes outside it are dropped

# MIDI file preprocessing
MIN_NOTE_MS    = 60         # ignore notes shorter than this
DELTA_MERGE_MS = 25         # merge same-pitch onsets closer than this
QUANT_GRID     = "1/16"     # 1/16 or 1/8
DEFAULT_TEMPO  = 100        # when the file carries no tempo

# Harmonic windowing
WINDOW_MS = 300
HOP_RATIO = 0.5             # hop = WINDOW * HOP_RATIO

# Smoothing
MEDIAN_K     = 3            # median filter size (odd)
MIN_CHORD_MS = 500          # shorter segments are merged into a neighbour
