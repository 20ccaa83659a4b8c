# ===============================
# File: chordlab/session.py
# ===============================
from __future__ import annotations
from typing import Callable, Dict, List, Optional, Set

from chordcore import detect_chord, note_name_to_pitch, pitch_to_note_id
from .config import (
    KEY_CODE_TO_NOTE, OCTAVE_DOWN_KEY, OCTAVE_UP_KEY, SUSTAIN_KEY,
    DEFAULT_OCTAVE, OCTAVE_RANGE, SUSTAIN_CC, SUSTAIN_THRESHOLD, PITCH_RANGE,
)


class KeyboardSession:
    """
    Active-note bookkeeping for one player, feeding the chord detector.

    Notes are tracked as identifiers ("C4") after transposition; a note
    transposed outside PITCH_RANGE is not played at all. With the
    sustain pedal down, released notes keep sounding until the pedal lifts;
    notes already held when the pedal goes down are latched too.
    The chord is recomputed only when the sounding set (or the spelling
    preference) actually changes.
    """

    def __init__(self, use_flats: bool = False, octave: int = DEFAULT_OCTAVE,
                 transpose: int = 0,
                 on_change: Optional[Callable[[Optional[str]], None]] = None):
        if not (OCTAVE_RANGE[0] <= octave <= OCTAVE_RANGE[1]):
            raise ValueError(f"octave must be in {OCTAVE_RANGE}")
        self.octave = octave
        self.transpose = transpose
        self.on_change = on_change
        self._use_flats = use_flats
        self._active: Set[str] = set()
        self._held: Set[str] = set()
        self._sustained: Set[str] = set()
        self._sustain_down = False
        self._key_notes: Dict[str, str] = {}
        self._midi_notes: Dict[int, str] = {}
        self._last_key = None
        self._chord: Optional[str] = None

    # ---- state ----------------------------------------------------------
    @property
    def active_notes(self) -> List[str]:
        return sorted(self._active, key=note_name_to_pitch)

    @property
    def sustain_down(self) -> bool:
        return self._sustain_down

    @property
    def use_flats(self) -> bool:
        return self._use_flats

    @use_flats.setter
    def use_flats(self, value: bool):
        self._use_flats = bool(value)
        self._refresh()

    @property
    def chord(self) -> Optional[str]:
        return self._chord

    def _refresh(self):
        key = (frozenset(self._active), self._use_flats)
        if key == self._last_key:
            return
        self._last_key = key
        label = detect_chord(self._active, use_flats=self._use_flats, strict=False)
        if label != self._chord:
            self._chord = label
            if self.on_change is not None:
                self.on_change(label)

    # ---- notes ----------------------------------------------------------
    def effective(self, note: str) -> Optional[str]:
        """Transposed identifier of `note`, or None when it falls outside PITCH_RANGE.

        Raises ParseError for a malformed identifier, before any state changes.
        """
        pitch = note_name_to_pitch(note) + self.transpose
        if not (PITCH_RANGE[0] <= pitch <= PITCH_RANGE[1]):
            return None
        return pitch_to_note_id(pitch)

    def _press(self, eff: str):
        self._active.add(eff)
        self._held.add(eff)
        self._refresh()

    def _release(self, eff: str):
        self._held.discard(eff)
        if self._sustain_down:
            self._sustained.add(eff)
            return
        if eff in self._sustained:
            return
        self._active.discard(eff)
        self._refresh()

    def note_on(self, note: str) -> Optional[str]:
        eff = self.effective(note)
        if eff is not None:
            self._press(eff)
        return eff

    def note_off(self, note: str):
        eff = self.effective(note)
        if eff is not None:
            self._release(eff)

    def sustain(self, down: bool):
        if down:
            self._sustain_down = True
            self._sustained |= self._held
            return
        self._sustain_down = False
        for eff in self._sustained - self._held:
            self._active.discard(eff)
        self._sustained.clear()
        self._refresh()

    def release_all(self):
        self._active.clear()
        self._held.clear()
        self._sustained.clear()
        self._key_notes.clear()
        self._midi_notes.clear()
        self._refresh()

    # ---- computer keyboard ---------------------------------------------
    def key_down(self, code: str):
        if code == SUSTAIN_KEY:
            self.sustain(True)
        elif code == OCTAVE_DOWN_KEY:
            self.octave = max(OCTAVE_RANGE[0], self.octave - 1)
        elif code == OCTAVE_UP_KEY:
            self.octave = min(OCTAVE_RANGE[1], self.octave + 1)
        elif code in KEY_CODE_TO_NOTE:
            if code in self._key_notes:  # auto-repeat
                return
            name, offset = KEY_CODE_TO_NOTE[code]
            target = self.octave + offset
            if OCTAVE_RANGE[0] <= target <= OCTAVE_RANGE[1]:
                eff = self.note_on(f"{name}{target}")
                if eff is not None:
                    self._key_notes[code] = eff

    def key_up(self, code: str):
        if code == SUSTAIN_KEY:
            self.sustain(False)
            return
        # the note this key started, whatever the octave is now
        eff = self._key_notes.pop(code, None)
        if eff is not None:
            self._release(eff)

    # ---- MIDI -------------------------------------------------------------
    def handle_midi(self, msg) -> bool:
        """Apply a mido-style message. Returns False when the message is ignored."""
        kind = getattr(msg, "type", None)
        if kind == "note_on" and msg.velocity > 0:
            eff = self.note_on(pitch_to_note_id(msg.note))
            if eff is not None:
                self._midi_notes[msg.note] = eff
            return True
        if kind in ("note_on", "note_off"):
            eff = self._midi_notes.pop(msg.note, None)
            if eff is None:
                eff = self.effective(pitch_to_note_id(msg.note))
            if eff is not None:
                self._release(eff)
            return True
        if kind == "control_change" and msg.control == SUSTAIN_CC:
            self.sustain(msg.value >= SUSTAIN_THRESHOLD)
            return True
        return False
