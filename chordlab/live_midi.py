# ===============================
# File: chordlab/live_midi.py
# ===============================
from __future__ import annotations
from typing import List, Optional

from .session import KeyboardSession

# Live MIDI input via mido (+ python-rtmidi backend)
# pip install "mido[ports-rtmidi]"


def list_input_ports() -> List[str]:
    import mido
    return list(mido.get_input_names())


def _pick_port(port_name: Optional[str], available: List[str]) -> str:
    if not available:
        raise RuntimeError("no MIDI input port found")
    if port_name is None:
        return available[0]
    if port_name not in available:
        raise RuntimeError(f"MIDI input port {port_name!r} not found (available: {available})")
    return port_name


def _open_input(name: str):
    import mido
    try:
        return mido.open_input(name)
    except OSError as e:  # port I/O failures from the backend
        raise RuntimeError(f"could not open MIDI input port {name!r}: {e}") from e


def run_live(port_name: Optional[str] = None, use_flats: bool = False,
             session: Optional[KeyboardSession] = None) -> KeyboardSession:
    """Read a MIDI input port until Ctrl+C, printing the chord each time it changes."""

    def show(label):
        print(f"[live] {label if label is not None else '-'}")

    if session is None:
        session = KeyboardSession(use_flats=use_flats)
    session.on_change = show

    name = _pick_port(port_name, list_input_ports())
    port = _open_input(name)
    print(f"[live] listening on {name!r}, Ctrl+C to stop")
    try:
        with port:
            for msg in port:
                session.handle_midi(msg)
    except KeyboardInterrupt:
        print("[live] stopped.")
    return session
