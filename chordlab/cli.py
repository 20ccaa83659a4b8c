# ===============================
# File: chordlab/cli.py
# ===============================
from __future__ import annotations
import argparse
import sys
from pathlib import Path

from chordcore import CHORD_DATABASE, ParseError, describe_chord, pitch_to_note_name
from .config import MIN_CHORD_MS
from .io_paths import output_stem_for


def cmd_detect(args):
    try:
        reading = describe_chord(args.notes, use_flats=args.flats, strict=not args.lenient)
    except ParseError as e:
        print(f"[detect] {e}", file=sys.stderr)
        return 2
    if reading is None:
        print("[detect] no notes")
        return 1
    print(reading.label)
    if args.verbose:
        sharps = not args.flats
        print("  pitches:", " ".join(str(p) for p in reading.pitches))
        print("  bass:   ", pitch_to_note_name(reading.bass_pc, sharps))
        if reading.stacked:
            print("  stacked:", " ".join(pitch_to_note_name(pc, sharps) for pc in reading.stacked))
        if reading.template is not None:
            t = reading.template
            print(f"  template: {t.name or '(major)'} pattern={','.join(map(str, t.pattern))}"
                  f" root_index={t.root_index}{' symmetric' if t.symmetric else ''}")
    return 0


def cmd_analyze(args):
    from .analysis import analyze_midi, write_segments_json

    midi = Path(args.midi)
    segs = analyze_midi(midi, use_flats=args.flats,
                        min_chord_ms=args.min_chord_ms, debug=args.debug)
    labels = [s.label for s in segs]
    outstem = output_stem_for(midi)
    out_txt = outstem.with_suffix(".chords.txt")
    out_txt.write_text(" ".join(labels), encoding="utf-8")
    print("Chords:", labels)
    print("Saved:", out_txt)
    if args.json:
        print("JSON:", write_segments_json(segs, outstem.with_suffix(".chords.json")))
    return 0


def templates_frame():
    import pandas as pd
    rows = [
        {
            "name": t.name,
            "notes": ",".join(t.notes),
            "pattern": ",".join(str(x) for x in t.pattern),
            "root_index": t.root_index,
            "symmetric": t.symmetric,
        }
        for t in CHORD_DATABASE
    ]
    return pd.DataFrame(rows, columns=["name", "notes", "pattern", "root_index", "symmetric"])


def cmd_templates(args):
    df = templates_frame()
    if args.csv:
        out = Path(args.csv)
        out.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(out, index=False)
        print("Saved:", out)
    else:
        print(df.to_string(index=False))
    return 0


def cmd_ports(args):
    from .live_midi import list_input_ports
    for name in list_input_ports():
        print(name)
    return 0


def cmd_live(args):
    from .live_midi import run_live
    try:
        run_live(port_name=args.port, use_flats=args.flats)
    except RuntimeError as e:
        print(f"[live] {e}", file=sys.stderr)
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser("chordlab")
    sub = p.add_subparsers(dest="cmd", required=True)

    # Detect -------------------------------------------------------------
    p0 = sub.add_parser("detect", help="Name the chord formed by some notes")
    p0.add_argument("notes", nargs="*", help="Note identifiers, ex: C4 E4 G4")
    p0.add_argument("--flats", action="store_true", help="Spell with flats (Eb, Bb…)")
    p0.add_argument("--lenient", action="store_true", help="Skip malformed notes instead of failing")
    p0.add_argument("--verbose", action="store_true")
    p0.set_defaults(func=cmd_detect)

    # Analyze ------------------------------------------------------------
    p1 = sub.add_parser("analyze", help="MIDI file -> chord segments")
    p1.add_argument("midi")
    p1.add_argument("--flats", action="store_true")
    p1.add_argument("--min-chord-ms", type=int, default=MIN_CHORD_MS,
                    help="Minimum chord segment duration (shorter ones are merged)")
    p1.add_argument("--json", action="store_true", help="Export a JSON {start,end,label}")
    p1.add_argument("--debug", action="store_true")
    p1.set_defaults(func=cmd_analyze)

    # Templates ----------------------------------------------------------
    p2 = sub.add_parser("templates", help="List the chord template database")
    p2.add_argument("--csv", help="Write the table to this CSV file")
    p2.set_defaults(func=cmd_templates)

    # Live ---------------------------------------------------------------
    p3 = sub.add_parser("live", help="Show chords played on a MIDI input")
    p3.add_argument("--port", help="MIDI input port name (default: first one)")
    p3.add_argument("--flats", action="store_true")
    p3.set_defaults(func=cmd_live)

    p4 = sub.add_parser("ports", help="List MIDI input ports")
    p4.set_defaults(func=cmd_ports)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
