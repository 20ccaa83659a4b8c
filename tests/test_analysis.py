import json
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

import music21 as m21

from chordlab.analysis import analyze_notes, analyze_midi, segments_to_payload, write_segments_json
from chordlab.chord_events import ChordEvent, build_chord_events, label_events
from chordlab.chord_smoothing import (
    ChordSeg, enforce_min_duration, labels_to_segments, median_filter, merge_adjacent,
)
from chordlab.midi_utils import NoteEvent, preprocess_notes, read_midi_to_notes


def c_then_g():
    # C major for one second, then G major for one second
    return [NoteEvent(0.0, 1.0, p, 80) for p in (60, 64, 67)] + \
           [NoteEvent(1.0, 2.0, p, 80) for p in (67, 71, 74)]


class TestChordEvents(unittest.TestCase):
    def test_windows_collect_sounding_pitches(self):
        events = build_chord_events(c_then_g(), window_ms=300, hop_ratio=0.5)
        self.assertEqual(len(events), 14)
        self.assertEqual(events[0].pitches, [60, 64, 67])
        self.assertEqual(events[-1].pitches, [67, 71, 74])
        self.assertEqual(events[0].note_ids, ["C4", "E4", "G4"])
        self.assertEqual(events[-1].bass_pc, 7)

    def test_labels(self):
        events = label_events(build_chord_events(c_then_g()))
        self.assertEqual(events[0].label, "C")
        self.assertEqual(events[-1].label, "G")

    def test_empty_and_invalid(self):
        self.assertEqual(build_chord_events([]), [])
        with self.assertRaises(ValueError):
            build_chord_events(c_then_g(), window_ms=0)
        with self.assertRaises(ValueError):
            build_chord_events(c_then_g(), hop_ratio=1.5)

    def test_empty_event(self):
        ev = ChordEvent(time=0.0)
        self.assertIsNone(ev.bass_pc)
        self.assertEqual(ev.note_ids, [])


class TestSmoothing(unittest.TestCase):
    def test_median_filter(self):
        self.assertEqual(median_filter(["C", "G", "C", "C"], k=3), ["C", "C", "C", "C"])
        self.assertEqual(median_filter(["C", "G", "Am"], k=3), ["C", "G", "Am"])
        self.assertEqual(median_filter(["C", "G"], k=2), ["C", "G"])

    def test_labels_to_segments(self):
        segs = labels_to_segments([0.0, 0.5, 1.0], ["C", "C", "G"], 0.5)
        self.assertEqual(segs, [ChordSeg(0.0, 1.0, "C"), ChordSeg(1.0, 1.5, "G")])
        self.assertEqual(labels_to_segments([], [], 0.5), [])
        with self.assertRaises(ValueError):
            labels_to_segments([0.0], [], 0.5)

    def test_short_segment_joins_its_longer_neighbour(self):
        segs = [ChordSeg(0.0, 1.0, "C"), ChordSeg(1.0, 1.2, "Dm"), ChordSeg(1.2, 1.6, "G")]
        self.assertEqual(enforce_min_duration(segs, 0.3),
                         [ChordSeg(0.0, 1.2, "C"), ChordSeg(1.2, 1.6, "G")])

    def test_merge_adjacent(self):
        segs = [ChordSeg(0.0, 1.0, "C"), ChordSeg(1.0, 2.0, "C")]
        self.assertEqual(merge_adjacent(segs), [ChordSeg(0.0, 2.0, "C")])


class TestPreprocess(unittest.TestCase):
    def test_filter_fuse_quantize(self):
        notes = [
            NoteEvent(0.0, 0.5, 60, 80),
            NoteEvent(0.01, 0.8, 60, 80),   # same pitch, close onset, longer
            NoteEvent(0.0, 0.03, 64, 80),   # too short
        ]
        out = preprocess_notes(notes, t_min_ms=60, delta_merge_ms=25, grid="1/16")
        self.assertEqual(len(out), 1)
        self.assertEqual(out[0].pitch, 60)
        self.assertAlmostEqual(out[0].onset, 0.0)
        self.assertAlmostEqual(out[0].offset, 0.75)

    def test_bad_grid(self):
        with self.assertRaises(ValueError):
            preprocess_notes([], grid="16")


class TestAnalyze(unittest.TestCase):
    def test_segments(self):
        segs = analyze_notes(c_then_g(), min_chord_ms=500)
        self.assertEqual([s.label for s in segs], ["C", "G"])
        self.assertAlmostEqual(segs[0].start, 0.0)
        self.assertAlmostEqual(segs[-1].end, 2.1)

    def test_overlap_window_is_kept_without_minimum_duration(self):
        segs = analyze_notes(c_then_g(), min_chord_ms=0)
        self.assertEqual([s.label for s in segs], ["C", "CMaj9", "G"])

    def test_flats(self):
        notes = [NoteEvent(0.0, 1.0, p, 80) for p in (61, 65, 68)]
        self.assertEqual([s.label for s in analyze_notes(notes, use_flats=True)], ["Db"])

    def test_no_notes(self):
        self.assertEqual(analyze_notes([]), [])

    def test_analyze_midi_reads_then_analyzes(self):
        with patch("chordlab.analysis.read_midi_to_notes", return_value=c_then_g()):
            segs = analyze_midi(Path("song.mid"), min_chord_ms=500)
        self.assertEqual([s.label for s in segs], ["C", "G"])


class TestMidiFile(unittest.TestCase):
    """A real file written by music21 and read back through the pipeline."""

    def setUp(self):
        self.tmp = Path(tempfile.mkdtemp())
        s = m21.stream.Stream()
        s.append(m21.tempo.MetronomeMark(number=120))
        s.append(m21.chord.Chord(["C4", "E4", "G4"], quarterLength=4))
        s.append(m21.chord.Chord(["G3", "B3", "D4"], quarterLength=4))
        self.path = self.tmp / "c_then_g.mid"
        s.write("midi", fp=str(self.path))

    def tearDown(self):
        shutil.rmtree(self.tmp)

    def test_chords_are_split_into_pitches(self):
        notes = read_midi_to_notes(self.path)
        by_onset = {}
        for n in notes:
            by_onset.setdefault(round(n.onset, 3), set()).add(n.pitch)
        self.assertEqual(sorted(by_onset), [0.0, 2.0])
        self.assertEqual(by_onset[0.0], {60, 64, 67})
        self.assertEqual(by_onset[2.0], {55, 59, 62})

    def test_analyze_midi(self):
        segs = analyze_midi(self.path, min_chord_ms=500)
        self.assertEqual([s.label for s in segs], ["C", "G"])


class TestJsonExport(unittest.TestCase):
    def setUp(self):
        self.tmp = Path(tempfile.mkdtemp())

    def tearDown(self):
        shutil.rmtree(self.tmp)

    def test_write(self):
        segs = [ChordSeg(0.0, 1.23456, "C")]
        out = write_segments_json(segs, self.tmp / "sub" / "x.chords.json")
        self.assertEqual(json.loads(out.read_text(encoding="utf-8")),
                         [{"start": 0.0, "end": 1.235, "label": "C"}])
        self.assertEqual(segments_to_payload([]), [])


if __name__ == "__main__":
    unittest.main()
