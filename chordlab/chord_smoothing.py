# ===============================
# File: chordlab/chord_smoothing.py
# ===============================
from collections import Counter
from dataclasses import dataclass
from typing import List


@dataclass
class ChordSeg:
    start: float  # seconds
    end: float    # seconds
    label: str

    @property
    def duration(self) -> float:
        return self.end - self.start


def median_filter(labels: List[str], k: int = 3) -> List[str]:
    """Majority vote over a centred window; the centre wins when nothing dominates."""
    if k <= 1 or k % 2 == 0:
        return labels
    r = k // 2
    out = labels[:]
    for i in range(r, len(labels) - r):
        window = labels[i - r : i + r + 1]
        label, count = Counter(window).most_common(1)[0]
        out[i] = label if count > 1 else window[r]
    return out


def merge_adjacent(segs: List[ChordSeg]) -> List[ChordSeg]:
    merged: List[ChordSeg] = []
    for s in segs:
        if merged and merged[-1].label == s.label:
            merged[-1].end = s.end
        else:
            merged.append(ChordSeg(s.start, s.end, s.label))
    return merged


def labels_to_segments(times: List[float], labels: List[str], hop_sec: float) -> List[ChordSeg]:
    """(times, labels) grid -> [start, end, label] segments; hop_sec closes the last one."""
    if len(times) != len(labels):
        raise ValueError("times and labels must have the same length")
    if not labels:
        return []
    segs: List[ChordSeg] = []
    cur_label = labels[0]
    cur_start = times[0]
    for i in range(1, len(labels)):
        if labels[i] != cur_label:
            segs.append(ChordSeg(start=cur_start, end=times[i], label=cur_label))
            cur_label = labels[i]
            cur_start = times[i]
    segs.append(ChordSeg(start=cur_start, end=times[-1] + hop_sec, label=cur_label))
    return segs


def enforce_min_duration(segs: List[ChordSeg], min_dur_sec: float) -> List[ChordSeg]:
    """Fold every segment shorter than min_dur_sec into its longer neighbour, until none is left."""
    out = [ChordSeg(s.start, s.end, s.label) for s in segs]
    changed = True
    while changed and len(out) > 1:
        changed = False
        for i, s in enumerate(out):
            if s.duration >= min_dur_sec:
                continue
            if i == 0:
                j = 1
            elif i == len(out) - 1:
                j = i - 1
            else:
                j = i - 1 if out[i - 1].duration >= out[i + 1].duration else i + 1
            target = out[j]
            lo, hi = (j, i) if j < i else (i, j)
            out[lo:hi + 1] = [ChordSeg(min(s.start, target.start), max(s.end, target.end), target.label)]
            changed = True
            break
    return merge_adjacent(out)
