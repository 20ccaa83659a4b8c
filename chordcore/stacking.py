# ===============================
# File: chordcore/stacking.py
# ===============================
from __future__ import annotations
from functools import lru_cache
from typing import Iterable, Sequence, Tuple

from .permutations import permutations


def interval_pattern(ordering: Sequence[int]) -> Tuple[int, ...]:
    """Forward (wrap-around) semitone distance between consecutive pitch classes."""
    pattern = []
    for a, b in zip(ordering, ordering[1:]):
        step = (b - a) % 12
        if step == 0:
            raise ValueError(f"duplicate pitch class {a % 12} in {tuple(ordering)}")
        pattern.append(step)
    return tuple(pattern)


def energy(pattern: Sequence[int]) -> int:
    return sum(pattern)


def _pattern_key(pattern: Sequence[int]) -> str:
    return ",".join(str(x) for x in pattern)


@lru_cache(maxsize=4096)
def _stack_sorted(pcs: Tuple[int, ...]) -> Tuple[int, ...]:
    best = None
    best_key = None
    for p in permutations(pcs):
        pattern = interval_pattern(p)
        key = (energy(pattern), _pattern_key(pattern))
        # strict '<': on a full tie the first ordering generated wins
        if best_key is None or key < best_key:
            best, best_key = p, key
    return best


def stacked_chord(pitch_classes: Iterable[int]) -> Tuple[int, ...]:
    """
    Canonical "stacked" ordering of a set of distinct pitch classes.

    Every ordering is scored by the sum of its interval pattern (its energy);
    the lowest energy wins, ties go to the lexicographically smallest
    comma-joined pattern. The input is sorted first so the answer depends on
    the set only, never on the order the notes were discovered in.

    For shapes that map onto themselves under transposition (the tritone
    shape of 7(b5), dim7, +) several orderings tie completely and the one
    whose first pitch class is lowest wins. The chosen root then depends on
    the key: {C, E, F#, Bb} stacks from E and names C, while {D, F#, G#, C}
    stacks from C and names G#, so a root-position D7(b5) reads "G#7(b5)/D".
    """
    pcs = tuple(sorted(pc % 12 for pc in pitch_classes))
    if len(set(pcs)) != len(pcs):
        raise ValueError(f"pitch classes must be distinct: {pcs}")
    if len(pcs) <= 1:
        return pcs
    return _stack_sorted(pcs)
