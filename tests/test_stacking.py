import itertools
import random
import unittest

from chordcore.permutations import permutations
from chordcore.stacking import energy, interval_pattern, stacked_chord


class TestPermutations(unittest.TestCase):
    def test_all_orderings_once(self):
        perms = list(permutations([1, 2, 3, 4]))
        self.assertEqual(len(perms), 24)
        self.assertEqual(len(set(perms)), 24)
        for p in perms:
            self.assertEqual(sorted(p), [1, 2, 3, 4])

    def test_each_yield_is_an_independent_snapshot(self):
        gen = permutations("abc")
        first = next(gen)
        rest = list(gen)
        self.assertEqual(first, ("a", "b", "c"))
        self.assertNotIn(first, rest)

    def test_degenerate_sizes(self):
        self.assertEqual(list(permutations([])), [()])
        self.assertEqual(list(permutations([5])), [(5,)])


class TestIntervalPattern(unittest.TestCase):
    def test_forward_distances_wrap(self):
        self.assertEqual(interval_pattern((0, 4, 7)), (4, 3))
        self.assertEqual(interval_pattern((7, 10, 0, 3)), (3, 2, 3))
        self.assertEqual(interval_pattern((11, 0)), (1,))

    def test_short_orderings_have_an_empty_pattern(self):
        self.assertEqual(interval_pattern((3,)), ())
        self.assertEqual(interval_pattern(()), ())

    def test_repeated_pitch_class_is_rejected(self):
        with self.assertRaises(ValueError):
            interval_pattern((0, 12))

    def test_energy(self):
        self.assertEqual(energy((3, 2, 3)), 8)
        self.assertEqual(energy(()), 0)


class TestStackedChord(unittest.TestCase):
    def test_major_triad_in_any_order(self):
        self.assertEqual(stacked_chord([7, 0, 4]), (0, 4, 7))
        self.assertEqual(stacked_chord([4, 7, 0]), (0, 4, 7))

    def test_minor_seventh_starts_above_the_largest_gap(self):
        self.assertEqual(stacked_chord({0, 3, 7, 10}), (7, 10, 0, 3))

    def test_energy_tie_goes_to_smallest_pattern_string(self):
        # 5,7,0 -> "2,5" and 0,5,7 -> "5,2" both cost 7
        self.assertEqual(stacked_chord([0, 5, 7]), (5, 7, 0))
        # 11,0,4,7 -> "1,4,3" beats 4,7,11,0 -> "3,4,1"
        self.assertEqual(stacked_chord([0, 4, 7, 11]), (11, 0, 4, 7))

    def test_trivial_sets(self):
        self.assertEqual(stacked_chord([5]), (5,))
        self.assertEqual(stacked_chord([]), ())

    def test_duplicates_are_rejected(self):
        with self.assertRaises(ValueError):
            stacked_chord([0, 12])

    def test_result_is_a_minimum_energy_permutation(self):
        rng = random.Random(7)
        samples = [{0, 4, 7}, {0, 1, 2}, {0, 3, 6, 9}, {2, 5, 9, 0}]
        samples += [set(rng.sample(range(12), k)) for k in (2, 3, 4, 5, 6) for _ in range(3)]
        for pcs in samples:
            stacked = stacked_chord(pcs)
            self.assertEqual(sorted(stacked), sorted(pcs))
            best = energy(interval_pattern(stacked))
            for p in itertools.permutations(sorted(pcs)):
                self.assertLessEqual(best, energy(interval_pattern(p)))

    def test_deterministic_for_a_set(self):
        pcs = [9, 2, 5, 0, 7]
        expected = stacked_chord(pcs)
        for p in itertools.permutations(pcs):
            self.assertEqual(stacked_chord(p), expected)


if __name__ == "__main__":
    unittest.main()
