__author__ = 'Aaron Hosford'

import random
import unittest

import numpy

from lcsystem.bitstrings import BitString


class TestBitString(unittest.TestCase):

    def setUp(self):
        self.bitstring = BitString('10010101')  # 149

    def test_from_int(self):
        bitstring = BitString(149, 8)
        self.assertTrue(self.bitstring == bitstring)

    def test_from_string(self):
        self.assertTrue(BitString(str(self.bitstring)) == self.bitstring)

    def test_from_array(self):
        array = numpy.array([1, 0, 0, 1, 0, 1, 0, 1])
        self.assertEqual(self.bitstring, BitString(array))
        self.assertFalse(BitString(array).array.flags.writeable)

    def test_invalid_characters(self):
        with self.assertRaises(ValueError):
            BitString('10#1')
        with self.assertRaises(ValueError):
            BitString('10x1')

    def test_invalid_bits(self):
        with self.assertRaises(ValueError):
            BitString([0, 2, 1])
        with self.assertRaises(ValueError):
            BitString(numpy.array([1, 0, 3]))
        with self.assertRaises(ValueError):
            BitString(['1', '0'])
        self.assertEqual(BitString([True, 0, 1]), BitString('101'))

    def test_incorrect_length(self):
        with self.assertRaises(ValueError):
            BitString([1, 0, 1], 4)
        with self.assertRaises(ValueError):
            BitString(149, 4)

    def test_to_int(self):
        self.assertEqual(int(self.bitstring), 149)

    def test_hash(self):
        copy = BitString(list(self.bitstring))
        self.assertEqual(hash(copy), hash(self.bitstring))
        self.assertEqual(len({copy, self.bitstring}), 1)

    def test_random(self):
        previous = BitString.random(len(self.bitstring), .5)
        self.assertEqual(len(previous), len(self.bitstring))
        for i in range(10):
            current = BitString.random(
                len(self.bitstring),
                1 / (i + 2)
            )
            self.assertEqual(len(current), len(self.bitstring))
            if previous != current:
                break
            previous = current
        else:
            self.fail("Failed to produce distinct random bitstrings.")

    def test_random_is_reproducible(self):
        first = BitString.random(20, rng=random.Random(7))
        second = BitString.random(20, rng=random.Random(7))
        self.assertEqual(first, second)

        self.assertEqual(BitString.random(20, 0).count(), 0)
        self.assertEqual(BitString.random(20, 1).count(), 20)

    def test_crossover_template(self):
        previous = BitString.crossover_template(
            len(self.bitstring),
            2
        )
        self.assertEqual(len(previous), len(self.bitstring))
        for i in range(10):
            current = BitString.crossover_template(
                len(self.bitstring),
                i + 1
            )
            self.assertEqual(len(current), len(self.bitstring))
            if previous != current:
                break
            previous = current
        else:
            self.fail("Failed to produce distinct crossover templates.")

    def test_crossover_template_segments(self):
        rng = random.Random(3)
        for _ in range(20):
            template = BitString.crossover_template(12, 1, rng)
            # A single point splits the template into at most two runs.
            text = str(template)
            changes = sum(1 for a, b in zip(text, text[1:]) if a != b)
            self.assertLessEqual(changes, 1)

    def test_any(self):
        self.assertTrue(self.bitstring.any())
        self.assertFalse(BitString(0, len(self.bitstring)).any())
        self.assertTrue(BitString(-1, len(self.bitstring)).any())

    def test_count(self):
        self.assertTrue(self.bitstring.count() == 4)
        self.assertTrue(BitString(0, len(self.bitstring)).count() == 0)
        self.assertTrue(
            BitString(-1, len(self.bitstring)).count() ==
            len(self.bitstring)
        )

    def test_and(self):
        self.assertEqual(self.bitstring, self.bitstring & self.bitstring)
        self.assertEqual(
            self.bitstring & ~self.bitstring,
            BitString([0] * len(self.bitstring))
        )

    def test_or(self):
        self.assertEqual(self.bitstring, self.bitstring | self.bitstring)
        self.assertEqual(
            self.bitstring | ~self.bitstring,
            BitString([1] * len(self.bitstring))
        )

    def test_xor(self):
        mask = BitString.random(len(self.bitstring))
        self.assertEqual(
            mask ^ mask,
            BitString([0] * len(self.bitstring))
        )
        self.assertEqual(self.bitstring, (self.bitstring ^ mask) ^ mask)

    def test_invert(self):
        self.assertNotEqual(self.bitstring, ~self.bitstring)
        self.assertEqual(self.bitstring, ~~self.bitstring)

    def test_slice(self):
        self.assertEqual(self.bitstring, self.bitstring[:])
        self.assertEqual(self.bitstring,
                         self.bitstring[:2] + self.bitstring[2:])
        self.assertEqual(self.bitstring,
                         self.bitstring[-len(self.bitstring):])
        self.assertEqual(
            self.bitstring,
            self.bitstring[0:3] + self.bitstring[3:len(self.bitstring)]
        )

    def test_index(self):
        self.assertEqual(
            list(self.bitstring),
            [self.bitstring[index] for index in range(len(self.bitstring))]
        )
        self.assertEqual(
            list(self.bitstring),
            [self.bitstring[index]
             for index in range(-len(self.bitstring), 0)]
        )


def main():
    unittest.main()

if __name__ == "__main__":
    main()
