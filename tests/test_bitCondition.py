__author__ = 'Aaron Hosford'

import random
import unittest

from lcsystem.bitstrings import BitString, BitCondition


class TestBitCondition(unittest.TestCase):

    def setUp(self):
        self.bitstring1 = BitString('101101')
        self.bitstring2 = BitString('100101')
        self.bitstring3 = BitString('100011')
        self.bitstring4 = BitString('010010')

    def test_init(self):
        condition1 = BitCondition('1###01')
        condition2 = BitCondition(self.bitstring2, self.bitstring3)
        condition3 = BitCondition(self.bitstring2, self.bitstring2)
        condition4 = BitCondition(self.bitstring1, self.bitstring3)
        condition5 = BitCondition(self.bitstring4, self.bitstring3)
        self.assertTrue(condition1 == condition2)
        self.assertTrue(condition1 != condition3)
        self.assertTrue(condition1 == condition4)
        self.assertTrue(condition1 != condition5)

    def test_fully_specified(self):
        condition = BitCondition(self.bitstring1)
        self.assertEqual(str(condition), str(self.bitstring1))
        self.assertEqual(condition.count(), len(self.bitstring1))

    def test_invalid_characters(self):
        with self.assertRaises(ValueError):
            BitCondition('01#2')

    def test_str(self):
        self.assertEqual(str(BitCondition('01##10')), '01##10')

    def test_iter(self):
        self.assertEqual(list(BitCondition('1#0')), [True, None, False])
        self.assertIsNone(BitCondition('1#0')[1])

    def test_hash(self):
        self.assertEqual(hash(BitCondition('1#0')),
                         hash(BitCondition(BitString('100'),
                                           BitString('101'))))

    def test_matched(self):
        condition = BitCondition('###101')
        self.assertTrue(condition(self.bitstring1))

    def test_unmatched(self):
        condition = BitCondition('001###')
        self.assertFalse(condition(self.bitstring1))

    def test_all_wildcards(self):
        condition = BitCondition('######')
        for value in range(64):
            self.assertTrue(condition(BitString(value, 6)))

    def test_match_condition(self):
        general = BitCondition('1#####')
        specific = BitCondition('1#1###')
        self.assertTrue(general(specific))
        self.assertFalse(specific(general))

    def test_cover(self):
        covered = BitCondition.cover(self.bitstring1, .5)
        self.assertTrue(covered(covered))
        self.assertTrue(covered(self.bitstring1))

        covered = BitCondition.cover(self.bitstring1, 0)
        self.assertTrue(covered.mask.count() == len(self.bitstring1))

        covered = BitCondition.cover(self.bitstring1, 1)
        self.assertTrue(covered.mask.count() == 0)

    def test_cover_is_reproducible(self):
        first = BitCondition.cover(self.bitstring1, .33, random.Random(5))
        second = BitCondition.cover(self.bitstring1, .33, random.Random(5))
        self.assertEqual(first, second)

    def test_bits(self):
        condition = BitCondition(self.bitstring1, self.bitstring2)
        self.assertTrue(condition(self.bitstring1))
        self.assertTrue(condition.bits & self.bitstring1 == condition.bits)

    def test_mask(self):
        condition = BitCondition(self.bitstring3, self.bitstring1)
        self.assertTrue(condition.mask == self.bitstring1)
        self.assertFalse(any(condition.bits & ~condition.mask))

    def test_count(self):
        condition = BitCondition(self.bitstring4, self.bitstring1)
        self.assertTrue(condition.count() == condition.mask.count())

    def test_crossover_with(self):
        parent1 = BitCondition(self.bitstring1, self.bitstring3)
        inbred1, inbred2 = parent1.crossover_with(parent1)
        self.assertTrue(inbred1 == inbred2 == parent1)

        parent2 = BitCondition(self.bitstring4, self.bitstring3)
        child1, child2 = parent1.crossover_with(parent2)
        self.assertTrue(
            child1.mask == child2.mask == parent1.mask == parent2.mask
        )
        self.assertFalse(child1.bits != ~child2.bits & child1.mask)

    def test_crossover_exchanges_wildcards(self):
        parent1 = BitCondition('111111')
        parent2 = BitCondition('######')
        rng = random.Random(11)
        for points in 1, 2:
            child1, child2 = parent1.crossover_with(parent2, points, rng)
            # Every position is specified in exactly one of the children.
            self.assertEqual(child1.mask ^ child2.mask, BitString('111111'))
            self.assertEqual(child1.count() + child2.count(), 6)


def main():
    unittest.main()

if __name__ == "__main__":
    main()
