# -*- coding: utf-8 -*-
# -------------------------------------------------------------------------
# lcsystem
# --------
# Accuracy-based Learning Classifier Systems for Python 3
#
# (c) Aaron Hosford 2015, all rights reserved
# Revised (3 Clause) BSD License
#
# Implements the XCS (Accuracy-based Classifier System) algorithm,
# as described in the 2001 paper, "An Algorithmic Description of XCS,"
# by Martin Butz and Stewart Wilson.
#
# -------------------------------------------------------------------------

"""
Accuracy-based Learning Classifier Systems for Python 3

This lcsystem submodule provides the bit-level data types used by the
classifier system. Sensed inputs are BitStrings, immutable and hashable
sequences of bits. Classifier conditions are BitConditions, templates
over the alphabet {0, 1, #}, where # is a wildcard matching either bit
value. Both are stored as read-only numpy boolean arrays.

Randomized operations (BitString.random, BitString.crossover_template,
BitCondition.cover, BitCondition.crossover_with) accept an optional rng
argument, which should be a random.Random instance. When it is omitted,
the module-level functions of the random module are used instead.
"""

__author__ = 'Aaron Hosford'

__all__ = [
    'BitCondition',
    'BitString',
]

import random

import numpy


def _freeze(array):
    """Mark a numpy array as read-only and return it."""
    array.flags.writeable = False
    return array


class BitString:
    """A hashable, immutable sequence of bits (Boolean values). Implemented
    on top of numpy arrays.

    Usage:
        # A few ways to create a BitString instance
        bitstring1 = BitString('0010010111')
        bitstring2 = BitString(134, 10)
        bitstring3 = BitString([0] * 10)
        bitstring4 = BitString.random(10, rng=random.Random(42))

        # They print up nicely
        assert str(bitstring1) == '0010010111'

        # Indexing is from left to right, like an ordinary string
        assert bitstring1[0] == 0
        assert bitstring1[-1] == 1

        # Slicing works
        assert bitstring1[3:-3] == BitString('0010')

        # They can be cast as ints
        assert int(bitstring2) == 134

        # BitStrings can be treated like integer masks
        intersection = bitstring1 & bitstring2
        complement = ~bitstring1

    Init Arguments:
        bits: An int, a string of 0s and 1s, a numpy array, or a sequence
            of bools which is used to determine the values of the bits.
        length: An int indicating the expected length of the BitString, or
            None. Default is None, which causes the length of bits to be
            used if it is a sequence, or bits.bit_length() if bits is an
            int.
    """

    @classmethod
    def random(cls, length, bit_prob=.5, rng=None):
        """Create a bit string of the given length, with the probability of
        each bit being set equal to bit_prob, which defaults to .5.

        Usage:
            # Create a random BitString of length 10 with mostly zeros.
            bits = BitString.random(10, bit_prob=.1)

        Arguments:
            length: An int, indicating the desired length of the result.
            bit_prob: A float in the range [0, 1]. This is the probability
                of any given bit in the result having a value of 1.
            rng: A random.Random instance, or None to use the random
                module directly.
        Return:
            A randomly generated BitString instance of the requested
            length.
        """
        assert isinstance(length, int) and length >= 0
        assert isinstance(bit_prob, (int, float)) and 0 <= bit_prob <= 1

        rng = rng or random
        bits = numpy.array(
            [rng.random() < bit_prob for _ in range(length)],
            dtype=bool
        )
        return cls(_freeze(bits))

    @classmethod
    def crossover_template(cls, length, points=2, rng=None):
        """Create a crossover template with the given number of points. The
        crossover template can be used as a mask to crossover two
        bitstrings of the same length.

        Usage:
            assert len(parent1) == len(parent2)
            template = BitString.crossover_template(len(parent1))
            inv_template = ~template
            child1 = (parent1 & template) | (parent2 & inv_template)
            child2 = (parent1 & inv_template) | (parent2 & template)
        """
        assert isinstance(length, int) and length >= 0
        assert isinstance(points, int) and points >= 0

        rng = rng or random

        # Select the crossover points, then fill in alternating ranges of
        # 0 and 1 between them.
        points = sorted(rng.sample(range(length + 1), points))
        points.append(length)

        bits = numpy.zeros(length, dtype=bool)
        previous = 0
        include_range = bool(rng.randrange(2))
        for point in points:
            if include_range:
                bits[previous:point] = True
            include_range = not include_range
            previous = point

        return cls(_freeze(bits))

    def __init__(self, bits, length=None):
        if isinstance(bits, BitString):
            # The other bit string's array is read-only, so it can be
            # shared rather than copied.
            bits, hash_value = bits._bits, bits._hash
        elif isinstance(bits, numpy.ndarray):
            if bits.dtype != bool and not numpy.isin(bits, (0, 1)).all():
                raise ValueError("Bit values must be 0 or 1.")
            if bits.dtype != bool or bits.flags.writeable:
                bits = _freeze(numpy.array(bits, dtype=bool))
            hash_value = None
        elif isinstance(bits, int):
            if length is None:
                length = bits.bit_length()
            elif length < bits.bit_length():
                raise ValueError("Integer has too many bits for the "
                                 "requested length.")
            if bits < 0:
                bits &= (1 << length) - 1
            bits = _freeze(numpy.array(
                [(bits >> index) & 1 for index in reversed(range(length))],
                dtype=bool
            ))
            hash_value = None
        elif isinstance(bits, str):
            bit_list = []
            for char in bits:
                if char == '1':
                    bit_list.append(True)
                elif char == '0':
                    bit_list.append(False)
                elif char == '#':
                    raise ValueError(
                        "BitStrings cannot contain wildcards. Did you "
                        "mean to create a BitCondition?"
                    )
                else:
                    raise ValueError("Invalid character: " + repr(char))
            bits = _freeze(numpy.array(bit_list, dtype=bool))
            hash_value = None
        else:
            bit_list = list(bits)
            for bit in bit_list:
                if isinstance(bit, str) or bit not in (0, 1):
                    raise ValueError("Invalid bit: " + repr(bit))
            bits = _freeze(numpy.array(bit_list, dtype=bool))
            hash_value = None

        if bits.ndim != 1:
            raise ValueError("Bit strings must be one-dimensional.")
        if length is not None and len(bits) != length:
            raise ValueError("Sequence has incorrect length.")

        self._bits = bits
        self._hash = hash_value

    @property
    def array(self):
        """The read-only numpy array holding the bits."""
        return self._bits

    def any(self):
        """Returns True iff at least one bit is set."""
        return bool(self._bits.any())

    def count(self):
        """Returns the number of bits set to True in the bit string."""
        return int(numpy.count_nonzero(self._bits))

    def __str__(self):
        return ''.join('1' if bit else '0' for bit in self._bits)

    def __repr__(self):
        return type(self).__name__ + '(' + repr(str(self)) + ')'

    def __int__(self):
        value = 0
        for bit in self._bits:
            value = (value << 1) | int(bit)
        return value

    def __len__(self):
        return len(self._bits)

    def __iter__(self):
        return (bool(bit) for bit in self._bits)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return BitString(_freeze(self._bits[index].copy()))
        return bool(self._bits[index])

    def __hash__(self):
        if self._hash is None:
            self._hash = hash(self._bits.tobytes()) ^ hash(len(self._bits))
        return self._hash

    def __eq__(self, other):
        if not isinstance(other, BitString):
            return NotImplemented
        return numpy.array_equal(self._bits, other._bits)

    def __ne__(self, other):
        return not self == other

    def _coerce(self, other):
        if isinstance(other, int):
            return BitString(other, len(self._bits))
        if not isinstance(other, BitString):
            return BitString(other)
        return other

    def __and__(self, other):
        other = self._coerce(other)
        return type(self)(_freeze(self._bits & other._bits))

    def __or__(self, other):
        other = self._coerce(other)
        return type(self)(_freeze(self._bits | other._bits))

    def __xor__(self, other):
        other = self._coerce(other)
        return type(self)(_freeze(self._bits ^ other._bits))

    def __invert__(self):
        return type(self)(_freeze(~self._bits))


class BitCondition:
    """A pair of bit strings, one indicating the bit values, and the other
    indicating the bit mask, which together act as a matching template for
    bit strings. Like bit strings, bit conditions are hashable and
    immutable. At each index, we can have a 1, a 0, or a # (wildcard). If
    the value is 1 or 0, the BitString must have the same value at that
    index. If the value is #, the BitString can have any value at that
    index.

    BitConditions can also match against other BitConditions in the same
    way that they are matched against BitStrings, with the sole exception
    that if the condition being used as the pattern specifies a 1 or 0 at a
    particular index, and the condition being used as the substrate
    contains a # at that point, the match fails. This means that if
    condition2 matches condition1, then condition2 is at least as general
    as condition1: it matches every bit string condition1 matches.

    Usage:
        condition1 = BitCondition('001###01#1')
        condition2 = BitCondition(BitString('0010010111'),
                                  BitString('1110001101'))
        assert condition1 == condition2

        condition3 = BitCondition.cover(BitString('0010010111'), .25)
        assert condition3(BitString('0010010111'))  # It matches

        assert str(condition1) == '001###01#1'

        # Wildcards are represented as the value None at the given index.
        assert condition1[4] is None

        # BitCondition.count() returns the number of bits that are not
        # wildcards.
        assert condition1.count() == 6

        # They support the Genetic Algorithm's crossover operator directly
        child1, child2 = condition1.crossover_with(condition3)

    Init Arguments:
        bits: If mask is provided, a sequence from which the bits of the
            condition can be determined. If mask is omitted, a string over
            {0, 1, #}, another BitCondition, or a sequence from which a
            fully specified condition can be built.
        mask: None, or a sequence from which the mask can be determined,
            having the same length as the sequence provided for bits.
    """

    @classmethod
    def cover(cls, bits, wildcard_probability, rng=None):
        """Create a new bit condition that matches the provided bit string,
        with the indicated per-index wildcard probability.

        Usage:
            condition = BitCondition.cover(bitstring, .33)
            assert condition(bitstring)

        Arguments:
            bits: A BitString which the resulting condition must match.
            wildcard_probability: A float in the range [0, 1] which
                indicates the likelihood of any given bit position
                containing a wildcard.
            rng: A random.Random instance, or None.
        Return:
            A randomly generated BitCondition which matches the given bits.
        """
        if not isinstance(bits, BitString):
            bits = BitString(bits)
        mask = BitString.random(len(bits), 1 - wildcard_probability, rng)
        return cls(bits, mask)

    def __init__(self, bits, mask=None):
        if mask is None:
            if isinstance(bits, BitCondition):
                bits, mask, hash_value = bits._bits, bits._mask, bits._hash
                self._bits = bits
                self._mask = mask
                self._hash = hash_value
                return
            if isinstance(bits, str):
                bit_list = []
                mask = []
                for char in bits:
                    if char not in '01#':
                        raise ValueError("Invalid character: " + repr(char))
                    bit_list.append(char == '1')
                    mask.append(char != '#')
                bits = BitString(bit_list)
                mask = BitString(mask)
            else:
                bits = BitString(bits)
                mask = BitString([True] * len(bits))
        else:
            bits = BitString(bits)
            mask = BitString(mask)

        if len(bits) != len(mask):
            raise ValueError("Bits and mask must have the same length.")

        self._bits = bits & mask
        self._mask = mask
        self._hash = None

    @property
    def bits(self):
        """The bit string indicating the bit values of this bit condition.
        Indices that are wildcarded will have a value of False."""
        return self._bits

    @property
    def mask(self):
        """The bit string indicating the bit mask. A value of 1 for a
        bit indicates it must match the value bit string. A value of 0
        indicates it is masked/wildcarded."""
        return self._mask

    def count(self):
        """Return the number of bits that are not wildcards."""
        return self._mask.count()

    def __str__(self):
        return ''.join(
            '#' if not specified else ('1' if bit else '0')
            for bit, specified in zip(self._bits.array, self._mask.array)
        )

    def __repr__(self):
        return type(self).__name__ + '(' + repr(str(self)) + ')'

    def __len__(self):
        return len(self._bits)

    def __iter__(self):
        """The values yielded by the iterator are True (1), False (0), or
        None (#)."""
        for bit, specified in zip(self._bits.array, self._mask.array):
            yield bool(bit) if specified else None

    def __getitem__(self, index):
        if isinstance(index, slice):
            return BitCondition(self._bits[index], self._mask[index])
        return self._bits[index] if self._mask[index] else None

    def __hash__(self):
        if self._hash is None:
            self._hash = hash((self._bits, self._mask))
        return self._hash

    def __eq__(self, other):
        if not isinstance(other, BitCondition):
            return False
        return self._bits == other._bits and self._mask == other._mask

    def __ne__(self, other):
        return not self == other

    def __call__(self, other):
        """Overloads condition(bitstring). Returns a Boolean value that
        indicates whether the other value satisfies this condition."""
        mask = self._mask.array
        if isinstance(other, BitCondition):
            mismatches = (
                (self._bits.array ^ other._bits.array) | ~other._mask.array
            ) & mask
        else:
            if not isinstance(other, BitString):
                other = BitString(other)
            mismatches = (self._bits.array ^ other.array) & mask
        return not mismatches.any()

    def crossover_with(self, other, points=2, rng=None):
        """Perform N-point crossover on this bit condition and another of
        the same length, returning the two resulting children. Both the
        value and the wildcard status of each position are exchanged.

        Usage:
            offspring1, offspring2 = condition1.crossover_with(condition2)

        Arguments:
            other: A second BitCondition of the same length as this one.
            points: An int, the number of crossover points.
            rng: A random.Random instance, or None.
        Return:
            A tuple (condition1, condition2) of BitConditions, where the
            value at each position of this BitCondition and the other is
            preserved in one or the other of the two resulting conditions.
        """
        assert isinstance(other, BitCondition)
        assert len(self) == len(other)

        template = BitString.crossover_template(len(self), points, rng)
        inv_template = ~template

        bits1 = (self._bits & template) | (other._bits & inv_template)
        mask1 = (self._mask & template) | (other._mask & inv_template)

        bits2 = (self._bits & inv_template) | (other._bits & template)
        mask2 = (self._mask & inv_template) | (other._mask & template)

        return type(self)(bits1, mask1), type(self)(bits2, mask2)
