__author__ = 'Aaron Hosford'

import random
import unittest

from lcsystem import configuration
from lcsystem.algorithm import XCSAlgorithm
from lcsystem.bitstrings import BitCondition, BitString
from lcsystem.classifier import Classifier
from lcsystem.configurable import Configurable
from lcsystem.errors import EnvironmentProtocolError
from lcsystem.population import ClassifierSet, DeletionPolicy


class TestClassifierSet(unittest.TestCase):

    def setUp(self):
        self.algorithm = XCSAlgorithm()
        self.model = ClassifierSet(self.algorithm, (0, 1),
                                   rng=random.Random(1))

    def make_classifier(self, condition, action=0):
        return Classifier(BitCondition(condition), action, self.algorithm)

    def test_add_merges_identical_rules(self):
        first = self.make_classifier('01#')
        self.model.add(first)
        self.model.add(self.make_classifier('01#'))
        self.assertEqual(len(self.model), 1)
        self.assertEqual(self.model.numerosity, 2)
        self.assertIs(self.model.get(first), first)
        self.assertEqual(first.numerosity, 2)

        self.model.add(self.make_classifier('01#', 1))
        self.assertEqual(len(self.model), 2)
        self.assertEqual(self.model.numerosity, 3)

    def test_add_rejects_unknown_action(self):
        with self.assertRaises(ValueError):
            self.model.add(self.make_classifier('01#', 'left'))

    def test_add_rejects_wrong_length(self):
        self.model.add(self.make_classifier('01#'))
        with self.assertRaises(ValueError):
            self.model.add(self.make_classifier('01#1'))

    def test_discard(self):
        classifier = self.make_classifier('1##')
        classifier.numerosity = 3
        self.model.add(classifier)
        self.assertFalse(self.model.discard(classifier))
        self.assertEqual(classifier.numerosity, 2)
        self.assertTrue(self.model.discard(classifier, 2))
        self.assertNotIn(classifier, self.model)
        self.assertEqual(len(self.model), 0)
        self.assertFalse(self.model.discard(classifier))

    def test_delitem(self):
        classifier = self.make_classifier('1##')
        classifier.numerosity = 3
        self.model.add(classifier)
        del self.model[classifier]
        self.assertNotIn(classifier, self.model)
        with self.assertRaises(KeyError):
            self.model[classifier]

    def test_population_bound(self):
        self.algorithm.max_population_size = 10
        rng = random.Random(2)
        for _ in range(50):
            condition = BitCondition.cover(BitString.random(6, rng=rng), .5,
                                           rng)
            self.model.add(Classifier(condition, rng.choice((0, 1)),
                                      self.algorithm))
            self.assertLessEqual(self.model.numerosity, 10)

    def test_sole_classifier_survives(self):
        self.algorithm.max_population_size = 1
        classifier = self.make_classifier('0#1')
        removed = self.model.add(classifier)
        self.assertEqual(removed, [])
        self.assertIn(classifier, self.model)
        self.assertEqual(self.model.numerosity, 1)
        self.assertEqual(self.model.prune(), [])

        self.model.add(self.make_classifier('1#0'))
        self.assertEqual(self.model.numerosity, 1)
        self.assertEqual(len(self.model), 1)

    def test_match_rejects_wrong_length(self):
        self.model.match(BitString('010101'))
        with self.assertRaises(EnvironmentProtocolError):
            self.model.match(BitString('0101'))
        with self.assertRaises(EnvironmentProtocolError):
            self.model.match(None)

    def test_match_rejects_non_binary_input(self):
        self.model.match([0, 1, 1, 0, 1, 0])
        with self.assertRaises(EnvironmentProtocolError):
            self.model.match([0, 2, 1, 0, 1, 0])

    def test_statistics(self):
        self.assertEqual(self.model.statistics()['micro_size'], 0)

        first = self.make_classifier('01#')
        first.prediction = 1.0
        first.numerosity = 3
        second = self.make_classifier('0##')
        second.prediction = 0.0
        self.model.add(first)
        self.model.add(second)

        statistics = self.model.statistics()
        self.assertEqual(statistics['macro_size'], 2)
        self.assertEqual(statistics['micro_size'], 4)
        self.assertAlmostEqual(statistics['mean_prediction'], .75)

    def test_records_round_trip(self):
        rng = random.Random(4)
        for _ in range(20):
            classifier = Classifier(
                BitCondition.cover(BitString.random(5, rng=rng), .3, rng),
                rng.choice((0, 1)),
                self.algorithm
            )
            classifier.prediction = rng.random()
            classifier.error = rng.random()
            classifier.fitness = rng.random()
            classifier.experience = rng.randrange(100)
            self.model.add(classifier)

        copy = ClassifierSet.from_records(self.algorithm, (0, 1),
                                          self.model.to_records())
        self.assertEqual(len(copy), len(self.model))
        self.assertEqual(copy.numerosity, self.model.numerosity)
        for classifier in self.model:
            restored = copy.get(classifier)
            self.assertIsNotNone(restored)
            for key in ('prediction', 'error', 'fitness', 'experience',
                        'numerosity'):
                self.assertEqual(getattr(classifier, key),
                                 getattr(restored, key), key)

    def test_records_reject_empty_numerosity(self):
        record = self.make_classifier('01#').to_record()
        for numerosity in (0, -1):
            record['numerosity'] = numerosity
            with self.assertRaises(ValueError):
                ClassifierSet.from_records(self.algorithm, (0, 1), [record])

    def test_configuration_round_trip(self):
        self.algorithm.max_population_size = 50
        self.model.add(self.make_classifier('1#0', 1))
        self.model.update_time_stamp()

        config = self.model.get_configuration()
        for copy in (Configurable.build(config),
                     configuration.build_model(config)):
            self.assertIsInstance(copy, ClassifierSet)
            self.assertEqual(copy.algorithm.max_population_size, 50)
            self.assertEqual(copy.possible_actions, (0, 1))
            self.assertEqual(copy.time_stamp, 1)
            self.assertEqual(copy.situation_length, 3)
            self.assertIn(self.make_classifier('1#0', 1), copy)

    def test_str(self):
        self.model.add(self.make_classifier('1#0', 1))
        self.assertIn('1#0 => 1', str(self.model))


class TestDeletionPolicy(unittest.TestCase):

    def setUp(self):
        self.algorithm = XCSAlgorithm()
        self.policy = DeletionPolicy(self.algorithm)

    def test_vote_of_inexperienced_classifier(self):
        classifier = Classifier(BitCondition('1#'), 0, self.algorithm)
        classifier.action_set_size = 4
        classifier.numerosity = 2
        self.assertEqual(self.policy.deletion_vote(classifier, 1.0), 8)

    def test_vote_of_experienced_unfit_classifier(self):
        classifier = Classifier(BitCondition('1#'), 0, self.algorithm)
        classifier.action_set_size = 4
        classifier.numerosity = 1
        classifier.experience = self.algorithm.deletion_threshold + 1
        classifier.fitness = .001
        self.assertAlmostEqual(self.policy.deletion_vote(classifier, 1.0),
                               4000)

    def test_no_deletion_below_capacity(self):
        model = ClassifierSet(self.algorithm, (0, 1), rng=random.Random(1))
        model.add(Classifier(BitCondition('1#'), 0, self.algorithm))
        self.assertEqual(self.policy(model, model.rng), [])
        self.assertEqual(model.numerosity, 1)

    def test_protected_classifiers_are_spared(self):
        for seed in range(10):
            model = ClassifierSet(self.algorithm, (0, 1),
                                  rng=random.Random(seed))
            first = Classifier(BitCondition('1#'), 0, self.algorithm)
            second = Classifier(BitCondition('1#'), 1, self.algorithm)
            third = Classifier(BitCondition('0#'), 0, self.algorithm)
            for classifier in first, second, third:
                model.add(classifier)

            self.algorithm.max_population_size = 2
            removed = self.policy(model, model.rng,
                                  protected=[first, second])
            self.algorithm.max_population_size = 400

            self.assertEqual(removed, [third])
            self.assertIn(first, model)
            self.assertIn(second, model)

    def test_protected_spare_copies_go_first(self):
        for seed in range(10):
            model = ClassifierSet(self.algorithm, (0, 1),
                                  rng=random.Random(seed))
            first = Classifier(BitCondition('1#'), 0, self.algorithm)
            first.numerosity = 2
            second = Classifier(BitCondition('1#'), 1, self.algorithm)
            model.add(first)
            model.add(second)

            self.algorithm.max_population_size = 2
            removed = self.policy(model, model.rng,
                                  protected=[first, second])
            self.algorithm.max_population_size = 400

            self.assertEqual(removed, [])
            self.assertEqual(first.numerosity, 1)
            self.assertEqual(second.numerosity, 1)


def main():
    unittest.main()

if __name__ == "__main__":
    main()
