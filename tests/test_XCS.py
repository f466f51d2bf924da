__author__ = 'Aaron Hosford'

import logging
import random
import unittest

import lcsystem
from lcsystem import configuration
from lcsystem.configurable import Configurable
from lcsystem.environments import HaystackEnvironment, MultiplexerEnvironment
from lcsystem.errors import ConfigurationError


class TestXCS(unittest.TestCase):

    def test_algorithm_configuration(self):
        algorithm = lcsystem.XCSAlgorithm()
        algorithm.exploration_probability = .1
        algorithm.discount_factor = 0
        algorithm.do_ga_subsumption = True
        algorithm.selection_method = 'tournament'

        algorithm_copy = Configurable.build(algorithm.get_configuration())
        assert type(algorithm_copy) is type(algorithm)
        for property_name in dir(algorithm):
            if property_name.startswith('_'):
                continue
            value = getattr(algorithm, property_name)
            if callable(value):
                continue
            copy_value = getattr(algorithm_copy, property_name)
            assert value == copy_value, property_name

    def test_model_configuration(self):
        algorithm = lcsystem.XCSAlgorithm()
        algorithm.exploration_probability = .1
        algorithm.discount_factor = 0
        algorithm.do_ga_subsumption = True

        environment = MultiplexerEnvironment(address_size=3,
                                             rng=random.Random(1))
        model = algorithm.new_model(environment, random.Random(2))
        model.run(environment, 100)

        model_copy = Configurable.build(model.get_configuration())
        assert isinstance(model_copy, lcsystem.ClassifierSet)
        assert type(model_copy.algorithm) is type(model.algorithm)
        self.assertEqual(model_copy.algorithm.get_configuration(),
                         model.algorithm.get_configuration())
        self.assertEqual(model_copy.time_stamp, model.time_stamp)
        self.assertEqual(model_copy.numerosity, model.numerosity)
        records = {(record['condition'], record['action']): record
                   for record in model.to_records()}
        for record in model_copy.to_records():
            self.assertEqual(record, records[record['condition'],
                                             record['action']])

    def test_registry(self):
        self.assertIn('XCSAlgorithm', configuration.list_algorithms())
        self.assertIs(configuration.get_algorithm('xcs'),
                      lcsystem.XCSAlgorithm)

        algorithm = configuration.build_algorithm({
            '__class__': 'xcs',
            'max_population_size': 800,
        })
        self.assertIsInstance(algorithm, lcsystem.XCSAlgorithm)
        self.assertEqual(algorithm.max_population_size, 800)

        with self.assertRaises(ConfigurationError):
            configuration.build_algorithm({'__class__': 'bucket-brigade'})

    def test_unrecognized_option(self):
        with self.assertRaises(ConfigurationError):
            configuration.build_algorithm({
                '__class__': 'xcs',
                'do_action_set_subsumption': True,
            })

    def test_validation(self):
        for name, value in [('learning_rate', 0),
                            ('learning_rate', 1.5),
                            ('discount_factor', 1),
                            ('max_population_size', 0),
                            ('crossover_points', 3),
                            ('mutation_method', 'bogus'),
                            ('selection_method', 'bogus'),
                            ('wildcard_probability', -.1),
                            ('minimum_actions', 0)]:
            algorithm = lcsystem.XCSAlgorithm()
            setattr(algorithm, name, value)
            with self.assertRaises(ConfigurationError, msg=name):
                algorithm.validate()
        lcsystem.XCSAlgorithm().validate()

    def test_validation_against_environment(self):
        environment = MultiplexerEnvironment(rng=random.Random(1))

        algorithm = lcsystem.XCSAlgorithm()
        algorithm.minimum_actions = 3
        with self.assertRaises(ConfigurationError):
            algorithm.new_model(environment)

        algorithm = lcsystem.XCSAlgorithm()
        algorithm.max_population_size = 1
        with self.assertRaises(ConfigurationError):
            algorithm.new_model(environment)

        # ConfigurationError is also a ValueError.
        algorithm = lcsystem.XCSAlgorithm()
        algorithm.learning_rate = -1
        with self.assertRaises(ValueError):
            algorithm.new_model(environment)

    def test_against_MUX(self):
        algorithm = lcsystem.XCSAlgorithm()
        algorithm.max_population_size = 400
        algorithm.exploration_probability = .5
        algorithm.discount_factor = 0
        algorithm.do_ga_subsumption = True

        best = None
        expected = .95

        for seed in range(3):
            environment = MultiplexerEnvironment(address_size=2,
                                                 rng=random.Random(seed))
            logging.disable(logging.CRITICAL)
            try:
                model, training, evaluation = lcsystem.train_and_evaluate(
                    algorithm,
                    environment,
                    training_cycles=10000,
                    evaluation_cycles=1000,
                    rng=random.Random(seed + 100)
                )
            finally:
                logging.disable(logging.NOTSET)

            self.assertEqual(training.steps, 10000)
            self.assertEqual(evaluation.steps, 1000)
            self.assertLessEqual(model.numerosity, 400)
            self.assertIsNone(algorithm.exploration_strategy)

            average_reward = evaluation.average_reward
            if average_reward >= expected * environment.max_reward:
                break
            elif best is None or best < average_reward:
                best = average_reward
        else:
            self.fail("Failed to achieve expected average reward level. "
                      "(Missed by %f.)" % (expected - best))

    def test_against_haystack(self):
        environment = HaystackEnvironment(input_size=50,
                                          rng=random.Random(3))

        algorithm = lcsystem.XCSAlgorithm()
        algorithm.ga_threshold = 1
        algorithm.crossover_probability = .5
        algorithm.exploration_probability = .1
        algorithm.discount_factor = 0
        algorithm.wildcard_probability = 1 - 1 / 50
        algorithm.deletion_threshold = 1
        algorithm.mutation_probability = 1 / 50

        logging.disable(logging.CRITICAL)
        try:
            steps, total_reward, time_passed, population = lcsystem.test(
                algorithm,
                environment,
                steps=2000,
                rng=random.Random(4)
            )
        finally:
            logging.disable(logging.NOTSET)

        self.assertEqual(steps, 2000)
        average_reward = total_reward / steps
        self.assertGreater(average_reward, .4)
        self.assertLessEqual(population.numerosity,
                             algorithm.max_population_size)


def main():
    unittest.main()


if __name__ == "__main__":
    main()
