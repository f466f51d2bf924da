"""The genetic component of XCS: niche reproduction within action sets."""

__author__ = 'Aaron Hosford'

__all__ = [
    'GeneticAlgorithm',
]

import logging

from .bitstrings import BitCondition, BitString
from .classifier import Classifier


logger = logging.getLogger(__name__)

SYMBOLS = '01#'


class GeneticAlgorithm:
    """Selects two parents from an action set, produces two offspring by
    crossover and mutation, and inserts them into the population. The GA
    only fires when the members of the action set have, on average, gone
    longer than ga_threshold time steps without taking part in a GA
    invocation.

    Usage:
        genetic_algorithm = GeneticAlgorithm(algorithm)
        if genetic_algorithm.should_run(action_set):
            genetic_algorithm(action_set, model.rng)

    Init Arguments:
        algorithm: The XCSAlgorithm holding the parameters (ga_threshold,
            crossover_probability, crossover_points, mutation_probability,
            mutation_method, selection_method, tournament_size,
            offspring_fitness_factor, do_ga_subsumption,
            subsumption_threshold, error_threshold).
    """

    def __init__(self, algorithm):
        self._algorithm = algorithm

    @staticmethod
    def average_time_stamp(action_set):
        """Return the numerosity-weighted average time stamp of the
        members of the action set."""
        total_time_stamps = sum(classifier.time_stamp * classifier.numerosity
                                for classifier in action_set)
        total_numerosity = action_set.numerosity
        return total_time_stamps / (total_numerosity or 1)

    def should_run(self, action_set):
        """Return whether the GA should be applied to the action set."""
        if not len(action_set):
            return False
        average_time_passed = (
            action_set.model.time_stamp -
            self.average_time_stamp(action_set)
        )
        return average_time_passed > self._algorithm.ga_threshold

    def __call__(self, action_set, rng):
        algorithm = self._algorithm
        model = action_set.model

        for classifier in action_set:
            classifier.time_stamp = model.time_stamp

        parent1 = self.select_parent(action_set, rng)
        parent2 = self.select_parent(action_set, rng)

        if rng.random() < algorithm.crossover_probability:
            condition1, condition2 = parent1.condition.crossover_with(
                parent2.condition,
                algorithm.crossover_points,
                rng
            )
        else:
            condition1, condition2 = parent1.condition, parent2.condition

        condition1 = self.mutate(condition1, action_set.situation, rng)
        condition2 = self.mutate(condition2, action_set.situation, rng)

        # Offspring inherit the averaged statistics of their parents, with
        # fitness reduced since they have not yet been tested.
        prediction = .5 * (parent1.prediction + parent2.prediction)
        error = .5 * (parent1.error + parent2.error)
        fitness = (algorithm.offspring_fitness_factor * .5 *
                   (parent1.fitness + parent2.fitness))

        logger.debug('GA at time %d: %s + %s => %s, %s',
                     model.time_stamp, parent1.condition, parent2.condition,
                     condition1, condition2)

        for condition in condition1, condition2:
            if (algorithm.do_ga_subsumption and
                    self._subsume(condition, (parent1, parent2), model)):
                continue

            child = Classifier(
                condition,
                action_set.action,
                algorithm,
                model.time_stamp
            )
            child.prediction = prediction
            child.error = error
            child.fitness = fitness

            # Identical rules are merged by the population, and each
            # insertion may trigger a deletion.
            model.add(child)

    def select_parent(self, action_set, rng):
        """Select a classifier from this action set to act as a parent,
        using the algorithm's selection method."""
        if self._algorithm.selection_method == 'tournament':
            return self._select_by_tournament(action_set, rng)
        return self._select_by_roulette(action_set, rng)

    @staticmethod
    def _select_by_roulette(action_set, rng):
        # Probability proportionate to fitness.
        total_fitness = sum(classifier.fitness for classifier in action_set)
        selector = rng.uniform(0, total_fitness)
        for classifier in action_set:
            selector -= classifier.fitness
            if selector <= 0:
                return classifier
        # Floating point error can let the selector slip past the end.
        return rng.choice(list(action_set))

    def _select_by_tournament(self, action_set, rng):
        # Each virtual copy of each classifier takes part in the tournament
        # independently with probability tournament_size; the fittest
        # participant (by fitness per copy) wins.
        winner = None
        winner_fitness = None
        participation = self._algorithm.tournament_size
        for classifier in action_set:
            entries = sum(
                1 for _ in range(classifier.numerosity)
                if rng.random() < participation
            )
            if not entries:
                continue
            micro_fitness = classifier.fitness / classifier.numerosity
            if winner is None or micro_fitness > winner_fitness:
                winner = classifier
                winner_fitness = micro_fitness
        if winner is None:
            return rng.choice(list(action_set))
        return winner

    def mutate(self, condition, situation, rng):
        """Return a new condition created from the given one by applying
        point-wise mutations, each position independently with probability
        mutation_probability."""
        probability = self._algorithm.mutation_probability
        if not probability:
            return condition

        if self._algorithm.mutation_method == 'free':
            symbols = list(str(condition))
            for index, symbol in enumerate(symbols):
                if rng.random() < probability:
                    symbols[index] = rng.choice(
                        [other for other in SYMBOLS if other != symbol]
                    )
            return BitCondition(''.join(symbols))

        # Niche mutation toggles positions between specified and wildcard.
        # Specified positions take their values from the situation, so the
        # mutated condition still matches it.
        mutation_points = BitString.random(len(condition), probability, rng)
        mask = condition.mask ^ mutation_points
        return BitCondition(situation, mask)

    def _subsume(self, condition, parents, model):
        """If an accurate, experienced parent is more general than the
        child condition, increment the parent's numerosity in place of
        inserting the child. Return whether the child was subsumed."""
        algorithm = self._algorithm
        for parent in parents:
            if not (parent.experience >= algorithm.subsumption_threshold and
                    parent.error < algorithm.error_threshold):
                continue
            if not parent.is_more_general(condition):
                continue

            existing = model.get(parent)
            if existing is not None:
                existing.numerosity += 1
                model.prune()
            else:
                # The parent may have been deleted by an earlier insertion.
                parent.numerosity = 1
                model.add(parent)
            logger.debug('Child %s subsumed by %s.', condition,
                         parent.condition)
            return True
        return False
