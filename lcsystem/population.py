"""The classifier population and the deletion policy which keeps it
within its configured capacity."""

__author__ = 'Aaron Hosford'

__all__ = [
    'ClassifierSet',
    'DeletionPolicy',
]

import logging
import random

import numpy

from .bitstrings import BitString
from .classifier import Classifier
from .configurable import Configurable
from .control import ControlLoop
from .errors import EnvironmentProtocolError, MatchSetEmptyAfterCoveringError
from .matching import MatchSet


logger = logging.getLogger(__name__)

# Covering adds one classifier per round. Deletion can undo a round, so a
# few extra rounds per required action are allowed before giving up.
COVERING_ROUNDS_PER_ACTION = 10


class DeletionPolicy:
    """Removes classifiers from a population until its size (the sum of
    the numerosities) no longer exceeds max_population_size. Each deletion
    is a roulette-wheel draw over deletion votes: a classifier's vote is
    its average action set size times its numerosity, so crowded niches
    are thinned first. Experienced classifiers (experience above
    deletion_threshold) whose fitness per copy is below fitness_threshold
    times the population's mean fitness have their vote inflated in
    inverse proportion to that fitness. One copy of the drawn classifier
    is removed per draw.

    Protected classifiers, such as the members of a match set that is
    being covered, are only drawn when no other classifier remains. Even
    then, protected classifiers with spare copies, or whose action another
    protected classifier also suggests, are drawn first, so that no action
    suggested by the protected ones is lost.

    Usage:
        deletion_policy = DeletionPolicy(algorithm)
        removed = deletion_policy(model, model.rng)
        removed = deletion_policy(model, model.rng,
                                  protected=match_set.classifiers())

    Init Arguments:
        algorithm: The XCSAlgorithm holding the parameters
            (max_population_size, deletion_threshold, fitness_threshold).
    """

    def __init__(self, algorithm):
        self._algorithm = algorithm

    def deletion_vote(self, classifier, average_fitness):
        """Return the deletion vote of the classifier, given the mean
        fitness per copy of the whole population."""
        vote = classifier.action_set_size * classifier.numerosity
        micro_fitness = classifier.fitness / classifier.numerosity
        if (classifier.experience > self._algorithm.deletion_threshold and
                micro_fitness <
                self._algorithm.fitness_threshold * average_fitness):
            vote *= average_fitness / (micro_fitness or 1e-12)
        return vote

    @staticmethod
    def _candidates(classifiers, protected):
        if not protected:
            return classifiers
        candidates = [classifier for classifier in classifiers
                      if classifier not in protected]
        if candidates:
            return candidates

        # Only protected classifiers remain. Spare copies and actions with
        # more than one classifier can be given up without losing an action.
        action_counts = {}
        for classifier in classifiers:
            action_counts[classifier.action] = (
                action_counts.get(classifier.action, 0) + 1
            )
        candidates = [classifier for classifier in classifiers
                      if classifier.numerosity > 1 or
                      action_counts[classifier.action] > 1]
        return candidates or classifiers

    def __call__(self, model, rng, protected=()):
        removed = []
        capacity = self._algorithm.max_population_size
        protected = set(protected)

        total_numerosity = model.numerosity
        while total_numerosity > capacity:
            classifiers = list(model)
            average_fitness = (
                sum(classifier.fitness for classifier in classifiers) /
                total_numerosity
            )
            classifiers = self._candidates(classifiers, protected)
            votes = [
                self.deletion_vote(classifier, average_fitness)
                for classifier in classifiers
            ]

            selector = rng.uniform(0, sum(votes))
            selected = classifiers[-1]
            for classifier, vote in zip(classifiers, votes):
                selector -= vote
                if selector <= 0:
                    selected = classifier
                    break

            logger.debug('Deleting one copy of %s => %s.',
                         selected.condition, selected.action)
            if model.discard(selected):
                removed.append(selected)
            total_numerosity -= 1

        return removed


class ClassifierSet(Configurable):
    """The population: a set of classifiers which work together to
    collectively classify the inputs provided to it, representing the
    accumulated experience of the algorithm with respect to a particular
    environment. Classifiers are identified by their (condition, action)
    pair; adding a classifier which is already present increments the
    numerosity of the existing one rather than storing a duplicate.

    Usage:
        algorithm = XCSAlgorithm()
        model = ClassifierSet(algorithm, possible_actions=(0, 1),
                              rng=random.Random(1))

    Init Arguments:
        algorithm: The XCSAlgorithm instance which will manage this
            population's behavior.
        possible_actions: A sequence containing the possible actions that
            may be suggested by classifiers in this population.
        situation_length: The length of the sensed inputs, or None to take
            it from the first input or classifier seen.
        rng: The random.Random instance from which all of the algorithm's
            random choices for this population are drawn. A new, unseeded
            one is created if this is None.
    """

    def __init__(self, algorithm, possible_actions, situation_length=None,
                 rng=None):
        # The population is stored as a tiered dictionary structure of the
        # form {condition: {action: classifier}}, which allows each
        # distinct condition to be tested against a situation once.
        self._population = {}

        self._algorithm = algorithm
        self._possible_actions = tuple(dict.fromkeys(possible_actions))
        self._situation_length = situation_length
        self._rng = rng if rng is not None else random.Random()
        self._time_stamp = 0

        if not self._possible_actions:
            raise ValueError("At least one possible action is required.")

    @property
    def algorithm(self):
        """The algorithm in charge of managing this population."""
        return self._algorithm

    @property
    def possible_actions(self):
        """The possible actions, in a fixed order."""
        return self._possible_actions

    @property
    def situation_length(self):
        """The length of conditions and sensed inputs, or None if it has
        not been established yet."""
        return self._situation_length

    @property
    def rng(self):
        """The random source used for this population."""
        return self._rng

    @property
    def time_stamp(self):
        """The number of learning cycles completed since the population
        was initialized."""
        return self._time_stamp

    def update_time_stamp(self):
        """Advance the time stamp by one learning cycle."""
        self._time_stamp += 1

    @property
    def numerosity(self):
        """The (virtual) population size: the sum of the numerosities of
        the classifiers."""
        return sum(classifier.numerosity for classifier in self)

    def __iter__(self):
        for by_action in self._population.values():
            yield from by_action.values()

    def __len__(self):
        """The number of distinct classifiers (macro-classifiers)."""
        return sum(len(by_action) for by_action in self._population.values())

    def __contains__(self, classifier):
        return classifier.action in self._population.get(classifier.condition, ())

    def __getitem__(self, classifier):
        if classifier not in self:
            raise KeyError(classifier)
        return self._population[classifier.condition][classifier.action]

    def __delitem__(self, classifier):
        if classifier not in self:
            raise KeyError(classifier)
        self.discard(classifier, self[classifier].numerosity)

    def __str__(self):
        return '\n'.join(str(classifier) for classifier in sorted(self))

    def get(self, classifier, default=None):
        """Return the stored classifier with the same condition and action
        as the given one, or default if there is none."""
        by_action = self._population.get(classifier.condition)
        if by_action is None:
            return default
        return by_action.get(classifier.action, default)

    def _check_situation(self, situation):
        try:
            if not isinstance(situation, BitString):
                situation = BitString(situation)
        except (TypeError, ValueError) as exc:
            raise EnvironmentProtocolError(
                "Sensed input %r is not a bit string." % (situation,)
            ) from exc
        if self._situation_length is None:
            self._situation_length = len(situation)
        elif len(situation) != self._situation_length:
            raise EnvironmentProtocolError(
                "Sensed input has length %d; expected %d." %
                (len(situation), self._situation_length)
            )
        return situation

    def match(self, situation):
        """Accept a situation (input) and return a MatchSet containing the
        classifiers whose conditions match the situation. Covering is
        applied until the match set suggests at least the minimum number
        of distinct actions required by the algorithm.

        Usage:
            match_set = model.match(situation)

        Arguments:
            situation: The BitString for which a match set is desired.
        Return:
            A MatchSet instance for the given situation.
        """
        situation = self._check_situation(situation)

        by_action = {}
        for condition, actions in self._population.items():
            if not condition(situation):
                continue
            for action, classifier in actions.items():
                if action in by_action:
                    by_action[action][condition] = classifier
                else:
                    by_action[action] = {condition: classifier}

        match_set = MatchSet(self, situation, by_action)

        rounds = 0
        max_rounds = (COVERING_ROUNDS_PER_ACTION *
                      self._algorithm.get_minimum_actions(self))
        while self._algorithm.covering_is_required(match_set):
            rounds += 1
            if rounds > max_rounds:
                raise MatchSetEmptyAfterCoveringError(
                    "Covering did not produce enough actions for %s after "
                    "%d rounds." % (situation, max_rounds)
                )

            classifier = self._algorithm.cover(match_set)
            assert classifier.matches(situation)

            # Deletion spares the match set while it is being covered.
            # Classifiers deleted anyway must also leave the match set.
            protected = list(match_set.classifiers())
            protected.append(classifier)
            for removed in self.add(classifier, protected):
                actions = by_action.get(removed.action)
                if actions and actions.get(removed.condition) is removed:
                    del actions[removed.condition]
                    if not actions:
                        del by_action[removed.action]

            stored = self.get(classifier)
            if stored is not None:
                by_action.setdefault(stored.action, {})[stored.condition] = stored

            match_set = MatchSet(self, situation, by_action)

        if not len(match_set):
            raise MatchSetEmptyAfterCoveringError(
                "The match set for %s is empty after covering." % situation
            )
        return match_set

    def add(self, classifier, protected=()):
        """Add a classifier to the population. If an identical classifier
        (same condition and action) is already present, its numerosity is
        increased by the numerosity of the new one, and the statistics of
        the existing classifier are kept. The deletion policy is then
        applied, sparing the protected classifiers where it can. Return a
        list of the classifiers that were removed altogether to make room.

        Usage:
            removed = model.add(classifier)
        """
        assert isinstance(classifier, Classifier)

        if classifier.action not in self._possible_actions:
            raise ValueError("Action %r is not a possible action." %
                             (classifier.action,))
        if self._situation_length is None:
            self._situation_length = len(classifier.condition)
        elif len(classifier.condition) != self._situation_length:
            raise ValueError("Condition %s has length %d; expected %d." %
                             (classifier.condition, len(classifier.condition),
                              self._situation_length))

        by_action = self._population.setdefault(classifier.condition, {})
        existing = by_action.get(classifier.action)
        if existing is None:
            by_action[classifier.action] = classifier
        elif existing is not classifier:
            existing.numerosity += classifier.numerosity

        return self.prune(protected)

    def discard(self, classifier, count=1):
        """Remove count copies of a classifier from the population. Return
        a Boolean indicating whether the classifier's numerosity dropped
        to zero, removing it altogether."""
        assert isinstance(count, int) and count >= 0

        classifier = self.get(classifier)
        if classifier is None:
            return False

        classifier.numerosity -= count
        if classifier.numerosity <= 0:
            # Any remaining references see a well-defined numerosity.
            classifier.numerosity = 0

            del self._population[classifier.condition][classifier.action]
            if not self._population[classifier.condition]:
                del self._population[classifier.condition]
            return True

        return False

    def prune(self, protected=()):
        """Apply the algorithm's deletion policy. Return the classifiers
        that were removed altogether."""
        return self._algorithm.prune(self, protected)

    def statistics(self):
        """Return a dictionary summarizing the population: the number of
        distinct classifiers, the total numerosity, and the
        numerosity-weighted means of prediction, error, and fitness."""
        classifiers = list(self)
        result = dict(
            macro_size=len(classifiers),
            micro_size=sum(classifier.numerosity for classifier in classifiers),
            mean_prediction=0.0,
            mean_error=0.0,
            mean_fitness=0.0,
        )
        if classifiers:
            weights = numpy.array([classifier.numerosity
                                   for classifier in classifiers])
            for key in 'prediction', 'error', 'fitness':
                values = numpy.array([getattr(classifier, key)
                                      for classifier in classifiers])
                result['mean_' + key] = float(numpy.average(values,
                                                            weights=weights))
        return result

    def run(self, environment, max_steps, learn=True, **kwargs):
        """Run the control loop for this population against the
        environment. Keyword arguments are passed through to
        ControlLoop.run(). Return the RunStatistics of the run.

        Usage:
            statistics = model.run(environment, 10000, learn=True)
        """
        return ControlLoop(self, learn=learn).run(environment, max_steps,
                                                  **kwargs)

    def to_records(self):
        """Return the population as a list of plain dictionaries, one per
        classifier. See Classifier.to_record()."""
        return [classifier.to_record() for classifier in self]

    @classmethod
    def from_records(cls, algorithm, possible_actions, records,
                     situation_length=None, rng=None, time_stamp=0):
        """Create a population holding the classifiers described by the
        records, as produced by to_records().

        Usage:
            copy = ClassifierSet.from_records(
                model.algorithm,
                model.possible_actions,
                model.to_records()
            )
        """
        model = cls(algorithm, possible_actions, situation_length, rng)
        model._time_stamp = int(time_stamp)
        for record in records:
            model.add(Classifier.from_record(record, algorithm))
        return model

    def get_configuration(self):
        return dict(
            __module__=type(self).__module__,
            __class__=type(self).__name__,
            algorithm=self._algorithm.get_configuration(),
            possible_actions=list(self._possible_actions),
            situation_length=self._situation_length,
            time_stamp=self._time_stamp,
            classifiers=self.to_records(),
        )

    @classmethod
    def build(cls, config, rng=None):
        algorithm = Configurable.build(config['algorithm'])
        return cls.from_records(
            algorithm,
            config['possible_actions'],
            config.get('classifiers', ()),
            config.get('situation_length'),
            rng,
            config.get('time_stamp', 0)
        )
