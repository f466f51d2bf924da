"""The XCS algorithm: its parameters, and the wiring of the matcher, action
selector, credit assignment, genetic component, and deletion policy."""

__author__ = 'Aaron Hosford'

__all__ = [
    'LCSAlgorithm',
    'XCSAlgorithm',
]

import logging
import numbers
from abc import ABCMeta, abstractmethod

from .bitstrings import BitCondition
from .classifier import Classifier
from .configurable import Configurable
from .errors import ConfigurationError
from .genetic import GeneticAlgorithm
from .population import ClassifierSet, DeletionPolicy
from .reinforcement import CreditAssignment
from .selection import EpsilonGreedySelectionStrategy


logger = logging.getLogger(__name__)


class LCSAlgorithm(Configurable, metaclass=ABCMeta):
    """Abstract base class defining the interface between a ClassifierSet
    and the algorithm which manages it. An LCS algorithm is responsible for
    covering, distributing reward to the appropriate classifiers, evolving
    the population, and keeping it within its capacity.

    Usage:
        This is an abstract base class. Use a subclass, such as
        XCSAlgorithm, to create an instance.
    """

    def new_model(self, environment, rng=None):
        """Validate the parameters and create a new, empty population
        suited to the environment.

        Usage:
            model = algorithm.new_model(environment, rng=random.Random(1))
            statistics = model.run(environment, 10000)

        Arguments:
            environment: An Environment instance.
            rng: The random.Random instance the population should draw
                from, or None for a new, unseeded one.
        Return:
            A new, untrained ClassifierSet.
        """
        possible_actions = tuple(environment.possible_actions)
        self.validate()
        self.validate_for_actions(possible_actions)
        return ClassifierSet(self, possible_actions, rng=rng)

    def run(self, environment, max_steps, rng=None):
        """Create a new population for the environment, train it for
        max_steps cycles, and return it."""
        model = self.new_model(environment, rng)
        model.run(environment, max_steps, learn=True)
        return model

    def validate_for_actions(self, possible_actions):
        """Raise a ConfigurationError if the parameters cannot work with
        the given set of possible actions."""
        if not possible_actions:
            raise ConfigurationError("The environment offers no actions.")

    @property
    @abstractmethod
    def action_selection_strategy(self):
        """The action selection strategy used to govern the trade-off
        between exploration and exploitation."""
        raise NotImplementedError()

    @property
    @abstractmethod
    def max_population_size(self):
        """The capacity of the population."""
        raise NotImplementedError()

    @abstractmethod
    def get_minimum_actions(self, model):
        """Return the minimum number of distinct actions a match set drawn
        from the model must suggest."""
        raise NotImplementedError()

    @abstractmethod
    def get_future_expectation(self, match_set):
        """Return the discounted expected future payoff of the previously
        selected action, given only the current match set."""
        raise NotImplementedError()

    @abstractmethod
    def covering_is_required(self, match_set):
        """Return whether the match set suggests too few actions."""
        raise NotImplementedError()

    @abstractmethod
    def cover(self, match_set):
        """Return a new classifier matching the match set's situation."""
        raise NotImplementedError()

    @abstractmethod
    def distribute_payoff(self, match_set):
        """Distribute the match set's payoff among its action set."""
        raise NotImplementedError()

    @abstractmethod
    def update(self, match_set):
        """Update the population after the payoff has been distributed,
        e.g. by applying a genetic algorithm."""
        raise NotImplementedError()

    @abstractmethod
    def prune(self, model, protected=()):
        """Reduce the population size if necessary, deleting protected
        classifiers only as a last resort. Return the classifiers that were
        removed altogether."""
        raise NotImplementedError()


def _check_range(name, value, low, high, low_inclusive=True,
                 high_inclusive=True):
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ConfigurationError("%s must be a number, not %r." %
                                 (name, value))
    if ((value < low if low_inclusive else value <= low) or
            (value > high if high_inclusive else value >= high)):
        raise ConfigurationError(
            "%s must be in %s%s, %s%s; got %r." % (
                name,
                '[' if low_inclusive else '(', low,
                high, ']' if high_inclusive else ')',
                value
            )
        )


def _check_int(name, value, minimum):
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError("%s must be an int, not %r." %
                                 (name, value))
    if value < minimum:
        raise ConfigurationError("%s must be at least %d; got %d." %
                                 (name, minimum, value))


class XCSAlgorithm(LCSAlgorithm):
    """The XCS algorithm. This class defines how a population is managed
    by the XCS algorithm to optimize for expected reward and descriptive
    brevity. There are numerous parameters which can be modified to
    control the behavior of the algorithm:

        accuracy_coefficient (default: .1, range: (0, 1])
            Affects the size of the "cliff" between measured accuracies of
            inaccurate versus accurate classifiers. A smaller value results
            in a larger "cliff".

        accuracy_power (default: 5, range: (0, +inf))
            Affects the rate at which measured accuracies of inaccurate
            classifiers taper off. A larger value results in more rapid
            decline in accuracy as prediction error rises.

        adaptive_learning_rate (default: False, range: {True, False})
            If set, young classifiers are updated at rate
            max(learning_rate, 1 / experience), so that their statistics
            start out as plain averages of the payoffs seen.

        crossover_points (default: 2, range: {1, 2})
            The number of crossover points used by the crossover operator.

        crossover_probability (default: .8, range: [0, 1])
            The probability that crossover will be applied to the selected
            parents in a GA step.

        deletion_threshold (default: 20, range: [0, +inf))
            The minimum experience of a classifier before its fitness is
            considered in its probability of deletion.

        discount_factor (default: .71, range: [0, 1))
            The rate at which future expected payoff is discounted before
            being added to the current reward in multi-step environments.
            It has no effect in environments which end the task on every
            step.

        do_ga_subsumption (default: False, range: {True, False})
            Whether accurate, experienced parents absorb offspring whose
            conditions they generalize, instead of inserting them.

        error_threshold (default: .01, range: (0, +inf))
            The prediction error below which a classifier is considered
            accurate. This is typically about 1% of the range of possible
            rewards; the default assumes rewards in [0, 1].

        exploration_probability (default: .5, range: [0, 1])
            The probability of choosing a random action from the
            suggestions made by the match set rather than the best one.

        exploration_strategy (default: None)
            If this is set to an action selection strategy, it is used in
            place of epsilon-greedy selection, and exploration_probability
            is ignored.

        fitness_threshold (default: .1, range: [0, 1])
            The fraction of the mean fitness of the population below which
            an experienced classifier's deletion vote is inflated.

        ga_threshold (default: 25, range: [0, +inf))
            The GA is applied to an action set when the average time since
            its members last took part in a GA exceeds this value.

        idealization_factor (default: 1, range: [0, 1])
            How the expected future payoff is estimated in multi-step
            environments: 1 uses the best prediction of the next match set
            (Q-learning-like, canonical XCS), 0 uses the prediction of the
            action actually selected next (SARSA-like), and values in
            between mix the two.

        initial_error, initial_fitness, initial_prediction
                (default: .00001 each)
            The statistics given to classifiers created by covering.

        learning_rate (default: .15, range: (0, 1])
            The update rate, beta, for prediction, error, action set size,
            and fitness.

        max_population_size (default: 400, range: [1, +inf))
            The maximum total numerosity of the population.

        minimum_actions (default: None, range: [1, number of actions])
            The minimum number of distinct actions in a match set, below
            which covering occurs. None means the number of possible
            actions offered by the environment.

        mutation_method (default: 'niche', range: {'niche', 'free'})
            'niche' toggles positions between specified and wildcard,
            keeping the offspring matching the current input. 'free'
            replaces a symbol with one of the other two symbols.

        mutation_probability (default: .04, range: [0, 1])
            The per-position probability of mutation in offspring.

        offspring_fitness_factor (default: .1, range: [0, 1])
            The fraction of the parents' average fitness given to
            offspring.

        selection_method (default: 'roulette',
                          range: {'roulette', 'tournament'})
            How parents are selected from the action set.

        subsumption_threshold (default: 20, range: [0, +inf))
            The experience a classifier needs before it can subsume.

        tournament_size (default: .4, range: (0, 1])
            The fraction of the action set taking part in each tournament
            when selection_method is 'tournament'.

        wildcard_probability (default: .33, range: [0, 1])
            The probability of each position being a wildcard in the
            conditions created by covering.

    Usage:
        environment = MultiplexerEnvironment()
        algorithm = XCSAlgorithm()
        algorithm.exploration_probability = .1
        model = algorithm.run(environment, 10000)

    Init Arguments: None
    """

    # For a detailed explanation of each parameter, please see the 2001
    # paper, "An Algorithmic Description of XCS", by Martin Butz and
    # Stewart Wilson, and/or the documentation above.
    max_population_size = 400          # N
    learning_rate = .15                # beta
    accuracy_coefficient = .1          # alpha
    error_threshold = .01              # epsilon_0
    accuracy_power = 5                 # nu
    discount_factor = .71              # gamma
    ga_threshold = 25                  # theta_GA
    crossover_probability = .8         # chi
    crossover_points = 2
    mutation_probability = .04         # mu
    mutation_method = 'niche'
    deletion_threshold = 20            # theta_del
    fitness_threshold = .1             # delta
    subsumption_threshold = 20         # theta_sub
    wildcard_probability = .33         # P_#
    initial_prediction = .00001        # p_I
    initial_error = .00001             # epsilon_I
    initial_fitness = .00001           # F_I
    exploration_probability = .5       # p_exp
    minimum_actions = None             # theta_mna
    do_ga_subsumption = False          # doGASubsumption
    offspring_fitness_factor = .1
    selection_method = 'roulette'
    tournament_size = .4
    adaptive_learning_rate = False
    idealization_factor = 1

    # If this is None, epsilon-greedy selection with epsilon ==
    # exploration_probability is used.
    exploration_strategy = None

    def __init__(self):
        self._credit_assignment = CreditAssignment(self)
        self._genetic_algorithm = GeneticAlgorithm(self)
        self._deletion_policy = DeletionPolicy(self)

    def validate(self):
        """Raise a ConfigurationError if any parameter is out of range."""
        _check_int('max_population_size', self.max_population_size, 1)
        _check_range('learning_rate', self.learning_rate, 0, 1,
                     low_inclusive=False)
        _check_range('accuracy_coefficient', self.accuracy_coefficient, 0, 1,
                     low_inclusive=False)
        _check_range('error_threshold', self.error_threshold, 0, float('inf'),
                     low_inclusive=False)
        _check_range('accuracy_power', self.accuracy_power, 0, float('inf'),
                     low_inclusive=False)
        _check_range('discount_factor', self.discount_factor, 0, 1,
                     high_inclusive=False)
        _check_range('ga_threshold', self.ga_threshold, 0, float('inf'))
        _check_range('deletion_threshold', self.deletion_threshold, 0,
                     float('inf'))
        _check_range('subsumption_threshold', self.subsumption_threshold, 0,
                     float('inf'))
        _check_range('initial_error', self.initial_error, 0, float('inf'))
        _check_range('initial_fitness', self.initial_fitness, 0, 1)
        _check_range('initial_prediction', self.initial_prediction,
                     float('-inf'), float('inf'))
        _check_range('tournament_size', self.tournament_size, 0, 1,
                     low_inclusive=False)
        for name in ('crossover_probability', 'mutation_probability',
                     'fitness_threshold', 'wildcard_probability',
                     'exploration_probability', 'offspring_fitness_factor',
                     'idealization_factor'):
            _check_range(name, getattr(self, name), 0, 1)

        if self.crossover_points not in (1, 2):
            raise ConfigurationError("crossover_points must be 1 or 2; got %r."
                                     % (self.crossover_points,))
        if self.mutation_method not in ('niche', 'free'):
            raise ConfigurationError("Unknown mutation_method: %r" %
                                     (self.mutation_method,))
        if self.selection_method not in ('roulette', 'tournament'):
            raise ConfigurationError("Unknown selection_method: %r" %
                                     (self.selection_method,))
        if self.minimum_actions is not None:
            _check_int('minimum_actions', self.minimum_actions, 1)
        if (self.exploration_strategy is not None and
                not callable(self.exploration_strategy)):
            raise ConfigurationError("exploration_strategy must be callable.")

    def validate_for_actions(self, possible_actions):
        super().validate_for_actions(possible_actions)
        minimum_actions = self.minimum_actions or len(possible_actions)
        if minimum_actions > len(possible_actions):
            raise ConfigurationError(
                "minimum_actions (%d) exceeds the number of possible "
                "actions (%d)." % (minimum_actions, len(possible_actions))
            )
        if self.max_population_size < minimum_actions:
            raise ConfigurationError(
                "max_population_size (%d) is too small to hold %d "
                "actions." % (self.max_population_size, minimum_actions)
            )

    @property
    def action_selection_strategy(self):
        return (
            self.exploration_strategy or
            EpsilonGreedySelectionStrategy(self.exploration_probability)
        )

    def get_minimum_actions(self, model):
        if self.minimum_actions is None:
            return len(model.possible_actions)
        return self.minimum_actions

    def get_future_expectation(self, match_set):
        """Return the discount factor times the estimated payoff of the
        match set: the best value in its prediction array, mixed with the
        prediction of its selected action per idealization_factor."""
        assert match_set.algorithm is self

        expectation = match_set.best_prediction
        if self.idealization_factor < 1 and match_set.prediction is not None:
            expectation = (
                self.idealization_factor * expectation +
                (1 - self.idealization_factor) * match_set.prediction
            )
        return self.discount_factor * expectation

    def covering_is_required(self, match_set):
        return len(match_set) < self.get_minimum_actions(match_set.model)

    def cover(self, match_set):
        """Return a new classifier whose condition matches the match set's
        situation, with each position generalized to a wildcard with
        probability wildcard_probability, and whose action is chosen
        uniformly from the actions absent from the match set (or from all
        actions, if none are absent)."""
        assert match_set.model.algorithm is self
        rng = match_set.model.rng

        condition = BitCondition.cover(
            match_set.situation,
            self.wildcard_probability,
            rng
        )

        action_candidates = [
            action
            for action in match_set.model.possible_actions
            if action not in match_set
        ]
        if not action_candidates:
            action_candidates = list(match_set.model.possible_actions)
        action = rng.choice(action_candidates)

        logger.debug('Covering %s with %s => %s.', match_set.situation,
                     condition, action)

        return Classifier(
            condition,
            action,
            self,
            match_set.time_stamp
        )

    def distribute_payoff(self, match_set):
        assert match_set.algorithm is self
        assert match_set.selected_action is not None
        self._credit_assignment(match_set.action_set, match_set.payoff)

    def update(self, match_set):
        """Advance the population's time stamp, and apply the genetic
        algorithm to the selected action set if it is due."""
        assert match_set.model.algorithm is self
        assert match_set.selected_action is not None

        model = match_set.model
        model.update_time_stamp()

        action_set = match_set.action_set
        if self._genetic_algorithm.should_run(action_set):
            self._genetic_algorithm(action_set, model.rng)

    def prune(self, model, protected=()):
        assert isinstance(model, ClassifierSet)
        assert model.algorithm is self
        return self._deletion_policy(model, model.rng, protected)
