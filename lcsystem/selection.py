"""Action selection strategies. A strategy is any callable accepting a
MatchSet and a random.Random instance and returning one of the actions
suggested by the match set."""

__author__ = 'Aaron Hosford'

__all__ = [
    'ActionSelectionStrategy',
    'EpsilonGreedySelectionStrategy',
    'GreedySelectionStrategy',
]

from abc import ABCMeta, abstractmethod


class ActionSelectionStrategy(metaclass=ABCMeta):
    """Abstract base class defining the minimal interface for action
    selection strategies. The action selection strategy is responsible for
    governing the trade-off between exploration (acquiring new experience)
    and exploitation (utilizing existing experience to maximize reward).

    Usage:
        This is an abstract base class. Use a subclass, such as
        EpsilonGreedySelectionStrategy, to create an instance.

    Callable Instance:
        Arguments:
            match_set: A MatchSet instance.
            rng: The random.Random instance to draw from.
        Return:
            An action from among those suggested by match_set.
    """

    @abstractmethod
    def __call__(self, match_set, rng):
        raise NotImplementedError()

    @staticmethod
    def exploit(match_set, rng):
        """Return the action with the highest prediction, choosing
        uniformly at random among tied actions."""
        best_actions = match_set.best_actions
        if len(best_actions) == 1:
            return best_actions[0]
        return rng.choice(best_actions)

    @staticmethod
    def explore(match_set, rng):
        """Return an action chosen uniformly from the actions present in
        the match set, regardless of predicted payoff."""
        return rng.choice(list(match_set))


class GreedySelectionStrategy(ActionSelectionStrategy):
    """Always exploit. This is the strategy used for evaluation windows,
    where only the performance of the learned rules is of interest."""

    def __call__(self, match_set, rng):
        return self.exploit(match_set, rng)


class EpsilonGreedySelectionStrategy(ActionSelectionStrategy):
    """The epsilon-greedy action selection strategy. With probability
    epsilon, an action is chosen uniformly from the actions present in the
    match set regardless of predicted payoff. The rest of the time, the
    action with the highest predicted payoff is chosen. The probability of
    exploration, epsilon, does not change as time passes.

    Usage:
        strategy = EpsilonGreedySelectionStrategy(epsilon=.05)
        algorithm = XCSAlgorithm()
        algorithm.exploration_strategy = strategy

    Init Arguments:
        epsilon: The probability of exploration; default is .1.
    """

    def __init__(self, epsilon=.1):
        assert 0 <= epsilon <= 1
        self.epsilon = epsilon

    def __call__(self, match_set, rng):
        if self.epsilon and rng.random() < self.epsilon:
            return self.explore(match_set, rng)
        return self.exploit(match_set, rng)
