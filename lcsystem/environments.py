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

This lcsystem submodule provides the environment interface and a pair of
reference environments. A classifier system learns interactively: at each
step it senses the state of its environment as a bit string, acts upon
it, and receives a reward, and its actions may determine which inputs it
sees later on. The Environment class is the abstract base class through
which the control loop performs that exchange.

To create an environment of your own, subclass Environment and define its
abstract members. To add logging to an existing environment, wrap it in an
EnvironmentObserver. MultiplexerEnvironment provides the classic Boolean
multiplexer benchmark, and HaystackEnvironment a single relevant bit
hidden among many irrelevant ones.
"""

__author__ = 'Aaron Hosford'

__all__ = [
    'Environment',
    'EnvironmentObserver',
    'HaystackEnvironment',
    'MultiplexerEnvironment',
]

import logging
import random
from abc import ABCMeta, abstractmethod

from .bitstrings import BitString
from .errors import EnvironmentProtocolError


class Environment(metaclass=ABCMeta):
    """Abstract interface for environments accepted by the control loop.

    Each step of the loop calls sense() to obtain the current input, then
    act() with the selected action. act() returns a pair (reward,
    end_of_task); when end_of_task is true, the loop calls reset() before
    the next step, starting a new episode. Single-step problems such as
    the multiplexer end the task on every step.

    Usage:
        This is an abstract base class; it cannot be instantiated directly.
        You must create a subclass that defines the problem you expect the
        classifier system to solve, and instantiate that subclass instead.

    Init Arguments: n/a (See appropriate subclass.)
    """

    @property
    @abstractmethod
    def possible_actions(self):
        """A sequence containing the actions that can be executed within
        the environment."""
        raise NotImplementedError()

    @property
    def max_reward(self):
        """The largest reward a single action can earn, or None if it is
        not known."""
        return None

    @abstractmethod
    def reset(self):
        """Start a new episode and return its first input.

        Usage:
            situation = environment.reset()

        Arguments: None
        Return:
            A BitString, the first input of the new episode.
        """
        raise NotImplementedError()

    @abstractmethod
    def sense(self):
        """Return a situation, encoded as a bit string, which represents
        the observable state of the environment. Calling sense() twice
        without an intervening act() returns the same situation.

        Usage:
            situation = environment.sense()
            assert isinstance(situation, BitString)

        Arguments: None
        Return:
            The current situation.
        """
        raise NotImplementedError()

    @abstractmethod
    def act(self, action):
        """Execute the indicated action within the environment.

        Usage:
            reward, end_of_task = environment.act(selected_action)

        Arguments:
            action: The action to be executed within the current situation.
        Return:
            A tuple (reward, end_of_task), where reward is a float, or None
            if no reward is offered, and end_of_task is a bool indicating
            whether the current episode is over.
        """
        raise NotImplementedError()


class MultiplexerEnvironment(Environment):
    """Classic multiplexer problem. This environment is single-step; each
    action affects only the immediate reward, and every action ends the
    task. The address size indicates the number of bits used as an
    address/index into the remaining bits of each input. The agent is
    expected to return the value of the indexed bit.

    Usage:
        environment = MultiplexerEnvironment(address_size=2)  # 6 bits
        model = algorithm.run(environment, 10000)

    Init Arguments:
        address_size: An int, the number of bits devoted to addressing into
            the remaining bits of each input. The total number of bits in
            each input will be equal to address_size + 2 ** address_size.
        reward: The reward given for a correct action; default is 1.0.
        penalty: The reward given for an incorrect action; default is 0.0.
        rng: The random.Random instance used to generate inputs, or None
            for a new, unseeded one.
    """

    def __init__(self, address_size=2, reward=1.0, penalty=0.0, rng=None):
        assert isinstance(address_size, int) and address_size > 0
        assert reward > penalty

        self.address_size = address_size
        self.reward = float(reward)
        self.penalty = float(penalty)
        self.rng = rng if rng is not None else random.Random()
        self.current_situation = None

    @property
    def input_size(self):
        """The number of bits in each input."""
        return self.address_size + (1 << self.address_size)

    @property
    def possible_actions(self):
        return (0, 1)

    @property
    def max_reward(self):
        return self.reward

    def reset(self):
        self.current_situation = BitString.random(self.input_size,
                                                  rng=self.rng)
        return self.current_situation

    def sense(self):
        if self.current_situation is None:
            self.reset()
        return self.current_situation

    def correct_action(self, situation=None):
        """Return the value of the addressed bit of the situation, which
        defaults to the current one."""
        if situation is None:
            situation = self.sense()
        index = int(situation[:self.address_size])
        return int(situation[self.address_size + index])

    def act(self, action):
        if action not in self.possible_actions:
            raise EnvironmentProtocolError("Invalid action: %r" % (action,))
        if action == self.correct_action():
            return self.reward, True
        return self.penalty, True


class HaystackEnvironment(Environment):
    """An environment designed to test the ability to find a single
    important input bit (the "needle") from among a large number of
    irrelevant input bits (the "haystack"). The correct action is the
    value of the needle. Every action ends the task.

    Usage:
        environment = HaystackEnvironment(input_size=100)
        model = algorithm.run(environment, 10000)

    Init Arguments:
        input_size: An int, the number of bits in each input.
        rng: The random.Random instance used to generate inputs and to
            place the needle, or None for a new, unseeded one.
    """

    def __init__(self, input_size=500, rng=None):
        assert isinstance(input_size, int) and input_size > 0

        self.input_size = input_size
        self.rng = rng if rng is not None else random.Random()
        self.needle_index = self.rng.randrange(input_size)
        self.current_situation = None

    @property
    def possible_actions(self):
        return (0, 1)

    @property
    def max_reward(self):
        return 1.0

    def reset(self):
        self.current_situation = BitString.random(self.input_size,
                                                  rng=self.rng)
        return self.current_situation

    def sense(self):
        if self.current_situation is None:
            self.reset()
        return self.current_situation

    def act(self, action):
        if action not in self.possible_actions:
            raise EnvironmentProtocolError("Invalid action: %r" % (action,))
        needle_value = int(self.sense()[self.needle_index])
        return float(action == needle_value), True


class EnvironmentObserver(Environment):
    """Wrapper for other Environment instances which logs details of the
    agent/environment interaction as they take place, forwarding the
    actual work on to the wrapped instance.

    Usage:
        model = algorithm.run(EnvironmentObserver(environment), 10000)

    Init Arguments:
        wrapped: The Environment instance to be observed.
    """

    def __init__(self, wrapped):
        assert isinstance(wrapped, Environment)

        self.logger = logging.getLogger(__name__)
        self.wrapped = wrapped
        self.total_reward = 0
        self.steps = 0
        self.episodes = 0

    @property
    def possible_actions(self):
        possible_actions = self.wrapped.possible_actions

        if len(possible_actions) <= 20:
            self.logger.info('Possible actions: %s',
                             ', '.join(str(action)
                                       for action in possible_actions))
        else:
            self.logger.info("%d possible actions.", len(possible_actions))

        return possible_actions

    @property
    def max_reward(self):
        return self.wrapped.max_reward

    def reset(self):
        self.logger.debug('Resetting environment.')
        return self.wrapped.reset()

    def sense(self):
        situation = self.wrapped.sense()

        self.logger.debug('Situation: %s', situation)

        return situation

    def act(self, action):
        self.logger.debug('Executing action: %s', action)

        result = self.wrapped.act(action)
        try:
            reward, end_of_task = result
        except (TypeError, ValueError):
            # Malformed results are reported by the control loop.
            return result
        if reward:
            self.total_reward += reward
        self.steps += 1
        if end_of_task:
            self.episodes += 1

        self.logger.debug('Reward received on this step: %.5f',
                          reward or 0)
        self.logger.debug('Average reward per step: %.5f',
                          self.total_reward / self.steps)

        if not self.steps % 100:
            self.logger.info('Steps completed: %d', self.steps)
            self.logger.info('Average reward per step: %.5f',
                             self.total_reward / self.steps)

        return result
