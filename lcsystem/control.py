"""The control loop, which drives a population through repeated
sense, match, predict, act, credit, and GA cycles against an environment."""

__author__ = 'Aaron Hosford'

__all__ = [
    'ControlLoop',
    'RunStatistics',
]

import logging
import numbers

from .errors import EnvironmentProtocolError


logger = logging.getLogger(__name__)


class RunStatistics:
    """The reportable outcome of a run of the control loop. Failing to
    converge is not an error; it simply shows up here.

    Attributes:
        steps: The number of cycles executed.
        episodes: The number of episodes that reached end-of-task.
        total_reward: The sum of the rewards received.
        best_episode_reward: The highest cumulative reward received within
            a single episode, or None if no episode was completed.
        converged: Whether the run stopped early because the population
            statistics stabilized.
        population: The population's statistics at the end of the run,
            as returned by ClassifierSet.statistics().
    """

    def __init__(self, steps, episodes, total_reward, best_episode_reward,
                 converged, population):
        self.steps = steps
        self.episodes = episodes
        self.total_reward = total_reward
        self.best_episode_reward = best_episode_reward
        self.converged = converged
        self.population = population

    @property
    def average_reward(self):
        """The average reward received per cycle."""
        return self.total_reward / (self.steps or 1)

    def as_dict(self):
        return dict(
            steps=self.steps,
            episodes=self.episodes,
            total_reward=self.total_reward,
            average_reward=self.average_reward,
            best_episode_reward=self.best_episode_reward,
            converged=self.converged,
            population=dict(self.population),
        )

    def __str__(self):
        return (
            'Steps: %d\nEpisodes: %d\nTotal reward: %.5f\n'
            'Average reward per step: %.5f\nConverged: %s\n'
            'Population: %d classifiers (%d copies)' % (
                self.steps, self.episodes, self.total_reward,
                self.average_reward, self.converged,
                self.population['macro_size'], self.population['micro_size']
            )
        )


class ControlLoop:
    """Runs one sense-match-act-learn cycle per time step. Each cycle is
    strictly ordered: the population is read (matching and prediction)
    before it is written (credit assignment, GA, deletion).

    For multi-step environments, the payoff of an action set is not known
    until the next step: it is the reward received for it plus the
    discounted expected future payoff computed from the next match set.
    When the environment signals end-of-task, the current action set is
    paid the immediate reward alone, and the state carried between steps
    (previous action set, input, and reward) is cleared before the
    environment is reset for the next episode.

    Usage:
        loop = ControlLoop(model, learn=True)
        statistics = loop.run(environment, max_steps=10000)

    Init Arguments:
        model: The ClassifierSet to drive.
        learn: Whether to apply credit assignment and the GA. Covering is
            applied either way.
    """

    def __init__(self, model, learn=True):
        self.model = model
        self.learn = learn

        self._previous_match_set = None
        self._previous_situation = None
        self._previous_reward = None

    @property
    def previous_match_set(self):
        """The match set still waiting for its payoff, or None."""
        return self._previous_match_set

    def end_episode(self):
        """Clear the state carried between steps of an episode."""
        self._previous_match_set = None
        self._previous_situation = None
        self._previous_reward = None

    def _unpack_result(self, result):
        try:
            reward, end_of_task = result
        except (TypeError, ValueError) as exc:
            raise EnvironmentProtocolError(
                "act() must return a (reward, end_of_task) pair, not %r." %
                (result,)
            ) from exc
        if reward is None:
            if self.learn:
                raise EnvironmentProtocolError(
                    "No reward was received while learning."
                )
            reward = 0
        elif not isinstance(reward, numbers.Real):
            raise EnvironmentProtocolError("Reward %r is not a number." %
                                           (reward,))
        return float(reward), bool(end_of_task)

    def step(self, environment):
        """Execute a single cycle against the environment. Return a tuple
        (reward, end_of_task)."""
        situation = environment.sense()
        match_set = self.model.match(situation)
        match_set.select_action()

        logger.debug('Situation %s: predictions %s, selected %s.',
                     match_set.situation, match_set.prediction_array,
                     match_set.selected_action)

        reward, end_of_task = self._unpack_result(
            environment.act(match_set.selected_action)
        )

        if self.learn:
            # The previous action set's payoff can only be settled now that
            # the current prediction array is known.
            if self._previous_match_set is not None:
                logger.debug('Settling payoff for situation %s (reward %.5f).',
                             self._previous_situation, self._previous_reward)
                match_set.pay(self._previous_match_set)
                self._previous_match_set.apply_payoff()
            match_set.payoff = reward

            if end_of_task:
                match_set.apply_payoff()
            else:
                self._previous_match_set = match_set
                self._previous_situation = match_set.situation
                self._previous_reward = reward

        if end_of_task:
            self.end_episode()
            environment.reset()

        return reward, end_of_task

    def finish(self):
        """Settle a pending action set with the reward received so far.
        This is called when a run stops in the middle of an episode."""
        if self.learn and self._previous_match_set is not None:
            self._previous_match_set.apply_payoff()
        self.end_episode()

    def run(self, environment, max_steps, convergence_window=None,
            convergence_tolerance=.01):
        """Run the loop until max_steps cycles have been executed or, if
        convergence_window is given, until the mean reward and the
        population size of two successive windows of that many steps
        differ by no more than convergence_tolerance (the population size
        difference is taken relative to max_population_size).

        Usage:
            statistics = loop.run(environment, 10000)

        Arguments:
            environment: The Environment to interact with.
            max_steps: An int, the maximum number of cycles to execute.
            convergence_window: None, or an int, the number of steps in
                each window compared for the convergence test.
            convergence_tolerance: A float, the allowed difference between
                successive windows.
        Return:
            A RunStatistics instance.
        """
        assert isinstance(max_steps, int) and max_steps >= 0
        assert convergence_window is None or convergence_window > 0

        capacity = self.model.algorithm.max_population_size

        steps = 0
        episodes = 0
        total_reward = 0.0
        episode_reward = 0.0
        best_episode_reward = None
        converged = False

        window_reward = 0.0
        previous_window = None

        logger.info('Starting run of up to %d steps.', max_steps)

        self.end_episode()
        environment.reset()
        try:
            while steps < max_steps:
                reward, end_of_task = self.step(environment)
                steps += 1
                total_reward += reward
                episode_reward += reward
                window_reward += reward

                if end_of_task:
                    episodes += 1
                    if (best_episode_reward is None or
                            episode_reward > best_episode_reward):
                        best_episode_reward = episode_reward
                    episode_reward = 0.0

                if convergence_window and not steps % convergence_window:
                    window = (window_reward / convergence_window,
                              self.model.numerosity / capacity)
                    window_reward = 0.0
                    if (previous_window is not None and
                            abs(window[0] - previous_window[0]) <=
                            convergence_tolerance and
                            abs(window[1] - previous_window[1]) <=
                            convergence_tolerance):
                        converged = True
                        logger.info('Converged after %d steps.', steps)
                        break
                    previous_window = window
        except Exception:
            # An aborted cycle leaves nothing to settle.
            self.end_episode()
            raise
        else:
            self.finish()

        statistics = RunStatistics(
            steps,
            episodes,
            total_reward,
            best_episode_reward,
            converged,
            self.model.statistics()
        )
        logger.info('Run completed. %d steps, average reward %.5f.',
                    steps, statistics.average_reward)
        return statistics
