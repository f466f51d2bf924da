import logging
import time

from .algorithm import LCSAlgorithm, XCSAlgorithm
from .control import ControlLoop
from .selection import GreedySelectionStrategy

from . import environments


logger = logging.getLogger(__name__)


def test(algorithm=None, environment=None, steps=10000, rng=None):
    """Run the algorithm on the environment, creating a new classifier set
    in the process. Log the performance as the environment unfolds. Return
    a tuple, (total_steps, total_reward, total_seconds, model), indicating
    the performance of the algorithm in the environment and the resulting
    classifier set that was produced. By default, the algorithm used is a
    new XCSAlgorithm instance with exploration probability .1 and GA
    subsumption turned on, and the environment is a 6-bit
    MultiplexerEnvironment instance.

    Usage:
        algorithm = XCSAlgorithm()
        environment = HaystackEnvironment()
        steps, reward, seconds, model = test(algorithm, environment)

    Arguments:
        algorithm: The LCSAlgorithm instance which should be run; default
            is a new XCSAlgorithm instance with exploration probability
            set to .1 and GA subsumption turned on.
        environment: The Environment instance which the algorithm should
            be run on; default is a 6-bit MultiplexerEnvironment instance.
        steps: The number of training cycles to run; default is 10,000.
        rng: The random.Random instance used by the classifier set.
    Return:
        A tuple, (total_steps, total_reward, total_time, model), where
        total_steps is the number of training cycles executed, total_reward
        is the total reward received summed over all executed training
        cycles, total_time is the time in seconds from start to end of the
        call to model.run(), and model is the ClassifierSet instance that
        was created and trained.
    """

    assert algorithm is None or isinstance(algorithm, LCSAlgorithm)
    assert (environment is None or
            isinstance(environment, environments.Environment))

    logging.basicConfig(level=logging.INFO)

    if environment is None:
        # Define the environment.
        environment = environments.MultiplexerEnvironment(address_size=2)

    if not isinstance(environment, environments.EnvironmentObserver):
        # Put the environment into a wrapper that will report things back
        # to us for visibility.
        environment = environments.EnvironmentObserver(environment)

    if algorithm is None:
        # Define the algorithm.
        algorithm = XCSAlgorithm()
        algorithm.exploration_probability = .1
        algorithm.do_ga_subsumption = True

    # Create the classifier system from the algorithm.
    model = algorithm.new_model(environment, rng)

    # Run the algorithm on the environment. This does two things
    # simultaneously:
    #   1. Learns a model of the problem space from experience.
    #   2. Attempts to maximize the reward received.
    # Since initially the algorithm's model has no experience incorporated
    # into it, performance will be poor, but it will improve over time as
    # the algorithm continues to be exposed to the environment.
    start_time = time.time()
    model.run(environment, steps, learn=True)
    end_time = time.time()

    logger.info('Classifiers:\n\n%s\n', model)
    logger.info("Total time: %.5f seconds", end_time - start_time)

    return (
        environment.steps,
        environment.total_reward,
        end_time - start_time,
        model
    )


def train_and_evaluate(algorithm, environment, training_cycles=10000,
                       evaluation_cycles=1000, rng=None):
    """Train a new classifier set on the environment, then measure its
    performance over an evaluation window in which the best predicted
    action is always taken. Learning continues during the evaluation
    window; only exploration is switched off.

    Usage:
        algorithm = XCSAlgorithm()
        environment = MultiplexerEnvironment(address_size=2)
        model, training, evaluation = train_and_evaluate(
            algorithm, environment, rng=random.Random(1))
        assert evaluation.average_reward >= .95 * environment.max_reward

    Arguments:
        algorithm: The LCSAlgorithm instance to train.
        environment: The Environment instance to train and evaluate on.
        training_cycles: The number of training cycles; default is 10,000.
        evaluation_cycles: The number of evaluation cycles; default is
            1,000.
        rng: The random.Random instance used by the classifier set.
    Return:
        A tuple (model, training_statistics, evaluation_statistics), where
        the statistics are RunStatistics instances.
    """
    assert isinstance(algorithm, LCSAlgorithm)
    assert isinstance(environment, environments.Environment)

    model = algorithm.new_model(environment, rng)

    training = ControlLoop(model, learn=True).run(environment,
                                                  training_cycles)
    logger.info('Training finished:\n%s', training)

    exploration_strategy = algorithm.exploration_strategy
    algorithm.exploration_strategy = GreedySelectionStrategy()
    try:
        evaluation = ControlLoop(model, learn=True).run(environment,
                                                        evaluation_cycles)
    finally:
        algorithm.exploration_strategy = exploration_strategy
    logger.info('Evaluation finished:\n%s', evaluation)

    return model, training, evaluation
