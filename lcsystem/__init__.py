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

This package implements the XCS (Accuracy-based Classifier System)
algorithm, as described in the 2001 paper, "An Algorithmic Description of
XCS," by Martin Butz and Stewart Wilson.[1] A population of
condition => action rules is evolved by a genetic algorithm while each
rule's payoff prediction, prediction error, and accuracy-based fitness are
learned by reinforcement, as the system interacts with an environment.

Usage:
    import logging
    import random
    import lcsystem
    from lcsystem import XCSAlgorithm
    from lcsystem.environments import (EnvironmentObserver,
                                       MultiplexerEnvironment)

    # Create an environment instance, either by instantiating one of the
    # predefined environments provided in lcsystem.environments, or by
    # creating your own subclass of lcsystem.environments.Environment.
    environment = MultiplexerEnvironment(address_size=2)

    # If you want to log the process of the run as it proceeds, set the
    # logging level with the built-in logging module, and wrap the
    # environment with an EnvironmentObserver.
    logging.root.setLevel(logging.INFO)
    environment = EnvironmentObserver(environment)

    # Instantiate the algorithm and set the parameters to values that are
    # appropriate for the environment. Calling help(XCSAlgorithm) will give
    # you a description of each parameter's meaning.
    algorithm = XCSAlgorithm()
    algorithm.exploration_probability = .1
    algorithm.do_ga_subsumption = True

    # Create a classifier set from the algorithm, tailored for the
    # environment you have selected. Seed its random source for
    # reproducible runs.
    model = algorithm.new_model(environment, rng=random.Random(42))

    # Run the classifier set in the environment, optimizing it as the
    # environment unfolds.
    statistics = model.run(environment, 10000, learn=True)
    print(statistics)

    # Save the population as plain data, and rebuild it later.
    config = model.get_configuration()
    reloaded_model = lcsystem.configuration.build_model(config)

    # Or get a quick list of the best classifiers discovered.
    for rule in model:
        if rule.fitness <= .5 or rule.experience < 10:
            continue
        print(rule.condition, '=>', rule.action, ' [%.5f]' % rule.fitness)


References:

[1] Butz, M. and Wilson, S. (2001). An algorithmic description of XCS. In
    Lanzi, P., Stolzmann, W., and Wilson, S., editors, Advances in
    Learning Classifier Systems: Proceedings of the Third International
    Workshop, volume 1996 of Lecture Notes in Artificial Intelligence,
    pages 253-272. Springer-Verlag Berlin Heidelberg.
"""


from . import bitstrings, configuration, environments
from .algorithm import LCSAlgorithm, XCSAlgorithm
from .classifier import Classifier
from .control import ControlLoop, RunStatistics
from .errors import (ConfigurationError, EnvironmentProtocolError, LCSError,
                     MatchSetEmptyAfterCoveringError)
from .matching import ActionSet, MatchSet
from .population import ClassifierSet
from .testing import test, train_and_evaluate


__author__ = 'Aaron Hosford'
__version__ = '1.0.0'

__all__ = [
    # Module Metadata
    '__author__',
    '__version__',

    # Preloaded Submodules
    'bitstrings',
    'configuration',
    'environments',

    # Classes
    'ActionSet',
    'Classifier',
    'ClassifierSet',
    'ControlLoop',
    'LCSAlgorithm',
    'MatchSet',
    'RunStatistics',
    'XCSAlgorithm',

    # Exceptions
    'ConfigurationError',
    'EnvironmentProtocolError',
    'LCSError',
    'MatchSetEmptyAfterCoveringError',

    # Functions
    'test',
    'train_and_evaluate',
]
