from typing import Any, Optional

from .algorithm import LCSAlgorithm, XCSAlgorithm
from .errors import ConfigurationError
from .population import ClassifierSet


_ALGORITHMS: dict[str, type[LCSAlgorithm]] = {}
_ALGORITHM_PREFERRED_NAMES: dict[type[LCSAlgorithm], str] = {}


def register_algorithm(algorithm_type: type[LCSAlgorithm], *names: str) -> None:
    """Make an algorithm type available by name to build_algorithm(). The
    first name registered for a type is the one listed by
    list_algorithms()."""
    assert issubclass(algorithm_type, LCSAlgorithm)
    assert names
    for name in names:
        assert name and isinstance(name, str)
        if _ALGORITHMS.get(name, algorithm_type) is not algorithm_type:
            raise ConfigurationError("Algorithm name %r is already taken." % name)
        _ALGORITHMS[name] = algorithm_type
        if algorithm_type not in _ALGORITHM_PREFERRED_NAMES:
            _ALGORITHM_PREFERRED_NAMES[algorithm_type] = name


def get_algorithm(name: str) -> Optional[type[LCSAlgorithm]]:
    assert name and isinstance(name, str)
    return _ALGORITHMS.get(name, None)


def list_algorithms() -> list[str]:
    return list(_ALGORITHM_PREFERRED_NAMES.values())


def build_algorithm(config: dict[str, Any]) -> LCSAlgorithm:
    """Build an algorithm from a configuration dictionary. The __class__
    entry may be any registered name; the remaining entries override the
    algorithm's default parameters.

    Usage:
        algorithm = build_algorithm({'__class__': 'xcs',
                                     'max_population_size': 800})
    """
    algorithm_name = config.get('__class__')
    algorithm_type = get_algorithm(algorithm_name) if algorithm_name else None
    if algorithm_type is None:
        raise ConfigurationError("Unknown algorithm: %r" % (algorithm_name,))
    config = dict(config,
                  __module__=algorithm_type.__module__,
                  __class__=algorithm_type.__name__)
    return algorithm_type.build(config)


def build_model(config: dict[str, Any], rng=None) -> ClassifierSet:
    """Rebuild a population, including its algorithm and classifiers, from
    the dictionary returned by ClassifierSet.get_configuration()."""
    algorithm = build_algorithm(config['algorithm'])
    return ClassifierSet.from_records(
        algorithm,
        config['possible_actions'],
        config.get('classifiers', ()),
        config.get('situation_length'),
        rng,
        config.get('time_stamp', 0)
    )


register_algorithm(XCSAlgorithm, 'XCSAlgorithm', 'xcs')
