"""Exceptions raised by the lcsystem package."""

__author__ = 'Aaron Hosford'

__all__ = [
    'ConfigurationError',
    'EnvironmentProtocolError',
    'LCSError',
    'MatchSetEmptyAfterCoveringError',
]


class LCSError(Exception):
    """Base class for all errors raised by the classifier system."""


class ConfigurationError(LCSError, ValueError):
    """An algorithm parameter is out of range, or the parameters are
    inconsistent with the environment the model is being built for. This
    is raised before any learning takes place."""


class MatchSetEmptyAfterCoveringError(LCSError, RuntimeError):
    """Covering failed to produce a match set with the required number of
    distinct actions. This indicates a fault in the classifier system
    itself, not in the caller's usage of it."""


class EnvironmentProtocolError(LCSError):
    """The environment did not honor the sense/act/reward contract, e.g. by
    producing an input of the wrong length, rejecting an action it
    advertised, or returning a malformed result from act(). The current
    cycle is aborted."""
