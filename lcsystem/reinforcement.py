"""The reinforcement component of XCS: distributing the payoff earned by
an action set among its members."""

__author__ = 'Aaron Hosford'

__all__ = [
    'CreditAssignment',
]

import logging


logger = logging.getLogger(__name__)


class CreditAssignment:
    """Updates the prediction, error, action set size, experience, and
    fitness of the classifiers in an action set once the payoff for the
    action set is known.

    All members are updated as a single batch: every value used in the
    update of one member is computed before any other member is touched,
    so the outcome does not depend on iteration order.

    Usage:
        credit_assignment = CreditAssignment(algorithm)
        credit_assignment(action_set, payoff)

    Init Arguments:
        algorithm: The XCSAlgorithm holding the parameters (learning_rate,
            error_threshold, accuracy_coefficient, accuracy_power,
            adaptive_learning_rate).
    """

    def __init__(self, algorithm):
        self._algorithm = algorithm

    def __call__(self, action_set, payoff):
        payoff = float(payoff)
        learning_rate = self._algorithm.learning_rate
        adaptive = self._algorithm.adaptive_learning_rate

        observed_size = action_set.numerosity

        for classifier in action_set:
            classifier.experience += 1

            if adaptive:
                update_rate = max(learning_rate, 1 / classifier.experience)
            else:
                update_rate = learning_rate

            # The error is measured against the prediction as it stood
            # before this update.
            prediction = classifier.prediction
            classifier.error += (
                (abs(payoff - prediction) - classifier.error) *
                update_rate
            )
            classifier.prediction += (payoff - prediction) * update_rate
            classifier.action_set_size += (
                (observed_size - classifier.action_set_size) *
                update_rate
            )

        self.update_fitness(action_set)
        action_set.invalidate()

        logger.debug('Distributed payoff %.5f among %d classifiers for '
                     'action %s.', payoff, len(action_set), action_set.action)

    def accuracy(self, classifier):
        """Return the accuracy, kappa, of the classifier. Accuracy is 1
        below the error threshold and falls off as a power of the error
        above it."""
        error_threshold = self._algorithm.error_threshold
        if classifier.error < error_threshold:
            return 1.0
        return (
            self._algorithm.accuracy_coefficient *
            (classifier.error / error_threshold) **
            -self._algorithm.accuracy_power
        )

    def update_fitness(self, action_set):
        """Move the fitness of each member toward its accuracy relative to
        the total (numerosity-weighted) accuracy of the action set."""
        accuracies = {
            classifier: self.accuracy(classifier)
            for classifier in action_set
        }
        total_accuracy = sum(
            accuracy * classifier.numerosity
            for classifier, accuracy in accuracies.items()
        )

        # On rare occasions the total accuracy underflows to zero.
        total_accuracy = total_accuracy or 1

        learning_rate = self._algorithm.learning_rate
        for classifier, accuracy in accuracies.items():
            relative_accuracy = (
                accuracy * classifier.numerosity / total_accuracy
            )
            classifier.fitness += (
                (relative_accuracy - classifier.fitness) * learning_rate
            )
