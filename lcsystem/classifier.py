from .bitstrings import BitCondition


# The statistics carried by each classifier, in the order they are listed
# when a classifier is printed.
STATISTICS = (
    'time_stamp',
    'prediction',
    'error',
    'fitness',
    'experience',
    'action_set_size',
    'numerosity',
)


class Classifier:
    """A single condition => action rule, together with the statistics the
    XCS algorithm learns for it. The statistics consist of a time stamp
    indicating the last time the rule participated in a GA update, a
    prediction indicating the payoff expected when the rule's action is
    taken in a matching situation, an error value indicating how
    inaccurate that prediction is on average, a fitness derived from the
    rule's accuracy relative to the other rules in its niche, which is used
    both as the prediction weight and by the GA, an experience value which
    counts how many times the rule has been part of an updated action set,
    the average size of the action sets it has appeared in, and a
    numerosity value which represents the number of (virtual) copies of
    the rule in the population.

    Usage:
        classifier = Classifier(
            condition=BitCondition('01##1'),
            action=1,
            algorithm=model.algorithm,  # An XCSAlgorithm instance
            time_stamp=model.time_stamp
        )

    Init Arguments:
        condition: The BitCondition which determines whether this rule
            appears in a match set.
        action: The action which this rule always suggests.
        algorithm: The XCSAlgorithm whose initial parameter values are used
            to seed the prediction, error, and fitness.
        time_stamp: The time stamp of the population to which this rule
            belongs, as of the moment this rule is created.
    """

    def __init__(self, condition, action, algorithm, time_stamp=0):
        assert isinstance(time_stamp, int)

        if not isinstance(condition, BitCondition):
            condition = BitCondition(condition)

        self._algorithm = algorithm
        self._condition = condition
        self._action = action

        self.time_stamp = time_stamp
        self.prediction = algorithm.initial_prediction
        self.error = algorithm.initial_error
        self.fitness = algorithm.initial_fitness
        self.experience = 0
        self.action_set_size = 1
        self.numerosity = 1

    @classmethod
    def from_record(cls, record, algorithm):
        """Rebuild a classifier from a dictionary produced by to_record().

        Usage:
            copy = Classifier.from_record(classifier.to_record(), algorithm)
        """
        classifier = cls(
            BitCondition(record['condition']),
            record['action'],
            algorithm,
            int(record.get('time_stamp', 0))
        )
        classifier.prediction = float(record['prediction'])
        classifier.error = float(record['error'])
        classifier.fitness = float(record['fitness'])
        classifier.experience = int(record['experience'])
        classifier.numerosity = int(record['numerosity'])
        if classifier.numerosity < 1:
            raise ValueError("Numerosity must be at least 1; got %d." %
                             classifier.numerosity)
        classifier.action_set_size = float(record.get('action_set_size', 1))
        return classifier

    def to_record(self):
        """Return the classifier as a dictionary of plain values, suitable
        for inspection, checkpointing, or conversion to JSON."""
        record = dict(condition=str(self._condition), action=self._action)
        for key in STATISTICS:
            record[key] = getattr(self, key)
        return record

    def __str__(self):
        return (
            str(self.condition) + ' => ' + str(self.action) + '\n    ' +
            '\n    '.join(
                key.replace('_', ' ').title() + ': ' +
                str(getattr(self, key))
                for key in STATISTICS
            )
        )

    def __repr__(self):
        return '%s(%r, %r)' % (type(self).__name__, str(self._condition),
                               self._action)

    def __lt__(self, other):
        """Order classifiers from worst to best, so that sorted()
        lists the most useful rules of a population last."""
        if not isinstance(other, Classifier):
            return NotImplemented

        attribute_order = (
            'numerosity',
            'fitness',
            'experience',
            'error',
            'prediction',
        )
        for attribute in attribute_order:
            my_key = getattr(self, attribute)
            other_key = getattr(other, attribute)
            if my_key < other_key:
                return attribute != 'error'
            if my_key > other_key:
                return attribute == 'error'
        return False

    @property
    def algorithm(self):
        """The algorithm associated with this classifier."""
        return self._algorithm

    @property
    def condition(self):
        """The match condition for this classifier."""
        return self._condition

    @property
    def action(self):
        """The action suggested by this classifier."""
        return self._action

    @property
    def key(self):
        """The (condition, action) pair that identifies this classifier
        within a population."""
        return self._condition, self._action

    @property
    def prediction_weight(self):
        """The weight of this classifier's prediction in the prediction
        array. For XCS, this is the fitness."""
        return self.fitness

    def matches(self, situation):
        """Return whether the condition matches the situation."""
        return self._condition(situation)

    def is_more_general(self, other):
        """Return whether this classifier's condition matches every input
        the other condition matches, while specifying strictly fewer
        positions. The other argument may be a Classifier or a
        BitCondition."""
        if isinstance(other, Classifier):
            other = other.condition
        return (
            self._condition.count() < other.count() and
            self._condition(other)
        )
