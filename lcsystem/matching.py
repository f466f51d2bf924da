"""Match sets and action sets: the transient, per-step views of the
population that the matcher, action selector, credit assignment, and
genetic component operate on."""

__author__ = 'Aaron Hosford'

__all__ = [
    'ActionSet',
    'MatchSet',
]


class ActionSet:
    """A set of classifiers drawn from the same population, all suggesting
    the same action and having conditions which matched the same
    situation.

    Usage:
        classifiers = {
            classifier.condition: classifier
            for classifier in model
            if classifier.action == action and classifier.matches(situation)
        }
        action_set = ActionSet(model, situation, action, classifiers)

    Init Arguments:
        model: The ClassifierSet from which this action set was drawn.
        situation: The BitString against which the classifiers in this
            action set all matched.
        action: The action which the classifiers in this action set
            collectively suggest.
        classifiers: A dictionary of the form {condition: classifier}.

    NOTE: For efficiency, the ActionSet instance uses the classifiers
          dictionary directly rather than making a copy.
    """

    def __init__(self, model, situation, action, classifiers):
        assert isinstance(classifiers, dict)

        self._model = model
        self._situation = situation
        self._action = action
        self._classifiers = classifiers  # {condition: classifier}

        self._prediction = None
        self._prediction_weight = None

    @property
    def model(self):
        """The population from which the classifiers were drawn."""
        return self._model

    @property
    def situation(self):
        """The common situation against which all the classifiers'
        conditions matched."""
        return self._situation

    @property
    def action(self):
        """The common action suggested by all the classifiers in the
        action set."""
        return self._action

    @property
    def numerosity(self):
        """The number of (virtual) classifiers in the action set, counting
        each classifier as many times as its numerosity."""
        return sum(classifier.numerosity for classifier in self)

    def _compute_prediction(self):
        # The fitness-weighted average of the members' predictions.
        total_weight = 0
        total_prediction = 0
        for classifier in self._classifiers.values():
            total_weight += classifier.prediction_weight
            total_prediction += (classifier.prediction *
                                 classifier.prediction_weight)
        self._prediction = total_prediction / (total_weight or 1)
        self._prediction_weight = total_weight

    @property
    def prediction(self):
        """The combined prediction of expected payoff for taking the
        suggested action given the situation: sum(p * F) / sum(F) over the
        members, or 0 if the members' fitness sums to 0."""
        if self._prediction is None:
            self._compute_prediction()
        return self._prediction

    @property
    def prediction_weight(self):
        """The sum of the fitness of the members."""
        if self._prediction_weight is None:
            self._compute_prediction()
        return self._prediction_weight

    def invalidate(self):
        """Forget the cached prediction. Call this after the statistics of
        the members have been updated."""
        self._prediction = None
        self._prediction_weight = None

    def __contains__(self, classifier):
        return (
            classifier.action == self._action and
            self._classifiers.get(classifier.condition) is classifier
        )

    def __iter__(self):
        return iter(self._classifiers.values())

    def __len__(self):
        return len(self._classifiers)


class MatchSet:
    """A collection of coincident action sets. This represents the set of
    all classifiers that matched within the same situation, organized into
    groups according to which action each classifier recommends. The
    prediction array is the mapping from each of those actions to the
    prediction of its action set.

    Usage:
        match_set = model.match(situation)
        match_set.select_action()
        match_set.payoff = reward
        match_set.apply_payoff()

    Init Arguments:
        model: The ClassifierSet from which the classifiers in this match
            set were drawn.
        situation: The situation against which the classifiers in this
            match set all matched.
        by_action: A 2-tiered dictionary of the form
            {action: {condition: classifier}}.
    """

    def __init__(self, model, situation, by_action):
        assert isinstance(by_action, dict)

        self._model = model
        self._situation = situation
        self._algorithm = model.algorithm
        self._time_stamp = model.time_stamp

        self._action_sets = {
            action: ActionSet(model, situation, action, classifiers)
            for action, classifiers in by_action.items()
            if classifiers
        }

        self._best_actions = None
        self._best_prediction = None

        self._selected_action = None
        self._payoff = 0
        self._closed = False

    @property
    def model(self):
        """The population from which this match set was drawn."""
        return self._model

    @property
    def situation(self):
        """The situation against which the classifiers in this match set
        all matched."""
        return self._situation

    @property
    def algorithm(self):
        """The algorithm managing the model that produced this match
        set."""
        return self._algorithm

    @property
    def time_stamp(self):
        """The time stamp of the model at which this match set was
        produced."""
        return self._time_stamp

    def __iter__(self):
        """Iterate over the distinct actions suggested by the match set."""
        return iter(self._action_sets)

    def __len__(self):
        """The number of distinct actions suggested by the match set."""
        return len(self._action_sets)

    def __getitem__(self, action):
        return self._action_sets[action]

    def get(self, action, default=None):
        """Return the action set, if any, associated with this action. If
        no action set is associated with this action, return the
        default."""
        return self._action_sets.get(action, default)

    def classifiers(self):
        """Iterate over every classifier in the match set."""
        for action_set in self._action_sets.values():
            yield from action_set

    @property
    def prediction_array(self):
        """A dictionary mapping each suggested action to the
        fitness-weighted average prediction of the classifiers which
        suggest it."""
        return {
            action: action_set.prediction
            for action, action_set in self._action_sets.items()
        }

    @property
    def best_prediction(self):
        """The highest value in the prediction array, or None if the
        match set is empty."""
        if self._best_prediction is None and self._action_sets:
            self._best_prediction = max(
                action_set.prediction
                for action_set in self._action_sets.values()
            )
        return self._best_prediction

    @property
    def best_actions(self):
        """A tuple containing the actions whose action sets have the best
        prediction."""
        if self._best_actions is None:
            best_prediction = self.best_prediction
            self._best_actions = tuple(
                action
                for action, action_set in self._action_sets.items()
                if action_set.prediction == best_prediction
            )
        return self._best_actions

    def select_action(self):
        """Select an action according to the action selection strategy of
        the associated algorithm, drawing any random numbers from the
        model's random source. If an action has already been selected,
        raise a ValueError instead.

        Usage:
            if match_set.selected_action is None:
                match_set.select_action()

        Arguments: None
        Return:
            The action that was selected by the action selection strategy.
        """
        if self._selected_action is not None:
            raise ValueError("The action has already been selected.")
        strategy = self._algorithm.action_selection_strategy
        self._selected_action = strategy(self, self._model.rng)
        assert self._selected_action in self._action_sets
        return self._selected_action

    def _get_selected_action(self):
        return self._selected_action

    def _set_selected_action(self, action):
        if action not in self._action_sets:
            raise ValueError("Action %r is not suggested by the match set." %
                             (action,))
        if self._selected_action is not None:
            raise ValueError("The action has already been selected.")
        self._selected_action = action

    selected_action = property(
        _get_selected_action,
        _set_selected_action,
        doc="""The action which was selected for execution and which
            deserves credit for whatever payoff is received. This will be
            None if no action has been selected."""
    )

    @property
    def action_set(self):
        """The action set of the selected action, or None if no action
        has been selected yet."""
        if self._selected_action is None:
            return None
        return self._action_sets[self._selected_action]

    @property
    def prediction(self):
        """The prediction associated with the selected action. If the
        action has not been selected yet, this will be None."""
        if self._selected_action is None:
            return None
        return self._action_sets[self._selected_action].prediction

    def _get_payoff(self):
        return self._payoff

    def _set_payoff(self, payoff):
        if self._selected_action is None:
            raise ValueError("The action has not been selected yet.")
        if self._closed:
            raise ValueError("The payoff for this match set has already "
                             "been applied.")
        self._payoff = float(payoff)

    payoff = property(
        _get_payoff,
        _set_payoff,
        doc="""The payoff received for the selected action. This starts out
            as 0 and should be assigned or incremented to reflect the total
            payoff (both immediate reward and discounted expected future
            reward) in response to the selected action. Attempting to
            modify this property before an action has been selected or
            after the payoff has been applied will result in a ValueError.
            """
    )

    def pay(self, predecessor):
        """Add this match set's discounted expected future payoff to the
        payoff of the predecessor, the match set whose selected action led
        directly to this match set's situation. Nothing happens if the
        predecessor is None."""
        if predecessor is not None:
            expectation = self._algorithm.get_future_expectation(self)
            predecessor.payoff += expectation

    def apply_payoff(self):
        """Apply the payoff that has been accumulated from immediate
        reward and/or payments from successor match sets: credit
        assignment followed by the genetic component. Attempting to call
        this method before an action has been selected or after it has
        already been called for the same match set will result in a
        ValueError."""
        if self._selected_action is None:
            raise ValueError("The action has not been selected yet.")
        if self._closed:
            raise ValueError("The payoff for this match set has already "
                             "been applied.")
        self._algorithm.distribute_payoff(self)
        self._algorithm.update(self)
        self._closed = True

    @property
    def closed(self):
        """A Boolean indicating whether the payoff for this match set has
        been applied."""
        return self._closed
