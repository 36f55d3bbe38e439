#-------------------------------------------------------------------------------
# Representations of two player stochastic games.
#
# A game is either tabulated (payoffs and transition probabilities are given as
# arrays) or rule based (payoffs and transition probabilities are generated by
# user supplied functions). The solver reads both through the Game interface.
#-------------------------------------------------------------------------------

import numpy as np

from .errors import GameError


__all__ = ['Game', 'TabulatedGame', 'RuleGame']


class Game(object):
    '''
    Base class for two player stochastic games with perfect monitoring.
    INPUTS:
    delta:                  discount factor, strictly between 0 and 1. float.
    num_actions:            list with one (n1, n2) pair per state.
    unconstrained:          pair of bools. A player marked True is not subject
                            to incentive constraints.
    equilibrium_actions:    None, or a list with one entry per state. Each entry
                            is None (every action pair may be played) or a list
                            of (a1, a2) pairs allowed on the equilibrium path.
                            Deviations are never restricted.
    Subclasses define payoff() and transition() and call _tabulate() once the
    data they need is in place.
    '''

    def __init__(self, delta, num_actions, unconstrained=(False, False), equilibrium_actions=None):
        if not 0 < delta < 1:
            raise GameError("discount factor must be strictly between 0 and 1")
        if len(num_actions) == 0:
            raise GameError("a game needs at least one state")

        self.delta = float(delta)
        self._num_actions = [(int(n1), int(n2)) for n1, n2 in num_actions]
        self.unconstrained = (bool(unconstrained[0]), bool(unconstrained[1]))

        for n1, n2 in self._num_actions:
            if n1 < 1 or n2 < 1:
                raise GameError("both players must have at least one action in every state")

        if equilibrium_actions is not None and len(equilibrium_actions) != len(self._num_actions):
            raise GameError("equilibrium actions must be given for every state")
        self._equilibrium_actions = equilibrium_actions
        self._payoffs = None
        self._probabilities = None

    @property
    def num_states(self):
        return len(self._num_actions)

    def num_actions(self, state):
        '''Returns the pair (n1, n2) of action counts in state.'''
        return self._num_actions[state]

    def payoff(self, state, a1, a2):
        raise NotImplementedError

    def transition(self, state, a1, a2):
        raise NotImplementedError

    def payoff_array(self, state):
        '''Flow payoffs in state as an array of shape (n1, n2, 2).'''
        return self._payoffs[state]

    def transition_array(self, state):
        '''Transition probabilities out of state as an array of shape (n1, n2, num_states).'''
        return self._probabilities[state]

    def equilibrium_actions(self, state):
        '''
        Action pairs that may be played on the equilibrium path in state, in
        row-major order when no restriction was given.
        '''
        n1, n2 = self._num_actions[state]
        if self._equilibrium_actions is None or self._equilibrium_actions[state] is None:
            return [(a1, a2) for a1 in range(n1) for a2 in range(n2)]
        return [tuple(pair) for pair in self._equilibrium_actions[state]]

    def _tabulate(self):
        # evaluate payoffs and transitions once; the solver only reads the arrays
        S = self.num_states
        payoffs = []
        probabilities = []
        for state in range(S):
            n1, n2 = self._num_actions[state]
            pay = np.zeros((n1, n2, 2))
            prob = np.zeros((n1, n2, S))
            for a1 in range(n1):
                for a2 in range(n2):
                    pay[a1, a2, :] = self.payoff(state, a1, a2)
                    prob[a1, a2, :] = self.transition(state, a1, a2)
            payoffs.append(pay)
            probabilities.append(prob)

        self._payoffs = payoffs
        self._probabilities = probabilities
        self._check()

    def _check(self):
        for state in range(self.num_states):
            prob = self._probabilities[state]
            if np.any(prob < -1e-12):
                raise GameError("negative transition probability in state %d" % state)
            if np.any(np.abs(prob.sum(axis=2) - 1.0) > 1e-9):
                raise GameError("transition probabilities in state %d do not sum to one" % state)

            n1, n2 = self._num_actions[state]
            for a1, a2 in self.equilibrium_actions(state):
                if not (0 <= a1 < n1 and 0 <= a2 < n2):
                    raise GameError("equilibrium action (%d, %d) out of range in state %d" % (a1, a2, state))


class TabulatedGame(Game):
    '''
    A stochastic game specified by arrays.
    INPUTS:
    delta:          discount factor. float.
    payoffs:        list with one array per state, shape (n1, n2, 2).
                    payoffs[s][a1, a2] is the pair of flow payoffs.
    probabilities:  list with one array per state, shape (n1, n2, num_states).
                    probabilities[s][a1, a2] is the distribution of tomorrow's state.
    unconstrained, equilibrium_actions: see Game.
    '''

    def __init__(self, delta, payoffs, probabilities, unconstrained=(False, False), equilibrium_actions=None):
        if len(payoffs) != len(probabilities):
            raise GameError("payoffs and probabilities must have one entry per state")

        payoffs = [np.asarray(p, dtype=float) for p in payoffs]
        probabilities = [np.asarray(p, dtype=float) for p in probabilities]
        S = len(payoffs)

        for state in range(S):
            pay, prob = payoffs[state], probabilities[state]
            if pay.ndim != 3 or pay.shape[2] != 2:
                raise GameError("payoffs in state %d must have shape (n1, n2, 2)" % state)
            if prob.shape != pay.shape[:2] + (S,):
                raise GameError("probabilities in state %d must have shape (n1, n2, %d)" % (state, S))

        Game.__init__(self, delta, [p.shape[:2] for p in payoffs], unconstrained, equilibrium_actions)
        self._tables = payoffs, probabilities
        self._tabulate()

    def payoff(self, state, a1, a2):
        return self._tables[0][state][a1, a2]

    def transition(self, state, a1, a2):
        return self._tables[1][state][a1, a2]

    @classmethod
    def repeated(cls, p1, p2, delta=0.8, **kwargs):
        '''
        One state game built from the payoff matrices of a repeated game.
        p1:     payoff matrix for player 1. numpy array(n1, n2, ndim=2)
        p2:     payoff matrix for player 2. numpy array(n1, n2, ndim=2)
        '''
        p1 = np.atleast_2d(np.asarray(p1, dtype=float))
        p2 = np.atleast_2d(np.asarray(p2, dtype=float))
        if p1.shape != p2.shape:
            raise GameError("payoff matrices must be of the same size")

        payoffs = np.dstack((p1, p2))
        probabilities = np.ones(p1.shape + (1,))
        return cls(delta, [payoffs], [probabilities], **kwargs)


class RuleGame(Game):
    '''
    A stochastic game whose payoffs and transitions are generated by rules.
    INPUTS:
    delta:              discount factor. float.
    num_actions:        list with one (n1, n2) pair per state.
    payoff_rule:        function (state, a1, a2) -> (u1, u2).
    transition_rule:    function (state, a1, a2) -> sequence of num_states probabilities.
    unconstrained, equilibrium_actions: see Game.
    The rules are evaluated once, at construction.
    '''

    def __init__(self, delta, num_actions, payoff_rule, transition_rule, unconstrained=(False, False), equilibrium_actions=None):
        Game.__init__(self, delta, num_actions, unconstrained, equilibrium_actions)
        self.payoff_rule = payoff_rule
        self.transition_rule = transition_rule
        self._tabulate()

    def payoff(self, state, a1, a2):
        u = np.asarray(self.payoff_rule(state, a1, a2), dtype=float)
        if u.shape != (2,):
            raise GameError("payoff rule must return two payoffs")
        return u

    def transition(self, state, a1, a2):
        p = np.asarray(self.transition_rule(state, a1, a2), dtype=float)
        if p.shape != (self.num_states,):
            raise GameError("transition rule must return %d probabilities" % self.num_states)
        return p
