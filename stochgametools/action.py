#-------------------------------------------------------------------------------
# Incentive compatibility problem for a single action pair.
#
# Given the current approximation W of the equilibrium payoff correspondence
# and the threat payoffs (the worst payoff in W for each player and state),
# an action pair a in state s can be supported if some expected continuation
# value w in sum_s' p(s'|s,a) W(s') satisfies, for each player i,
#
#   (1-delta)*g_i(a) + delta*w_i >= (1-delta)*g_i(a_i', a_-i)
#                                   + delta*sum_s' p(s'|s,a_i',a_-i) threat_i(s')
#
# for every deviation a_i'. Each player's constraint is a half-plane in w, so
# the feasible continuation values are a convex polygon.
#-------------------------------------------------------------------------------

import numpy as np

from .geometry import minkowski_sum, clip, extreme_index


__all__ = ['Snapshot', 'ActionRecord', 'ActionSolver']

_AXES = np.eye(2)


class Snapshot(object):
    '''
    A frozen copy of the approximation that incentive problems are solved against.
    INPUTS:
    game:           the game being solved. Game.
    approximation:  list with one vertex array (n, 2) per state.
    tol:            tolerance for the hull computations. float.
    The threat payoffs and the expected continuation sets of every equilibrium
    action pair are computed once, here, and never change afterwards.
    '''

    def __init__(self, game, approximation, tol=0.0):
        self.approximation = [np.array(v, dtype=float) for v in approximation]
        self.threats = np.array([v.min(axis=0) for v in self.approximation])

        self._expected = {}
        for state in range(game.num_states):
            prob = game.transition_array(state)
            for a1, a2 in game.equilibrium_actions(state):
                self._expected[state, a1, a2] = minkowski_sum(self.approximation, prob[a1, a2], tol)

    def expected(self, state, action):
        '''Expected continuation values available after action in state.'''
        a1, a2 = action
        return self._expected[state, a1, a2]


class ActionRecord(object):
    '''
    Solution of the incentive problem for one action pair in one iteration.
    state, action:  where the action pair (a1, a2) is played.
    flow:           flow payoffs of the action pair. array (2,)
    min_ic:         smallest expected continuation values that deter every
                    deviation (-inf for an unconstrained player). array (2,)
    continuations:  the incentive compatible expected continuation values, a
                    convex polygon (k, 2). Empty when the pair cannot be supported.
    continuation:   the element of continuations that is extreme in the test
                    direction, or None.
    payoff:         (1-delta)*flow + delta*continuation, or None.
    payoffs:        the polygon of payoffs the pair generates. array (k, 2)
    value:          test direction . payoff, -inf when infeasible.
    '''

    def __init__(self, state, action, flow, min_ic, continuations, continuation=None, payoff=None, payoffs=None, value=-np.inf):
        self.state = state
        self.action = action
        self.flow = flow
        self.min_ic = min_ic
        self.continuations = continuations
        self.continuation = continuation
        self.payoff = payoff
        self.payoffs = payoffs
        self.value = value

    @property
    def feasible(self):
        return len(self.continuations) > 0

    def __repr__(self):
        if not self.feasible:
            return 'ActionRecord(state=%d, action=%s, infeasible)' % (self.state, self.action)
        return 'ActionRecord(state=%d, action=%s, payoff=%s, value=%f)' % (self.state, self.action, self.payoff, self.value)


class ActionSolver(object):
    '''
    Solves the incentive problem of an action pair against a Snapshot.
    solve() has no side effects, so calls for different action pairs can run in
    any order or in parallel.
    '''

    def __init__(self, game, env):
        self.delta = game.delta
        self.unconstrained = game.unconstrained
        self.tol = env.ic_tol
        self._payoffs = [game.payoff_array(s) for s in range(game.num_states)]
        self._probabilities = [game.transition_array(s) for s in range(game.num_states)]

    def min_ic(self, snapshot, state, action):
        '''
        Minimum expected continuation value for each player that makes action
        incentive compatible, given the threat payoffs in snapshot.
        '''
        a1, a2 = action
        delta = self.delta
        pay = self._payoffs[state]
        prob = self._probabilities[state]
        threats = snapshot.threats

        # player 1 deviates within column a2, player 2 within row a1
        dev1 = (1 - delta)*pay[:, a2, 0] + delta*np.dot(prob[:, a2, :], threats[:, 0])
        dev2 = (1 - delta)*pay[a1, :, 1] + delta*np.dot(prob[a1, :, :], threats[:, 1])

        m = np.empty(2)
        for i, dev in enumerate((dev1, dev2)):
            if self.unconstrained[i]:
                m[i] = -np.inf
            else:
                m[i] = (np.max(dev) - (1 - delta)*pay[a1, a2, i])/delta
        return m

    def solve(self, snapshot, state, action, direction):
        '''
        Extreme incentive compatible payoff of action in state, in direction.
        INPUTS:
        snapshot:   the approximation to draw continuation values from. Snapshot.
        state:      current state. int.
        action:     action pair (a1, a2).
        direction:  unit vector. numpy array (2,)
        OUTPUTS:
        record:     ActionRecord, infeasible if no continuation value deters
                    both players from deviating
        '''
        action = tuple(action)
        delta = self.delta
        flow = self._payoffs[state][action]
        m = self.min_ic(snapshot, state, action)

        feasible = snapshot.expected(state, action)
        for i in range(2):
            if np.isfinite(m[i]):
                feasible = clip(feasible, _AXES[i], m[i], self.tol)

        if len(feasible) == 0:
            return ActionRecord(state, action, flow, m, feasible)

        w = feasible[extreme_index(feasible, direction, self.tol)]
        payoff = (1 - delta)*flow + delta*w
        return ActionRecord(state, action, flow, m, feasible,
                            continuation=w,
                            payoff=payoff,
                            payoffs=(1 - delta)*flow + delta*feasible,
                            value=float(np.dot(direction, payoff)))

    def solve_task(self, task):
        '''solve() for a (snapshot, state, action, direction) tuple, for use with map.'''
        return self.solve(*task)
