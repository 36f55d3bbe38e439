#!/usr/bin/env python
#----------------------------------------------------------------------------
# This python script uses the stochgametools library to find the set of
# subgame perfect equilibrium payoffs in a Kocherlakota style risk sharing
# model. Each period one unit of a good is split between two households;
# the state is player 1's share of the endowment. Each household can hand
# part of its endowment to the other, and only one of them does so on the
# equilibrium path.
#----------------------------------------------------------------------------

import numpy as np
import stochgametools as sgt

delta = 0.85
num_endowments = 3
c2e = 5                         # consumption steps per endowment step
persistence = 0.0

units = c2e*(num_endowments - 1)


def endowment(state):
    # units of the good owned by each player in state
    e1 = state*c2e
    return e1, units - e1


def payoff(state, t1, t2):
    e1, e2 = endowment(state)
    c1 = (e1 - t1 + t2)/float(units)
    c2 = (e2 - t2 + t1)/float(units)
    return np.sqrt(c1), np.sqrt(c2)


def transition(state, t1, t2):
    prob = np.ones(num_endowments)*(1 - persistence)/num_endowments
    prob[state] += persistence
    return prob


num_actions = []
equilibrium_actions = []
for state in range(num_endowments):
    e1, e2 = endowment(state)
    num_actions.append((e1 + 1, e2 + 1))
    pairs = [(t1, 0) for t1 in range(e1 + 1)] + [(0, t2) for t2 in range(1, e2 + 1)]
    equilibrium_actions.append(pairs)

game = sgt.RuleGame(delta, num_actions, payoff, transition,
                    equilibrium_actions=equilibrium_actions)

env = sgt.Env(tol=1e-6, store_iterations='last')
result = sgt.solve(game, env)

# display results
for state in range(game.num_states):
    print('endowment %d: threats %s' % (state, result.threats[state]))
    print(result.polygons[state])
