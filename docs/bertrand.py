#!/usr/bin/env python
#----------------------------------------------------------------------------
# This python script uses the stochgametools library to find the set of
# subgame perfect equilibrium payoffs in a 2-firm bertrand game whose demand
# moves between a boom and a bust. Demand in a boom is more likely to persist
# when prices are low.
#----------------------------------------------------------------------------

import numpy as np
import stochgametools as sgt

cost = np.array([0.0, 0.0])
prices = np.linspace(0, 6, 7)
market = [100.0, 60.0]          # demand intercept in boom and bust


def payoff(state, j, k):
    '''
    Flow profits when firm 1 charges prices[j] and firm 2 prices[k]. The
    cheaper firm serves the whole market; equal prices split it.
    '''
    p1, p2 = prices[j], prices[k]
    p = min(p1, p2)
    q = max(market[state] - 10*p, 0)

    if p1 < p2:
        q1, q2 = q, 0.0
    elif p2 < p1:
        q1, q2 = 0.0, q
    else:
        q1, q2 = q/2.0, q/2.0

    return max(q1*(p1 - cost[0]), 0), max(q2*(p2 - cost[1]), 0)


def transition(state, j, k):
    p = min(prices[j], prices[k])
    stay = 0.9 - 0.05*p if state == 0 else 0.7
    if state == 0:
        return [stay, 1 - stay]
    return [1 - stay, stay]


n = len(prices)
game = sgt.RuleGame(0.9, [(n, n), (n, n)], payoff, transition)

# trace the equilibrium payoffs
result = sgt.solve(game, sgt.Env(tol=1e-4))

# display results
for state in range(game.num_states):
    print('state %d' % state)
    print(result.polygons[state])
