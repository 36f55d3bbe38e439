#!/usr/bin/env python
#----------------------------------------------------------------------------
# This python script uses the stochgametools library to find the set of
# subgame perfect equilibrium payoffs in a repeated battle of the sexes.
#----------------------------------------------------------------------------

import numpy as np
import stochgametools as sgt

# determine payoff matrices p1 and p2
p1 = np.array([[3, 1], [0, 2]])
p2 = np.array([[2, 1], [0, 3]])

game = sgt.TabulatedGame.repeated(p1, p2, delta=0.8)

# trace the equilibrium payoffs
result = sgt.solve(game, sgt.Env(tol=1e-6))

# display results
print(result)
print(result.polygons[0])
