#!/usr/bin/env python
#----------------------------------------------------------------------------
# This python script uses the stochgametools library to find the set of
# subgame perfect equilibrium payoffs in a two state prisoners dilemma,
# splitting the work of each iteration across MPI processes.
#
#   mpiexec -n 4 python prisoners_par.py
#----------------------------------------------------------------------------

import numpy as np
import stochgametools as sgt
from mpi4py import MPI

# MPI preliminaries
comm = MPI.COMM_WORLD
rank = comm.Get_rank()

# cooperation is worth more in state 0, and cooperating makes state 0 likely
payoffs = [np.array([[[3, 3], [-1, 4]], [[4, -1], [0, 0]]]),
           np.array([[[2, 2], [-1, 3]], [[3, -1], [0, 0]]])]
probabilities = [np.array([[[0.9, 0.1], [0.5, 0.5]], [[0.5, 0.5], [0.2, 0.8]]]),
                 np.array([[[0.6, 0.4], [0.3, 0.7]], [[0.3, 0.7], [0.1, 0.9]]])]

game = sgt.TabulatedGame(0.85, payoffs, probabilities)

# trace the equilibrium payoffs
result = sgt.solve_par(game, sgt.Env(tol=1e-6), comm=comm)

# display results
if rank == 0:
    for state in range(game.num_states):
        print('state %d' % state)
        print(result.polygons[state])
