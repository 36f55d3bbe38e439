#-------------------------------------------------------------------------------
# Drivers for the twist algorithm: a blocking loop with progress display and
# cooperative cancellation, and an MPI version that splits the incentive
# problems of each iteration across processes.
#-------------------------------------------------------------------------------

import time
import threading
import numpy as np

from .approx import Approximation
from .env import Env
from .result import Status


__all__ = ['Solver', 'solve', 'solve_par']


def _loadbalance(n, p):
    '''
    This function assists with load balancing solve_par.
    It determines how many action pairs are allocated to each process.
    INPUTS:
    n       number of action pairs, int.
    p       number of processes, int.
    OUTPUTS:
    load    list with the number of action pairs assigned to each process,
            preceded by a 0, list.
    '''
    inc = n//p
    R = n - inc*p

    load = [inc for i in range(p)]

    for i in range(R):
        load[i] += 1

    load.append(0)
    load.sort()
    return load


def _report(result):
    if result.status is Status.CONVERGED:
        print('Convergence after %d iterations' % (result.num_iterations))
    elif result.status is Status.FAILED:
        print('Solve failed after %d iterations: %s' % (result.num_iterations, result.failure))
    elif result.cancelled:
        print('Solve cancelled after %d iterations' % (result.num_iterations))
    else:
        print('No Convergence in allowed number of iterations \n')

    print('Elapsed time is %f seconds' % (result.elapsed))


class Solver(object):
    '''
    Runs the twist algorithm on a game until it converges, fails, exhausts
    Env.max_iter or is cancelled.
    INPUTS:
    game:   the game to solve. Game.
    env:    algorithm parameters. Env.
    '''

    def __init__(self, game, env=None):
        self.game = game
        self.env = env if env is not None else Env()
        self.approx = Approximation(game, self.env)
        self._cancel = threading.Event()

    def cancel(self):
        '''
        Asks a running solve to stop. The flag is checked between iterations,
        so the iteration in progress always finishes. A request made before
        solve() is called stops that solve at once; the flag is cleared when
        the solve returns.
        '''
        self._cancel.set()

    def solve(self, display=True, callback=None, pool=None):
        '''
        INPUTS:
        display:    print progress once per revolution. boolean.
        callback:   called with the StepOutcome of every iteration.
        pool:       optional executor used to map the incentive problems of
                    an iteration.
        OUTPUT:
        result      Result
        '''
        start_time = time.time()
        approx = self.approx
        approx.initialize()

        if display is True:
            print('Twist Approximation')

        cancelled = False
        while not approx.status.terminal:
            if self._cancel.is_set():
                approx.end(Status.NOT_CONVERGED)
                cancelled = True
                break

            outcome = approx.step(pool)

            if callback is not None:
                callback(outcome)

            if display is True and outcome.new_revolution:
                print('revolution: %d \t iteration: %d \t tolerance: %f' % (outcome.revolution, outcome.iteration, outcome.error))

        # a cancel request applies to one solve only
        self._cancel.clear()

        result = approx.result()
        result.cancelled = cancelled
        result.elapsed = time.time() - start_time

        if display is True:
            _report(result)
        return result


def solve(game, env=None, display=True, callback=None, pool=None):
    '''
    Computes the subgame perfect equilibrium payoff correspondence of game.
    See Solver.solve.
    '''
    return Solver(game, env).solve(display=display, callback=callback, pool=pool)


def solve_par(game, env=None, display=True, comm=None):
    '''
    MPI version of solve. Every process solves the incentive problems for its
    share of the action pairs, the records are gathered on process 0, which
    alone updates the approximation, and the updated state is broadcast back.
    INPUTS:
    game:       the game to solve. Game.
    env:        algorithm parameters. Env.
    display:    print progress on process 0. boolean.
    comm:       MPI communicator, MPI.COMM_WORLD by default.
    OUTPUT:
    result      Result, on every process
    '''
    # MPI preliminaries
    if comm is None:
        from mpi4py import MPI
        comm = MPI.COMM_WORLD
    rank = comm.Get_rank()
    size = comm.Get_size()

    start_time = time.time()
    approx = Approximation(game, env)
    approx.initialize()

    if rank == 0 and display is True:
        print('Twist Approximation')

    while not approx.status.terminal:
        tasks = approx.tasks()
        slices = _loadbalance(len(tasks), size)
        cumslices = np.cumsum(np.array(slices))
        first = int(cumslices[rank])
        entry = approx.evaluate(tasks[first:first + slices[rank + 1]])

        #------------------------------------------------------------------------
        # gather all the pieces and update on process 0
        #------------------------------------------------------------------------
        gathered = comm.gather(entry, root=0)
        if rank == 0:
            outcome = approx.update([r for part in gathered for r in part])
            if display is True and outcome.new_revolution:
                print('revolution: %d \t iteration: %d \t tolerance: %f' % (outcome.revolution, outcome.iteration, outcome.error))

        state = comm.bcast(approx.state() if rank == 0 else None, root=0)
        if rank != 0:
            approx.load(state)

    result = approx.result()
    result.elapsed = time.time() - start_time

    if rank == 0 and display is True:
        _report(result)
    return result
