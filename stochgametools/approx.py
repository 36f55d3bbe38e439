#-------------------------------------------------------------------------------
# Twist approximation of the subgame perfect equilibrium payoff correspondence
# of a two player stochastic game with perfect monitoring and public
# randomization.
#
# The approximation W holds one convex polygon per state. It starts as the
# convex hull of all stage payoffs, which contains every equilibrium payoff.
# Each iteration fixes a search direction d and, for every state, finds the
# payoff in B(W)(s) that is extreme in d, where B(W)(s) is the set of payoffs
# generated by action pairs that are incentive compatible with continuation
# values drawn from W. That payoff is the state's pivot and is added to the
# frontier polygon. The direction then rotates to the next angle at which the
# pivot of some state moves to a new vertex, so a revolution of the direction
# traces the boundary of B(W) one vertex at a time. At the end of a revolution
# the frontier replaces W. Since B is monotone and B(W) is a subset of W, the
# polygons shrink towards the equilibrium correspondence.
#-------------------------------------------------------------------------------

import numpy as np

from .action import ActionSolver, Snapshot
from .env import Env
from .errors import SGError, InfeasibleStateError, NumericalDegenerateError
from .geometry import Polygon, polygon_hausdorff
from .result import Status, StepOutcome, IterationRecord, IterationLog, Result


__all__ = ['Approximation']

ANGLE_EPS = 1e-12


def _best(records, direction, tol):
    '''
    Record with the largest directional value. Values within tol of the
    maximum tie; ties go to the payoff furthest counter-clockwise and then to
    the record that comes first.
    '''
    vmax = max(r.value for r in records)
    t = np.array([-direction[1], direction[0]])

    best = None
    for r in records:
        if r.value < vmax - tol:
            continue
        if best is None or np.dot(t, r.payoff) > np.dot(t, best.payoff) + tol:
            best = r
    return best


class Approximation(object):
    '''
    One run of the twist algorithm.
    INPUTS:
    game:   the game to solve. Game.
    env:    algorithm parameters. Env.
    Call initialize() and then step() until status.terminal. The engine never
    raises from step(): infeasibility and numerical breakdowns end the run with
    Status.FAILED and the exception is kept in failure.
    '''

    def __init__(self, game, env=None):
        self.game = game
        self.env = env if env is not None else Env()
        self.solver = ActionSolver(game, self.env)
        self.log = IterationLog(self.env.store_iterations)

        self.status = Status.NOT_STARTED
        self.failure = None
        self.num_iterations = 0
        self.num_revolutions = 0
        self.angle = self.env.start_angle
        self.error = np.inf
        self.distances = []
        self.trajectory = []
        self.pivots = None
        self.actions = None

        self._approx = None
        self._frontier = None
        self._snapshot = None
        self._hints = None
        self._revolution_end = None
        self._distance = np.inf
        self._outcome = None

    #---------------------------------------------------------------------------
    # accessors
    #---------------------------------------------------------------------------
    @property
    def direction(self):
        return np.array([np.cos(self.angle), np.sin(self.angle)])

    @property
    def threats(self):
        if self._snapshot is None:
            return None
        return self._snapshot.threats

    @property
    def iterations(self):
        return self.log.records()

    def polygons(self):
        '''Vertices of the current approximation, one array per state.'''
        return [p.vertices() for p in self._approx]

    def frontier(self):
        '''Vertices traced so far in the current revolution, one array per state.'''
        return [p.vertices() for p in self._frontier]

    #---------------------------------------------------------------------------
    # state machine
    #---------------------------------------------------------------------------
    def initialize(self):
        '''
        Sets every state's polygon to the convex hull of all stage payoffs,
        the threats to its minimum, and seeds the pivots in the start direction.
        '''
        env = self.env
        S = self.game.num_states

        self.log.clear()
        self.status = Status.ITERATING
        self.failure = None
        self.num_iterations = 0
        self.num_revolutions = 0
        self.angle = env.start_angle
        self.error = np.inf
        self.distances = []
        self._revolution_end = self.angle + 2*np.pi
        self._distance = np.inf

        stage = np.vstack([self.game.payoff_array(s).reshape(-1, 2) for s in range(S)])
        if not np.all(np.isfinite(stage)):
            self._approx = [Polygon(env.merge_tol) for s in range(S)]
            self._frontier = [Polygon(env.merge_tol) for s in range(S)]
            self.trajectory = []
            return self.end(Status.FAILED, NumericalDegenerateError("stage payoffs must be finite"))

        feasible = Polygon.from_points(stage, env.merge_tol)
        self._approx = [feasible.copy() for s in range(S)]
        self._frontier = [Polygon(env.merge_tol) for s in range(S)]
        self._snapshot = Snapshot(self.game, self.polygons(), env.ic_tol)

        self._hints = [None]*S
        pivots = []
        d = self.direction
        for s in range(S):
            self._hints[s], p = self._approx[s].extreme(d)
            pivots.append(p)
        self.pivots = np.array(pivots)
        self.actions = [None]*S
        self.trajectory = [self.pivots.copy()]

        self._outcome = self._make_outcome()
        return self._outcome

    def tasks(self):
        '''The (state, action pair) combinations evaluated in each iteration.'''
        return [(s, a) for s in range(self.game.num_states) for a in self.game.equilibrium_actions(s)]

    def evaluate(self, tasks, pool=None):
        '''
        Solves the incentive problem for each (state, action pair) in tasks
        against the current snapshot. pool is anything with a map method,
        such as a concurrent.futures executor.
        '''
        d = self.direction
        args = [(self._snapshot, s, a, d) for s, a in tasks]
        mapper = map if pool is None else pool.map
        return list(mapper(self.solver.solve_task, args))

    def step(self, pool=None):
        '''
        Runs one iteration and returns a StepOutcome. Does nothing once the run
        has ended.
        '''
        if self.status is Status.NOT_STARTED:
            self.initialize()
        if self.status.terminal:
            return self._outcome

        try:
            records = self.evaluate(self.tasks(), pool)
        except SGError as err:
            return self.end(Status.FAILED, err)
        return self.update(records)

    def update(self, records):
        '''
        Moves the pivots given the action records of the current iteration,
        rotates the direction and, at the end of a revolution, replaces the
        approximation. Returns a StepOutcome.
        '''
        if self.status.terminal:
            return self._outcome
        try:
            return self._update(records)
        except SGError as err:
            return self.end(Status.FAILED, err)

    def end(self, status=None, failure=None):
        '''
        Freezes the run. status defaults to NOT_CONVERGED, which is what a
        forced stop before convergence means. Later calls do nothing.
        '''
        if self.status.terminal:
            return self._outcome
        self.status = status if status is not None else Status.NOT_CONVERGED
        self.failure = failure
        self._outcome = self._make_outcome()
        return self._outcome

    def result(self):
        '''Copies the current state of the run into a Result.'''
        return Result(game=self.game,
                      status=self.status,
                      polygons=self.polygons(),
                      threats=None if self.threats is None else self.threats.copy(),
                      trajectory=np.array(self.trajectory),
                      iterations=self.log.records(),
                      distances=list(self.distances),
                      error=self.error,
                      num_iterations=self.num_iterations,
                      num_revolutions=self.num_revolutions,
                      failure=self.failure,
                      frontier=self.frontier())

    #---------------------------------------------------------------------------
    # iteration
    #---------------------------------------------------------------------------
    def _update(self, records):
        env = self.env
        S = self.game.num_states
        d = self.direction

        by_state = [[] for s in range(S)]
        for r in records:
            by_state[r.state].append(r)

        #-----------------------------------------------------------------------
        # Step 1:
        # the best incentive compatible payoff in each state becomes its pivot
        #-----------------------------------------------------------------------
        pivots = np.empty((S, 2))
        actions = []
        distance = 0.0
        for s in range(S):
            live = [r for r in by_state[s] if r.feasible]
            if not live:
                raise InfeasibleStateError(s)

            best = _best(live, d, env.ic_tol)
            if not np.all(np.isfinite(best.payoff)):
                raise NumericalDegenerateError("non-finite pivot in state %d" % s)

            # drop of the support function relative to the approximation in use
            self._hints[s], q = self._approx[s].extreme(d, self._hints[s])
            drop = float(np.dot(d, q)) - best.value
            if drop < -env.tol:
                raise NumericalDegenerateError("pivot in state %d left the approximation by %g" % (s, -drop))

            pivots[s] = best.payoff
            actions.append(best.action)
            distance = max(distance, drop)

        #-----------------------------------------------------------------------
        # Step 2:
        # add the pivots to the frontier
        #-----------------------------------------------------------------------
        for s in range(S):
            self._frontier[s].insert(pivots[s])
            if not self._frontier[s].is_convex():
                raise NumericalDegenerateError("frontier in state %d is not convex" % s)

        self.pivots = pivots
        self.actions = actions
        self.trajectory.append(pivots.copy())
        self.num_iterations += 1
        self._distance = distance

        self.log.append(IterationRecord(iteration=self.num_iterations,
                                        revolution=self.num_revolutions,
                                        angle=self.angle,
                                        direction=d,
                                        pivots=pivots.copy(),
                                        actions=list(actions),
                                        threats=self.threats.copy(),
                                        distance=distance,
                                        records=by_state if env.store_actions else None))

        #-----------------------------------------------------------------------
        # Step 3:
        # rotate to the next direction in which some pivot changes
        #-----------------------------------------------------------------------
        self.angle += self._next_angle(by_state, pivots)

        new_revolution = self.angle >= self._revolution_end - ANGLE_EPS
        if new_revolution:
            self._complete_revolution()

        if not self.status.terminal and self.num_iterations >= env.max_iter:
            self.end(Status.NOT_CONVERGED)

        self._outcome = self._make_outcome(new_revolution)
        return self._outcome

    def _next_angle(self, by_state, pivots):
        '''
        Smallest counter-clockwise rotation after which a payoff other than the
        pivot becomes extreme in some state (rotating calipers over every
        payoff the live action pairs generate), capped at the end of the
        revolution.
        '''
        rotation = self._revolution_end - self.angle
        for s, records in enumerate(by_state):
            points = [r.payoffs for r in records if r.feasible]
            e = np.vstack(points) - pivots[s]
            e = e[np.hypot(e[:, 0], e[:, 1]) > self.env.merge_tol]
            if len(e) == 0:
                continue

            # q overtakes the pivot once the direction is perpendicular to q - pivot
            ahead = np.mod(np.arctan2(e[:, 1], e[:, 0]) - np.pi/2 - self.angle, 2*np.pi)
            ahead = ahead[ahead > ANGLE_EPS]
            if len(ahead):
                rotation = min(rotation, ahead.min())
        return rotation

    def _complete_revolution(self):
        S = self.game.num_states

        self.angle = self._revolution_end
        self._revolution_end += 2*np.pi
        self.num_revolutions += 1

        # how far the traced boundary moved from the approximation, in any direction
        self.error = max(polygon_hausdorff(old.vertices(), new.vertices())
                         for old, new in zip(self._approx, self._frontier))
        self.distances.append(self.error)

        self._approx = self._frontier
        self._frontier = [Polygon(self.env.merge_tol) for s in range(S)]
        self._hints = [None]*S
        self._snapshot = Snapshot(self.game, self.polygons(), self.env.ic_tol)

        if self.error <= self.env.tol:
            self.end(Status.CONVERGED)

    def _make_outcome(self, new_revolution=False):
        return StepOutcome(iteration=self.num_iterations,
                           revolution=self.num_revolutions,
                           distance=self._distance,
                           error=self.error,
                           status=self.status,
                           new_revolution=new_revolution,
                           failure=self.failure)

    #---------------------------------------------------------------------------
    # support for drivers that keep copies of the engine in other processes
    #---------------------------------------------------------------------------
    def state(self):
        '''Everything that changes between iterations, as a picklable dict.'''
        return {k: v for k, v in self.__dict__.items() if k not in ('game', 'env', 'solver')}

    def load(self, state):
        '''Replaces the changing part of the engine with state().'''
        self.__dict__.update(state)
