#-------------------------------------------------------------------------------
# Status codes, per-iteration records and the result of a solve.
#-------------------------------------------------------------------------------

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

import numpy as np


__all__ = ['Status', 'StepOutcome', 'IterationRecord', 'IterationLog', 'Result']


class Status(Enum):
    NOT_STARTED = 'not started'
    ITERATING = 'iterating'
    CONVERGED = 'converged'
    NOT_CONVERGED = 'not converged'
    FAILED = 'failed'

    @property
    def terminal(self):
        return self in (Status.CONVERGED, Status.NOT_CONVERGED, Status.FAILED)


@dataclass
class StepOutcome:
    '''
    What one call to Approximation.step() did.
    distance:       drop of the support function in this iteration's direction.
    error:          Hausdorff distance between the approximation and the
                    boundary traced in the last completed revolution, largest
                    over states (inf before the first revolution ends).
    new_revolution: True if this iteration completed a revolution.
    '''
    iteration: int
    revolution: int
    distance: float
    error: float
    status: Status
    new_revolution: bool = False
    failure: Optional[Exception] = None

    @property
    def converged(self):
        return self.status is Status.CONVERGED

    @property
    def failed(self):
        return self.status is Status.FAILED

    @property
    def terminal(self):
        return self.status.terminal


@dataclass
class IterationRecord:
    '''
    How the pivot was generated in one iteration.
    pivots and threats have one row per state; actions holds the action pair
    that generated each state's pivot. records, when kept, holds the list of
    ActionRecords for each state.
    '''
    iteration: int
    revolution: int
    angle: float
    direction: np.ndarray
    pivots: np.ndarray
    actions: list
    threats: np.ndarray
    distance: float
    records: Optional[list] = None


class IterationLog(object):
    '''
    Keeps IterationRecords according to a storage mode: 'none' keeps nothing,
    'all' keeps everything and 'last' keeps the records of the latest
    revolution only.
    '''

    def __init__(self, mode='all'):
        self.mode = mode
        self._records = []

    def append(self, record):
        if self.mode == 'none':
            return
        if self.mode == 'last' and self._records and self._records[-1].revolution != record.revolution:
            self._records = []
        self._records.append(record)

    def clear(self):
        self._records = []

    def records(self):
        return list(self._records)

    def __len__(self):
        return len(self._records)

    def __iter__(self):
        return iter(self._records)


@dataclass
class Result:
    '''
    Output of a solve.
    polygons:       vertices of the final approximation, one array (n, 2) per state.
    threats:        threat payoffs, one row per state.
    trajectory:     pivots at every iteration. array (num_iterations + 1, num_states, 2)
    iterations:     stored IterationRecords.
    distances:      error at the end of each revolution (see StepOutcome).
    '''
    game: Any
    status: Status
    polygons: List[np.ndarray]
    threats: np.ndarray
    trajectory: np.ndarray
    iterations: List[IterationRecord]
    distances: List[float]
    error: float
    num_iterations: int
    num_revolutions: int
    failure: Optional[Exception] = None
    cancelled: bool = False
    elapsed: float = 0.0
    frontier: List[np.ndarray] = field(default_factory=list)

    @property
    def converged(self):
        return self.status is Status.CONVERGED

    def polygon(self, state):
        return self.polygons[state]

    def __repr__(self):
        return 'Result(status=%s, iterations=%d, revolutions=%d, error=%g)' % (
            self.status.value, self.num_iterations, self.num_revolutions, self.error)
