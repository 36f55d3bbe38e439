#-------------------------------------------------------------------------------
# Parameters that control the behavior of the twist algorithm.
#-------------------------------------------------------------------------------

from dataclasses import dataclass


STORE_MODES = ('none', 'all', 'last')


@dataclass
class Env:
    '''
    Settings for one solve.
    tol:                convergence threshold on the revolution error. float.
    ic_tol:             slack allowed in incentive constraints and geometric
                        comparisons. float.
    max_iter:           maximum number of iterations (pivot updates). int.
    store_iterations:   'none', 'all' or 'last' (only the final revolution).
    store_actions:      keep the action records in each stored iteration. bool.
    start_angle:        angle of the first search direction, in radians. float.
    '''
    tol: float = 1e-6
    ic_tol: float = 1e-10
    max_iter: int = 10000
    store_iterations: str = 'all'
    store_actions: bool = False
    start_angle: float = 0.0

    def __post_init__(self):
        if self.tol <= 0:
            raise ValueError("tol must be positive")
        if self.ic_tol < 0 or self.ic_tol >= self.tol:
            raise ValueError("ic_tol must be nonnegative and smaller than tol")
        if self.max_iter < 1:
            raise ValueError("max_iter must be at least 1")
        if self.store_iterations not in STORE_MODES:
            raise ValueError("store_iterations must be one of %s" % (STORE_MODES,))

    @property
    def merge_tol(self):
        # vertices closer than this to the chord of their neighbours are dropped
        return 0.1*self.tol
