#-------------------------------------------------------------------------------
# stochgametools computes the subgame perfect equilibrium payoff
# correspondence of two player stochastic games with perfect monitoring and
# public randomization. It implements the twist algorithm of Abreu, Brooks
# and Sannikov (2016).
#-------------------------------------------------------------------------------

from .env import Env
from .errors import SGError, GameError, InfeasibleStateError, NumericalDegenerateError
from .game import Game, TabulatedGame, RuleGame
from .geometry import hausdorffnorm
from .approx import Approximation
from .result import Status, StepOutcome, IterationRecord, Result
from .solver import Solver, solve, solve_par


__all__ = ['Env', 'SGError', 'GameError', 'InfeasibleStateError', 'NumericalDegenerateError',
           'Game', 'TabulatedGame', 'RuleGame', 'hausdorffnorm', 'Approximation',
           'Status', 'StepOutcome', 'IterationRecord', 'Result',
           'Solver', 'solve', 'solve_par']     # this list gives what is imported with "from stochgametools import *"
