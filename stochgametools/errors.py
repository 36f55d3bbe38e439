#-------------------------------------------------------------------------------
# Exceptions raised by stochgametools.
#-------------------------------------------------------------------------------


class SGError(Exception):
    '''Base class for this package.'''

    pass


class GameError(SGError):
    '''Raised when a game is specified incorrectly.'''

    pass


class InfeasibleStateError(SGError):
    '''
    Raised when no action pair in some state can be supported by incentive
    compatible continuation values. The equilibrium correspondence is empty.
    '''

    def __init__(self, state):
        self.state = state
        SGError.__init__(self, 'no incentive compatible action pair in state %d' % state)


class NumericalDegenerateError(SGError):
    '''Raised when the geometry of the approximation breaks down numerically.'''

    pass
