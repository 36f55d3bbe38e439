"""Shared pytest fixtures for the stochgametools tests."""

import numpy as np
import pytest

from stochgametools import Env, TabulatedGame


# Prisoners' dilemma used throughout the supergame literature.
PD_P1 = np.array([[4.0, 0.0], [6.0, 2.0]])
PD_P2 = PD_P1.T


def two_state_arrays():
    """Payoffs and transitions of a two-state prisoners' dilemma."""
    payoffs = [
        np.array([[[3.0, 3.0], [-1.0, 4.0]],
                  [[4.0, -1.0], [0.0, 0.0]]]),
        np.array([[[2.0, 2.0], [-1.0, 3.0]],
                  [[3.0, -1.0], [0.0, 0.0]]]),
    ]
    probabilities = [
        np.array([[[0.9, 0.1], [0.5, 0.5]],
                  [[0.5, 0.5], [0.2, 0.8]]]),
        np.array([[[0.6, 0.4], [0.3, 0.7]],
                  [[0.3, 0.7], [0.1, 0.9]]]),
    ]
    return payoffs, probabilities


@pytest.fixture
def pd_game():
    """Repeated prisoners' dilemma with delta = 0.85."""
    return TabulatedGame.repeated(PD_P1, PD_P2, delta=0.85)


@pytest.fixture
def two_state_game():
    """Two-state prisoners' dilemma with delta = 0.85."""
    payoffs, probabilities = two_state_arrays()
    return TabulatedGame(0.85, payoffs, probabilities)


@pytest.fixture
def pennies_game():
    """Matching pennies: no pure action pair can ever be incentive compatible."""
    p1 = np.array([[1.0, -1.0], [-1.0, 1.0]])
    return TabulatedGame.repeated(p1, -p1, delta=0.3)


@pytest.fixture
def env():
    """Settings loose enough for the tests to run quickly."""
    return Env(tol=1e-5, max_iter=20000)
