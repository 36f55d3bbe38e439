"""Tests for game construction, validation and Env settings."""

import numpy as np
import pytest

from stochgametools import Env, GameError, RuleGame, TabulatedGame

from conftest import PD_P1, PD_P2, two_state_arrays


class TestTabulatedGame:
    """Tests for TabulatedGame."""

    def test_repeated_game_shapes(self):
        game = TabulatedGame.repeated(PD_P1, PD_P2, delta=0.9)
        assert game.num_states == 1
        assert game.num_actions(0) == (2, 2)
        assert game.payoff_array(0).shape == (2, 2, 2)
        assert game.transition_array(0).shape == (2, 2, 1)
        assert game.payoff_array(0)[1, 0].tolist() == [6.0, 0.0]

    def test_two_state_game(self, two_state_game):
        assert two_state_game.num_states == 2
        assert two_state_game.delta == 0.85
        assert two_state_game.transition_array(1)[0, 0].tolist() == [0.6, 0.4]

    def test_default_equilibrium_actions_are_row_major(self):
        p = np.zeros((2, 3))
        game = TabulatedGame.repeated(p, p)
        assert game.equilibrium_actions(0) == [(0, 0), (0, 1), (0, 2), (1, 0), (1, 1), (1, 2)]

    def test_restricted_equilibrium_actions(self):
        game = TabulatedGame.repeated(PD_P1, PD_P2, equilibrium_actions=[[(1, 1), (0, 0)]])
        assert game.equilibrium_actions(0) == [(1, 1), (0, 0)]

    def test_unconstrained_flags(self):
        game = TabulatedGame.repeated(PD_P1, PD_P2, unconstrained=(True, False))
        assert game.unconstrained == (True, False)

    @pytest.mark.parametrize("delta", [0.0, 1.0, -0.5, 1.5])
    def test_bad_discount_factor(self, delta):
        with pytest.raises(GameError):
            TabulatedGame.repeated(PD_P1, PD_P2, delta=delta)

    def test_mismatched_matrices(self):
        with pytest.raises(GameError):
            TabulatedGame.repeated(PD_P1, np.zeros((3, 2)))

    def test_probabilities_must_sum_to_one(self):
        payoffs, probabilities = two_state_arrays()
        probabilities[0] = probabilities[0].copy()
        probabilities[0][0, 0] = [0.5, 0.4]
        with pytest.raises(GameError):
            TabulatedGame(0.85, payoffs, probabilities)

    def test_negative_probabilities(self):
        payoffs, probabilities = two_state_arrays()
        probabilities[1] = probabilities[1].copy()
        probabilities[1][1, 1] = [1.5, -0.5]
        with pytest.raises(GameError):
            TabulatedGame(0.85, payoffs, probabilities)

    def test_probability_shape(self):
        payoffs, probabilities = two_state_arrays()
        with pytest.raises(GameError):
            TabulatedGame(0.85, payoffs, [p[..., :1] for p in probabilities])

    def test_one_entry_per_state(self):
        payoffs, probabilities = two_state_arrays()
        with pytest.raises(GameError):
            TabulatedGame(0.85, payoffs, probabilities[:1])

    def test_equilibrium_action_out_of_range(self):
        with pytest.raises(GameError):
            TabulatedGame.repeated(PD_P1, PD_P2, equilibrium_actions=[[(2, 0)]])

    def test_equilibrium_actions_for_every_state(self):
        payoffs, probabilities = two_state_arrays()
        with pytest.raises(GameError):
            TabulatedGame(0.85, payoffs, probabilities, equilibrium_actions=[None])


class TestRuleGame:
    """Tests for RuleGame."""

    def test_matches_tabulated_game(self, two_state_game):
        payoffs, probabilities = two_state_arrays()
        game = RuleGame(0.85, [(2, 2), (2, 2)],
                        lambda s, a1, a2: payoffs[s][a1, a2],
                        lambda s, a1, a2: probabilities[s][a1, a2])

        for s in range(2):
            assert np.array_equal(game.payoff_array(s), two_state_game.payoff_array(s))
            assert np.array_equal(game.transition_array(s), two_state_game.transition_array(s))

    def test_states_may_differ_in_size(self):
        game = RuleGame(0.5, [(1, 3), (2, 1)],
                        lambda s, a1, a2: (a1, a2),
                        lambda s, a1, a2: (0.5, 0.5))
        assert game.payoff_array(0).shape == (1, 3, 2)
        assert game.payoff_array(1).shape == (2, 1, 2)
        assert game.equilibrium_actions(1) == [(0, 0), (1, 0)]

    def test_rules_are_evaluated_once(self):
        calls = []

        def payoff(s, a1, a2):
            calls.append((s, a1, a2))
            return (0.0, 0.0)

        game = RuleGame(0.5, [(2, 2)], payoff, lambda s, a1, a2: [1.0])
        game.payoff_array(0)
        game.payoff_array(0)
        assert len(calls) == 4

    def test_payoff_rule_must_return_pairs(self):
        with pytest.raises(GameError):
            RuleGame(0.5, [(1, 1)], lambda s, a1, a2: (1.0, 2.0, 3.0), lambda s, a1, a2: [1.0])

    def test_transition_rule_length(self):
        with pytest.raises(GameError):
            RuleGame(0.5, [(1, 1)], lambda s, a1, a2: (1.0, 2.0), lambda s, a1, a2: [0.5, 0.5])

    def test_empty_action_set(self):
        with pytest.raises(GameError):
            RuleGame(0.5, [(0, 1)], lambda s, a1, a2: (1.0, 2.0), lambda s, a1, a2: [1.0])

    def test_no_states(self):
        with pytest.raises(GameError):
            RuleGame(0.5, [], lambda s, a1, a2: (1.0, 2.0), lambda s, a1, a2: [])


class TestEnv:
    """Tests for Env validation."""

    def test_defaults(self):
        env = Env()
        assert env.tol == 1e-6
        assert env.store_iterations == 'all'
        assert env.merge_tol == pytest.approx(1e-7)

    @pytest.mark.parametrize("kwargs", [
        {"tol": 0.0},
        {"tol": 1e-6, "ic_tol": 1e-5},
        {"ic_tol": -1.0},
        {"max_iter": 0},
        {"store_iterations": "some"},
    ])
    def test_invalid_settings(self, kwargs):
        with pytest.raises(ValueError):
            Env(**kwargs)
