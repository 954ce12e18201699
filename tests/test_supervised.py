"""
Tests for supervised estimation from labelled state sequences.
"""

import numpy as np
import pytest

from discrete_hmm.exceptions import InvalidParametersError, SymbolOutOfRangeError
from discrete_hmm.hmm.model import DiscreteHMM
from discrete_hmm.train import train_supervised


class TestSupervisedEstimation:
    """Counting estimates of pi, A and B."""

    def test_counts(self, demo_model):
        train_supervised(demo_model,
                         [[0, 0, 1, 1], [1, 0]],
                         [[0, 0, 1, 1], [1, 0]])

        np.testing.assert_allclose(demo_model.initial, [0.5, 0.5])
        np.testing.assert_allclose(demo_model.transition, [[0.5, 0.5], [0.5, 0.5]])
        np.testing.assert_allclose(demo_model.emission(0), [1.0, 0.0])
        np.testing.assert_allclose(demo_model.emission(1), [0.0, 1.0])

    def test_floor(self, demo_model):
        train_supervised(demo_model, [[0, 0, 1, 1]], [[0, 0, 1, 1]], probability_floor=1e-12)

        assert np.all(demo_model.emission_matrix > 0)
        np.testing.assert_allclose(demo_model.emission_matrix.sum(axis=1), [1.0, 1.0])

    def test_unobserved_state_keeps_parameters(self):
        model = DiscreteHMM.random(3, 2, random_state=0)
        column_before = np.array(model.transition[:, 2])
        row_before = np.array(model.emission(2))

        train_supervised(model, [[0, 1, 0]], [[0, 1, 0]])

        np.testing.assert_allclose(model.transition[:, 2], column_before)
        np.testing.assert_allclose(model.emission(2), row_before)
        np.testing.assert_allclose(model.initial, [1.0, 0.0, 0.0])

    def test_recovers_generating_model(self):
        """Large labelled samples give estimates close to the true parameters."""
        truth = DiscreteHMM([0.5, 0.5], [[0.9, 0.2], [0.1, 0.8]], [[0.8, 0.2], [0.3, 0.7]])
        observations, states = truth.generate(20000, random_state=123)

        model = DiscreteHMM.random(2, 2, random_state=1)
        train_supervised(model, [observations], [states])

        np.testing.assert_allclose(model.transition, truth.transition, atol=0.02)
        np.testing.assert_allclose(model.emission_matrix, truth.emission_matrix, atol=0.02)


class TestSupervisedErrors:
    """Invalid labelled data."""

    def test_count_mismatch(self, demo_model):
        with pytest.raises(InvalidParametersError):
            train_supervised(demo_model, [[0, 1]], [])

    def test_length_mismatch(self, demo_model):
        with pytest.raises(InvalidParametersError, match="Sequence 0"):
            train_supervised(demo_model, [[0, 1, 1]], [[0, 1]])

    def test_label_out_of_range(self, demo_model):
        with pytest.raises(InvalidParametersError):
            train_supervised(demo_model, [[0, 1]], [[0, 2]])

    def test_symbol_out_of_range(self, demo_model):
        with pytest.raises(SymbolOutOfRangeError):
            train_supervised(demo_model, [[0, 5]], [[0, 1]])
