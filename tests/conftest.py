"""
Test configuration and fixtures for DiscreteHMM.

This file contains pytest configuration and shared fixtures
for testing the DiscreteHMM system.
"""

import itertools
import tempfile
from pathlib import Path

import numpy as np
import pytest

from discrete_hmm.hmm.model import DiscreteHMM


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def demo_model():
    """Two-state model: column-stochastic A, state 0 prefers symbol 0."""
    return DiscreteHMM(
        initial=[0.5, 0.5],
        transition=[[0.8, 0.3],
                    [0.2, 0.7]],
        emissions=[[0.9, 0.1],
                   [0.2, 0.8]]
    )


@pytest.fixture
def demo_observations():
    return [0, 0, 1, 0, 1, 1]


@pytest.fixture
def random_model():
    """Three states, four symbols, fixed seed."""
    return DiscreteHMM.random(n_states=3, n_symbols=4, random_state=42)


def _path_log_probability(model, observations, path):
    pi, A, B = model.get_parameters()
    prob = pi[path[0]] * B[path[0], observations[0]]
    for t in range(1, len(observations)):
        prob *= A[path[t], path[t - 1]] * B[path[t], observations[t]]
    return np.log(prob) if prob > 0 else -np.inf


@pytest.fixture
def brute_force():
    """
    Exhaustive enumeration over all state paths.

    Returns a function (model, observations) -> (log P(O), best path, best log prob).
    """
    def enumerate_paths(model, observations):
        best_path, best_log_prob = None, -np.inf
        total = 0.0
        for path in itertools.product(range(model.n_states), repeat=len(observations)):
            log_prob = _path_log_probability(model, observations, path)
            total += np.exp(log_prob)
            if log_prob > best_log_prob:
                best_path, best_log_prob = list(path), log_prob
        return np.log(total), best_path, best_log_prob

    return enumerate_paths


def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
