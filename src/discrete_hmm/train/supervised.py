"""
Supervised (labelled) parameter estimation.

When the hidden state path of every training sequence is known, the
maximum-likelihood parameters are plain normalized counts.
"""

from typing import Optional, Sequence

import numpy as np

from ..config import get_config
from ..exceptions import InvalidParametersError
from ..logger import get_training_logger
from ..sequence import validate_observation_list
from ..stochastic import apply_floor, normalize_columns, normalize_rows, normalize_vector

logger = get_training_logger()


def train_supervised(model, observations_list: Sequence, state_sequences: Sequence,
                     probability_floor: Optional[float] = None) -> None:
    """
    Re-estimate pi, A and B in place from labelled sequences.

    Columns of A and rows of B belonging to states that never occur as a
    transition source or emitter keep their previous values.

    Args:
        model: DiscreteHMM to update
        observations_list: Observation sequences
        state_sequences: Hidden state labels, one per observation
        probability_floor: Minimum entry value before renormalizing

    Raises:
        EmptySequenceError: If no sequences are given or any is empty
        SymbolOutOfRangeError: If any symbol is outside the model alphabet
        InvalidParametersError: If labels are misaligned or out of range
    """
    if probability_floor is None:
        probability_floor = get_config('training', 'probability_floor')

    sequences = validate_observation_list(observations_list, model.n_symbols)
    if len(state_sequences) != len(sequences):
        raise InvalidParametersError(
            f"Got {len(sequences)} observation sequences but {len(state_sequences)} state sequences")

    n_states = model.n_states
    initial_counts = np.zeros(n_states)
    transition_counts = np.zeros((n_states, n_states))
    emission_counts = np.zeros((n_states, model.n_symbols))

    for seq_idx, (obs, labels) in enumerate(zip(sequences, state_sequences)):
        labels = np.asarray(labels)
        if labels.shape != obs.shape:
            raise InvalidParametersError(
                f"Sequence {seq_idx} has {obs.size} observations but {labels.size} states")
        if not np.issubdtype(labels.dtype, np.integer) or np.any((labels < 0) | (labels >= n_states)):
            raise InvalidParametersError(
                f"Sequence {seq_idx} has state labels outside [0, {n_states})")

        initial_counts[labels[0]] += 1
        np.add.at(transition_counts, (labels[1:], labels[:-1]), 1)
        np.add.at(emission_counts, (labels, obs), 1)

    A = np.array(model.transition)
    observed_sources = transition_counts.sum(axis=0) > 0
    A[:, observed_sources] = normalize_columns(transition_counts[:, observed_sources])

    emissions = []
    for s in range(n_states):
        dist = model.emission_distribution(s)
        if emission_counts[s].sum() > 0:
            dist.fit(emission_counts[s])
        emissions.append(dist.probabilities)

    pi = normalize_vector(apply_floor(normalize_vector(initial_counts), probability_floor))
    A = normalize_columns(apply_floor(A, probability_floor))
    B = normalize_rows(apply_floor(np.vstack(emissions), probability_floor))

    model._replace_parameters(pi, A, B)

    logger.debug(f"Supervised estimation from {len(sequences)} labelled sequences")
