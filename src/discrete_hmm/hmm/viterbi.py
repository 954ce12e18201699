"""
Viterbi decoding in the log domain.

Zero probabilities map to -inf and propagate additively, so a state that is
reachable only through impossible transitions keeps a score of -inf.
Ties within the tie tolerance resolve to the smallest state index.
"""

from typing import Tuple

import numpy as np

from ..config import get_config
from ..exceptions import NoFeasiblePathError
from ..logger import get_hmm_logger
from ..stochastic import safe_log

logger = get_hmm_logger()


def _first_best(scores: np.ndarray, tie_tolerance: float):
    """Row-wise max and the smallest column index attaining it within tolerance."""
    best = scores.max(axis=1)
    candidates = scores >= (best - tie_tolerance)[:, np.newaxis]
    return best, np.argmax(candidates, axis=1)


def viterbi(initial: np.ndarray, transition: np.ndarray, emissions: np.ndarray,
            observations: np.ndarray, tie_tolerance: float = None) -> Tuple[np.ndarray, float]:
    """
    Most probable hidden state path.

    Args:
        initial: Initial state probabilities [n_states]
        transition: Column-stochastic transition matrix, A[i, j] = P(i | j)
        emissions: Emission table [n_states, n_symbols]
        observations: Validated symbol indices [T]
        tie_tolerance: Scores within this distance of the max count as ties

    Returns:
        Tuple of (state path [T], joint log-probability of that path)

    Raises:
        NoFeasiblePathError: If every terminal score is -inf
    """
    if tie_tolerance is None:
        tie_tolerance = get_config('hmm', 'viterbi_tie_tolerance') or 1e-12

    n_states = initial.shape[0]
    T = observations.shape[0]

    log_transition = safe_log(transition)
    log_emissions = safe_log(emissions)

    delta = safe_log(initial) + log_emissions[:, observations[0]]
    backpointers = np.zeros((n_states, T), dtype=np.int64)

    for t in range(1, T):
        # scores[s, j] = delta_{t-1}(j) + log A[s, j]
        scores = log_transition + delta[np.newaxis, :]
        best, backpointers[:, t] = _first_best(scores, tie_tolerance)
        delta = best + log_emissions[:, observations[t]]

    if np.all(np.isneginf(delta)):
        raise NoFeasiblePathError(
            f"No state path has non-zero probability for this {T}-step sequence")

    best_score = delta.max()
    last_state = int(np.argmax(delta >= best_score - tie_tolerance))

    path = np.empty(T, dtype=np.int64)
    path[T - 1] = last_state
    for t in range(T - 2, -1, -1):
        path[t] = backpointers[path[t + 1], t + 1]

    logger.debug(f"Viterbi completed: T={T}, log_probability={float(best_score):.6f}")

    return path, float(best_score)
