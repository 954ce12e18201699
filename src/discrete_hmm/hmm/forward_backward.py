"""
Scaled forward-backward algorithm.

All arrays follow the (state, time) layout: alpha, beta and gamma are
[n_states, T]. The transition matrix is column-stochastic,
A[i, j] = P(q_{t+1} = i | q_t = j).

Scaling follows Rabiner: c_t = 1 / sum_s alpha_tilde_t(s), alpha_t sums to 1
at every step, beta_{T-1}(s) = c_{T-1}, and log P(O) = -sum_t log(c_t).
"""

from typing import NamedTuple

import numpy as np

from ..exceptions import ZeroProbabilityError
from ..logger import get_hmm_logger

logger = get_hmm_logger()


class ForwardBackwardResult(NamedTuple):
    """Output of a full forward-backward pass over one sequence."""
    alpha: np.ndarray
    beta: np.ndarray
    scales: np.ndarray
    log_likelihood: float
    gamma: np.ndarray


def forward(initial: np.ndarray, transition: np.ndarray, emissions: np.ndarray,
            observations: np.ndarray):
    """
    Scaled forward pass.

    Args:
        initial: Initial state probabilities [n_states]
        transition: Column-stochastic transition matrix [n_states, n_states]
        emissions: Emission table [n_states, n_symbols]
        observations: Validated symbol indices [T]

    Returns:
        Tuple of (alpha [n_states, T], scales [T])

    Raises:
        ZeroProbabilityError: If the observations are impossible at some step
    """
    n_states = initial.shape[0]
    T = observations.shape[0]

    alpha = np.empty((n_states, T))
    scales = np.empty(T)

    alpha_t = initial * emissions[:, observations[0]]
    for t in range(T):
        if t > 0:
            alpha_t = emissions[:, observations[t]] * (transition @ alpha[:, t - 1])

        total = alpha_t.sum()
        if not total > 0:
            raise ZeroProbabilityError(t)
        scale = 1.0 / total
        if not np.isfinite(scale):
            raise ZeroProbabilityError(t, f"Forward probabilities underflow at time {t}")

        scales[t] = scale
        alpha[:, t] = alpha_t * scale

    return alpha, scales


def backward(transition: np.ndarray, emissions: np.ndarray,
             observations: np.ndarray, scales: np.ndarray) -> np.ndarray:
    """
    Scaled backward pass using the scales produced by forward().

    Returns:
        beta: Scaled backward probabilities [n_states, T]
    """
    n_states = transition.shape[0]
    T = observations.shape[0]

    beta = np.empty((n_states, T))
    beta[:, T - 1] = scales[T - 1]

    for t in range(T - 2, -1, -1):
        weighted = emissions[:, observations[t + 1]] * beta[:, t + 1]
        beta[:, t] = scales[t] * (transition.T @ weighted)

    return beta


def log_likelihood_from_scales(scales: np.ndarray) -> float:
    """log P(O | model) = -sum_t log(c_t)."""
    return float(-np.sum(np.log(scales)))


def state_posteriors(alpha: np.ndarray, beta: np.ndarray, scales: np.ndarray) -> np.ndarray:
    """gamma_t(s) = alpha_t(s) * beta_t(s) / c_t, shape [n_states, T]."""
    return alpha * beta / scales[np.newaxis, :]


def transition_posteriors(transition: np.ndarray, emissions: np.ndarray,
                          observations: np.ndarray, alpha: np.ndarray,
                          beta: np.ndarray) -> np.ndarray:
    """
    Materialized pair posteriors xi.

    xi[i, j, t] = P(q_t = j, q_{t+1} = i | O), shape [n_states, n_states, T-1].
    Prefer expected_transitions() when only the sum over t is needed.
    """
    n_states = transition.shape[0]
    T = observations.shape[0]
    xi = np.empty((n_states, n_states, max(T - 1, 0)))

    for t in range(T - 1):
        weighted = emissions[:, observations[t + 1]] * beta[:, t + 1]
        xi[:, :, t] = transition * np.outer(weighted, alpha[:, t])

    return xi


def expected_transitions(transition: np.ndarray, emissions: np.ndarray,
                         observations: np.ndarray, alpha: np.ndarray,
                         beta: np.ndarray) -> np.ndarray:
    """sum_t xi_t(i, j) without materializing the [S, S, T-1] array."""
    n_states = transition.shape[0]
    T = observations.shape[0]
    if T < 2:
        return np.zeros((n_states, n_states))

    # weighted[:, t] = B[:, O_{t+1}] * beta_{t+1}
    weighted = emissions[:, observations[1:]] * beta[:, 1:]
    return transition * (weighted @ alpha[:, :T - 1].T)


def forward_backward(initial: np.ndarray, transition: np.ndarray, emissions: np.ndarray,
                     observations: np.ndarray) -> ForwardBackwardResult:
    """Run both passes and derive the log-likelihood and state posteriors."""
    alpha, scales = forward(initial, transition, emissions, observations)
    beta = backward(transition, emissions, observations, scales)
    log_likelihood = log_likelihood_from_scales(scales)
    gamma = state_posteriors(alpha, beta, scales)

    logger.debug(f"Forward-backward completed: T={observations.shape[0]}, "
                 f"log_likelihood={log_likelihood:.6f}")

    return ForwardBackwardResult(alpha, beta, scales, log_likelihood, gamma)
