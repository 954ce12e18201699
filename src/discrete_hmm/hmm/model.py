"""
Discrete Hidden Markov Model implementation.

The model owns three parameter sets:
- pi: initial state probabilities [n_states]
- A: column-stochastic transition matrix [n_states, n_states] where
  A[i, j] = P(q_{t+1} = i | q_t = j); every column sums to 1
- B: one DiscreteDistribution per state, B[s, k] = P(o_t = k | q_t = s)

Inference never mutates the model. Baum-Welch replaces all three parameter
sets together once per iteration.
"""

from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from ..distribution import DiscreteDistribution
from ..exceptions import EmptySequenceError, InvalidParametersError, NotStochasticError
from ..logger import get_hmm_logger
from ..sequence import validate_observations
from ..stochastic import (
    is_column_stochastic,
    is_stochastic_vector,
    normalize_columns,
    normalize_rows,
)
from .forward_backward import ForwardBackwardResult, forward, forward_backward, log_likelihood_from_scales
from .viterbi import viterbi

logger = get_hmm_logger()


def _as_float_array(values, ndim: int, name: str) -> np.ndarray:
    """Convert parameters to a float64 array of exactly ndim dimensions."""
    try:
        array = np.array(values, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidParametersError(f"{name} is not a rectangular numeric array: {e}") from e
    if array.ndim != ndim:
        raise InvalidParametersError(
            f"{name} must be {ndim}-dimensional, got shape {array.shape}")
    return array


def _read_only(array: np.ndarray) -> np.ndarray:
    view = array.view()
    view.flags.writeable = False
    return view


class DiscreteHMM:
    """
    Discrete Hidden Markov Model with categorical emissions.

    Args:
        initial: Initial state probabilities [n_states]
        transition: Column-stochastic transition matrix [n_states, n_states],
            A[i, j] = P(next state = i | current state = j)
        emissions: n_states emission distributions, given either as
            DiscreteDistribution objects or as probability rows [n_symbols]

    Raises:
        InvalidParametersError: On shape mismatch, negative entries or any
            vector/column/row that does not sum to 1
    """

    def __init__(self, initial, transition, emissions):
        pi, A, B = self._validate_parameters(initial, transition, emissions)
        self._install(pi, A, B)

        logger.debug(f"Initialized DiscreteHMM with {self.n_states} states "
                     f"and {self.n_symbols} symbols")

    @classmethod
    def random(cls, n_states: int, n_symbols: int,
               random_state: Optional[Union[int, np.random.Generator]] = None) -> "DiscreteHMM":
        """
        Randomly initialized model: uniform pi, random column-stochastic A and
        random row-stochastic B. Reproducible for a fixed random_state.
        """
        if n_states < 1 or n_symbols < 1:
            raise InvalidParametersError(
                f"n_states and n_symbols must be positive, got {n_states} and {n_symbols}")

        rng = np.random.default_rng(random_state)
        pi = np.full(n_states, 1.0 / n_states)
        A = normalize_columns(rng.random((n_states, n_states)) + 1e-3)
        B = normalize_rows(rng.random((n_states, n_symbols)) + 1e-3)
        return cls(pi, A, B)

    @staticmethod
    def _validate_parameters(initial, transition, emissions):
        pi = _as_float_array(initial, 1, "Initial probabilities")
        n_states = pi.shape[0]
        if n_states == 0:
            raise InvalidParametersError("Model must have at least one state")

        if np.any(pi < 0):
            raise InvalidParametersError("Initial probabilities contain negative values")
        if not is_stochastic_vector(pi):
            raise InvalidParametersError(
                f"Initial probabilities sum to {pi.sum()}, expected 1.0")

        A = _as_float_array(transition, 2, "Transition matrix")
        if A.shape != (n_states, n_states):
            raise InvalidParametersError(
                f"Transition shape {A.shape} doesn't match expected ({n_states}, {n_states})")
        if np.any(A < 0):
            raise InvalidParametersError("Transition matrix contains negative values")
        if not is_column_stochastic(A):
            raise InvalidParametersError(
                f"Transition matrix columns don't sum to 1.0: {A.sum(axis=0)}")

        rows = list(emissions)
        if len(rows) != n_states:
            raise InvalidParametersError(
                f"Expected {n_states} emission distributions, got {len(rows)}")

        distributions = []
        for s, row in enumerate(rows):
            if isinstance(row, DiscreteDistribution):
                probs = row.probabilities
            else:
                probs = _as_float_array(row, 1, f"Emission distribution {s}")
            try:
                distributions.append(DiscreteDistribution.from_probabilities(probs))
            except (NotStochasticError, ValueError) as e:
                raise InvalidParametersError(f"Emission distribution {s} is invalid: {e}") from e

        n_symbols = distributions[0].n_symbols
        if any(dist.n_symbols != n_symbols for dist in distributions):
            raise InvalidParametersError("Emission distributions have differing alphabet sizes")

        return pi, A, distributions

    def _install(self, pi: np.ndarray, A: np.ndarray,
                 distributions: List[DiscreteDistribution]) -> None:
        self._initial = pi
        self._transition = A
        self._emissions = distributions
        self._emission_matrix = np.vstack([d.probabilities for d in distributions])

    def _replace_parameters(self, initial, transition, emissions) -> None:
        """Validate and swap in a complete new parameter set."""
        pi, A, B = self._validate_parameters(initial, transition, emissions)
        if A.shape[0] != self.n_states or B[0].n_symbols != self.n_symbols:
            raise InvalidParametersError("Replacement parameters change the model dimensions")
        self._install(pi, A, B)

    @property
    def n_states(self) -> int:
        return self._initial.shape[0]

    @property
    def n_symbols(self) -> int:
        return self._emission_matrix.shape[1]

    @property
    def initial(self) -> np.ndarray:
        """Read-only initial state probabilities [n_states]."""
        return _read_only(self._initial)

    @property
    def transition(self) -> np.ndarray:
        """Read-only column-stochastic transition matrix, A[i, j] = P(i | j)."""
        return _read_only(self._transition)

    @property
    def emission_matrix(self) -> np.ndarray:
        """Read-only emission table [n_states, n_symbols]."""
        return _read_only(self._emission_matrix)

    def emission(self, state: int) -> np.ndarray:
        """Read-only emission probabilities of one state [n_symbols]."""
        if not 0 <= state < self.n_states:
            raise IndexError(f"State {state} is outside [0, {self.n_states})")
        return self._emissions[state].probabilities

    def emission_distribution(self, state: int) -> DiscreteDistribution:
        """Independent copy of one state's emission distribution."""
        if not 0 <= state < self.n_states:
            raise IndexError(f"State {state} is outside [0, {self.n_states})")
        return self._emissions[state].copy()

    def get_parameters(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Get current model parameters.

        Returns:
            Tuple of (pi, A, B) copies
        """
        return self._initial.copy(), self._transition.copy(), self._emission_matrix.copy()

    def validate_stochastic_matrices(self) -> bool:
        """
        Re-check all stochastic invariants.

        Raises:
            InvalidParametersError: If any parameter violates them
        """
        self._validate_parameters(self._initial, self._transition, self._emission_matrix)
        return True

    def _check(self, observations) -> np.ndarray:
        return validate_observations(observations, self.n_symbols)

    def forward(self, observations) -> Tuple[np.ndarray, np.ndarray]:
        """Scaled forward pass; returns (alpha [n_states, T], scales [T])."""
        obs = self._check(observations)
        return forward(self._initial, self._transition, self._emission_matrix, obs)

    def log_likelihood(self, observations) -> float:
        """
        Log-likelihood of an observation sequence, log P(O | model).

        Raises:
            EmptySequenceError: If the sequence is empty
            SymbolOutOfRangeError: If a symbol is outside [0, n_symbols)
            ZeroProbabilityError: If the sequence is impossible under the model
        """
        _, scales = self.forward(observations)
        return log_likelihood_from_scales(scales)

    def score(self, observations) -> float:
        """Alias of log_likelihood()."""
        return self.log_likelihood(observations)

    def estimate(self, observations) -> ForwardBackwardResult:
        """Full scaled forward-backward pass with state posteriors gamma [n_states, T]."""
        obs = self._check(observations)
        return forward_backward(self._initial, self._transition, self._emission_matrix, obs)

    def predict_proba(self, observations) -> np.ndarray:
        """Posterior state probabilities gamma [n_states, T]."""
        return self.estimate(observations).gamma

    def viterbi(self, observations) -> Tuple[np.ndarray, float]:
        """Most likely state path and its joint log-probability."""
        obs = self._check(observations)
        return viterbi(self._initial, self._transition, self._emission_matrix, obs)

    def decode(self, observations) -> np.ndarray:
        """
        Most likely hidden state sequence (Viterbi).

        Raises:
            EmptySequenceError: If the sequence is empty
            SymbolOutOfRangeError: If a symbol is outside [0, n_symbols)
            NoFeasiblePathError: If no path has non-zero probability
        """
        path, _ = self.viterbi(observations)
        return path

    def generate(self, length: int, start_state: Optional[int] = None,
                 random_state: Optional[Union[int, np.random.Generator]] = None
                 ) -> Tuple[np.ndarray, np.ndarray]:
        """
        Sample an observation sequence and the hidden states that produced it.

        Args:
            length: Number of time steps (must be at least 1)
            start_state: Fixed first state; drawn from pi when None
            random_state: Seed or Generator for reproducible sampling

        Returns:
            Tuple of (observations [length], states [length])
        """
        if length < 1:
            raise EmptySequenceError(f"Cannot generate a sequence of length {length}")
        if start_state is not None and not 0 <= start_state < self.n_states:
            raise IndexError(f"State {start_state} is outside [0, {self.n_states})")

        rng = np.random.default_rng(random_state)
        states = np.empty(length, dtype=np.int64)
        observations = np.empty(length, dtype=np.int64)

        if start_state is None:
            states[0] = rng.choice(self.n_states, p=self._initial)
        else:
            states[0] = start_state
        observations[0] = self._emissions[states[0]].sample(rng)

        for t in range(1, length):
            states[t] = rng.choice(self.n_states, p=self._transition[:, states[t - 1]])
            observations[t] = self._emissions[states[t]].sample(rng)

        return observations, states

    def train(self, observations_list: Sequence, max_iterations: Optional[int] = None,
              tolerance: Optional[float] = None, floor: Optional[float] = None,
              n_jobs: Optional[int] = None, verbose: bool = False):
        """
        Re-estimate pi, A and B in place with Baum-Welch.

        Unset arguments fall back to the 'training' configuration section
        (500 iterations, tolerance 1e-5, floor 0).

        Returns:
            TrainingResult with iteration count and final log-likelihood
        """
        from ..train.baum_welch import BaumWelchTrainer

        trainer = BaumWelchTrainer(max_iterations=max_iterations,
                                   convergence_tolerance=tolerance,
                                   probability_floor=floor,
                                   n_jobs=n_jobs,
                                   verbose=verbose)
        return trainer.fit(self, observations_list)

    def copy(self) -> "DiscreteHMM":
        return DiscreteHMM(self._initial, self._transition, self._emissions)

    def __repr__(self) -> str:
        """String representation of the HMM."""
        return f"DiscreteHMM(n_states={self.n_states}, n_symbols={self.n_symbols})"
