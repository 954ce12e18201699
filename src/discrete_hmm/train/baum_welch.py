"""
Baum-Welch (EM) training for DiscreteHMM.

Each iteration runs the scaled forward-backward pass on every training
sequence, accumulates sufficient statistics, and re-estimates pi, the
column-stochastic transition matrix and the emission rows. The new
parameters are computed into scratch arrays and swapped into the model
in a single step.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

import numpy as np
from joblib import Parallel, delayed

from ..config import get_config
from ..exceptions import ModelTrainingError, ZeroProbabilityError
from ..hmm.forward_backward import expected_transitions, forward_backward
from ..logger import get_training_logger
from ..sequence import validate_observation_list
from ..stochastic import apply_floor, normalize_columns, normalize_rows, normalize_vector

logger = get_training_logger()

# EM may lose this much log-likelihood to rounding without a warning
MONOTONICITY_SLACK = 1e-9


class TrainerState(Enum):
    UNSTARTED = "unstarted"
    ITERATING = "iterating"
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"
    FAILED = "failed"


@dataclass
class TrainingResult:
    """Outcome of a Baum-Welch run."""
    iterations: int
    final_log_likelihood: float
    state: TrainerState
    log_likelihood_history: List[float] = field(default_factory=list)

    @property
    def converged(self) -> bool:
        return self.state is TrainerState.CONVERGED


@dataclass(eq=False)
class SufficientStatistics:
    """
    Expected counts gathered in the E-step.

    trans_num[i, j] accumulates expected j -> i transitions, matching the
    column-stochastic layout of the transition matrix.
    """
    initial: np.ndarray
    trans_num: np.ndarray
    trans_den: np.ndarray
    emit_num: np.ndarray
    emit_den: np.ndarray
    log_likelihood: float = 0.0
    n_sequences: int = 0

    @classmethod
    def zeros(cls, n_states: int, n_symbols: int) -> "SufficientStatistics":
        return cls(initial=np.zeros(n_states),
                   trans_num=np.zeros((n_states, n_states)),
                   trans_den=np.zeros(n_states),
                   emit_num=np.zeros((n_states, n_symbols)),
                   emit_den=np.zeros(n_states))

    def merge(self, other: "SufficientStatistics") -> "SufficientStatistics":
        """Add another partial accumulator into this one (in place)."""
        self.initial += other.initial
        self.trans_num += other.trans_num
        self.trans_den += other.trans_den
        self.emit_num += other.emit_num
        self.emit_den += other.emit_den
        self.log_likelihood += other.log_likelihood
        self.n_sequences += other.n_sequences
        return self


def accumulate_sequence(initial: np.ndarray, transition: np.ndarray, emissions: np.ndarray,
                        observations: np.ndarray) -> SufficientStatistics:
    """
    E-step for a single sequence.

    Raises:
        ZeroProbabilityError: If the sequence is impossible under the parameters
    """
    n_states, n_symbols = emissions.shape
    result = forward_backward(initial, transition, emissions, observations)
    gamma = result.gamma

    stats = SufficientStatistics.zeros(n_states, n_symbols)
    stats.initial = gamma[:, 0].copy()
    stats.trans_num = expected_transitions(transition, emissions, observations,
                                           result.alpha, result.beta)
    stats.trans_den = gamma[:, :-1].sum(axis=1)

    # Sum gamma[s, t] over all t where observations[t] == k
    emit_num_t = np.zeros((n_symbols, n_states))
    np.add.at(emit_num_t, observations, gamma.T)
    stats.emit_num = emit_num_t.T.copy()
    stats.emit_den = gamma.sum(axis=1)

    stats.log_likelihood = result.log_likelihood
    stats.n_sequences = 1
    return stats


class BaumWelchTrainer:
    """
    Batch EM trainer.

    State machine: UNSTARTED -> ITERATING -> CONVERGED | EXHAUSTED | FAILED.
    Training needs exclusive access to the model; callers must not run
    inference on the same model concurrently.
    """

    def __init__(self,
                 max_iterations: Optional[int] = None,
                 convergence_tolerance: Optional[float] = None,
                 probability_floor: Optional[float] = None,
                 n_jobs: Optional[int] = None,
                 verbose: bool = False):
        """
        Initialize the trainer; unset values come from the 'training' config section.

        Args:
            max_iterations: Maximum EM iterations (default: 500)
            convergence_tolerance: Stop when |L - L_prev| < tolerance (default: 1e-5)
            probability_floor: Minimum entry value applied before renormalizing
                (default: 0, recommended 1e-12)
            n_jobs: joblib workers for the E-step (default: 1, serial)
            verbose: Log progress at INFO instead of DEBUG
        """
        if max_iterations is None:
            max_iterations = get_config('training', 'max_iterations')
        if convergence_tolerance is None:
            convergence_tolerance = get_config('training', 'convergence_tolerance')
        if probability_floor is None:
            probability_floor = get_config('training', 'probability_floor')
        if n_jobs is None:
            n_jobs = get_config('training', 'n_jobs')

        if max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1, got {max_iterations}")
        if convergence_tolerance < 0:
            raise ValueError(f"convergence_tolerance must be non-negative, got {convergence_tolerance}")
        if probability_floor < 0:
            raise ValueError(f"probability_floor must be non-negative, got {probability_floor}")

        self.max_iterations = int(max_iterations)
        self.convergence_tolerance = float(convergence_tolerance)
        self.probability_floor = float(probability_floor)
        self.n_jobs = n_jobs
        self.verbose = verbose

        self.state = TrainerState.UNSTARTED
        self.iteration = 0

    def _log(self, message: str) -> None:
        if self.verbose:
            logger.info(message)
        else:
            logger.debug(message)

    def expectation(self, model, sequences: Sequence[np.ndarray]) -> SufficientStatistics:
        """Run the E-step over all sequences and reduce the partial statistics."""
        pi, A, B = model.get_parameters()

        if self.n_jobs is not None and self.n_jobs != 1 and len(sequences) > 1:
            partials = Parallel(n_jobs=self.n_jobs)(
                delayed(accumulate_sequence)(pi, A, B, obs) for obs in sequences
            )
        else:
            partials = [accumulate_sequence(pi, A, B, obs) for obs in sequences]

        total = SufficientStatistics.zeros(model.n_states, model.n_symbols)
        for partial in partials:
            total.merge(partial)
        return total

    def maximization(self, model, stats: SufficientStatistics):
        """
        M-step into scratch arrays.

        States with a zero denominator keep their previous transition column
        or emission row.

        Returns:
            Tuple of (pi, A, B) ready for the model swap
        """
        floor = self.probability_floor

        pi = stats.initial / stats.n_sequences

        A = np.array(model.transition)
        has_transitions = stats.trans_den > 0
        A[:, has_transitions] = (stats.trans_num[:, has_transitions]
                                 / stats.trans_den[has_transitions])

        emissions = []
        for s in range(model.n_states):
            dist = model.emission_distribution(s)
            if stats.emit_den[s] > 0:
                dist.fit(stats.emit_num[s])
            emissions.append(dist.probabilities)
        B = np.vstack(emissions)

        pi = normalize_vector(apply_floor(pi, floor))
        A = normalize_columns(apply_floor(A, floor))
        B = normalize_rows(apply_floor(B, floor))

        return pi, A, B

    def fit(self, model, observations_list: Sequence) -> TrainingResult:
        """
        Train a model in place.

        Args:
            model: DiscreteHMM to update
            observations_list: One or more observation sequences

        Returns:
            TrainingResult with the iteration count and final log-likelihood

        Raises:
            EmptySequenceError: If no sequences are given or any is empty
            SymbolOutOfRangeError: If any symbol is outside the model alphabet
            ModelTrainingError: If an iteration fails; the cause is chained
        """
        sequences = validate_observation_list(observations_list, model.n_symbols)

        self.state = TrainerState.ITERATING
        self.iteration = 0
        history = []
        prev_log_likelihood = None

        self._log(f"Starting Baum-Welch training with {len(sequences)} sequences")

        while self.iteration < self.max_iterations:
            self.iteration += 1

            try:
                stats = self.expectation(model, sequences)
            except ZeroProbabilityError as e:
                self.state = TrainerState.FAILED
                logger.error(f"Training failed at iteration {self.iteration}: {e}")
                raise ModelTrainingError(
                    f"Baum-Welch failed at iteration {self.iteration}: {e}",
                    iteration=self.iteration) from e

            log_likelihood = stats.log_likelihood
            history.append(log_likelihood)

            model._replace_parameters(*self.maximization(model, stats))

            if prev_log_likelihood is None:
                self._log(f"Iteration {self.iteration}: log_likelihood={log_likelihood:.6f}")
            else:
                improvement = log_likelihood - prev_log_likelihood
                self._log(f"Iteration {self.iteration}: log_likelihood={log_likelihood:.6f}, "
                          f"improvement={improvement:.6e}")

                if improvement < -MONOTONICITY_SLACK:
                    logger.warning(f"Log-likelihood decreased by {-improvement:.6e} "
                                   f"at iteration {self.iteration}")

                if abs(improvement) < self.convergence_tolerance:
                    self.state = TrainerState.CONVERGED
                    break

            prev_log_likelihood = log_likelihood

        if self.state is TrainerState.ITERATING:
            self.state = TrainerState.EXHAUSTED

        self._log(f"Training finished: state={self.state.value}, iterations={self.iteration}, "
                  f"log_likelihood={history[-1]:.6f}")

        return TrainingResult(iterations=self.iteration,
                              final_log_likelihood=history[-1],
                              state=self.state,
                              log_likelihood_history=history)
