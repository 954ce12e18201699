"""
Discrete (categorical) emission distribution.

Each hidden state of a DiscreteHMM owns one of these, giving
P(symbol k | state) for k in [0, n_symbols).
"""

from typing import Optional, Union

import numpy as np

from ..exceptions import NotStochasticError, SymbolOutOfRangeError
from ..stochastic import as_probability_vector, is_stochastic_vector, safe_log


class DiscreteDistribution:
    """
    Categorical distribution over n_symbols observation symbols.

    The distribution starts uniform and only changes through
    set_probabilities() or fit().
    """

    def __init__(self, n_symbols: int):
        """
        Initialize a uniform distribution.

        Args:
            n_symbols: Alphabet size K (must be positive)
        """
        if int(n_symbols) < 1:
            raise ValueError(f"n_symbols must be positive, got {n_symbols}")
        self.n_symbols = int(n_symbols)
        self._probabilities = np.full(self.n_symbols, 1.0 / self.n_symbols)

    @classmethod
    def from_probabilities(cls, probabilities) -> "DiscreteDistribution":
        """Build a distribution directly from a stochastic vector."""
        probabilities = as_probability_vector(probabilities)
        dist = cls(max(probabilities.size, 1))
        dist.set_probabilities(probabilities)
        return dist

    @property
    def probabilities(self) -> np.ndarray:
        """Read-only view of the probability vector [n_symbols]."""
        view = self._probabilities.view()
        view.flags.writeable = False
        return view

    def _check_symbol(self, k) -> int:
        if isinstance(k, (bool, np.bool_)) or not isinstance(k, (int, np.integer)):
            raise SymbolOutOfRangeError(k, self.n_symbols,
                                        f"Symbol must be an integer, got {k!r}")
        if k < 0 or k >= self.n_symbols:
            raise SymbolOutOfRangeError(k, self.n_symbols)
        return int(k)

    def probability(self, k: int) -> float:
        """
        Probability of observing symbol k.

        Raises:
            SymbolOutOfRangeError: If k is not in [0, n_symbols)
        """
        return float(self._probabilities[self._check_symbol(k)])

    def log_probability(self, k: int) -> float:
        """Natural log of probability(k); -inf for impossible symbols."""
        return float(safe_log(self.probability(k)))

    def set_probabilities(self, probabilities) -> None:
        """
        Replace the probability vector.

        Raises:
            NotStochasticError: If the length differs from n_symbols, any entry
                is negative, or the entries do not sum to 1 within 1e-9
        """
        probabilities = as_probability_vector(probabilities)
        if probabilities.shape != (self.n_symbols,):
            raise NotStochasticError(
                f"Expected {self.n_symbols} probabilities, got {probabilities.size}")
        if np.any(probabilities < 0):
            raise NotStochasticError("Probabilities contain negative values")
        if not is_stochastic_vector(probabilities):
            raise NotStochasticError(
                f"Probabilities sum to {probabilities.sum()}, expected 1.0")
        self._probabilities = probabilities

    def fit(self, weighted_counts) -> None:
        """
        Maximum-likelihood estimate from per-symbol weighted counts.

        A zero total leaves the distribution uniform so that states with no
        posterior mass never produce NaNs.
        """
        counts = as_probability_vector(weighted_counts)
        if counts.shape != (self.n_symbols,):
            raise NotStochasticError(
                f"Expected {self.n_symbols} counts, got {counts.size}")
        if np.any(counts < 0):
            raise NotStochasticError("Counts contain negative values")

        total = counts.sum()
        if total > 0:
            self._probabilities = counts / total
        else:
            self._probabilities = np.full(self.n_symbols, 1.0 / self.n_symbols)

    def sample(self, random_state: Optional[Union[int, np.random.Generator]] = None) -> int:
        """Draw one symbol according to the distribution."""
        rng = np.random.default_rng(random_state)
        return int(rng.choice(self.n_symbols, p=self._probabilities))

    def copy(self) -> "DiscreteDistribution":
        dist = DiscreteDistribution(self.n_symbols)
        dist._probabilities = self._probabilities.copy()
        return dist

    def __eq__(self, other) -> bool:
        if not isinstance(other, DiscreteDistribution):
            return NotImplemented
        return np.array_equal(self._probabilities, other._probabilities)

    def __repr__(self) -> str:
        return f"DiscreteDistribution(n_symbols={self.n_symbols})"
