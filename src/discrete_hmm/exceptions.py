"""
Exception hierarchy for DiscreteHMM system.
"""


class HMMError(Exception):
    """Base exception for DiscreteHMM system."""
    pass


class InvalidParametersError(HMMError, ValueError):
    """Model construction with non-stochastic or mis-shaped parameters."""
    pass


class NotStochasticError(HMMError, ValueError):
    """Emission distribution rejected a probability vector."""
    pass


class EmptySequenceError(HMMError, ValueError):
    """Observation sequence of length zero."""
    pass


class SymbolOutOfRangeError(HMMError, ValueError):
    """Observation symbol outside the alphabet [0, n_symbols)."""

    def __init__(self, symbol, n_symbols: int, message: str = None):
        self.symbol = symbol
        self.n_symbols = n_symbols
        if message is None:
            message = f"Symbol {symbol} is outside the alphabet [0, {n_symbols})"
        super().__init__(message)


class ZeroProbabilityError(HMMError, ArithmeticError):
    """Observation sequence is impossible under the current model."""

    def __init__(self, t: int, message: str = None):
        self.t = t
        if message is None:
            message = f"Forward probabilities sum to zero at time {t}"
        super().__init__(message)


class NoFeasiblePathError(HMMError, ArithmeticError):
    """Viterbi found no state path with non-zero probability."""
    pass


class ModelTrainingError(HMMError):
    """Baum-Welch iteration failed; the cause is chained."""

    def __init__(self, message: str, iteration: int = 0):
        self.iteration = iteration
        super().__init__(message)
