"""
Observation sequence validation.

Observation sequences are borrowed: integer arrays are used as-is and only
lists or non-integer arrays are converted.
"""

import numbers

import numpy as np

from .exceptions import EmptySequenceError, SymbolOutOfRangeError


def _is_symbol(value, n_symbols: int) -> bool:
    return (isinstance(value, numbers.Integral) and not isinstance(value, bool)
            and 0 <= value < n_symbols)


def validate_observations(observations, n_symbols: int) -> np.ndarray:
    """
    Check an observation sequence against an alphabet of size n_symbols.

    Args:
        observations: Sequence of symbol indices [T]
        n_symbols: Alphabet size K

    Returns:
        1-D integer array view of the observations

    Raises:
        EmptySequenceError: If the sequence has length zero
        SymbolOutOfRangeError: If the input is not 1-D or any symbol is not
            an integer in [0, n_symbols)
    """
    obs = np.asarray(observations)
    if obs.ndim != 1:
        raise SymbolOutOfRangeError(
            None, n_symbols, f"Observations must be a 1-D sequence, got shape {obs.shape}")

    if obs.size == 0:
        raise EmptySequenceError("Observation sequence is empty")

    if not np.issubdtype(obs.dtype, np.integer):
        if not np.issubdtype(obs.dtype, np.number):
            # Object arrays hold arbitrary Python values, e.g. ints beyond int64
            for value in obs:
                if not _is_symbol(value, n_symbols):
                    raise SymbolOutOfRangeError(
                        value, n_symbols,
                        f"Symbol {value!r} is not an integer in [0, {n_symbols}) "
                        f"(dtype {obs.dtype})")
            return obs.astype(np.int64)
        bad = ~np.isfinite(obs) | (obs != np.floor(obs))
        if np.any(bad):
            raise SymbolOutOfRangeError(obs[np.argmax(bad)], n_symbols)
        obs = obs.astype(np.int64)

    out_of_range = (obs < 0) | (obs >= n_symbols)
    if np.any(out_of_range):
        raise SymbolOutOfRangeError(int(obs[np.argmax(out_of_range)]), n_symbols)

    return obs


def validate_observation_list(observations_list, n_symbols: int) -> list:
    """Validate every sequence of a training set; the list itself must be non-empty."""
    if observations_list is None or len(observations_list) == 0:
        raise EmptySequenceError("observations_list cannot be empty")

    validated = []
    for seq_idx, observations in enumerate(observations_list):
        try:
            validated.append(validate_observations(observations, n_symbols))
        except EmptySequenceError:
            raise EmptySequenceError(f"Sequence {seq_idx} is empty")
    return validated
