"""
Hidden Markov Model module.

Discrete HMM with scaled forward-backward inference and log-domain Viterbi decoding.
"""

from .model import DiscreteHMM
from .forward_backward import ForwardBackwardResult

__all__ = [
    "DiscreteHMM",
    "ForwardBackwardResult"
]
