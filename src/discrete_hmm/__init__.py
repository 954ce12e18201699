"""
DiscreteHMM: discrete-observation Hidden Markov Models.

Scaled forward-backward likelihood, log-domain Viterbi decoding and
Baum-Welch re-estimation over a column-stochastic transition matrix.
"""

__version__ = "0.1.0"
__author__ = "DiscreteHMM Development Team"

from .config import get_config, set_config
from .logger import get_logger
from .distribution import DiscreteDistribution
from .hmm import DiscreteHMM
from .train import BaumWelchTrainer, TrainingResult, train_supervised

__all__ = [
    "DiscreteDistribution",
    "DiscreteHMM",
    "BaumWelchTrainer",
    "TrainingResult",
    "train_supervised",
    "get_config",
    "set_config",
    "get_logger",
    "__version__"
]
