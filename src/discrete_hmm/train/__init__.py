"""
Training module.

Baum-Welch re-estimation and supervised estimation for DiscreteHMM.
"""

from .baum_welch import BaumWelchTrainer, SufficientStatistics, TrainerState, TrainingResult
from .supervised import train_supervised

__all__ = [
    "BaumWelchTrainer",
    "SufficientStatistics",
    "TrainerState",
    "TrainingResult",
    "train_supervised"
]
