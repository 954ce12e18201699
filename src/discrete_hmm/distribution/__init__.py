"""
Emission distribution module.

Categorical distributions over a finite observation alphabet.
"""

from .discrete import DiscreteDistribution

__all__ = [
    "DiscreteDistribution"
]
