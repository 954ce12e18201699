"""
Demo model and console rendering of HMM parameters.
"""

from typing import Sequence

import numpy as np
from rich.console import Console
from rich.table import Table

from ..hmm import DiscreteHMM

DEMO_OBSERVATIONS = [0, 0, 1, 0, 1, 1]


def build_demo_model() -> DiscreteHMM:
    """
    Two-state, two-symbol model.

    State 0 mostly emits symbol 0 and state 1 mostly emits symbol 1. The
    transition matrix is column-stochastic: from state 0 the chain stays
    with 0.8, from state 1 it stays with 0.7.
    """
    initial = [0.5, 0.5]
    transition = [[0.8, 0.3],
                  [0.2, 0.7]]
    emissions = [[0.9, 0.1],
                 [0.2, 0.8]]
    return DiscreteHMM(initial, transition, emissions)


def _fmt(value: float) -> str:
    return f"{value:.4f}"


def initial_table(model: DiscreteHMM) -> Table:
    table = Table()
    for s in range(model.n_states):
        table.add_column(f"State {s}", justify="right")
    table.add_row(*[_fmt(p) for p in model.initial])
    return table


def transition_table(model: DiscreteHMM) -> Table:
    """Rows are destination states, columns are source states."""
    table = Table()
    table.add_column("to \\ from", style="bold")
    for j in range(model.n_states):
        table.add_column(str(j), justify="right")
    for i in range(model.n_states):
        table.add_row(str(i), *[_fmt(p) for p in model.transition[i]])
    return table


def emission_table(model: DiscreteHMM) -> Table:
    table = Table()
    table.add_column("State", style="bold")
    for k in range(model.n_symbols):
        table.add_column(f"P({k})", justify="right")
    for s in range(model.n_states):
        table.add_row(str(s), *[_fmt(p) for p in model.emission(s)])
    return table


def print_parameters(console: Console, model: DiscreteHMM, updated: bool = False) -> None:
    if updated:
        headings = ("Updated initial state probabilities:",
                    "Updated transition matrix (column j = from state j):",
                    "Updated emission probabilities:")
    else:
        headings = ("Initial state probabilities:",
                    "State transition matrix (column j = from state j):",
                    "Emission probabilities for each state:")

    for heading, table in zip(headings, (initial_table(model),
                                         transition_table(model),
                                         emission_table(model))):
        console.print(heading)
        console.print(table)


def format_sequence(values: Sequence[int]) -> str:
    return " ".join(str(int(v)) for v in np.asarray(values).reshape(-1))
