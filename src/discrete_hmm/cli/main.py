"""
Main CLI application for DiscreteHMM system.

Runs the two-state demo: print parameters, decode, score, retrain.
"""

import sys
import logging
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel

from ..config import get_config
from ..logger import set_log_level
from .demo import DEMO_OBSERVATIONS, build_demo_model, format_sequence, print_parameters
from .errors import EXIT_CODES, handle_cli_error, parse_observations

console = Console()
logger = logging.getLogger(__name__)

app = typer.Typer(
    name="discrete-hmm",
    help="Discrete-observation Hidden Markov Models: Viterbi, forward-backward and Baum-Welch",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True
)


@app.command("demo")
def run_demo(
    observations: str = typer.Option(
        ",".join(str(o) for o in DEMO_OBSERVATIONS),
        "--observations",
        "-o",
        help="Comma separated observation symbols"
    ),
    max_iterations: Optional[int] = typer.Option(
        None,
        "--max-iterations",
        "--max-iter",
        "-i",
        help="Maximum Baum-Welch iterations (default from config)"
    ),
    tolerance: Optional[float] = typer.Option(
        None,
        "--tolerance",
        "-t",
        help="Convergence tolerance on the log-likelihood change"
    ),
    floor: float = typer.Option(
        1e-12,
        "--floor",
        "-f",
        help="Minimum probability applied after each M-step"
    ),
    debug: bool = typer.Option(False, "--debug", help="Show tracebacks on error")
):
    """Decode, score and retrain the two-state demo model."""
    try:
        obs = parse_observations(observations)
        model = build_demo_model()

        print_parameters(console, model)

        console.print(f"Observation sequence: {format_sequence(obs)}")
        states = model.decode(obs)
        console.print(f"Predicted hidden states (Viterbi): {format_sequence(states)}")

        log_likelihood = model.log_likelihood(obs)
        console.print(f"Log-likelihood of observation sequence: {log_likelihood:.6f}")

        result = model.train([obs], max_iterations=max_iterations,
                             tolerance=tolerance, floor=floor)

        console.print(Panel.fit(
            f"[bold]Parameters after Baum-Welch training[/bold]\n"
            f"Iterations: {result.iterations} ({result.state.value})\n"
            f"Final log-likelihood: {result.final_log_likelihood:.6f}",
            border_style="green"
        ))
        print_parameters(console, model, updated=True)

    except Exception as e:
        handle_cli_error(e, "demo", debug)


@app.command("generate")
def generate_sequence(
    length: int = typer.Option(10, "--length", "-n", help="Number of time steps"),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Random seed"),
    debug: bool = typer.Option(False, "--debug", help="Show tracebacks on error")
):
    """Sample observations and hidden states from the demo model."""
    try:
        model = build_demo_model()
        observations, states = model.generate(length, random_state=seed)
        console.print(f"Observations: {format_sequence(observations)}")
        console.print(f"States:       {format_sequence(states)}")
    except Exception as e:
        handle_cli_error(e, "generate", debug)


@app.command("version")
def show_version():
    """Show DiscreteHMM version information."""
    from .. import __version__

    console.print(Panel.fit(
        f"[bold]DiscreteHMM Version {__version__}[/bold]\n"
        f"Discrete-observation Hidden Markov Models\n"
        f"Python {sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
        border_style="blue"
    ))


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging"
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress all log output except errors"
    )
):
    """
    DiscreteHMM: discrete-observation Hidden Markov Models.

    \b
    Quick Start:
    1. Run the demo:        discrete-hmm demo
    2. Custom sequence:     discrete-hmm demo --observations 1,1,0,1
    3. Sample a sequence:   discrete-hmm generate --length 20 --seed 7
    """
    if quiet:
        set_log_level('ERROR')
    elif verbose:
        set_log_level('DEBUG')
    else:
        set_log_level(get_config('logging', 'level') or 'INFO')


def cli_main():
    """Main entry point for CLI with error handling."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(EXIT_CODES["general_error"])


if __name__ == "__main__":
    cli_main()
