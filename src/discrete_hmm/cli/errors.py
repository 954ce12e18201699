"""
Error handling for CLI commands.

Maps library exceptions to rich-formatted messages and exit codes.
"""

import traceback
from typing import List, Optional
import logging

import typer
from rich.console import Console
from rich.markup import escape

from ..exceptions import (
    HMMError,
    ModelTrainingError,
    NoFeasiblePathError,
    SymbolOutOfRangeError,
    ZeroProbabilityError,
)

console = Console()
logger = logging.getLogger(__name__)

EXIT_CODES = {
    "success": 0,
    "general_error": 1,
    "invalid_usage": 2,
    "model_error": 11,
    "training_error": 12
}


class CLIError(Exception):
    """Base exception for CLI-specific errors."""

    def __init__(self, message: str, exit_code: int = 1, suggestions: Optional[list] = None):
        self.message = message
        self.exit_code = exit_code
        self.suggestions = suggestions or []
        super().__init__(message)


def suggestions_for(error: Exception) -> List[str]:
    """Hints for the library errors a demo user can actually fix."""
    if isinstance(error, CLIError):
        return error.suggestions
    if isinstance(error, SymbolOutOfRangeError):
        return [f"Use symbols in the range 0..{error.n_symbols - 1}"]
    if isinstance(error, (ZeroProbabilityError, NoFeasiblePathError)):
        return ["The sequence is impossible under the model; check for zero probabilities"]
    if isinstance(error, ModelTrainingError):
        return [f"Training stopped at iteration {error.iteration}",
                "Try a positive --floor such as 1e-12"]
    return []


def exit_code_for(error: Exception) -> int:
    if isinstance(error, CLIError):
        return error.exit_code
    if isinstance(error, ModelTrainingError):
        return EXIT_CODES["training_error"]
    if isinstance(error, HMMError):
        return EXIT_CODES["model_error"]
    return EXIT_CODES["general_error"]


def format_error_message(error: Exception, operation: str, debug: bool = False) -> str:
    """Format error message with context and suggestions."""
    message_parts = [
        f"[red]Error during {operation}:[/red]",
        f"[red]{type(error).__name__}: {escape(str(error))}[/red]"
    ]

    suggestions = suggestions_for(error)
    if suggestions:
        message_parts.append("")
        message_parts.append("[yellow]Suggestions:[/yellow]")
        for suggestion in suggestions:
            message_parts.append(f"  • {escape(suggestion)}")

    if debug:
        message_parts.append("")
        message_parts.append("[dim]Debug information:[/dim]")
        message_parts.append(f"[dim]{escape(traceback.format_exc())}[/dim]")

    return "\n".join(message_parts)


def handle_cli_error(error: Exception, operation: str, debug: bool = False) -> None:
    """Display an error with rich formatting and exit with its code."""
    console.print(format_error_message(error, operation, debug))
    logger.error(f"CLI error in {operation}: {error}", exc_info=debug)
    raise typer.Exit(exit_code_for(error))


def parse_observations(text: str) -> List[int]:
    """Parse a comma or space separated list of integer symbols."""
    tokens = [token for token in text.replace(",", " ").split() if token]
    try:
        return [int(token) for token in tokens]
    except ValueError:
        raise CLIError(
            f"Observations must be integers, got: {text!r}",
            exit_code=EXIT_CODES["invalid_usage"],
            suggestions=["Example: --observations 0,0,1,0,1,1"]
        )
