"""Interactive prompts built on questionary."""
from typing import Any, List, Optional, Sequence, Tuple

import questionary
import typer


def select(
    message: str,
    choices: Sequence[Tuple[str, Any]],
    default: Optional[Any] = None,
) -> Any:
    """Single-select prompt over (title, value) pairs.

    The first choice is pre-selected unless default names another value.

    Raises:
        typer.Abort: If the user cancels the prompt (Ctrl-C / Esc)
    """
    if not choices:
        raise ValueError("select() needs at least one choice")

    options: List[questionary.Choice] = [
        questionary.Choice(title=title, value=value) for title, value in choices
    ]
    result = questionary.select(
        message,
        choices=options,
        default=default if default is not None else choices[0][1],
    ).ask()

    if result is None:
        raise typer.Abort()

    return result


def text(message: str) -> str:
    """Free-text prompt that requires a non-empty answer.

    Raises:
        typer.Abort: If the user cancels the prompt
    """
    result = questionary.text(
        message,
        validate=lambda value: bool(value.strip()) or "A value is required",
    ).ask()

    if result is None:
        raise typer.Abort()

    return result.strip()
