"""Interactive prompts rendered with rich."""

from typing import List, Optional, Sequence

from rich.columns import Columns
from rich.console import Console
from rich.prompt import Confirm, Prompt


class PromptService:
    """Asks the user for consent and for a version to install."""

    def __init__(self, console: Console):
        self.console = console

    def confirm(self, message: str, default: bool = True) -> bool:
        return Confirm.ask(message, console=self.console, default=default)

    def select(self, message: str, choices: Sequence[str]) -> Optional[str]:
        """Single-choice selection by list number or by value.

        Returns None when the user submits an empty answer.
        """
        options: List[str] = list(choices)
        self.console.print(
            Columns(
                [f"[cyan]{index:>3}[/cyan] {choice}" for index, choice in enumerate(options, 1)],
                column_first=True,
                padding=(0, 3),
            )
        )

        while True:
            answer = Prompt.ask(message, console=self.console, default="", show_default=False)
            answer = answer.strip()
            if not answer:
                return None
            if answer in options:
                return answer
            if answer.isdigit() and 1 <= int(answer) <= len(options):
                return options[int(answer) - 1]
            self.console.print(
                f"[yellow]'{answer}' is not in the list. "
                "Enter a number or a version shown above.[/yellow]"
            )
