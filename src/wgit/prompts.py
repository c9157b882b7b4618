"""Interactive prompts and console output.

Handlers receive a Prompter instead of talking to the terminal directly, so
the same flows can be driven by scripted answers in tests.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from typing import NamedTuple

from rich.console import Console
from rich.live import Live
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.spinner import Spinner


class PromptCancelled(Exception):
    """The user aborted a prompt (Ctrl-C or end of input)."""


class Choice(NamedTuple):
    value: str
    label: str
    hint: str = ""


Validator = Callable[[str], "str | None"]


class Prompter:
    """Collects user input and renders output on a rich console."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    # Input

    def select(self, message: str, choices: Sequence[Choice], default: str | None = None) -> str:
        """Ask the user to pick one choice and return its value."""
        if not choices:
            raise ValueError("select() needs at least one choice")
        self._print_choices(message, choices)
        numbers = [str(i) for i in range(1, len(choices) + 1)]
        default_number = next(
            (str(i) for i, c in enumerate(choices, 1) if c.value == default),
            None,
        )
        kwargs = {"default": default_number} if default_number else {}
        answer = self._ask(lambda: Prompt.ask(
            "Choose",
            console=self.console,
            choices=numbers,
            show_choices=False,
            **kwargs,
        ))
        return choices[int(answer) - 1].value

    def multiselect(self, message: str, choices: Sequence[Choice], required: bool = False) -> list[str]:
        """Ask for any number of choices, entered as comma-separated numbers."""
        if not choices:
            return []
        self._print_choices(message, choices)
        while True:
            answer = self._ask(lambda: Prompt.ask(
                "Numbers separated by commas (a for all)",
                console=self.console,
                default="",
                show_default=False,
            ))
            selected = _parse_selection(answer, len(choices))
            if selected is None:
                self.console.print("[red]Please enter numbers from the list[/red]")
                continue
            if required and not selected:
                self.console.print("[red]Select at least one item[/red]")
                continue
            return [choices[i].value for i in selected]

    def text(
        self,
        message: str,
        placeholder: str | None = None,
        default: str | None = None,
        validate: Validator | None = None,
    ) -> str:
        """Ask for free text, re-asking until `validate` returns no error."""
        label = message
        if placeholder:
            label += f" [dim]({escape(placeholder)})[/dim]"
        while True:
            value = self._ask(lambda: Prompt.ask(
                label,
                console=self.console,
                default=default or "",
                show_default=bool(default),
            ))
            value = value.strip()
            error = validate(value) if validate else None
            if error:
                self.console.print(f"[red]{error}[/red]")
                continue
            return value

    def confirm(self, message: str, default: bool = True) -> bool:
        return self._ask(lambda: Confirm.ask(message, console=self.console, default=default))

    def _ask(self, ask):
        try:
            return ask()
        except (KeyboardInterrupt, EOFError):
            self.console.print()
            raise PromptCancelled()

    def _print_choices(self, message: str, choices: Sequence[Choice]) -> None:
        self.console.print(f"\n[bold]{message}[/bold]")
        for i, choice in enumerate(choices, 1):
            hint = f"  [dim]{escape(choice.hint)}[/dim]" if choice.hint else ""
            self.console.print(f"  [cyan]{i:>2}[/cyan]  {escape(choice.label)}{hint}")

    # Output

    @contextmanager
    def spinner(self, text: str) -> Iterator[None]:
        """Show a transient spinner while the block runs."""
        with Live(
            Spinner("dots", text=f"[cyan]{text}[/cyan]"),
            console=self.console,
            transient=True,
        ):
            yield

    def intro(self, title: str) -> None:
        self.console.print(Panel.fit(f"[bold]{title}[/bold]", border_style="blue"))

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗ {message}[/red]")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]⚠ {message}[/yellow]")

    def info(self, message: str) -> None:
        self.console.print(f"[cyan]ℹ[/cyan] {message}")

    def cancelled(self, message: str = "Operation cancelled") -> None:
        self.console.print(f"[dim]{message}[/dim]")

    def output(self, text: str) -> None:
        """Print raw git output without markup processing."""
        if text:
            self.console.print(text, markup=False, highlight=False)


def _parse_selection(answer: str, count: int) -> list[int] | None:
    answer = answer.strip().lower()
    if not answer:
        return []
    if answer in ("a", "all"):
        return list(range(count))
    indexes: list[int] = []
    for part in answer.replace(" ", ",").split(","):
        if not part:
            continue
        if not part.isdigit() or not 1 <= int(part) <= count:
            return None
        index = int(part) - 1
        if index not in indexes:
            indexes.append(index)
    return indexes
