"""Console reporter - summarizes what each build step produced."""

from dataclasses import dataclass, field

from rich.console import Console


@dataclass
class StepResult:
    """Outcome of one build step in one package.

    Attributes:
        package: Package name
        action: Past-tense description, e.g. "Created proxies"
        items: Names of the produced (or removed) outputs
        style: Rich style applied to each item
    """

    package: str
    action: str
    items: list[str] = field(default_factory=list)
    style: str = "bold green"

    def __bool__(self) -> bool:
        return bool(self.items)


class Reporter:
    """Prints step results with rich markup."""

    def __init__(self, console: Console | None = None, quiet: bool = False):
        self.console = console or Console()
        self.quiet = quiet

    def report(self, result: StepResult | None) -> None:
        """Print a step result; empty results print nothing."""
        if self.quiet or not result:
            return
        items = ", ".join(f"[{result.style}]{item}[/{result.style}]" for item in result.items)
        self.console.print()
        self.console.print(f"{result.action} in [bold]{result.package}[/bold]:")
        self.console.print(items)

    def error(self, message: str) -> None:
        self.console.print(f"[red]Error: {message}[/red]")

    def info(self, message: str) -> None:
        if not self.quiet:
            self.console.print(message)


__all__ = ["Reporter", "StepResult"]
