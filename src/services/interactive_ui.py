"""Terminal output for the DocuGen CLI using Rich library."""

import logging

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from models.jobs import RenderAssets
from models.scene import MediaType, Scene

logger = logging.getLogger(__name__)


def _shorten(value: str | None, limit: int = 48) -> str:
    if not value:
        return "-"
    if value.startswith("data:"):
        return value.split(";", 1)[0] + ";base64,..."
    return value if len(value) <= limit else value[: limit - 3] + "..."


class InteractiveUI:
    """Rich-based terminal interface for the DocuGen CLI."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def display_welcome(self) -> None:
        """Display welcome banner."""
        self.console.print(
            Panel(
                "DocuGen AI Video Studio\nScript, narration, visuals and render from one topic",
                style="bold blue",
                border_style="blue",
            )
        )
        self.console.print()

    def display_scenes(self, scenes: list[Scene], title: str = "Scenes") -> None:
        """Show a table of scenes with their media state."""
        table = Table(show_header=True, box=None, padding=(0, 2))
        table.add_column("#", style="cyan", no_wrap=True)
        table.add_column("Narration", style="white")
        table.add_column("Duration", style="cyan", no_wrap=True)
        table.add_column("Audio", no_wrap=True)
        table.add_column("Visual", no_wrap=True)

        for index, scene in enumerate(scenes, start=1):
            visual_kind = "video" if scene.media_type == MediaType.VIDEO else "image"
            table.add_row(
                str(index),
                _shorten(scene.text, 60),
                f"{scene.duration:.1f}s",
                "[green]✓[/green]" if scene.audio_url else "[red]✗[/red]",
                f"{visual_kind} {'[green]✓[/green]' if scene.visual_url else '[red]✗[/red]'}",
            )

        self.console.print(Panel(table, title=f"[bold]{title}[/bold]", border_style="green"))
        self.console.print()

    def display_assets(self, assets: RenderAssets) -> None:
        """Show the output assets of a completed render."""
        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column("Asset", style="cyan")
        table.add_column("URL", style="white")
        for name, url in assets.to_dict().items():
            table.add_row(name, _shorten(url, 80))

        self.console.print(Panel(table, title="[bold]Render Assets[/bold]", border_style="green"))

    def display_errors(self, errors: list[str]) -> None:
        for error in errors:
            self.console.print(f"  [red]✗[/red] {error}")

    def display_processing_status(self, message: str, style: str = "yellow") -> None:
        """Show processing status update.

        Args:
            message: Status message to display
            style: Rich style for the message
        """
        self.console.print(f"[{style}]⠿ {message}[/{style}]")

    def display_error(self, message: str) -> None:
        """Display error message.

        Args:
            message: Error message to display
        """
        self.console.print(f"\n[bold red]Error:[/bold red] {message}\n")

    def display_success(self, message: str) -> None:
        """Display success message.

        Args:
            message: Success message to display
        """
        self.console.print(f"\n[bold green]✓[/bold green] {message}\n")
