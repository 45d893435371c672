"""Menu system for xml formatter."""

import os
import inquirer
from rich.console import Console
from rich.align import Align
from rich.panel import Panel
from rich.text import Text

from xml_formatter.modules import (
    ConfigError,
    FormatRun,
    FormatStatus,
    FormatterConfig,
    LineEndingPolicy,
    RunSummary,
    format_project
)
from xml_formatter.settings import load_settings, save_settings

console = Console()


def clear_screen():
    """Clear the terminal screen."""
    os.system('cls' if os.name == 'nt' else 'clear')


def display_run_summary(summary: RunSummary) -> None:
    """
    Display a summary of a formatting run.

    Args:
        summary: The results of the run
    """
    for result in summary.failed:
        console.print(f"  [red]✗[/red] {result.path}: {result.reason}")

    skipped = summary.count(FormatStatus.SKIPPED) + summary.already_processed
    console.print(Panel(
        Text.from_markup(
            f"[green]• {summary.count(FormatStatus.REWRITTEN)}[/green] files reformatted\n"
            f"[cyan]• {summary.count(FormatStatus.UNCHANGED)}[/cyan] files unchanged\n"
            f"[yellow]• {skipped}[/yellow] files skipped\n"
            f"[red]• {summary.count(FormatStatus.FAILED)}[/red] files failed"
        ),
        title="Formatting Complete",
        border_style="red" if summary.failed else "green"
    ))


def prompt_options(config: FormatterConfig) -> bool:
    """
    Ask for the formatting options, updating the config in place.

    Returns:
        False if the user cancelled.
    """
    questions = [
        inquirer.Confirm(
            "use_tabs",
            message="Indent with tabs instead of spaces?",
            default=config.use_tabs,
        ),
        inquirer.List(
            "line_ending",
            message="Line ending of formatted files",
            choices=[
                ("AUTO - line endings of this system", LineEndingPolicy.AUTO.value),
                ("KEEP - preserve each file's line endings", LineEndingPolicy.KEEP.value),
                ("LF - Unix and Mac", LineEndingPolicy.LF.value),
                ("CRLF - DOS and Windows", LineEndingPolicy.CRLF.value),
                ("CR - early Mac", LineEndingPolicy.CR.value),
            ],
            default=str(config.line_ending).upper(),
        ),
    ]

    answers = inquirer.prompt(questions)
    if not answers:  # User pressed Ctrl+C
        return False

    config.use_tabs = answers["use_tabs"]
    config.line_ending = answers["line_ending"]
    return True


def format_directory_menu() -> None:
    """Ask for a directory and options, then format it."""
    config = FormatterConfig.from_settings(load_settings())

    questions = [
        inquirer.Path(
            "directory",
            message="Directory to format",
            default=os.getcwd(),
            path_type=inquirer.Path.DIRECTORY,
            exists=True,
        ),
    ]
    answers = inquirer.prompt(questions)
    if not answers:
        return

    config.base_directory = answers["directory"]
    if not prompt_options(config):
        return

    try:
        summary = format_project(config, FormatRun())
    except ConfigError as e:
        console.print(f"[bold red]Configuration error: {e}[/bold red]")
        return

    display_run_summary(summary)


def default_options_menu() -> None:
    """Change the options saved as defaults."""
    config = FormatterConfig.from_settings(load_settings())
    if not prompt_options(config):
        return

    if save_settings(config.to_settings()):
        console.print("[green]Defaults saved[/green]")


def display_main_menu() -> None:
    """Display the main menu and handle user selection."""
    try:
        while True:
            # Clear screen for full-screen effect
            clear_screen()

            title = Text("XML FORMATTER", style="bold cyan")
            console.print(Align.center(title, vertical="middle"))
            console.print()

            questions = [
                inquirer.List(
                    "action",
                    message="Select an action",
                    choices=[
                        ("Format a directory", "format"),
                        ("Change default options", "defaults"),
                        ("Exit", "exit"),
                    ],
                    carousel=True,  # Allow wrap-around navigation
                    default="format",
                ),
            ]

            answers = inquirer.prompt(questions)

            if not answers:  # User pressed Ctrl+C
                break

            action = answers["action"]

            if action == "exit":
                console.print("[yellow]Exiting...[/yellow]")
                break

            clear_screen()

            if action == "format":
                console.print("[bold green]Format XML Files[/bold green]")
                format_directory_menu()
            elif action == "defaults":
                console.print("[bold green]Default Options[/bold green]")
                default_options_menu()
            else:
                console.print(f"[red]Unknown action: {action}[/red]")

            # Pause for user to see results
            console.print("\n[cyan]Press Enter to continue...[/cyan]")
            input()
    finally:
        # Ensure we leave the screen clean
        console.print()
