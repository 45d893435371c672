"""Command line interface for xml formatter."""

import os
import sys
import logging
import argparse
from typing import List, Optional
from rich.console import Console
from rich.logging import RichHandler

from xml_formatter.menu import display_main_menu, display_run_summary
from xml_formatter.modules import ConfigError, FormatterConfig, FormatRun
from xml_formatter.modules.project_formatter import format_directories
from xml_formatter.settings import load_settings, save_settings

console = Console()

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_CONFIG_ERROR = 2


def setup_logging(debug: bool = False) -> None:
    """Send log records to the console through rich."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=False)]
    )
    if debug:
        logging.getLogger().setLevel(logging.DEBUG)


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line argument parser."""
    parser = argparse.ArgumentParser(description='Format the XML files of a project')
    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    format_parser = subparsers.add_parser('format', help='Format XML files in place')
    format_parser.add_argument(
        'directories',
        nargs='*',
        help='Base directories to format (default: current directory)'
    )
    format_parser.add_argument(
        '--include',
        action='append',
        dest='includes',
        metavar='PATTERN',
        help='Pattern of files to format, repeatable (default: **/*.xml)'
    )
    format_parser.add_argument(
        '--exclude',
        action='append',
        dest='excludes',
        metavar='PATTERN',
        help="Pattern of files to skip, repeatable (default: **/target/**; pass '' to exclude nothing)"
    )
    format_parser.add_argument(
        '--use-tabs',
        action='store_true',
        default=None,
        help='Indent with tabs instead of four spaces'
    )
    format_parser.add_argument(
        '--line-ending',
        metavar='POLICY',
        help='Line ending of formatted files: AUTO, KEEP, LF, CRLF or CR (default: AUTO)'
    )
    format_parser.add_argument(
        '--encoding',
        help='Encoding used to read files (default: platform encoding)'
    )
    format_parser.add_argument(
        '--save-defaults',
        action='store_true',
        help='Save the given options as defaults for later runs'
    )
    format_parser.add_argument(
        '--settings-file',
        help='Read and save defaults in this file instead of ~/.xml_formatter/settings.json'
    )
    format_parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )
    return parser


def run_format(args: argparse.Namespace) -> int:
    """Run the format command."""
    setup_logging(args.debug)

    config = FormatterConfig.from_settings(
        load_settings(args.settings_file),
        includes=args.includes,
        excludes=args.excludes,
        use_tabs=args.use_tabs,
        line_ending=args.line_ending,
        encoding=args.encoding
    )
    directories = args.directories or [os.getcwd()]

    try:
        summary = format_directories(directories, config, FormatRun())
    except ConfigError as e:
        console.print(f"[bold red]Configuration error: {e}[/bold red]")
        return EXIT_CONFIG_ERROR

    if args.save_defaults:
        if save_settings(config.to_settings(), args.settings_file):
            console.print("[green]Saved options as defaults[/green]")

    display_run_summary(summary)
    return EXIT_FAILURES if summary.failed else EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI application."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == 'format':
            return run_format(args)
        else:
            # No command specified, show the interactive menu
            setup_logging()
            display_main_menu()
            return EXIT_OK
    except KeyboardInterrupt:
        console.print("\n[bold yellow]Process cancelled by user.[/bold yellow]")
        return EXIT_FAILURES


if __name__ == "__main__":
    sys.exit(main())
