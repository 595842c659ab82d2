"""CLI entry point for pi-line: a small echo REPL. Uses Click for argument parsing."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from pi.line.config import load_config
from pi.line.session import EditSession
from pi.line.terminal import ProcessTerminal


@click.command()
@click.option("--prompt", default=">", show_default=True, help="Prompt shown before each line")
@click.option(
    "--history-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Persist history to this file (overrides PI_LINE_HISTORY_FILE)",
)
@click.option(
    "--history-size",
    type=click.IntRange(min=0),
    default=None,
    help="Number of lines to remember (overrides PI_LINE_HISTORY_SIZE)",
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr")
def main(prompt, history_file, history_size, verbose):
    """Read lines interactively and echo each one back."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )

    config = load_config()
    if history_file is not None:
        config.history_file = history_file
    if history_size is not None:
        config.history_size = history_size

    session = EditSession.from_config(config, ProcessTerminal())
    while True:
        try:
            line = session.read_line_bytes(prompt)
        except EOFError:
            break
        if line is None:
            break
        click.echo(line)


if __name__ == "__main__":
    main()
