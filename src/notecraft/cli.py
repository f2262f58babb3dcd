from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn

import click
import typer
from rich.console import Console
from typer.core import TyperCommand, TyperGroup

from notecraft.composer import check_editor, create_note, launch_editor
from notecraft.config import load_env
from notecraft.models import NoteRecord, TagNode
from notecraft.prompts import ConsoleInput, ResponsesExhaustedError, create_input_source
from notecraft.selector import select_tags
from notecraft.skim import STDOUT_TARGET, extract_matching, skim_pdf
from notecraft.tags import TagStoreError, load_tag_store
from notecraft.terminal import configure_logging, err_console, error
from notecraft.tools import MissingDependencyError


class _UsageExitsOne:
    """Usage errors and help output exit with status 1 instead of Click's 2 and 0."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)  # type: ignore[misc]
        except click.UsageError as exc:
            exc.exit_code = 1
            raise
        except click.exceptions.Exit as exc:
            if exc.exit_code == 0:
                raise click.exceptions.Exit(1) from exc
            raise


class NotecraftGroup(_UsageExitsOne, TyperGroup):
    pass


class NotecraftCommand(_UsageExitsOne, TyperCommand):
    pass


app = typer.Typer(
    cls=NotecraftGroup,
    help="Capture research notes as markdown with YAML front matter, and skim PDFs.",
    context_settings={"help_option_names": ["-h", "--help"]},
    no_args_is_help=True,
)
console = Console(highlight=False)

_LENIENT = {"allow_extra_args": True, "ignore_unknown_options": True}


def _usage_error(ctx: typer.Context, message: str) -> NoReturn:
    error(message)
    err_console.print(ctx.command.get_usage(ctx), markup=False)
    err_console.print(f"Try '{ctx.command_path} --help' for help.", markup=False)
    raise typer.Exit(1)


def _fail(exc: Exception) -> NoReturn:
    error(str(exc))
    raise typer.Exit(1)


def _load_tags(tags_file: Path) -> list[TagNode]:
    try:
        return load_tag_store(tags_file)
    except (FileNotFoundError, TagStoreError) as exc:
        _fail(exc)


@app.callback()
def main(
    log_level: str | None = typer.Option(
        None, "--log-level", help="Logging level (DEBUG, INFO, WARNING, ...). Default: NOTECRAFT_LOG_LEVEL."
    ),
) -> None:
    level = (log_level or load_env().log_level).upper()
    if not isinstance(logging.getLevelName(level), int):
        error(f"Unknown log level '{level}'.")
        raise typer.Exit(1)
    configure_logging(level)


@app.command("new", cls=NotecraftCommand, context_settings=_LENIENT)
def new_cmd(
    ctx: typer.Context,
    title: str = typer.Option("", "--title", "-t", help="The main title of the note. (Required)"),
    filename: str = typer.Option(
        "", "--filename", "-f", help="The base name for the markdown file (e.g., 'My New Note'). (Required)"
    ),
    description: str = typer.Option(
        "", "--description", "-d", help="A short description that populates the body and YAML notes. (Required)"
    ),
    url: str = typer.Option("", "--url", "-u", help="A URL to include in the note. (Required)"),
    open_code: str = typer.Option(
        "true", "--open-code", "-c", help="'true' (default) opens the file in the editor, 'false' does not."
    ),
    tags_file: Path | None = typer.Option(None, "--tags-file", help="Tag store JSON. Default: NOTECRAFT_TAGS_FILE."),
) -> None:
    """Create a markdown note with status and tags chosen interactively."""
    if ctx.args:
        _usage_error(ctx, f"Unrecognized arguments: '{' '.join(ctx.args)}'")
    if open_code not in ("true", "false"):
        _usage_error(ctx, "--open-code must be 'true' or 'false'.")
    if not (title and filename and description and url):
        _usage_error(ctx, "Required options (--title, --filename, --description, --url) are missing.")

    env = load_env()
    note = NoteRecord(
        title=title,
        filename_base=filename,
        description=description,
        url=url,
        open_editor=open_code == "true",
    )
    try:
        check_editor(env.editor_command, note.open_editor)
    except MissingDependencyError as exc:
        _fail(exc)
    tags = _load_tags(tags_file or Path(env.tags_file))

    path = create_note(note, ConsoleInput(), tags)
    console.print(f"Successfully created {path.name}", markup=False)

    if not note.open_editor:
        console.print("Skipping editor launch as --open-code is set to 'false'.", markup=False)
        return
    console.print(f"Launching {env.editor_command} with {path.name}...", markup=False)
    try:
        launch_editor(env.editor_command, path)
    except RuntimeError as exc:
        _fail(exc)


@app.command("select-tags", cls=NotecraftCommand)
def select_tags_cmd(
    ctx: typer.Context,
    tags_file: Path | None = typer.Option(
        None, "--tags-file", "-t", help="Path to the tag store JSON. Default: NOTECRAFT_TAGS_FILE or all_tags.json."
    ),
    test_mode: bool = typer.Option(False, "--test-mode", help="Read answers from --test-responses."),
    test_responses: str | None = typer.Option(
        None, "--test-responses", help="Comma-separated answers for test mode (e.g., '1,3,1 4,4,1 3,done')."
    ),
) -> None:
    """Pick tags from a numbered menu and print them as one comma-separated line."""
    try:
        source = create_input_source(test_mode, test_responses)
    except ValueError as exc:
        _usage_error(ctx, str(exc))

    tags = _load_tags(tags_file or Path(load_env().tags_file))
    try:
        selection = select_tags(tags, source)
    except ResponsesExhaustedError as exc:
        _fail(exc)
    typer.echo(selection.as_line())


@app.command("skim", cls=NotecraftCommand)
def skim_cmd(
    ctx: typer.Context,
    pdf_path: Path | None = typer.Argument(None, help="The PDF file to process."),
    nlines: int | None = typer.Option(
        None, "--nlines", "-n", min=0, help="Number of lines to output for the summary (default: 6)."
    ),
) -> None:
    """Print a short description from the first pages of a PDF."""
    if pdf_path is None:
        _usage_error(ctx, "PDF filename not provided.")
    env = load_env()
    try:
        summary = skim_pdf(
            pdf_path,
            nlines=env.skim_lines if nlines is None else nlines,
            command=env.pdftotext_command,
        )
    except (FileNotFoundError, MissingDependencyError, RuntimeError) as exc:
        _fail(exc)
    typer.echo(summary)


@app.command("extract-pages", cls=NotecraftCommand)
def extract_pages_cmd(
    pattern: str = typer.Argument(..., help="File name pattern to match, e.g. '*.pdf'."),
    first: int = typer.Argument(..., min=1, help="First page to extract."),
    last: int = typer.Argument(..., min=1, help="Last page to extract."),
    output: str = typer.Argument(STDOUT_TARGET, help="Output file to append to, or '-' for stdout."),
) -> None:
    """Append the file name and page-range text of every matching file to OUTPUT."""
    env = load_env()
    try:
        matches = extract_matching(pattern, first, last, output, command=env.pdftotext_command)
    except (MissingDependencyError, RuntimeError) as exc:
        _fail(exc)
    if not matches:
        err_console.print(f"No files matching '{pattern}'.", style="yellow", markup=False)


if __name__ == "__main__":
    app()
