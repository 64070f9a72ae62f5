"""
Command‑line interface for MediBook.
Loads an optional patient book from CSV/Excel, then reads free-text commands
(e.g. "addappt Checkup nric/S1234567A date/2024-01-01 tp/0900-1000"),
parses them into command objects and applies them to the book.
"""

import logging
import sys
import typing

import click
from stairval.notepad import Notepad, create_notepad

from .book import PatientBook
from .commands import CommandResult
from .errors import CommandError
from .loader import load_sheets_as_tables, save_book
from .mapper import BookMapper
from .parser import BookParser

logger = logging.getLogger(__name__)

PROMPT = "medibook> "


@click.group()
@click.option("--verbose-logging", is_flag=True, help="Emit debug logs to stderr and show parser diagnostics")
@click.option(
    "--log-file-path",
    envvar="MEDIBOOK_LOG_FILE",
    type=click.Path(dir_okay=False, writable=True),
    help="Append timestamped logs to this file",
)
@click.pass_context
def main(ctx: click.Context, verbose_logging: bool, log_file_path: typing.Optional[str]):
    """MediBook: a command-line patient book for appointments and medical conditions."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose_logging
    _configure_logging(verbose_logging, log_file_path)


def _book_path_option(required: bool = False):
    return click.option(
        "-b",
        "--book-path",
        "book_path",
        envvar="MEDIBOOK_BOOK_PATH",
        required=required,
        type=click.Path(exists=True, dir_okay=False),
        help="CSV file or Excel workbook holding the patient book",
    )


_output_path_option = click.option(
    "-o",
    "--output-path",
    "output_path",
    type=click.Path(dir_okay=False, writable=True),
    help="save the book here when done (.csv or .xlsx)",
)


@main.command(name="shell")
@_book_path_option()
@_output_path_option
@click.pass_context
def shell(ctx: click.Context, book_path: typing.Optional[str], output_path: typing.Optional[str]):
    """
    Interactive loop: read one command per line until 'exit' or end of input.
    """
    book = _load_book(book_path)
    click.echo("Welcome to MediBook. Type 'help' to see all commands.")
    stdin = click.get_text_stream("stdin")
    while True:
        click.echo(PROMPT, nl=False)
        line = stdin.readline()
        if not line:
            click.echo("")
            break
        if not line.strip():
            continue
        ok, result = _run_line(book, line, ctx.obj["verbose"])
        click.echo(result.feedback if ok else click.style(result.feedback, fg="red"))
        if result.should_exit:
            break

    if output_path:
        _save(book, output_path)


@main.command(name="run")
@click.argument("command_lines", nargs=-1, required=True)
@_book_path_option()
@_output_path_option
@click.pass_context
def run(
    ctx: click.Context,
    command_lines: tuple[str, ...],
    book_path: typing.Optional[str],
    output_path: typing.Optional[str],
):
    """
    Execute each COMMAND_LINE in order. Exits with status 1 if any of them failed.
    """
    book = _load_book(book_path)
    failures = 0
    for line in command_lines:
        ok, result = _run_line(book, line, ctx.obj["verbose"])
        click.echo(result.feedback if ok else click.style(result.feedback, fg="red"))
        if not ok:
            failures += 1
        if result.should_exit:
            break

    if output_path:
        _save(book, output_path)
    if failures:
        sys.exit(1)


@main.command(name="audit-book")
@_book_path_option(required=True)
def audit_book(book_path: str):
    """
    Load the book and report mapping problems without changing anything.
    """
    notepad = create_notepad("book")
    book = _read_book(book_path, notepad)
    _report_issues(notepad, "loading book")
    click.echo(f"Loaded {len(book)} patients")
    click.echo(f"Loaded {sum(len(p.appointments) for p in book.patients())} appointments")


def _configure_logging(verbose_logging: bool, log_file_path: typing.Optional[str]) -> None:
    handlers: list[logging.Handler] = []
    if log_file_path:
        handlers.append(logging.FileHandler(log_file_path, mode="a", encoding="utf-8"))
    if verbose_logging:
        handlers.append(logging.StreamHandler(sys.stderr))
    if handlers:
        logging.basicConfig(
            level=logging.DEBUG if verbose_logging else logging.INFO,
            format="%(asctime)s %(levelname)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            handlers=handlers,
        )


def _read_book(book_path: str, notepad: Notepad) -> PatientBook:
    logger.info(f"Loading patient book from '{book_path}'")
    try:
        tables = load_sheets_as_tables(book_path)
    except Exception as e:
        logger.error(f"Failed to read '{book_path}': {e}")
        click.echo(f"Error: could not read patient book at {book_path}: {e}", err=True)
        sys.exit(1)
    logger.debug(f"Loaded sheets: {list(tables.keys())}")
    return BookMapper().apply_mapping(tables, notepad)


def _load_book(book_path: typing.Optional[str]) -> PatientBook:
    if not book_path:
        return PatientBook()
    notepad = create_notepad("book")
    book = _read_book(book_path, notepad)
    _report_issues(notepad, "loading book")
    return book


def _save(book: PatientBook, output_path: str) -> None:
    save_book(book, output_path)
    logger.info(f"Saved {len(book)} patients to '{output_path}'")
    click.echo(f"Saved {len(book)} patients to {output_path}")


def _run_line(book: PatientBook, line: str, verbose: bool = False) -> tuple[bool, CommandResult]:
    """
    Parse and execute one line of input.
    Returns (succeeded, result); a failure's result carries the message to show.
    """
    notepad = create_notepad("command")
    outcome = BookParser(notepad).parse_command(line)
    if verbose:
        _report_issues(notepad, "parsing command")
    if not outcome.ok:
        logger.info(f"Rejected input {line.strip()!r}: {outcome.failure.kind.name}")
        return False, CommandResult(outcome.failure.message)
    try:
        result = outcome.command.execute(book)
    except CommandError as e:
        logger.info(f"Command failed for {line.strip()!r}: {e}")
        return False, CommandResult(str(e))
    logger.debug(f"Executed {type(outcome.command).__name__}")
    return True, result


def _report_issues(notepad: Notepad, context: str) -> None:
    # if there were errors, show them
    if notepad.has_errors(include_subsections=True):
        click.echo(f"Errors found while {context}:")
        for err in notepad.errors():
            click.echo(f"- {err}")
    # show any warnings but keep going
    if notepad.has_warnings(include_subsections=True):
        click.echo(f"Warnings found while {context}:")
        for w in notepad.warnings():
            click.echo(f"- {w}")


if __name__ == "__main__":
    main()
