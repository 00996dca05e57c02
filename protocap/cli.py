"""Command-line interface for capturing and replaying protoc plugin messages."""

from __future__ import annotations

import sys
from typing import BinaryIO

import click
from rich.console import Console
from rich.table import Table

from protocap.codec import (
    DEFAULT_ARTIFACT_NAME,
    CaptureError,
    CaptureOptions,
    Form,
    InputReadError,
    MessageKind,
    OutputWriteError,
    RequestSummary,
    run,
    summarize,
)
from protocap.logging import configure_logging, get_logger

logger = get_logger("cli")

USAGE = f"""\
\b
Call it as a protoc plugin to capture code generation requests:
  protoc --capture_out=. ...
will create a file {DEFAULT_ARTIFACT_NAME} in the current directory.

To support usage as a plugin, --wrap is on by default. Use --no-wrap if you
do not want to convert input requests to responses, like when you intend to
pipe the result into the plugin under test.

\b
Test a plugin independent of protoc (result as JSON):
  < cgreq.proto.msg PLUGIN \\
  | protoc-gen-capture --resp-in --no-wrap --json-out \\
  > generation-response.json

\b
Convert the code generation request to JSON:
  < cgreq.proto.msg protoc-gen-capture --no-wrap --json-out \\
  > generation-request.json

This makes it possible to diff results of different plugin versions.

The conversion always decodes and re-encodes. Unknown message parts may be
dropped. Decoding of responses is shallow: generated file contents are never
decoded, even if they hold protos.
"""


def _read_input() -> bytes:
    try:
        return sys.stdin.buffer.read()
    except OSError as exc:
        raise InputReadError(f"Input could not be read from stdin: {exc}") from exc


def _write_output(data: bytes) -> None:
    stream = sys.stdout.buffer
    try:
        stream.write(data)
        stream.flush()
    except OSError as exc:
        raise OutputWriteError(f"Output error: {exc}") from exc


@click.command(epilog=USAGE)
@click.option(
    "--file",
    "artifact_name",
    default=DEFAULT_ARTIFACT_NAME,
    show_default=True,
    help="Only with --wrap: file name inside the code generator response.",
)
@click.option("--json-in", is_flag=True, help="Input is JSON, else binary proto.")
@click.option("--json-out", is_flag=True, help="Output as JSON, else deterministic binary proto.")
@click.option(
    "--req-in/--resp-in", default=True, show_default=True, help="Input is a request or a response."
)
@click.option(
    "--wrap/--no-wrap",
    default=True,
    show_default=True,
    help="Wrap the output as a single file inside a code generator response.",
)
@click.option("--verbose", "-v", is_flag=True, help="Log pipeline details to stderr.")
def capture(
    artifact_name: str, json_in: bool, json_out: bool, req_in: bool, wrap: bool, verbose: bool
) -> None:
    """Capture, replay and convert protoc plugin messages (stdin to stdout)."""
    configure_logging(verbose=verbose, prog_name=click.get_current_context().command_path)
    options = CaptureOptions(
        message_kind=MessageKind.REQUEST if req_in else MessageKind.RESPONSE,
        input_form=Form.TEXT if json_in else Form.BINARY,
        output_form=Form.TEXT if json_out else Form.BINARY,
        wrap=wrap,
        artifact_name=artifact_name,
    )
    logger.debug("Options: %s", options.to_json())

    try:
        out = run(_read_input(), options)
        _write_output(out)
    except CaptureError as exc:
        logger.error("%s", exc)
        sys.exit(1)


@click.group()
def cli() -> None:
    """protocap: capture and inspect protoc plugin messages."""


cli.add_command(capture)


@cli.command()
@click.option(
    "--input",
    "-i",
    "input_file",
    type=click.File("rb"),
    default="-",
    help="Captured request (default: stdin)",
)
@click.option("--json-in", is_flag=True, help="Input is JSON, else binary proto.")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.option("--verbose", "-v", is_flag=True, help="Log pipeline details to stderr.")
def info(input_file: BinaryIO, json_in: bool, output_json: bool, verbose: bool) -> None:
    """Display what a captured code generation request asks for."""
    configure_logging(verbose=verbose, prog_name=click.get_current_context().command_path)
    try:
        summary = summarize(input_file.read(), Form.TEXT if json_in else Form.BINARY)
    except CaptureError as exc:
        logger.error("%s", exc)
        sys.exit(1)

    if output_json:
        click.echo(summary.to_json(indent=2))
    else:
        _output_plain(summary)


def _output_plain(summary: RequestSummary) -> None:
    """Output a request summary using rich text formatting."""
    console = Console()

    console.print("[bold cyan]Request[/bold cyan]")
    table = Table(show_header=False, box=None, padding=(0, 2, 0, 2))
    table.add_column("Label", style="dim")
    table.add_column("Value", style="white")
    table.add_row("Compiler", summary.compiler_version or "unknown")
    table.add_row("Parameter", summary.parameter or "-")
    table.add_row("Proto files", str(summary.proto_files))
    console.print(table)
    console.print()

    console.print("[bold cyan]Files to generate[/bold cyan]")
    for name in summary.files_to_generate:
        console.print(f"  {name}")
    console.print()

    console.print("[bold cyan]Types[/bold cyan]")
    types_table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    types_table.add_column("Kind", style="white")
    types_table.add_column("Count", style="yellow", justify="right")
    types_table.add_row("Messages", str(summary.message_types))
    types_table.add_row("Enums", str(summary.enum_types))
    types_table.add_row("Extensions", str(summary.extensions))
    console.print(types_table)

    if summary.resolved_extensions:
        console.print()
        console.print("[bold cyan]Extensions set in request[/bold cyan]")
        for name in summary.resolved_extensions:
            console.print(f"  [green]{name}[/green]")


def main() -> None:
    """Main entry point."""
    cli(auto_envvar_prefix="PROTOCAP")


def plugin_main() -> None:
    """Entry point for running as protoc-gen-capture."""
    capture(auto_envvar_prefix="PROTOC_GEN_CAPTURE")


if __name__ == "__main__":
    main()
