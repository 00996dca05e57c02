"""Diagnostics on stderr for protocap and protoc-gen-capture.

stdout carries the converted message (and, under protoc, the plugin
response), so every log record goes to stderr. protoc relays a plugin's
stderr verbatim, which is why records carry the program name as a prefix.
"""

from __future__ import annotations

import logging

import click

ROOT = "protocap"


class ClickEchoHandler(logging.Handler):
    """Write records with ``click.echo(err=True)``.

    The stream is looked up on every record, so output follows whatever
    stderr click sees at that moment (including ``CliRunner`` captures).
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            click.echo(self.format(record), err=True)
        except Exception:  # pylint: disable=broad-except
            self.handleError(record)


def get_logger(name: str) -> logging.Logger:
    """Logger for one protocap module, e.g. ``get_logger("codec.decoder")``."""
    return logging.getLogger(f"{ROOT}.{name}")


def configure_logging(*, verbose: bool = False, prog_name: str = ROOT) -> logging.Logger:
    """Route protocap records to stderr, debug details only when ``verbose``."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(ROOT)
    logger.setLevel(level)
    logger.propagate = False

    # a command may run several times in one process
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = ClickEchoHandler(level)
    handler.setFormatter(logging.Formatter(f"{prog_name}: %(levelname)s %(message)s"))
    logger.addHandler(handler)
    return logger
