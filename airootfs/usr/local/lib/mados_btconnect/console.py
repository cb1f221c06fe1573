"""madOS Bluetooth Connect - Terminal output.

Coloured status messages for the user and the logging setup for
diagnostics.  Log records go to stderr so they never interleave with the
menu on stdout.
"""

import logging
import os
import sys

# ANSI color codes
RED = '\033[0;31m'
GREEN = '\033[0;32m'
YELLOW = '\033[1;33m'
BLUE = '\033[0;34m'
NC = '\033[0m'  # No Color


def colors_enabled(stream) -> bool:
    """Return True if ANSI colors should be written to *stream*."""
    if os.environ.get('NO_COLOR'):
        return False
    return hasattr(stream, 'isatty') and stream.isatty()


class Console:
    """Prints prefixed, optionally coloured, messages."""

    def __init__(self, stream=None, use_colors=None):
        self.stream = stream if stream is not None else sys.stdout
        self.use_colors = colors_enabled(self.stream) if use_colors is None else use_colors

    def _prefixed(self, color, tag, message):
        if self.use_colors:
            self.line(f"{color}[{tag}]{NC} {message}")
        else:
            self.line(f"[{tag}] {message}")

    def line(self, message=''):
        print(message, file=self.stream, flush=True)

    def status(self, message):
        self._prefixed(GREEN, 'INFO', message)

    def info(self, message):
        self._prefixed(BLUE, 'INFO', message)

    def warning(self, message):
        self._prefixed(YELLOW, 'WARNING', message)

    def error(self, message):
        self._prefixed(RED, 'ERROR', message)


class ColorFormatter(logging.Formatter):
    """Log formatter that colours the level name on a terminal."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': GREEN,
        'WARNING': YELLOW,
        'ERROR': RED,
        'CRITICAL': '\033[35m',
    }

    def __init__(self, use_colors=True):
        super().__init__(
            fmt='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            datefmt='%H:%M:%S',
        )
        self.use_colors = use_colors

    def format(self, record):
        if not self.use_colors:
            return super().format(record)
        original = record.levelname
        record.levelname = f"{self.COLORS.get(original, '')}{original}{NC}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


def setup_logging(level=None):
    """Send package log records to stderr.

    The level defaults to ``$MADOS_BT_LOG_LEVEL`` or WARNING.
    """
    if level is None:
        name = os.environ.get('MADOS_BT_LOG_LEVEL', 'WARNING').upper()
        level = getattr(logging, name, logging.WARNING)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ColorFormatter(use_colors=colors_enabled(sys.stderr)))

    logger = logging.getLogger('mados_btconnect')
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger
