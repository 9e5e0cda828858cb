"""
Logging configuration for the MCP GitHub server.

Console output goes to stderr: when the server runs on the stdio transport,
stdout carries the MCP protocol stream and must stay clean.
"""
import logging
import sys
from datetime import datetime
from typing import List, Optional, TextIO

_RESET = "\033[0m"
_DIM = "\033[2m"
_BLUE = "\033[94m"

# level -> (ANSI style, fixed-width label)
LEVEL_STYLES = {
    logging.DEBUG: (_DIM, "DEBUG"),
    logging.INFO: ("\033[96m", "INFO "),
    logging.WARNING: ("\033[93m", "WARN "),
    logging.ERROR: ("\033[91m", "ERROR"),
    logging.CRITICAL: ("\033[1m\033[91m", "CRIT "),
}

# Icons keyed by the last segment of the logger name
COMPONENT_ICONS = {
    "github_client": "🐙",
    "batch": "📦",
    "aggregation": "📊",
    "operations": "🛠️",
    "server": "🔌",
    "api": "🌐",
    "auth": "🔑",
    "__main__": "🚀",
}
DEFAULT_ICON = "▶️"

# Third-party loggers held at WARNING; they log every request at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access", "mcp.server.lowlevel.server")


class ServerFormatter(logging.Formatter):
    """One line per record: time | level | component | message."""

    def __init__(self, use_colors: bool = True, stream: Optional[TextIO] = None):
        super().__init__()
        stream = stream or sys.stderr
        self.use_colors = use_colors and hasattr(stream, "isatty") and stream.isatty()

    def _paint(self, text: str, style: str) -> str:
        return f"{style}{text}{_RESET}" if self.use_colors else text

    def format(self, record: logging.LogRecord) -> str:
        style, label = LEVEL_STYLES.get(record.levelno, ("", record.levelname[:5].ljust(5)))
        component = record.name.rsplit(".", 1)[-1] if record.name else "root"
        icon = COMPONENT_ICONS.get(component, DEFAULT_ICON)
        stamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        sep = " │ " if self.use_colors else " | "
        line = sep.join((
            self._paint(stamp, _DIM),
            self._paint(label, style),
            f"{icon} {self._paint(f'{component:14}', _BLUE)}",
            record.getMessage(),
        ))
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(level: str = "INFO", log_file: Optional[str] = None, use_colors: bool = True) -> None:
    """
    Replace the root handlers with a stderr handler (and a file handler when
    `log_file` is set), all at `level`.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    handlers[0].setFormatter(ServerFormatter(use_colors=use_colors, stream=sys.stderr))
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
        handlers[-1].setFormatter(ServerFormatter(use_colors=False))

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(numeric_level)
    for handler in handlers:
        handler.setLevel(numeric_level)
        root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def log_batch_progress(batch_num: int, total_batches: int, label: str, logger: logging.Logger) -> None:
    width = 20
    done = batch_num / total_batches if total_batches else 1.0
    bar = "█" * int(done * width) + "░" * (width - int(done * width))
    logger.debug(f"[{bar}] {done * 100:.0f}% | Batch {batch_num}/{total_batches}: {label}")
