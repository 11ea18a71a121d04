import os
import threading
from datetime import datetime
from enum import Enum

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text


class LogLevel(Enum):
    """Log levels"""
    DEBUG = 0
    INFO = 1
    SUCCESS = 2
    WARNING = 3
    ERROR = 4


class Logger:
    """
    Console logger (thread safe)

    Supports:
    - coloured output through rich
    - summary tables
    - level control (DDOC_SYNC_LOG_LEVEL)
    """

    _STYLES = {
        LogLevel.DEBUG: "dim",
        LogLevel.INFO: "blue",
        LogLevel.SUCCESS: "green",
        LogLevel.WARNING: "yellow",
        LogLevel.ERROR: "red bold",
    }

    def __init__(self, name="DdocSync", level=LogLevel.INFO, console: Console = None):
        self.name = name
        self.level = level
        self._lock = threading.Lock()
        self.console = console or Console(stderr=True)

        env_level = os.getenv("DDOC_SYNC_LOG_LEVEL", "").upper()
        if env_level in LogLevel.__members__:
            self.level = LogLevel[env_level]

    def set_level(self, level: LogLevel):
        self.level = level

    def _should_log(self, level: LogLevel) -> bool:
        return level.value >= self.level.value

    def _log(self, level: LogLevel, icon, message):
        if not self._should_log(level):
            return

        timestamp = datetime.now().strftime("%H:%M:%S")
        style = self._STYLES[level]
        with self._lock:
            # Text is never parsed as markup, brackets in paths and JS stay literal
            self.console.print(Text.assemble((f"[{timestamp}] ", "cyan"), (f"{icon} {message}", style)))

    def debug(self, message, icon="🔧"):
        """Only shown in DEBUG mode"""
        self._log(LogLevel.DEBUG, icon, message)

    def info(self, message, icon="ℹ️ "):
        self._log(LogLevel.INFO, icon, message)

    def success(self, message, icon="✅"):
        self._log(LogLevel.SUCCESS, icon, message)

    def warning(self, message, icon="⚠️ "):
        self._log(LogLevel.WARNING, icon, message)

    def error(self, message, icon="❌"):
        self._log(LogLevel.ERROR, icon, message)

    def header(self, message, icon=""):
        if not self._should_log(LogLevel.INFO):
            return

        with self._lock:
            title = f"{icon} {message}" if icon else message
            self.console.print(Panel(title, style="bold magenta", width=50))

    def rule(self, message=""):
        if not self._should_log(LogLevel.INFO):
            return

        with self._lock:
            self.console.rule(message)

    def summary_table(self, title: str, data: dict):
        """Print a two-column summary table.

        Args:
            title: table title
            data: row label -> value
        """
        if not self._should_log(LogLevel.INFO):
            return

        with self._lock:
            table = Table(title=title, show_header=True, header_style="bold cyan")
            table.add_column("Status", style="dim")
            table.add_column("Count", justify="right")

            for key, value in data.items():
                if "✅" in key:
                    table.add_row(key, f"[green]{value}[/green]")
                elif "❌" in key:
                    table.add_row(key, f"[red]{value}[/red]")
                elif "⏭️" in key:
                    table.add_row(key, f"[yellow]{value}[/yellow]")
                else:
                    table.add_row(key, str(value))

            self.console.print(table)


# Global logger instance
logger = Logger()
