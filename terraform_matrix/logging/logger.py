"""Event logging for matrix runs."""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, List
from enum import Enum
from datetime import datetime
import json
import sys
import threading


class LogLevel(str, Enum):
    """Log severity levels."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


LEVEL_ORDER = {
    LogLevel.DEBUG: 0,
    LogLevel.INFO: 1,
    LogLevel.WARNING: 2,
    LogLevel.ERROR: 3,
    LogLevel.CRITICAL: 4,
}


class Logger(ABC):
    """Abstract base class for event logging."""

    @abstractmethod
    def log(
        self,
        level: LogLevel,
        event: str,
        message: str = "",
        data: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Log an event with optional data.

        Args:
            level: Log severity level
            event: Event name, e.g. ``case.completed``
            message: Human-readable message
            data: Optional metadata dictionary
        """

    def debug(self, event: str, message: str = "", data: Optional[Dict[str, Any]] = None) -> None:
        """Log debug message."""
        self.log(LogLevel.DEBUG, event, message, data)

    def info(self, event: str, message: str = "", data: Optional[Dict[str, Any]] = None) -> None:
        """Log info message."""
        self.log(LogLevel.INFO, event, message, data)

    def warning(self, event: str, message: str = "", data: Optional[Dict[str, Any]] = None) -> None:
        """Log warning message."""
        self.log(LogLevel.WARNING, event, message, data)

    def error(self, event: str, message: str = "", data: Optional[Dict[str, Any]] = None) -> None:
        """Log error message."""
        self.log(LogLevel.ERROR, event, message, data)

    def critical(self, event: str, message: str = "", data: Optional[Dict[str, Any]] = None) -> None:
        """Log critical message."""
        self.log(LogLevel.CRITICAL, event, message, data)


class ConsoleLogger(Logger):
    """Console logger with colored output, safe to share between worker threads."""

    # ANSI color codes
    COLORS = {
        LogLevel.DEBUG: "\033[36m",      # Cyan
        LogLevel.INFO: "\033[32m",       # Green
        LogLevel.WARNING: "\033[33m",    # Yellow
        LogLevel.ERROR: "\033[31m",      # Red
        LogLevel.CRITICAL: "\033[35m",   # Magenta
    }
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    ICONS = {
        "run.started": "🚀",
        "run.completed": "✅",
        "suite.started": "📂",
        "suite.completed": "📊",
        "case.started": "🔨",
        "case.completed": "✓",
        "case.error": "❌",
        "terraform.init": "📦",
        "terraform.validate": "✓",
        "workspace.created": "📁",
        "workspace.removed": "🧹",
    }

    def __init__(
        self,
        min_level: LogLevel = LogLevel.INFO,
        colored: bool = True,
        show_timestamp: bool = False,
        show_data: bool = True,
        stream=None,
    ):
        """
        Initialize console logger.

        Args:
            min_level: Minimum log level to display
            colored: Whether to use colored output (ignored when not a TTY)
            show_timestamp: Whether to show timestamps
            show_data: Whether to show the key data fields
            stream: Output stream, defaults to stdout
        """
        self.stream = stream or sys.stdout
        self.min_level = min_level
        self.colored = colored and self.stream.isatty()
        self.show_timestamp = show_timestamp
        self.show_data = show_data
        self._lock = threading.Lock()

    def log(
        self,
        level: LogLevel,
        event: str,
        message: str = "",
        data: Optional[Dict[str, Any]] = None
    ) -> None:
        """Log an event to the console."""
        if LEVEL_ORDER[level] < LEVEL_ORDER[self.min_level]:
            return

        if event in ("run.started", "run.completed", "suite.started"):
            lines = self._format_major_event(event, message, data)
        else:
            lines = [self._format_standard(level, event, message, data)]

        # Cases finish on worker threads; keep each event's lines together
        with self._lock:
            for line in lines:
                print(line, file=self.stream)

    def _paint(self, text: str, code: str) -> str:
        if not self.colored:
            return text
        return f"{code}{text}{self.RESET}"

    def _format_standard(
        self,
        level: LogLevel,
        event: str,
        message: str = "",
        data: Optional[Dict[str, Any]] = None
    ) -> str:
        parts = []

        if self.show_timestamp:
            parts.append(self._paint(datetime.now().strftime("%H:%M:%S"), self.DIM))

        parts.append(self.ICONS.get(event, "•"))
        parts.append(self._paint(message or event, self.COLORS.get(level, "")))

        if data and self.show_data:
            key_data = self._extract_key_data(data)
            if key_data:
                parts.append(self._paint(f"({key_data})", self.DIM))

        return "  " + " ".join(parts)

    def _format_major_event(
        self,
        event: str,
        message: str = "",
        data: Optional[Dict[str, Any]] = None
    ) -> List[str]:
        """Format major events with visual separation."""
        if event == "suite.started":
            suite = data.get("suite", "unknown") if data else "unknown"
            module = data.get("module", "") if data else ""
            return [
                "",
                "─" * 70,
                f"📂 {self._paint(suite, self.BOLD)} {self._paint(f'[{module}]', self.DIM)}",
                "─" * 70,
            ]
        if event == "run.started":
            lines = ["", "=" * 70, self._paint("🚀 Terraform Module Matrix Run", self.BOLD), "=" * 70]
            if message:
                lines.append(f"📁 {message}")
            return lines
        lines = ["", "=" * 70, self._paint("✅ Run Completed", self.BOLD)]
        if message:
            lines.append(f"   {message}")
        lines.extend(["=" * 70, ""])
        return lines

    def _extract_key_data(self, data: Dict[str, Any]) -> str:
        """Extract the most important data for display."""
        priority = ["status", "count", "total", "passed", "failed", "errors", "attempts"]

        key_items = []
        for key in priority:
            if key in data:
                key_items.append(f"{key}={data[key]}")

        return ", ".join(key_items)


class NullLogger(Logger):
    """Logger that does nothing (for testing or disabling logging)."""

    def log(
        self,
        level: LogLevel,
        event: str,
        message: str = "",
        data: Optional[Dict[str, Any]] = None
    ) -> None:
        """Do nothing."""


class FileLogger(Logger):
    """Logger that writes JSON lines to a file."""

    def __init__(self, file_path: str, min_level: LogLevel = LogLevel.INFO):
        """
        Initialize file logger.

        Args:
            file_path: Path to log file
            min_level: Minimum log level to write
        """
        self.file_path = file_path
        self.min_level = min_level
        self._lock = threading.Lock()

    def log(
        self,
        level: LogLevel,
        event: str,
        message: str = "",
        data: Optional[Dict[str, Any]] = None
    ) -> None:
        """Log an event to file as JSON."""
        if LEVEL_ORDER[level] < LEVEL_ORDER[self.min_level]:
            return

        log_entry = {
            "timestamp": datetime.now().isoformat(),
            "level": level.value,
            "event": event,
            "message": message,
        }

        if data:
            log_entry["data"] = data

        with self._lock:
            with open(self.file_path, 'a') as f:
                f.write(json.dumps(log_entry, default=str) + '\n')


class MultiLogger(Logger):
    """Fan out every event to several loggers."""

    def __init__(self, *loggers: Logger):
        self.loggers = list(loggers)

    def log(
        self,
        level: LogLevel,
        event: str,
        message: str = "",
        data: Optional[Dict[str, Any]] = None
    ) -> None:
        for logger in self.loggers:
            logger.log(level, event, message, data)
