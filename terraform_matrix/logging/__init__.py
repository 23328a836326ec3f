"""Logging module for terraform-module-matrix."""

from .logger import (
    Logger,
    LogLevel,
    ConsoleLogger,
    NullLogger,
    FileLogger,
    MultiLogger,
)

__all__ = [
    "Logger",
    "LogLevel",
    "ConsoleLogger",
    "NullLogger",
    "FileLogger",
    "MultiLogger",
]
