"""Colored activity logger — ANSI-colored console logging for backend round trips.

Provides an ActivityLogger with color-coded output per console activity,
making it easy to follow list loads, mutations and media operations in
the terminal.

Color scheme:
    🔵 Blue    — List / detail fetches
    🟢 Green   — Create / Update
    🔷 Cyan    — Uploads
    🟡 Yellow  — Asset release
    🟣 Magenta — Dashboard
    🔴 Red     — Deletes and errors
"""

import logging
import time
from contextlib import contextmanager
from typing import Any


# ── ANSI Color Codes ─────────────────────────────────────────────────

class _Colors:
    """ANSI escape codes for terminal colors."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    MAGENTA = "\033[95m"
    CYAN = "\033[96m"
    GRAY = "\033[90m"


# ── Activity Definitions ─────────────────────────────────────────────

class ActivityStage:
    """Predefined console activities with colors and icons."""

    FETCH = ("FETCH", _Colors.BLUE, "📥")
    CREATE = ("CREATE", _Colors.GREEN, "➕")
    UPDATE = ("UPDATE", _Colors.GREEN, "✏️")
    DELETE = ("DELETE", _Colors.RED, "🗑️")
    UPLOAD = ("UPLOAD", _Colors.CYAN, "📁")
    RELEASE = ("RELEASE", _Colors.YELLOW, "♻️")
    DASHBOARD = ("DASHBOARD", _Colors.MAGENTA, "📊")
    ERROR = ("ERROR", _Colors.RED, "❌")


# ── ActivityLogger ───────────────────────────────────────────────────

class ActivityLogger:
    """Color-coded logger for console activities.

    Usage:
        log = ActivityLogger("EntityStore")
        with log.timed_step(ActivityStage.FETCH, "Loading clients"):
            result = await api.fetch_list(EntityType.CLIENTS)
    """

    def __init__(self, component_name: str):
        self._logger = logging.getLogger(component_name)

    def step_start(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        label, color, icon = stage
        formatted = (
            f"{color}{_Colors.BOLD}{icon} [{label}]{_Colors.RESET} "
            f"{color}{message}{_Colors.RESET}"
        )
        self._logger.info(formatted + _format_details(kwargs))

    def step_complete(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        label, color, icon = stage
        formatted = (
            f"{color}{icon} [{label}]{_Colors.RESET} "
            f"{_Colors.GREEN}✓ {message}{_Colors.RESET}"
        )
        self._logger.info(formatted + _format_details(kwargs))

    def step_error(
        self, stage: tuple[str, str, str], message: str, error: Exception | None = None
    ) -> None:
        """Log a failed activity in red."""
        label, _, icon = stage
        formatted = (
            f"{_Colors.RED}{_Colors.BOLD}❌ [{label}]{_Colors.RESET} "
            f"{_Colors.RED}{message}{_Colors.RESET}"
        )
        if error:
            formatted += f" {_Colors.DIM}→ {type(error).__name__}: {error}{_Colors.RESET}"
        self._logger.error(formatted)

    def warning(self, message: str, **kwargs: Any) -> None:
        formatted = f"   {_Colors.YELLOW}⚠ {message}{_Colors.RESET}"
        self._logger.warning(formatted + _format_details(kwargs))

    def detail(self, message: str, **kwargs: Any) -> None:
        formatted = f"   {_Colors.GRAY}├─ {message}{_Colors.RESET}"
        self._logger.info(formatted + _format_details(kwargs))

    @contextmanager
    def timed_step(self, stage: tuple[str, str, str], message: str, **kwargs: Any):
        """Context manager that logs start/end with elapsed time.

        Usage:
            with log.timed_step(ActivityStage.UPLOAD, "Uploading banner.png"):
                result = await api.upload_asset(file)
        """
        self.step_start(stage, message, **kwargs)
        start = time.perf_counter()
        try:
            yield
        except Exception as e:
            elapsed = time.perf_counter() - start
            self.step_error(stage, f"{message} — failed after {elapsed:.2f}s", error=e)
            raise
        else:
            elapsed = time.perf_counter() - start
            self.step_complete(stage, f"{message} — {elapsed:.2f}s")


def _format_details(kwargs: dict[str, Any]) -> str:
    if not kwargs:
        return ""
    details = " | ".join(f"{k}={v}" for k, v in kwargs.items())
    return f" {_Colors.GRAY}({details}){_Colors.RESET}"
