"""User-facing progress output with mode awareness."""

from abc import ABC, abstractmethod

import click

from gistsync.cli.output import user_output


class UserFeedback(ABC):
    """Provides user-facing progress output that's mode-aware.

    The engine and package operations report through ctx.feedback instead of
    printing, so output suppression is decided once at the CLI entry point.

    Two modes:
    - Interactive: Show all messages (info, success, warning, error)
    - Quiet: Only show warnings and errors
    """

    @abstractmethod
    def info(self, message: str) -> None:
        """Show informational message (suppressed in quiet mode)."""

    @abstractmethod
    def success(self, message: str) -> None:
        """Show success message (suppressed in quiet mode)."""

    @abstractmethod
    def warning(self, message: str) -> None:
        """Show warning message (always shown)."""

    @abstractmethod
    def error(self, message: str) -> None:
        """Show error message (always shown)."""


class InteractiveFeedback(UserFeedback):
    """Feedback shown in interactive mode (all messages)."""

    def info(self, message: str) -> None:
        user_output(message)

    def success(self, message: str) -> None:
        user_output(click.style(message, fg="green"))

    def warning(self, message: str) -> None:
        user_output(click.style(message, fg="yellow"))

    def error(self, message: str) -> None:
        user_output(click.style(message, fg="red"))


class QuietFeedback(UserFeedback):
    """Feedback for --quiet runs (only warnings and errors shown)."""

    def info(self, message: str) -> None:
        pass

    def success(self, message: str) -> None:
        pass

    def warning(self, message: str) -> None:
        user_output(click.style(message, fg="yellow"))

    def error(self, message: str) -> None:
        user_output(click.style(message, fg="red"))
