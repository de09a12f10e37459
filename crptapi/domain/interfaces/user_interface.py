"""Interface for reporting submission progress to the user.

Defines the contract for displaying informational messages, errors,
warnings and per-request outcomes, allowing different UI implementations
(e.g., console, plain logging).
"""

import abc
from typing import Any, Dict, Sequence

from crptapi.domain.models.common import DocumentLabel
from crptapi.domain.models.submission import CompletionResult


class UserInterface(abc.ABC):
    """Abstract Base Class for user interaction."""

    @abc.abstractmethod
    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message to the user.

        Args:
            error_message: The error message string.
            **kwargs: Additional arguments for formatting.
        """
        pass

    @abc.abstractmethod
    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        """Displays a warning message to the user.

        Args:
            warning_message: The warning message string.
            **kwargs: Additional arguments for formatting.
        """
        pass

    @abc.abstractmethod
    def display_info(self, info_message: str, **kwargs: Any) -> None:
        """Displays an informational message to the user.

        Args:
            info_message: The informational message string.
            **kwargs: Additional arguments for formatting.
        """
        pass

    @abc.abstractmethod
    def display_request_sent(self, label: DocumentLabel) -> None:
        """Reports that a creation request left the client."""
        pass

    @abc.abstractmethod
    def display_outcome(self, result: CompletionResult) -> None:
        """Reports the terminal outcome of one submission.

        May be called from a worker thread.

        Args:
            result: The completion result delivered by the dispatcher.
        """
        pass

    def display_summary(self, results: Sequence[CompletionResult], elapsed_secs: float) -> None:
        """Displays totals for a finished batch.

        Args:
            results: All completion results of the batch.
            elapsed_secs: Wall-clock duration of the batch in seconds.
        """
        pass

    def display_settings(self, settings: Dict[str, Any]) -> None:
        """Displays the effective configuration."""
        pass
