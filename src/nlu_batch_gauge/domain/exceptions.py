"""
Domain Exceptions

Error types raised by the batch evaluation pipeline. Network failures are
surfaced as the httpx exceptions that caused them.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from nlu_batch_gauge.cancellation import CancellationToken


class ArgumentError(ValueError):
    """A required argument is missing or out of range"""

    def __init__(self, param_name: str, message: str | None = None) -> None:
        self.param_name = param_name
        super().__init__(message or f"Invalid value for argument '{param_name}'.")


class EntityResolutionError(ValueError):
    """An entity match text could not be located in its utterance"""

    def __init__(self, match_text: str, text: str, match_index: int = 0) -> None:
        self.match_text = match_text
        self.text = text
        self.match_index = match_index
        super().__init__(f"Could not find '{match_text}' in '{text}'.")


class BatchEvaluationError(RuntimeError):
    """The batch testing API reported a terminal failure for an operation"""

    def __init__(self, operation_id: str, status: str, error_details: str | None = None) -> None:
        self.operation_id = operation_id
        self.status = status
        self.error_details = error_details
        message = f"Batch evaluation operation '{operation_id}' reported status '{status}'"
        if error_details:
            message = f"{message}: {error_details}"
        super().__init__(message)


class OperationCancelledError(asyncio.CancelledError):
    """Cancellation was requested through a CancellationToken"""

    def __init__(self, token: CancellationToken) -> None:
        self.token = token
        super().__init__("The operation was cancelled.")
