"""
Batch evaluation client protocol

Defines the interface the batch orchestrator drives. Implementations only need
to match it structurally.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from nlu_batch_gauge.cancellation import CancellationToken
from nlu_batch_gauge.domain.value_objects import OperationStatus


@runtime_checkable
class BatchEvaluationClient(Protocol):
    """Remote job client for the batch testing API"""

    async def create_evaluations_operation(
        self,
        batch_input: dict[str, Any],
        cancellation_token: CancellationToken | None = None,
    ) -> str:
        """Submit a batch and return the provider-assigned operation ID."""
        ...

    async def get_evaluations_status(
        self,
        operation_id: str,
        cancellation_token: CancellationToken | None = None,
    ) -> OperationStatus:
        """Get the current status of an operation."""
        ...

    async def get_evaluations_result(
        self,
        operation_id: str,
        cancellation_token: CancellationToken | None = None,
    ) -> dict[str, Any]:
        """Get the evaluation result of a succeeded operation."""
        ...
